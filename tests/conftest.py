"""
Shared pytest fixtures for the Raster test suite.

This module provides:
- The four named standards as a parametrized fixture
- Dense and random sample grids
- A guard that restores the transfer-kernel mode after each test
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

# Make the flat top-level modules importable without installation.
sys.path.insert(0, str(Path(__file__).parent.parent))

import raster_transfer
from raster_standards import BT601_525, BT601_625, BT709, BT2020


ALL_STANDARDS = [BT601_525, BT601_625, BT709, BT2020]

# Linear samples for which the 601/709 curves do not round-trip: the
# forward knee sits at 0.0018 while the inverse switches at 0.0091.
KNEE_GAP_601 = (0.0018, 0.0058)


@pytest.fixture(params=ALL_STANDARDS, ids=lambda s: s.name)
def standard(request):
    """Each named ITU-R standard in turn."""
    return request.param


@pytest.fixture(scope="session")
def dense_samples() -> np.ndarray:
    """10001 evenly spaced linear samples on [0, 1]."""
    return np.linspace(0.0, 1.0, 10001)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(20260101)


@pytest.fixture(autouse=True)
def _restore_kernel_mode():
    """Never leak strict-IEEE mode between tests."""
    previous = raster_transfer.strict_ieee_enabled()
    yield
    if raster_transfer.strict_ieee_enabled() != previous:
        raster_transfer.set_strict_ieee(previous)


def round_trip_mask(standard, samples: np.ndarray) -> np.ndarray:
    """Samples on which inverse(forward(x)) == x is expected."""
    if standard.transfer_fn is raster_transfer.Transfer2020:
        return np.ones(samples.shape, dtype=bool)
    lo, hi = KNEE_GAP_601
    return (samples <= lo) | (samples >= hi)
