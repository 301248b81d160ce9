# -*- coding: utf-8 -*-
"""
Raster: The mathematics of broadcast video color signals
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: raster_standards.py — Standard descriptors and generic composition.

A YUV standard is the orthogonal combination of three policies:

    RgbSpace       primaries + white point         (raster_primaries)
    TransferFn     linear <-> non-linear signal    (raster_transfer)
    DifferenceFn   luma weights + chroma scaling   (raster_difference)

The four ITU-R standards are predefined as zero-state descriptor classes
whose attributes are bound once, at class definition:

    BT601_525, BT601_625, BT709, BT2020

Any other triple can be assembled with ``compose_yuv`` without defining a
new class; one level up ``compose_ycbcr`` pairs a YUV standard with a
quantization policy.  Conversion code only relies on the capability
protocols below (``RgbStandard``, ``LumaStandard``, ``YuvStandard``,
``YCbCrStandard``) and never branches on a specific standard.

Contract violations (an axis missing required members) are reported as
``TypeError`` when the composition is built, not when it is first used.
"""

from __future__ import annotations

import functools
import logging
import warnings
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Final, Protocol, runtime_checkable

import numpy as np

from raster_difference import (
    DifferenceFn,
    DifferenceFn601,
    DifferenceFn709,
    DifferenceFn2020,
)
from raster_numeric import ArrayFloat, FrozenPolicy
from raster_primaries import (
    BT601_525_SPACE,
    BT601_625_SPACE,
    BT709_SPACE,
    BT2020_SPACE,
    D65,
    RgbSpace,
    WhitePoint,
)
from raster_quantize import QuantizationFn
from raster_transfer import Transfer601And709, Transfer2020, TransferFn

logger = logging.getLogger(__name__)

__all__ = [
    "RgbStandard",
    "LumaStandard",
    "YuvStandard",
    "YCbCrStandard",
    "ItuStandard",
    "BT601_525",
    "BT601_625",
    "BT709",
    "BT2020",
    "STANDARDS",
    "get_standard",
    "YuvComposite",
    "YCbCrComposite",
    "compose_yuv",
    "compose_ycbcr",
]

# Difference weights and primaries' Y may legitimately differ by rounding
# (BT.709: 0.2126 vs 0.212656); anything larger is a mismatched combination.
LUMINANCE_MISMATCH_TOLERANCE: Final[float] = 1e-3

# Most recently used compositions kept by compose_yuv / compose_ycbcr.
COMPOSITION_CACHE_SIZE: Final[int] = 128


# =============================================================================
# 1. CAPABILITY CONTRACTS
# =============================================================================

@runtime_checkable
class RgbStandard(Protocol):
    """An RGB color space together with its transfer function."""
    rgb_space: RgbSpace
    transfer_fn: TransferFn


@runtime_checkable
class LumaStandard(Protocol):
    """A white point together with the transfer function used for luma."""
    white_point: WhitePoint
    transfer_fn: TransferFn


@runtime_checkable
class YuvStandard(Protocol):
    """Analog YUV encoding: RGB space, transfer and difference policies."""
    rgb_space: RgbSpace
    transfer_fn: TransferFn
    difference_fn: DifferenceFn


@runtime_checkable
class YCbCrStandard(Protocol):
    """A YUV standard combined with a quantization policy."""
    yuv_standard: YuvStandard
    quantization_fn: QuantizationFn


# =============================================================================
# 2. NAMED ITU-R STANDARDS
# =============================================================================

class ItuStandard(metaclass=FrozenPolicy):
    """
    Base of the named standard descriptors.

    Descriptors are used as classes (``BT709.transfer_fn.forward(x)``);
    they cannot be instantiated and their bindings cannot be changed.
    """
    name: ClassVar[str]
    rgb_space: ClassVar[RgbSpace]
    white_point: ClassVar[WhitePoint]
    transfer_fn: ClassVar[Any]
    difference_fn: ClassVar[Any]


class BT601_525(ItuStandard):
    """ITU-R BT.601, 525-line systems. https://www.itu.int/rec/R-REC-BT.601/"""
    name = "BT601_525"
    rgb_space = BT601_525_SPACE
    white_point = D65
    transfer_fn = Transfer601And709
    difference_fn = DifferenceFn601


class BT601_625(ItuStandard):
    """ITU-R BT.601, 625-line systems. https://www.itu.int/rec/R-REC-BT.601/"""
    name = "BT601_625"
    rgb_space = BT601_625_SPACE
    white_point = D65
    transfer_fn = Transfer601And709
    difference_fn = DifferenceFn601


class BT709(ItuStandard):
    """ITU-R BT.709 (HDTV). https://www.itu.int/rec/R-REC-BT.709/"""
    name = "BT709"
    rgb_space = BT709_SPACE
    white_point = D65
    transfer_fn = Transfer601And709
    difference_fn = DifferenceFn709


class BT2020(ItuStandard):
    """ITU-R BT.2020 (UHDTV). https://www.itu.int/rec/R-REC-BT.2020/"""
    name = "BT2020"
    rgb_space = BT2020_SPACE
    white_point = D65
    transfer_fn = Transfer2020
    difference_fn = DifferenceFn2020


STANDARDS: Final[Dict[str, type]] = {
    s.name: s for s in (BT601_525, BT601_625, BT709, BT2020)
}


def _normalise_name(name: str) -> str:
    key = name.upper()
    for ch in "-._ ":
        key = key.replace(ch, "")
    if key.startswith("ITUR"):
        key = key[4:]
    if key.startswith("REC"):
        key = "BT" + key[3:]
    return key


_LOOKUP: Final[Dict[str, type]] = {_normalise_name(k): v for k, v in STANDARDS.items()}


def get_standard(name: str) -> type:
    """
    Resolve a standard by name.

    Matching ignores case, ``-``, ``.``, ``_`` and spaces, and accepts the
    ``Rec.`` / ``ITU-R`` spellings: ``"bt.709"``, ``"Rec. 709"`` and
    ``"BT601-625"`` all resolve.

    Raises:
        KeyError: If no standard matches.
    """
    try:
        return _LOOKUP[_normalise_name(name)]
    except KeyError:
        raise KeyError(
            f"Unknown standard {name!r}; known standards: {', '.join(STANDARDS)}"
        ) from None


# =============================================================================
# 3. GENERIC COMPOSITION
# =============================================================================

@dataclass(frozen=True, slots=True)
class YuvComposite:
    """
    A YUV standard assembled from three independent policies.

    Satisfies the ``YuvStandard``, ``RgbStandard`` and ``LumaStandard``
    contracts.  Build instances with :func:`compose_yuv`.
    """
    rgb_space: RgbSpace
    transfer_fn: Any
    difference_fn: Any

    @property
    def white_point(self) -> WhitePoint:
        return self.rgb_space.white_point

    @property
    def name(self) -> str:
        return (f"{self.rgb_space.name}/{_policy_name(self.transfer_fn)}"
                f"/{_policy_name(self.difference_fn)}")


@dataclass(frozen=True, slots=True)
class YCbCrComposite:
    """
    A YUV standard paired with a quantization policy.

    ``quantize_rgb`` binds the standard's difference policy so callers only
    pass pixel data.
    """
    yuv_standard: Any
    quantization_fn: Any

    @property
    def name(self) -> str:
        return f"{_policy_name(self.yuv_standard)}+{self.quantization_fn!r}"

    def quantize_yuv(self, yuv: ArrayFloat) -> np.ndarray:
        """Quantize analog Y'UV, shape (3,) or (N, 3)."""
        return self.quantization_fn.quantize_yuv(yuv)

    def quantize_rgb(self, rgb: ArrayFloat) -> np.ndarray:
        """Quantize gamma-encoded R'G'B' through the fused difference matrix."""
        return self.quantization_fn.quantize_rgb(rgb, self.yuv_standard.difference_fn)


def _policy_name(policy: Any) -> str:
    # ``name`` is optional on user policies.
    return getattr(policy, "name", type(policy).__name__)


def _require(candidate: Any, contract: type, axis: str) -> None:
    if not isinstance(candidate, contract):
        raise TypeError(
            f"{axis} {candidate!r} does not satisfy the {contract.__name__} contract"
        )


def _hashable(*axes: Any) -> bool:
    try:
        hash(axes)
    except TypeError:
        return False
    return True


def _check_luminance(rgb_space: RgbSpace, difference_fn: Any) -> None:
    primaries_y = np.asarray(rgb_space.primaries.luminance(), dtype=np.float64)
    try:
        weights = np.asarray(difference_fn.luminance(1.0), dtype=np.float64)
    except TypeError as exc:
        raise TypeError(
            f"difference_fn {difference_fn!r}: luminance(like) must accept a "
            f"precision sample and return three weights"
        ) from exc
    deviation = float(np.max(np.abs(primaries_y - weights)))
    if deviation > LUMINANCE_MISMATCH_TOLERANCE:
        warnings.warn(
            f"Luma weights of {_policy_name(difference_fn)} deviate from the "
            f"{rgb_space.name} primaries by {deviation:.4g}; the combination is "
            f"not a published standard",
            UserWarning,
            stacklevel=3,
        )


def _build_yuv(rgb_space: RgbSpace, transfer_fn: Any, difference_fn: Any) -> YuvComposite:
    composite = YuvComposite(rgb_space, transfer_fn, difference_fn)
    logger.debug("Composed YUV standard %s", composite.name)
    return composite


def _build_ycbcr(yuv_standard: Any, quantization_fn: Any) -> YCbCrComposite:
    composite = YCbCrComposite(yuv_standard, quantization_fn)
    logger.debug("Composed YCbCr standard %s", composite.name)
    return composite


# Bounded so user-composed policies are not pinned for the life of the process.
_compose_yuv_cached = functools.lru_cache(maxsize=COMPOSITION_CACHE_SIZE)(_build_yuv)
_compose_ycbcr_cached = functools.lru_cache(maxsize=COMPOSITION_CACHE_SIZE)(_build_ycbcr)


def compose_yuv(rgb_space: RgbSpace, transfer_fn: Any, difference_fn: Any) -> YuvComposite:
    """
    Assemble an arbitrary (RgbSpace, TransferFn, DifferenceFn) triple.

    Hashable triples are memoised: the same triple returns the same object
    while it stays among the ``COMPOSITION_CACHE_SIZE`` most recently used.
    Unhashable policies (e.g. a plain ``@dataclass``) are composed afresh on
    every call.

    Raises:
        TypeError: If an axis does not satisfy its contract.

    Warns:
        UserWarning: If the luma weights disagree with the primaries' Y.
    """
    _require(rgb_space, RgbSpace, "rgb_space")
    _require(transfer_fn, TransferFn, "transfer_fn")
    _require(difference_fn, DifferenceFn, "difference_fn")
    _check_luminance(rgb_space, difference_fn)
    if _hashable(rgb_space, transfer_fn, difference_fn):
        return _compose_yuv_cached(rgb_space, transfer_fn, difference_fn)
    return _build_yuv(rgb_space, transfer_fn, difference_fn)


def compose_ycbcr(yuv_standard: Any, quantization_fn: Any) -> YCbCrComposite:
    """
    Pair any YUV standard (named or composed) with a quantization policy.

    Memoised under the same rules as :func:`compose_yuv`.

    Raises:
        TypeError: If either argument does not satisfy its contract.
    """
    _require(yuv_standard, YuvStandard, "yuv_standard")
    _require(quantization_fn, QuantizationFn, "quantization_fn")
    if _hashable(yuv_standard, quantization_fn):
        return _compose_ycbcr_cached(yuv_standard, quantization_fn)
    return _build_ycbcr(yuv_standard, quantization_fn)
