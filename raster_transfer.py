# -*- coding: utf-8 -*-
"""
Raster: The mathematics of broadcast video color signals
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: raster_transfer.py — ITU-R opto-electronic transfer functions.

Two interchangeable policies are provided:

    Transfer601And709   shared by BT.601 (525 and 625 lines) and BT.709
    Transfer2020        BT.2020, same shape with constants quoted to more
                        digits to support 10- and 12-bit quantization

Each policy maps linear light to the non-linear signal (``forward``, the
OETF) and back (``inverse``).  Both are total over the real line; the
standards only guarantee their meaning on [0, 1] and no clamping is done.

Breakpoints (hard-coded, standard-mandated):

    Transfer601And709   forward: x <= 0.0018      inverse: y <= 0.0091
    Transfer2020        forward: x <  beta        inverse: y <  4.5 * beta

The 601/709 literals are kept exactly as published, which has consequences
near the knee.  The power segment evaluated at 0.0018 gives about -0.035,
not 4.5 * 0.0018 = 0.0081, so ``forward`` jumps there and is not monotonic.
Above that point its output stays below the inverse breakpoint 0.0091 until
x reaches roughly 0.00578, so ``inverse(forward(x)) != x`` on
(0.0018, ~0.00578].  Outside that interval the pair round-trips.  BT.2020
has no such gap: its breakpoints are mutual images and both curves are
continuous.

Execution paths:
    - NumPy arrays of float16/32/64 or integer dtype are evaluated by
      Numba kernels on a contiguous float64 copy; floating arrays get
      their own dtype back, integer arrays yield float64.
    - Python/NumPy scalars, ``longdouble`` arrays and ``decimal.Decimal``
      use a generic path whose constants are built from their decimal text
      at the sample's own precision.

References:
    - ITU-R BT.601-7, item 2.6.4 (via BT.709 opto-electronic conversion)
    - ITU-R BT.709-6, item 1.2
    - ITU-R BT.2020-2, Table 4
"""

import logging
from typing import Callable, ClassVar, Final, Protocol, runtime_checkable

import numpy as np
from numba import njit

from raster_numeric import (
    ArrayFloat,
    FrozenPolicy,
    Real,
    literals,
    piecewise,
    require_real,
    uses_kernel,
)

logger = logging.getLogger(__name__)

__all__ = [
    "TransferFn",
    "Transfer601And709",
    "Transfer2020",
    "set_strict_ieee",
    "strict_ieee_enabled",
]

# --- Kernel constants (binary64) ---
# The generic path uses the decimal strings on the policy classes instead.
_K601_FWD_BREAK: Final[float] = 0.0018
_K601_INV_BREAK: Final[float] = 0.0091
_K601_GAIN: Final[float] = 1.099
_K601_OFFSET: Final[float] = 0.099
_K2020_ALPHA: Final[float] = 1.09929682680944
_K2020_BETA: Final[float] = 0.018053968510807
_K_SLOPE: Final[float] = 4.5
_K_GAMMA: Final[float] = 0.45


# --- Runtime Configuration ---
# When True, the transfer kernels use fastmath=False variants that preserve
# strict IEEE 754 semantics (inf / NaN propagation, no FP reassociation).
#
# Toggle at runtime via:
#     import raster_transfer as rt
#     rt.set_strict_ieee(True)   # enable strict mode
#     rt.set_strict_ieee(False)  # back to fast mode (default)
_STRICT_IEEE: bool = False


def set_strict_ieee(enabled: bool = True) -> None:
    """
    Toggle between fast (default) and strict IEEE 754 Numba kernels.

    Args:
        enabled: If True, use strict IEEE mode.
    """
    global _STRICT_IEEE
    _STRICT_IEEE = bool(enabled)
    logger.info("Transfer kernels switched to %s mode",
                "strict IEEE" if _STRICT_IEEE else "fastmath")


def strict_ieee_enabled() -> bool:
    """Report whether the strict IEEE kernels are active."""
    return _STRICT_IEEE


# =============================================================================
# 1. LOW-LEVEL KERNELS (Numba Optimized)
# =============================================================================

@njit(cache=True, fastmath=True)
def _forward_601_709(linear: ArrayFloat) -> ArrayFloat:
    """
    BT.601 / BT.709 OETF.

    Uses an explicit loop instead of `np.where` to avoid allocating a
    boolean mask array.
    """
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()

    for i in range(linear.size):
        v = linear_flat[i]
        if v <= _K601_FWD_BREAK:
            out_flat[i] = _K_SLOPE * v
        else:
            out_flat[i] = _K601_GAIN * (v ** _K_GAMMA) - _K601_OFFSET
    return out

@njit(cache=True, fastmath=True)
def _inverse_601_709(signal: ArrayFloat) -> ArrayFloat:
    """BT.601 / BT.709 inverse OETF."""
    out = np.empty_like(signal)
    signal_flat = signal.ravel()
    out_flat = out.ravel()

    for i in range(signal.size):
        v = signal_flat[i]
        if v <= _K601_INV_BREAK:
            out_flat[i] = v / _K_SLOPE
        else:
            out_flat[i] = ((v + _K601_OFFSET) / _K601_GAIN) ** (1.0 / _K_GAMMA)
    return out

@njit(cache=True, fastmath=True)
def _forward_2020(linear: ArrayFloat) -> ArrayFloat:
    """BT.2020 OETF."""
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()

    for i in range(linear.size):
        v = linear_flat[i]
        if v < _K2020_BETA:
            out_flat[i] = _K_SLOPE * v
        else:
            out_flat[i] = _K2020_ALPHA * (v ** _K_GAMMA) - (_K2020_ALPHA - 1.0)
    return out

@njit(cache=True, fastmath=True)
def _inverse_2020(signal: ArrayFloat) -> ArrayFloat:
    """BT.2020 inverse OETF."""
    out = np.empty_like(signal)
    signal_flat = signal.ravel()
    out_flat = out.ravel()

    for i in range(signal.size):
        v = signal_flat[i]
        if v < _K_SLOPE * _K2020_BETA:
            out_flat[i] = v / _K_SLOPE
        else:
            out_flat[i] = ((v + _K2020_ALPHA - 1.0) / _K2020_ALPHA) ** (1.0 / _K_GAMMA)
    return out


# --- Strict IEEE 754 kernel variants (fastmath=False) ---

@njit(cache=True, fastmath=False)
def _forward_601_709_strict(linear: ArrayFloat) -> ArrayFloat:
    """BT.601 / BT.709 OETF — strict IEEE 754 variant."""
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()
    for i in range(linear.size):
        v = linear_flat[i]
        if v <= _K601_FWD_BREAK:
            out_flat[i] = _K_SLOPE * v
        else:
            out_flat[i] = _K601_GAIN * (v ** _K_GAMMA) - _K601_OFFSET
    return out

@njit(cache=True, fastmath=False)
def _inverse_601_709_strict(signal: ArrayFloat) -> ArrayFloat:
    """BT.601 / BT.709 inverse OETF — strict IEEE 754 variant."""
    out = np.empty_like(signal)
    signal_flat = signal.ravel()
    out_flat = out.ravel()
    for i in range(signal.size):
        v = signal_flat[i]
        if v <= _K601_INV_BREAK:
            out_flat[i] = v / _K_SLOPE
        else:
            out_flat[i] = ((v + _K601_OFFSET) / _K601_GAIN) ** (1.0 / _K_GAMMA)
    return out

@njit(cache=True, fastmath=False)
def _forward_2020_strict(linear: ArrayFloat) -> ArrayFloat:
    """BT.2020 OETF — strict IEEE 754 variant."""
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()
    for i in range(linear.size):
        v = linear_flat[i]
        if v < _K2020_BETA:
            out_flat[i] = _K_SLOPE * v
        else:
            out_flat[i] = _K2020_ALPHA * (v ** _K_GAMMA) - (_K2020_ALPHA - 1.0)
    return out

@njit(cache=True, fastmath=False)
def _inverse_2020_strict(signal: ArrayFloat) -> ArrayFloat:
    """BT.2020 inverse OETF — strict IEEE 754 variant."""
    out = np.empty_like(signal)
    signal_flat = signal.ravel()
    out_flat = out.ravel()
    for i in range(signal.size):
        v = signal_flat[i]
        if v < _K_SLOPE * _K2020_BETA:
            out_flat[i] = v / _K_SLOPE
        else:
            out_flat[i] = ((v + _K2020_ALPHA - 1.0) / _K2020_ALPHA) ** (1.0 / _K_GAMMA)
    return out


# --- Kernel dispatcher ---

def _run_kernel(
    fast: Callable[[ArrayFloat], ArrayFloat],
    strict: Callable[[ArrayFloat], ArrayFloat],
    values: np.ndarray,
) -> ArrayFloat:
    """
    Run *values* through the fast or strict kernel on a float64 copy.

    Floating input gets its own dtype back; integer input yields float64.
    """
    arr = np.ascontiguousarray(values, dtype=np.float64).reshape(-1)
    kernel = strict if _STRICT_IEEE else fast
    out = kernel(arr).reshape(np.shape(values))
    if values.dtype.kind == "f":
        return out.astype(values.dtype, copy=False)
    return out


# =============================================================================
# 2. TRANSFER FUNCTION POLICIES
# =============================================================================

@runtime_checkable
class TransferFn(Protocol):
    """
    Capability contract of a transfer-function policy.

    forward(x) -> encoded signal for linear light x
    inverse(y) -> linear light for encoded signal y
    """
    def forward(self, x: Real) -> Real: ...
    def inverse(self, y: Real) -> Real: ...


class Transfer601And709(metaclass=FrozenPolicy):
    """
    Transfer function shared by BT.601 and BT.709.

        forward:  4.5·x                     x <= 0.0018
                  1.099·x^0.45 − 0.099      otherwise
        inverse:  y / 4.5                   y <= 0.0091
                  ((y + 0.099) / 1.099)^(1/0.45)
    """

    name: ClassVar[str] = "BT601/BT709"
    FORWARD_BREAKPOINT: ClassVar[str] = "0.0018"
    INVERSE_BREAKPOINT: ClassVar[str] = "0.0091"
    SLOPE: ClassVar[str] = "4.5"
    GAIN: ClassVar[str] = "1.099"
    OFFSET: ClassVar[str] = "0.099"
    GAMMA: ClassVar[str] = "0.45"

    @staticmethod
    def forward(x: Real) -> Real:
        """Linear light -> non-linear signal."""
        require_real(x)
        if uses_kernel(x):
            return _run_kernel(_forward_601_709, _forward_601_709_strict, x)

        cls = Transfer601And709
        brk, slope, gain, offset, gamma = literals(
            x, cls.FORWARD_BREAKPOINT, cls.SLOPE, cls.GAIN, cls.OFFSET, cls.GAMMA
        )
        return piecewise(
            x, brk, True,
            lambda v: slope * v,
            lambda v: gain * v ** gamma - offset,
        )

    @staticmethod
    def inverse(y: Real) -> Real:
        """Non-linear signal -> linear light."""
        require_real(y)
        if uses_kernel(y):
            return _run_kernel(_inverse_601_709, _inverse_601_709_strict, y)

        cls = Transfer601And709
        brk, slope, gain, offset, gamma, one = literals(
            y, cls.INVERSE_BREAKPOINT, cls.SLOPE, cls.GAIN, cls.OFFSET, cls.GAMMA, "1"
        )
        return piecewise(
            y, brk, True,
            lambda v: v / slope,
            lambda v: ((v + offset) / gain) ** (one / gamma),
        )


class Transfer2020(metaclass=FrozenPolicy):
    """
    Transfer function of BT.2020.

    Technically the BT.709 curve, with alpha and beta quoted to the
    accuracy needed by 12-bit systems:

        alpha = 1.09929682680944,  beta = 0.018053968510807

        forward:  4.5·x                     x < beta
                  alpha·x^0.45 − (alpha − 1)
        inverse:  y / 4.5                   y < 4.5·beta
                  ((y + alpha − 1) / alpha)^(1/0.45)
    """

    name: ClassVar[str] = "BT2020"
    ALPHA: ClassVar[str] = "1.09929682680944"
    BETA: ClassVar[str] = "0.018053968510807"
    SLOPE: ClassVar[str] = "4.5"
    GAMMA: ClassVar[str] = "0.45"

    @staticmethod
    def forward(x: Real) -> Real:
        """Linear light -> non-linear signal."""
        require_real(x)
        if uses_kernel(x):
            return _run_kernel(_forward_2020, _forward_2020_strict, x)

        cls = Transfer2020
        alpha, beta, slope, gamma, one = literals(
            x, cls.ALPHA, cls.BETA, cls.SLOPE, cls.GAMMA, "1"
        )
        return piecewise(
            x, beta, False,
            lambda v: slope * v,
            lambda v: alpha * v ** gamma - (alpha - one),
        )

    @staticmethod
    def inverse(y: Real) -> Real:
        """Non-linear signal -> linear light."""
        require_real(y)
        if uses_kernel(y):
            return _run_kernel(_inverse_2020, _inverse_2020_strict, y)

        cls = Transfer2020
        alpha, beta, slope, gamma, one = literals(
            y, cls.ALPHA, cls.BETA, cls.SLOPE, cls.GAMMA, "1"
        )
        return piecewise(
            y, slope * beta, False,
            lambda v: v / slope,
            lambda v: ((v + alpha - one) / alpha) ** (one / gamma),
        )
