# -*- coding: utf-8 -*-
"""
Raster: The mathematics of broadcast video color signals
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: raster_yuv.py — Pixel conversion between RGB, YUV and luma.

All functions are generic over the capability contracts of
``raster_standards``: they read ``standard.transfer_fn`` and
``standard.difference_fn`` and work unchanged for the named ITU-R
descriptors and for composed standards.

Pixels are (3,) or (N, 3) arrays.  Floating dtypes are preserved
(``longdouble`` included); integer input is promoted to float64.  Nothing
is clamped: out-of-gamut RGB simply yields U/V well outside [-0.5, 0.5].
In-gamut input stays within approximately [-0.5, 0.5]; the published
BT.709 divisors put pure blue at U = 0.50004.
"""

from typing import Any

import numpy as np

from raster_numeric import ArrayFloat, Real, handle_shapes, require_real

__all__ = [
    "rgb_to_yuv",
    "yuv_to_rgb",
    "encode_luma",
    "decode_luma",
]


def _as_dtype(values: Any, like: ArrayFloat) -> ArrayFloat:
    # Kernels return float64; bring results back to the caller's dtype.
    return np.asarray(values, dtype=like.dtype)


@handle_shapes
def rgb_to_yuv(rgb: ArrayFloat, standard: Any, linear: bool = True) -> ArrayFloat:
    """
    Converts RGB to analog Y'UV under *standard*.

    Args:
        rgb: RGB data, shape (N, 3) or (3,).
        standard: Any object satisfying the ``YuvStandard`` contract.
        linear: If True (default) *rgb* is linear light and the standard's
                transfer function is applied first.  Set False when the
                input is already gamma-encoded R'G'B'.

    Returns:
        Y'UV array with the input's shape; for in-gamut input Y' lies in
        [0, 1] and U, V in approximately [-0.5, 0.5].
    """
    if linear:
        rgb = _as_dtype(standard.transfer_fn.forward(rgb), rgb)

    difference = standard.difference_fn
    wr, wg, wb = difference.luminance(rgb)
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]

    out = np.empty_like(rgb)
    y = wr * r + wg * g + wb * b
    out[:, 0] = y
    out[:, 1] = difference.norm_blue(b - y)
    out[:, 2] = difference.norm_red(r - y)
    return out


@handle_shapes
def yuv_to_rgb(yuv: ArrayFloat, standard: Any, linear: bool = True) -> ArrayFloat:
    """
    Converts analog Y'UV back to RGB under *standard*.

    Args:
        yuv: Y'UV data, shape (N, 3) or (3,).
        standard: Any object satisfying the ``YuvStandard`` contract.
        linear: If True (default) the standard's inverse transfer function
                is applied so the result is linear light; otherwise
                gamma-encoded R'G'B' is returned.
    """
    difference = standard.difference_fn
    wr, wg, wb = difference.luminance(yuv)
    y, u, v = yuv[:, 0], yuv[:, 1], yuv[:, 2]

    out = np.empty_like(yuv)
    r = y + difference.denorm_red(v)
    b = y + difference.denorm_blue(u)
    out[:, 0] = r
    out[:, 1] = (y - wr * r - wb * b) / wg
    out[:, 2] = b

    if linear:
        out = _as_dtype(standard.transfer_fn.inverse(out), yuv)
    return out


def encode_luma(luminance: Real, standard: Any) -> Real:
    """
    Encode relative luminance Y as luma Y' for a ``LumaStandard``.

    Accepts scalars (float, NumPy, Decimal) and arrays of any shape.
    """
    require_real(luminance)
    return standard.transfer_fn.forward(luminance)


def decode_luma(luma: Real, standard: Any) -> Real:
    """Decode luma Y' back to relative luminance Y for a ``LumaStandard``."""
    require_real(luma)
    return standard.transfer_fn.inverse(luma)
