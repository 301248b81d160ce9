# -*- coding: utf-8 -*-
"""
Raster: The mathematics of broadcast video color signals
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: raster_difference.py — Luma weights and color-difference scaling.

A difference policy describes how gamma-encoded R'G'B' is split into luma
and two normalized color-difference signals:

    Y' = w_r·R' + w_g·G' + w_b·B'
    U  = (B' − Y') / blue_norm          (a.k.a. Pb / Cb before quantization)
    V  = (R' − Y') / red_norm           (a.k.a. Pr / Cr before quantization)

With ``blue_norm = 2·(1 − w_b)`` and ``red_norm = 2·(1 − w_r)`` both
signals span [-0.5, 0.5] for R'G'B' in [0, 1].  The published divisors are
used verbatim rather than recomputed from the weights.

The weights are applied *after* the transfer function (non-constant
luminance), which is what every ITU-R standard here specifies.  They may
sum to slightly less than one (BT.709: 0.99992), leaving headroom above the
white point.

No clamping is performed anywhere in this module.
"""

from typing import Any, ClassVar, Protocol, runtime_checkable

import numpy as np

from raster_numeric import ArrayFloat, FrozenPolicy, Real, literal, require_real

__all__ = [
    "DifferenceFn",
    "DifferenceFn601",
    "DifferenceFn709",
    "DifferenceFn2020",
    "rgb_to_yuv_matrix",
    "yuv_to_rgb_matrix",
]


@runtime_checkable
class DifferenceFn(Protocol):
    """
    Capability contract of a color-difference policy.

    luminance(like)  -> (w_r, w_g, w_b) at the precision of *like*
    norm_blue / denorm_blue, norm_red / denorm_red -> scaling pairs

    ``luminance`` must accept the *like* sample: composition and the
    conversion helpers always pass one (``compose_yuv`` calls
    ``luminance(1.0)`` and rejects policies that cannot take it).
    """
    def luminance(self, like: Real = 1.0) -> tuple: ...
    def norm_blue(self, denorm: Real) -> Real: ...
    def denorm_blue(self, norm: Real) -> Real: ...
    def norm_red(self, denorm: Real) -> Real: ...
    def denorm_red(self, norm: Real) -> Real: ...


class _ItuDifference(metaclass=FrozenPolicy):
    """
    Shared implementation of the ITU difference policies.

    Subclasses only declare their decimal constants.
    """

    name: ClassVar[str]
    LUMINANCE: ClassVar[tuple[str, str, str]]
    BLUE_NORM: ClassVar[str]
    RED_NORM: ClassVar[str]

    @classmethod
    def luminance(cls, like: Real = 1.0) -> tuple:
        """Luma weights (w_r, w_g, w_b) at the precision of *like*."""
        require_real(like)
        r, g, b = cls.LUMINANCE
        return (literal(r, like), literal(g, like), literal(b, like))

    @classmethod
    def norm_blue(cls, denorm: Real) -> Real:
        """Scale B' − Y' into the blue color-difference signal."""
        require_real(denorm)
        return denorm / literal(cls.BLUE_NORM, denorm)

    @classmethod
    def denorm_blue(cls, norm: Real) -> Real:
        """Recover B' − Y' from the blue color-difference signal."""
        require_real(norm)
        return norm * literal(cls.BLUE_NORM, norm)

    @classmethod
    def norm_red(cls, denorm: Real) -> Real:
        """Scale R' − Y' into the red color-difference signal."""
        require_real(denorm)
        return denorm / literal(cls.RED_NORM, denorm)

    @classmethod
    def denorm_red(cls, norm: Real) -> Real:
        """Recover R' − Y' from the red color-difference signal."""
        require_real(norm)
        return norm * literal(cls.RED_NORM, norm)


class DifferenceFn601(_ItuDifference):
    """BT.601 (525 and 625 lines). Rec. 601 item 2.5.1."""
    name: ClassVar[str] = "BT601"
    LUMINANCE: ClassVar[tuple[str, str, str]] = ("0.2990", "0.5870", "0.1140")
    BLUE_NORM: ClassVar[str] = "1.772"
    RED_NORM: ClassVar[str] = "1.402"


class DifferenceFn709(_ItuDifference):
    """
    BT.709, Rec. 709 item 3.2.

    These are the luma weights quoted for the signal equation, not the
    exact primaries' luminances (see ``raster_primaries``).
    """
    name: ClassVar[str] = "BT709"
    LUMINANCE: ClassVar[tuple[str, str, str]] = ("0.2126", "0.7152", "0.07212")
    BLUE_NORM: ClassVar[str] = "1.8556"
    RED_NORM: ClassVar[str] = "1.5748"


class DifferenceFn2020(_ItuDifference):
    """BT.2020, Table 4 (derivation of luminance and color-difference signals)."""
    name: ClassVar[str] = "BT2020"
    LUMINANCE: ClassVar[tuple[str, str, str]] = ("0.2627", "0.6780", "0.0593")
    BLUE_NORM: ClassVar[str] = "1.8814"
    RED_NORM: ClassVar[str] = "1.4746"


def _matrix_dtype(like: Any) -> np.dtype:
    if isinstance(like, (np.ndarray, np.generic)) and like.dtype.kind == "f":
        return like.dtype
    return np.dtype(np.float64)


def rgb_to_yuv_matrix(difference_fn: Any, like: Real = 1.0) -> ArrayFloat:
    """
    Fuse luma weighting and difference normalization into one 3×3 matrix.

    ``yuv = rgb' @ M.T`` for row-vector pixels.  Rows:

        Y' = [ w_r,               w_g,          w_b              ]
        U  = [ −w_r / n_b,        −w_g / n_b,   (1 − w_b) / n_b  ]
        V  = [ (1 − w_r) / n_r,   −w_g / n_r,   −w_b / n_r       ]

    Args:
        difference_fn: A policy satisfying :class:`DifferenceFn`.
        like: Sample deciding the precision (``float64`` unless a NumPy
              floating dtype such as ``longdouble`` is given).
    """
    dtype = _matrix_dtype(like)
    one = dtype.type(1)
    wr, wg, wb = difference_fn.luminance(one)
    m = np.array([
        [wr, wg, wb],
        [-wr, -wg, one - wb],
        [one - wr, -wg, -wb],
    ], dtype=dtype)
    m[1] = difference_fn.norm_blue(m[1])
    m[2] = difference_fn.norm_red(m[2])
    return m


def yuv_to_rgb_matrix(difference_fn: Any, like: Real = 1.0) -> ArrayFloat:
    """
    Inverse of :func:`rgb_to_yuv_matrix`, assembled from the denormalizers.

        R' = Y' + denorm_red(V)
        B' = Y' + denorm_blue(U)
        G' = (Y' − w_r·R' − w_b·B') / w_g

    The G' row keeps ``(1 − w_r − w_b) / w_g`` as the luma coefficient, which
    is not exactly one when the weights sum below one (BT.709).
    """
    dtype = _matrix_dtype(like)
    one = dtype.type(1)
    zero = dtype.type(0)
    wr, wg, wb = difference_fn.luminance(one)
    kb = difference_fn.denorm_blue(one)
    kr = difference_fn.denorm_red(one)
    return np.array([
        [one, zero, kr],
        [(one - wr - wb) / wg, -wb * kb / wg, -wr * kr / wg],
        [one, kb, zero],
    ], dtype=dtype)
