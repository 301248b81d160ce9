# -*- coding: utf-8 -*-
"""
Raster: The mathematics of broadcast video color signals
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: raster_quantize.py — Digital quantization of analog YUV signals.

YUV names the analog encoding; YCbCr is its quantized, digital form.  A
quantization policy maps analog (Y', U, V) triples to fixed-width integer
codes and may also take gamma-encoded R'G'B' directly, fusing the luma and
difference transforms into one matrix so the intermediate YUV array is
never materialised.

Code mapping for n-bit samples:

    narrow ("video") range, BT.601 / BT.709 / BT.2020:
        D_Y = round((219·Y' + 16) · 2^(n−8))
        D_C = round((224·C  + 128) · 2^(n−8))
    full range, BT.2100:
        D_Y = round((2^n − 1) · Y')
        D_C = round((2^n − 1) · C + 2^(n−1))

Range enforcement happens here, not in the transfer or difference
policies: codes are clipped to [0, 2^n − 1].

Note:
    Rec. 601 also publishes integer-arithmetic coefficient tables (8 to 16
    bit intermediates) for direct digital R'G'B' -> Y'CbCr conversion.
    They are not implemented; the float path is used for every bit depth.
"""

from dataclasses import dataclass
from typing import Any, Final, Protocol, runtime_checkable

import numpy as np

from raster_difference import rgb_to_yuv_matrix
from raster_numeric import ArrayFloat, handle_shapes

__all__ = [
    "QuantizationFn",
    "ItuQuantization",
    "NARROW_8BIT",
    "NARROW_10BIT",
    "NARROW_12BIT",
    "FULL_8BIT",
]


@runtime_checkable
class QuantizationFn(Protocol):
    """
    Capability contract of a quantization policy.

    quantize_yuv(yuv)                 -> integer codes for an analog YUV triple
    quantize_rgb(rgb, difference_fn)  -> same, directly from R'G'B'
    """
    def quantize_yuv(self, yuv: ArrayFloat) -> np.ndarray: ...
    def quantize_rgb(self, rgb: ArrayFloat, difference_fn: Any) -> np.ndarray: ...


@dataclass(frozen=True, slots=True)
class ItuQuantization:
    """
    Narrow- or full-range ITU quantization at a fixed bit depth.

    Attributes:
        bits: Code width, 8 to 16.
        full_range: Use BT.2100 full-range scaling instead of the
                    narrow (16..235 / 16..240 at 8 bit) ranges.
    """
    bits: int = 8
    full_range: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.bits, (int, np.integer)) or isinstance(self.bits, bool):
            raise TypeError(f"bits must be an integer, got {type(self.bits).__name__}")
        if not 8 <= self.bits <= 16:
            raise ValueError(f"bits must be within 8..16, got {self.bits}")

    @property
    def max_code(self) -> int:
        return (1 << self.bits) - 1

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(np.uint8) if self.bits <= 8 else np.dtype(np.uint16)

    def scale_offset(self) -> tuple[ArrayFloat, ArrayFloat]:
        """Per-channel (scale, offset) so that ``code = scale·value + offset``."""
        if self.full_range:
            span = float(self.max_code)
            scale = np.array([span, span, span])
            offset = np.array([0.0, float(1 << (self.bits - 1)), float(1 << (self.bits - 1))])
        else:
            k = float(1 << (self.bits - 8))
            scale = np.array([219.0, 224.0, 224.0]) * k
            offset = np.array([16.0, 128.0, 128.0]) * k
        return scale, offset

    def _to_codes(self, yuv: ArrayFloat) -> np.ndarray:
        scale, offset = self.scale_offset()
        codes = np.rint(yuv.astype(np.float64) * scale + offset)
        np.clip(codes, 0, self.max_code, out=codes)
        return codes.astype(self.dtype)

    def quantize_yuv(self, yuv: ArrayFloat) -> np.ndarray:
        """
        Quantize analog Y'UV, shape (3,) or (N, 3).

        Returns:
            uint8 (bits == 8) or uint16 codes with the input's shape.
        """
        return _quantize_yuv(yuv, self)

    def quantize_rgb(self, rgb: ArrayFloat, difference_fn: Any) -> np.ndarray:
        """
        Quantize gamma-encoded R'G'B' directly.

        Args:
            rgb: Non-linear R'G'B', shape (3,) or (N, 3).
            difference_fn: Policy supplying luma weights and normalizers.
        """
        return _quantize_rgb(rgb, self, difference_fn)

    def dequantize_yuv(self, codes: np.ndarray) -> ArrayFloat:
        """Map integer codes back to analog Y'UV (float64)."""
        return _dequantize_yuv(codes, self)


@handle_shapes
def _quantize_yuv(yuv: ArrayFloat, quant: ItuQuantization) -> np.ndarray:
    return quant._to_codes(yuv)


@handle_shapes
def _quantize_rgb(rgb: ArrayFloat, quant: ItuQuantization, difference_fn: Any) -> np.ndarray:
    m = rgb_to_yuv_matrix(difference_fn, rgb)
    scale, offset = quant.scale_offset()
    # Fold the code scaling into the matrix: one product per pixel.
    m_codes_t = (m.astype(np.float64) * scale[:, None]).T
    codes = np.rint(np.dot(rgb.astype(np.float64), m_codes_t) + offset)
    np.clip(codes, 0, quant.max_code, out=codes)
    return codes.astype(quant.dtype)


@handle_shapes
def _dequantize_yuv(codes: np.ndarray, quant: ItuQuantization) -> ArrayFloat:
    scale, offset = quant.scale_offset()
    return (codes.astype(np.float64) - offset) / scale


NARROW_8BIT: Final[ItuQuantization] = ItuQuantization(bits=8)
NARROW_10BIT: Final[ItuQuantization] = ItuQuantization(bits=10)
NARROW_12BIT: Final[ItuQuantization] = ItuQuantization(bits=12)
FULL_8BIT: Final[ItuQuantization] = ItuQuantization(bits=8, full_range=True)
