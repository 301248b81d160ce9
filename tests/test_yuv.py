"""
Tests for RGB <-> YUV pixel conversion and luma encoding.
"""

from __future__ import annotations

from decimal import Decimal

import numpy as np
import pytest

from conftest import round_trip_mask
from raster_difference import DifferenceFn601
from raster_primaries import BT2020_SPACE
from raster_standards import BT601_625, BT709, BT2020, compose_yuv
from raster_transfer import Transfer2020
from raster_yuv import decode_luma, encode_luma, rgb_to_yuv, yuv_to_rgb


class TestRgbToYuv:

    def test_white(self, standard):
        y, u, v = rgb_to_yuv(np.array([1.0, 1.0, 1.0]), standard)
        assert y == pytest.approx(1.0, abs=1e-4)
        assert u == pytest.approx(0.0, abs=1e-4)
        assert v == pytest.approx(0.0, abs=1e-4)

    def test_black(self, standard):
        np.testing.assert_allclose(rgb_to_yuv(np.zeros(3), standard), 0.0, atol=1e-15)

    def test_single_pixel_shape(self, standard):
        assert rgb_to_yuv(np.array([0.2, 0.4, 0.6]), standard).shape == (3,)

    def test_batch_matches_single(self, standard, rng):
        rgb = rng.random((10, 3))
        batch = rgb_to_yuv(rgb, standard)
        np.testing.assert_allclose(batch[4], rgb_to_yuv(rgb[4], standard))

    def test_linear_flag_applies_transfer(self):
        rgb = np.array([0.18, 0.18, 0.18])
        y_linear = rgb_to_yuv(rgb, BT709)[0]
        y_encoded = rgb_to_yuv(rgb, BT709, linear=False)[0]
        assert y_linear == pytest.approx(BT709.transfer_fn.forward(0.18) * 0.99992)
        assert y_encoded == pytest.approx(0.18 * 0.99992)

    def test_red_primary_601(self):
        _, _, v = rgb_to_yuv(np.array([1.0, 0.0, 0.0]), BT601_625)
        assert v == pytest.approx(0.5)

    def test_bt709_blue_slightly_exceeds_half(self):
        _, u, _ = rgb_to_yuv(np.array([0.0, 0.0, 1.0]), BT709, linear=False)
        assert u > 0.5
        assert u == pytest.approx(0.50004, abs=1e-5)

    def test_in_gamut_chroma_is_near_half_range(self, standard, rng):
        rgb = np.vstack([rng.random((500, 3)), np.eye(3), 1.0 - np.eye(3)])
        yuv = rgb_to_yuv(rgb, standard, linear=False)
        assert np.all(np.abs(yuv[:, 1:]) <= 0.5 + 1e-4)

    def test_out_of_gamut_is_not_clamped(self):
        _, u, _ = rgb_to_yuv(np.array([0.0, 0.0, 2.0]), BT2020, linear=False)
        assert u > 0.5

    def test_float32_is_preserved(self, standard):
        out = rgb_to_yuv(np.array([[0.1, 0.5, 0.9]], dtype=np.float32), standard)
        assert out.dtype == np.float32

    def test_longdouble_is_preserved(self):
        out = rgb_to_yuv(np.array([0.1, 0.5, 0.9], dtype=np.longdouble), BT2020)
        assert out.dtype == np.longdouble

    def test_integer_input_is_promoted(self):
        out = rgb_to_yuv(np.array([1, 1, 1]), BT2020)
        assert out.dtype == np.float64

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            rgb_to_yuv(np.ones((2, 4)), BT709)

    def test_composed_standard(self, rng):
        with pytest.warns(UserWarning):
            comp = compose_yuv(BT2020_SPACE, Transfer2020, DifferenceFn601)
        rgb = rng.random((20, 3))
        expected = rgb_to_yuv(Transfer2020.forward(rgb), BT601_625, linear=False)
        np.testing.assert_array_equal(rgb_to_yuv(rgb, comp), expected)


class TestYuvToRgb:

    def test_round_trip_encoded(self, standard, rng):
        rgb = rng.random((100, 3))
        yuv = rgb_to_yuv(rgb, standard, linear=False)
        np.testing.assert_allclose(yuv_to_rgb(yuv, standard, linear=False), rgb, atol=1e-12)

    def test_round_trip_linear(self, standard, rng):
        rgb = rng.random((500, 3))
        keep = np.all(round_trip_mask(standard, rgb), axis=1)
        back = yuv_to_rgb(rgb_to_yuv(rgb, standard), standard)
        np.testing.assert_allclose(back[keep], rgb[keep], atol=1e-9)

    def test_single_pixel(self):
        rgb = np.array([0.25, 0.5, 0.75])
        back = yuv_to_rgb(rgb_to_yuv(rgb, BT2020), BT2020)
        assert back.shape == (3,)
        np.testing.assert_allclose(back, rgb, atol=1e-12)


class TestLuma:

    def test_encode_decode(self, standard):
        for y in (0.0, 0.01, 0.18, 0.5, 1.0):
            assert decode_luma(encode_luma(y, standard), standard) == pytest.approx(y, abs=1e-12)

    def test_encode_matches_transfer(self, standard, dense_samples):
        np.testing.assert_array_equal(
            encode_luma(dense_samples, standard), standard.transfer_fn.forward(dense_samples)
        )

    def test_decimal(self):
        out = encode_luma(Decimal("0.5"), BT2020)
        assert isinstance(out, Decimal)

    def test_rejects_strings(self):
        with pytest.raises(TypeError):
            encode_luma("0.5", BT709)
        with pytest.raises(TypeError):
            decode_luma(None, BT709)
