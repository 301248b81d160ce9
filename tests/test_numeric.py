"""
Tests for the numeric capability contract.

Tests cover:
- Accepted and rejected sample types
- Precision-preserving construction of constants
- Kernel routing decisions
- Shape normalization decorator
- Immutability of policy classes
"""

from __future__ import annotations

from decimal import Decimal, localcontext

import numpy as np
import pytest

from raster_numeric import (
    FrozenPolicy,
    handle_shapes,
    literal,
    literals,
    piecewise,
    require_real,
    uses_kernel,
)


class TestRequireReal:

    @pytest.mark.parametrize("value", [
        0.5, 1, np.float16(0.5), np.float32(0.5), np.longdouble("0.5"),
        np.int32(3), Decimal("0.5"), np.zeros(4, dtype=np.uint16),
    ])
    def test_accepts(self, value):
        assert require_real(value) is value

    @pytest.mark.parametrize("value", [
        "0.5", 1j, None, [0.5], False, np.bool_(True), np.zeros(2, dtype=bool),
    ])
    def test_rejects(self, value):
        with pytest.raises(TypeError):
            require_real(value)


class TestLiteral:

    def test_float(self):
        value = literal("0.45", 0.1)
        assert type(value) is float
        assert value == 0.45

    def test_numpy_scalar_type(self):
        assert isinstance(literal("0.45", np.float32(1.0)), np.float32)

    def test_array_dtype(self):
        assert isinstance(literal("0.45", np.zeros(3, dtype=np.float16)), np.float16)

    def test_integer_array_maps_to_float64(self):
        assert isinstance(literal("0.45", np.arange(3)), np.float64)

    def test_longdouble_keeps_extra_digits(self):
        value = literal("0.018053968510807", np.longdouble(0))
        assert isinstance(value, np.longdouble)
        assert value == np.longdouble("0.018053968510807")

    def test_decimal_uses_all_digits(self):
        with localcontext() as ctx:
            ctx.prec = 50
            value = literal("1.09929682680944", Decimal(1))
        assert value == Decimal("1.09929682680944")
        assert isinstance(value, Decimal)

    def test_literals_unpacks_in_order(self):
        a, b = literals(1.0, "4.5", "0.45")
        assert (a, b) == (4.5, 0.45)

    def test_rejects_unsupported_like(self):
        with pytest.raises(TypeError):
            literal("1", "x")


class TestUsesKernel:

    def test_float64_array(self):
        assert uses_kernel(np.zeros(3))

    def test_integer_array(self):
        assert uses_kernel(np.zeros(3, dtype=np.uint8))

    def test_longdouble_array_bypasses_kernel(self):
        assert not uses_kernel(np.zeros(3, dtype=np.longdouble))

    @pytest.mark.parametrize("value", [0.5, np.float64(0.5), Decimal("0.5")])
    def test_scalars_bypass_kernel(self, value):
        assert not uses_kernel(value)


class TestPiecewise:

    def test_inclusive_threshold(self):
        assert piecewise(1.0, 1.0, True, lambda v: "lin", lambda v: "pow") == "lin"

    def test_exclusive_threshold(self):
        assert piecewise(1.0, 1.0, False, lambda v: "lin", lambda v: "pow") == "pow"

    def test_array_power_never_sees_linear_samples(self):
        seen = []

        def power(v):
            seen.append(v.copy())
            return np.sqrt(v)

        x = np.array([-4.0, 0.0, 4.0, 9.0])
        out = piecewise(x, 0.0, True, lambda v: v, power)
        np.testing.assert_array_equal(out, [-4.0, 0.0, 2.0, 3.0])
        np.testing.assert_array_equal(seen[0], [4.0, 9.0])


class TestHandleShapes:

    @staticmethod
    @handle_shapes
    def _echo(arr):
        return arr * 2

    def test_single_pixel(self):
        out = self._echo(np.array([1.0, 2.0, 3.0]))
        assert out.shape == (3,)
        np.testing.assert_array_equal(out, [2.0, 4.0, 6.0])

    def test_batch(self):
        out = self._echo(np.ones((5, 3)))
        assert out.shape == (5, 3)

    def test_list_input(self):
        assert self._echo([1, 2, 3]).dtype == np.float64

    def test_preserves_float32(self):
        assert self._echo(np.ones(3, dtype=np.float32)).dtype == np.float32

    @pytest.mark.parametrize("shape", [(4,), (2, 4), (2, 2, 3)])
    def test_bad_shapes(self, shape):
        with pytest.raises(ValueError, match="Expected shape"):
            self._echo(np.ones(shape))


class TestFrozenPolicy:

    class Policy(metaclass=FrozenPolicy):
        name = "demo"

    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            self.Policy()

    def test_cannot_rebind(self):
        with pytest.raises(AttributeError):
            self.Policy.name = "other"

    def test_cannot_delete(self):
        with pytest.raises(AttributeError):
            del self.Policy.name

    def test_repr(self):
        assert "Policy" in repr(self.Policy)
