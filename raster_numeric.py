# -*- coding: utf-8 -*-
"""
Raster: The mathematics of broadcast video color signals
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: raster_numeric.py — Numeric capability contract.

Every transfer and difference policy in Raster is written once and evaluated
at the precision of the sample it receives.  Constants are therefore kept as
decimal *text* and materialised on demand for the caller's numeric type:

    float / int            -> float (IEEE 754 binary64)
    np.floating scalar     -> same NumPy scalar type (float16 … longdouble)
    np.ndarray (floating)  -> scalar of the array's dtype
    decimal.Decimal        -> Decimal in the active decimal context

Constructing ``np.longdouble("0.018053968510807")`` or
``Decimal("0.018053968510807")`` from the text keeps every digit the
receiving type can hold, instead of inheriting a value pre-rounded to
binary64.

Types lacking the required capabilities (arithmetic, ordering, real-valued
power) are rejected with ``TypeError`` before any arithmetic happens.
"""

import functools
from decimal import Decimal
from typing import Any, Callable, Final, TypeAlias, Union

import numpy as np
import numpy.typing as npt

__all__ = [
    "ArrayFloat",
    "Real",
    "KERNEL_DTYPES",
    "require_real",
    "literal",
    "literals",
    "uses_kernel",
    "piecewise",
    "handle_shapes",
    "FrozenPolicy",
]

# --- Type Aliases ---
ArrayFloat: TypeAlias = npt.NDArray[np.floating]
Real: TypeAlias = Union[float, int, np.floating, np.integer, Decimal, ArrayFloat]

# Array dtypes served by the compiled float64 kernels.  Wider dtypes
# (longdouble) bypass the kernels so no precision is thrown away.
KERNEL_DTYPES: Final[frozenset] = frozenset(
    np.dtype(t) for t in (np.float16, np.float32, np.float64,
                          np.int8, np.int16, np.int32, np.int64,
                          np.uint8, np.uint16, np.uint32, np.uint64)
)


def require_real(value: Any) -> Any:
    """
    Validate that *value* satisfies the numeric capability contract.

    Accepted: Python ``int``/``float``, NumPy integer and floating scalars,
    ``decimal.Decimal`` and NumPy arrays of integer or floating dtype.
    ``bool`` is refused (it is an ``int`` subclass but not a sample).

    Raises:
        TypeError: For any other type (``str``, ``complex``,
            ``fractions.Fraction`` whose power silently degrades to float,
            object / complex arrays, ...).
    """
    if isinstance(value, np.ndarray):
        if value.dtype.kind not in "fiu":
            raise TypeError(
                f"Array samples must have a real numeric dtype, got {value.dtype}"
            )
        return value
    if isinstance(value, (bool, np.bool_)):
        raise TypeError("Boolean values are not valid color samples")
    if isinstance(value, (float, int, np.floating, np.integer, Decimal)):
        return value
    raise TypeError(
        f"Unsupported numeric type {type(value).__name__!r}: expected float, "
        f"NumPy real scalar/array or decimal.Decimal"
    )


@functools.lru_cache(maxsize=256)
def _numpy_literal(text: str, dtype: np.dtype) -> np.floating:
    # NumPy parses the decimal string at the target width (longdouble included).
    return dtype.type(text)


@functools.lru_cache(maxsize=256)
def _float_literal(text: str) -> float:
    return float(text)


def _literal_dtype(like: Any) -> np.dtype:
    """Floating dtype used for constants paired with a NumPy sample."""
    dtype = like.dtype
    if dtype.kind in "iu":
        return np.dtype(np.float64)
    return dtype


def literal(text: str, like: Any) -> Any:
    """
    Build the constant written as *text* at the precision of *like*.

    Args:
        text: Decimal representation, e.g. ``"1.09929682680944"``.
        like: A sample (scalar or array) whose numeric type decides the
              precision of the returned constant.

    Returns:
        The constant as ``float``, a NumPy floating scalar or ``Decimal``.
    """
    require_real(like)
    if isinstance(like, Decimal):
        # Decimal contexts are mutable; never cache.
        return Decimal(text)
    if isinstance(like, (np.ndarray, np.generic)):
        return _numpy_literal(text, _literal_dtype(like))
    return _float_literal(text)


def literals(like: Any, *texts: str) -> tuple:
    """Vectorised :func:`literal` for several constants at once."""
    return tuple(literal(t, like) for t in texts)


def uses_kernel(value: Any) -> bool:
    """True if *value* should be routed to the compiled float64 kernels."""
    return isinstance(value, np.ndarray) and value.dtype in KERNEL_DTYPES


def piecewise(
    x: Any,
    threshold: Any,
    inclusive: bool,
    linear: Callable[[Any], Any],
    power: Callable[[Any], Any],
) -> Any:
    """
    Evaluate a two-piece transfer curve.

    ``linear`` is used where ``x <= threshold`` (``inclusive=True``) or
    ``x < threshold`` (``inclusive=False``), ``power`` elsewhere.  Arrays are
    split with a mask so the power law never sees the negative samples that
    belong to the linear segment.
    """
    if isinstance(x, np.ndarray):
        low = x <= threshold if inclusive else x < threshold
        out = np.empty_like(x)
        out[low] = linear(x[low])
        high = ~low
        if np.any(high):
            out[high] = power(x[high])
        return out

    low = x <= threshold if inclusive else x < threshold
    return linear(x) if low else power(x)


def handle_shapes(func: Callable[..., ArrayFloat]) -> Callable[..., ArrayFloat]:
    """
    Decorator to normalize pixel inputs to (N, 3) and safeguard shape.

    Integer input is promoted to float64; floating dtypes (longdouble
    included) are preserved.

    Returns:
        The wrapped function with shape handling.
        - If input is (3,), returns (3,)
        - If input is (N, 3), returns (N, 3)
    """
    @functools.wraps(func)
    def wrapper(arr: ArrayFloat, *args: Any, **kwargs: Any) -> ArrayFloat:
        arr = np.asarray(arr)
        require_real(arr)
        if arr.dtype.kind in "iu":
            arr = arr.astype(np.float64)
        arr_in = np.ascontiguousarray(np.atleast_2d(arr))

        if arr_in.ndim != 2 or arr_in.shape[-1] != 3:
            raise ValueError(
                f"Expected shape (3,) or (N, 3), got {arr.shape}"
            )

        res = func(arr_in, *args, **kwargs)

        if arr.ndim == 1:
            return res[0]
        return res
    return wrapper


class FrozenPolicy(type):
    """
    Metaclass for zero-state policy and descriptor classes.

    The class object itself is the value: it cannot be instantiated and its
    attributes cannot be re-bound or deleted after definition.
    """

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        raise TypeError(
            f"{cls.__name__} is a stateless descriptor; use the class itself"
        )

    def __setattr__(cls, name: str, value: Any) -> None:
        raise AttributeError(f"{cls.__name__} is immutable (cannot set {name!r})")

    def __delattr__(cls, name: str) -> None:
        raise AttributeError(f"{cls.__name__} is immutable (cannot delete {name!r})")

    def __repr__(cls) -> str:
        return f"<{cls.__qualname__}>"
