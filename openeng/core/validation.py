"""
Argument checks shared by every OpenEng facade.

Each check tests one property and raises ValidationError (or its
DimensionError subclass) naming the offending argument and the value it
actually had. Nothing is silently repaired: the only conversion is
np.asarray plus promotion of integer and boolean input to float64.
"""

from collections.abc import Iterable
from typing import Any
import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray

from openeng.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.inexact[Any]]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).
    Integer and boolean input is promoted to float64; complex input is kept.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating or complex dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if result.dtype == np.bool_:
        return result.astype(np.float64)

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.inexact):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.inexact[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[Any], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[Any], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[Any], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_square(array: NDArray[Any], name: str) -> None:
    """
    Verify array is a square matrix.

    Raises:
        DimensionError: If array is not 2D or rows != columns
    """
    check_2d(array, name)
    n, m = array.shape
    if n != m:
        raise DimensionError(f"{name}: expected square matrix, got shape {array.shape}")


def check_same_shape(a: NDArray[Any], b: NDArray[Any], names: tuple[str, str]) -> None:
    """
    Verify two arrays have identical shapes (elementwise operations).

    Raises:
        DimensionError: If shapes differ
    """
    if a.shape != b.shape:
        raise DimensionError(
            f"Shape mismatch: {names[0]}={a.shape}, {names[1]}={b.shape}"
        )


def check_matmul_compatible(a: NDArray[Any], b: NDArray[Any], names: tuple[str, str]) -> None:
    """
    Verify two 2D arrays can be matrix-multiplied.

    Raises:
        DimensionError: If either is not 2D or inner dimensions differ
    """
    check_2d(a, names[0])
    check_2d(b, names[1])
    if a.shape[1] != b.shape[0]:
        raise DimensionError(
            f"Inner dimensions do not match: {names[0]} is {a.shape}, "
            f"{names[1]} is {b.shape}"
        )


def check_positive_int(value: Any, name: str, allow_zero: bool = False) -> int:
    """
    Verify value is a (non-boolean) integer above zero.

    Returns:
        The value as a Python int

    Raises:
        ValidationError: If value is not an integer or is out of range
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(f"{name}: expected integer, got {type(value).__name__}")
    value = int(value)
    lower = 0 if allow_zero else 1
    if value < lower:
        raise ValidationError(f"{name}: must be >= {lower}, got {value}")
    return value


def check_option(value: str, allowed: Iterable[str], name: str) -> str:
    """
    Verify a string option is one of the allowed choices.

    Raises:
        ValidationError: If value is not allowed, listing valid choices
    """
    allowed = tuple(allowed)
    if value not in allowed:
        choices = ", ".join(repr(a) for a in allowed)
        raise ValidationError(f"Unknown {name}: {value!r}. Must be one of {choices}.")
    return value
