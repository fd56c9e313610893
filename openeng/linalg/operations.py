"""
Matrix functions: solves, inverses, norms, powers and exponentials.
"""

import numbers
from typing import Any
import numpy as np
import scipy.linalg
from numpy.typing import ArrayLike, NDArray

from openeng.core.exceptions import SingularMatrixError, ValidationError, DimensionError
from openeng.core.validation import check_array, check_2d, check_finite, check_square


def _square(A: ArrayLike, name: str = 'A') -> NDArray[Any]:
    A = check_array(A, name)
    check_square(A, name)
    check_finite(A, name)
    return A


def solve(A: ArrayLike, b: ArrayLike) -> NDArray[Any]:
    """
    Solve the linear system A x = b.

    Square A is solved exactly (LU); a rectangular A gives the
    least-squares solution, like MATLAB's backslash.

    Args:
        A: Coefficient matrix (m x n)
        b: Right-hand side, vector (m,) or matrix (m x k). A scalar is
           taken as a length-1 vector

    Returns:
        Solution x with shape (n,) or (n, k)

    Raises:
        DimensionError: If A and b have inconsistent row counts
        SingularMatrixError: If A is square and singular
    """
    A = check_array(A, 'A')
    b = np.atleast_1d(check_array(b, 'b'))
    check_2d(A, 'A')
    check_finite(A, 'A')
    if b.shape[0] != A.shape[0]:
        raise DimensionError(
            f"Inconsistent lengths: A has {A.shape[0]} rows, b has {b.shape[0]}"
        )

    if A.shape[0] != A.shape[1]:
        x, *_ = np.linalg.lstsq(A, b, rcond=None)
        return x

    try:
        return np.linalg.solve(A, b)
    except np.linalg.LinAlgError as e:
        raise SingularMatrixError(
            "A: matrix is singular, cannot solve A x = b",
            matrix_name='A',
            condition_number=float(np.linalg.cond(A)),
        ) from e


def inv(A: ArrayLike) -> NDArray[Any]:
    """
    Inverse of a square matrix.

    Raises:
        SingularMatrixError: If A is singular
    """
    A = _square(A)
    try:
        return np.linalg.inv(A)
    except np.linalg.LinAlgError as e:
        raise SingularMatrixError(
            "A: matrix is singular, cannot invert",
            matrix_name='A',
            condition_number=float(np.linalg.cond(A)),
        ) from e


def pinv(A: ArrayLike) -> NDArray[Any]:
    """Moore-Penrose pseudo-inverse."""
    A = check_array(A, 'A')
    check_2d(A, 'A')
    return np.linalg.pinv(A)


def det(A: ArrayLike) -> float:
    """Determinant of a square matrix."""
    return np.linalg.det(_square(A)).item()


def rank(A: ArrayLike) -> int:
    """Numerical rank (SVD-based)."""
    A = check_array(A, 'A')
    return int(np.linalg.matrix_rank(A))


def cond(A: ArrayLike, p: Any = None) -> float:
    """Condition number (2-norm by default). Singular matrices give inf."""
    A = check_array(A, 'A')
    check_2d(A, 'A')
    return float(np.linalg.cond(A, p))


def trace(A: ArrayLike) -> float:
    """Sum of the diagonal of a square matrix."""
    return np.trace(_square(A)).item()


def norm(x: ArrayLike, ord: Any = None) -> float:
    """Vector or matrix norm (numpy.linalg.norm conventions)."""
    x = check_array(x, 'x')
    return float(np.linalg.norm(x, ord))


def frobenius_norm(A: ArrayLike) -> float:
    """Frobenius norm: square root of the sum of squared entries."""
    A = check_array(A, 'A')
    check_2d(A, 'A')
    return float(np.linalg.norm(A, 'fro'))


def spectral_norm(A: ArrayLike) -> float:
    """Spectral norm: largest singular value."""
    A = check_array(A, 'A')
    check_2d(A, 'A')
    return float(np.linalg.norm(A, 2))


def matrix_power(A: ArrayLike, n: int) -> NDArray[Any]:
    """
    n-th power of a square matrix.

    n = 0 returns the identity and negative n raises the inverse to -n.
    Positive powers use repeated squaring (numpy.linalg.matrix_power).

    Raises:
        ValidationError: If n is not an integer
        SingularMatrixError: If n < 0 and A is singular
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise ValidationError(f"n: expected integer exponent, got {type(n).__name__}")
    A = _square(A)
    if n < 0:
        return np.linalg.matrix_power(inv(A), -int(n))
    return np.linalg.matrix_power(A, int(n))


def matrix_exp(A: ArrayLike) -> NDArray[Any]:
    """Matrix exponential exp(A) (Pade approximation, scipy.linalg.expm)."""
    return scipy.linalg.expm(_square(A))
