"""
Matrix decompositions with MATLAB-style return values.

Each function validates its input, calls one LAPACK-backed routine from
NumPy/SciPy and returns plain arrays in a tuple instead of a
factorization object.
"""

from typing import Any, Literal
import numpy as np
import scipy.linalg
from numpy.typing import ArrayLike, NDArray

from openeng.core.exceptions import NotPositiveDefiniteError
from openeng.core.validation import check_array, check_2d, check_finite, check_square


def _matrix(A: ArrayLike, name: str = 'A', square: bool = False) -> NDArray[Any]:
    A = check_array(A, name)
    if square:
        check_square(A, name)
    else:
        check_2d(A, name)
    check_finite(A, name)
    return A


def eig(A: ArrayLike) -> tuple[NDArray[Any], NDArray[Any]]:
    """
    Eigenvalues and eigenvectors of a square matrix.

    Args:
        A: Square matrix (n x n)

    Returns:
        (w, V) where w has shape (n,) and column V[:, i] is the
        eigenvector for w[i], so A @ V ~ V @ diag(w).
    """
    A = _matrix(A, square=True)
    w, V = np.linalg.eig(A)
    return w, V


def eigvals(A: ArrayLike) -> NDArray[Any]:
    """Eigenvalues of a square matrix."""
    A = _matrix(A, square=True)
    return np.linalg.eigvals(A)


def eigh(A: ArrayLike) -> tuple[NDArray[Any], NDArray[Any]]:
    """
    Eigen-decomposition of a symmetric/Hermitian matrix.

    Eigenvalues are real and returned in ascending order.
    """
    A = _matrix(A, square=True)
    w, V = np.linalg.eigh(A)
    return w, V


def svd(A: ArrayLike) -> tuple[NDArray[Any], NDArray[Any], NDArray[Any]]:
    """
    Thin singular value decomposition.

    Args:
        A: Matrix (m x n)

    Returns:
        (U, S, Vt) with U (m x k), S (k,), Vt (k x n), k = min(m, n),
        and A ~ U @ np.diag(S) @ Vt.
    """
    A = _matrix(A)
    U, S, Vt = np.linalg.svd(A, full_matrices=False)
    return U, S, Vt


def qr(
    A: ArrayLike,
    mode: Literal['reduced', 'complete'] = 'reduced',
) -> tuple[NDArray[Any], NDArray[Any]]:
    """
    QR decomposition A = Q @ R.

    Args:
        A: Matrix (m x n)
        mode: 'reduced' for economy QR (Q is m x k, R is k x n)
              'complete' for full QR (Q is m x m, R is m x n)
    """
    A = _matrix(A)
    Q, R = np.linalg.qr(A, mode=mode)
    return Q, R


def lu(A: ArrayLike) -> tuple[NDArray[Any], NDArray[Any], NDArray[Any]]:
    """
    LU decomposition with partial pivoting.

    Returns:
        (P, L, U) with A = P @ L @ U, L unit lower triangular.
    """
    A = _matrix(A)
    P, L, U = scipy.linalg.lu(A)
    return P, L, U


def chol(A: ArrayLike) -> NDArray[Any]:
    """
    Cholesky factor of a positive definite matrix.

    Returns:
        Upper triangular U with A = U.T @ U (U.conj().T @ U if complex).

    Raises:
        NotPositiveDefiniteError: If A is not positive definite
    """
    A = _matrix(A, square=True)
    try:
        return scipy.linalg.cholesky(A, lower=False)
    except np.linalg.LinAlgError as e:
        min_eig = float(np.min(np.linalg.eigvalsh(A)))
        raise NotPositiveDefiniteError(
            f"A: matrix is not positive definite (min eigenvalue {min_eig:.3e})",
            matrix_name='A',
            min_eigenvalue=min_eig,
        ) from e
