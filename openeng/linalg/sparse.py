"""
Sparse matrix helpers over scipy.sparse.

Indices are 0-based (Python convention). Constructors return CSR arrays.
"""

from typing import Any
import numpy as np
import scipy.sparse as sp
from numpy.typing import ArrayLike

from openeng.core.exceptions import DimensionError
from openeng.core.validation import check_array, check_1d, check_positive_int


def sparse(
    i: ArrayLike,
    j: ArrayLike,
    v: ArrayLike,
    shape: tuple[int, int] | None = None,
) -> sp.csr_array:
    """
    Build a sparse matrix from coordinate triplets.

    Duplicate (i, j) entries are summed. Without shape, the matrix is
    sized to fit the largest indices.

    Args:
        i: Row indices (0-based)
        j: Column indices (0-based)
        v: Values
        shape: (m, n), optional
    """
    rows = np.asarray(i, dtype=np.int64)
    cols = np.asarray(j, dtype=np.int64)
    vals = check_array(v, 'v')
    for arr, name in ((rows, 'i'), (cols, 'j'), (vals, 'v')):
        check_1d(arr, name)
    if not (len(rows) == len(cols) == len(vals)):
        raise DimensionError(
            f"Inconsistent lengths: i={len(rows)}, j={len(cols)}, v={len(vals)}"
        )
    if shape is None:
        shape = (int(rows.max()) + 1 if len(rows) else 0,
                 int(cols.max()) + 1 if len(cols) else 0)
    return sp.csr_array(sp.coo_array((vals, (rows, cols)), shape=shape))


def spzeros(m: int, n: int) -> sp.csr_array:
    """All-zero sparse matrix of shape (m, n)."""
    m = check_positive_int(m, 'm', allow_zero=True)
    n = check_positive_int(n, 'n', allow_zero=True)
    return sp.csr_array((m, n), dtype=np.float64)


def spdiagm(diagonal: ArrayLike, k: int = 0) -> sp.csr_array:
    """Sparse matrix with the given values on diagonal k."""
    d = check_array(diagonal, 'diagonal')
    check_1d(d, 'diagonal')
    size = len(d) + abs(k)
    return sp.csr_array(sp.diags_array(d, offsets=k, shape=(size, size)))


def issparse(A: Any) -> bool:
    """True for scipy.sparse matrices and arrays."""
    return sp.issparse(A)


def nnz(A: Any) -> int:
    """Number of stored non-zero entries (dense input: count of non-zeros)."""
    if sp.issparse(A):
        return int(A.count_nonzero())
    return int(np.count_nonzero(A))


def dropzeros(A: Any) -> sp.csr_array:
    """Copy of a sparse matrix with explicitly stored zeros removed."""
    out = sp.csr_array(A, copy=True)
    out.eliminate_zeros()
    return out
