"""
Linear algebra module.

MATLAB-style wrappers over NumPy/SciPy (LAPACK under the hood):
decompositions return tuples rather than factorization objects.

Public API:
    eig, eigvals, eigh    - Eigen-decomposition
    svd                   - Thin SVD (U, S, Vt)
    qr, lu, chol          - Factorizations
    solve, inv, pinv      - Linear systems and inverses
    det, rank, cond, trace, norm
    matrix_power, matrix_exp
    frobenius_norm, spectral_norm
    sparse, spzeros, spdiagm, issparse, nnz, dropzeros
"""

from openeng.linalg.decompositions import (
    eig,
    eigvals,
    eigh,
    svd,
    qr,
    lu,
    chol,
)
from openeng.linalg.operations import (
    solve,
    inv,
    pinv,
    det,
    rank,
    cond,
    trace,
    norm,
    frobenius_norm,
    spectral_norm,
    matrix_power,
    matrix_exp,
)
from openeng.linalg.sparse import (
    sparse,
    spzeros,
    spdiagm,
    issparse,
    nnz,
    dropzeros,
)

__all__ = [
    "eig",
    "eigvals",
    "eigh",
    "svd",
    "qr",
    "lu",
    "chol",
    "solve",
    "inv",
    "pinv",
    "det",
    "rank",
    "cond",
    "trace",
    "norm",
    "frobenius_norm",
    "spectral_norm",
    "matrix_power",
    "matrix_exp",
    "sparse",
    "spzeros",
    "spdiagm",
    "issparse",
    "nnz",
    "dropzeros",
]
