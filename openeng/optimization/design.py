"""
LinearProgram: validated problem data for linear programming.

    minimize    c @ x
    subject to  A_ub @ x <= b_ub
                A_eq @ x == b_eq
                lb <= x <= ub
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from openeng.core.exceptions import DimensionError, ValidationError
from openeng.core.validation import check_array, check_1d, check_2d, check_finite


def _check_bound(bound: ArrayLike | None, n: int, fill: float, name: str) -> NDArray[np.floating[Any]]:
    if bound is None:
        return np.full(n, fill)
    arr = check_array(bound, name)
    if arr.ndim == 0:
        return np.full(n, float(arr))
    check_1d(arr, name)
    if arr.shape[0] != n:
        raise DimensionError(f"{name}: expected length {n}, got {arr.shape[0]}")
    if np.any(np.isnan(arr)):
        raise ValidationError(f"{name}: contains NaN")
    return arr


def _check_rows(
    A: ArrayLike | None,
    b: ArrayLike | None,
    n: int,
    names: tuple[str, str],
) -> tuple[NDArray | None, NDArray | None]:
    if A is None and b is None:
        return None, None
    if A is None or b is None:
        raise ValidationError(f"{names[0]} and {names[1]} must be given together")
    A = np.atleast_2d(check_array(A, names[0]))
    b = np.atleast_1d(check_array(b, names[1]))
    check_2d(A, names[0])
    check_1d(b, names[1])
    check_finite(A, names[0])
    check_finite(b, names[1])
    if A.shape[1] != n:
        raise DimensionError(f"{names[0]}: expected {n} columns, got {A.shape[1]}")
    if A.shape[0] != b.shape[0]:
        raise DimensionError(
            f"Inconsistent lengths: {names[0]} has {A.shape[0]} rows, "
            f"{names[1]} has {b.shape[0]}"
        )
    return A, b


@dataclass(frozen=True)
class LinearProgram:
    """
    Linear program in inequality form. Immutable after construction.

    Construction:
        LinearProgram.from_arrays(c, A_ub, b_ub, lb, ub, A_eq=None, b_eq=None)
    """
    c: NDArray[np.floating[Any]]
    A_ub: NDArray[np.floating[Any]] | None
    b_ub: NDArray[np.floating[Any]] | None
    A_eq: NDArray[np.floating[Any]] | None
    b_eq: NDArray[np.floating[Any]] | None
    lb: NDArray[np.floating[Any]]
    ub: NDArray[np.floating[Any]]

    @classmethod
    def from_arrays(
        cls,
        c: ArrayLike,
        A_ub: ArrayLike | None = None,
        b_ub: ArrayLike | None = None,
        lb: ArrayLike | None = None,
        ub: ArrayLike | None = None,
        *,
        A_eq: ArrayLike | None = None,
        b_eq: ArrayLike | None = None,
    ) -> LinearProgram:
        """
        Build and validate a linear program.

        Missing bounds mean unbounded in that direction.
        """
        c = np.atleast_1d(check_array(c, 'c'))
        check_1d(c, 'c')
        check_finite(c, 'c')
        n = c.shape[0]
        if n < 1:
            raise ValidationError("c: need at least one variable")

        A_ub, b_ub = _check_rows(A_ub, b_ub, n, ('A', 'b'))
        A_eq, b_eq = _check_rows(A_eq, b_eq, n, ('A_eq', 'b_eq'))
        lb_arr = _check_bound(lb, n, -np.inf, 'lb')
        ub_arr = _check_bound(ub, n, np.inf, 'ub')
        if np.any(lb_arr > ub_arr):
            bad = np.where(lb_arr > ub_arr)[0].tolist()
            raise ValidationError(f"lb > ub for variables {bad}")

        return cls(c=c, A_ub=A_ub, b_ub=b_ub, A_eq=A_eq, b_eq=b_eq, lb=lb_arr, ub=ub_arr)

    @property
    def n_variables(self) -> int:
        return self.c.shape[0]

    @property
    def n_constraints(self) -> int:
        n_ub = 0 if self.A_ub is None else self.A_ub.shape[0]
        n_eq = 0 if self.A_eq is None else self.A_eq.shape[0]
        return n_ub + n_eq

    @property
    def bounds(self) -> list[tuple[float | None, float | None]]:
        """Per-variable bounds in scipy.optimize form (None = unbounded)."""
        return [
            (None if np.isneginf(lo) else float(lo), None if np.isposinf(hi) else float(hi))
            for lo, hi in zip(self.lb, self.ub)
        ]

    def __repr__(self) -> str:
        return f"LinearProgram(n_variables={self.n_variables}, n_constraints={self.n_constraints})"
