"""
Optimization solution types.

Contains the parameter payload, the user-facing solution wrapper and the
termination status vocabulary shared by the LP and NLP paths.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from openeng.core.result import Result

OPTIMAL = 'optimal'
LOCALLY_SOLVED = 'locally_solved'
INFEASIBLE = 'infeasible'
UNBOUNDED = 'unbounded'
ITERATION_LIMIT = 'iteration_limit'
NUMERICAL_ERROR = 'numerical_error'
NOT_SOLVED = 'not_solved'

SOLVED_STATUSES = frozenset({OPTIMAL, LOCALLY_SOLVED})

# scipy.optimize.linprog status codes
LINPROG_STATUS = {
    0: OPTIMAL,
    1: ITERATION_LIMIT,
    2: INFEASIBLE,
    3: UNBOUNDED,
    4: NUMERICAL_ERROR,
}


@dataclass(frozen=True)
class OptimizationParams:
    """
    Parameter payload for an optimization run.

    x is None when the solver produced no point (infeasible/unbounded LP).
    objective is reported in the caller's sense (maximization problems
    report the maximum, not the negated minimum).
    """
    x: NDArray[np.floating[Any]] | None
    objective: float | None
    status: str
    iterations: int | None = None
    message: str = ''


@dataclass
class OptimizationSolution:
    """
    User-facing optimization results.

    Wraps Result[OptimizationParams] and provides convenient accessors.
    """
    _result: Result[OptimizationParams]

    @property
    def x(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.x

    @property
    def objective(self) -> float | None:
        return self._result.params.objective

    @property
    def status(self) -> str:
        return self._result.params.status

    @property
    def success(self) -> bool:
        return self.status in SOLVED_STATUSES

    @property
    def iterations(self) -> int | None:
        return self._result.params.iterations

    @property
    def message(self) -> str:
        return self._result.params.message

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def __repr__(self) -> str:
        obj = "None" if self.objective is None else f"{self.objective:.6g}"
        return (
            f"OptimizationSolution(status={self.status!r}, objective={obj}, "
            f"backend={self.backend_name!r})"
        )
