"""
Linear and nonlinear programming solvers.

solve_lp wraps scipy.optimize.linprog (HiGHS); solve_nlp wraps
scipy.optimize.minimize. Both return the optimal point directly; the
_solve_linear / _minimize functions return the full Result for callers
(such as Model) that need status, objective and timing.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence
import logging
import warnings
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.optimize import linprog, minimize

from openeng.core.compute.timing import Timer
from openeng.core.exceptions import ConvergenceError, ValidationError
from openeng.core.result import Result
from openeng.core.validation import check_array, check_finite
from openeng.optimization.design import LinearProgram
from openeng.optimization.solution import (
    LINPROG_STATUS,
    LOCALLY_SOLVED,
    ITERATION_LIMIT,
    NUMERICAL_ERROR,
    OPTIMAL,
    OptimizationParams,
    OptimizationSolution,
)

logger = logging.getLogger(__name__)

Constraint = Callable[[NDArray[np.floating[Any]]], Any]
Bounds = Sequence[tuple[float | None, float | None]]

_NLP_METHODS = ('SLSQP', 'L-BFGS-B', 'BFGS', 'Nelder-Mead', 'Powell', 'trust-constr')


def _solve_linear(
    problem: LinearProgram,
    *,
    maximize: bool = False,
) -> OptimizationSolution:
    """Run HiGHS on a validated LinearProgram. Never raises on status."""
    timer = Timer()
    timer.start()

    c = -problem.c if maximize else problem.c
    with timer.section('linprog'):
        res = linprog(
            c,
            A_ub=problem.A_ub,
            b_ub=problem.b_ub,
            A_eq=problem.A_eq,
            b_eq=problem.b_eq,
            bounds=problem.bounds,
            method='highs',
        )

    timer.stop()

    status = LINPROG_STATUS.get(int(res.status), NUMERICAL_ERROR)
    x = None if res.x is None else np.asarray(res.x, dtype=np.float64)
    objective = None
    if res.fun is not None and status == OPTIMAL:
        objective = -float(res.fun) if maximize else float(res.fun)
    logger.debug("linprog finished: status=%s, nit=%s", status, res.nit)

    info = {
        'method': 'highs',
        'raw_status': int(res.status),
        'sense': 'max' if maximize else 'min',
        'n_variables': problem.n_variables,
        'n_constraints': problem.n_constraints,
    }
    if status == OPTIMAL:
        # d(fun)/d(b_ub), d(fun)/d(b_eq) of the minimized objective
        info['ineqlin_marginals'] = _marginals(res, 'ineqlin')
        info['eqlin_marginals'] = _marginals(res, 'eqlin')

    result = Result(
        params=OptimizationParams(
            x=x,
            objective=objective,
            status=status,
            iterations=int(res.nit),
            message=str(res.message),
        ),
        info=info,
        timing=timer.result(),
        backend_name='scipy_linprog_highs',
    )
    return OptimizationSolution(_result=result)


def _marginals(res: Any, field: str) -> NDArray[np.float64]:
    section = getattr(res, field, None)
    if section is None:
        return np.empty(0)
    return np.asarray(section.marginals, dtype=np.float64)


def _default_method(constraints: Sequence[Any] | None, bounds: Bounds | None) -> str:
    if constraints:
        return 'SLSQP'
    if bounds is not None:
        return 'L-BFGS-B'
    return 'BFGS'


def _as_scipy_constraints(constraints: Sequence[Constraint] | None) -> list[dict[str, Any]]:
    # g(x) <= 0  ->  scipy's  -g(x) >= 0
    out = []
    for i, g in enumerate(constraints or ()):
        if not callable(g):
            raise ValidationError(f"constraints[{i}]: expected callable g(x), got {type(g).__name__}")
        out.append({'type': 'ineq', 'fun': (lambda x, g=g: -np.atleast_1d(g(x)))})
    return out


def _minimize(
    f: Callable[[NDArray[np.floating[Any]]], float],
    x0: ArrayLike,
    *,
    constraints: Sequence[Constraint] | None = None,
    equalities: Sequence[Constraint] | None = None,
    bounds: Bounds | None = None,
    method: str | None = None,
    maximize: bool = False,
    **kwargs: Any,
) -> OptimizationSolution:
    """Run scipy.optimize.minimize and wrap the outcome. Never raises on status."""
    x0 = np.atleast_1d(check_array(x0, 'x0'))
    check_finite(x0, 'x0')
    if bounds is not None and len(bounds) != x0.shape[0]:
        raise ValidationError(
            f"bounds: expected {x0.shape[0]} (lb, ub) pairs, got {len(bounds)}"
        )

    scipy_cons = _as_scipy_constraints(constraints)
    for h in equalities or ():
        scipy_cons.append({'type': 'eq', 'fun': (lambda x, h=h: np.atleast_1d(h(x)))})

    if method is None:
        method = _default_method(scipy_cons, bounds)
    if method not in _NLP_METHODS:
        raise ValidationError(f"Unknown NLP method: {method!r}. Must be one of {_NLP_METHODS}.")
    if scipy_cons and method not in ('SLSQP', 'trust-constr'):
        raise ValidationError(f"Method {method!r} does not support constraints; use 'SLSQP'.")

    objective_fn = (lambda x: -f(x)) if maximize else f

    timer = Timer()
    timer.start()
    with timer.section('minimize'):
        res = minimize(
            objective_fn,
            x0,
            method=method,
            bounds=bounds,
            constraints=scipy_cons or (),
            **kwargs,
        )
    timer.stop()

    iterations = int(getattr(res, 'nit', 0) or 0)
    if res.success:
        status = LOCALLY_SOLVED
    elif 'iteration' in str(res.message).lower():
        status = ITERATION_LIMIT
    else:
        status = NUMERICAL_ERROR

    warnings_list: list[str] = []
    if status != LOCALLY_SOLVED:
        warnings_list.append(f"{method} did not converge: {res.message}")

    fun = float(res.fun)
    result = Result(
        params=OptimizationParams(
            x=np.asarray(res.x, dtype=np.float64),
            objective=-fun if maximize else fun,
            status=status,
            iterations=iterations,
            message=str(res.message),
        ),
        info={
            'method': method,
            'sense': 'max' if maximize else 'min',
            'nfev': int(getattr(res, 'nfev', 0) or 0),
            'n_constraints': len(scipy_cons),
        },
        timing=timer.result(),
        backend_name=f'scipy_minimize_{method.lower()}',
        warnings=tuple(warnings_list),
    )
    return OptimizationSolution(_result=result)


def solve_lp(
    c: ArrayLike,
    A: ArrayLike | None = None,
    b: ArrayLike | None = None,
    lb: ArrayLike | None = None,
    ub: ArrayLike | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Solve a linear program.

        minimize c @ x  subject to  A @ x <= b,  lb <= x <= ub

    Parameters
    ----------
    c : array-like
        Objective coefficients, shape (n,).
    A, b : array-like, optional
        Inequality constraints, shapes (m, n) and (m,).
    lb, ub : array-like or float, optional
        Variable bounds; None means unbounded in that direction.

    Returns
    -------
    ndarray
        Optimal point x, shape (n,).

    Raises
    ------
    ValidationError
        If the problem data are malformed.
    ConvergenceError
        If the solver does not reach an optimum (infeasible, unbounded,
        iteration limit). The error's status attribute names the outcome.

    Examples
    --------
    >>> solve_lp([-1, -2], [[1, 1]], [4], lb=[0, 0])
    array([0., 4.])
    """
    problem = LinearProgram.from_arrays(c, A, b, lb, ub)
    solution = _solve_linear(problem)
    if solution.status != OPTIMAL:
        raise ConvergenceError(
            f"Linear program not solved: {solution.status} ({solution.message})",
            iterations=solution.iterations,
            reason=solution.message,
            status=solution.status,
        )
    return solution.x


def solve_nlp(
    f: Callable[[NDArray[np.floating[Any]]], float],
    x0: ArrayLike,
    constraints: Sequence[Constraint] | None = None,
    bounds: Bounds | None = None,
    *,
    method: str | None = None,
    **kwargs: Any,
) -> NDArray[np.floating[Any]]:
    """
    Minimize a nonlinear function.

    Parameters
    ----------
    f : callable
        Objective f(x) -> float.
    x0 : array-like
        Starting point.
    constraints : sequence of callables, optional
        Inequality constraints g(x) <= 0 (scalar or vector valued).
    bounds : sequence of (lb, ub), optional
        Per-variable bounds; None entries mean unbounded.
    method : str, optional
        scipy.optimize.minimize method. Defaults to SLSQP with
        constraints, L-BFGS-B with bounds only, BFGS otherwise.

    Returns
    -------
    ndarray
        Final iterate. If the solver did not converge a RuntimeWarning is
        emitted and the last iterate is returned.

    Examples
    --------
    >>> solve_nlp(lambda x: (x[0] - 1) ** 2 + (x[1] + 2) ** 2, [0.0, 0.0])
    array([ 1., -2.])
    """
    solution = _minimize(
        f, x0, constraints=constraints, bounds=bounds, method=method, **kwargs,
    )
    if not solution.success:
        warnings.warn(
            f"solve_nlp: {solution.warnings[0]}. Returning last iterate.",
            RuntimeWarning,
            stacklevel=2,
        )
    return solution.x
