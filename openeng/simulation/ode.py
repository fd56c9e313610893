"""
Ordinary differential equation solvers.

Thin layer over scipy.integrate.solve_ivp. The right-hand side is
f(t, u) returning du/dt, or f(t, u, p) when parameters p are given.
"""

from __future__ import annotations

from typing import Any, Callable
import logging
import numpy as np
from numpy.typing import ArrayLike
from scipy.integrate import solve_ivp

from openeng.core.compute.timing import Timer
from openeng.core.exceptions import ConvergenceError, ValidationError
from openeng.core.result import Result
from openeng.core.validation import check_array, check_finite
from openeng.simulation.solution import ODEParams, ODESolution

logger = logging.getLogger(__name__)

_METHODS = ('RK45', 'RK23', 'DOP853', 'Radau', 'BDF', 'LSODA')


def _check_problem(u0: ArrayLike, tspan: Any) -> tuple[np.ndarray, tuple[float, float]]:
    u0 = np.atleast_1d(check_array(u0, 'u0'))
    if u0.ndim != 1:
        raise ValidationError(f"u0: expected 1D initial state, got shape {u0.shape}")
    check_finite(u0, 'u0')

    try:
        t0, tf = (float(v) for v in tspan)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"tspan: expected (t0, tf), got {tspan!r}") from e
    if t0 == tf:
        raise ValidationError(f"tspan: t0 and tf must differ, got ({t0}, {tf})")
    return u0, (t0, tf)


def _integrate(
    f: Callable[..., Any],
    u0: ArrayLike,
    tspan: Any,
    p: Any,
    method: str,
    rtol: float,
    atol: float,
    **kwargs: Any,
) -> ODESolution:
    u0, span = _check_problem(u0, tspan)
    if method not in _METHODS and not isinstance(method, type):
        raise ValidationError(
            f"Unknown ODE method: {method!r}. Must be one of {_METHODS}."
        )

    timer = Timer()
    timer.start()

    args = (p,) if p is not None else None
    with timer.section('integration'):
        sol = solve_ivp(
            f, span, u0, method=method, rtol=rtol, atol=atol, args=args, **kwargs,
        )

    timer.stop()

    method_name = method if isinstance(method, str) else method.__name__
    if sol.status == -1:
        raise ConvergenceError(
            f"ODE integration with {method_name} failed at t={sol.t[-1]:g}: {sol.message}",
            iterations=int(sol.nfev),
            reason=sol.message,
            status='numerical_error',
        )

    warnings_list: list[str] = []
    if sol.status == 1:
        warnings_list.append(f"Integration stopped by terminal event at t={sol.t[-1]:g}")
        logger.info(warnings_list[-1])

    result = Result(
        params=ODEParams(t=sol.t, y=sol.y, sol=sol.sol),
        info={
            'method': method_name,
            'success': bool(sol.success),
            'message': sol.message,
            'status': int(sol.status),
            'nfev': int(sol.nfev),
            'njev': int(sol.njev),
            'nlu': int(sol.nlu),
            'rtol': rtol,
            'atol': atol,
            't_events': sol.t_events,
        },
        timing=timer.result(),
        backend_name=f'scipy_solve_ivp_{method_name.lower()}',
        warnings=tuple(warnings_list),
    )
    return ODESolution(_result=result)


def solve_ode(
    f: Callable[..., Any],
    u0: ArrayLike,
    tspan: Any,
    p: Any = None,
    method: str = 'RK45',
    rtol: float = 1e-6,
    atol: float = 1e-9,
    **kwargs: Any,
) -> ODESolution:
    """
    Solve an initial value problem du/dt = f(t, u[, p]).

    Parameters
    ----------
    f : callable
        Right-hand side. f(t, u) or f(t, u, p) returning du/dt.
    u0 : array-like
        Initial state (scalar or 1D).
    tspan : (t0, tf)
        Integration interval; tf < t0 integrates backwards.
    p : any, optional
        Parameters passed as the third argument of f.
    method : str
        solve_ivp method: 'RK45' (default), 'RK23', 'DOP853',
        'Radau', 'BDF', 'LSODA'.
    rtol, atol : float
        Relative and absolute tolerances.
    **kwargs
        Passed to scipy.integrate.solve_ivp (t_eval, dense_output,
        events, max_step, ...).

    Returns
    -------
    ODESolution

    Raises
    ------
    ValidationError
        If u0, tspan or method are invalid.
    ConvergenceError
        If the integrator fails (e.g. step size underflow).

    Examples
    --------
    >>> sol = solve_ode(lambda t, u: -0.5 * u, [1.0], (0.0, 10.0))
    >>> sol.u[-1]
    """
    return _integrate(f, u0, tspan, p, method, rtol, atol, **kwargs)


def solve_ode_adaptive(
    f: Callable[..., Any],
    u0: ArrayLike,
    tspan: Any,
    p: Any = None,
    reltol: float = 1e-6,
    abstol: float = 1e-8,
    **kwargs: Any,
) -> ODESolution:
    """
    Solve an ODE that may be stiff.

    Uses LSODA, which switches automatically between a non-stiff Adams
    method and a stiff BDF method as the problem requires.

    Parameters
    ----------
    reltol, abstol : float
        Relative and absolute tolerances.

    Other parameters as in solve_ode().
    """
    return _integrate(f, u0, tspan, p, 'LSODA', reltol, abstol, **kwargs)
