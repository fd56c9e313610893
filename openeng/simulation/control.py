"""
Linear time-invariant systems: construction, time and frequency response.

Systems are scipy.signal LTI objects (TransferFunction, StateSpace,
ZerosPolesGain). Every response function also accepts a (num, den),
(z, p, k) or (A, B, C, D) tuple and builds the system on the fly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable
import numpy as np
import scipy.signal
from numpy.typing import ArrayLike, NDArray

from openeng.core.exceptions import DimensionError, ValidationError
from openeng.core.validation import check_array, check_1d, check_finite


def create_tf(num: ArrayLike, den: ArrayLike) -> scipy.signal.TransferFunction:
    """
    Transfer function from polynomial coefficients (highest degree first).

    Example:
        >>> sys = create_tf([1.0], [1.0, 2.0, 1.0])    # 1 / (s^2 + 2s + 1)
    """
    num = check_array(num, 'num')
    den = np.atleast_1d(check_array(den, 'den'))
    check_1d(den, 'den')
    if not np.any(den):
        raise ValidationError("den: denominator polynomial is identically zero")
    return scipy.signal.TransferFunction(num, den)


def create_ss(
    A: ArrayLike,
    B: ArrayLike,
    C: ArrayLike,
    D: ArrayLike,
) -> scipy.signal.StateSpace:
    """
    State-space system dx/dt = A x + B u, y = C x + D u.

    A 1D B is taken as a single input column, a 1D C as a single output
    row, matching the usual single-input single-output layout.
    """
    A = np.atleast_2d(check_array(A, 'A'))
    B = check_array(B, 'B')
    C = np.atleast_2d(check_array(C, 'C'))
    D = np.atleast_2d(check_array(D, 'D'))
    if B.ndim == 1:
        B = B.reshape(-1, 1)
    n = A.shape[0]
    if A.shape != (n, n):
        raise DimensionError(f"A: expected square state matrix, got shape {A.shape}")
    if B.shape[0] != n or C.shape[1] != n:
        raise DimensionError(
            f"Inconsistent state dimension: A={A.shape}, B={B.shape}, C={C.shape}"
        )
    if D.shape != (C.shape[0], B.shape[1]):
        raise DimensionError(
            f"D: expected shape {(C.shape[0], B.shape[1])}, got {D.shape}"
        )
    return scipy.signal.StateSpace(A, B, C, D)


def zpk(z: ArrayLike, p: ArrayLike, k: float) -> scipy.signal.ZerosPolesGain:
    """System from zeros, poles and gain."""
    return scipy.signal.ZerosPolesGain(np.atleast_1d(z), np.atleast_1d(p), k)


# MATLAB-style names
tf = create_tf
ss = create_ss


def _as_system(sys: Any) -> scipy.signal.lti:
    if isinstance(sys, scipy.signal.lti):
        return sys
    if isinstance(sys, tuple) and len(sys) in (2, 3, 4):
        return scipy.signal.lti(*sys)
    raise ValidationError(
        f"sys: expected an LTI system or (num, den) / (z, p, k) / (A, B, C, D) "
        f"tuple, got {type(sys).__name__}"
    )


def _time_grid(tfinal: float, dt: float) -> NDArray[np.floating[Any]]:
    if not tfinal > 0:
        raise ValidationError(f"tfinal: must be positive, got {tfinal}")
    if not 0 < dt <= tfinal:
        raise ValidationError(f"dt: must be in (0, tfinal], got {dt}")
    n_steps = int(np.floor(tfinal / dt + 1e-9))
    return np.arange(n_steps + 1) * dt


def step_response(
    sys: Any,
    tfinal: float,
    dt: float = 0.01,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Unit step response.

    Args:
        sys: LTI system (or tuple form)
        tfinal: Final simulation time
        dt: Time step

    Returns:
        (t, y) with t = 0, dt, 2 dt, ... <= tfinal
    """
    t = _time_grid(tfinal, dt)
    t_out, y = scipy.signal.step(_as_system(sys), T=t)
    return t_out, y


def impulse_response(
    sys: Any,
    tfinal: float,
    dt: float = 0.01,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """Unit impulse response on the grid 0, dt, ... <= tfinal."""
    t = _time_grid(tfinal, dt)
    t_out, y = scipy.signal.impulse(_as_system(sys), T=t)
    return t_out, y


def frequency_response(
    sys: Any,
    w: ArrayLike,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Frequency response at angular frequencies w (rad/s).

    Returns:
        (mag, phase): linear magnitude |H(jw)| and unwrapped phase in radians
    """
    w = np.atleast_1d(check_array(w, 'w'))
    check_1d(w, 'w')
    _, H = scipy.signal.freqresp(_as_system(sys), w=w)
    return np.abs(H), np.unwrap(np.angle(H))


def simulate_system(
    sys: Any,
    u: ArrayLike | Callable[[float], float],
    t: ArrayLike,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Response of a linear system to an arbitrary input.

    Args:
        sys: LTI system (or tuple form)
        u: Input samples aligned with t (n,) or (n, n_inputs), or a
           callable u(t) evaluated at every time point
        t: Equally spaced time points

    Returns:
        (y, t, x): output (1D for single-output systems), time vector
        and state trajectory
    """
    t = check_array(t, 't')
    check_1d(t, 't')
    check_finite(t, 't')
    if callable(u):
        u_vec = np.asarray([u(ti) for ti in t], dtype=np.float64)
    else:
        u_vec = check_array(u, 'u')
    if u_vec.shape[0] != t.shape[0]:
        raise DimensionError(
            f"Inconsistent lengths: u={u_vec.shape[0]}, t={t.shape[0]}"
        )
    t_out, y, x = scipy.signal.lsim(_as_system(sys), U=u_vec, T=t)
    return y, t_out, x


@dataclass(frozen=True)
class StepInfo:
    """
    Step response characteristics.

    Attributes:
        initial_value: y(0)
        final_value: y at tfinal, taken as the steady-state value
        peak: Largest excursion of y in the direction of the step
        peak_time: Time of the peak
        overshoot: Percent beyond final_value, 0 if none
        undershoot: Percent in the opposite direction of the step, 0 if none
        rise_time: Time from the lower to the upper rise limit
        settling_time: Time after which y stays within the settling band
    """
    initial_value: float
    final_value: float
    peak: float
    peak_time: float
    overshoot: float
    undershoot: float
    rise_time: float
    settling_time: float


def stepinfo(
    sys: Any,
    tfinal: float = 10.0,
    dt: float = 0.01,
    settling_threshold: float = 0.02,
    rise_limits: tuple[float, float] = (0.1, 0.9),
) -> StepInfo:
    """
    Rise time, settling time and overshoot of the unit step response.

    tfinal must be long enough for the response to settle: the value at
    tfinal is used as the steady state.

    Args:
        settling_threshold: Half-width of the settling band, as a fraction
            of the step size
        rise_limits: Fractions of the step size bounding the rise time

    Raises:
        ValidationError: If the response does not move or the limits are
            out of range
    """
    lo, hi = rise_limits
    if not 0.0 <= lo < hi <= 1.0:
        raise ValidationError(f"rise_limits: expected 0 <= lo < hi <= 1, got {rise_limits}")
    if not 0.0 < settling_threshold < 1.0:
        raise ValidationError(f"settling_threshold: must be in (0, 1), got {settling_threshold}")

    t, y = step_response(sys, tfinal, dt)
    y0, yf = float(y[0]), float(y[-1])
    step = yf - y0
    if step == 0.0:
        raise ValidationError("Step response has zero net change; system gain is zero")

    # 0 at the initial value, 1 at the final value
    z = (y - y0) / step
    i_peak = int(np.argmax(z))
    i_lo = int(np.argmax(z >= lo))
    i_hi = int(np.argmax(z >= hi))

    outside = np.nonzero(np.abs(z - 1.0) > settling_threshold)[0]
    settling_time = float(t[outside[-1] + 1]) if outside.size else float(t[0])

    return StepInfo(
        initial_value=y0,
        final_value=yf,
        peak=float(y[i_peak]),
        peak_time=float(t[i_peak]),
        overshoot=100.0 * max(0.0, float(z[i_peak]) - 1.0),
        undershoot=100.0 * max(0.0, -float(np.min(z))),
        rise_time=float(t[i_hi] - t[i_lo]),
        settling_time=settling_time,
    )
