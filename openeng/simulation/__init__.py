"""
Simulation module.

ODE integration (scipy.integrate) and linear system simulation
(scipy.signal LTI systems).

Public API:
    solve_ode(f, u0, tspan)           - Explicit Runge-Kutta by default
    solve_ode_adaptive(f, u0, tspan)  - Stiffness-switching LSODA
    create_tf / tf, create_ss / ss, zpk
    step_response, impulse_response, frequency_response
    simulate_system(sys, u, t)
    stepinfo(sys)                     - Rise/settling time, overshoot
"""

from openeng.simulation.ode import solve_ode, solve_ode_adaptive
from openeng.simulation.solution import ODEParams, ODESolution
from openeng.simulation.control import (
    create_tf,
    create_ss,
    tf,
    ss,
    zpk,
    step_response,
    impulse_response,
    frequency_response,
    simulate_system,
    stepinfo,
    StepInfo,
)

__all__ = [
    "solve_ode",
    "solve_ode_adaptive",
    "ODEParams",
    "ODESolution",
    "create_tf",
    "create_ss",
    "tf",
    "ss",
    "zpk",
    "step_response",
    "impulse_response",
    "frequency_response",
    "simulate_system",
    "stepinfo",
    "StepInfo",
]
