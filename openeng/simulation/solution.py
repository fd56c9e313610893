"""
ODE solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from openeng.core.result import Result


@dataclass(frozen=True)
class ODEParams:
    """
    Trajectory payload.

    t has shape (n_points,); y has shape (n_states, n_points) so that
    y[:, k] is the state at t[k] (scipy.integrate convention).
    """
    t: NDArray[np.floating[Any]]
    y: NDArray[Any]
    sol: Any = None  # dense interpolant when dense_output=True


@dataclass
class ODESolution:
    """
    User-facing ODE integration result.

    Wraps Result[ODEParams]. Besides the scipy-style (t, y) arrays, u
    gives the state at each time point as a list, so sol.u[0] is the
    initial condition and sol.u[-1] the final state.
    """
    _result: Result[ODEParams]

    @property
    def t(self) -> NDArray[np.floating[Any]]:
        """Time points, shape (n_points,)."""
        return self._result.params.t

    @property
    def y(self) -> NDArray[Any]:
        """States, shape (n_states, n_points)."""
        return self._result.params.y

    @property
    def u(self) -> list[NDArray[Any]]:
        """State vector at each time point."""
        return [self.y[:, k] for k in range(self.y.shape[1])]

    @property
    def final_state(self) -> NDArray[Any]:
        return self.y[:, -1]

    @property
    def success(self) -> bool:
        return bool(self._result.info.get('success', False))

    @property
    def message(self) -> str:
        return self._result.info.get('message', '')

    @property
    def method(self) -> str:
        return self._result.info['method']

    @property
    def nfev(self) -> int:
        """Number of right-hand-side evaluations."""
        return int(self._result.info.get('nfev', 0))

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

    def __call__(self, t: float | NDArray[np.floating[Any]]) -> NDArray[Any]:
        """
        Evaluate the dense interpolant at t.

        Raises:
            RuntimeError: If the solve was not run with dense_output=True
        """
        sol = self._result.params.sol
        if sol is None:
            raise RuntimeError(
                "No dense interpolant available. Solve with dense_output=True."
            )
        return sol(t)

    def __len__(self) -> int:
        return len(self.t)

    def __repr__(self) -> str:
        n_states = self.y.shape[0]
        return (
            f"ODESolution(method={self.method!r}, n_points={len(self.t)}, "
            f"n_states={n_states}, t=[{self.t[0]:g}, {self.t[-1]:g}])"
        )
