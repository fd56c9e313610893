"""
Result envelope shared by the ODE and optimization solvers.

A solver returns its payload (trajectory, optimum) wrapped together with
the metadata a caller may want afterwards: which scipy routine ran, how
long each stage took, and any non-fatal problems it hit.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Frozen solver output.

    Attributes:
        params: Payload, e.g. ODEParams or OptimizationParams
        info: Backend metadata such as method, status, nfev
        timing: Timer.result() dict, or None when not measured
        backend_name: Routine identifier, e.g. 'scipy_solve_ivp_rk45'
        warnings: Human-readable notes on non-fatal problems

    Example:
        >>> Result(
        ...     params=OptimizationParams(x=x, objective=-8.0, status='optimal'),
        ...     info={'method': 'highs'},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='scipy_linprog_highs',
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """True if some warning mentions `substring`."""
        return any(substring in w for w in self.warnings)
