"""
Algebraic model builder.

A Model collects named variables, linear constraint rows, optional
nonlinear constraints and an objective, then hands the assembled problem
to the LP (HiGHS) or NLP (SLSQP) solver. Nonlinear objectives and
constraints receive a dict mapping variable name -> current value.

Usage:
    m = create_model()
    m.add_variable('x', lb=0)
    m.add_variable('y', lb=0)
    cap = m.add_constraint({'x': 1, 'y': 1}, '<=', 4)
    m.set_objective({'x': 1, 'y': 2}, sense='max')
    m.optimize()
    m.value('y')            # 4.0
    m.shadow_price(cap)     # 2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal
import logging
import warnings
import numpy as np

from openeng.core.exceptions import ValidationError
from openeng.core.validation import check_option
from openeng.optimization.design import LinearProgram
from openeng.optimization.solution import NOT_SOLVED, SOLVED_STATUSES, OptimizationSolution
from openeng.optimization.solvers import _minimize, _solve_linear

logger = logging.getLogger(__name__)

SolverChoice = Literal['highs', 'slsqp']
Sense = Literal['<=', '>=', '==']

_SOLVER_ALIASES = {
    'highs': 'highs',
    'glpk': 'highs',
    'slsqp': 'slsqp',
    'ipopt': 'slsqp',
}


@dataclass(frozen=True)
class Variable:
    """A named decision variable with bounds and a starting value."""
    name: str
    lb: float
    ub: float
    start: float


@dataclass(frozen=True)
class LinearConstraint:
    coeffs: dict[str, float]
    sense: str
    rhs: float


class Model:
    """
    Optimization model with named variables.

    Args:
        solver: 'highs' (linear only), 'slsqp' (nonlinear), or None to
                pick HiGHS when the model is linear and SLSQP otherwise
        silent: If False, log a summary after each optimize() at INFO
    """

    def __init__(self, solver: SolverChoice | None = None, silent: bool = True):
        self._solver = solver
        self._silent = silent
        self._variables: dict[str, Variable] = {}
        self._linear: list[LinearConstraint] = []
        self._nonlinear: list[Callable[[dict[str, float]], Any]] = []
        self._objective: dict[str, float] | Callable[[dict[str, float]], float] = {}
        self._sense = 'min'
        self._solution: OptimizationSolution | None = None

    # ─── building ─────────────────────────────────────────────────

    def add_variable(
        self,
        name: str,
        lb: float = -np.inf,
        ub: float = np.inf,
        start: float = 0.0,
    ) -> str:
        """Add a variable; returns its name."""
        if name in self._variables:
            raise ValidationError(f"Variable {name!r} already defined")
        lb = -np.inf if lb is None else float(lb)
        ub = np.inf if ub is None else float(ub)
        if lb > ub:
            raise ValidationError(f"Variable {name!r}: lb={lb} > ub={ub}")
        self._variables[name] = Variable(name, lb, ub, float(start))
        self._solution = None
        return name

    def _check_coeffs(self, coeffs: dict[str, float], what: str) -> dict[str, float]:
        unknown = [k for k in coeffs if k not in self._variables]
        if unknown:
            raise ValidationError(f"{what}: unknown variables {unknown}")
        return {k: float(v) for k, v in coeffs.items()}

    def add_constraint(self, coeffs: dict[str, float], sense: Sense, rhs: float) -> int:
        """Add a linear row: sum(coeffs[v] * v) <sense> rhs. Returns its index."""
        check_option(sense, ('<=', '>=', '=='), 'constraint sense')
        self._linear.append(
            LinearConstraint(self._check_coeffs(coeffs, 'constraint'), sense, float(rhs))
        )
        self._solution = None
        return len(self._linear) - 1

    def add_nonlinear_constraint(self, g: Callable[[dict[str, float]], Any]) -> None:
        """Add a nonlinear constraint g(values) <= 0."""
        if not callable(g):
            raise ValidationError(f"g: expected callable, got {type(g).__name__}")
        if self._solver == 'highs':
            raise ValidationError("The 'highs' solver does not accept nonlinear constraints")
        self._nonlinear.append(g)
        self._solution = None

    def set_objective(
        self,
        objective: dict[str, float] | Callable[[dict[str, float]], float],
        sense: Literal['min', 'max'] = 'min',
    ) -> None:
        """Set a linear objective (coefficient dict) or a nonlinear one (callable)."""
        self._sense = check_option(sense, ('min', 'max'), 'objective sense')
        if callable(objective):
            if self._solver == 'highs':
                raise ValidationError("The 'highs' solver requires a linear objective")
            self._objective = objective
        else:
            self._objective = self._check_coeffs(dict(objective), 'objective')
        self._solution = None

    # ─── solving ──────────────────────────────────────────────────

    @property
    def variable_names(self) -> list[str]:
        return list(self._variables)

    @property
    def is_linear(self) -> bool:
        return not callable(self._objective) and not self._nonlinear

    def _row(self, coeffs: dict[str, float]) -> np.ndarray:
        names = self.variable_names
        row = np.zeros(len(names))
        for k, v in coeffs.items():
            row[names.index(k)] = v
        return row

    def _linear_rows(self) -> tuple[np.ndarray | None, np.ndarray | None, np.ndarray | None, np.ndarray | None]:
        ub_rows, ub_rhs, eq_rows, eq_rhs = [], [], [], []
        for con in self._linear:
            row = self._row(con.coeffs)
            if con.sense == '<=':
                ub_rows.append(row)
                ub_rhs.append(con.rhs)
            elif con.sense == '>=':
                ub_rows.append(-row)
                ub_rhs.append(-con.rhs)
            else:
                eq_rows.append(row)
                eq_rhs.append(con.rhs)
        A_ub = np.array(ub_rows) if ub_rows else None
        b_ub = np.array(ub_rhs) if ub_rows else None
        A_eq = np.array(eq_rows) if eq_rows else None
        b_eq = np.array(eq_rhs) if eq_rows else None
        return A_ub, b_ub, A_eq, b_eq

    def _as_dict(self, x: np.ndarray) -> dict[str, float]:
        return dict(zip(self.variable_names, (float(v) for v in x)))

    def optimize(self) -> OptimizationSolution:
        """Solve the model. The outcome is read through value() and friends."""
        if not self._variables:
            raise ValidationError("Model has no variables")

        solver = self._solver or ('highs' if self.is_linear else 'slsqp')
        maximize = self._sense == 'max'
        A_ub, b_ub, A_eq, b_eq = self._linear_rows()
        lb = np.array([v.lb for v in self._variables.values()])
        ub = np.array([v.ub for v in self._variables.values()])

        if solver == 'highs':
            problem = LinearProgram.from_arrays(
                self._row(self._objective), A_ub, b_ub, lb, ub, A_eq=A_eq, b_eq=b_eq,
            )
            solution = _solve_linear(problem, maximize=maximize)
        else:
            if callable(self._objective):
                fn = self._objective
                f = lambda x: float(fn(self._as_dict(x)))
            else:
                c = self._row(self._objective)
                f = lambda x: float(c @ x)

            constraints = [(lambda x, g=g: g(self._as_dict(x))) for g in self._nonlinear]
            if A_ub is not None:
                constraints.append(lambda x: A_ub @ x - b_ub)
            equalities = [lambda x: A_eq @ x - b_eq] if A_eq is not None else None
            bounds = [
                (None if np.isneginf(v.lb) else v.lb, None if np.isposinf(v.ub) else v.ub)
                for v in self._variables.values()
            ]
            x0 = np.array([v.start for v in self._variables.values()])
            solution = _minimize(
                f, x0,
                constraints=constraints,
                equalities=equalities,
                bounds=bounds,
                method='SLSQP',
                maximize=maximize,
            )

        self._solution = solution
        if not self._silent:
            logger.info(
                "Model solved with %s: status=%s, objective=%s",
                solution.backend_name, solution.status, solution.objective,
            )
        return solution

    # ─── results ──────────────────────────────────────────────────

    def _require_solution(self) -> OptimizationSolution:
        if self._solution is None:
            raise RuntimeError("Model has not been optimized; call optimize() first")
        return self._solution

    @property
    def termination_status(self) -> str:
        if self._solution is None:
            return NOT_SOLVED
        return self._solution.status

    @property
    def objective_value(self) -> float:
        solution = self._require_solution()
        if solution.objective is None:
            raise RuntimeError(f"No objective value: termination status is {solution.status!r}")
        return solution.objective

    @property
    def has_values(self) -> bool:
        """True once optimize() has produced a point (even a non-optimal one)."""
        return self._solution is not None and self._solution.x is not None

    def value(self, name: str) -> float:
        """Optimal value of a variable."""
        solution = self._require_solution()
        if name not in self._variables:
            raise KeyError(f"Unknown variable {name!r}")
        if solution.x is None:
            raise RuntimeError(f"No solution point: termination status is {solution.status!r}")
        return float(solution.x[self.variable_names.index(name)])

    def dual(self, con: int) -> float:
        """
        Lagrange multiplier of a linear constraint, in minimization form.

        The derivative of the minimized objective (the objective itself
        for 'min', its negation for 'max') with respect to the constraint's
        right-hand side.

        Args:
            con: Index returned by add_constraint()

        Raises:
            IndexError: If con is not a linear constraint index
            RuntimeError: If the model was not solved to optimality by HiGHS
        """
        if not 0 <= con < len(self._linear):
            raise IndexError(f"Constraint index {con} out of range (0..{len(self._linear) - 1})")
        solution = self._require_solution()
        if 'ineqlin_marginals' not in solution.info:
            raise RuntimeError(
                f"No duals: needs an optimal HiGHS solve, got status {solution.status!r} "
                f"from {solution.backend_name}"
            )

        # position of the row within A_ub or A_eq, as laid out by _linear_rows()
        target = self._linear[con]
        same_kind = [
            c for c in self._linear[:con]
            if (c.sense == '==') == (target.sense == '==')
        ]
        pos = len(same_kind)
        if target.sense == '==':
            return float(solution.info['eqlin_marginals'][pos])
        marginal = float(solution.info['ineqlin_marginals'][pos])
        # '>=' rows are stored negated
        return -marginal if target.sense == '>=' else marginal

    def shadow_price(self, con: int) -> float:
        """
        Change in the objective per unit increase of a constraint's rhs.

        Example:
            max x + 2y  s.t.  x + y <= 4  ->  shadow_price = 2.0
        """
        d = self.dual(con)
        return -d if self._sense == 'max' else d

    def __repr__(self) -> str:
        return (
            f"Model(solver={self._solver!r}, variables={len(self._variables)}, "
            f"constraints={len(self._linear) + len(self._nonlinear)}, "
            f"status={self.termination_status!r})"
        )


def create_model(solver: str | None = None, silent: bool = True) -> Model:
    """
    Create an optimization model.

    Args:
        solver: None (auto), 'highs' or 'slsqp'. 'glpk' and 'ipopt' are
                accepted as aliases for 'highs' and 'slsqp'.
        silent: Suppress the post-solve log summary

    Raises:
        ValidationError: If solver is unknown
    """
    if solver is not None:
        check_option(solver.lower(), _SOLVER_ALIASES, 'solver')
        solver = _SOLVER_ALIASES[solver.lower()]
    return Model(solver=solver, silent=silent)


def create_lp_model(silent: bool = True) -> Model:
    """Model restricted to linear objectives and constraints (HiGHS)."""
    return create_model('highs', silent=silent)


def create_nlp_model(silent: bool = True) -> Model:
    """Model for nonlinear objectives and constraints (SLSQP)."""
    return create_model('slsqp', silent=silent)


def get_solution(model: Model) -> dict[str, float]:
    """
    Variable values of a solved model, keyed by name.

    Warns with RuntimeWarning when the termination status is not optimal
    (or locally solved). Values are NaN when the solver produced no point,
    e.g. for an infeasible model.
    """
    status = model.termination_status
    if status not in SOLVED_STATUSES:
        warnings.warn(
            f"Optimization did not reach an optimum: {status}",
            RuntimeWarning,
            stacklevel=2,
        )
    if not model.has_values:
        return {name: float('nan') for name in model.variable_names}
    return {name: model.value(name) for name in model.variable_names}


def get_objective(model: Model) -> float:
    """Objective value of a solved model."""
    return model.objective_value


