"""
Optimization module.

Linear programming via HiGHS and nonlinear programming via
scipy.optimize.minimize, plus a small algebraic model builder.

Public API:
    solve_lp(c, A, b, lb, ub)                  - Minimize c @ x, A x <= b
    solve_nlp(f, x0, constraints, bounds)      - Constraints g(x) <= 0
    Model, create_model(solver)                - Named-variable builder
    create_lp_model(), create_nlp_model()
    get_solution(model), get_objective(model)
    Model.dual(con), Model.shadow_price(con)    - LP sensitivities (HiGHS)
"""

from openeng.optimization.design import LinearProgram
from openeng.optimization.solution import OptimizationParams, OptimizationSolution
from openeng.optimization.solvers import solve_lp, solve_nlp
from openeng.optimization.model import (
    Model,
    Variable,
    create_model,
    create_lp_model,
    create_nlp_model,
    get_solution,
    get_objective,
)

__all__ = [
    "solve_lp",
    "solve_nlp",
    "LinearProgram",
    "OptimizationParams",
    "OptimizationSolution",
    "Model",
    "Variable",
    "create_model",
    "create_lp_model",
    "create_nlp_model",
    "get_solution",
    "get_objective",
]
