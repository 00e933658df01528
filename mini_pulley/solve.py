# mini_pulley/solve.py
"""
SOLVE: The One-Call Analysis Pipeline
=====================================

    SystemState
        │  build_graph          (route every rope over the pulleys)
        │  validate_graph       → StructuralError
        │  build_equation_system
        │  validate_equation_system → RankError
        │  solve_linear_system  → NumericError
        │  validate_solution    (warnings only)
        ▼
    SolverResult

Each stage is a pure function of its inputs; nothing is cached between
calls, so independent solves can run concurrently. Failures are raised as
AnalysisError subclasses inside the pipeline and converted into a
``solved=False`` result at this boundary. ``solve`` never raises for a bad
system.
"""

import logging

from .checks import check_physics_constraints, validate_solution
from .config import DEFAULT_CONFIG, SolverConfig
from .equations import build_equation_system, format_equation_system, require_valid_equations
from .graph import build_graph, require_valid_graph
from .kernel.solve import AnalysisError, NumericError, solve_linear_system
from .model import SystemState
from .results import SolverResult, assemble_result, error_result

logger = logging.getLogger(__name__)


def solve(system: SystemState, config: SolverConfig = DEFAULT_CONFIG) -> SolverResult:
    """
    Static-equilibrium analysis of a pulley system.

    Parameters:
    -----------
    system : SystemState
        Immutable component snapshot plus gravity
    config : SolverConfig
        Tolerances and optional formulations

    Returns:
    --------
    SolverResult
        ``solved=True`` with tensions, spring forces, reactions and rope
        analysis; or ``solved=False`` with empty maps and the cause in
        ``error``.
    """
    logger.debug("Solve started: %d components, g=%g", len(system.components), system.gravity)
    try:
        graph = require_valid_graph(build_graph(system, config), system)

        eq = require_valid_equations(build_equation_system(graph, system, config))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Equation system:\n%s", format_equation_system(eq))

        linear = solve_linear_system(eq.A, eq.b, cond_limit=config.cond_limit)
        if not linear.solved:
            raise NumericError(f"Solver failed: {linear.error}")

    except AnalysisError as exc:
        logger.warning("Solve failed: %s", exc)
        return error_result(str(exc))

    warnings = list(validate_solution(linear.solution, eq.unknowns).warnings)
    if config.physics_advisories:
        advisories = check_physics_constraints(system, graph, config.vertical_tolerance_deg)
        warnings += [a.message for a in advisories if a.severity == "warning"]

    result = assemble_result(system, graph, eq, linear.solution, warnings)
    logger.info("Solve finished (%s): %d chain tension(s), %d warning(s)",
                linear.method, len(set(eq.chains.values())), len(warnings))
    return result
