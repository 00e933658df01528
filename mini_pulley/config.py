# mini_pulley/config.py
"""
Solver configuration and defaults.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SolverConfig:
    """Tunable constants for graph building, routing and solving."""

    # Physics
    spring_pulley_mass: float = 0.5  # kg, self-mass of a spring-mounted pulley

    # Geometry
    becket_offset: float = 12.0  # gap between pulley rim and becket hook
    graze_tolerance: float = 1.1  # near-miss factor on pulley radius

    # Numerics
    degenerate_tol: float = 1e-10  # rows below this are dropped
    cond_limit: float = 1e12  # max condition number before NumericError

    # Optional formulations / diagnostics
    include_displacements: bool = False
    physics_advisories: bool = False
    vertical_tolerance_deg: float = 5.0


# Immutable default instance
DEFAULT_CONFIG = SolverConfig()
