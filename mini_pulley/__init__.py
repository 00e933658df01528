# mini_pulley - Static analysis of planar pulley systems
"""
MINI-PULLEY: Static Equilibrium of Ropes, Pulleys and Springs
=============================================================

This package provides:
- Rope routing over circular pulleys (tangent points, wrap arcs)
- A typed node/edge graph of the mechanical network
- Force-equilibrium equations with one tension per rope chain
- Exact / least-squares linear solve with failure capture
- Result assembly with plausibility warnings

ARCHITECTURE:
-------------
    kernel/         Component-agnostic core (unknown index, assembly, solve)
    model.py        Components (Anchor, Pulley, Mass, Rope, ...) and SystemState
    geometry.py     Circle tangents, arcs, line/circle intersection
    routing.py      Rope router (line/arc segments)
    graph.py        Graph builder + structural validation
    equations.py    Equation builder (rope chains, equilibrium rows)
    checks.py       Solution and layout plausibility checks
    results.py      SolverResult, reactions, mechanical advantage, tables
    solve.py        solve(system): the whole pipeline in one call
    config.py       SolverConfig defaults
"""

from .config import SolverConfig, DEFAULT_CONFIG
from .model import (
    Point,
    Axis,
    Component,
    Anchor,
    Pulley,
    PulleyBecket,
    SpringPulley,
    SpringPulleyBecket,
    Mass,
    Rope,
    Spring,
    ForceVector,
    SystemState,
)
from .kernel import AnalysisError, RankError, NumericError
from .graph import Graph, build_graph, validate_graph, StructuralError
from .results import SolverResult, RopeAnalysis
from .solve import solve

__version__ = "0.1.0"

__all__ = [
    'SolverConfig', 'DEFAULT_CONFIG',
    'Point', 'Axis', 'Component', 'Anchor', 'Pulley', 'PulleyBecket', 'SpringPulley',
    'SpringPulleyBecket', 'Mass', 'Rope', 'Spring', 'ForceVector', 'SystemState',
    'AnalysisError', 'RankError', 'NumericError', 'StructuralError',
    'Graph', 'build_graph', 'validate_graph',
    'SolverResult', 'RopeAnalysis', 'solve',
]
