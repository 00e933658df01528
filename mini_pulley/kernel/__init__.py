# mini_pulley/kernel - Linear-algebra core
"""
KERNEL: THE COMPONENT-AGNOSTIC FOUNDATION
=========================================

The kernel knows nothing about pulleys or ropes. It needs only:
- A way to map a physical unknown → column index (UnknownIndex)
- Sparse equation rows (EquationRow)
- A solver for the assembled dense system

The equation BUILDER (mini_pulley.equations) is domain-specific,
but the plumbing here is universal.
"""

from .unknowns import (
    Unknown,
    Tension,
    SpringForce,
    DisplacementX,
    DisplacementY,
    UnknownIndex,
)
from .assemble import EquationRow, EquationSystem, assemble_rows
from .solve import (
    AnalysisError,
    RankError,
    NumericError,
    LinearSolution,
    solve_linear_system,
)

__all__ = [
    'Unknown', 'Tension', 'SpringForce', 'DisplacementX', 'DisplacementY', 'UnknownIndex',
    'EquationRow', 'EquationSystem', 'assemble_rows',
    'AnalysisError', 'RankError', 'NumericError', 'LinearSolution', 'solve_linear_system',
]
