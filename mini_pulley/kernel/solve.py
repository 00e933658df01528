# mini_pulley/kernel/solve.py
"""Linear system solver: exact LU solve, normal-equation least squares, failure capture."""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)


class AnalysisError(RuntimeError):
    """Base class for failures that abort a solve."""
    pass


class RankError(AnalysisError):
    """No equations, mismatched rows, or fewer equations than unknowns."""
    pass


class NumericError(AnalysisError):
    """Singular / ill-conditioned matrix or any other numerical failure."""
    pass


@dataclass(frozen=True)
class LinearSolution:
    solution: np.ndarray
    solved: bool
    error: Optional[str] = None
    method: Optional[str] = None  # "exact" | "least_squares"


def _failed(message: str) -> LinearSolution:
    return LinearSolution(solution=np.zeros(0), solved=False, error=message)


def solve_linear_system(
    A: np.ndarray,
    b: np.ndarray,
    cond_limit: float = 1e12,
) -> LinearSolution:
    """
    Solve A·x = b.

    - square (m == n):      x = solve(A, b)          (LU factorisation)
    - overdetermined (m>n): x = solve(AᵀA, Aᵀb)      (normal equations)
    - underdetermined:      not solvable uniquely

    Args:
        A: Coefficient matrix (m x n)
        b: Constant vector (m,)
        cond_limit: Max condition number of A itself. The normal equations
            square it, so A is checked rather than AᵀA.

    Returns:
        LinearSolution. Numerical failures never raise; they come back as
        ``solved=False`` with the error text.
    """
    try:
        A = np.atleast_2d(np.asarray(A, dtype=float))
        b = np.asarray(b, dtype=float).reshape(-1)

        if A.size == 0 or A.shape[1] == 0:
            return _failed("Empty equation system")

        m, n = A.shape
        if b.shape[0] != m:
            return _failed(f"Constant vector has {b.shape[0]} entries for {m} equations")

        if m == n:
            M, rhs, method = A, b, "exact"
        elif m > n:
            M, rhs, method = A.T @ A, A.T @ b, "least_squares"
        else:
            return _failed("Underdetermined system cannot be solved uniquely")

        cond = np.linalg.cond(A)
        if not np.isfinite(cond) or cond > cond_limit:
            return _failed(f"Singular or ill-conditioned matrix (cond={cond:.2e})")

        x = np.linalg.solve(M, rhs)
        logger.debug("Linear solve (%s): %d equations, %d unknowns, cond=%.2e", method, m, n, cond)
        return LinearSolution(solution=x, solved=True, method=method)

    except (np.linalg.LinAlgError, ValueError, FloatingPointError) as exc:
        return _failed(str(exc) or type(exc).__name__)
