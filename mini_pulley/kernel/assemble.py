# mini_pulley/kernel/assemble.py
"""
ASSEMBLY: Sparse Rows → Dense Equation System
=============================================

PURPOSE:
--------
Equation builders describe each equation as a sparse row:

    EquationRow(label="M1.y", coefficients={0: -1.0, 2: 0.7}, constant=-98.1)

meaning  -1.0·x0 + 0.7·x2 = -98.1. This module scatter-adds those rows into
a dense matrix A and right-hand side b.

DEGENERATE ROWS:
----------------
A row whose coefficients AND constant are all below a tolerance (1e-10)
says "0 = 0". It carries no information and would only add a zero row to A,
so it is dropped.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .unknowns import Unknown


@dataclass
class EquationRow:
    """One linear equation Σ coefficients[j]·x_j = constant."""
    label: str
    coefficients: Dict[int, float] = field(default_factory=dict)
    constant: float = 0.0

    def add(self, column: int, value: float) -> None:
        """Scatter-add a coefficient (several edges may share one unknown)."""
        self.coefficients[column] = self.coefficients.get(column, 0.0) + value

    def is_degenerate(self, tol: float = 1e-10) -> bool:
        if abs(self.constant) > tol:
            return False
        return all(abs(c) <= tol for c in self.coefficients.values())


@dataclass(frozen=True)
class EquationSystem:
    """
    Dense linear system A·x = b.

    Attributes:
    -----------
    A : np.ndarray
        Coefficient matrix, shape (n_equations, n_unknowns)
    b : np.ndarray
        Constant vector, shape (n_equations,)
    unknowns : Tuple[Unknown, ...]
        Column identifiers, in column order
    row_labels : Tuple[str, ...]
        Which node/axis (or constraint) each row came from
    chains : Dict[str, str]
        rope id → chain root rope id
    """
    A: np.ndarray
    b: np.ndarray
    unknowns: Tuple[Unknown, ...]
    row_labels: Tuple[str, ...] = ()
    chains: Dict[str, str] = field(default_factory=dict)

    @property
    def n_equations(self) -> int:
        return int(self.A.shape[0])

    @property
    def n_unknowns(self) -> int:
        return len(self.unknowns)

    @property
    def labels(self) -> List[str]:
        return [u.label for u in self.unknowns]


def assemble_rows(
    n_unknowns: int,
    rows: Sequence[EquationRow],
    tol: float = 1e-10,
) -> Tuple[np.ndarray, np.ndarray, List[str]]:
    """
    Scatter sparse rows into (A, b), dropping degenerate rows.

    Returns:
    --------
    A : np.ndarray, shape (n_kept, n_unknowns)
    b : np.ndarray, shape (n_kept,)
    labels : labels of the kept rows
    """
    kept = [row for row in rows if not row.is_degenerate(tol)]

    A = np.zeros((len(kept), n_unknowns), dtype=float)
    b = np.zeros(len(kept), dtype=float)
    for i, row in enumerate(kept):
        for column, value in row.coefficients.items():
            assert 0 <= column < n_unknowns, \
                f"Row {row.label}: column {column} outside 0..{n_unknowns - 1}"
            A[i, column] += value
        b[i] = row.constant

    return A, b, [row.label for row in kept]
