"""
Public entry points and solver classes for the linear assignment problem.

Given an H×W matrix of non-negative integer costs, pick at most one column
per row, never reusing a column, so that min(H, W) rows are matched at the
lowest total cost. Element i of the result is row i's column, or None when
H > W and row i is left out.

Solver menu
───────────
  HungarianSolver   Munkres (star/prime/cover) on exact integers   ← DEFAULT
                    deterministic: fixed row-major tie-breaking
  ScipyLAPSolver    scipy.optimize.linear_sum_assignment
                    independent reference; same optimal cost, its own
                    choice among tied optima

Both share the same interface (solve / solve_with_diagnostics) and keep
cumulative counters. The module-level functions solve_assignment() and
minimize() run the Munkres core without any solver object.

Contract violations (length mismatch, negative or non-integer costs) raise
CostMatrixError before any work is done.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum, auto

import numpy as np

from src.assignment.config import SolverConfig
from src.assignment.cost_matrix import CostMatrix, CostMatrixError, normalize_orientation
from src.assignment.munkres import MunkresStats, munkres

logger = logging.getLogger(__name__)

_FLOAT_EXACT_MAX: int = 2**53  # largest range float64 represents every integer in


# ─────────────────────────────────────────────────────────────────────────────
# Public types
# ─────────────────────────────────────────────────────────────────────────────


class SolverStatus(Enum):
    """Outcome of a solve."""

    OPTIMAL = auto()  # min(H, W) rows matched at minimum cost
    PARTIAL = auto()  # H > W: optimal, but some rows necessarily unassigned
    EMPTY = auto()  # H == 0 or W == 0, nothing to match


@dataclass
class AssignmentResult:
    """Unified output of every solver variant.

    assignment[i] is the column assigned to row i, or None.
    """

    assignment: list[int | None]
    status: SolverStatus
    total_cost: int
    solve_time_ms: float
    transposed: bool = False
    phases: int = 0
    dual_adjustments: int = 0

    @property
    def pairs(self) -> list[tuple[int, int]]:
        """(row, column) for every assigned row, in row order."""
        return [(i, j) for i, j in enumerate(self.assignment) if j is not None]

    @property
    def n_assigned(self) -> int:
        return sum(1 for j in self.assignment if j is not None)


# ─────────────────────────────────────────────────────────────────────────────
# Private helpers (shared by all solvers)
# ─────────────────────────────────────────────────────────────────────────────


def _as_cost_matrix(matrix) -> CostMatrix:
    return matrix if isinstance(matrix, CostMatrix) else CostMatrix.from_rows(matrix)


def _run_munkres(
    matrix: CostMatrix,
    check: bool = False,
) -> tuple[list[int | None], bool, MunkresStats]:
    """Orient, solve and map stars back to caller rows and columns."""
    assignment: list[int | None] = [None] * matrix.height
    if matrix.is_empty:
        return assignment, False, MunkresStats()

    working = normalize_orientation(matrix)
    stars, stats = munkres(working.values, check=check)
    for i, j in np.argwhere(stars):
        row, col = working.to_original(int(i), int(j))
        assignment[row] = col
    return assignment, working.transposed, stats


def _status(matrix: CostMatrix, assignment: list[int | None]) -> SolverStatus:
    if matrix.is_empty:
        return SolverStatus.EMPTY
    if any(j is None for j in assignment):
        return SolverStatus.PARTIAL
    return SolverStatus.OPTIMAL


def assignment_cost(matrix, assignment: list[int | None]) -> int:
    """Total cost of ``assignment`` against ``matrix``; None rows cost nothing.

    Args:
        matrix: A CostMatrix, or 2-D nested rows / numpy array.
        assignment: One entry per row: a column index or None.

    Raises:
        CostMatrixError: if the assignment has the wrong length, an
            out-of-range column, or reuses a column.
    """
    matrix = _as_cost_matrix(matrix)
    if len(assignment) != matrix.height:
        raise CostMatrixError(
            f"assignment has {len(assignment)} entries, matrix has {matrix.height} rows"
        )
    used: set[int] = set()
    total = 0
    for i, j in enumerate(assignment):
        if j is None:
            continue
        if not 0 <= j < matrix.width:
            raise CostMatrixError(f"row {i} assigned to column {j}, width is {matrix.width}")
        if j in used:
            raise CostMatrixError(f"column {j} assigned more than once")
        used.add(j)
        total += int(matrix[i, j])
    return total


# ─────────────────────────────────────────────────────────────────────────────
# Module-level entry points
# ─────────────────────────────────────────────────────────────────────────────


def solve_assignment(costs, height: int, width: int) -> list[int | None]:
    """Minimum-cost assignment for a flat row-major ``height``×``width`` matrix.

    >>> solve_assignment([400, 150, 400, 1, 400, 450, 600, 2, 300, 225, 300, 3], 3, 4)
    [1, 3, 0]
    """
    assignment, _, _ = _run_munkres(CostMatrix.from_flat(costs, height, width))
    return assignment


def minimize(matrix) -> list[int | None]:
    """Minimum-cost assignment for a 2-D matrix (nested rows or numpy array).

    >>> minimize([[1, 2, 1], [4, 5, 6], [7, 8, 9]])
    [2, 1, 0]
    """
    assignment, _, _ = _run_munkres(_as_cost_matrix(matrix))
    return assignment


# ─────────────────────────────────────────────────────────────────────────────
# Solver 1 — HungarianSolver
# ─────────────────────────────────────────────────────────────────────────────


class HungarianSolver:
    """Munkres' algorithm on exact integer costs.

    O(min(H, W)·H·W): at most min(H, W) augmentations, each bounded by
    O(H·W) scanning. Wide or tall matrices are solved directly, no padding;
    tall ones run on their transpose.
    """

    def __init__(self, solver_config: SolverConfig | None = None) -> None:
        self.config = solver_config or SolverConfig()
        self.total_solves: int = 0
        self.total_solve_time_ms: float = 0.0

    def solve(self, costs, height: int, width: int) -> list[int | None]:
        """Same contract as solve_assignment()."""

        return self.solve_with_diagnostics(costs, height, width).assignment

    def solve_with_diagnostics(self, costs, height: int, width: int) -> AssignmentResult:
        """Solve a flat row-major matrix and report cost, timing and step counts."""

        return self.solve_matrix(CostMatrix.from_flat(costs, height, width))

    def solve_matrix(self, matrix) -> AssignmentResult:
        """Solve a CostMatrix or 2-D nested rows."""

        matrix = _as_cost_matrix(matrix)
        t0 = time.perf_counter()
        assignment, transposed, stats = _run_munkres(matrix, check=self.config.check_invariants)
        ms = (time.perf_counter() - t0) * 1e3

        self.total_solves += 1
        self.total_solve_time_ms += ms
        logger.debug(
            "munkres %dx%d transposed=%s phases=%d dual_adjustments=%d in %.2f ms",
            matrix.height,
            matrix.width,
            transposed,
            stats.phases,
            stats.dual_adjustments,
            ms,
        )
        return AssignmentResult(
            assignment=assignment,
            status=_status(matrix, assignment),
            total_cost=assignment_cost(matrix, assignment),
            solve_time_ms=ms,
            transposed=transposed,
            phases=stats.phases,
            dual_adjustments=stats.dual_adjustments,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Solver 2 — ScipyLAPSolver
# ─────────────────────────────────────────────────────────────────────────────


class ScipyLAPSolver:
    """Reference solver: scipy.optimize.linear_sum_assignment.

    scipy solves in floating point, so costs must stay within the range
    where float64 holds every integer exactly. Use it to cross-check optimal
    costs; tied optima may be resolved differently from HungarianSolver.
    """

    def __init__(self, solver_config: SolverConfig | None = None) -> None:
        self.config = solver_config or SolverConfig()
        self.total_solves: int = 0
        self.total_solve_time_ms: float = 0.0

    def solve(self, costs, height: int, width: int) -> list[int | None]:
        """Same contract as solve_assignment()."""

        return self.solve_with_diagnostics(costs, height, width).assignment

    def solve_with_diagnostics(self, costs, height: int, width: int) -> AssignmentResult:
        """Solve a flat row-major matrix and report cost and timing."""

        return self.solve_matrix(CostMatrix.from_flat(costs, height, width))

    def solve_matrix(self, matrix) -> AssignmentResult:
        """Solve a CostMatrix or 2-D nested rows."""

        from scipy.optimize import linear_sum_assignment  # type: ignore # pylint: disable=import-error, import-outside-toplevel

        matrix = _as_cost_matrix(matrix)
        t0 = time.perf_counter()
        assignment: list[int | None] = [None] * matrix.height
        if not matrix.is_empty:
            if max(int(v) for v in matrix.values) > _FLOAT_EXACT_MAX:
                raise CostMatrixError(
                    f"costs above {_FLOAT_EXACT_MAX} cannot be solved exactly by scipy"
                )
            cost = matrix.as_array().astype(np.float64)
            row_ind, col_ind = linear_sum_assignment(cost)
            for r, c in zip(row_ind, col_ind):
                assignment[int(r)] = int(c)
        ms = (time.perf_counter() - t0) * 1e3

        self.total_solves += 1
        self.total_solve_time_ms += ms
        return AssignmentResult(
            assignment=assignment,
            status=_status(matrix, assignment),
            total_cost=assignment_cost(matrix, assignment),
            solve_time_ms=ms,
        )


def create_solver(
    strategy: str | None = None,
    solver_config: SolverConfig | None = None,
) -> HungarianSolver | ScipyLAPSolver:
    """Instantiate and return the requested solver.

    strategy options
    ─────────────────
    "hungarian" → HungarianSolver   exact integers, deterministic tie-breaking
    "scipy"     → ScipyLAPSolver    reference, requires scipy

    With no strategy, solver_config.backend decides.
    """
    solver_config = solver_config or SolverConfig()
    strategy = strategy or solver_config.backend
    if strategy == "hungarian":
        return HungarianSolver(solver_config)
    if strategy == "scipy":
        return ScipyLAPSolver(solver_config)
    raise ValueError(f"Unknown strategy {strategy!r}. Valid options: 'hungarian', 'scipy'.")
