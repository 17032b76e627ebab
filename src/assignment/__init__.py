"""
Rectangular linear assignment via the Munkres (Hungarian) algorithm.

Quick start:
    from src.assignment import solve_assignment, minimize
    solve_assignment([250, 400, 350, 400, 600, 350, 200, 400, 250], 3, 3)  # [1, 2, 0]
    minimize([[34, 26], [43, 10], [15, 93]])                                # [None, 1, 0]
"""

from src.assignment.config import SolverConfig, load_config
from src.assignment.cost_matrix import (
    CostMatrix,
    CostMatrixError,
    WorkingMatrix,
    normalize_orientation,
)
from src.assignment.munkres import MunkresInvariantError, MunkresStats
from src.assignment.solver import (
    AssignmentResult,
    HungarianSolver,
    ScipyLAPSolver,
    SolverStatus,
    assignment_cost,
    create_solver,
    minimize,
    solve_assignment,
)

__all__ = [
    "AssignmentResult",
    "CostMatrix",
    "CostMatrixError",
    "HungarianSolver",
    "MunkresInvariantError",
    "MunkresStats",
    "ScipyLAPSolver",
    "SolverConfig",
    "SolverStatus",
    "WorkingMatrix",
    "assignment_cost",
    "create_solver",
    "load_config",
    "minimize",
    "normalize_orientation",
    "solve_assignment",
]
