"""
Kuhn-Munkres (Hungarian) algorithm on a working matrix with h ≤ w.

Steps per Munkres (1957), as run by munkres():
  Pre    : row-min subtraction (reduce_rows)
  Init   : greedily star one zero per row in a free column (star_initial_zeros)
  Verify : cover columns containing starred zeros; h covered → done
  Search : find the first uncovered zero in row-major order and prime it.
           starred zero in its row → cover row, uncover that star's column,
           search again. No star in its row → Augment.
  Augment: walk the alternating primed/starred path from the new prime,
           flip it (primes become stars, stars are dropped), clear all
           primes and covers → Verify
  Adjust : no uncovered zero → δ = min uncovered value; add δ to
           doubly-covered cells, subtract δ from uncovered cells → Search

Only exact zeros are tight, so the reduced matrix must hold integers. The
row-major scan order fixes which optimum is returned when several exist.

Marks are dense boolean arrays; all state lives in one MarkState per call.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


class MunkresInvariantError(AssertionError):
    """An internal invariant of the algorithm broke. Always a bug, never bad input."""


@dataclass
class MunkresStats:
    """Counters collected over one run."""

    phases: int = 0  # successful augmentations
    dual_adjustments: int = 0
    primes: int = 0


def _first(indices: np.ndarray) -> int | None:
    return int(indices[0]) if indices.size else None


# ─────────────────────────────────────────────────────────────────────────────
# Cover / mark state
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(eq=False)
class MarkState:
    """Stars, primes and covers for one solve.

    Attributes:
        stars: h×w, current partial matching (one star per row/column at most).
        primes: h×w, zeros primed during the current phase.
        row_cover: length h.
        col_cover: length w.
    """

    stars: np.ndarray
    primes: np.ndarray
    row_cover: np.ndarray
    col_cover: np.ndarray

    @classmethod
    def empty(cls, h: int, w: int) -> MarkState:
        return cls(
            stars=np.zeros((h, w), dtype=bool),
            primes=np.zeros((h, w), dtype=bool),
            row_cover=np.zeros(h, dtype=bool),
            col_cover=np.zeros(w, dtype=bool),
        )

    def star_in_row(self, i: int) -> int | None:
        return _first(np.flatnonzero(self.stars[i]))

    def star_in_col(self, j: int) -> int | None:
        return _first(np.flatnonzero(self.stars[:, j]))

    def prime_in_row(self, i: int) -> int | None:
        return _first(np.flatnonzero(self.primes[i]))

    def uncovered(self) -> np.ndarray:
        """h×w mask of cells whose row and column are both uncovered."""
        return ~self.row_cover[:, None] & ~self.col_cover[None, :]

    def cover_starred_columns(self) -> int:
        """Cover every column holding a star; return the number of covered columns."""
        self.col_cover |= self.stars.any(axis=0)
        return int(self.col_cover.sum())

    def reset_phase(self) -> None:
        self.primes[:] = False
        self.row_cover[:] = False
        self.col_cover[:] = False


# ─────────────────────────────────────────────────────────────────────────────
# Steps
# ─────────────────────────────────────────────────────────────────────────────


def reduce_rows(reduced: np.ndarray) -> None:
    """Subtract each row's minimum from that row, in place."""
    reduced -= reduced.min(axis=1, keepdims=True)


def star_initial_zeros(reduced: np.ndarray, state: MarkState) -> None:
    """Star the first zero of each row whose column is still free.

    Only column covers are used for bookkeeping here and they are cleared
    again before returning.
    """
    for i in range(reduced.shape[0]):
        for j in np.flatnonzero(reduced[i] == 0):
            if not state.col_cover[j]:
                state.stars[i, j] = True
                state.col_cover[j] = True
                break
    state.col_cover[:] = False


def find_uncovered_zero(reduced: np.ndarray, state: MarkState) -> tuple[int, int] | None:
    """First zero in an uncovered row and column, scanning row-major."""
    k = _first(np.flatnonzero(state.uncovered() & (reduced == 0)))
    if k is None:
        return None
    i, j = divmod(k, reduced.shape[1])
    return i, j


def adjust_duals(reduced: np.ndarray, state: MarkState):
    """Shift the reduced matrix by the smallest uncovered value δ; return δ.

    Equivalent to adding δ to every covered row and subtracting δ from every
    uncovered column, but applied only to the cells whose net change is
    non-zero so no entry overshoots its final value on the way.
    """
    uncovered = state.uncovered()
    if not uncovered.any():
        raise MunkresInvariantError("dual adjustment with every row or column covered")
    delta = reduced[uncovered].min()
    if delta <= 0:
        raise MunkresInvariantError(f"dual adjustment with non-positive delta {delta}")
    reduced[state.row_cover[:, None] & state.col_cover[None, :]] += delta
    reduced[uncovered] -= delta
    return delta


def augment_path(state: MarkState, i: int, j: int) -> list[tuple[int, int]]:
    """Flip the alternating path that starts at the primed zero (i, j).

    From each primed zero step to the starred zero in its column, then to the
    primed zero in that star's row, until a column has no star. Every cell on
    the path takes its prime bit as its new star bit, which grows the
    matching by exactly one.
    """
    path = [(i, j)]
    while True:
        _, col = path[-1]
        row = state.star_in_col(col)
        if row is None:
            break
        path.append((row, col))
        prime_col = state.prime_in_row(row)
        if prime_col is None:
            raise MunkresInvariantError(f"starred zero at ({row}, {col}) has no prime in its row")
        path.append((row, prime_col))

    for r, c in path:
        state.stars[r, c] = state.primes[r, c]
    return path


def check_invariants(reduced: np.ndarray, state: MarkState) -> None:
    """Raise MunkresInvariantError unless the reduced matrix and stars are consistent."""
    if (reduced < 0).any():
        i, j = np.argwhere(reduced < 0)[0]
        raise MunkresInvariantError(f"negative reduced cost {reduced[i, j]} at ({i}, {j})")
    if (state.stars.sum(axis=1) > 1).any() or (state.stars.sum(axis=0) > 1).any():
        raise MunkresInvariantError("stars do not form a matching")
    if (reduced[state.stars] != 0).any():
        raise MunkresInvariantError("starred cell with non-zero reduced cost")


# ─────────────────────────────────────────────────────────────────────────────
# Main loop
# ─────────────────────────────────────────────────────────────────────────────


def munkres(costs: np.ndarray, check: bool = False) -> tuple[np.ndarray, MunkresStats]:
    """Run Munkres on an h×w integer matrix with h ≤ w.

    Args:
        costs: Non-negative integer costs. Not modified.
        check: Verify the reduced-cost and matching invariants after every phase.

    Returns:
        (stars, stats): the h×w boolean star matrix, with exactly one star per
        row, and the run counters.
    """
    h, w = costs.shape
    if h > w:
        raise ValueError(f"munkres needs h <= w, got {h}×{w}; normalize orientation first")

    stats = MunkresStats()
    state = MarkState.empty(h, w)
    if h == 0:
        return state.stars, stats

    reduced = costs.copy()
    reduce_rows(reduced)
    star_initial_zeros(reduced, state)

    verify = True
    while True:
        if verify and state.cover_starred_columns() == h:
            return state.stars, stats

        zero = find_uncovered_zero(reduced, state)
        if zero is None:
            adjust_duals(reduced, state)
            stats.dual_adjustments += 1
            verify = False
            continue

        i, j = zero
        state.primes[i, j] = True
        stats.primes += 1
        star_col = state.star_in_row(i)
        if star_col is not None:
            state.row_cover[i] = True
            state.col_cover[star_col] = False
            verify = False
            continue

        augment_path(state, i, j)
        state.reset_phase()
        stats.phases += 1
        if check:
            check_invariants(reduced, state)
        verify = True
