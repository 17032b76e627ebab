"""
Cost matrix container, boundary validation and orientation handling.

Callers hand over costs as a flat row-major buffer plus (height, width), or
as nested rows. Everything is validated here, before the Munkres core ever
sees it: dimension mismatches, negative entries and non-integer element types
are rejected with CostMatrixError. Nothing is clamped or rounded.

The Munkres core expects a working matrix that is at least as wide as it is
tall. normalize_orientation() produces that shape and remembers whether the
input had to be transposed so results can be mapped back.

Usage:
    matrix = CostMatrix.from_flat([4, 1, 3, 2, 0, 5], height=2, width=3)
    matrix[1, 2]          # -> 5 (bounds-checked)
    working = normalize_orientation(matrix)
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass

import numpy as np


class CostMatrixError(ValueError):
    """Raised when a cost matrix or assignment violates the caller contract."""


def _check_dimension(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise CostMatrixError(f"{name} must be an integer, got {value!r}")
    value = int(value)
    if value < 0:
        raise CostMatrixError(f"{name} must be non-negative, got {value}")
    return value


def _as_integer_array(costs) -> np.ndarray:
    """Convert caller costs to a 1-D integer array, without losing precision.

    numpy integer dtypes are kept as-is. Python ints that do not fit a
    fixed-width dtype arrive as an object array and are kept that way, after
    checking every element is an integer.
    """
    try:
        arr = np.array(costs)  # always a copy: the caller's buffer is never touched
    except ValueError as exc:
        raise CostMatrixError(f"costs cannot be read as an integer array: {exc}") from exc
    if arr.size == 0:
        return arr.astype(np.int64).reshape(-1)

    kind = arr.dtype.kind
    if kind == "b":
        arr = arr.astype(np.int64)
    elif kind == "O":
        for value in arr.reshape(-1):
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise CostMatrixError(
                    f"costs must be integers, got {type(value).__name__} value {value!r}"
                )
    elif kind not in ("i", "u"):
        raise CostMatrixError(
            f"costs must have an integer type, got dtype {arr.dtype} "
            "(floating-point costs are not supported)"
        )
    return arr


@dataclass(frozen=True, eq=False)
class CostMatrix:
    """Validated H×W cost matrix stored as a flat row-major buffer.

    Indexing with ``matrix[i, j]`` is bounds-checked so that a wrong height or
    width shows up as an IndexError instead of silently reading a neighbour
    row. Instances are immutable; ``as_array()`` hands out an owned copy.

    Attributes:
        values: 1-D integer array of length height * width.
        height: Number of rows (agents).
        width: Number of columns (tasks).
    """

    values: np.ndarray
    height: int
    width: int

    @classmethod
    def from_flat(cls, costs, height: int, width: int) -> CostMatrix:
        """Build from a flat row-major sequence, validating every contract rule."""
        height = _check_dimension("height", height)
        width = _check_dimension("width", width)

        values = _as_integer_array(costs)
        if values.ndim != 1:
            raise CostMatrixError(
                f"costs must be a flat sequence, got an array of shape {values.shape}"
            )
        if values.size != height * width:
            raise CostMatrixError(
                f"costs has {values.size} entries but height*width = "
                f"{height}*{width} = {height * width}"
            )

        negative = np.flatnonzero(values < 0)
        if negative.size:
            k = int(negative[0])
            i, j = divmod(k, width)
            raise CostMatrixError(
                f"costs must be non-negative; found {values[k]} at row {i}, column {j}"
            )

        values.setflags(write=False)
        return cls(values=values, height=height, width=width)

    @classmethod
    def from_rows(cls, rows) -> CostMatrix:
        """Build from a 2-D nested sequence or 2-D numpy array."""
        if isinstance(rows, np.ndarray):
            if rows.ndim != 2:
                raise CostMatrixError(f"expected a 2-D matrix, got shape {rows.shape}")
            height, width = rows.shape
            return cls.from_flat(rows.reshape(-1), height, width)

        rows = [list(row) for row in rows]
        height = len(rows)
        width = len(rows[0]) if rows else 0
        for i, row in enumerate(rows):
            if len(row) != width:
                raise CostMatrixError(
                    f"row {i} has {len(row)} entries, expected {width} (ragged matrix)"
                )
        flat = [value for row in rows for value in row]
        return cls.from_flat(flat, height, width)

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width

    @property
    def is_empty(self) -> bool:
        return self.height == 0 or self.width == 0

    def __getitem__(self, index: tuple[int, int]):
        i, j = index
        if not 0 <= i < self.height:
            raise IndexError(f"row {i} out of range for height {self.height}")
        if not 0 <= j < self.width:
            raise IndexError(f"column {j} out of range for width {self.width}")
        return self.values[i * self.width + j]

    def as_array(self) -> np.ndarray:
        """Owned, writable 2-D copy of the costs."""
        return self.values.reshape(self.height, self.width).copy()


@dataclass(eq=False)
class WorkingMatrix:
    """The matrix the Munkres core actually runs on (h ≤ w).

    When the input is taller than it is wide it is transposed with its
    column order reversed: ``values[i, j] = costs[height - 1 - j, i]``.

    Attributes:
        values: Owned h×w copy of the (possibly transposed) costs.
        transposed: True if the input had width < height.
        source_height: Height of the caller's matrix, needed to undo the reversal.
    """

    values: np.ndarray
    transposed: bool
    source_height: int

    @property
    def h(self) -> int:
        return self.values.shape[0]

    @property
    def w(self) -> int:
        return self.values.shape[1]

    def to_original(self, i: int, j: int) -> tuple[int, int]:
        """Map a working (row, column) cell back to the caller's (row, column)."""
        if self.transposed:
            return self.source_height - 1 - j, i
        return i, j


def normalize_orientation(matrix: CostMatrix) -> WorkingMatrix:
    """Return a working copy of ``matrix`` with at least as many columns as rows."""
    costs = matrix.as_array()
    if matrix.width >= matrix.height:
        return WorkingMatrix(values=costs, transposed=False, source_height=matrix.height)
    working = np.ascontiguousarray(costs[::-1, :].T)
    return WorkingMatrix(values=working, transposed=True, source_height=matrix.height)
