"""
Tests for cost matrix validation and orientation handling.

Tests cover:
1. Flat and nested construction
2. Contract violations (length, negative costs, element types, dimensions)
3. Bounds-checked indexing and immutability
4. Orientation normalisation and index mapping

Run with: pytest tests/test_cost_matrix.py -v
"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from src.assignment.cost_matrix import (
    CostMatrix,
    CostMatrixError,
    normalize_orientation,
)


# ── Test: Construction ────────────────────────────────────────────


class TestConstruction:
    """Valid inputs build a matrix with the right shape and values."""

    def test_from_flat(self):
        matrix = CostMatrix.from_flat([4, 1, 3, 2, 0, 5], height=2, width=3)

        assert matrix.shape == (2, 3)
        assert matrix[0, 1] == 1
        assert matrix[1, 2] == 5
        assert matrix.as_array().tolist() == [[4, 1, 3], [2, 0, 5]]

    def test_from_rows(self):
        matrix = CostMatrix.from_rows([[4, 1, 3], [2, 0, 5]])

        assert matrix.shape == (2, 3)
        assert matrix.values.tolist() == [4, 1, 3, 2, 0, 5]

    def test_from_numpy_rows(self):
        matrix = CostMatrix.from_rows(np.arange(6, dtype=np.uint32).reshape(3, 2))

        assert matrix.shape == (3, 2)
        assert matrix[2, 1] == 5
        assert matrix.values.dtype == np.uint32

    def test_empty_inputs(self):
        assert CostMatrix.from_rows([]).shape == (0, 0)
        assert CostMatrix.from_flat([], 0, 0).is_empty
        assert CostMatrix.from_flat([], 3, 0).is_empty
        assert CostMatrix.from_flat([], 0, 5).is_empty

    def test_big_integers_are_kept_exact(self):
        big = 2**80
        matrix = CostMatrix.from_flat([big, big + 1], 1, 2)

        assert matrix[0, 1] == big + 1
        assert isinstance(matrix[0, 1], int)

    def test_bool_costs_are_integers(self):
        matrix = CostMatrix.from_flat([True, False], 1, 2)
        assert matrix.values.tolist() == [1, 0]

    def test_numpy_integer_dimensions(self):
        matrix = CostMatrix.from_flat([1, 2], np.int64(1), np.int32(2))
        assert matrix.shape == (1, 2)


# ── Test: Contract violations ─────────────────────────────────────


class TestValidation:
    """Every contract violation surfaces as CostMatrixError before solving."""

    def test_length_mismatch(self):
        with pytest.raises(CostMatrixError, match="height\\*width"):
            CostMatrix.from_flat([1, 2, 3], 2, 2)

    def test_negative_cost_is_rejected_not_clamped(self):
        with pytest.raises(CostMatrixError, match="row 1, column 0"):
            CostMatrix.from_flat([1, 2, -3, 4], 2, 2)

    def test_float_costs_rejected(self):
        with pytest.raises(CostMatrixError, match="floating-point"):
            CostMatrix.from_flat([1.0, 2.5], 1, 2)

    def test_integral_floats_rejected(self):
        with pytest.raises(CostMatrixError):
            CostMatrix.from_flat(np.array([1.0, 2.0]), 1, 2)

    def test_string_costs_rejected(self):
        with pytest.raises(CostMatrixError):
            CostMatrix.from_flat(["a", "b"], 1, 2)

    def test_none_in_object_costs_rejected(self):
        with pytest.raises(CostMatrixError, match="NoneType"):
            CostMatrix.from_flat([2**70, None], 1, 2)

    def test_negative_dimension(self):
        with pytest.raises(CostMatrixError, match="height"):
            CostMatrix.from_flat([], -1, 0)

    def test_non_integer_dimension(self):
        with pytest.raises(CostMatrixError, match="width"):
            CostMatrix.from_flat([1, 2], 1, 2.0)
        with pytest.raises(CostMatrixError, match="width"):
            CostMatrix.from_flat([1], 1, True)

    def test_nested_costs_passed_as_flat(self):
        with pytest.raises(CostMatrixError, match="flat"):
            CostMatrix.from_flat([[1, 2], [3, 4]], 2, 2)

    def test_ragged_rows(self):
        with pytest.raises(CostMatrixError, match="ragged"):
            CostMatrix.from_rows([[1, 2, 3], [4, 5]])

    def test_cost_matrix_error_is_value_error(self):
        assert issubclass(CostMatrixError, ValueError)


# ── Test: Indexing and ownership ──────────────────────────────────


class TestIndexing:
    """The 2-D view is bounds-checked and never aliases caller data."""

    @pytest.fixture
    def matrix(self) -> CostMatrix:
        return CostMatrix.from_flat([1, 2, 3, 4, 5, 6], 2, 3)

    @pytest.mark.parametrize("index", [(2, 0), (0, 3), (-1, 0), (0, -1)])
    def test_out_of_range(self, matrix, index):
        with pytest.raises(IndexError):
            matrix[index]

    def test_values_are_read_only(self, matrix):
        with pytest.raises(ValueError):
            matrix.values[0] = 99

    def test_caller_buffer_is_copied(self):
        costs = np.array([5, 6, 7, 8])
        matrix = CostMatrix.from_flat(costs, 2, 2)
        costs[0] = 0

        assert matrix[0, 0] == 5

    def test_as_array_is_an_owned_copy(self, matrix):
        arr = matrix.as_array()
        arr[0, 0] = 100

        assert matrix[0, 0] == 1


# ── Test: Orientation ─────────────────────────────────────────────


class TestOrientation:
    """Tall matrices are transposed with reversed columns; wide ones pass through."""

    def test_wide_matrix_untouched(self):
        matrix = CostMatrix.from_rows([[1, 2, 3], [4, 5, 6]])
        working = normalize_orientation(matrix)

        assert not working.transposed
        assert (working.h, working.w) == (2, 3)
        assert working.values.tolist() == [[1, 2, 3], [4, 5, 6]]
        assert working.to_original(1, 2) == (1, 2)

    def test_square_matrix_untouched(self):
        working = normalize_orientation(CostMatrix.from_rows([[1, 2], [3, 4]]))
        assert not working.transposed

    def test_tall_matrix_transposed_and_reversed(self):
        matrix = CostMatrix.from_rows([[1, 2], [3, 4], [5, 6]])
        working = normalize_orientation(matrix)

        assert working.transposed
        assert (working.h, working.w) == (2, 3)
        assert working.values.tolist() == [[5, 3, 1], [6, 4, 2]]

    def test_tall_mapping_round_trips_every_cell(self):
        rows = np.arange(20).reshape(5, 4)
        matrix = CostMatrix.from_rows(rows)
        working = normalize_orientation(matrix)

        for i in range(working.h):
            for j in range(working.w):
                r, c = working.to_original(i, j)
                assert working.values[i, j] == matrix[r, c]

    def test_working_copy_is_writable_and_detached(self):
        matrix = CostMatrix.from_rows([[1, 2], [3, 4], [5, 6]])
        working = normalize_orientation(matrix)
        working.values[0, 0] = 0

        assert matrix[2, 0] == 5
