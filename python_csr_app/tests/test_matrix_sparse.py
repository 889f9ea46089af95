"""Tests for matrix_sparse.py: element access, CSR invariants, arithmetic."""

import numpy as np
import pytest
from scipy import sparse

from exceptions import DimensionMismatch
from generator import Generator
from matrix_sparse import SparseMatrix, INT64_MAX, INT64_MIN, MAX_DIMENSION


def entries(matrix):
    return list(matrix.items())


class TestConstruction:
    def test_empty_matrix(self):
        matrix = SparseMatrix(3, 5)
        assert matrix.shape == (3, 5)
        assert matrix.nnz == 0
        assert list(matrix.indptr) == [0, 0, 0, 0]
        assert matrix.get_element(2, 4) == 0

    @pytest.mark.parametrize('rows, cols', [(0, 3), (3, 0), (-1, 2)])
    def test_non_positive_dimensions(self, rows, cols):
        with pytest.raises(ValueError):
            SparseMatrix(rows, cols)

    @pytest.mark.parametrize('rows, cols', [(MAX_DIMENSION + 1, 1), (1, MAX_DIMENSION + 1), (10 ** 20, 1)])
    def test_oversized_dimensions(self, rows, cols):
        with pytest.raises(ValueError):
            SparseMatrix(rows, cols)

    def test_identity(self):
        identity = SparseMatrix.create_identity_matrix(4)
        assert identity.nnz == 4
        assert np.array_equal(identity.to_dense(), np.eye(4, dtype=np.int64))

    def test_repr(self, small_matrix):
        assert repr(small_matrix) == 'SparseMatrix(3x4, nnz=4)'


class TestElementAccess:
    def test_get_stored_and_absent(self, small_matrix):
        assert small_matrix.get_element(0, 1) == 5
        assert small_matrix.get_element(0, 3) == -2
        assert small_matrix.get_element(0, 0) == 0
        assert small_matrix.get_element(1, 2) == 0

    def test_row_items(self, small_matrix):
        assert list(small_matrix.row_items(0)) == [(1, 5), (3, -2)]
        assert list(small_matrix.row_items(1)) == []
        assert list(small_matrix.row_items(2)) == [(0, 7), (2, 1)]
        with pytest.raises(IndexError):
            list(small_matrix.row_items(3))

    @pytest.mark.parametrize('row, col', [(3, 0), (0, 4), (-1, 0), (0, -1)])
    def test_get_out_of_bounds(self, small_matrix, row, col):
        with pytest.raises(IndexError):
            small_matrix.get_element(row, col)

    @pytest.mark.parametrize('row, col', [(3, 0), (0, 4), (-1, 0), (0, -1)])
    def test_set_out_of_bounds(self, small_matrix, row, col):
        with pytest.raises(IndexError):
            small_matrix.set_element(row, col, 1)

    def test_insert_keeps_columns_sorted(self):
        matrix = SparseMatrix(2, 6)
        for col in (4, 1, 5, 0, 2):
            matrix.set_element(0, col, col + 10)
        assert list(matrix.indices) == [0, 1, 2, 4, 5]
        assert list(matrix.data) == [10, 11, 12, 14, 15]
        assert list(matrix.indptr) == [0, 5, 5]

    def test_insert_shifts_following_rows(self, small_matrix):
        small_matrix.set_element(1, 2, 9)
        assert list(small_matrix.indptr) == [0, 2, 3, 5]
        assert small_matrix.get_element(1, 2) == 9
        assert small_matrix.get_element(2, 0) == 7
        small_matrix.check_format()

    def test_overwrite_in_place(self, small_matrix):
        small_matrix.set_element(0, 1, 8)
        assert small_matrix.get_element(0, 1) == 8
        assert small_matrix.nnz == 4
        assert list(small_matrix.indptr) == [0, 2, 2, 4]

    def test_set_zero_deletes_entry(self, small_matrix):
        small_matrix.set_element(0, 1, 0)
        assert small_matrix.get_element(0, 1) == 0
        assert small_matrix.nnz == 3
        assert 0 not in list(small_matrix.data)
        assert list(small_matrix.indptr) == [0, 1, 1, 3]

    def test_set_zero_on_absent_is_noop(self, small_matrix):
        before = list(small_matrix.items())
        small_matrix.set_element(1, 1, 0)
        assert list(small_matrix.items()) == before

    def test_set_returns_matrix(self):
        matrix = SparseMatrix(2, 2).set_element(0, 0, 1).set_element(1, 1, 2)
        assert entries(matrix) == [(0, 0, 1), (1, 1, 2)]

    def test_rejects_non_integer_value(self, small_matrix):
        with pytest.raises(TypeError):
            small_matrix.set_element(0, 0, 1.5)
        with pytest.raises(TypeError):
            small_matrix.set_element(0, 0, True)

    def test_value_bounds(self):
        matrix = SparseMatrix(1, 2)
        matrix.set_element(0, 0, INT64_MAX)
        matrix.set_element(0, 1, INT64_MIN)
        with pytest.raises(OverflowError):
            matrix.set_element(0, 0, INT64_MAX + 1)

    def test_invariants_after_random_edits(self):
        rng = np.random.default_rng(3)
        matrix = SparseMatrix(7, 9)
        expected = {}
        for _ in range(400):
            row = int(rng.integers(0, 7))
            col = int(rng.integers(0, 9))
            value = int(rng.integers(-2, 3))
            matrix.set_element(row, col, value)
            if value:
                expected[(row, col)] = value
            else:
                expected.pop((row, col), None)
            matrix.check_format()

        assert {(r, c): v for r, c, v in matrix.items()} == expected
        assert matrix.indptr[-1] == len(matrix.data) == len(matrix.indices)


class TestAddSubtract:
    def test_cancelling_entries_are_dropped(self):
        left = SparseMatrix.from_dense([[1, 2], [0, 3]])
        right = SparseMatrix.from_dense([[-1, 0], [4, -3]])
        result = left.add(right)
        assert entries(result) == [(0, 1, 2), (1, 0, 4)]
        result.check_format()

    def test_subtract_negates_right_only_entries(self):
        left = SparseMatrix.from_dense([[0, 5, 0], [1, 0, 0]])
        right = SparseMatrix.from_dense([[2, 5, 0], [0, 0, -4]])
        result = left.subtract(right)
        assert entries(result) == [(0, 0, -2), (1, 0, 1), (1, 2, 4)]

    def test_add_zero_is_identity(self, small_matrix):
        assert small_matrix.add(SparseMatrix(3, 4)) == small_matrix

    def test_subtract_self_is_zero(self, small_matrix):
        result = small_matrix.subtract(small_matrix)
        assert result.nnz == 0
        assert result == SparseMatrix(3, 4)

    def test_add_commutes(self):
        gen = Generator(seed=11)
        a = gen.generate_sparse_matrix(12, 15, 0.2)
        b = gen.generate_sparse_matrix(12, 15, 0.2)
        assert a.add(b) == b.add(a)

    def test_matches_scipy(self):
        gen = Generator(seed=5)
        a = gen.generate_sparse_matrix(20, 30, 0.1)
        b = gen.generate_sparse_matrix(20, 30, 0.1)
        assert np.array_equal((a + b).to_dense(), (a.to_scipy() + b.to_scipy()).toarray())
        assert np.array_equal((a - b).to_dense(), (a.to_scipy() - b.to_scipy()).toarray())

    def test_operands_not_modified(self, small_matrix):
        other = SparseMatrix.create_identity_matrix(3).multiply(small_matrix)
        before = entries(small_matrix)
        small_matrix.add(other)
        small_matrix.subtract(other)
        assert entries(small_matrix) == before

    @pytest.mark.parametrize('op', ['add', 'subtract'])
    def test_shape_mismatch(self, op):
        with pytest.raises(DimensionMismatch):
            getattr(SparseMatrix(2, 3), op)(SparseMatrix(3, 2))

    def test_overflow_is_reported(self):
        a = SparseMatrix(1, 1).set_element(0, 0, INT64_MAX)
        b = SparseMatrix(1, 1).set_element(0, 0, 1)
        with pytest.raises(OverflowError):
            a.add(b)


class TestMultiply:
    def test_small_product(self):
        a = SparseMatrix.from_dense([[1, 0, 2], [0, 3, 0]])
        b = SparseMatrix.from_dense([[0, 1], [4, 0], [5, 0]])
        result = a.multiply(b)
        assert result.shape == (2, 2)
        assert np.array_equal(result.to_dense(), [[10, 1], [12, 0]])
        result.check_format()

    def test_products_cancelling_to_zero_not_stored(self):
        a = SparseMatrix.from_dense([[1, 1]])
        b = SparseMatrix.from_dense([[2], [-2]])
        result = a.multiply(b)
        assert result.nnz == 0
        assert list(result.indptr) == [0, 0]

    def test_identity(self, small_matrix):
        assert small_matrix.multiply(SparseMatrix.create_identity_matrix(4)) == small_matrix
        assert SparseMatrix.create_identity_matrix(3).multiply(small_matrix) == small_matrix

    def test_associative(self):
        a, b, c = Generator(seed=2).generate_chain([6, 8, 5, 7], 0.3)
        assert a.multiply(b).multiply(c) == a.multiply(b.multiply(c))

    def test_matches_scipy(self):
        a, b = Generator(seed=8).generate_chain([25, 40, 18], 0.08)
        expected = (a.to_scipy() @ b.to_scipy()).toarray()
        result = a @ b
        result.check_format()
        assert np.array_equal(result.to_dense(), expected)

    def test_scratch_reset_between_rows(self):
        # Rows 0 and 1 hit the same output column; row 1 must not see row 0's sum
        a = SparseMatrix.from_dense([[1, 0], [0, 1], [0, 0]])
        b = SparseMatrix.from_dense([[3, 0], [4, 0]])
        assert np.array_equal(a.multiply(b).to_dense(), [[3, 0], [4, 0], [0, 0]])

    def test_shape_mismatch(self):
        with pytest.raises(DimensionMismatch):
            SparseMatrix(2, 3).multiply(SparseMatrix(2, 3))

    def test_overflow_is_reported(self):
        a = SparseMatrix(1, 1).set_element(0, 0, 2 ** 40)
        with pytest.raises(OverflowError):
            a.multiply(a)


class TestConversions:
    def test_dense_roundtrip(self):
        dense = np.array([[0, 1, 0], [2, 0, -3]], dtype=np.int64)
        assert np.array_equal(SparseMatrix.from_dense(dense).to_dense(), dense)

    def test_from_dense_rejects_floats(self):
        with pytest.raises(TypeError):
            SparseMatrix.from_dense([[0.5, 0.0]])

    def test_scipy_roundtrip(self, small_matrix):
        csr = small_matrix.to_scipy()
        assert isinstance(csr, sparse.csr_matrix)
        assert csr.nnz == 4
        assert SparseMatrix.from_scipy(csr) == small_matrix

    def test_from_scipy_drops_explicit_zeros(self):
        coo = sparse.coo_matrix(
            (np.array([0, 4, 1, 2]), (np.array([0, 1, 1, 1]), np.array([0, 1, 2, 2]))),
            shape=(2, 3)
        )
        matrix = SparseMatrix.from_scipy(coo)
        assert entries(matrix) == [(1, 1, 4), (1, 2, 3)]

    def test_from_scipy_leaves_input_untouched(self):
        csr = sparse.csr_matrix(
            (np.array([0, 4, 0, 2]), np.array([0, 1, 0, 2]), np.array([0, 2, 4])),
            shape=(2, 3)
        )
        data, indices, indptr = csr.data.copy(), csr.indices.copy(), csr.indptr.copy()

        matrix = SparseMatrix.from_scipy(csr)

        assert entries(matrix) == [(0, 1, 4), (1, 2, 2)]
        assert np.array_equal(csr.data, data)
        assert np.array_equal(csr.indices, indices)
        assert np.array_equal(csr.indptr, indptr)

    def test_transpose(self, small_matrix):
        transposed = small_matrix.transpose()
        assert transposed.shape == (4, 3)
        assert np.array_equal(transposed.to_dense(), small_matrix.to_dense().T)
        transposed.check_format()

    def test_density(self, small_matrix):
        assert small_matrix.density() == pytest.approx(4 / 12)
