"""Shared fixtures for sparse matrix tests."""

import os
import sys
import pytest

# Ensure python_csr_app is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


LEFT_TEXT = "rows=2\ncols=2\n(0,0,1)\n(0,1,2)\n(1,1,3)\n"
RIGHT_TEXT = "rows=2\ncols=2\n(0,0,-1)\n(1,0,4)\n(1,1,-3)\n"


@pytest.fixture
def left_text():
    return LEFT_TEXT


@pytest.fixture
def right_text():
    return RIGHT_TEXT


@pytest.fixture
def matrix_files(tmp_path):
    """The two 2x2 sample matrices written to disk."""
    left_path = tmp_path / 'left.txt'
    right_path = tmp_path / 'right.txt'
    left_path.write_text(LEFT_TEXT, encoding='utf-8')
    right_path.write_text(RIGHT_TEXT, encoding='utf-8')
    return str(left_path), str(right_path)


@pytest.fixture
def small_matrix():
    """3x4 matrix with a few entries spread over the rows, row 1 empty."""
    from matrix_sparse import SparseMatrix

    matrix = SparseMatrix(3, 4)
    matrix.set_element(0, 1, 5)
    matrix.set_element(0, 3, -2)
    matrix.set_element(2, 0, 7)
    matrix.set_element(2, 2, 1)
    return matrix


@pytest.fixture
def sample_operation_result():
    """A synthetic OperationResult for testing export and plotting."""
    from results import OperationResult, MatrixSummary

    return OperationResult(
        operation='add',
        left=MatrixSummary(path='/test/left.txt', rows=2, cols=2, nnz=3, density=0.75),
        right=MatrixSummary(path='/test/right.txt', rows=2, cols=2, nnz=3, density=0.75),
        result=MatrixSummary(path='/test/outputs/sum.txt', rows=2, cols=2, nnz=2, density=0.5),
        wall_clock_seconds=0.01,
        timestamp='2026-01-01T00:00:00',
        output_path='/test/outputs/sum.txt',
    )
