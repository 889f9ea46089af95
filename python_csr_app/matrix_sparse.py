"""
Integer sparse matrix stored in compressed sparse row (CSR) form.

Only non-zero entries are kept, in three parallel arrays:
    _row_ptr      length rows + 1, _row_ptr[r] is the offset of row r's first entry
    _col_indices  column of each entry, strictly increasing inside a row
    _values       the entries themselves, never zero

set_element() is the single write path; multiply() appends whole rows to a
fresh result directly since they are produced already sorted.
"""
from bisect import bisect_left

try:
    import numpy as np
    from scipy import sparse
except ImportError as e:
    raise ImportError(
        "numpy and scipy are required but not installed. "
        "Please install them using: pip install numpy scipy"
    ) from e

from exceptions import DimensionMismatch

# Values are signed 64-bit. Arithmetic is exact; a result that does not fit
# raises OverflowError instead of wrapping.
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Largest rows or cols accepted. The row pointer holds rows + 1 entries and
# multiply keeps a dense scratch row of cols entries.
MAX_DIMENSION = 10_000_000


def _is_int(value):
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def _check_value(value):
    if not _is_int(value):
        raise TypeError(f"Matrix values must be integers, got {type(value).__name__}")
    value = int(value)
    if value < INT64_MIN or value > INT64_MAX:
        raise OverflowError(f"Value {value} does not fit in a signed 64-bit integer")
    return value


class SparseMatrix:
    """Sparse integer matrix (CSR) supporting add, subtract and multiply."""

    def __init__(self, rows, cols):
        """
        Create an all-zero matrix.

        Args:
            rows: Number of rows, > 0
            cols: Number of columns, > 0
        """
        if not _is_int(rows) or not _is_int(cols):
            raise TypeError("Matrix dimensions must be integers")
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Matrix dimensions must be positive integers, got {rows}x{cols}")
        if rows > MAX_DIMENSION or cols > MAX_DIMENSION:
            raise ValueError(f"Matrix dimensions must not exceed {MAX_DIMENSION}, got {rows}x{cols}")

        self._rows = int(rows)
        self._cols = int(cols)
        self._values = []
        self._col_indices = []
        self._row_ptr = [0] * (self._rows + 1)

    def get_rows(self):
        """Get the number of rows."""
        return self._rows

    def get_cols(self):
        """Get the number of columns."""
        return self._cols

    @property
    def shape(self):
        return (self._rows, self._cols)

    @property
    def nnz(self):
        """Number of stored (non-zero) entries."""
        return len(self._values)

    # Read-only copies of the CSR arrays, named after scipy's attributes.
    @property
    def indptr(self):
        return np.array(self._row_ptr, dtype=np.int64)

    @property
    def indices(self):
        return np.array(self._col_indices, dtype=np.int64)

    @property
    def data(self):
        return np.array(self._values, dtype=np.int64)

    def density(self):
        """Fraction of cells holding a non-zero value."""
        return self.nnz / (self._rows * self._cols)

    def _check_index(self, i_row, i_col):
        if not _is_int(i_row) or not _is_int(i_col):
            raise TypeError("Matrix indices must be integers")
        if i_row >= self._rows or i_col >= self._cols or i_row < 0 or i_col < 0:
            raise IndexError(
                f"Index ({i_row}, {i_col}) out of bounds for {self._rows}x{self._cols} matrix"
            )

    def get_element(self, i_row, i_col):
        """Get the element at (iRow, iCol), 0 when nothing is stored there."""
        self._check_index(i_row, i_col)

        start = self._row_ptr[i_row]
        end = self._row_ptr[i_row + 1]
        pos = bisect_left(self._col_indices, i_col, start, end)
        if pos < end and self._col_indices[pos] == i_col:
            return self._values[pos]
        return 0

    def set_element(self, i_row, i_col, i_value):
        """
        Set the element at (iRow, iCol).

        Writing zero removes the stored entry. Inserting or removing an entry
        shifts every row pointer after i_row, so a single call costs
        O(rows + nnz) in the worst case.

        Returns:
            self
        """
        self._check_index(i_row, i_col)
        i_value = _check_value(i_value)
        i_row = int(i_row)
        i_col = int(i_col)

        start = self._row_ptr[i_row]
        end = self._row_ptr[i_row + 1]
        pos = bisect_left(self._col_indices, i_col, start, end)

        if pos < end and self._col_indices[pos] == i_col:
            if i_value == 0:
                del self._values[pos]
                del self._col_indices[pos]
                for i_index in range(i_row + 1, self._rows + 1):
                    self._row_ptr[i_index] -= 1
            else:
                self._values[pos] = i_value
        elif i_value != 0:
            self._values.insert(pos, i_value)
            self._col_indices.insert(pos, i_col)
            for i_index in range(i_row + 1, self._rows + 1):
                self._row_ptr[i_index] += 1

        return self

    def row_items(self, i_row):
        """Yield (col, value) pairs of one row in ascending column order."""
        if not 0 <= i_row < self._rows:
            raise IndexError(f"Row index {i_row} out of bounds")
        for pos in range(self._row_ptr[i_row], self._row_ptr[i_row + 1]):
            yield self._col_indices[pos], self._values[pos]

    def items(self):
        """Yield (row, col, value) for every stored entry, row-major."""
        for i_row in range(self._rows):
            for pos in range(self._row_ptr[i_row], self._row_ptr[i_row + 1]):
                yield i_row, self._col_indices[pos], self._values[pos]

    def _merge(self, other, negate_other, op_name):
        if self.shape != other.shape:
            raise DimensionMismatch(
                f"Matrix dimensions must match for {op_name}", self.shape, other.shape
            )

        sign = -1 if negate_other else 1
        result = SparseMatrix(self._rows, self._cols)

        for i_row in range(self._rows):
            p1, end1 = self._row_ptr[i_row], self._row_ptr[i_row + 1]
            p2, end2 = other._row_ptr[i_row], other._row_ptr[i_row + 1]

            while p1 < end1 and p2 < end2:
                col1 = self._col_indices[p1]
                col2 = other._col_indices[p2]

                if col1 < col2:
                    result.set_element(i_row, col1, self._values[p1])
                    p1 += 1
                elif col2 < col1:
                    result.set_element(i_row, col2, sign * other._values[p2])
                    p2 += 1
                else:
                    combined = self._values[p1] + sign * other._values[p2]
                    if combined != 0:
                        result.set_element(i_row, col1, combined)
                    p1 += 1
                    p2 += 1

            while p1 < end1:
                result.set_element(i_row, self._col_indices[p1], self._values[p1])
                p1 += 1
            while p2 < end2:
                result.set_element(i_row, other._col_indices[p2], sign * other._values[p2])
                p2 += 1

        return result

    def add(self, other):
        """Add two matrices of identical shape."""
        return self._merge(other, False, "addition")

    def subtract(self, other):
        """Subtract other from this matrix (self - other)."""
        return self._merge(other, True, "subtraction")

    def multiply(self, other):
        """
        Multiply two matrices (self @ other).

        Each output row is accumulated in a dense scratch row of length
        other.cols, then compacted. The scratch is fully cleared for every
        row, so very wide operands pay O(cols) per row even when sparse.
        """
        if self._cols != other.get_rows():
            raise DimensionMismatch(
                "Number of columns of the first matrix must be equal to the number of rows of the second matrix",
                self.shape, other.shape
            )

        n_cols = other.get_cols()
        result = SparseMatrix(self._rows, n_cols)
        zero_row = [0] * n_cols
        scratch = [0] * n_cols

        for i_row in range(self._rows):
            scratch[:] = zero_row

            for p1 in range(self._row_ptr[i_row], self._row_ptr[i_row + 1]):
                d_value = self._values[p1]
                i_inner = self._col_indices[p1]
                for i_col, w_value in other.row_items(i_inner):
                    scratch[i_col] += d_value * w_value

            count = 0
            for i_col in range(n_cols):
                i_value = scratch[i_col]
                if i_value == 0:
                    continue
                if i_value < INT64_MIN or i_value > INT64_MAX:
                    raise OverflowError(
                        f"Product entry ({i_row}, {i_col}) = {i_value} does not fit in a signed 64-bit integer"
                    )
                result._values.append(i_value)
                result._col_indices.append(i_col)
                count += 1

            result._row_ptr[i_row + 1] = result._row_ptr[i_row] + count

        return result

    def transpose(self):
        """Transpose the matrix."""
        transposed = SparseMatrix(self._cols, self._rows)
        for i_col, i_row, i_value in sorted((c, r, v) for r, c, v in self.items()):
            transposed.set_element(i_col, i_row, i_value)
        return transposed

    def check_format(self):
        """Raise ValueError if the CSR arrays are not well formed."""
        if len(self._row_ptr) != self._rows + 1 or self._row_ptr[0] != 0:
            raise ValueError("row pointer must have rows + 1 entries starting at 0")
        if len(self._values) != len(self._col_indices):
            raise ValueError("values and column indices differ in length")
        if self._row_ptr[-1] != len(self._values):
            raise ValueError("last row pointer must equal the number of stored entries")

        for i_row in range(self._rows):
            start, end = self._row_ptr[i_row], self._row_ptr[i_row + 1]
            if end < start:
                raise ValueError(f"row pointer decreases at row {i_row}")
            previous = -1
            for pos in range(start, end):
                i_col = self._col_indices[pos]
                if i_col <= previous or i_col >= self._cols:
                    raise ValueError(f"row {i_row}: column {i_col} out of order or out of range")
                if self._values[pos] == 0:
                    raise ValueError(f"explicit zero stored at ({i_row}, {i_col})")
                previous = i_col

    def to_dense(self):
        """Dense numpy copy. Only meant for small matrices and display."""
        dense = np.zeros((self._rows, self._cols), dtype=np.int64)
        for i_row, i_col, i_value in self.items():
            dense[i_row, i_col] = i_value
        return dense

    def to_scipy(self):
        """Get an equivalent scipy.sparse.csr_matrix."""
        return sparse.csr_matrix(
            (self.data, self.indices, self.indptr),
            shape=self.shape, dtype=np.int64
        )

    @classmethod
    def from_dense(cls, values):
        """Build from a 2-D integer array-like."""
        dense = np.asarray(values)
        if dense.ndim != 2:
            raise ValueError("Dense input must be two-dimensional")
        if not np.issubdtype(dense.dtype, np.integer):
            raise TypeError(f"Dense input must hold integers, got {dense.dtype}")

        matrix = cls(dense.shape[0], dense.shape[1])
        # np.nonzero is row-major, so every insert lands at the end
        for i_row, i_col in zip(*np.nonzero(dense)):
            matrix.set_element(int(i_row), int(i_col), int(dense[i_row, i_col]))
        return matrix

    @classmethod
    def from_scipy(cls, sparse_matrix):
        """Build from any scipy.sparse matrix with an integer dtype."""
        # copy so canonicalizing never rewrites the caller's arrays
        csr = sparse.csr_matrix(sparse_matrix, copy=True)
        if not np.issubdtype(csr.dtype, np.integer):
            raise TypeError(f"Sparse input must hold integers, got {csr.dtype}")
        csr.sum_duplicates()
        csr.eliminate_zeros()

        matrix = cls(csr.shape[0], csr.shape[1])
        for i_row in range(csr.shape[0]):
            for pos in range(csr.indptr[i_row], csr.indptr[i_row + 1]):
                matrix.set_element(i_row, int(csr.indices[pos]), int(csr.data[pos]))
        return matrix

    @staticmethod
    def create_identity_matrix(size):
        """Create an identity matrix."""
        identity = SparseMatrix(size, size)
        for i_index in range(size):
            identity.set_element(i_index, i_index, 1)
        return identity

    def __add__(self, other):
        if not isinstance(other, SparseMatrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, SparseMatrix):
            return NotImplemented
        return self.subtract(other)

    def __matmul__(self, other):
        if not isinstance(other, SparseMatrix):
            return NotImplemented
        return self.multiply(other)

    def __eq__(self, other):
        if not isinstance(other, SparseMatrix):
            return NotImplemented
        # The layout is canonical, so equal arrays mean equal matrices
        return (
            self.shape == other.shape
            and self._row_ptr == other._row_ptr
            and self._col_indices == other._col_indices
            and self._values == other._values
        )

    __hash__ = None

    def __repr__(self):
        return f"SparseMatrix({self._rows}x{self._cols}, nnz={self.nnz})"
