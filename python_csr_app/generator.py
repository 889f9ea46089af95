import numpy as np

from matrix_sparse import SparseMatrix


class Generator:
    """Seeded source of random sparse integer matrices."""

    def __init__(self, seed=None, max_abs_value=9):
        if max_abs_value < 1:
            raise ValueError("max_abs_value must be at least 1")
        self.seed = seed
        self.max_abs_value = max_abs_value
        self._rng = np.random.default_rng(seed)

    def random_values(self, size):
        """Non-zero integers in [-max_abs_value, max_abs_value]."""
        magnitudes = self._rng.integers(1, self.max_abs_value + 1, size=size)
        signs = self._rng.choice(np.array([-1, 1]), size=size)
        return magnitudes * signs

    def generate_sparse_matrix(self, rows, cols, density):
        """Matrix with round(density * rows * cols) non-zero cells at random positions."""
        if not 0.0 <= density <= 1.0:
            raise ValueError(f"Density must be in [0, 1], got {density}")

        matrix = SparseMatrix(rows, cols)
        total = rows * cols
        nnz = int(round(density * total))
        if nnz == 0:
            return matrix

        positions = np.sort(self._rng.choice(total, size=nnz, replace=False))
        values = self.random_values(nnz)

        # positions are sorted, so each insert appends to the last row
        for position, i_value in zip(positions, values):
            i_row, i_col = divmod(int(position), cols)
            matrix.set_element(i_row, i_col, int(i_value))

        return matrix

    def generate_chain(self, sizes, density):
        """Matrices that can be multiplied left to right.

        sizes [a, b, c, d] gives shapes (a, b), (b, c), (c, d).
        """
        if len(sizes) < 2:
            raise ValueError("At least two sizes are needed")
        shapes = zip(sizes[:-1], sizes[1:])
        return [self.generate_sparse_matrix(rows, cols, density) for rows, cols in shapes]
