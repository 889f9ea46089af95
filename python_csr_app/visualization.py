"""Sparsity pattern plots for sparse matrices using matplotlib."""

import os

try:
    import matplotlib
    matplotlib.use('Agg')  # Non-interactive backend by default
    import matplotlib.pyplot as plt
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False

import numpy as np

from matrix_sparse import SparseMatrix


class MatrixPlotter:
    """Draws where the non-zero entries of a SparseMatrix are."""

    def __init__(self, matrix: SparseMatrix, title=None):
        if not HAS_MATPLOTLIB:
            raise ImportError(
                "matplotlib is required for visualization. "
                "Install with: pip install matplotlib"
            )
        self.matrix = matrix
        self.title = title or f"{matrix.get_rows()}x{matrix.get_cols()}"

    def _row_counts(self):
        return np.diff(self.matrix.indptr)

    def plot_sparsity_pattern(self, ax=None, save_path=None):
        """Marker at every stored entry, rows growing downwards like ax.spy."""
        own_fig = ax is None
        if own_fig:
            fig, ax = plt.subplots(figsize=(6, 6))

        ax.spy(self.matrix.to_scipy(), markersize=2, aspect='auto')
        ax.set_title(f"{self.title} (nnz={self.matrix.nnz}, density={self.matrix.density():.2%})")
        ax.set_xlabel('Column')
        ax.set_ylabel('Row')

        if save_path and own_fig:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')

        return ax

    def plot_row_density(self, ax=None, save_path=None):
        """Number of stored entries per row."""
        counts = self._row_counts()

        own_fig = ax is None
        if own_fig:
            fig, ax = plt.subplots(figsize=(8, 4))

        ax.bar(np.arange(len(counts)), counts, width=1.0, color='tab:blue')
        ax.set_xlabel('Row')
        ax.set_ylabel('Non-zero entries')
        ax.set_title(f"{self.title}: entries per row")
        ax.grid(True, axis='y', alpha=0.3)

        if save_path and own_fig:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')

        return ax

    @staticmethod
    def plot_operation_dashboard(left, right, result, operation, save_dir=None):
        """2x3 grid: sparsity pattern and row fill of both operands and the result."""
        if not HAS_MATPLOTLIB:
            raise ImportError("matplotlib is required for visualization.")

        fig, axes = plt.subplots(2, 3, figsize=(16, 9))
        fig.suptitle(f'Sparse matrix {operation}', fontsize=13)

        for i_col, (matrix, name) in enumerate(((left, 'Left'), (right, 'Right'), (result, 'Result'))):
            plotter = MatrixPlotter(matrix, title=name)
            plotter.plot_sparsity_pattern(ax=axes[0, i_col])
            plotter.plot_row_density(ax=axes[1, i_col])

        fig.tight_layout(rect=[0, 0, 1, 0.95])

        if save_dir:
            os.makedirs(save_dir, exist_ok=True)
            fig.savefig(
                os.path.join(save_dir, 'dashboard.png'),
                dpi=150, bbox_inches='tight'
            )

        return fig
