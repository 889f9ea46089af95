"""Structured record of a matrix operation run with JSON/CSV export."""

import json
import csv
from dataclasses import dataclass, asdict
from typing import Optional


@dataclass
class MatrixSummary:
    """Shape and fill of one matrix taking part in an operation."""
    path: str
    rows: int
    cols: int
    nnz: int
    density: float

    @classmethod
    def from_matrix(cls, matrix, path: str = "") -> 'MatrixSummary':
        return cls(
            path=path,
            rows=matrix.get_rows(),
            cols=matrix.get_cols(),
            nnz=matrix.nnz,
            density=matrix.density(),
        )


@dataclass
class OperationResult:
    """Complete result of one add/subtract/multiply run."""
    operation: str  # 'add', 'subtract' or 'multiply'
    left: MatrixSummary
    right: MatrixSummary
    result: MatrixSummary
    wall_clock_seconds: float
    timestamp: str
    output_path: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return asdict(self)

    def to_json(self, filepath: str) -> None:
        """Export the result to a JSON file."""
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def to_csv(self, filepath: str) -> None:
        """Export one CSV row per matrix role (left, right, result)."""
        fieldnames = ['operation', 'role', 'path', 'rows', 'cols', 'nnz', 'density']
        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for role in ('left', 'right', 'result'):
                row = asdict(getattr(self, role))
                row['operation'] = self.operation
                row['role'] = role
                writer.writerow(row)

    @classmethod
    def from_json(cls, filepath: str) -> 'OperationResult':
        """Load a result from a JSON file."""
        with open(filepath, 'r', encoding='utf-8') as f:
            d = json.load(f)

        return cls(
            operation=d['operation'],
            left=MatrixSummary(**d['left']),
            right=MatrixSummary(**d['right']),
            result=MatrixSummary(**d['result']),
            wall_clock_seconds=d['wall_clock_seconds'],
            timestamp=d['timestamp'],
            output_path=d.get('output_path'),
        )
