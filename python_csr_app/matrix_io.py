"""Text codec for sparse matrix files.

File layout:

    rows=<N>
    cols=<M>
    (row, col, value)
    ...

Indices are 0-based. Blank lines are ignored anywhere in the file.
"""
import os
import re

from enums import DuplicatePolicy
from exceptions import FormatError
from matrix_sparse import INT64_MAX, INT64_MIN, MAX_DIMENSION, SparseMatrix

_HEADER_LINES = {'rows': 1, 'cols': 2}
_HEADER_RE = {
    'rows': re.compile(r'^rows\s*=\s*([0-9]+)$', re.IGNORECASE),
    'cols': re.compile(r'^cols\s*=\s*([0-9]+)$', re.IGNORECASE),
}
_INT_RE = re.compile(r'^[+-]?[0-9]+$')


def _parse_int(text, what, line_number):
    if not _INT_RE.match(text):
        raise FormatError(f"{what} must be an integer, got '{text}'", line_number)
    return int(text)


def _parse_header(lines, key):
    if not lines:
        raise FormatError(f"File must contain '{key}=N' header", _HEADER_LINES[key])
    line_number, line = lines.pop(0)
    m = _HEADER_RE[key].match(line)
    if not m:
        raise FormatError(f"Invalid {key} format. Expected '{key}=N'", line_number)
    value = int(m.group(1))
    if value <= 0:
        raise FormatError("Matrix dimensions must be positive integers", line_number)
    if value > MAX_DIMENSION:
        raise FormatError(f"Matrix dimensions must not exceed {MAX_DIMENSION}", line_number)
    return value


def parse_entry(line, line_number, rows, cols):
    """Parse one '(row, col, value)' line into a validated triple.

    A column equal to cols is stored at cols - 1. Existing data files rely on
    this; no other out-of-range value is adjusted.
    """
    if not (line.startswith('(') and line.endswith(')')):
        raise FormatError("Entries must be in format (row, col, value)", line_number)

    parts = [part.strip() for part in line[1:-1].split(',')]
    if len(parts) != 3:
        raise FormatError("Expected exactly 3 values (row, col, value)", line_number)

    i_row = _parse_int(parts[0], "Row", line_number)
    i_col = _parse_int(parts[1], "Column", line_number)
    i_value = _parse_int(parts[2], "Value", line_number)

    if i_row < 0 or i_col < 0:
        raise FormatError("Row and column indices must be non-negative", line_number)
    if i_value < INT64_MIN or i_value > INT64_MAX:
        raise FormatError("Value does not fit in a signed 64-bit integer", line_number)

    if i_col == cols:
        i_col = cols - 1

    if i_row >= rows or i_col >= cols:
        raise FormatError(
            f"Index out of bounds (row={i_row}, col={i_col}) for dimensions rows={rows}, cols={cols}",
            line_number
        )

    return i_row, i_col, i_value


def parse_matrix(text, settings=None, source=None):
    """Build a SparseMatrix from the text format.

    Entries are sorted by (row, col) before insertion. The sort is stable, so
    when a cell appears twice the later line wins, unless the settings ask
    for duplicates to be rejected.

    Raises:
        FormatError: on any malformed line, with its 1-based line number
    """
    policy = settings.get_duplicate_policy() if settings is not None else DuplicatePolicy.LAST_WINS

    try:
        lines = [
            (i_line + 1, line.strip())
            for i_line, line in enumerate(text.splitlines())
            if line.strip()
        ]
        rows = _parse_header(lines, 'rows')
        cols = _parse_header(lines, 'cols')

        entries = []
        seen = {}
        for line_number, line in lines:
            i_row, i_col, i_value = parse_entry(line, line_number, rows, cols)
            if policy == DuplicatePolicy.REJECT:
                first_line = seen.setdefault((i_row, i_col), line_number)
                if first_line != line_number:
                    raise FormatError(
                        f"Duplicate entry for ({i_row}, {i_col}), first given on line {first_line}",
                        line_number
                    )
            entries.append((i_row, i_col, i_value))

        entries.sort(key=lambda entry: (entry[0], entry[1]))

        matrix = SparseMatrix(rows, cols)
        for i_row, i_col, i_value in entries:
            matrix.set_element(i_row, i_col, i_value)
    except FormatError as e:
        if source is not None:
            raise e.with_source(source) from None
        raise

    return matrix


def serialize_matrix(matrix):
    """Render a matrix in the text format, one stored entry per line."""
    parts = [f"rows={matrix.get_rows()}\n", f"cols={matrix.get_cols()}\n"]
    for i_row, i_col, i_value in matrix.items():
        parts.append(f"({i_row}, {i_col}, {i_value})\n")
    return "".join(parts)


def load_matrix(file_name, settings=None):
    """Read and parse a matrix file."""
    absolute_path = os.path.abspath(file_name)
    if not os.path.isfile(absolute_path):
        raise FileNotFoundError(f"File not found: {absolute_path}")

    with open(absolute_path, 'r', encoding='utf-8') as file:
        text = file.read()

    return parse_matrix(text, settings=settings, source=os.path.basename(absolute_path))


def save_matrix(matrix, file_name):
    """Write a matrix file, creating the parent directory when missing."""
    absolute_path = os.path.abspath(file_name)
    os.makedirs(os.path.dirname(absolute_path), exist_ok=True)

    with open(absolute_path, 'w', encoding='utf-8') as file:
        file.write(serialize_matrix(matrix))

    return absolute_path
