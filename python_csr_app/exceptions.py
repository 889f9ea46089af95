"""Error types raised by the sparse matrix core and its text codec."""


class FormatError(ValueError):
    """Malformed matrix text. Carries the 1-based line number when known."""

    def __init__(self, message, line_number=None, source=None):
        self.message = message
        self.line_number = line_number
        self.source = source
        super().__init__(self._format())

    def _format(self):
        text = self.message
        if self.line_number is not None:
            text = f"Line {self.line_number}: {text}"
        if self.source:
            text = f"Error in {self.source}: {text}"
        return text

    def with_source(self, source):
        """Return a copy of this error tagged with the file it came from."""
        return FormatError(self.message, self.line_number, source)


class DimensionMismatch(ValueError):
    """Operand shapes are incompatible for the requested operation."""

    def __init__(self, message, left_shape=None, right_shape=None):
        self.left_shape = left_shape
        self.right_shape = right_shape
        if left_shape is not None and right_shape is not None:
            message = f"{message} (got {left_shape[0]}x{left_shape[1]} and {right_shape[0]}x{right_shape[1]})"
        super().__init__(message)
