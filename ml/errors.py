"""Errors raised by the book sales pipeline."""

from typing import Optional


class AnalysisError(Exception):
    """Base class for pipeline errors."""


class LoadError(AnalysisError):
    """The input file is missing, unreadable, or has an unusable header."""

    def __init__(self, source, reason: str):
        self.source = str(source)
        self.reason = reason
        super().__init__(f"Could not load {self.source}: {reason}")


class MalformedRowError(AnalysisError):
    """A data row does not have the same number of fields as the header."""

    def __init__(
        self,
        source,
        row_index: int,
        expected: int,
        found: int,
        line: Optional[int] = None,
    ):
        self.source = str(source)
        self.row_index = row_index
        self.expected = expected
        self.found = found
        self.line = line
        where = f"row {row_index}" if line is None else f"row {row_index} (line {line})"
        super().__init__(
            f"{self.source}: {where} has {found} fields, expected {expected}"
        )


class ColumnNotFoundError(AnalysisError, KeyError):
    def __init__(self, column: str, available):
        self.column = column
        self.available = list(available)
        super().__init__(f"Column {column!r} not found. Available: {self.available}")

    def __str__(self):
        return self.args[0]


def require_column(df, name: str):
    """Return df[name], raising ColumnNotFoundError if the column is absent."""
    if name not in df.columns:
        raise ColumnNotFoundError(name, df.columns)
    return df[name]


class NonNumericColumnError(AnalysisError, TypeError):
    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Column {column!r} is not numeric")
