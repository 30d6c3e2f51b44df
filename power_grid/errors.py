"""Exceptions raised by the power grid engine."""

from __future__ import annotations


class PowerGridError(Exception):
    """Base class for every error raised by the puzzle engine."""


class LevelDataError(PowerGridError, ValueError):
    """Level data is malformed and cannot be turned into a grid."""


class OutOfRangeError(PowerGridError, IndexError):
    """Cell coordinates fall outside the grid."""

    def __init__(self, row: int, column: int, rows: int, columns: int) -> None:
        super().__init__(
            f"Cell ({row}, {column}) is outside a {rows}x{columns} grid"
        )
        self.row = row
        self.column = column


class InvalidOperationError(PowerGridError):
    """The requested operation is not allowed in the current state."""
