from __future__ import annotations


class SudokuError(ValueError):
    """Base class for caller-input errors (bad shape, bad coordinates, bad values)."""


class InvalidDimension(SudokuError):
    pass


class InvalidValue(SudokuError):
    pass


class OutOfRange(SudokuError, IndexError):
    pass
