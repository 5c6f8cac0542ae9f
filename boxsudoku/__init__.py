from .engine import SolveReport, Solver, count_solutions, enumerate_solutions, is_solution, validate_board
from .errors import InvalidDimension, InvalidValue, OutOfRange, SudokuError
from .models import Board, CandidateSet, Cell, ConstraintGroup, Grid

__all__ = [
    "Board",
    "CandidateSet",
    "Cell",
    "ConstraintGroup",
    "Grid",
    "InvalidDimension",
    "InvalidValue",
    "OutOfRange",
    "SolveReport",
    "Solver",
    "SudokuError",
    "count_solutions",
    "enumerate_solutions",
    "is_solution",
    "validate_board",
]
