"""
Plain-text puzzle format.

    2          <- rows per box
    3          <- columns per box
    1 . . 4 . .
    ...

'.' is an empty cell, 1-9 are themselves, A, B, ... stand for 10, 11, ...
Spaces inside a row are ignored.
"""
from __future__ import annotations

import string
from typing import List, Optional

from .errors import InvalidDimension, InvalidValue
from .models import Board, Grid, Triple

EMPTY_CHAR = "."
_LETTERS = string.ascii_uppercase
MAX_SIZE = 9 + len(_LETTERS)  # largest N the format can spell


def to_char(value: Optional[int]) -> str:
    if not value:
        return EMPTY_CHAR
    if value <= 9:
        return str(value)
    return _LETTERS[value - 10]


def parse_char(ch: str, size: int) -> Optional[int]:
    if ch == EMPTY_CHAR:
        return None
    if ch in string.digits:
        value = int(ch)
    elif ch.upper() in _LETTERS:
        value = _LETTERS.index(ch.upper()) + 10
    else:
        raise InvalidValue(f"Unrecognised character {ch!r}.")
    if not 1 <= value <= size:
        raise InvalidValue(f"Character {ch!r} means {value}, outside 1..{size}.")
    return value


def _parse_dimension(line: Optional[str], name: str) -> int:
    raw = (line or "").strip()
    if not raw:
        raise InvalidDimension(f"Missing {name} line.")
    try:
        return int(raw)
    except ValueError:
        raise InvalidDimension(f"{name} must be an integer, got {raw!r}.") from None


def parse_puzzle(text: str) -> Grid:
    lines = text.splitlines()
    rows_per_box = _parse_dimension(lines[0] if lines else None, "rows_per_box")
    columns_per_box = _parse_dimension(lines[1] if len(lines) > 1 else None, "columns_per_box")
    if rows_per_box * columns_per_box > MAX_SIZE:
        raise InvalidDimension(
            f"{rows_per_box}x{columns_per_box} boxes give N={rows_per_box * columns_per_box}; "
            f"the text format only encodes values up to {MAX_SIZE}."
        )
    grid = Grid(rows_per_box, columns_per_box)
    n = grid.size()

    triples: List[Triple] = []
    rows = [line for line in lines[2:] if line.strip()]
    for r, line in enumerate(rows):
        chars = [ch for ch in line if not ch.isspace()]
        for c, ch in enumerate(chars):
            triples.append((r, c, parse_char(ch, n)))
    grid.populate(triples)
    return grid


def render_board(board: Board) -> str:
    return "\n".join(" ".join(to_char(v) for v in row) for row in board)


def render_grid(grid: Grid) -> str:
    return render_board(grid.snapshot())


def render_puzzle(grid: Grid) -> str:
    """The grid in the full file format, including the two dimension lines."""
    return f"{grid.rows_per_box}\n{grid.columns_per_box}\n{render_grid(grid)}\n"
