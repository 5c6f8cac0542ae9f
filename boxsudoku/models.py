from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import InvalidDimension, InvalidValue, OutOfRange

Board = List[List[int]]  # 0 = empty, values 1..N
Triple = Tuple[int, int, Optional[int]]  # (row, column, value or None)

ROLES = ("row", "column", "box")


def _check_value(value: object, size: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidValue(f"Value must be an integer, got {value!r}.")
    if not 1 <= value <= size:
        raise InvalidValue(f"Value {value} out of range (allowed: 1..{size}).")
    return value


# -----------------------------
# Candidate tables
# -----------------------------

class CandidateSet:
    """Membership table over the values 1..N. A marked value is "used"."""

    def __init__(self, size: int) -> None:
        self._contained: List[bool] = [False] * size

    @property
    def size(self) -> int:
        return len(self._contained)

    def contains(self, value: int) -> bool:
        return self._contained[_check_value(value, self.size) - 1]

    def mark(self, value: int) -> None:
        self._contained[_check_value(value, self.size) - 1] = True

    def unmark(self, value: int) -> None:
        self._contained[_check_value(value, self.size) - 1] = False

    def intersect(self, other: "CandidateSet") -> "CandidateSet":
        """
        Combine two used-value tables. A value is marked in the result if it
        is marked in either input: a cell may only take a value that is unused
        in all of its groups, so the used sets are merged before the
        complement is taken by available_values().
        """
        if other.size != self.size:
            raise ValueError(f"Cannot combine candidate sets of size {self.size} and {other.size}.")
        result = CandidateSet(self.size)
        result._contained = [a or b for a, b in zip(self._contained, other._contained)]
        return result

    def available_values(self) -> List[int]:
        return [v for v, used in enumerate(self._contained, start=1) if not used]

    def marked_values(self) -> List[int]:
        return [v for v, used in enumerate(self._contained, start=1) if used]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CandidateSet):
            return NotImplemented
        return self._contained == other._contained

    def __repr__(self) -> str:
        return f"CandidateSet(size={self.size}, marked={self.marked_values()})"


# -----------------------------
# Rows, columns and boxes
# -----------------------------

@dataclass(eq=False)
class ConstraintGroup:
    role: str   # "row" | "column" | "box"
    index: int  # 0-based position among groups of the same role
    size: int
    used: CandidateSet = field(init=False, repr=False)
    slots: List[Optional["Cell"]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"role must be one of {ROLES}, got {self.role!r}")
        self.used = CandidateSet(self.size)
        self.slots = [None] * self.size

    @property
    def label(self) -> str:
        return f"{self.role} {self.index + 1}"

    def bind_slot(self, index: int, cell: "Cell") -> None:
        if not 0 <= index < self.size:
            raise OutOfRange(f"Slot {index} outside {self.label} (0..{self.size - 1}).")
        current = self.slots[index]
        if current is not None and current is not cell:
            raise ValueError(f"Slot {index} of {self.label} is already bound to {current!r}.")
        self.slots[index] = cell

    def used_values(self) -> CandidateSet:
        """The values currently placed in this group. Callers must not mutate it."""
        return self.used

    def mark_used(self, value: int) -> None:
        self.used.mark(value)

    def mark_unused(self, value: int) -> None:
        # the value stays used while any member still holds it (duplicate givens)
        if any(c.value() == value for c in self.cells()):
            return
        self.used.unmark(value)

    def cells(self) -> List["Cell"]:
        return [c for c in self.slots if c is not None]

    def values(self) -> List[int]:
        return [c.value() for c in self.cells() if c.is_known()]


# -----------------------------
# Cells
# -----------------------------

class Cell:
    """
    One square of the grid. The owning row, column and box are addressed by
    integer id into the Grid's group arena; the cell never owns them.
    """

    def __init__(self, row: int, column: int, arena: List[ConstraintGroup]) -> None:
        self.row = row
        self.column = column
        self._arena = arena
        self._value: Optional[int] = None
        self.row_id: Optional[int] = None
        self.column_id: Optional[int] = None
        self.box_id: Optional[int] = None

    def bind(self, row_id: int, column_id: int, box_id: int) -> None:
        self.row_id = row_id
        self.column_id = column_id
        self.box_id = box_id

    def is_bound(self) -> bool:
        return None not in (self.row_id, self.column_id, self.box_id)

    def groups(self) -> Tuple[ConstraintGroup, ConstraintGroup, ConstraintGroup]:
        if not self.is_bound():
            raise RuntimeError(f"{self!r} is not wired to its row, column and box.")
        return self._arena[self.row_id], self._arena[self.column_id], self._arena[self.box_id]

    def set_value(self, value: Optional[int]) -> None:
        """
        Assign a value (or None to clear). The previous value is unmarked
        from all three groups before the new one is marked, so re-assigning
        the value a cell already holds leaves every group unchanged.
        """
        groups = self.groups()
        if value is not None:
            _check_value(value, groups[0].size)

        previous = self._value
        self._value = None
        if previous is not None:
            for g in groups:
                g.mark_unused(previous)
        self._value = value
        if value is not None:
            for g in groups:
                g.mark_used(value)

    def value(self) -> Optional[int]:
        return self._value

    def is_known(self) -> bool:
        return self._value is not None

    def candidate_values(self) -> List[int]:
        row, column, box = self.groups()
        used = row.used_values().intersect(column.used_values()).intersect(box.used_values())
        return used.available_values()

    def __repr__(self) -> str:
        return f"Cell(r{self.row + 1}c{self.column + 1}, value={self._value})"


# -----------------------------
# Grid
# -----------------------------

@dataclass(frozen=True)
class Conflict:
    role: str
    index: int
    value: int
    cells: Tuple[Tuple[int, int], ...]  # 0-based (row, column)

    def describe(self) -> str:
        where = ", ".join(f"r{r + 1}c{c + 1}" for r, c in self.cells)
        return f"value {self.value} appears {len(self.cells)} times in {self.role} {self.index + 1} ({where})"


class Grid:
    """
    An N x N grid split into rows_per_box x columns_per_box boxes, where
    N = rows_per_box * columns_per_box.

    Boxes are numbered band by band: there are columns_per_box bands of
    boxes from top to bottom and rows_per_box boxes across each band.
    """

    def __init__(self, rows_per_box: int, columns_per_box: int) -> None:
        for name, dim in (("rows_per_box", rows_per_box), ("columns_per_box", columns_per_box)):
            if isinstance(dim, bool) or not isinstance(dim, int) or dim <= 0:
                raise InvalidDimension(f"{name} must be a positive integer, got {dim!r}.")

        self.rows_per_box = rows_per_box
        self.columns_per_box = columns_per_box
        self._size = rows_per_box * columns_per_box
        # group arena: rows at [0, N), columns at [N, 2N), boxes at [2N, 3N)
        self.groups: List[ConstraintGroup] = []
        self._cells: List[List[Cell]] = [
            [Cell(r, c, self.groups) for c in range(self._size)] for r in range(self._size)
        ]
        self._wire()

    def _wire(self) -> None:
        n = self._size
        for role in ROLES:
            for i in range(n):
                self.groups.append(ConstraintGroup(role, i, n))

        for r in range(n):
            for c in range(n):
                cell = self._cells[r][c]
                b = self.box_index(r, c)
                cell.bind(r, n + c, 2 * n + b)
                self.groups[r].bind_slot(c, cell)
                self.groups[n + c].bind_slot(r, cell)
                self.groups[2 * n + b].bind_slot(self.box_slot(r, c), cell)

    def size(self) -> int:
        return self._size

    def box_index(self, row: int, column: int) -> int:
        return (row // self.rows_per_box) * self.rows_per_box + column // self.columns_per_box

    def box_slot(self, row: int, column: int) -> int:
        return (row % self.rows_per_box) * self.columns_per_box + column % self.columns_per_box

    def cell_at(self, row: int, column: int) -> Cell:
        n = self._size
        for name, idx in (("row", row), ("column", column)):
            if isinstance(idx, bool) or not isinstance(idx, int) or not 0 <= idx < n:
                raise OutOfRange(f"{name} {idx!r} outside 0..{n - 1}.")
        return self._cells[row][column]

    def cells(self) -> List[Cell]:
        """All cells in row-major order."""
        return [cell for row in self._cells for cell in row]

    def rows(self) -> List[ConstraintGroup]:
        return self.groups[: self._size]

    def columns(self) -> List[ConstraintGroup]:
        return self.groups[self._size : 2 * self._size]

    def boxes(self) -> List[ConstraintGroup]:
        return self.groups[2 * self._size :]

    def populate(self, triples: Iterable[Triple]) -> None:
        for row, column, value in triples:
            cell = self.cell_at(row, column)
            try:
                cell.set_value(value)
            except InvalidValue as e:
                raise InvalidValue(f"Cell ({row + 1},{column + 1}): {e}") from e

    def is_complete(self) -> bool:
        return all(cell.is_known() for cell in self.cells())

    def snapshot(self) -> Board:
        return [[cell.value() or 0 for cell in row] for row in self._cells]

    def find_conflicts(self) -> List[Conflict]:
        """Every value that occurs more than once in a row, column or box."""
        out: List[Conflict] = []
        for group in self.groups:
            seen: Dict[int, List[Tuple[int, int]]] = {}
            for cell in group.cells():
                if cell.is_known():
                    seen.setdefault(cell.value(), []).append((cell.row, cell.column))
            for value in sorted(seen):
                if len(seen[value]) > 1:
                    out.append(Conflict(group.role, group.index, value, tuple(seen[value])))
        return out

    @staticmethod
    def from_board(board: Board, rows_per_box: int, columns_per_box: int) -> "Grid":
        """Build a grid from rows of ints (0 = empty)."""
        grid = Grid(rows_per_box, columns_per_box)
        n = grid.size()
        if len(board) != n or any(len(row) != n for row in board):
            raise InvalidDimension(f"Board must be {n} x {n} for {rows_per_box}x{columns_per_box} boxes.")
        grid.populate(
            (r, c, board[r][c] or None) for r in range(n) for c in range(n)
        )
        return grid

    def __repr__(self) -> str:
        return f"Grid(rows_per_box={self.rows_per_box}, columns_per_box={self.columns_per_box})"


# -----------------------------
# Saved results
# -----------------------------

@dataclass
class SolutionSet:
    rows_per_box: int
    columns_per_box: int
    solutions: List[Board] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.solutions)

    def to_jsonable(self) -> dict:
        raw = asdict(self)
        raw["count"] = self.count
        return raw

    @staticmethod
    def from_jsonable(raw: dict) -> "SolutionSet":
        return SolutionSet(
            rows_per_box=int(raw["rows_per_box"]),
            columns_per_box=int(raw["columns_per_box"]),
            solutions=[[list(row) for row in board] for board in raw.get("solutions", [])],
        )
