from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from itertools import islice
from typing import Callable, Iterator, List, Optional, Tuple

from .errors import SudokuError
from .models import Board, Cell, Conflict, Grid

log = logging.getLogger(__name__)


@dataclass
class SolveReport:
    solutions_found: int = 0
    nodes_visited: int = 0
    dead_ends: int = 0
    duration_ms: int = 0
    conflicts: List[Conflict] = field(default_factory=list)

    @property
    def status(self) -> str:
        if self.conflicts:
            return "conflict"
        if self.solutions_found == 0:
            return "no-solution"
        if self.solutions_found == 1:
            return "solved"
        return "multiple"


class Solver:
    """
    Exhaustive backtracking over the unknown cells of a Grid in row-major order.

    Known cells are the givens: they are left out of the search order and
    never changed. Each unknown cell tries every value its row, column and
    box still allow, in ascending order, and is cleared again once all of
    them have been explored. Every complete grid reached is emitted as a
    Board snapshot.

    The search keeps one candidate iterator per assigned cell on an explicit
    stack, so its depth is bounded by the number of empty cells rather than
    by the interpreter's recursion limit.

    The grid belongs to the solver for the duration of a search.
    """

    def __init__(self, grid: Grid) -> None:
        self.grid = grid
        self.report = SolveReport()

    def iter_solutions(self) -> Iterator[Board]:
        """
        Yield every solution in discovery order. Closing the generator early
        undoes all trial assignments, leaving only the givens in place.
        """
        self.report = SolveReport()
        conflicts = self.grid.find_conflicts()
        if conflicts:
            self.report.conflicts = conflicts
            for c in conflicts:
                log.warning("Conflicting givens: %s", c.describe())
            return
        order = [cell for cell in self.grid.cells() if not cell.is_known()]
        yield from self._search(order)

    def _open(self, cell: Cell) -> Iterator[int]:
        self.report.nodes_visited += 1
        # Trial values only affect later cells, so the list stays valid while this cell is open.
        candidates = cell.candidate_values()
        if not candidates:
            self.report.dead_ends += 1
        return iter(candidates)

    def _search(self, order: List[Cell]) -> Iterator[Board]:
        if not order:
            self.report.nodes_visited += 1
            self.report.solutions_found += 1
            yield self.grid.snapshot()
            return

        stack: List[Iterator[int]] = [self._open(order[0])]
        try:
            while stack:
                cell = order[len(stack) - 1]
                value = next(stack[-1], None)
                if value is None:
                    cell.set_value(None)
                    stack.pop()
                    continue
                cell.set_value(value)
                if len(stack) == len(order):
                    self.report.solutions_found += 1
                    yield self.grid.snapshot()
                else:
                    stack.append(self._open(order[len(stack)]))
        finally:
            for cell in reversed(order[: len(stack)]):
                cell.set_value(None)

    def solve(self, on_solution: Optional[Callable[[Board], None]] = None) -> SolveReport:
        start = time.time()
        n = self.grid.size()
        log.debug(
            "solve start: %dx%d grid, %dx%d boxes",
            n, n, self.grid.rows_per_box, self.grid.columns_per_box,
        )
        for board in self.iter_solutions():
            if on_solution is not None:
                on_solution(board)
        self.report.duration_ms = int((time.time() - start) * 1000)
        log.info(
            "solve end in %d ms; solutions found %d; nodes visited %d",
            self.report.duration_ms, self.report.solutions_found, self.report.nodes_visited,
        )
        return self.report


def enumerate_solutions(grid: Grid, limit: Optional[int] = None) -> List[Board]:
    solutions = Solver(grid).iter_solutions()
    try:
        return list(islice(solutions, limit))
    finally:
        solutions.close()


def count_solutions(grid: Grid) -> int:
    return Solver(grid).solve().solutions_found


def validate_board(board: Board, rows_per_box: int, columns_per_box: int) -> Tuple[bool, str]:
    """
    Checks:
      - board is N x N with N = rows_per_box * columns_per_box
      - values in 0..N
      - no duplicate values in any row/column/box (ignoring 0)
    """
    try:
        grid = Grid.from_board(board, rows_per_box, columns_per_box)
    except SudokuError as e:
        return False, str(e)

    conflicts = grid.find_conflicts()
    if conflicts:
        return False, f"Conflict: {conflicts[0].describe()}."
    return True, "OK"


def is_solution(board: Board, rows_per_box: int, columns_per_box: int) -> bool:
    ok, _ = validate_board(board, rows_per_box, columns_per_box)
    return ok and all(v != 0 for row in board for v in row)
