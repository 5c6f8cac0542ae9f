# tests/test_engine.py
import pytest

from boxsudoku.engine import Solver, count_solutions, enumerate_solutions, is_solution, validate_board
from boxsudoku.models import Grid

from helpers import SOLVED_4X4, SOLVED_6X6, assert_valid_solution, valid_board


def test_one_by_two_boxes_has_exactly_two_solutions_in_order():
    grid = Grid(1, 2)
    assert enumerate_solutions(grid) == [
        [[1, 2], [2, 1]],
        [[2, 1], [1, 2]],
    ]


def test_trivial_one_by_one_grid():
    assert enumerate_solutions(Grid(1, 1)) == [[[1]]]


def test_empty_four_by_four():
    grid = Grid(2, 2)
    seen = []
    report = Solver(grid).solve(seen.append)
    assert report.solutions_found == len(seen) == 288
    assert report.status == "multiple"
    for board in seen:
        assert_valid_solution(board, 2, 2)
    assert len({tuple(map(tuple, b)) for b in seen}) == 288


@pytest.mark.parametrize("rpb,cpb,expected", [(1, 3, 12), (3, 1, 12), (1, 4, 576)])
def test_line_shaped_boxes_count_latin_squares(rpb, cpb, expected):
    assert count_solutions(Grid(rpb, cpb)) == expected


def test_solved_input_yields_itself_once():
    grid = Grid.from_board(SOLVED_6X6, 2, 3)
    solutions = enumerate_solutions(grid)
    assert solutions == [SOLVED_6X6]


def test_single_gap():
    board = [row[:] for row in SOLVED_4X4]
    board[2][1] = 0
    report = Solver(Grid.from_board(board, 2, 2)).solve()
    assert report.solutions_found == 1
    assert report.status == "solved"


def test_partial_six_by_six():
    board = [row[:] for row in SOLVED_6X6]
    for r, c in [(0, 0), (0, 4), (1, 2), (2, 5), (3, 3), (4, 1), (5, 0), (5, 5)]:
        board[r][c] = 0
    solutions = enumerate_solutions(Grid.from_board(board, 2, 3))
    assert SOLVED_6X6 in solutions
    for sol in solutions:
        assert_valid_solution(sol, 2, 3)
        # givens are never altered
        for r in range(6):
            for c in range(6):
                if board[r][c]:
                    assert sol[r][c] == board[r][c]


def test_solutions_are_snapshots():
    grid = Grid(1, 2)
    first, second = enumerate_solutions(grid)
    first[0][0] = 99
    assert second == [[2, 1], [1, 2]]


def test_search_restores_grid():
    board = [
        [1, 0, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 2],
    ]
    grid = Grid.from_board(board, 2, 2)
    Solver(grid).solve()
    assert grid.snapshot() == board


def test_early_close_restores_grid():
    grid = Grid(2, 2)
    grid.cell_at(0, 0).set_value(1)
    assert len(enumerate_solutions(grid, limit=3)) == 3
    assert grid.snapshot()[0] == [1, 0, 0, 0]
    assert sum(v for row in grid.snapshot() for v in row) == 1
    for group in grid.groups:
        assert group.used_values().marked_values() == ([1] if group.values() else [])


def test_dead_end_gives_no_solutions():
    board = [
        [1, 2, 0, 0],
        [0, 0, 0, 3],
        [0, 0, 0, 4],
        [0, 0, 0, 0],
    ]
    # (0, 3) can be neither 3 nor 4, and (0, 2) takes whichever is left
    report = Solver(Grid.from_board(board, 2, 2)).solve()
    assert report.solutions_found == 0
    assert report.dead_ends > 0
    assert report.status == "no-solution"


def test_conflicting_givens_give_no_solutions():
    board = [
        [1, 0, 0, 0],
        [0, 0, 0, 0],
        [1, 0, 0, 0],
        [0, 0, 0, 0],
    ]
    solver = Solver(Grid.from_board(board, 2, 2))
    report = solver.solve()
    assert report.solutions_found == 0
    assert report.status == "conflict"
    assert [c.role for c in report.conflicts] == ["column"]
    assert report.nodes_visited == 0


def test_conflict_is_logged(caplog):
    grid = Grid(1, 2)
    grid.populate([(0, 0, 2), (1, 0, 2)])
    with caplog.at_level("WARNING", logger="boxsudoku.engine"):
        assert count_solutions(grid) == 0
    assert "Conflicting givens" in caplog.text


def test_validate_board():
    assert validate_board(SOLVED_4X4, 2, 2) == (True, "OK")

    dup = [row[:] for row in SOLVED_4X4]
    dup[0][1] = 1
    ok, msg = validate_board(dup, 2, 2)
    assert not ok and msg.startswith("Conflict")

    ok, msg = validate_board([[0, 0], [0, 0]], 2, 2)
    assert not ok

    bad = [row[:] for row in SOLVED_4X4]
    bad[3][3] = 9
    ok, msg = validate_board(bad, 2, 2)
    assert not ok and "(4,4)" in msg


def test_is_solution():
    assert is_solution(SOLVED_6X6, 2, 3)
    assert not is_solution(SOLVED_6X6, 3, 2)
    partial = [row[:] for row in SOLVED_4X4]
    partial[0][0] = 0
    assert not is_solution(partial, 2, 2)


@pytest.mark.parametrize("rpb,cpb", [(4, 8), (5, 7), (6, 6)])
def test_large_solved_input_yields_itself_once(rpb, cpb):
    board = valid_board(rpb, cpb)
    assert_valid_solution(board, rpb, cpb)
    grid = Grid.from_board(board, rpb, cpb)
    assert enumerate_solutions(grid) == [board]


def test_large_grid_with_two_empty_rows():
    board = valid_board(4, 8)
    puzzle = [row[:] for row in board]
    puzzle[0] = [0] * 32
    puzzle[1] = [0] * 32
    grid = Grid.from_board(puzzle, 4, 8)
    solutions = enumerate_solutions(grid)
    # each column chain (j, j+8, j+16, j+24) either keeps or swaps its two values
    assert len(solutions) == 2 ** 8
    assert board in solutions
    for sol in solutions:
        assert_valid_solution(sol, 4, 8)
    assert grid.snapshot() == puzzle


def test_givens_set_after_construction_are_kept():
    grid = Grid(1, 2)
    solver = Solver(grid)
    grid.cell_at(0, 0).set_value(2)
    assert list(solver.iter_solutions()) == [[[2, 1], [1, 2]]]
