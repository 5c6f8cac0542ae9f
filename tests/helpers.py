# tests/helpers.py
from typing import List

SOLVED_4X4 = [
    [1, 2, 3, 4],
    [3, 4, 1, 2],
    [2, 1, 4, 3],
    [4, 3, 2, 1],
]

# 2 rows x 3 columns per box
SOLVED_6X6 = [
    [1, 2, 3, 4, 5, 6],
    [4, 5, 6, 1, 2, 3],
    [2, 3, 1, 5, 6, 4],
    [5, 6, 4, 2, 3, 1],
    [3, 1, 2, 6, 4, 5],
    [6, 4, 5, 3, 1, 2],
]


def assert_valid_solution(board: List[List[int]], rows_per_box: int, columns_per_box: int) -> None:
    n = rows_per_box * columns_per_box
    full = set(range(1, n + 1))
    assert len(board) == n
    for row in board:
        assert set(row) == full and len(row) == n
    for c in range(n):
        assert {board[r][c] for r in range(n)} == full
    for r0 in range(0, n, rows_per_box):
        for c0 in range(0, n, columns_per_box):
            box = [
                board[r0 + i][c0 + j]
                for i in range(rows_per_box)
                for j in range(columns_per_box)
            ]
            assert sorted(box) == sorted(full)


def valid_board(rows_per_box: int, columns_per_box: int) -> List[List[int]]:
    """A filled grid built by shifting the first row band by band."""
    n = rows_per_box * columns_per_box
    return [
        [(columns_per_box * (r % rows_per_box) + r // rows_per_box + c) % n + 1 for c in range(n)]
        for r in range(n)
    ]
