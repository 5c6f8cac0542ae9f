from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .engine import Solver
from .errors import SudokuError
from .models import Board
from .storage import load_puzzle, save_solutions
from .textio import render_board, render_grid

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boxsudoku",
        description="List every solution of a Sudoku puzzle with rectangular boxes.",
    )
    parser.add_argument("filename", help="Puzzle file: rows per box, columns per box, then the grid rows")
    parser.add_argument("--limit", type=int, default=None, help="Stop after this many solutions")
    parser.add_argument("--count", action="store_true", help="Only print the number of solutions")
    parser.add_argument("--json", metavar="OUT", default=None, help="Also save the solutions as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.limit is not None and args.limit < 1:
        build_parser().error("--limit must be at least 1")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        grid = load_puzzle(args.filename)
    except (OSError, SudokuError) as e:
        print(f"boxsudoku: {e}", file=sys.stderr)
        return 1
    log.debug("Read %s", args.filename)

    if not args.count:
        print(render_grid(grid))
        print()
        print("Possible solutions:")

    solver = Solver(grid)
    found: List[Board] = []
    solutions = solver.iter_solutions()
    try:
        for board in solutions:
            found.append(board)
            if not args.count:
                print(render_board(board))
                print()
            if args.limit is not None and len(found) >= args.limit:
                log.info("Stopped after %d solution(s)", len(found))
                break
    finally:
        solutions.close()

    if args.count:
        print(len(found))
    if args.json:
        path = save_solutions(grid, found, args.json)
        log.info("Saved %d solution(s) to %s", len(found), path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
