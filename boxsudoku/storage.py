from __future__ import annotations

import json
import os
from typing import List, Optional

from .models import Board, Grid, SolutionSet
from .textio import parse_puzzle


def default_solutions_path() -> str:
    return os.path.join(".", "data", "solutions.json")


def resolve_solutions_path() -> str:
    return os.environ.get("BOXSUDOKU_SOLUTIONS", default_solutions_path())


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)


def load_puzzle(path: str) -> Grid:
    with open(path, "r", encoding="utf-8") as f:
        return parse_puzzle(f.read())


def save_solutions(grid: Grid, solutions: List[Board], path: Optional[str] = None) -> str:
    p = path or resolve_solutions_path()
    ensure_parent_dir(p)
    result = SolutionSet(grid.rows_per_box, grid.columns_per_box, solutions)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(result.to_jsonable(), f, indent=2)
    return p


def load_solutions(path: Optional[str] = None) -> SolutionSet:
    p = path or resolve_solutions_path()
    with open(p, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return SolutionSet.from_jsonable(raw)


def solutions_to_csv(solutions: List[Board]) -> bytes:
    # one block per solution, blocks separated by an empty line
    blocks = ["\n".join(",".join(str(v) for v in row) for row in board) for board in solutions]
    return ("\n\n".join(blocks) + "\n").encode("utf-8")
