from __future__ import annotations

import os
from typing import List, Tuple

import pandas as pd
import streamlit as st

from boxsudoku.engine import Solver, validate_board
from boxsudoku.errors import SudokuError
from boxsudoku.models import Board, Grid
from boxsudoku.storage import solutions_to_csv
from boxsudoku.textio import parse_char, to_char

BOX_DIMENSIONS = [1, 2, 3, 4]
DEFAULT_ROWS_PER_BOX = 2
DEFAULT_COLUMNS_PER_BOX = 3


def max_solutions() -> int:
    return int(os.environ.get("BOXSUDOKU_MAX_SOLUTIONS", "20"))


def cell_key(rpb: int, cpb: int, r: int, c: int) -> str:
    # include the box shape so changing it doesn't collide with old widget state
    return f"cell_{rpb}x{cpb}_{r}_{c}"


def reset_board(rpb: int, cpb: int) -> None:
    n = rpb * cpb
    for r in range(n):
        for c in range(n):
            st.session_state[cell_key(rpb, cpb, r, c)] = ""


def parse_board(rpb: int, cpb: int) -> Tuple[Board, List[str]]:
    """
    Read cell widget values from session_state and build an int board.
    Returns (board, errors). Empty string, '.' or '0' => 0.
    """
    n = rpb * cpb
    errors: List[str] = []
    board: Board = [[0] * n for _ in range(n)]

    for r in range(n):
        for c in range(n):
            raw = str(st.session_state.get(cell_key(rpb, cpb, r, c), "")).strip()
            if raw in ("", "0"):
                continue
            if len(raw) != 1:
                errors.append(f"Cell ({r+1},{c+1}) must be a single character: '{raw}'")
                continue
            try:
                board[r][c] = parse_char(raw, n) or 0
            except SudokuError as e:
                errors.append(f"Cell ({r+1},{c+1}): {e}")

    return board, errors


def render_board_html(board: Board, rpb: int, cpb: int, title: str) -> None:
    """
    Render a Sudoku grid with thick box borders using HTML/CSS.
    Boxes are rpb rows tall and cpb columns wide.
    """
    n = rpb * cpb

    html = [f"<div class='sudoku-wrap'><div class='sudoku-title'>{title}</div>"]
    html.append("<table class='sudoku'>")
    for r in range(n):
        html.append("<tr>")
        for c in range(n):
            cls = []
            if r % rpb == 0:
                cls.append("top")
            if c % cpb == 0:
                cls.append("left")
            if (r + 1) % rpb == 0:
                cls.append("bottom")
            if (c + 1) % cpb == 0:
                cls.append("right")
            cls_attr = f" class='{' '.join(cls)}'" if cls else ""
            v = board[r][c]
            disp = "" if v == 0 else to_char(v)
            html.append(f"<td{cls_attr}>{disp}</td>")
        html.append("</tr>")
    html.append("</table></div>")

    st.markdown("".join(html), unsafe_allow_html=True)


def solutions_df(solutions: List[Board]) -> pd.DataFrame:
    rows = []
    for i, board in enumerate(solutions, start=1):
        rows.append(
            {
                "solution": i,
                "first_row": " ".join(to_char(v) for v in board[0]),
                "diagonal": " ".join(to_char(board[k][k]) for k in range(len(board))),
            }
        )
    return pd.DataFrame(rows)


def enumerate_capped(board: Board, rpb: int, cpb: int, cap: int) -> Tuple[List[Board], bool]:
    """First `cap` solutions, plus whether more exist."""
    grid = Grid.from_board(board, rpb, cpb)
    found: List[Board] = []
    more = False
    solutions = Solver(grid).iter_solutions()
    try:
        for sol in solutions:
            if len(found) == cap:
                more = True
                break
            found.append(sol)
    finally:
        solutions.close()
    return found, more


st.set_page_config(page_title="Box Sudoku Solver", layout="wide")

st.markdown(
    """
<style>
div[data-testid="stTextInput"] input {
    text-align: center;
    font-size: 22px !important;
    height: 2.8rem;
    padding: 0.25rem 0.25rem;
}
div[data-testid="stTextInput"] { margin-bottom: 0rem; }

.sudoku-wrap { margin-top: 0.5rem; }
.sudoku-title { font-size: 1.05rem; font-weight: 600; margin: 0.5rem 0 0.35rem 0; }
table.sudoku { border-collapse: collapse; }
table.sudoku td {
    width: 2.8rem;
    height: 2.8rem;
    text-align: center;
    vertical-align: middle;
    font-size: 22px;
    border: 1px solid rgba(49, 51, 63, 0.25);
}
table.sudoku td.top { border-top: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.left { border-left: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.bottom { border-bottom: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.right { border-right: 3px solid rgba(49, 51, 63, 0.65); }

.sudoku-spacer { height: 0.25rem; }
</style>
""",
    unsafe_allow_html=True,
)

st.title("Box Sudoku Solver")
st.caption("Leave cells blank (or enter . or 0). Values 1-9, then A=10, B=11, ... Click **Solve** to list every solution.")

# ---- Sidebar controls ----
with st.sidebar:
    st.header("Settings")
    if "rpb" not in st.session_state:
        st.session_state.rpb = DEFAULT_ROWS_PER_BOX
    if "cpb" not in st.session_state:
        st.session_state.cpb = DEFAULT_COLUMNS_PER_BOX

    rpb_choice = st.selectbox("Rows per box", BOX_DIMENSIONS, index=BOX_DIMENSIONS.index(st.session_state.rpb))
    cpb_choice = st.selectbox("Columns per box", BOX_DIMENSIONS, index=BOX_DIMENSIONS.index(st.session_state.cpb))

    if (rpb_choice, cpb_choice) != (st.session_state.rpb, st.session_state.cpb):
        st.session_state.rpb = rpb_choice
        st.session_state.cpb = cpb_choice
        reset_board(rpb_choice, cpb_choice)

    st.divider()
    if st.button("Reset board", use_container_width=True):
        reset_board(st.session_state.rpb, st.session_state.cpb)
    st.caption(f"Showing at most {max_solutions()} solutions.")

rpb = int(st.session_state.rpb)
cpb = int(st.session_state.cpb)
n = rpb * cpb

# ---- Input grid in a form (prevents rerun on every keystroke) ----
st.subheader(f"Input ({n} x {n})")

with st.form("sudoku_form", clear_on_submit=False):
    spacer_w = 0.18
    widths = []
    for g in range(rpb):
        widths.extend([1.0] * cpb)
        if g != rpb - 1:
            widths.append(spacer_w)

    for r in range(n):
        cols = st.columns(widths, gap="small")
        col_idx = 0
        for c in range(n):
            if c > 0 and c % cpb == 0:
                col_idx += 1  # skip spacer column
            with cols[col_idx]:
                key = cell_key(rpb, cpb, r, c)
                if key not in st.session_state:
                    st.session_state[key] = ""
                st.text_input(
                    label="",
                    key=key,
                    label_visibility="collapsed",
                    placeholder="",
                )
            col_idx += 1

        if (r + 1) % rpb == 0 and (r + 1) != n:
            st.markdown("<div class='sudoku-spacer'></div>", unsafe_allow_html=True)

    colA, colB, colC = st.columns([1, 1, 2])
    validate_clicked = colA.form_submit_button("Validate", use_container_width=True)
    solve_clicked = colB.form_submit_button("Solve", use_container_width=True)

# ---- Actions ----
if validate_clicked or solve_clicked:
    board, parse_errors = parse_board(rpb, cpb)
    if parse_errors:
        st.error("Please fix these input issues:")
        st.write("\n".join([f"- {e}" for e in parse_errors]))
    else:
        ok, msg = validate_board(board, rpb, cpb)
        if not ok:
            st.error(msg)
        else:
            st.success("Board looks valid.")
            render_board_html(board, rpb, cpb, "Current board (preview)")

            if solve_clicked:
                cap = max_solutions()
                solutions, more = enumerate_capped(board, rpb, cpb, cap)
                if not solutions:
                    st.error("No solution found (the puzzle is unsolvable).")
                else:
                    if more:
                        st.warning(f"More than {cap} solutions exist; showing the first {cap}.")
                    else:
                        st.success(f"{len(solutions)} solution(s) found")
                    st.dataframe(solutions_df(solutions), use_container_width=True, hide_index=True)
                    for i, sol in enumerate(solutions, start=1):
                        render_board_html(sol, rpb, cpb, f"Solution {i}")

                    st.download_button(
                        "Download solutions as CSV",
                        data=solutions_to_csv(solutions),
                        file_name=f"sudoku_solutions_{rpb}x{cpb}.csv",
                        mime="text/csv",
                        use_container_width=False,
                    )
else:
    board, _ = parse_board(rpb, cpb)
    render_board_html(board, rpb, cpb, "Current board (preview)")
