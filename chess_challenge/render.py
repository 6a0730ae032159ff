"""Plain-text rendering of board configurations.

Boards are printed row by row, one glyph per cell: the piece symbol for an
occupied cell and a blank glyph for empty or threatened cells.
"""

from __future__ import annotations

from typing import Dict, Iterable

from .board import Board
from .pieces import CellState

BLANK = "_"

SYMBOLS: Dict[CellState, str] = {
    CellState.EMPTY: BLANK,
    CellState.THREATENED: BLANK,
    CellState.KING: "K",
    CellState.QUEEN: "Q",
    CellState.BISHOP: "B",
    CellState.ROOK: "R",
    CellState.KNIGHT: "N",
}


def render_board(board: Board, blank: str = BLANK) -> str:
    symbols = dict(SYMBOLS)
    symbols[CellState.EMPTY] = blank
    symbols[CellState.THREATENED] = blank
    rows = []
    for y in range(board.height):
        rows.append("".join(symbols[board.get((x, y))] for x in range(board.width)))
    return "\n".join(rows)


def render_boards(boards: Iterable[Board], blank: str = BLANK) -> str:
    """Render several boards separated by an empty line."""
    return "\n\n".join(render_board(board, blank) for board in boards)


def print_boards(boards: Iterable[Board], blank: str = BLANK) -> None:
    for board in boards:
        print(render_board(board, blank))
        print()
