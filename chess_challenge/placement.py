"""Placement rule: the only place where a new board configuration is derived."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .attacks import attack_indices
from .board import Board, Coordinate
from .pieces import CellState, PieceKind


def try_place(piece: PieceKind, position: Coordinate, board: Board) -> Optional[Board]:
    """Place ``piece`` on ``position`` if it is safe to do so.

    Returns ``None`` when the target square is not empty (it already holds a
    piece or is attacked by one) or when the new piece would attack a piece
    already on the board. Otherwise returns a new board with the piece placed
    and every square it attacks marked as threatened; ``board`` is untouched.
    """
    index = board.index(position)
    if board.cells[index] != CellState.EMPTY:
        return None

    threatened = attack_indices(piece, position, board.dims)
    cells = np.frombuffer(board.cells, dtype=np.uint8)
    if threatened.size and (cells[threatened] >= int(CellState.KING)).any():
        return None

    new_cells = cells.copy()
    new_cells[threatened] = int(CellState.THREATENED)
    new_cells[index] = int(piece.cell)
    return Board(board.width, board.height, new_cells.tobytes())
