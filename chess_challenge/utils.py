"""Utility helpers for checking board configurations.

These are reference checks used by the tests and by the analysis pipeline's
validation hooks; the search itself never calls them.
"""

from __future__ import annotations

from collections import Counter

from .attacks import threatened_squares
from .board import Board
from .pieces import CellState, PieceKind


def conflicts(board: Board) -> int:
    """Count ordered (attacker, victim) pairs of pieces on ``board``.

    Re-derives every piece's threatened squares from scratch, so it does not
    trust the threatened markings stored on the board.
    """
    placements = board.placements()
    total = 0
    for origin, piece in placements.items():
        for square in threatened_squares(piece, origin, board.dims):
            if square in placements:
                total += 1
    return total


def is_valid_configuration(board: Board) -> bool:
    """Return True if ``board`` is a well-formed, conflict-free configuration.

    Contract
    - No piece attacks another piece.
    - Every square attacked by a piece is marked threatened or occupied.
    - Squares attacked by no piece are not marked threatened.
    """
    placements = board.placements()
    attacked = set()
    for origin, piece in placements.items():
        attacked.update(threatened_squares(piece, origin, board.dims))
    if attacked.intersection(placements):
        return False
    for coord in board.all_coordinates():
        state = board.get(coord)
        if coord in attacked and state is CellState.EMPTY:
            return False
        if coord not in attacked and state is CellState.THREATENED:
            return False
    return True


def piece_counts(board: Board) -> "Counter[PieceKind]":
    """Return how many pieces of each kind stand on ``board``."""
    return Counter(board.placements().values())
