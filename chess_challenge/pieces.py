"""Piece kinds and cell states.

Cells are encoded as small integers so a whole board fits in a ``bytes``
object: ``0`` is empty, ``1`` is threatened and ``2..6`` hold a piece.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Optional

from .errors import InvalidInput


class CellState(IntEnum):
    """State of a single board cell."""

    EMPTY = 0
    THREATENED = 1
    KING = 2
    QUEEN = 3
    BISHOP = 4
    ROOK = 5
    KNIGHT = 6

    @property
    def is_occupied(self) -> bool:
        return self >= CellState.KING

    @property
    def piece(self) -> Optional["PieceKind"]:
        """Return the piece standing on the cell, or None for empty/threatened."""
        if not self.is_occupied:
            return None
        return PieceKind[self.name]


class PieceKind(str, Enum):
    """The five non-pawn chess pieces."""

    KING = "king"
    QUEEN = "queen"
    BISHOP = "bishop"
    ROOK = "rook"
    KNIGHT = "knight"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def cell(self) -> CellState:
        """Cell state of a square occupied by this piece."""
        return CellState[self.name]

    @classmethod
    def parse(cls, value: Any) -> "PieceKind":
        """Return the piece kind named by ``value``.

        Accepts a ``PieceKind``, a case-insensitive name (``"rook"``) or a
        one-letter symbol (``"R"``, ``"N"`` for the knight).
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            token = value.strip().lower()
            for kind in cls:
                if token == kind.value or token == kind.symbol.lower():
                    return kind
        raise InvalidInput(
            f"Unknown piece {value!r}. Allowed: "
            + ", ".join(f"{kind.value} ({kind.symbol})" for kind in cls)
        )


_SYMBOLS = {
    PieceKind.KING: "K",
    PieceKind.QUEEN: "Q",
    PieceKind.BISHOP: "B",
    PieceKind.ROOK: "R",
    PieceKind.KNIGHT: "N",
}
