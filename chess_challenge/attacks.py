"""Attack geometry for the five non-pawn pieces.

``threatened_squares(piece, origin, dims)`` returns every square a piece
standing on ``origin`` attacks on a board of size ``dims = (width, height)``.
The result never contains the origin and never leaves the board.

Per-piece rules
---------------
- King: the eight neighbouring squares.
- Bishop: the four diagonal rays, each running up to and including the edge.
- Rook: the whole row and column of the origin.
- Knight: the eight ``(±2, ±1)`` / ``(±1, ±2)`` jumps.
- Queen: Bishop and Rook combined.

The search engine does not work with coordinate sets directly: it asks for
``attack_indices``, the same squares as a sorted numpy array of flat row-major
indices, memoised per ``(piece, origin, dims)`` in a bounded LRU cache.
"""

from __future__ import annotations

from functools import lru_cache
from typing import FrozenSet, List

import numpy as np

from .board import Coordinate, Dimensions
from .errors import InvalidInput, InvalidLocation
from .pieces import PieceKind

KING_STEPS = [(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)]
KNIGHT_STEPS = [(2, 1), (2, -1), (-2, 1), (-2, -1), (1, 2), (1, -2), (-1, 2), (-1, -2)]
DIAGONALS = [(1, 1), (1, -1), (-1, 1), (-1, -1)]

# Five pieces on every square of a board up to 28x28; older board sizes are evicted first.
ATTACK_CACHE_SIZE = 4096


def in_bounds(coord: Coordinate, dims: Dimensions) -> bool:
    x, y = coord
    width, height = dims
    return 0 <= x < width and 0 <= y < height


def _steps(origin: Coordinate, dims: Dimensions, steps) -> List[Coordinate]:
    x, y = origin
    return [(x + dx, y + dy) for dx, dy in steps if in_bounds((x + dx, y + dy), dims)]


def _rays(origin: Coordinate, dims: Dimensions, directions) -> List[Coordinate]:
    squares: List[Coordinate] = []
    for dx, dy in directions:
        x, y = origin[0] + dx, origin[1] + dy
        while in_bounds((x, y), dims):
            squares.append((x, y))
            x, y = x + dx, y + dy
    return squares


def _lines(origin: Coordinate, dims: Dimensions) -> List[Coordinate]:
    px, py = origin
    width, height = dims
    row = [(x, py) for x in range(width) if x != px]
    column = [(px, y) for y in range(height) if y != py]
    return row + column


def threatened_squares(piece: PieceKind, origin: Coordinate, dims: Dimensions) -> FrozenSet[Coordinate]:
    """Return the set of squares ``piece`` attacks from ``origin``.

    Raises
    ------
    InvalidLocation
        If ``origin`` is outside the board.
    """
    if not in_bounds(origin, dims):
        raise InvalidLocation(f"Piece origin {origin} outside {dims[0]}x{dims[1]} board")

    if piece is PieceKind.KING:
        squares = _steps(origin, dims, KING_STEPS)
    elif piece is PieceKind.KNIGHT:
        squares = _steps(origin, dims, KNIGHT_STEPS)
    elif piece is PieceKind.BISHOP:
        squares = _rays(origin, dims, DIAGONALS)
    elif piece is PieceKind.ROOK:
        squares = _lines(origin, dims)
    elif piece is PieceKind.QUEEN:
        squares = _rays(origin, dims, DIAGONALS) + _lines(origin, dims)
    else:
        raise InvalidInput(f"Unsupported piece {piece!r}")
    return frozenset(squares)


@lru_cache(maxsize=ATTACK_CACHE_SIZE)
def attack_indices(piece: PieceKind, origin: Coordinate, dims: Dimensions) -> np.ndarray:
    """Threatened squares of ``piece`` at ``origin`` as sorted flat indices."""
    width = dims[0]
    indices = np.fromiter(
        (y * width + x for x, y in threatened_squares(piece, origin, dims)),
        dtype=np.intp,
    )
    indices = np.unique(indices)
    indices.setflags(write=False)
    return indices
