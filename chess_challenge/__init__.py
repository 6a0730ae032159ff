"""Non-attacking chess piece placement solver."""

from .attacks import attack_indices, threatened_squares
from .board import Board, Coordinate, Dimensions
from .errors import (
    ChessChallengeError,
    InternalConsistencyError,
    InvalidInput,
    InvalidLocation,
    OutOfBounds,
)
from .pieces import CellState, PieceKind
from .placement import try_place
from .render import render_board, render_boards
from .search import SearchResult, SearchStats, SearchStatus, find_solutions, search, solve
from .utils import conflicts, is_valid_configuration, piece_counts

__all__ = [
    "Board",
    "Coordinate",
    "Dimensions",
    "CellState",
    "PieceKind",
    "threatened_squares",
    "attack_indices",
    "try_place",
    "search",
    "solve",
    "find_solutions",
    "SearchResult",
    "SearchStats",
    "SearchStatus",
    "render_board",
    "render_boards",
    "conflicts",
    "is_valid_configuration",
    "piece_counts",
    "ChessChallengeError",
    "InvalidInput",
    "InvalidLocation",
    "OutOfBounds",
    "InternalConsistencyError",
]
