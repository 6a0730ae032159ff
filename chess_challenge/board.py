"""Immutable board configurations.

Representation
--------------
A board is a flat, row-major ``bytes`` of ``CellState`` codes together with
its dimensions. Coordinates are ``(x, y)`` pairs where ``x`` is the column and
``y`` the row, so cell ``(x, y)`` lives at index ``y * width + x``.

The ``bytes`` encoding is the canonical form used by the search engine's
deduplication set: equality and hashing compare the dimensions and the raw
cell codes, which keeps the per-placement membership check cheap.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Tuple

import numpy as np

from .errors import InvalidInput, OutOfBounds
from .pieces import CellState, PieceKind

Coordinate = Tuple[int, int]
Dimensions = Tuple[int, int]


@dataclass(frozen=True)
class Board:
    """A complete assignment of every cell to empty, threatened or a piece."""

    width: int
    height: int
    cells: bytes

    @classmethod
    def create(cls, width: int, height: int) -> "Board":
        """Return a ``width × height`` board with every cell empty."""
        if width <= 0 or height <= 0:
            raise InvalidInput(f"Board dimensions must be positive, got {width}x{height}")
        return cls(width, height, bytes(width * height))

    @classmethod
    def from_placements(
        cls, width: int, height: int, placements: Mapping[Coordinate, PieceKind]
    ) -> "Board":
        """Build a well-formed board holding ``placements``.

        Pieces are placed through the placement rule, so threatened squares are
        marked exactly as the search engine would mark them. Raises
        ``InvalidInput`` if two of the given pieces attack each other.
        """
        from .placement import try_place

        board = cls.create(width, height)
        for coord, piece in sorted(placements.items(), key=lambda item: (item[0][1], item[0][0])):
            placed = try_place(PieceKind.parse(piece), coord, board)
            if placed is None:
                raise InvalidInput(f"Cannot place {piece} at {coord}: square is attacked or attacks another piece")
            board = placed
        return board

    @property
    def dims(self) -> Dimensions:
        return self.width, self.height

    def contains(self, coord: Coordinate) -> bool:
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, coord: Coordinate) -> int:
        """Return the flat row-major index of ``coord``."""
        if not self.contains(coord):
            raise OutOfBounds(f"Coordinate {coord} outside {self.width}x{self.height} board")
        x, y = coord
        return y * self.width + x

    def coordinate(self, index: int) -> Coordinate:
        """Inverse of :meth:`index`."""
        return index % self.width, index // self.width

    def get(self, coord: Coordinate) -> CellState:
        return CellState(self.cells[self.index(coord)])

    def with_cell(self, coord: Coordinate, state: CellState) -> "Board":
        """Return a copy of the board with ``coord`` set to ``state``."""
        index = self.index(coord)
        cells = bytearray(self.cells)
        cells[index] = int(state)
        return Board(self.width, self.height, bytes(cells))

    def with_cells(self, coords: Iterable[Coordinate], state: CellState) -> "Board":
        """Return a copy of the board with every coordinate in ``coords`` set to ``state``."""
        indices = [self.index(coord) for coord in coords]
        if not indices:
            return self
        array = self.as_array().reshape(-1).copy()
        array[indices] = int(state)
        return Board(self.width, self.height, array.tobytes())

    def all_coordinates(self) -> List[Coordinate]:
        """Every coordinate of the board in row-major order."""
        return [(x, y) for y in range(self.height) for x in range(self.width)]

    def as_array(self) -> np.ndarray:
        """Read-only ``(height, width)`` view of the cell codes."""
        return np.frombuffer(self.cells, dtype=np.uint8).reshape(self.height, self.width)

    def placements(self) -> Dict[Coordinate, PieceKind]:
        """Map every occupied coordinate to the piece standing on it."""
        result: Dict[Coordinate, PieceKind] = {}
        for index, code in enumerate(self.cells):
            if code >= CellState.KING:
                result[self.coordinate(index)] = CellState(code).piece  # type: ignore[assignment]
        return result

    def occupied(self) -> List[Coordinate]:
        return list(self.placements())
