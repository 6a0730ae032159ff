"""Tests for the per-piece attack geometry."""

from pathlib import Path
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chess_challenge.attacks import attack_indices, threatened_squares
from chess_challenge.errors import InvalidLocation
from chess_challenge.pieces import PieceKind


def _board_sizes():
    for width in range(1, 6):
        for height in range(1, 6):
            yield width, height


def _origins(width, height):
    return [(x, y) for y in range(height) for x in range(width)]


class AttackGeometryTests(unittest.TestCase):
    def test_never_contains_origin_or_leaves_board(self):
        for width, height in _board_sizes():
            for origin in _origins(width, height):
                for piece in PieceKind:
                    squares = threatened_squares(piece, origin, (width, height))
                    self.assertNotIn(origin, squares)
                    for x, y in squares:
                        self.assertTrue(0 <= x < width and 0 <= y < height, (piece, origin, (x, y)))

    def test_queen_is_union_of_bishop_and_rook(self):
        for width, height in _board_sizes():
            dims = (width, height)
            for origin in _origins(width, height):
                self.assertEqual(
                    threatened_squares(PieceKind.QUEEN, origin, dims),
                    threatened_squares(PieceKind.BISHOP, origin, dims) | threatened_squares(PieceKind.ROOK, origin, dims),
                )

    def test_king(self):
        self.assertEqual(
            threatened_squares(PieceKind.KING, (0, 0), (3, 3)),
            {(1, 0), (0, 1), (1, 1)},
        )
        self.assertEqual(len(threatened_squares(PieceKind.KING, (1, 1), (3, 3))), 8)
        self.assertEqual(threatened_squares(PieceKind.KING, (0, 0), (1, 1)), frozenset())

    def test_knight(self):
        self.assertEqual(len(threatened_squares(PieceKind.KNIGHT, (2, 2), (5, 5))), 8)
        self.assertEqual(
            threatened_squares(PieceKind.KNIGHT, (0, 0), (5, 5)),
            {(2, 1), (1, 2)},
        )
        self.assertEqual(threatened_squares(PieceKind.KNIGHT, (1, 1), (3, 3)), frozenset())

    def test_rook(self):
        self.assertEqual(
            threatened_squares(PieceKind.ROOK, (1, 1), (3, 3)),
            {(0, 1), (2, 1), (1, 0), (1, 2)},
        )
        self.assertEqual(len(threatened_squares(PieceKind.ROOK, (0, 0), (4, 2))), 4)

    def test_bishop_rays_reach_the_edge(self):
        self.assertEqual(
            threatened_squares(PieceKind.BISHOP, (0, 0), (4, 4)),
            {(1, 1), (2, 2), (3, 3)},
        )
        self.assertEqual(
            threatened_squares(PieceKind.BISHOP, (1, 2), (4, 4)),
            {(0, 1), (2, 3), (0, 3), (2, 1), (3, 0)},
        )

    def test_origin_outside_board_raises(self):
        with self.assertRaises(InvalidLocation):
            threatened_squares(PieceKind.KING, (3, 0), (3, 3))
        with self.assertRaises(InvalidLocation):
            threatened_squares(PieceKind.QUEEN, (0, -1), (3, 3))

    def test_attack_indices_match_coordinates(self):
        dims = (4, 3)
        for origin in _origins(*dims):
            for piece in PieceKind:
                indices = attack_indices(piece, origin, dims)
                expected = sorted(y * dims[0] + x for x, y in threatened_squares(piece, origin, dims))
                self.assertEqual(indices.tolist(), expected)


if __name__ == "__main__":
    unittest.main()
