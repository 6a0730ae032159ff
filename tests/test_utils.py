"""Tests for the configuration checks in chess_challenge.utils."""

from pathlib import Path
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chess_challenge.board import Board
from chess_challenge.pieces import CellState, PieceKind
from chess_challenge.utils import conflicts, is_valid_configuration, piece_counts


class ConfigurationCheckTests(unittest.TestCase):
    def test_well_formed_board_is_valid(self):
        board = Board.from_placements(3, 3, {(0, 0): PieceKind.KING, (2, 0): PieceKind.KING, (1, 2): PieceKind.ROOK})
        self.assertEqual(conflicts(board), 0)
        self.assertTrue(is_valid_configuration(board))

    def test_attacking_pieces_are_counted_both_ways(self):
        board = Board.create(3, 3).with_cell((0, 0), CellState.KING).with_cell((1, 0), CellState.ROOK)
        self.assertEqual(conflicts(board), 2)
        self.assertFalse(is_valid_configuration(board))

    def test_one_sided_attack(self):
        # The rook sees the bishop along row 0; the bishop cannot answer.
        board = Board.create(4, 4).with_cell((0, 0), CellState.ROOK).with_cell((3, 0), CellState.BISHOP)
        self.assertEqual(conflicts(board), 1)

    def test_missing_threat_marks_are_invalid(self):
        board = Board.create(2, 2).with_cell((0, 0), CellState.KING)
        self.assertEqual(conflicts(board), 0)
        self.assertFalse(is_valid_configuration(board))

    def test_spurious_threat_marks_are_invalid(self):
        board = Board.from_placements(3, 3, {(0, 0): PieceKind.KING}).with_cell((2, 2), CellState.THREATENED)
        self.assertFalse(is_valid_configuration(board))

    def test_empty_board_is_valid(self):
        self.assertTrue(is_valid_configuration(Board.create(3, 2)))

    def test_piece_counts(self):
        board = Board.from_placements(
            4, 4,
            {(0, 0): PieceKind.ROOK, (2, 2): PieceKind.ROOK, (1, 1): PieceKind.KNIGHT, (3, 3): PieceKind.KNIGHT},
        )
        counts = piece_counts(board)
        self.assertEqual(counts[PieceKind.ROOK], 2)
        self.assertEqual(counts[PieceKind.KNIGHT], 2)
        self.assertEqual(counts[PieceKind.QUEEN], 0)


if __name__ == "__main__":
    unittest.main()
