"""Tests for the backtracking search engine."""

from pathlib import Path
import sys
import unittest
from unittest import mock

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chess_challenge.attacks import ATTACK_CACHE_SIZE, attack_indices
from chess_challenge.board import Board
from chess_challenge.errors import InternalConsistencyError, InvalidInput
from chess_challenge.pieces import PieceKind
from chess_challenge.search import SearchStatus, find_solutions, search, solve
from chess_challenge.utils import is_valid_configuration

K, Q, B, R, N = PieceKind.KING, PieceKind.QUEEN, PieceKind.BISHOP, PieceKind.ROOK, PieceKind.KNIGHT


def _placement_sets(solutions):
    return {frozenset(board.placements().items()) for board in solutions}


def _expected(*configurations):
    return {frozenset(configuration.items()) for configuration in configurations}


KKR_3X3 = _expected(
    {(0, 0): K, (2, 0): K, (1, 2): R},
    {(0, 0): K, (0, 2): K, (2, 1): R},
    {(2, 2): K, (2, 0): K, (0, 1): R},
    {(0, 2): K, (2, 2): K, (1, 0): R},
)

RRNNNN_4X4 = _expected(
    {(0, 0): R, (1, 1): N, (1, 3): N, (2, 2): R, (3, 1): N, (3, 3): N},
    {(0, 1): R, (1, 0): N, (1, 2): N, (2, 3): R, (3, 0): N, (3, 2): N},
    {(0, 2): R, (1, 1): N, (1, 3): N, (2, 0): R, (3, 1): N, (3, 3): N},
    {(0, 3): R, (1, 0): N, (1, 2): N, (2, 1): R, (3, 0): N, (3, 2): N},
    {(0, 1): N, (0, 3): N, (1, 0): R, (2, 1): N, (2, 3): N, (3, 2): R},
    {(0, 1): N, (0, 3): N, (1, 2): R, (2, 1): N, (2, 3): N, (3, 0): R},
    {(0, 0): N, (0, 2): N, (1, 1): R, (2, 0): N, (2, 2): N, (3, 3): R},
    {(0, 0): N, (0, 2): N, (1, 3): R, (2, 0): N, (2, 2): N, (3, 1): R},
)


class ReferenceScenarioTests(unittest.TestCase):
    def test_two_kings_and_a_rook_on_3x3(self):
        solutions, count = solve([K, K, R], 3, 3)
        self.assertEqual(count, 4)
        self.assertEqual(len(solutions), 4)
        self.assertEqual(_placement_sets(solutions), KKR_3X3)

    def test_two_rooks_and_four_knights_on_4x4(self):
        solutions, count = solve([R, R, N, N, N, N], 4, 4)
        self.assertEqual(count, 8)
        self.assertEqual(_placement_sets(solutions), RRNNNN_4X4)

    def test_single_king_on_1x1(self):
        solutions, count = solve([K], 1, 1)
        self.assertEqual(count, 1)
        self.assertEqual(solutions[0].placements(), {(0, 0): K})

    def test_two_queens_on_2x2_have_no_solution(self):
        solutions, count = solve([Q, Q], 2, 2)
        self.assertEqual(count, 0)
        self.assertEqual(solutions, [])

    def test_any_single_piece_on_1x1(self):
        for piece in PieceKind:
            _, count = solve([piece], 1, 1)
            self.assertEqual(count, 1, piece)


class CountTests(unittest.TestCase):
    def test_known_counts(self):
        cases = [
            ([Q] * 4, 4, 4, 2),
            ([Q] * 5, 5, 5, 10),
            ([R] * 3, 3, 3, 6),
            ([N, N], 3, 3, 28),
            ([B], 3, 3, 9),
            ([K, K], 2, 2, 0),
        ]
        for pieces, width, height, expected in cases:
            _, count = solve(pieces, width, height, count_only=True)
            self.assertEqual(count, expected, (pieces, width, height))

    def test_count_only_matches_full_search(self):
        for pieces, width, height in [([K, K, R], 3, 3), ([Q, B, N], 4, 3), ([R, N, N], 3, 4)]:
            solutions, count = solve(pieces, width, height)
            counted_solutions, counted = solve(pieces, width, height, count_only=True)
            self.assertEqual(counted, count)
            self.assertEqual(counted_solutions, [])

    def test_solutions_are_valid_and_distinct(self):
        solutions, count = solve([K, Q, B, N], 4, 4)
        self.assertEqual(len(set(solutions)), count)
        for board in solutions:
            self.assertTrue(is_valid_configuration(board))
            self.assertEqual(sorted(board.placements().values()), sorted([K, Q, B, N]))

    def test_piece_order_does_not_change_solution_set(self):
        first, _ = solve([K, K, R], 3, 3)
        second, _ = solve([R, K, K], 3, 3)
        self.assertEqual(_placement_sets(first), _placement_sets(second))

    def test_determinism(self):
        first, first_count = solve([R, R, N, N], 4, 4)
        second, second_count = solve([R, R, N, N], 4, 4)
        self.assertEqual(first_count, second_count)
        self.assertEqual(set(first), set(second))

    def test_rectangular_board(self):
        solutions, count = solve([R, R], 2, 3)
        # Two non-attacking rooks on a 2x3 board: pick two rows, then a column arrangement.
        self.assertEqual(count, 6)
        self.assertEqual(len(_placement_sets(solutions)), 6)

    def test_piece_names_and_symbols_are_accepted(self):
        _, by_symbol = solve(["K", "K", "R"], 3, 3, count_only=True)
        _, by_name = solve(["king", "King", "rook"], 3, 3, count_only=True)
        self.assertEqual(by_symbol, 4)
        self.assertEqual(by_name, 4)


class ConcurrencyModeTests(unittest.TestCase):
    def setUp(self):
        self.pieces = [K, K, R, N]
        self.reference, self.count = solve(self.pieces, 4, 4)

    def test_strict_threaded_matches_sequential(self):
        solutions, count = solve(self.pieces, 4, 4, workers=3)
        self.assertEqual(count, self.count)
        self.assertEqual(set(solutions), set(self.reference))

    def test_relaxed_sequential_matches_strict(self):
        solutions, count = solve(self.pieces, 4, 4, mode="relaxed")
        self.assertEqual(count, self.count)
        self.assertEqual(len(solutions), count)
        self.assertEqual(set(solutions), set(self.reference))

    def test_relaxed_process_pool_matches_strict(self):
        solutions, count = solve(self.pieces, 4, 4, mode="relaxed", workers=2)
        self.assertEqual(count, self.count)
        self.assertEqual(set(solutions), set(self.reference))

    def test_relaxed_count_only(self):
        _, count = solve([R, R, N, N, N, N], 4, 4, count_only=True, mode="relaxed")
        self.assertEqual(count, 8)

    def test_progress_reports_every_branch(self):
        calls = []
        solve([K, K], 3, 2, progress=lambda done, total: calls.append((done, total)))
        self.assertEqual(calls, [(i, 6) for i in range(1, 7)])

    def test_progress_does_not_change_result(self):
        calls = []
        _, count = solve(self.pieces, 4, 4, count_only=True, workers=2, progress=lambda d, t: calls.append(d))
        self.assertEqual(count, self.count)
        self.assertEqual(sorted(calls), list(range(1, 17)))


class SearchStatsTests(unittest.TestCase):
    def test_duplicates_are_pruned(self):
        result = find_solutions([K, K, R], 3, 3)
        self.assertEqual(result.solution_count, 4)
        self.assertGreater(result.stats.duplicates_pruned, 0)
        self.assertEqual(result.stats.branches, 9)
        self.assertGreaterEqual(result.stats.nodes_explored, result.stats.placements)
        self.assertGreaterEqual(result.stats.elapsed_seconds, 0.0)

    def test_result_to_dict(self):
        result = find_solutions([K], 1, 1)
        payload = result.to_dict(include_boards=True)
        self.assertEqual(payload["pieces"], ["K"])
        self.assertEqual(payload["solution_count"], 1)
        self.assertEqual(payload["solutions"], [{"0,0": "K"}])

    def test_status_claim_is_check_and_add(self):
        status = SearchStatus()
        board = Board.create(2, 2)
        self.assertTrue(status.claim(board))
        self.assertFalse(status.claim(board))

    def test_search_with_no_remaining_pieces_records_board(self):
        board = Board.from_placements(2, 2, {(0, 0): K})
        status = search([], board, SearchStatus())
        self.assertEqual(status.solution_count, 1)
        self.assertEqual(status.solutions, [board])

    def test_search_scans_only_the_given_coordinates(self):
        status = search([K], Board.create(2, 2), SearchStatus(), coordinates=[(1, 1)])
        self.assertEqual(status.solution_count, 1)
        self.assertEqual(status.solutions[0].placements(), {(1, 1): K})

    def test_attack_cache_is_bounded(self):
        self.assertEqual(attack_indices.cache_info().maxsize, ATTACK_CACHE_SIZE)

    def test_count_only_status_keeps_no_boards(self):
        status = search([], Board.create(1, 1), SearchStatus(count_only=True))
        self.assertEqual(status.solution_count, 1)
        self.assertEqual(status.solutions, [])


class InputValidationTests(unittest.TestCase):
    def test_rejects_bad_arguments(self):
        bad_calls = [
            ([], 3, 3),
            ([K, "pawn"], 3, 3),
            ("KKR", 3, 3),
            (None, 3, 3),
            ([K], 0, 3),
            ([K], 3, -2),
            ([K], True, 3),
            ([K], 2.5, 3),
        ]
        for pieces, width, height in bad_calls:
            with self.assertRaises(InvalidInput, msg=(pieces, width, height)):
                solve(pieces, width, height)

    def test_rejects_bad_mode_and_workers(self):
        with self.assertRaises(InvalidInput):
            solve([K], 2, 2, mode="lazy")
        with self.assertRaises(InvalidInput):
            solve([K], 2, 2, workers=0)

    def test_invalid_input_is_a_value_error(self):
        with self.assertRaises(ValueError):
            solve([], 1, 1)

    def test_missing_relaxed_branch_result_is_fatal(self):
        with mock.patch("chess_challenge.search._explore_relaxed_branch", return_value=None):
            with self.assertRaises(InternalConsistencyError):
                solve([K], 2, 2, mode="relaxed")

    def test_unplaceable_first_piece_is_fatal(self):
        with mock.patch("chess_challenge.search.try_place", return_value=None):
            with self.assertRaises(InternalConsistencyError):
                solve([K], 2, 2)


if __name__ == "__main__":
    unittest.main()
