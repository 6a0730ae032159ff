"""Command-line entry point for a single solve.

Example::

    chess-challenge K,K,Q,Q,B,B,N 7 7 --count-only --mode relaxed --workers 4

Prints every solution board (unless ``--count-only`` or ``--quiet``), then the
number of solutions and the elapsed time.
"""
from __future__ import annotations

import argparse
import os
from typing import List, Optional

from .analysis.stats import ProgressPrinter
from .errors import InvalidInput
from .pieces import PieceKind
from .render import print_boards
from .search import SEARCH_MODES, find_solutions


def parse_pieces(piece_args: List[str]) -> List[PieceKind]:
    """Normalize piece tokens into a flat list of piece kinds.

    Accepts separate tokens (``K K R``), comma-separated lists (``K,K,R``) and
    full names (``king,king,rook``), preserving the given order.
    """
    pieces: List[PieceKind] = []
    for entry in piece_args:
        for token in entry.split(","):
            token = token.strip()
            if token:
                pieces.append(PieceKind.parse(token))
    if not pieces:
        raise InvalidInput("At least one piece is required")
    return pieces


def build_arg_parser():
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Find every placement of chess pieces on a board where no piece attacks another."
    )
    parser.add_argument("pieces", nargs="+", help="Pieces in placement order: K Q B R N or names, comma-separated or repeated.")
    parser.add_argument("width", type=int, help="Board width (columns).")
    parser.add_argument("height", type=int, help="Board height (rows).")
    parser.add_argument("--count-only", action="store_true", help="Only count solutions; recommended for larger boards to save memory.")
    parser.add_argument("--mode", choices=list(SEARCH_MODES), default="strict", help="Dedup sharing discipline (default: strict).")
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help=(
            "Outer-ply branches explored concurrently (default: 1). Strict mode uses threads, which share "
            "the GIL and give no speedup; relaxed mode uses processes and scales with cores "
            f"(available CPU cores: {os.cpu_count()})."
        ),
    )
    parser.add_argument("--progress", action="store_true", help="Print a progress line per completed first-piece square.")
    parser.add_argument("--quiet", action="store_true", help="Do not print solution boards.")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse arguments, solve and print the results."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        pieces = parse_pieces(args.pieces)
        progress = ProgressPrinter(args.width * args.height, "Search") if args.progress else None
        result = find_solutions(
            pieces,
            args.width,
            args.height,
            count_only=args.count_only,
            mode=args.mode,
            workers=args.workers,
            progress=(lambda done, total: progress.update(done)) if progress else None,
        )
    except InvalidInput as exc:
        print(f"Invalid input: {exc}")
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        print("\nExecution interrupted by user.")
        raise SystemExit(130) from None

    if not args.count_only and not args.quiet:
        print_boards(result.solutions)
    print(f"{result.solution_count} solutions found.")
    print(
        f"Elapsed time: {result.stats.elapsed_seconds:.3f}s "
        f"(nodes={result.stats.nodes_explored}, duplicates pruned={result.stats.duplicates_pruned})"
    )


if __name__ == "__main__":
    main()
