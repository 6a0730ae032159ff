"""Backtracking search for non-attacking placements of a piece sequence.

This module enumerates every board configuration in which all pieces of an
ordered sequence stand on the board without attacking each other, and exposes
two entry points:

- solve(pieces, width, height, count_only=False, ...): returns the pair
    ``(solutions, solution_count)``.
- find_solutions(pieces, width, height, count_only=False, ...): same search,
    returns a ``SearchResult`` carrying the inputs and effort counters.

Implementation overview
-----------------------
- Outer ply: the first piece is placed on every square of the empty board.
    Each placement roots an independent branch; failing to place it raises
    ``InternalConsistencyError``.
- Recursive descent: ``search`` tries the head of the remaining pieces on
    every square. Rejected placements are skipped; accepted boards already in
    the status' ``seen`` set are pruned, because a configuration reached through
    a different placement order has exactly the same subtree. A call with no
    remaining pieces records a solution.
- Deduplication key: ``Board`` itself (dimensions plus flat ``bytes`` of cell
    codes), so the membership test is a single hash lookup.

Concurrency disciplines
-----------------------
- ``"strict"`` (default): every branch shares one ``SearchStatus`` (dedup set,
    solutions, counter). Mutations go through ``claim``/``record`` under a
    ``threading.Lock``; branches run in the caller (``workers=1``) or on a
    thread pool. The recursion is pure Python, so threads hold the GIL
    in turn: extra workers overlap branches but do not speed the search up.
    Use relaxed mode to spread the work over CPU cores.
- ``"relaxed"``: each branch owns a private status and runs lock-free, in the
    caller or on a process pool. A branch rooted at square ``c`` only records
    solutions whose first square (row-major) holding the first piece's kind is
    ``c``. Every solution is reachable from that branch, so the merged count is
    exact even though branches may duplicate work.

Contract (public API)
---------------------
- Input: non-empty sequence of pieces (``PieceKind`` or names/symbols),
    positive integer ``width`` and ``height``. Violations raise
    ``InvalidInput`` before any search work.
- Output: solution boards (empty when ``count_only``) and the exact count.
- Determinism: the set of solutions and the count never depend on traversal
    order, mode or worker count; only the order of ``solutions`` may differ.
"""

from __future__ import annotations

import threading
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from contextlib import nullcontext
from dataclasses import asdict, dataclass, field
from numbers import Integral
from time import perf_counter
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .board import Board, Coordinate
from .errors import InternalConsistencyError, InvalidInput
from .pieces import PieceKind
from .placement import try_place

SEARCH_MODES = ("strict", "relaxed")

ProgressCallback = Callable[[int, int], None]


@dataclass
class SearchStats:
    """Effort counters for one search.

    ``nodes_explored`` counts every placement attempt (including rejected
    ones), ``placements`` the accepted new configurations and
    ``duplicates_pruned`` the accepted placements skipped because the resulting
    configuration had been seen before.
    """

    nodes_explored: int = 0
    placements: int = 0
    duplicates_pruned: int = 0
    branches: int = 0
    elapsed_seconds: float = 0.0

    def merge(self, other: "SearchStats") -> None:
        self.nodes_explored += other.nodes_explored
        self.placements += other.placements
        self.duplicates_pruned += other.duplicates_pruned
        self.branches += other.branches

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SearchStatus:
    """Solutions, solution count and seen configurations of one search.

    Parameters
    ----------
    count_only : bool
        When True, solutions are counted but not retained.
    lock : threading.Lock | None
        Guards every mutation when the status is shared between threads.
    """

    def __init__(self, count_only: bool = False, lock: Optional[threading.Lock] = None):
        self.count_only = count_only
        self.solutions: List[Board] = []
        self.solution_count = 0
        self.seen: Set[Board] = set()
        self._lock = lock if lock is not None else nullcontext()

    def claim(self, board: Board) -> bool:
        """Mark ``board`` as seen; return False if it already was."""
        with self._lock:
            if board in self.seen:
                return False
            self.seen.add(board)
            return True

    def record(self, board: Board) -> None:
        with self._lock:
            self.solution_count += 1
            if not self.count_only:
                self.solutions.append(board)


@dataclass
class SearchResult:
    pieces: Tuple[PieceKind, ...]
    width: int
    height: int
    count_only: bool
    mode: str
    workers: int
    solutions: List[Board] = field(default_factory=list)
    solution_count: int = 0
    stats: SearchStats = field(default_factory=SearchStats)

    def to_dict(self, include_boards: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "pieces": [piece.symbol for piece in self.pieces],
            "width": self.width,
            "height": self.height,
            "count_only": self.count_only,
            "mode": self.mode,
            "workers": self.workers,
            "solution_count": self.solution_count,
            "stats": self.stats.to_dict(),
        }
        if include_boards:
            payload["solutions"] = [
                {f"{x},{y}": piece.symbol for (x, y), piece in board.placements().items()}
                for board in self.solutions
            ]
        return payload


def search(
    remaining: Sequence[PieceKind],
    board: Board,
    status: SearchStatus,
    stats: Optional[SearchStats] = None,
    owner: Optional[Tuple[int, int]] = None,
    coordinates: Optional[Sequence[Coordinate]] = None,
) -> SearchStatus:
    """Place ``remaining`` pieces on ``board``, recording every solution in ``status``.

    ``owner`` is the ``(cell code, flat index)`` of a relaxed-mode branch root;
    when given, only solutions owned by that branch are recorded.
    ``coordinates`` is the row-major square list of the board, built once per
    search and handed down the recursion.
    """
    if stats is None:
        stats = SearchStats()
    if coordinates is None:
        coordinates = board.all_coordinates()

    if not remaining:
        if owner is None or _owns(board, owner):
            status.record(board)
        return status

    piece, rest = remaining[0], remaining[1:]
    for coord in coordinates:
        stats.nodes_explored += 1
        new_board = try_place(piece, coord, board)
        if new_board is None:
            continue
        if not status.claim(new_board):
            stats.duplicates_pruned += 1
            continue
        stats.placements += 1
        search(rest, new_board, status, stats, owner, coordinates)
    return status


def _owns(board: Board, owner: Tuple[int, int]) -> bool:
    code, index = owner
    return board.cells.index(code) == index


def _place_first(piece: PieceKind, coord: Coordinate, empty: Board) -> Board:
    placed = try_place(piece, coord, empty)
    if placed is None:
        raise InternalConsistencyError(
            f"The first piece ({piece.value}) could not be placed on {coord} of an empty board"
        )
    return placed


def _explore_relaxed_branch(
    params: Tuple[Tuple[PieceKind, ...], int, int, Coordinate, bool],
) -> Tuple[List[Board], int, SearchStats]:
    """Worker wrapper running one relaxed-mode branch (for process mapping)."""
    pieces, width, height, coord, count_only = params
    empty = Board.create(width, height)
    board = _place_first(pieces[0], coord, empty)
    status = SearchStatus(count_only)
    stats = SearchStats(nodes_explored=1, placements=1, branches=1)
    owner = (int(pieces[0].cell), empty.index(coord))
    search(pieces[1:], board, status, stats, owner=owner, coordinates=empty.all_coordinates())
    return status.solutions, status.solution_count, stats


def _search_strict(
    pieces: Tuple[PieceKind, ...],
    empty: Board,
    count_only: bool,
    workers: int,
    progress: Optional[ProgressCallback],
) -> Tuple[SearchStatus, SearchStats]:
    status = SearchStatus(count_only, lock=threading.Lock() if workers > 1 else None)
    stats = SearchStats()
    coordinates = empty.all_coordinates()
    total = len(coordinates)

    def explore(coord: Coordinate) -> SearchStats:
        local = SearchStats(nodes_explored=1, placements=1, branches=1)
        board = _place_first(pieces[0], coord, empty)
        search(pieces[1:], board, status, local, coordinates=coordinates)
        return local

    if workers == 1:
        for done, coord in enumerate(coordinates, start=1):
            stats.merge(explore(coord))
            if progress:
                progress(done, total)
        return status, stats

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(explore, coord) for coord in coordinates]
        for done, future in enumerate(as_completed(futures), start=1):
            stats.merge(future.result())
            if progress:
                progress(done, total)
    return status, stats


def _search_relaxed(
    pieces: Tuple[PieceKind, ...],
    empty: Board,
    count_only: bool,
    workers: int,
    progress: Optional[ProgressCallback],
) -> Tuple[SearchStatus, SearchStats]:
    params = [(pieces, empty.width, empty.height, coord, count_only) for coord in empty.all_coordinates()]
    total = len(params)
    outcomes: List[Optional[Tuple[List[Board], int, SearchStats]]] = [None] * total

    if workers == 1:
        for done, branch in enumerate(params, start=1):
            outcomes[done - 1] = _explore_relaxed_branch(branch)
            if progress:
                progress(done, total)
    else:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(_explore_relaxed_branch, branch): i for i, branch in enumerate(params)}
            for done, future in enumerate(as_completed(futures), start=1):
                outcomes[futures[future]] = future.result()
                if progress:
                    progress(done, total)

    # Merge in square order so the solution order does not depend on scheduling.
    status = SearchStatus(count_only)
    stats = SearchStats()
    for outcome in outcomes:
        if outcome is None:
            raise InternalConsistencyError("A relaxed-mode branch finished without reporting a result")
        solutions, count, local = outcome
        status.solutions.extend(solutions)
        status.solution_count += count
        stats.merge(local)
    return status, stats


def _validate(
    pieces: Iterable[Any], width: Any, height: Any, mode: str, workers: Any
) -> Tuple[PieceKind, ...]:
    if pieces is None or isinstance(pieces, (str, bytes)):
        raise InvalidInput("Pieces must be a sequence of piece kinds")
    try:
        kinds = tuple(PieceKind.parse(piece) for piece in pieces)
    except TypeError as exc:
        raise InvalidInput("Pieces must be a sequence of piece kinds") from exc
    if not kinds:
        raise InvalidInput("At least one piece is required")
    for label, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, Integral) or value <= 0:
            raise InvalidInput(f"Board {label} must be a positive integer, got {value!r}")
    if mode not in SEARCH_MODES:
        raise InvalidInput(f"Unknown search mode {mode!r}. Allowed: " + ", ".join(SEARCH_MODES))
    if isinstance(workers, bool) or not isinstance(workers, Integral) or workers < 1:
        raise InvalidInput(f"Workers must be a positive integer, got {workers!r}")
    return kinds


def find_solutions(
    pieces: Sequence[Any],
    width: int,
    height: int,
    count_only: bool = False,
    *,
    mode: str = "strict",
    workers: int = 1,
    progress: Optional[ProgressCallback] = None,
) -> SearchResult:
    """Enumerate every non-attacking placement of ``pieces`` on a ``width × height`` board.

    Parameters
    ----------
    pieces : Sequence[PieceKind | str]
        Pieces in placement order.
    width, height : int
        Board dimensions (both >= 1).
    count_only : bool
        Count solutions without retaining the boards.
    mode : {"strict", "relaxed"}
        Sharing discipline for the dedup set and results (see module docs).
    workers : int
        Number of outer-ply branches explored concurrently (threads in strict
        mode, processes in relaxed mode).
    progress : callable | None
        Called as ``progress(done, total)`` after each outer-ply branch.

    Returns
    -------
    SearchResult
        Solutions, exact count and effort counters.
    """
    kinds = _validate(pieces, width, height, mode, workers)
    width, height, workers = int(width), int(height), int(workers)

    start = perf_counter()
    empty = Board.create(width, height)
    if mode == "strict":
        status, stats = _search_strict(kinds, empty, count_only, workers, progress)
    else:
        status, stats = _search_relaxed(kinds, empty, count_only, workers, progress)
    stats.elapsed_seconds = perf_counter() - start

    return SearchResult(
        pieces=kinds,
        width=width,
        height=height,
        count_only=count_only,
        mode=mode,
        workers=workers,
        solutions=status.solutions,
        solution_count=status.solution_count,
        stats=stats,
    )


def solve(
    pieces: Sequence[Any],
    width: int,
    height: int,
    count_only: bool = False,
    *,
    mode: str = "strict",
    workers: int = 1,
    progress: Optional[ProgressCallback] = None,
) -> Tuple[List[Board], int]:
    """Return ``(solutions, solution_count)`` for ``pieces`` on a ``width × height`` board.

    ``solutions`` is empty when ``count_only`` is True; the count is always
    exact. See :func:`find_solutions` for the remaining parameters.
    """
    result = find_solutions(
        pieces, width, height, count_only, mode=mode, workers=workers, progress=progress
    )
    return result.solutions, result.solution_count
