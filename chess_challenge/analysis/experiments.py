"""Benchmark runners for the placement search (sequential and parallel).

These routines execute repeatable batches of searches for a list of problem
instances and a set of search modes, collecting solution counts and effort
metrics (explored nodes, accepted placements, pruned duplicates, wall time).

Outputs are structured dictionaries suitable for CSV export and plotting.
Validation hooks optionally check solution correctness, cross-mode agreement
and agreement with previously recorded reference counts.
"""
from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from typing import Any, Dict, List, Mapping, Optional, Tuple

from . import settings
from .stats import (
    ExperimentResults,
    ProgressPrinter,
    RunRecord,
    compute_grouped_statistics,
)
from chess_challenge.pieces import PieceKind
from chess_challenge.search import find_solutions
from chess_challenge.utils import is_valid_configuration

RunParams = Tuple[str, List[str], int, int, str, int, bool, bool]


# Reusable workers -----------------------------------------------------------

def run_single_problem(params: RunParams) -> RunRecord:
    """Worker wrapper to invoke a single search (for parallel mapping)."""
    name, pieces, width, height, mode, workers, count_only, validate = params
    result = find_solutions(pieces, width, height, count_only, mode=mode, workers=workers)

    valid = True
    if validate and not count_only:
        distinct = set(result.solutions)
        valid = len(distinct) == len(result.solutions) == result.solution_count and all(
            is_valid_configuration(board) for board in distinct
        )

    return {
        "problem": name,
        "mode": mode,
        "workers": workers,
        "solution_count": result.solution_count,
        "nodes": result.stats.nodes_explored,
        "placements": result.stats.placements,
        "duplicates_pruned": result.stats.duplicates_pruned,
        "time": result.stats.elapsed_seconds,
        "valid": valid,
    }


def normalize_problem(problem: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a problem definition with typed fields and a default name.

    The default name spells the pieces by symbol (``KNN_4x4``), so ``"king"``
    and ``"knight"`` never collide. Raises a ``ValueError`` naming the missing
    keys when the definition is incomplete.
    """
    missing = [key for key in ("pieces", "width", "height") if key not in problem]
    if missing:
        raise ValueError(f"Problem definition {dict(problem)} is missing: {', '.join(missing)}")
    pieces = problem["pieces"]
    if isinstance(pieces, str):
        pieces = [token.strip() for token in pieces.split(",") if token.strip()]
    width, height = int(problem["width"]), int(problem["height"])
    name = problem.get("name") or f"{''.join(PieceKind.parse(p).symbol for p in pieces)}_{width}x{height}"
    return {"name": str(name), "pieces": [str(p) for p in pieces], "width": width, "height": height}


def ensure_unique_names(problems: List[Dict[str, Any]]) -> None:
    """Raise ``ValueError`` if two problems share a name.

    Runs are grouped by problem name, so a shared name would merge the runs of
    different problems into one result entry.
    """
    seen = set()
    duplicates = []
    for problem in problems:
        if problem["name"] in seen and problem["name"] not in duplicates:
            duplicates.append(problem["name"])
        seen.add(problem["name"])
    if duplicates:
        raise ValueError("Duplicate problem names: " + ", ".join(duplicates))


def _build_tasks(
    problem: Dict[str, Any], runs: int, modes: List[str], workers: int, count_only: bool, validate: bool
) -> List[RunParams]:
    return [
        (problem["name"], problem["pieces"], problem["width"], problem["height"], mode, workers, count_only, validate)
        for mode in modes
        for _ in range(runs)
    ]


def _shape_results(problems: List[Dict[str, Any]], records: List[RunRecord]) -> ExperimentResults:
    results: ExperimentResults = {}
    for problem in problems:
        problem_runs = [r for r in records if r["problem"] == problem["name"]]
        results[problem["name"]] = {
            "name": problem["name"],
            "pieces": problem["pieces"],
            "width": problem["width"],
            "height": problem["height"],
            "modes": compute_grouped_statistics(problem_runs),
        }
    return results


def validate_results(results: ExperimentResults, reference_counts: Optional[Mapping[str, int]] = None) -> None:
    """Raise ``AssertionError`` if any run contradicts another or a reference count."""
    reference_counts = reference_counts or {}
    for name, entry in results.items():
        observed = set()
        for mode, mode_entry in entry["modes"].items():
            if not mode_entry.get("consistent", True):
                raise AssertionError(f"Inconsistent solution counts across runs for {name} ({mode})")
            for run in mode_entry.get("raw_runs", []):
                if not run["valid"]:
                    raise AssertionError(f"Invalid or duplicated solutions produced for {name} ({mode})")
            observed.add(mode_entry["solution_count"])
        if len(observed) > 1:
            raise AssertionError(f"Search modes disagree on the solution count for {name}: {sorted(observed)}")
        if name in reference_counts and observed and observed != {int(reference_counts[name])}:
            raise AssertionError(
                f"Solution count for {name} ({observed.pop()}) differs from the reference count {reference_counts[name]}"
            )


# Sequential runner ----------------------------------------------------------

def run_experiments(
    problems: List[Mapping[str, Any]],
    runs: int,
    modes: List[str],
    workers: int = 1,
    count_only: bool = True,
    progress_label: Optional[str] = None,
    validate: bool = False,
    reference_counts: Optional[Mapping[str, int]] = None,
) -> ExperimentResults:
    """Run every problem ``runs`` times per search mode, one search at a time.

    ``workers`` is handed to the search itself (outer-ply concurrency), so this
    runner is the one to use when measuring the effect of in-search
    parallelism.
    """
    normalized = [normalize_problem(p) for p in problems]
    ensure_unique_names(normalized)
    progress = ProgressPrinter(len(normalized), progress_label) if progress_label else None
    records: List[RunRecord] = []

    for index, problem in enumerate(normalized, start=1):
        if progress:
            progress.update(index, problem["name"])
        print(
            f"=== {problem['name']}: {' '.join(problem['pieces'])} on "
            f"{problem['width']}x{problem['height']} ({', '.join(modes)}) ==="
        )
        for params in _build_tasks(problem, runs, modes, workers, count_only, validate):
            record = run_single_problem(params)
            records.append(record)
        for mode in modes:
            mode_runs = [r for r in records if r["problem"] == problem["name"] and r["mode"] == mode]
            if mode_runs:
                print(
                    f"  [{mode}] solutions={mode_runs[-1]['solution_count']}, "
                    f"nodes={mode_runs[-1]['nodes']}, time={mode_runs[-1]['time']:.4f}s"
                )

    results = _shape_results(normalized, records)
    if validate:
        validate_results(results, reference_counts)
    return results


# Parallel runner ------------------------------------------------------------

def run_experiments_parallel(
    problems: List[Mapping[str, Any]],
    runs: int,
    modes: List[str],
    count_only: bool = True,
    progress_label: Optional[str] = None,
    validate: bool = False,
    reference_counts: Optional[Mapping[str, int]] = None,
    num_processes: Optional[int] = None,
) -> ExperimentResults:
    """Run every problem/mode/run combination on a process pool.

    Each search runs single-worker inside its process; parallelism comes from
    running independent searches side by side. Wall-clock times are therefore
    noisier than in :func:`run_experiments`.
    """
    normalized = [normalize_problem(p) for p in problems]
    ensure_unique_names(normalized)
    tasks: List[RunParams] = []
    for problem in normalized:
        tasks.extend(_build_tasks(problem, runs, modes, 1, count_only, validate))

    processes = num_processes or settings.NUM_PROCESSES
    progress = ProgressPrinter(len(tasks), progress_label) if progress_label else None
    print(f"  Dispatching {len(tasks)} searches to {processes} worker processes...")

    records: List[RunRecord] = []
    with ProcessPoolExecutor(max_workers=processes) as executor:
        for index, record in enumerate(executor.map(run_single_problem, tasks), start=1):
            records.append(record)
            if progress:
                progress.update(index, f"{record['problem']} ({record['mode']})")

    results = _shape_results(normalized, records)
    if validate:
        validate_results(results, reference_counts)
    return results
