"""Typed result shapes and statistics helpers for the benchmark pipeline.

Defines ``TypedDict`` structures for benchmark outputs and provides utilities
to compute aggregate statistics across repeated runs of the same problem.
"""
from __future__ import annotations

import statistics
from typing import Dict, List, Optional, TypedDict


class StatsSummary(TypedDict, total=False):
    count: int
    mean: Optional[float]
    median: Optional[float]
    std: Optional[float]
    min: Optional[float]
    max: Optional[float]
    q25: Optional[float]
    q75: Optional[float]
    range: Optional[float]


class RunRecord(TypedDict):
    problem: str
    mode: str
    workers: int
    solution_count: int
    nodes: int
    placements: int
    duplicates_pruned: int
    time: float
    valid: bool


class ModeResultEntry(TypedDict, total=False):
    total_runs: int
    solution_count: int
    consistent: bool
    nodes: StatsSummary
    placements: StatsSummary
    duplicates_pruned: StatsSummary
    time: StatsSummary
    raw_runs: List[RunRecord]


class ProblemResultEntry(TypedDict):
    name: str
    pieces: List[str]
    width: int
    height: int
    modes: Dict[str, ModeResultEntry]


# problem name -> entry
ExperimentResults = Dict[str, ProblemResultEntry]


class ProgressPrinter:
    """Minimal, stdout-only progress reporter for long-running loops.

    Parameters
    ----------
    total : int
        Total number of steps/items expected. Values <= 0 are coerced to 1 to
        avoid division by zero when reporting percentages.
    label : str
        Short label printed in front of the progress counters to provide
        context (e.g., the current phase or problem name).
    """

    def __init__(self, total: int, label: str):
        self.total = max(1, total)
        self.label = label

    def update(self, index: int, detail: str = "") -> None:
        """Print a single-line progress update to stdout.

        Parameters
        ----------
        index : int
            The current 1-based or 0-based index of progress. Values greater
            than ``total`` are allowed and will print >100%.
        detail : str, optional
            Free-form suffix to provide additional context (e.g., current
            problem or search mode). If empty, no suffix is appended.
        """
        percent = (index / self.total) * 100
        suffix = f" - {detail}" if detail else ""
        print(f"[{self.label}] {index}/{self.total} ({percent:.0f}%)" + suffix)


def compute_detailed_statistics(values: List[float], label: str = "") -> StatsSummary:
    """Compute summary statistics for a numeric sequence.

    Parameters
    ----------
    values : List[float]
        A list of numeric values to summarize.
    label : str, optional
        Optional label carried through for debugging contexts. The value is
        not used in calculations.

    Returns
    -------
    StatsSummary
        Count, mean, median, population std, min, max, quartiles and range.
        When ``values`` is empty, all numeric fields are ``None`` and
        ``count`` is 0 to keep CSV/plot generation consistent.
    """
    if not values:
        return {
            "count": 0,
            "mean": None,
            "median": None,
            "std": None,
            "min": None,
            "max": None,
            "q25": None,
            "q75": None,
            "range": None,
        }

    sorted_vals = sorted(values)
    n = len(values)

    mean_val = statistics.mean(values)
    median_val = statistics.median(values)
    min_val = min(values)
    max_val = max(values)
    range_val = max_val - min_val
    std_val = statistics.pstdev(values) if n > 1 else 0

    q25 = sorted_vals[n // 4] if n >= 4 else min_val
    q75 = sorted_vals[3 * n // 4] if n >= 4 else max_val

    return {
        "count": n,
        "mean": mean_val,
        "median": median_val,
        "std": std_val,
        "min": min_val,
        "max": max_val,
        "q25": q25,
        "q75": q75,
        "range": range_val,
    }


def compute_grouped_statistics(runs: List[RunRecord]) -> Dict[str, ModeResultEntry]:
    """Aggregate run records by search mode.

    Parameters
    ----------
    runs : List[RunRecord]
        Per-run records of a single problem, possibly mixing search modes.

    Returns
    -------
    Dict[str, ModeResultEntry]
        For each mode: the number of runs, the solution count of the first run,
        whether every run reported that same count (``consistent``), summary
        statistics of each effort metric and the raw runs.
    """
    grouped: Dict[str, List[RunRecord]] = {}
    for run in runs:
        grouped.setdefault(run["mode"], []).append(run)

    entries: Dict[str, ModeResultEntry] = {}
    for mode, mode_runs in grouped.items():
        counts = {r["solution_count"] for r in mode_runs}
        entry: ModeResultEntry = {
            "total_runs": len(mode_runs),
            "solution_count": mode_runs[0]["solution_count"],
            "consistent": len(counts) == 1,
            "raw_runs": list(mode_runs),
        }
        for metric in ["nodes", "placements", "duplicates_pruned", "time"]:
            values = [float(r[metric]) for r in mode_runs]  # type: ignore[literal-required]
            entry[metric] = compute_detailed_statistics(values, f"{mode}_{metric}")  # type: ignore[literal-required]
        entries[mode] = entry
    return entries


def problem_solution_counts(results: ExperimentResults) -> Dict[str, Optional[int]]:
    """Return the agreed solution count per problem (None when modes disagree)."""
    counts: Dict[str, Optional[int]] = {}
    for name, entry in results.items():
        observed = {mode_entry["solution_count"] for mode_entry in entry["modes"].values()}
        consistent = all(mode_entry.get("consistent", True) for mode_entry in entry["modes"].values())
        counts[name] = observed.pop() if len(observed) == 1 and consistent else None
    return counts
