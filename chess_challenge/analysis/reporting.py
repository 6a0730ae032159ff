"""CSV export utilities for benchmark outputs (aggregates and raw runs).

These helpers materialize a concise per-problem/per-mode CSV summary as well
as the full per-run raw data for downstream analysis or spreadsheet
inspection.
"""
from __future__ import annotations

import csv
import os
from typing import Any, List, Optional

from . import settings
from .stats import ExperimentResults, StatsSummary


def output_suffix() -> str:
    """Build an optional filename suffix from ``RUN_TAG`` and ``RUN_ID``.

    Returns an empty string if no suffixing is configured.
    """
    parts: List[str] = []
    run_tag = getattr(settings, "RUN_TAG", None)
    if run_tag:
        parts.append(str(run_tag))
    if getattr(settings, "DATE_IN_FILENAMES", False):
        run_id = getattr(settings, "RUN_ID", None)
        if run_id:
            parts.append(str(run_id))
    return ("_" + "_".join(parts)) if parts else ""


def _stat(summary: Optional[StatsSummary], key: str) -> Any:
    if not summary:
        return ""
    value = summary.get(key)
    return "" if value is None else value


def save_results_to_csv(results: ExperimentResults, out_dir: str) -> str:
    """Write one aggregate row per problem and search mode to CSV.

    Returns the path of the written file.
    """
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"results_summary{output_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "problem",
            "pieces",
            "width",
            "height",
            "mode",
            "total_runs",
            "solution_count",
            "consistent",
            "nodes_mean",
            "placements_mean",
            "duplicates_pruned_mean",
            "pruning_ratio",
            "time_mean",
            "time_median",
            "time_std",
            "time_min",
            "time_max",
        ])
        for name, entry in results.items():
            for mode, mode_entry in entry["modes"].items():
                placements = _stat(mode_entry.get("placements"), "mean")
                pruned = _stat(mode_entry.get("duplicates_pruned"), "mean")
                accepted = (placements or 0) + (pruned or 0)
                ratio = (pruned / accepted) if accepted and pruned != "" else ""
                writer.writerow([
                    name,
                    " ".join(entry["pieces"]),
                    entry["width"],
                    entry["height"],
                    mode,
                    mode_entry.get("total_runs", 0),
                    mode_entry.get("solution_count", ""),
                    mode_entry.get("consistent", ""),
                    _stat(mode_entry.get("nodes"), "mean"),
                    placements,
                    pruned,
                    ratio,
                    _stat(mode_entry.get("time"), "mean"),
                    _stat(mode_entry.get("time"), "median"),
                    _stat(mode_entry.get("time"), "std"),
                    _stat(mode_entry.get("time"), "min"),
                    _stat(mode_entry.get("time"), "max"),
                ])

    print(f"Saved summary CSV: {filename}")
    return filename


def save_raw_data_to_csv(results: ExperimentResults, out_dir: str) -> str:
    """Write every individual run record to CSV and return the file path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"raw_runs{output_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "problem",
            "mode",
            "run",
            "workers",
            "solution_count",
            "nodes",
            "placements",
            "duplicates_pruned",
            "time_seconds",
            "valid",
        ])
        for name, entry in results.items():
            for mode, mode_entry in entry["modes"].items():
                for run_index, run in enumerate(mode_entry.get("raw_runs", []), start=1):
                    writer.writerow([
                        name,
                        mode,
                        run_index,
                        run["workers"],
                        run["solution_count"],
                        run["nodes"],
                        run["placements"],
                        run["duplicates_pruned"],
                        run["time"],
                        run["valid"],
                    ])

    print(f"Saved raw-run CSV: {filename}")
    return filename
