"""Command-line interface and high-level pipelines for the benchmark suite.

This module wires together configuration loading and execution of benchmark
runs (sequential or parallel) followed by CSV export and charts. It isolates
I/O, argument parsing, and progress reporting from the core search modules so
that the rest of the codebase remains easy to test programmatically.
"""
from __future__ import annotations

import argparse
import os
import tempfile
from pathlib import Path
from time import perf_counter
from typing import Any, Dict, List, Mapping, Optional, Tuple

from . import settings
from .experiments import (
    ensure_unique_names,
    normalize_problem,
    run_experiments,
    run_experiments_parallel,
)
from .plots import plot_comprehensive_analysis
from .reporting import save_raw_data_to_csv, save_results_to_csv
from .stats import ExperimentResults, problem_solution_counts
from config_manager import ConfigManager
from chess_challenge.render import render_board
from chess_challenge.search import SEARCH_MODES, solve
from chess_challenge.utils import is_valid_configuration


# ------------- Utils --------------------------------------------------------

def parse_problem_filters(problem_args: Optional[List[str]]):
    """Normalize problem filter CLI inputs into a flat list of names.

    Accepts repeated flags (e.g., ``-p KKR_3x3 -p QQQQQ_5x5``) and
    comma-separated lists. Returns ``None`` when no filter is provided so that
    callers can fall back to every configured problem.
    """
    if not problem_args:
        return None
    selected: List[str] = []
    for entry in problem_args:
        for token in entry.split(","):
            token = token.strip()
            if token:
                selected.append(token)
    return selected or None


def parse_mode_filters(mode_args: Optional[List[str]]):
    """Normalize search-mode filter CLI inputs into a list of labels.

    Accepts repeated flags and comma-separated lists. Valid values: strict,
    relaxed. Returns None when no filter is provided (meaning configured
    modes).
    """
    if not mode_args:
        return None
    selected: List[str] = []
    for entry in mode_args:
        for token in entry.split(","):
            token = token.strip().lower()
            if token:
                if token not in SEARCH_MODES:
                    raise ValueError(f"Unknown search mode '{token}'. Allowed: {', '.join(SEARCH_MODES)}")
                selected.append(token)
    unique = list(dict.fromkeys(selected))  # preserve order, remove dups
    return unique or None


def apply_configuration(
    config_path: str,
    problem_filter: Optional[List[str]] = None,
    mode_filter: Optional[List[str]] = None,
) -> Tuple[ConfigManager, List[Dict[str, Any]]]:
    """Load configuration and apply optional problem/mode filtering.

    This function updates the global ``settings`` module in-place to reflect
    values from ``config.json`` (or a user-specified path). It returns the
    ``ConfigManager`` used and the list of selected problems.
    """
    config_mgr = ConfigManager(config_path)

    experiment_settings = config_mgr.get_experiment_settings()
    if experiment_settings:
        settings.RUNS = int(experiment_settings.get("runs", settings.RUNS))
        settings.OUT_DIR = experiment_settings.get("output_dir", settings.OUT_DIR)

    search_settings = config_mgr.get_search_settings()
    modes = [str(m).lower() for m in search_settings.get("modes", settings.SEARCH_MODES)]
    unknown_modes = set(modes).difference(SEARCH_MODES)
    if unknown_modes:
        raise ValueError("Unknown search modes configured: " + ", ".join(sorted(unknown_modes)))
    if mode_filter:
        modes = list(mode_filter)
    settings.set_search_defaults(
        modes=modes,
        workers=int(search_settings.get("workers", settings.SEARCH_WORKERS)),
        count_only=bool(search_settings.get("count_only", settings.COUNT_ONLY)),
    )

    problems = [normalize_problem(p) for p in (config_mgr.get_problems() or settings.PROBLEMS)]
    ensure_unique_names(problems)

    if problem_filter:
        available = {p["name"] for p in problems}
        unknown = set(problem_filter).difference(available)
        if unknown:
            raise ValueError("Unknown problems requested: " + ", ".join(sorted(unknown)))
        problems = [p for p in problems if p["name"] in set(problem_filter)]

    if not problems:
        raise ValueError("No problems selected after applying filters.")

    settings.PROBLEMS = problems
    return config_mgr, problems


def _finish(
    results: ExperimentResults,
    config_mgr: Optional[ConfigManager],
    record: bool,
    plots: bool,
) -> None:
    save_results_to_csv(results, settings.OUT_DIR)
    save_raw_data_to_csv(results, settings.OUT_DIR)
    if plots:
        plot_comprehensive_analysis(results, settings.OUT_DIR)

    counts = problem_solution_counts(results)
    for name, count in counts.items():
        print(f"  {name}: {count if count is not None else 'inconsistent'} solutions")
    if record and config_mgr:
        config_mgr.save_reference_counts(counts)


# ------------- Pipeline: sequential ----------------------------------------

def main_sequential(
    problems: List[Mapping[str, Any]],
    config_mgr: Optional[ConfigManager] = None,
    validate: bool = False,
    record: bool = False,
    plots: bool = True,
) -> ExperimentResults:
    """Run every problem one search at a time.

    Suitable for timing measurements and for exercising in-search workers,
    since no other search competes for the CPU.
    """
    os.makedirs(settings.OUT_DIR, exist_ok=True)
    print("\n============================================")
    print("SEQUENTIAL BENCHMARK PIPELINE")
    print("============================================")

    reference = config_mgr.get_reference_counts() if (config_mgr and validate) else None
    results = run_experiments(
        list(problems),
        runs=settings.RUNS,
        modes=settings.SEARCH_MODES,
        workers=settings.SEARCH_WORKERS,
        count_only=settings.COUNT_ONLY,
        progress_label="Benchmark",
        validate=validate,
        reference_counts=reference,
    )
    _finish(results, config_mgr, record, plots)
    print("\nSequential pipeline completed.")
    return results


# ------------- Pipeline: parallel -----------------------------------------

def main_parallel(
    problems: List[Mapping[str, Any]],
    config_mgr: Optional[ConfigManager] = None,
    validate: bool = False,
    record: bool = False,
    plots: bool = True,
) -> ExperimentResults:
    """Run independent searches side by side on a process pool."""
    os.makedirs(settings.OUT_DIR, exist_ok=True)
    print(f"\nStarting parallel pipeline with {settings.NUM_PROCESSES} worker processes")
    print(f"Available CPU cores: {os.cpu_count()}")

    start_total = perf_counter()
    reference = config_mgr.get_reference_counts() if (config_mgr and validate) else None
    results = run_experiments_parallel(
        list(problems),
        runs=settings.RUNS,
        modes=settings.SEARCH_MODES,
        count_only=settings.COUNT_ONLY,
        progress_label="Benchmark",
        validate=validate,
        reference_counts=reference,
        num_processes=settings.NUM_PROCESSES,
    )
    _finish(results, config_mgr, record, plots)

    total_time = perf_counter() - start_total
    print("\nParallel pipeline completed.")
    print(f"Total time: {total_time:.1f}s ({total_time/60:.1f} minutes)")
    print(f"Problems processed: {len(problems)}")
    return results


# ------------- Quick regression -------------------------------------------

REGRESSION_CASES = [
    (["K", "K", "R"], 3, 3, 4),
    (["R", "R", "N", "N", "N", "N"], 4, 4, 8),
    (["K"], 1, 1, 1),
    (["Q", "Q"], 2, 2, 0),
]


def run_quick_regression_tests() -> None:
    """Execute a fast, deterministic smoke test of the search and pipeline.

    Verifies that:
    - The reference scenarios produce the expected number of valid, distinct
      configurations in both search modes, with and without count-only.
    - The benchmark pipeline produces non-empty CSV files in a temporary folder.
    """
    print("Running quick regression tests across search modes...")

    for pieces, width, height, expected in REGRESSION_CASES:
        for mode in SEARCH_MODES:
            solutions, count = solve(pieces, width, height, mode=mode)
            if count != expected or len(set(solutions)) != expected:
                raise AssertionError(
                    f"{''.join(pieces)} on {width}x{height} ({mode}): expected {expected} solutions, got {count}."
                )
            invalid = [board for board in solutions if not is_valid_configuration(board)]
            if invalid:
                raise AssertionError(f"Invalid configuration produced ({mode}):\n{render_board(invalid[0])}")
            _, counted = solve(pieces, width, height, count_only=True, mode=mode)
            if counted != count:
                raise AssertionError(f"Count-only mode disagrees ({mode}): {counted} != {count}.")
        print(f"  {''.join(pieces)} on {width}x{height}: {expected} solutions")

    problems = [{"pieces": pieces, "width": width, "height": height} for pieces, width, height, _ in REGRESSION_CASES[:2]]
    results = run_experiments(problems, runs=1, modes=list(SEARCH_MODES), validate=True, progress_label="Quick regression")

    with tempfile.TemporaryDirectory() as tmpdir:
        for path in (save_results_to_csv(results, tmpdir), save_raw_data_to_csv(results, tmpdir)):
            csv_path = Path(path)
            if not csv_path.exists() or csv_path.stat().st_size == 0:
                raise AssertionError("Benchmark CSV was not generated successfully during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser():
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(description="Run chess challenge benchmark pipelines.")
    parser.add_argument(
        "--mode",
        choices=["sequential", "parallel"],
        default="sequential",
        help="Execution mode: one search at a time (default) or searches side by side on a process pool.",
    )
    parser.add_argument(
        "--problem",
        "-p",
        action="append",
        help="Filter problems by name (accepts comma-separated values or multiple flags).",
    )
    parser.add_argument(
        "--search-mode",
        "-s",
        action="append",
        help="Filter search modes: strict, relaxed (comma-separated or multiple flags). Default: configured modes.",
    )
    parser.add_argument("--config", default="config.json", help="Path to configuration file (default: config.json).")
    parser.add_argument("--quick-test", action="store_true", help="Run quick regression tests and exit.")
    parser.add_argument("--validate", action="store_true", help="Validate solutions and check counts against recorded references.")
    parser.add_argument("--record", action="store_true", help="Persist the observed solution counts as reference counts.")
    parser.add_argument("--no-plots", action="store_true", help="Skip chart generation.")
    return parser


def main() -> None:
    """CLI entry point: parse arguments and dispatch to the chosen pipeline."""
    parser = build_arg_parser()
    args = parser.parse_args()

    if args.quick_test:
        run_quick_regression_tests()
        return

    try:
        problem_filter = parse_problem_filters(args.problem)
        mode_filter = parse_mode_filters(args.search_mode)
        config_mgr, problems = apply_configuration(args.config, problem_filter, mode_filter)
    except FileNotFoundError as exc:
        print(f"Configuration file not found: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        raise SystemExit(1) from exc

    print(f"Selected problems: {[p['name'] for p in problems]}")

    try:
        if args.mode == "sequential":
            main_sequential(problems, config_mgr=config_mgr, validate=args.validate, record=args.record, plots=not args.no_plots)
        else:
            main_parallel(problems, config_mgr=config_mgr, validate=args.validate, record=args.record, plots=not args.no_plots)
    except KeyboardInterrupt:
        print("\nExecution interrupted by user. Cleaning up workers...")
        raise SystemExit(130) from None
    except ValueError as exc:
        print(f"Execution error: {exc}")
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
