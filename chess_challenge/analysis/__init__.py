"""
Benchmark and orchestration package for the chess challenge solver.

This package contains:
- settings: global knobs (problems, runs, search modes, output naming)
- stats: typed summaries, aggregation helpers and the progress printer
- experiments: sequential and process-parallel benchmark runners
- reporting: CSV exports of aggregates and raw runs
- plots: all visualization utilities
- cli: top-level pipeline entry points and argument parser
"""

from . import settings as settings  # re-export for convenience
from .stats import (
    StatsSummary,
    RunRecord,
    ModeResultEntry,
    ProblemResultEntry,
    ExperimentResults,
    compute_detailed_statistics,
    compute_grouped_statistics,
    problem_solution_counts,
    ProgressPrinter,
)

__all__ = [
    # types
    "StatsSummary",
    "RunRecord",
    "ModeResultEntry",
    "ProblemResultEntry",
    "ExperimentResults",
    # utils
    "compute_detailed_statistics",
    "compute_grouped_statistics",
    "problem_solution_counts",
    "ProgressPrinter",
    # settings module
    "settings",
]
