"""Global settings for the benchmark pipeline.

This module centralizes tunable constants used across the orchestration code.
Values can be overridden at runtime via the configuration loader in
`chess_challenge.analysis.cli.apply_configuration`.
"""
from __future__ import annotations

import multiprocessing
from datetime import datetime
from typing import Any, Dict, List, Optional

# Problem instances to benchmark (name, pieces in placement order, board size)
PROBLEMS: List[Dict[str, Any]] = [
    {"name": "KKR_3x3", "pieces": ["K", "K", "R"], "width": 3, "height": 3},
    {"name": "RRNNNN_4x4", "pieces": ["R", "R", "N", "N", "N", "N"], "width": 4, "height": 4},
    {"name": "QQQQQ_5x5", "pieces": ["Q", "Q", "Q", "Q", "Q"], "width": 5, "height": 5},
    {"name": "KKQB_5x5", "pieces": ["K", "K", "Q", "B"], "width": 5, "height": 5},
    {"name": "QQQQQQ_6x6", "pieces": ["Q", "Q", "Q", "Q", "Q", "Q"], "width": 6, "height": 6},
]

# Number of repeated runs per problem and search mode (the search is
# deterministic; repeats only smooth out wall-clock noise)
RUNS: int = 3

# Search disciplines to compare: 'strict' (shared dedup set) and/or 'relaxed'
SEARCH_MODES: List[str] = ["strict", "relaxed"]

# Outer-ply workers used inside a single search
SEARCH_WORKERS: int = 1

# Count solutions without retaining boards (validation of boards needs False)
COUNT_ONLY: bool = True

# Output directory for CSV and charts
OUT_DIR: str = "results_chess_challenge"

# Number of worker processes to use (leave one core for the OS)
NUM_PROCESSES: int = max(1, multiprocessing.cpu_count() - 1)

# Output naming policy --------------------------------------------------------

# When True, results and plots include a datestamp suffix (e.g., _20251113-142530)
DATE_IN_FILENAMES: bool = True

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")

# Optional run labeling to avoid overwriting outputs
RUN_TAG: Optional[str] = None


def set_search_defaults(
        modes: Optional[List[str]] = None,
        workers: int = 1,
        count_only: bool = True,
) -> None:
        """Configure how every benchmark search is executed.

        Parameters
        - modes: search disciplines to run per problem (None keeps the current list).
        - workers: outer-ply workers inside one search.
        - count_only: count solutions without retaining boards.

        Side effects
        - Updates module-level globals and prints a concise summary to stdout to
            make the active settings explicit at run start.
        """
        global SEARCH_MODES, SEARCH_WORKERS, COUNT_ONLY
        if modes:
                SEARCH_MODES = list(modes)
        SEARCH_WORKERS = max(1, int(workers))
        COUNT_ONLY = bool(count_only)

        print("Search settings configured:")
        print(f"   - Modes: {', '.join(SEARCH_MODES)}")
        print(f"   - Workers per search: {SEARCH_WORKERS}")
        print(f"   - Count only: {COUNT_ONLY}")
