"""Visualization utilities for benchmark outputs.

Overview
--------
This module generates PNG charts from the aggregated ``ExperimentResults``
produced by the benchmark pipeline. Problems are laid out on the x-axis in
the order they were run; each search mode gets its own series.

Chart map
---------
- 01_time_per_problem.png: Mean wall-clock time per problem (log scale)
    - X: problem. Y: mean time [s]. One bar group per search mode.
- 02_nodes_per_problem.png: Explored nodes per problem (log scale)
    - What: Hardware-independent effort proxy (placement attempts).
- 03_pruning_ratio.png: Share of accepted placements pruned as duplicates
    - What: How much the seen-configuration set saves per problem and mode.
- 04_nodes_vs_time.png: Explored nodes vs time across all runs
    - What: Near-linearity indicates placement attempts dominate the cost.
      A least-squares trend line is overlaid per mode.
- 05_time_distribution.png: Boxplot of run times per problem and mode

Notes
-----
- The module works only through side effects (file creation, stdout prints).
- Scatter/boxplot charts are most meaningful for sequential runs; parallel
  runs share the CPU and produce noisier wall-clock times.
"""
from __future__ import annotations

import os
from typing import Dict, List

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import seaborn as sns  # noqa: E402

from .reporting import output_suffix  # noqa: E402
from .stats import ExperimentResults  # noqa: E402


def _modes(results: ExperimentResults) -> List[str]:
    modes: List[str] = []
    for entry in results.values():
        for mode in entry["modes"]:
            if mode not in modes:
                modes.append(mode)
    return modes


def _mean_series(results: ExperimentResults, mode: str, metric: str) -> List[float]:
    series: List[float] = []
    for entry in results.values():
        summary = entry["modes"].get(mode, {}).get(metric) or {}
        series.append(float(summary.get("mean") or 0.0))
    return series


def _grouped_bars(results: ExperimentResults, metric: str, ylabel: str, title: str, fname: str, log: bool) -> None:
    problems = list(results)
    modes = _modes(results)
    x = np.arange(len(problems))
    width = 0.8 / max(1, len(modes))

    plt.figure(figsize=(12, 8))
    for i, mode in enumerate(modes):
        values = [max(v, 1e-6) if log else v for v in _mean_series(results, mode, metric)]
        plt.bar(x + i * width - 0.4 + width / 2, values, width, label=mode)
    if log:
        plt.yscale("log")
    plt.xticks(x, problems, rotation=30, ha="right")
    plt.xlabel("Problem", fontsize=12)
    plt.ylabel(ylabel, fontsize=12)
    plt.title(title, fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, axis="y", alpha=0.7)
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()


def plot_comprehensive_analysis(results: ExperimentResults, out_dir: str) -> List[str]:
    """Generate the per-problem comparison charts; return the written paths."""
    os.makedirs(out_dir, exist_ok=True)
    suffix = output_suffix()
    written: List[str] = []

    fname = os.path.join(out_dir, f"01_time_per_problem{suffix}.png")
    _grouped_bars(results, "time", "Mean time [s] (log scale)", "Execution Time per Problem", fname, log=True)
    print(f"Saved execution-time chart: {fname}")
    written.append(fname)

    fname = os.path.join(out_dir, f"02_nodes_per_problem{suffix}.png")
    _grouped_bars(results, "nodes", "Explored nodes (log scale)", "Logical Cost per Problem\n(placement attempts)", fname, log=True)
    print(f"Saved logical-cost chart: {fname}")
    written.append(fname)

    problems = list(results)
    plt.figure(figsize=(12, 8))
    for mode in _modes(results):
        placements = _mean_series(results, mode, "placements")
        pruned = _mean_series(results, mode, "duplicates_pruned")
        ratios = [p / (a + p) if (a + p) else 0.0 for a, p in zip(placements, pruned)]
        plt.plot(problems, ratios, marker="o", linewidth=2, markersize=8, label=mode)
    plt.ylim(-0.05, 1.05)
    plt.xticks(rotation=30, ha="right")
    plt.xlabel("Problem", fontsize=12)
    plt.ylabel("Pruned / accepted placements", fontsize=12)
    plt.title("Duplicate Pruning Ratio\n(configurations reached through another placement order)", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    fname = os.path.join(out_dir, f"03_pruning_ratio{suffix}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved pruning-ratio chart: {fname}")
    written.append(fname)

    written.append(plot_nodes_vs_time(results, out_dir))
    written.append(plot_time_distribution(results, out_dir))
    return written


def plot_nodes_vs_time(results: ExperimentResults, out_dir: str) -> str:
    """Scatter explored nodes against wall time for every run, with trend lines."""
    os.makedirs(out_dir, exist_ok=True)
    plt.figure(figsize=(12, 8))
    for mode in _modes(results):
        nodes: List[float] = []
        times: List[float] = []
        for entry in results.values():
            for run in entry["modes"].get(mode, {}).get("raw_runs", []):
                nodes.append(float(run["nodes"]))
                times.append(float(run["time"]))
        if not nodes:
            continue
        plt.scatter(nodes, times, alpha=0.7, s=50, label=mode)
        if len(set(nodes)) > 1:
            z = np.polyfit(nodes, times, 1)
            p = np.poly1d(z)
            x_trend = np.linspace(min(nodes), max(nodes), 100)
            plt.plot(x_trend, p(x_trend), "--", alpha=0.8, linewidth=2, label=f"{mode} trend ({z[0]:.2e} s/node)")
    plt.xlabel("Explored nodes", fontsize=12)
    plt.ylabel("Time [s]", fontsize=12)
    plt.title("Logical vs Practical Cost", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    fname = os.path.join(out_dir, f"04_nodes_vs_time{output_suffix()}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved nodes-vs-time chart: {fname}")
    return fname


def plot_time_distribution(results: ExperimentResults, out_dir: str) -> str:
    """Boxplot of run times per problem, split by search mode."""
    os.makedirs(out_dir, exist_ok=True)
    data: Dict[str, List] = {"problem": [], "mode": [], "time": []}
    for name, entry in results.items():
        for mode, mode_entry in entry["modes"].items():
            for run in mode_entry.get("raw_runs", []):
                data["problem"].append(name)
                data["mode"].append(mode)
                data["time"].append(max(float(run["time"]), 1e-6))

    sns.set_theme(style="whitegrid")
    plt.figure(figsize=(12, 8))
    ax = sns.boxplot(x=data["problem"], y=data["time"], hue=data["mode"])
    ax.set_yscale("log")
    ax.set_xlabel("Problem", fontsize=12)
    ax.set_ylabel("Time [s] (log scale)", fontsize=12)
    ax.set_title("Run-Time Distribution per Problem", fontsize=14)
    plt.xticks(rotation=30, ha="right")
    fname = os.path.join(out_dir, f"05_time_distribution{output_suffix()}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    sns.reset_orig()
    print(f"Saved time-distribution chart: {fname}")
    return fname
