"""Compare RandomAgent vs PatientAgent over many encounters.

Usage:
    uv run python scripts/compare_agents.py [--runs N] [--config PATH]
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from soul_sim.balance import build_report, generate_text_report
from soul_sim.sim.core.config import load_config
from soul_sim.sim.play_agents import PatientAgent, RandomAgent
from soul_sim.sim.runner import BatchRunner


def run_comparison(
    n_runs: int = 200,
    config_path: Path | None = None,
    parallel: bool = False,
    output: Path = Path("agent_comparison.png"),
) -> None:
    config = load_config(config_path)

    results = {}
    for label, agent_class in [("RandomAgent", RandomAgent), ("PatientAgent", PatientAgent)]:
        print(f"\nRunning {n_runs} encounters with {label}...")
        runner = BatchRunner(agent_class=agent_class, config=config)
        t0 = time.time()
        telemetry = runner.run_batch(n_runs=n_runs, base_seed=0, parallel=parallel)
        elapsed = time.time() - t0

        hp_end = np.array([t.hp_end for t in telemetry])
        survived_s = np.array([t.elapsed_ms / 1000 for t in telemetry])
        phases = np.array([t.phase_reached for t in telemetry])
        report = build_report(label, telemetry)

        results[label] = {
            "telemetry": telemetry,
            "report": report,
            "hp_end": hp_end,
            "survived_s": survived_s,
            "phases": phases,
        }

        print(f"  Time: {elapsed:.1f}s ({elapsed / n_runs * 1000:.0f}ms/run)")
        print(f"  Win rate: {report.encounter.wins}/{n_runs} ({report.encounter.win_rate:.1%})")
        print(f"  HP at end: mean {np.mean(hp_end):.1f} (median {np.median(hp_end):.1f})")
        print(f"  Survived: mean {np.mean(survived_s):.1f}s (max {np.max(survived_s):.1f}s)")
        print()
        print(generate_text_report(report))

    generate_charts(results, n_runs, output)


def generate_charts(results: dict, n_runs: int, output: Path) -> None:
    fig, axes = plt.subplots(2, 2, figsize=(14, 10))
    fig.suptitle(f"RandomAgent vs PatientAgent — {n_runs} encounters", fontsize=16, fontweight="bold")

    colors = {"RandomAgent": "#e74c3c", "PatientAgent": "#3498db"}
    labels = list(results.keys())

    # --- Chart 1: Win Rate ---
    ax = axes[0, 0]
    win_rates = [results[l]["report"].encounter.win_rate * 100 for l in labels]
    bars = ax.bar(labels, win_rates, color=[colors[l] for l in labels], edgecolor="black", linewidth=0.5)
    for bar, wr in zip(bars, win_rates):
        ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height() + 1, f"{wr:.1f}%", ha="center")
    ax.set_ylabel("Win rate (%)")
    ax.set_ylim(0, 105)
    ax.set_title("Win Rate")

    # --- Chart 2: Phase reached ---
    ax = axes[0, 1]
    max_phase = max(int(results[l]["phases"].max()) for l in labels)
    bins = np.arange(0, max_phase + 2) - 0.5
    for l in labels:
        ax.hist(results[l]["phases"], bins=bins, alpha=0.6, label=l, color=colors[l])
    ax.set_xlabel("Patterns started")
    ax.set_ylabel("Runs")
    ax.set_title("Phase Reached")
    ax.legend()

    # --- Chart 3: Survival time ---
    ax = axes[1, 0]
    ax.boxplot([results[l]["survived_s"] for l in labels], labels=labels)
    ax.set_ylabel("Seconds")
    ax.set_title("Time Survived")

    # --- Chart 4: Damage by pattern ---
    ax = axes[1, 1]
    pattern_names = sorted({p.pattern for l in labels for p in results[l]["report"].patterns})
    x = np.arange(len(pattern_names))
    width = 0.4
    for i, l in enumerate(labels):
        by_name = {p.pattern: p.total_damage / n_runs for p in results[l]["report"].patterns}
        ax.bar(x + i * width, [by_name.get(n, 0.0) for n in pattern_names], width, label=l, color=colors[l])
    ax.set_xticks(x + width / 2)
    ax.set_xticklabels(pattern_names, rotation=45, ha="right")
    ax.set_ylabel("HP lost per run")
    ax.set_title("Damage by Pattern")
    ax.legend()

    fig.tight_layout()
    fig.savefig(output, dpi=120)
    print(f"\nCharts saved to {output}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--runs", type=int, default=200)
    parser.add_argument("--config", type=Path, default=None, help="BattleConfig JSON file")
    parser.add_argument("--parallel", action="store_true", default=False)
    parser.add_argument("-o", "--output", type=Path, default=Path("agent_comparison.png"))
    parser.add_argument("-v", "--verbose", action="store_true", default=False)
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    run_comparison(args.runs, args.config, args.parallel, args.output)
