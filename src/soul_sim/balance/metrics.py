"""Pure metric computation functions for balance analysis.

All functions take a list of EncounterTelemetry and return structured
metrics.  No side effects, no I/O.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from soul_sim.balance.models import BatchReport, EncounterMetrics, PatternMetrics

if TYPE_CHECKING:
    from soul_sim.sim.telemetry import EncounterTelemetry


def compute_encounter_metrics(runs: list[EncounterTelemetry]) -> EncounterMetrics:
    """Compute aggregate outcome statistics."""
    total = len(runs)
    if total == 0:
        return EncounterMetrics(
            total_runs=0, wins=0, losses=0, timeouts=0, win_rate=0.0,
            avg_hp_end=0.0, avg_hp_lost=0.0, avg_elapsed_ms=0.0,
            avg_corruption_peak=0.0, stall_rate=0.0, avg_phase_reached=0.0,
        )

    results = Counter(r.result for r in runs)
    hits: Counter[str] = Counter()
    for r in runs:
        hits.update(r.hits_by_kind)

    return EncounterMetrics(
        total_runs=total,
        wins=results["win"],
        losses=results["loss"],
        timeouts=results["timeout"],
        win_rate=results["win"] / total,
        avg_hp_end=sum(r.hp_end for r in runs) / total,
        avg_hp_lost=sum(r.hp_lost for r in runs) / total,
        avg_elapsed_ms=sum(r.elapsed_ms for r in runs) / total,
        avg_corruption_peak=sum(r.corruption_peak for r in runs) / total,
        stall_rate=sum(1 for r in runs if r.reached_stall) / total,
        avg_phase_reached=sum(r.phase_reached for r in runs) / total,
        hits_by_kind=dict(sorted(hits.items())),
    )


def compute_pattern_metrics(runs: list[EncounterTelemetry]) -> list[PatternMetrics]:
    """Per-pattern damage, most damaging first."""
    totals: dict[str, float] = {}
    seen: Counter[str] = Counter()
    for r in runs:
        for pattern, dmg in r.damage_by_pattern.items():
            if dmg <= 0:
                continue
            totals[pattern] = totals.get(pattern, 0.0) + dmg
            seen[pattern] += 1

    grand_total = sum(totals.values())
    metrics = [
        PatternMetrics(
            pattern=pattern,
            runs_seen=seen[pattern],
            total_damage=dmg,
            avg_damage=dmg / seen[pattern],
            damage_share=dmg / grand_total if grand_total else 0.0,
        )
        for pattern, dmg in totals.items()
    ]
    metrics.sort(key=lambda m: (-m.total_damage, m.pattern))
    return metrics


def build_report(agent: str, runs: list[EncounterTelemetry]) -> BatchReport:
    return BatchReport(
        agent=agent,
        num_runs=len(runs),
        encounter=compute_encounter_metrics(runs),
        patterns=compute_pattern_metrics(runs),
    )
