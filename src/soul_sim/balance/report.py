"""Human-readable text report for a batch of encounters."""

from __future__ import annotations

from soul_sim.balance.models import BatchReport


def generate_text_report(report: BatchReport) -> str:
    """Generate a terminal/markdown summary of *report*."""
    e = report.encounter
    lines: list[str] = []

    lines.append("=" * 60)
    lines.append(f"Encounter Report — {report.agent} agent")
    lines.append(f"Runs: {report.num_runs:,}")
    lines.append("=" * 60)

    lines.append("")
    lines.append("## Outcomes")
    lines.append(f"  Win rate:        {e.win_rate:.1%} ({e.wins}/{e.total_runs})")
    lines.append(f"  Losses:          {e.losses}")
    lines.append(f"  Timeouts:        {e.timeouts}")
    lines.append(f"  Reached stall:   {e.stall_rate:.1%}")
    lines.append(f"  Avg phase:       {e.avg_phase_reached:.1f}")
    lines.append(f"  Avg time:        {e.avg_elapsed_ms / 1000:.1f}s")

    lines.append("")
    lines.append("## Damage")
    lines.append(f"  Avg hp lost:     {e.avg_hp_lost:.1f}")
    lines.append(f"  Avg hp at end:   {e.avg_hp_end:.1f}")
    lines.append(f"  Avg KR peak:     {e.avg_corruption_peak:.1f}")
    for kind, count in e.hits_by_kind.items():
        lines.append(f"  {kind + ' hits:':17s}{count}")

    if report.patterns:
        lines.append("")
        lines.append("## Damage by Pattern")
        for p in report.patterns:
            lines.append(
                f"  {p.pattern:20s}  total={p.total_damage:8.1f}"
                f"  avg={p.avg_damage:6.1f}  share={p.damage_share:.1%}"
                f"  runs={p.runs_seen}"
            )

    return "\n".join(lines)
