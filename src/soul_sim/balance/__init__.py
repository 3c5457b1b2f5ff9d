"""Balance analysis: batch metrics and reports."""

from soul_sim.balance.metrics import (
    build_report,
    compute_encounter_metrics,
    compute_pattern_metrics,
)
from soul_sim.balance.models import BatchReport, EncounterMetrics, PatternMetrics
from soul_sim.balance.report import generate_text_report

__all__ = [
    "BatchReport",
    "EncounterMetrics",
    "PatternMetrics",
    "build_report",
    "compute_encounter_metrics",
    "compute_pattern_metrics",
    "generate_text_report",
]
