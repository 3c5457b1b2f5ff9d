"""Pydantic v2 models for encounter balance analysis.

These models define the structured output of batch analysis: aggregate
outcome statistics and per-pattern damage.  All are serializable to/from
JSON.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class EncounterMetrics(BaseModel):
    """Aggregate outcome statistics over a batch of encounters."""

    total_runs: int
    wins: int
    losses: int
    timeouts: int
    win_rate: float
    avg_hp_end: float
    avg_hp_lost: float
    avg_elapsed_ms: float
    avg_corruption_peak: float
    stall_rate: float
    """Fraction of runs that reached the stall phase."""
    avg_phase_reached: float
    hits_by_kind: dict[str, int] = Field(default_factory=dict)
    """Total hits per hit kind across the batch."""


class PatternMetrics(BaseModel):
    """Damage attributed to one pattern across a batch."""

    pattern: str
    runs_seen: int
    """Runs in which the pattern dealt any damage."""
    total_damage: float
    avg_damage: float
    """Mean damage per run in which the pattern dealt damage."""
    damage_share: float
    """total_damage / damage across all patterns."""


class BatchReport(BaseModel):
    """Everything produced for one agent's batch."""

    agent: str
    num_runs: int
    encounter: EncounterMetrics
    patterns: list[PatternMetrics] = Field(default_factory=list)
