"""Telemetry data models for per-encounter and per-batch statistics.

- **EncounterTelemetry**: outcome, time survived, damage taken by source
  and by pattern, menu choices.

Plain ``dataclass`` instances (not Pydantic models) to keep collection
cheap during batch runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class EncounterTelemetry:
    """Stats from a single encounter.

    Attributes
    ----------
    seed:
        Seed of the agent's RNG for this run.
    agent:
        Class name of the play agent.
    result:
        ``"win"``, ``"loss"`` or ``"timeout"`` when the tick cap was hit.
    ticks:
        Number of simulation ticks run.
    elapsed_ms:
        Simulated time at the end of the run.
    hp_start / hp_end:
        Soul hp at start and end.
    hp_lost:
        Total hp lost to hits and corruption (heals are not subtracted).
    corruption_peak:
        Highest corruption reached.
    phase_reached:
        Number of numbered patterns started (beyond the last one = stall).
    reached_stall:
        Whether the terminal stall phase was entered.
    hits_by_kind:
        ``"bone"`` / ``"guarded_bone"`` / ``"beam"`` -> hit count.
    damage_by_kind:
        Same keys plus ``"corruption"`` -> hp lost.
    damage_by_pattern:
        Pattern name -> hp lost while it was active.
    menu_actions:
        Menu actions taken, in order.
    """

    seed: int
    agent: str
    result: str  # "win", "loss" or "timeout"
    ticks: int
    elapsed_ms: float
    hp_start: float
    hp_end: float
    hp_lost: float
    corruption_peak: float
    phase_reached: int
    reached_stall: bool
    hits_by_kind: dict[str, int] = field(default_factory=dict)
    damage_by_kind: dict[str, float] = field(default_factory=dict)
    damage_by_pattern: dict[str, float] = field(default_factory=dict)
    menu_actions: list[str] = field(default_factory=list)
