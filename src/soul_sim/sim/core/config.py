"""Tunable constants for the battle core.

Every number the simulation depends on lives on ``BattleConfig`` so that
tests and scripts can build variants without touching module globals.
``BattleConfig()`` gives the reference encounter.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class BattleConfig(BaseModel):
    """Arena geometry, soul physics, damage numbers and phase timings."""

    model_config = {"frozen": True}

    # -- arena ---------------------------------------------------------------

    arena_width: float = Field(default=640.0, gt=0)
    arena_height: float = Field(default=480.0, gt=0)
    arena_margin: float = Field(default=20.0, ge=0)
    """Inset of the playable interior from each arena edge."""

    cull_margin: float = Field(default=200.0, ge=0)
    """Bones entirely this far outside the arena are removed."""

    # -- soul ----------------------------------------------------------------

    soul_start_x: float = 320.0
    soul_start_y: float = 360.0
    soul_size: float = Field(default=12.0, gt=0)
    soul_speed: float = Field(default=3.0, gt=0)
    jump_speed: float = Field(default=9.0, gt=0)
    hp_max: float = Field(default=92.0, gt=0)

    gravity: float = 0.7
    gravity_scale: float = 0.4
    """Fraction of ``gravity`` added to vertical velocity each tick."""

    # -- damage / corruption -------------------------------------------------

    bone_damage: float = 1.2
    bone_corruption: float = 5.0
    beam_damage: float = 0.9
    beam_corruption: float = 6.0
    corruption_cap: float = Field(default=60.0, gt=0)
    corruption_drain_rate: float = 0.08
    """HP drained per elapsed millisecond while corruption is positive."""
    corruption_decay_rate: float = 0.02
    """Corruption lost per elapsed millisecond."""

    # -- blasters ------------------------------------------------------------

    blaster_lifetime: int = Field(default=70, gt=0)
    blaster_fire_threshold: int = Field(default=40, gt=0)
    """A blaster fires while its remaining lifetime is at or below this."""
    blaster_charge: int = 30
    blaster_fire: int = 20
    beam_length: float = Field(default=800.0, gt=0)
    beam_half_width: float = Field(default=22.0, gt=0)

    # -- timing (milliseconds) -----------------------------------------------

    max_delta_ms: float = Field(default=32.0, gt=0)
    pattern_duration_ms: float = Field(default=1800.0, gt=0)
    intro_line_ms: float = Field(default=1400.0, gt=0)
    cold_open_menu_delay_ms: float = Field(default=1400.0, gt=0)

    drowsy_ms: float = Field(default=3000.0, gt=0)
    guard_drop_ms: float = Field(default=6000.0, gt=0)
    finisher_ms: float = Field(default=8000.0, gt=0)

    # -- menu ----------------------------------------------------------------

    item_heal: float = Field(default=18.0, ge=0)

    @model_validator(mode="after")
    def _check_ordering(self) -> BattleConfig:
        if not self.drowsy_ms < self.guard_drop_ms < self.finisher_ms:
            raise ValueError(
                "stall thresholds must be strictly increasing: "
                f"{self.drowsy_ms}, {self.guard_drop_ms}, {self.finisher_ms}"
            )
        if self.blaster_fire_threshold > self.blaster_lifetime:
            raise ValueError(
                "blaster_fire_threshold cannot exceed blaster_lifetime"
            )
        if 2 * self.arena_margin + self.soul_size > min(
            self.arena_width, self.arena_height
        ):
            raise ValueError("arena interior is too small for the soul")
        return self

    # -- derived -------------------------------------------------------------

    @property
    def floor_y(self) -> float:
        """Lower interior bound (the floor under positive gravity)."""
        return self.arena_height - self.arena_margin

    @property
    def ceiling_y(self) -> float:
        """Upper interior bound (the floor under negative gravity)."""
        return self.arena_margin


def load_config(path: str | Path | None = None) -> BattleConfig:
    """Load a ``BattleConfig`` from a JSON file.

    Keys missing from the file keep their reference values.  With no
    *path* the reference configuration is returned.
    """
    if path is None:
        return BattleConfig()
    with open(path) as f:
        raw = json.load(f)
    return BattleConfig.model_validate(raw)
