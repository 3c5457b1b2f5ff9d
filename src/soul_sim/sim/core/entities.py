"""Entity models for the battle core: the soul, bones and blasters.

All data classes use Pydantic v2 BaseModel for validation and
serialization.
"""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class SoulMode(str, Enum):
    """Movement physics applied to the soul."""

    FREE_ROAM = "FREE_ROAM"
    PLATFORMING = "PLATFORMING"


class BoneColor(str, Enum):
    """How a bone decides whether overlap hurts."""

    NEUTRAL = "NEUTRAL"
    """Damages on any overlap."""
    GUARDED = "GUARDED"
    """Damages only while the soul is moving."""


# ---------------------------------------------------------------------------
# Rect (value object)
# ---------------------------------------------------------------------------

class Rect(BaseModel):
    """Axis-aligned rectangle anchored at its top-left corner."""

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.w / 2, self.y + self.h / 2


# ---------------------------------------------------------------------------
# Soul
# ---------------------------------------------------------------------------

class Soul(BaseModel):
    """The player-controlled avatar."""

    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    width: float = 12.0
    height: float = 12.0

    hp: float
    hp_max: float
    corruption: float = 0.0
    """KR meter; drains hp over time."""

    mode: SoulMode = SoulMode.PLATFORMING
    on_ground: bool = False
    moved_this_tick: bool = False

    # -- queries -------------------------------------------------------------

    @property
    def rect(self) -> Rect:
        return Rect(x=self.x, y=self.y, w=self.width, h=self.height)

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    @property
    def is_dead(self) -> bool:
        return self.hp <= 0

    # -- hp ------------------------------------------------------------------

    def take_damage(self, amount: float) -> float:
        """Lose *amount* hp, never dropping below 0.

        Returns the hp actually lost.
        """
        if amount <= 0:
            return 0.0
        lost = min(self.hp, amount)
        self.hp -= lost
        return lost

    def heal(self, amount: float) -> float:
        """Heal *amount* hp, capped at ``hp_max``.  Returns hp gained."""
        if amount <= 0:
            return 0.0
        gained = min(self.hp_max - self.hp, amount)
        self.hp += gained
        return gained

    def toggle_mode(self) -> SoulMode:
        self.mode = (
            SoulMode.FREE_ROAM
            if self.mode == SoulMode.PLATFORMING
            else SoulMode.PLATFORMING
        )
        return self.mode


# ---------------------------------------------------------------------------
# Bone
# ---------------------------------------------------------------------------

class Bone(BaseModel):
    """A rectangular obstacle drifting at a constant velocity."""

    x: float
    y: float
    w: float
    h: float
    color: BoneColor = BoneColor.NEUTRAL
    vx: float = 0.0
    vy: float = 0.0
    tag: str | None = None
    """Optional label so scripted effects can find a specific bone."""

    @field_validator("w", "h")
    @classmethod
    def _positive_size(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"bone dimensions must be > 0, got {v}")
        return v

    @property
    def rect(self) -> Rect:
        return Rect(x=self.x, y=self.y, w=self.w, h=self.h)


# ---------------------------------------------------------------------------
# Blaster
# ---------------------------------------------------------------------------

class Blaster(BaseModel):
    """A beam emitter that telegraphs, then fires along ``angle``.

    ``charge`` and ``fire`` are the cosmetic telegraph/beam durations kept
    for renderers.  Damage only depends on ``lifetime`` against the
    configured fire threshold.
    """

    x: float
    y: float
    angle: float
    """Facing in radians; 0 points along +x, pi/2 along +y (down)."""

    lifetime: int = 70
    charge: int = 30
    fire: int = 20

    fire_threshold: int = Field(default=40, exclude=True)

    @property
    def is_firing(self) -> bool:
        return 0 < self.lifetime <= self.fire_threshold

    @property
    def is_expired(self) -> bool:
        return self.lifetime <= 0

    @property
    def direction(self) -> tuple[float, float]:
        return math.cos(self.angle), math.sin(self.angle)
