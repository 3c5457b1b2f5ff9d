"""Mutable state of a single boss encounter.

``BattleState`` is exclusively owned by whoever drives the simulation; the
engine mutates it in place on every tick and never keeps state of its own.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from soul_sim.sim.core.config import BattleConfig
from soul_sim.sim.core.effect_queue import EffectQueue
from soul_sim.sim.core.entities import Rect, Soul
from soul_sim.sim.core.entity_store import EntityStore
from soul_sim.sim.core.input import InputKey


class BattlePhase(str, Enum):
    """Top-level state of the encounter state machine."""

    INTRO = "INTRO"
    PLAYING = "PLAYING"
    """A numbered pattern (or the cold open) is running, menu closed."""
    MENU = "MENU"
    """Awaiting a menu action between patterns."""
    STALL = "STALL"
    """Terminal pattern: waiting for the soul to stay idle."""
    FINISHER = "FINISHER"
    """Stall idle threshold reached; the menu is open for the last FIGHT."""
    FINISHED = "FINISHED"


class MenuAction(str, Enum):
    FIGHT = "FIGHT"
    ACT = "ACT"
    ITEM = "ITEM"
    MERCY = "MERCY"


# ---------------------------------------------------------------------------
# IntroState / StallState
# ---------------------------------------------------------------------------

class IntroState(BaseModel):
    """Progress through the scripted opening dialogue."""

    line_index: int = 0
    line_elapsed_ms: float = 0.0


class StallState(BaseModel):
    """Idle tracking for the terminal stall phase.

    Each flag latches once its threshold is crossed.
    """

    idle_ms: float = 0.0
    drowsy: bool = False
    guard_dropped: bool = False
    finisher_ready: bool = False


# ---------------------------------------------------------------------------
# BattleStats
# ---------------------------------------------------------------------------

class BattleStats(BaseModel):
    """Running counters used for telemetry."""

    hits_by_kind: dict[str, int] = Field(default_factory=dict)
    damage_by_kind: dict[str, float] = Field(default_factory=dict)
    damage_by_pattern: dict[str, float] = Field(default_factory=dict)
    corruption_peak: float = 0.0
    menu_actions: list[str] = Field(default_factory=list)

    def record(self, kind: str, pattern: str | None, hp_lost: float) -> None:
        self.damage_by_kind[kind] = self.damage_by_kind.get(kind, 0.0) + hp_lost
        key = pattern or "none"
        self.damage_by_pattern[key] = self.damage_by_pattern.get(key, 0.0) + hp_lost

    def count_hit(self, kind: str) -> None:
        self.hits_by_kind[kind] = self.hits_by_kind.get(kind, 0) + 1


# ---------------------------------------------------------------------------
# BattleState
# ---------------------------------------------------------------------------

class BattleState(BaseModel):
    """Full mutable state of the encounter."""

    model_config = {"arbitrary_types_allowed": True}

    config: BattleConfig = Field(default_factory=BattleConfig)
    soul: Soul
    entities: EntityStore = Field(default_factory=EntityStore)
    effects: EffectQueue = Field(default_factory=EffectQueue, exclude=True)
    """Pending deferred effects.  Excluded from serialization."""

    phase: BattlePhase = BattlePhase.INTRO
    phase_index: int = 0
    """Index of the next numbered pattern to start.  Never decreases."""
    current_pattern: str | None = None

    gravity: float = 0.7
    clock_ms: float = 0.0
    """Simulated time since the battle started."""
    pattern_elapsed_ms: float = 0.0
    tick: int = 0

    intro: IntroState = Field(default_factory=IntroState)
    stall: StallState = Field(default_factory=StallState)

    dialogue: str = ""
    messages: list[str] = Field(default_factory=list)
    """Every line of dialogue shown, oldest first."""

    muted: bool = False
    previous_keys: frozenset[InputKey] = frozenset()

    battle_result: str | None = None
    """``"win"`` or ``"loss"`` once the battle is over."""

    stats: BattleStats = Field(default_factory=BattleStats)

    # -- construction --------------------------------------------------------

    @classmethod
    def new(cls, config: BattleConfig | None = None) -> BattleState:
        """Fresh encounter state, positioned before the first intro line."""
        config = config or BattleConfig()
        soul = Soul(
            x=config.soul_start_x,
            y=config.soul_start_y,
            width=config.soul_size,
            height=config.soul_size,
            hp=config.hp_max,
            hp_max=config.hp_max,
        )
        return cls(config=config, soul=soul, gravity=config.gravity)

    # -- queries -------------------------------------------------------------

    @property
    def menu_open(self) -> bool:
        return self.phase in (BattlePhase.MENU, BattlePhase.FINISHER)

    @property
    def is_over(self) -> bool:
        return self.phase == BattlePhase.FINISHED

    @property
    def in_stall(self) -> bool:
        return self.phase in (BattlePhase.STALL, BattlePhase.FINISHER)

    @property
    def arena(self) -> Rect:
        return Rect(x=0, y=0, w=self.config.arena_width, h=self.config.arena_height)

    # -- dialogue ------------------------------------------------------------

    def say(self, text: str) -> None:
        self.dialogue = text
        self.messages.append(text)
