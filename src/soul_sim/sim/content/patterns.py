"""Attack pattern library.

A pattern is a plain function that writes into a ``PatternScript``: it
sets the dialogue line, spawns entities right away and schedules further
spawns, gravity flips or shoves at fixed millisecond offsets from the
pattern's start.  Scheduling is deterministic -- offsets are measured on
the battle's simulated clock, never on the wall clock.

The numbered patterns run in order between menus.  The cold open runs
once after the intro and the stall pattern runs once at the very end.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable

from soul_sim.sim.core.effect_queue import EffectType, ScheduledEffect
from soul_sim.sim.core.entities import BoneColor
from soul_sim.sim.effects import resolve_effect
from soul_sim.sim.mechanics.stall import ENCLOSURE_TOP_TAG

if TYPE_CHECKING:
    from soul_sim.sim.core.battle_state import BattleState

logger = logging.getLogger(__name__)

NEUTRAL = BoneColor.NEUTRAL
GUARDED = BoneColor.GUARDED

PI = math.pi


# ---------------------------------------------------------------------------
# PatternScript
# ---------------------------------------------------------------------------

class PatternScript:
    """Builder handed to a pattern function.

    Calls with ``delay_ms == 0`` take effect immediately; anything later is
    pushed onto the battle's effect queue, stamped with the pattern's
    start time plus the delay.

    Parameters
    ----------
    battle:
        The battle being scripted.
    name:
        Pattern name; recorded as the source of every scheduled effect.
    """

    def __init__(self, battle: BattleState, name: str) -> None:
        self.battle = battle
        self.name = name
        self.start_ms = battle.clock_ms
        self.scheduled = 0

    def say(self, text: str) -> None:
        self.battle.say(text)

    def bone(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        color: BoneColor = NEUTRAL,
        vx: float = 0.0,
        vy: float = 0.0,
        delay_ms: float = 0.0,
        tag: str | None = None,
    ) -> None:
        params = {"x": x, "y": y, "w": w, "h": h, "color": color, "vx": vx, "vy": vy}
        if tag is not None:
            params["tag"] = tag
        self._emit(EffectType.SPAWN_BONE, params, delay_ms)

    def blaster(self, x: float, y: float, angle: float, delay_ms: float = 0.0) -> None:
        self._emit(EffectType.SPAWN_BLASTER, {"x": x, "y": y, "angle": angle}, delay_ms)

    def flip_gravity(self, delay_ms: float = 0.0) -> None:
        self._emit(EffectType.FLIP_GRAVITY, {}, delay_ms)

    def shove(self, vx: float, vy: float, delay_ms: float = 0.0) -> None:
        self._emit(EffectType.SHOVE_SOUL, {"vx": vx, "vy": vy}, delay_ms)

    def open_menu(self, delay_ms: float) -> None:
        self._emit(EffectType.OPEN_MENU, {}, delay_ms)

    def _emit(self, effect_type: EffectType, params: dict, delay_ms: float) -> None:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        effect = ScheduledEffect(
            effect_type=effect_type,
            due_ms=self.start_ms + delay_ms,
            source=self.name,
            params=params,
        )
        if delay_ms == 0:
            resolve_effect(self.battle, effect)
        else:
            self.battle.effects.schedule(effect)
            self.scheduled += 1


PatternFn = Callable[[PatternScript], None]


# ---------------------------------------------------------------------------
# Numbered patterns
# ---------------------------------------------------------------------------

def sweep_and_blaster(s: PatternScript) -> None:
    """Opposing horizontal sweeps with one guarded row, then a blaster."""
    s.say("keep your feet still when they're blue.")
    for y in range(360, 239, -30):
        color = GUARDED if y == 300 else NEUTRAL
        s.bone(-100, y, 200, 8, color, vx=4)
        s.bone(640, y + 15, 200, 8, NEUTRAL, vx=-4)
    s.blaster(560, 80, PI * 0.75, delay_ms=600)


def stairs_and_swipe(s: PatternScript) -> None:
    s.say("jump. then wait. then jump.")
    for i in range(6):
        s.bone(120 + i * 60, 420 - i * 40, 60, 10)
    for i in range(6):
        s.bone(-120, 430, 240, 8, vx=9, delay_ms=200 + 120 * i)
    s.blaster(80, 80, PI / 4, delay_ms=700)
    s.blaster(560, 140, PI * 0.7, delay_ms=900)


def blue_white_columns(s: PatternScript) -> None:
    s.say("move a little. then don't.")
    for i in range(10):
        color = NEUTRAL if i % 2 == 0 else GUARDED
        s.bone(120 + i * 36, 210, 20, 180, color)
    s.blaster(40, 240, 0, delay_ms=500)
    s.blaster(600, 240, PI, delay_ms=680)
    s.blaster(320, -20, PI / 2, delay_ms=860)


def pendulum(s: PatternScript) -> None:
    s.say("watch the swing.")
    for i in range(5):
        y = 240 + math.sin(i) * 120
        s.bone(320 - 6, y, 12, 12)


def telekinesis_drops(s: PatternScript) -> None:
    """Shoves the soul around before two upward blasters."""
    s.say("buffer your landings.")
    s.shove(6, -8)
    s.shove(-8, -4, delay_ms=300)
    s.shove(0, 12, delay_ms=650)
    for i in range(5):
        s.bone(200 + i * 40, 440, 24, 8)
    s.blaster(220, 420, -PI / 2, delay_ms=700)
    s.blaster(420, 420, -PI / 2, delay_ms=700)


def maze_run(s: PatternScript) -> None:
    s.say("small hops. no panic.")
    for i in range(8):
        s.bone(80 + i * 64, 440, 40, 8, NEUTRAL)
        s.bone(80 + i * 64, 220, 40, 8, GUARDED)
    s.blaster(-20, 280, 0, delay_ms=500)


def sawtooth_flip(s: PatternScript) -> None:
    """Gravity inverts at 600ms and returns to normal at 1200ms."""
    s.say("up is down.")
    for i in range(6):
        s.bone(60 + i * 90, 400 - (i % 2) * 120, 80, 10, GUARDED if i % 2 else NEUTRAL)
    s.flip_gravity(delay_ms=600)
    s.flip_gravity(delay_ms=1200)
    s.blaster(320, 480, -PI / 2, delay_ms=900)


def gauntlet(s: PatternScript) -> None:
    s.say("route early.")
    for i in range(10):
        s.bone(-120, 260 + (30 if i % 2 else -30), 200, 8, vx=6, delay_ms=i * 120)
        s.bone(640, 260 + (-60 if i % 2 else 60), 200, 8, vx=-6, delay_ms=i * 120 + 60)
    s.blaster(320, 0, PI / 2, delay_ms=300)
    s.blaster(320, 480, -PI / 2, delay_ms=500)
    s.blaster(320, 0, PI / 2, delay_ms=700)
    s.blaster(160, 0, PI / 2, delay_ms=900)
    s.blaster(480, 480, -PI / 2, delay_ms=900)


# ---------------------------------------------------------------------------
# Cold open / stall
# ---------------------------------------------------------------------------

def cold_open(s: PatternScript) -> None:
    """Ambush right after the intro; the first menu opens on a timer."""
    for i in range(8):
        s.bone(40 + i * 70, 420, 50, 10, vy=-2.5)
    s.open_menu(delay_ms=s.battle.config.cold_open_menu_delay_ms)


def stall_enclosure(s: PatternScript) -> None:
    """Static four-wall cage.  No attacks follow."""
    s.say("my special attack.")
    s.bone(220, 220, 200, 10, tag=ENCLOSURE_TOP_TAG)
    s.bone(220, 350, 200, 10)
    s.bone(220, 220, 10, 140)
    s.bone(410, 220, 10, 140)


# ---------------------------------------------------------------------------
# PatternLibrary
# ---------------------------------------------------------------------------

DEFAULT_PATTERNS: tuple[tuple[str, PatternFn], ...] = (
    ("sweep_and_blaster", sweep_and_blaster),
    ("stairs_and_swipe", stairs_and_swipe),
    ("blue_white_columns", blue_white_columns),
    ("pendulum", pendulum),
    ("telekinesis_drops", telekinesis_drops),
    ("maze_run", maze_run),
    ("sawtooth_flip", sawtooth_flip),
    ("gauntlet", gauntlet),
)

COLD_OPEN = "cold_open"
STALL = "stall"


class PatternLibrary:
    """Ordered set of numbered patterns plus the cold open and stall.

    Parameters
    ----------
    patterns:
        ``(name, function)`` pairs run in order between menus.  Defaults to
        the eight scripted patterns of the encounter.
    """

    def __init__(
        self,
        patterns: tuple[tuple[str, PatternFn], ...] | list[tuple[str, PatternFn]] | None = None,
        cold_open_fn: PatternFn = cold_open,
        stall_fn: PatternFn = stall_enclosure,
    ) -> None:
        self._patterns = list(DEFAULT_PATTERNS if patterns is None else patterns)
        names = [n for n, _ in self._patterns]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate pattern names: {names}")
        self._cold_open = cold_open_fn
        self._stall = stall_fn

    @property
    def names(self) -> list[str]:
        return [n for n, _ in self._patterns]

    @property
    def last_index(self) -> int:
        return len(self._patterns) - 1

    def __len__(self) -> int:
        return len(self._patterns)

    def get(self, index: int) -> tuple[str, PatternFn]:
        if not 0 <= index < len(self._patterns):
            raise IndexError(f"no pattern at index {index}")
        return self._patterns[index]

    def describe(self, index: int) -> str:
        """First docstring line of the pattern, or its name."""
        name, fn = self.get(index)
        doc = (fn.__doc__ or "").strip()
        return doc.splitlines()[0] if doc else name

    # -- running -------------------------------------------------------------

    def run(self, battle: BattleState, index: int) -> PatternScript:
        name, fn = self.get(index)
        return self._run(battle, name, fn)

    def run_cold_open(self, battle: BattleState) -> PatternScript:
        return self._run(battle, COLD_OPEN, self._cold_open)

    def run_stall(self, battle: BattleState) -> PatternScript:
        return self._run(battle, STALL, self._stall)

    def _run(self, battle: BattleState, name: str, fn: PatternFn) -> PatternScript:
        script = PatternScript(battle, name)
        battle.current_pattern = name
        fn(script)
        logger.debug(
            "Pattern %s started at %.0fms (%d entities, %d scheduled)",
            name, script.start_ms, len(battle.entities), script.scheduled,
        )
        return script
