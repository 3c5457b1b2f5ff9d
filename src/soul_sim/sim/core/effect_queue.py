"""Deterministic deferred-effect queue for the battle core.

Patterns schedule spawns, gravity flips and similar effects at fixed
offsets from their start.  Instead of wall-clock timers, each effect is
stamped with a due time on the battle's simulated clock and the engine
drains everything that has come due at the start of each tick.  Effects
due at the same time resolve in the order they were scheduled.
"""

from __future__ import annotations

import heapq
import itertools
from enum import Enum

from pydantic import BaseModel, Field


class EffectType(str, Enum):
    """Kinds of deferred effect the engine knows how to resolve."""

    SPAWN_BONE = "SPAWN_BONE"
    SPAWN_BLASTER = "SPAWN_BLASTER"
    FLIP_GRAVITY = "FLIP_GRAVITY"
    SHOVE_SOUL = "SHOVE_SOUL"
    """Overwrite the soul's velocity (scripted telekinesis)."""
    OPEN_MENU = "OPEN_MENU"


# ---------------------------------------------------------------------------
# ScheduledEffect (value object)
# ---------------------------------------------------------------------------

class ScheduledEffect(BaseModel):
    """A single effect waiting for its due time.

    Parameters
    ----------
    effect_type:
        What to do when the effect resolves.
    due_ms:
        Simulated-clock time (ms since battle start) at which it fires.
    source:
        Name of the pattern that scheduled it.
    params:
        Arguments consumed by the engine's resolver (rect, angle, ...).
    """

    effect_type: EffectType
    due_ms: float
    source: str
    params: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# EffectQueue
# ---------------------------------------------------------------------------

class EffectQueue:
    """Min-heap of ``ScheduledEffect`` ordered by ``(due_ms, insertion)``.

    This is a plain Python class (not a Pydantic model) because it holds
    mutable internal state that should not be serialized.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, ScheduledEffect]] = []
        self._counter = itertools.count()

    # -- mutations -----------------------------------------------------------

    def schedule(self, effect: ScheduledEffect) -> None:
        heapq.heappush(self._heap, (effect.due_ms, next(self._counter), effect))

    def pop_due(self, now_ms: float) -> list[ScheduledEffect]:
        """Remove and return every effect with ``due_ms <= now_ms``, in order."""
        due: list[ScheduledEffect] = []
        while self._heap and self._heap[0][0] <= now_ms:
            due.append(heapq.heappop(self._heap)[2])
        return due

    def clear(self) -> int:
        """Cancel every pending effect.  Returns how many were dropped."""
        dropped = len(self._heap)
        self._heap.clear()
        return dropped

    # -- queries -------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self._heap

    @property
    def next_due_ms(self) -> float | None:
        return self._heap[0][0] if self._heap else None

    def pending(self) -> list[ScheduledEffect]:
        """Pending effects in firing order (does not consume them)."""
        return [item[2] for item in sorted(self._heap)]

    def __len__(self) -> int:
        return len(self._heap)

    def __repr__(self) -> str:
        return f"EffectQueue(length={len(self._heap)})"
