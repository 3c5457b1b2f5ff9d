"""Idle detection for the terminal stall phase.

While the battle sits in STALL, the soul has to stop moving.  Holding any
direction resets the idle timer; otherwise it grows by the tick's elapsed
milliseconds.  Three thresholds escalate in order, each exactly once:

1. drowsy      -- cosmetic dialogue
2. guard drop  -- the enclosure's top wall becomes a guarded bone
3. finisher    -- the finishing FIGHT becomes available
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, AbstractSet

from soul_sim.sim.core.entities import Bone, BoneColor
from soul_sim.sim.core.input import InputKey, is_moving

if TYPE_CHECKING:
    from soul_sim.sim.core.battle_state import BattleState

logger = logging.getLogger(__name__)

ENCLOSURE_TOP_TAG = "enclosure_top"

DROWSY_TEXT = "... zzz"
GUARD_DROP_TEXT = "you feel the guard drop."


class StallEvent(str, Enum):
    DROWSY = "DROWSY"
    GUARD_DROP = "GUARD_DROP"
    FINISHER = "FINISHER"


def update_stall(
    battle: BattleState,
    held: AbstractSet[InputKey],
    delta_ms: float,
) -> list[StallEvent]:
    """Advance the idle timer and fire any newly crossed thresholds.

    Does nothing once the finisher is unlocked.  Returns the events fired
    this tick, in threshold order.
    """
    stall = battle.stall
    if stall.finisher_ready:
        return []

    if is_moving(held):
        stall.idle_ms = 0.0
    else:
        stall.idle_ms += delta_ms

    config = battle.config
    fired: list[StallEvent] = []

    if not stall.drowsy and stall.idle_ms >= config.drowsy_ms:
        stall.drowsy = True
        battle.say(DROWSY_TEXT)
        fired.append(StallEvent.DROWSY)

    if stall.drowsy and not stall.guard_dropped and stall.idle_ms >= config.guard_drop_ms:
        stall.guard_dropped = True
        _drop_guard(battle)
        battle.say(GUARD_DROP_TEXT)
        fired.append(StallEvent.GUARD_DROP)

    if stall.guard_dropped and stall.idle_ms >= config.finisher_ms:
        stall.finisher_ready = True
        fired.append(StallEvent.FINISHER)

    for event in fired:
        logger.debug("Stall %s at idle=%.0fms", event.value, stall.idle_ms)
    return fired


def _drop_guard(battle: BattleState) -> None:
    """Replace the enclosure's top wall with a guarded copy."""
    wall = battle.entities.find_bone(ENCLOSURE_TOP_TAG)
    if wall is None:
        logger.warning("Guard drop with no enclosure top wall in the arena")
        return
    guarded = Bone(
        x=wall.x, y=wall.y, w=wall.w, h=wall.h,
        color=BoneColor.GUARDED, tag=wall.tag,
    )
    battle.entities.replace_bone(wall, guarded)
