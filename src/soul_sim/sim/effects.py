"""Effect resolution -- applies a ``ScheduledEffect`` to the battle.

Patterns describe what happens as effects; the engine resolves them when
they come due.  Each effect type maps to one handler.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from soul_sim.sim.core.battle_state import BattlePhase
from soul_sim.sim.core.effect_queue import EffectType, ScheduledEffect
from soul_sim.sim.core.entities import BoneColor, Rect

if TYPE_CHECKING:
    from soul_sim.sim.core.battle_state import BattleState

logger = logging.getLogger(__name__)


def resolve_effect(battle: BattleState, effect: ScheduledEffect) -> None:
    """Apply *effect* to *battle*.  Unknown types are logged and skipped."""
    handler = _HANDLERS.get(effect.effect_type)
    if handler is None:
        logger.warning("No handler for effect type %s", effect.effect_type)
        return
    handler(battle, effect.params)


def _spawn_bone(battle: BattleState, params: dict) -> None:
    battle.entities.spawn_bone(
        Rect(x=params["x"], y=params["y"], w=params["w"], h=params["h"]),
        color=BoneColor(params.get("color", BoneColor.NEUTRAL)),
        velocity=(params.get("vx", 0.0), params.get("vy", 0.0)),
        tag=params.get("tag"),
    )


def _spawn_blaster(battle: BattleState, params: dict) -> None:
    config = battle.config
    battle.entities.spawn_blaster(
        (params["x"], params["y"]),
        params["angle"],
        lifetime=config.blaster_lifetime,
        fire_threshold=config.blaster_fire_threshold,
    )


def _flip_gravity(battle: BattleState, params: dict) -> None:
    battle.gravity = -battle.gravity
    logger.debug("Gravity flipped to %.2f", battle.gravity)


def _shove_soul(battle: BattleState, params: dict) -> None:
    battle.soul.vx = params.get("vx", 0.0)
    battle.soul.vy = params.get("vy", 0.0)


def _open_menu(battle: BattleState, params: dict) -> None:
    if battle.phase == BattlePhase.PLAYING:
        battle.phase = BattlePhase.MENU
        logger.debug("Menu opened by scheduled effect at %.0fms", battle.clock_ms)


_HANDLERS: dict[EffectType, Callable[[BattleState, dict], None]] = {
    EffectType.SPAWN_BONE: _spawn_bone,
    EffectType.SPAWN_BLASTER: _spawn_blaster,
    EffectType.FLIP_GRAVITY: _flip_gravity,
    EffectType.SHOVE_SOUL: _shove_soul,
    EffectType.OPEN_MENU: _open_menu,
}
