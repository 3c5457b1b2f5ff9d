"""Soul movement physics for the two movement modes.

FREE_ROAM moves a fixed step per held direction.  PLATFORMING adds
gravity, jumping and a floor that follows the sign of gravity.  Both end
by clamping the soul inside the arena interior.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, AbstractSet

from soul_sim.sim.core.entities import SoulMode
from soul_sim.sim.core.input import InputKey

if TYPE_CHECKING:
    from soul_sim.sim.core.config import BattleConfig
    from soul_sim.sim.core.entities import Soul


def move_soul(
    soul: Soul,
    held: AbstractSet[InputKey],
    gravity: float,
    config: BattleConfig,
) -> None:
    """Apply one tick of movement for the soul's current mode.

    Sets ``soul.moved_this_tick``.
    """
    if soul.mode == SoulMode.FREE_ROAM:
        _move_free_roam(soul, held, config)
    else:
        _move_platforming(soul, held, gravity, config)
    clamp_to_arena(soul, config)


def _move_free_roam(soul: Soul, held: AbstractSet[InputKey], config: BattleConfig) -> None:
    speed = config.soul_speed
    moved = False
    if InputKey.LEFT in held:
        soul.x -= speed
        moved = True
    if InputKey.RIGHT in held:
        soul.x += speed
        moved = True
    if InputKey.UP in held:
        soul.y -= speed
        moved = True
    if InputKey.DOWN in held:
        soul.y += speed
        moved = True
    soul.moved_this_tick = moved


def _move_platforming(
    soul: Soul,
    held: AbstractSet[InputKey],
    gravity: float,
    config: BattleConfig,
) -> None:
    speed = config.soul_speed
    left = InputKey.LEFT in held
    right = InputKey.RIGHT in held
    up = InputKey.UP in held

    if left:
        soul.vx = -speed
    elif right:
        soul.vx = speed
    else:
        soul.vx = 0.0

    if up and soul.on_ground:
        soul.vy = -config.jump_speed * math.copysign(1.0, gravity) if gravity else 0.0
        soul.on_ground = False

    soul.moved_this_tick = left or right or up

    soul.vy += gravity * config.gravity_scale
    soul.x += soul.vx
    soul.y += soul.vy

    # Floor sits at the bottom under positive gravity, at the top otherwise.
    if gravity > 0 and soul.y + soul.height >= config.floor_y:
        soul.y = config.floor_y - soul.height
        soul.vy = 0.0
        soul.on_ground = True
    elif gravity < 0 and soul.y <= config.ceiling_y:
        soul.y = config.ceiling_y
        soul.vy = 0.0
        soul.on_ground = True
    else:
        soul.on_ground = False


def clamp_to_arena(soul: Soul, config: BattleConfig) -> None:
    """Keep the whole soul inside the arena interior margin."""
    margin = config.arena_margin
    soul.x = max(margin, min(config.arena_width - margin - soul.width, soul.x))
    soul.y = max(margin, min(config.arena_height - margin - soul.height, soul.y))
