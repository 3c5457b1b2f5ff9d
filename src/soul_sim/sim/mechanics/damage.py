"""Collision damage and the corruption (KR) meter.

Pipeline per tick:
    bone overlaps -> firing beams -> corruption drain/decay

Every hit lowers hp immediately and adds corruption (capped).  Corruption
then drains hp and decays in proportion to the elapsed milliseconds.
Nothing caps the number of hits per tick and there are no invulnerability
frames.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from soul_sim.sim.core.entities import BoneColor
from soul_sim.sim.mechanics.geometry import ray_hit, rect_overlap

if TYPE_CHECKING:
    from soul_sim.sim.core.battle_state import BattleState
    from soul_sim.sim.core.config import BattleConfig
    from soul_sim.sim.core.entities import Soul

HIT_BONE = "bone"
HIT_GUARDED_BONE = "guarded_bone"
HIT_BEAM = "beam"
HIT_CORRUPTION = "corruption"


def apply_hit(soul: Soul, damage: float, corruption: float, cap: float = 60.0) -> float:
    """Apply one hit to *soul*.

    HP drops by *damage* (never below 0) and corruption rises by
    *corruption*, clamped to *cap*.  Returns the hp actually lost.
    """
    lost = soul.take_damage(damage)
    soul.corruption = min(cap, soul.corruption + corruption)
    return lost


def apply_corruption(soul: Soul, delta_ms: float, config: BattleConfig) -> float:
    """Drain hp by the corruption meter, then decay the meter.

    No-op when corruption is already 0.  Returns the hp drained.
    """
    if soul.corruption <= 0 or delta_ms <= 0:
        return 0.0
    drain = min(soul.corruption, config.corruption_drain_rate * delta_ms)
    lost = soul.take_damage(drain)
    soul.corruption = max(0.0, soul.corruption - config.corruption_decay_rate * delta_ms)
    return lost


def bone_hurts(color: BoneColor, moved: bool) -> bool:
    """Neutral bones always hurt; guarded bones only hurt a moving soul."""
    if color == BoneColor.NEUTRAL:
        return True
    return moved


def resolve_collisions(battle: BattleState) -> float:
    """Apply every bone and beam hit on the soul for this tick.

    Hits are attributed to ``battle.current_pattern`` in ``battle.stats``.
    Returns total hp lost.
    """
    soul = battle.soul
    config = battle.config
    stats = battle.stats
    soul_rect = soul.rect
    total = 0.0

    for bone in battle.entities.bones:
        if not rect_overlap(soul_rect, bone.rect):
            continue
        if not bone_hurts(bone.color, soul.moved_this_tick):
            continue
        kind = HIT_BONE if bone.color == BoneColor.NEUTRAL else HIT_GUARDED_BONE
        lost = apply_hit(soul, config.bone_damage, config.bone_corruption, config.corruption_cap)
        stats.count_hit(kind)
        stats.record(kind, battle.current_pattern, lost)
        total += lost

    center = soul.center
    for blaster in battle.entities.blasters:
        if not blaster.is_firing:
            continue
        if not ray_hit(
            center, (blaster.x, blaster.y), blaster.angle,
            config.beam_length, config.beam_half_width,
        ):
            continue
        lost = apply_hit(soul, config.beam_damage, config.beam_corruption, config.corruption_cap)
        stats.count_hit(HIT_BEAM)
        stats.record(HIT_BEAM, battle.current_pattern, lost)
        total += lost

    stats.corruption_peak = max(stats.corruption_peak, soul.corruption)
    return total


def tick_corruption(battle: BattleState, delta_ms: float) -> float:
    """Corruption drain/decay step with telemetry attribution."""
    lost = apply_corruption(battle.soul, delta_ms, battle.config)
    if lost > 0:
        battle.stats.record(HIT_CORRUPTION, battle.current_pattern, lost)
    return lost
