"""Tests for hits, corruption, and per-tick collision resolution."""

import pytest

from soul_sim.sim.core.battle_state import BattleState
from soul_sim.sim.core.config import BattleConfig
from soul_sim.sim.core.entities import BoneColor, Rect, Soul
from soul_sim.sim.mechanics.damage import (
    HIT_BEAM,
    HIT_BONE,
    HIT_CORRUPTION,
    apply_corruption,
    apply_hit,
    bone_hurts,
    resolve_collisions,
    tick_corruption,
)

CONFIG = BattleConfig()


def _make_soul(**kwargs) -> Soul:
    defaults = dict(x=320.0, y=360.0, hp=92.0, hp_max=92.0)
    defaults.update(kwargs)
    return Soul(**defaults)


def _make_battle() -> BattleState:
    battle = BattleState.new()
    battle.current_pattern = "test_pattern"
    return battle


# ---------------------------------------------------------------------------
# apply_hit / apply_corruption
# ---------------------------------------------------------------------------

class TestApplyHit:
    def test_bone_hit_values(self):
        soul = _make_soul()
        lost = apply_hit(soul, 1.2, 5)

        assert lost == pytest.approx(1.2)
        assert soul.hp == pytest.approx(90.8)
        assert soul.corruption == 5

    def test_corruption_capped(self):
        soul = _make_soul(corruption=58.0)
        apply_hit(soul, 1.2, 5, cap=60)

        assert soul.corruption == 60

    def test_hp_floors_at_zero(self):
        soul = _make_soul(hp=0.5)
        lost = apply_hit(soul, 1.2, 5)

        assert lost == 0.5
        assert soul.hp == 0


class TestApplyCorruption:
    def test_single_tick(self):
        soul = _make_soul(corruption=10.0)
        lost = apply_corruption(soul, 16, CONFIG)

        assert lost == pytest.approx(1.28)
        assert soul.corruption == pytest.approx(9.68)

    def test_twenty_ticks(self):
        soul = _make_soul(corruption=10.0)
        for _ in range(20):
            apply_corruption(soul, 16, CONFIG)

        assert soul.corruption == pytest.approx(3.6)
        assert soul.hp == pytest.approx(66.4)

    def test_drain_limited_by_meter(self):
        soul = _make_soul(corruption=0.5)
        lost = apply_corruption(soul, 16, CONFIG)

        assert lost == pytest.approx(0.5)
        assert soul.hp == pytest.approx(91.5)
        assert soul.corruption == pytest.approx(0.18)

    def test_zero_corruption_noop(self):
        soul = _make_soul()
        assert apply_corruption(soul, 16, CONFIG) == 0
        assert soul.hp == 92

    def test_zero_delta_noop(self):
        soul = _make_soul(corruption=10.0)
        assert apply_corruption(soul, 0, CONFIG) == 0
        assert soul.corruption == 10


class TestBoneHurts:
    def test_neutral_always(self):
        assert bone_hurts(BoneColor.NEUTRAL, False)
        assert bone_hurts(BoneColor.NEUTRAL, True)

    def test_guarded_only_when_moving(self):
        assert not bone_hurts(BoneColor.GUARDED, False)
        assert bone_hurts(BoneColor.GUARDED, True)


# ---------------------------------------------------------------------------
# resolve_collisions
# ---------------------------------------------------------------------------

class TestResolveCollisions:
    def test_neutral_bone_overlap(self):
        battle = _make_battle()
        battle.entities.spawn_bone(Rect(x=310, y=355, w=30, h=10))

        lost = resolve_collisions(battle)

        assert lost == pytest.approx(1.2)
        assert battle.soul.corruption == 5
        assert battle.stats.hits_by_kind == {HIT_BONE: 1}
        assert battle.stats.damage_by_pattern["test_pattern"] == pytest.approx(1.2)
        assert battle.stats.corruption_peak == 5

    def test_guarded_bone_spares_still_soul(self):
        battle = _make_battle()
        battle.entities.spawn_bone(Rect(x=310, y=355, w=30, h=10), BoneColor.GUARDED)

        assert resolve_collisions(battle) == 0
        assert battle.soul.hp == 92

    def test_guarded_bone_hurts_moving_soul(self):
        battle = _make_battle()
        battle.soul.moved_this_tick = True
        battle.entities.spawn_bone(Rect(x=310, y=355, w=30, h=10), BoneColor.GUARDED)

        assert resolve_collisions(battle) == pytest.approx(1.2)

    def test_every_overlapping_bone_hits(self):
        battle = _make_battle()
        for _ in range(3):
            battle.entities.spawn_bone(Rect(x=310, y=355, w=30, h=10))

        assert resolve_collisions(battle) == pytest.approx(3.6)
        assert battle.soul.corruption == 15

    def test_touching_bone_misses(self):
        battle = _make_battle()
        battle.entities.spawn_bone(Rect(x=332, y=355, w=30, h=10))

        assert resolve_collisions(battle) == 0

    def test_firing_beam_hits(self):
        battle = _make_battle()
        cx, cy = battle.soul.center
        battle.entities.spawn_blaster((cx - 200, cy), 0.0, lifetime=40)

        lost = resolve_collisions(battle)

        assert lost == pytest.approx(0.9)
        assert battle.soul.corruption == 6
        assert battle.stats.hits_by_kind == {HIT_BEAM: 1}

    def test_charging_beam_harmless(self):
        battle = _make_battle()
        cx, cy = battle.soul.center
        battle.entities.spawn_blaster((cx - 200, cy), 0.0, lifetime=41)

        assert resolve_collisions(battle) == 0


class TestTickCorruption:
    def test_drain_recorded(self):
        battle = _make_battle()
        battle.soul.corruption = 10.0

        tick_corruption(battle, 16)

        assert battle.stats.damage_by_kind[HIT_CORRUPTION] == pytest.approx(1.28)
        assert battle.stats.damage_by_pattern["test_pattern"] == pytest.approx(1.28)

    def test_nothing_recorded_when_clean(self):
        battle = _make_battle()
        tick_corruption(battle, 16)

        assert HIT_CORRUPTION not in battle.stats.damage_by_kind
