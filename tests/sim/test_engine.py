"""Tests for the battle state machine."""

import pytest

from soul_sim.sim.content.dialogue import (
    ACTION_FLAVOR,
    FINISHER_OPEN_TEXT,
    INTRO_DONE_TEXT,
    INTRO_LINES,
    LOSS_TEXT,
    WIN_TEXT,
)
from soul_sim.sim.core.battle_state import BattlePhase, BattleState, MenuAction
from soul_sim.sim.core.entities import BoneColor, Rect, SoulMode
from soul_sim.sim.core.input import InputKey
from soul_sim.sim.core.rng import GameRNG
from soul_sim.sim.engine import BattleEngine
from soul_sim.sim.play_agents import RandomAgent
from soul_sim.sim.runner import EncounterSimulator

TICK = 16


def _skip_intro(engine: BattleEngine, battle: BattleState) -> None:
    for _ in range(len(engine.intro_lines)):
        engine.advance_intro(battle)


def _tick(engine: BattleEngine, battle: BattleState, n: int, held=frozenset()) -> None:
    for _ in range(n):
        engine.update(battle, held, TICK)


def _to_first_menu(engine: BattleEngine) -> BattleState:
    battle = engine.new_battle()
    _skip_intro(engine, battle)
    _tick(engine, battle, 88)
    return battle


# ---------------------------------------------------------------------------
# Intro
# ---------------------------------------------------------------------------

class TestIntro:
    def test_new_battle_shows_first_line(self, engine):
        battle = engine.new_battle()

        assert battle.phase == BattlePhase.INTRO
        assert battle.dialogue == INTRO_LINES[0]

    def test_lines_advance_on_timer(self, engine):
        battle = engine.new_battle()
        _tick(engine, battle, 87)
        assert battle.intro.line_index == 0

        _tick(engine, battle, 1)
        assert battle.intro.line_index == 1
        assert battle.dialogue == INTRO_LINES[1]

    def test_skip_advances_one_line(self, engine):
        battle = engine.new_battle()
        engine.advance_intro(battle)

        assert battle.dialogue == INTRO_LINES[1]
        assert battle.intro.line_elapsed_ms == 0

    def test_intro_end_starts_cold_open(self, engine):
        battle = engine.new_battle()
        _skip_intro(engine, battle)

        assert battle.phase == BattlePhase.PLAYING
        assert battle.dialogue == INTRO_DONE_TEXT
        assert battle.current_pattern == "cold_open"
        assert len(battle.entities.bones) == 8
        assert battle.phase_index == 0

    def test_soul_frozen_during_intro(self, engine):
        battle = engine.new_battle()
        _tick(engine, battle, 10, {InputKey.LEFT})

        assert battle.soul.x == 320

    def test_advance_intro_outside_intro_is_noop(self, quiet_engine):
        battle = _to_first_menu(quiet_engine)
        messages = list(battle.messages)
        quiet_engine.advance_intro(battle)

        assert battle.messages == messages

    def test_empty_intro_starts_immediately(self, quiet_library):
        engine = BattleEngine(library=quiet_library, intro_lines=())
        battle = engine.new_battle()

        assert battle.phase == BattlePhase.PLAYING


# ---------------------------------------------------------------------------
# Tick timing
# ---------------------------------------------------------------------------

class TestTickTiming:
    def test_delta_clamped(self, engine):
        battle = engine.new_battle()
        engine.update(battle, frozenset(), 1000)

        assert battle.clock_ms == 32
        assert battle.tick == 1

    @pytest.mark.parametrize("delta", [0, -16])
    def test_non_positive_delta_noop(self, engine, delta):
        battle = engine.new_battle()
        engine.update(battle, frozenset(), delta)

        assert battle.clock_ms == 0
        assert battle.tick == 0

    def test_cold_open_menu_on_timer(self, quiet_engine):
        battle = quiet_engine.new_battle()
        _skip_intro(quiet_engine, battle)
        _tick(quiet_engine, battle, 87)
        assert battle.phase == BattlePhase.PLAYING

        _tick(quiet_engine, battle, 1)
        assert battle.phase == BattlePhase.MENU

    def test_pattern_duration_opens_menu(self, quiet_engine):
        battle = _to_first_menu(quiet_engine)
        quiet_engine.choose_action(battle, MenuAction.FIGHT)
        _tick(quiet_engine, battle, 112)
        assert battle.phase == BattlePhase.PLAYING

        _tick(quiet_engine, battle, 1)
        assert battle.phase == BattlePhase.MENU

    def test_world_keeps_running_with_menu_open(self, engine):
        battle = _to_first_menu(engine)
        assert battle.phase == BattlePhase.MENU
        ys = [b.y for b in battle.entities.bones]
        _tick(engine, battle, 1)

        assert [b.y for b in battle.entities.bones] == [y - 2.5 for y in ys]


# ---------------------------------------------------------------------------
# Menu actions
# ---------------------------------------------------------------------------

class TestMenuActions:
    def test_fight_starts_first_pattern(self, engine):
        battle = _to_first_menu(engine)
        assert engine.choose_action(battle, MenuAction.FIGHT)

        assert battle.phase == BattlePhase.PLAYING
        assert battle.current_pattern == "sweep_and_blaster"
        assert battle.phase_index == 1
        assert battle.pattern_elapsed_ms == 0

    def test_action_clears_arena(self, engine):
        battle = _to_first_menu(engine)
        engine.choose_action(battle, "ACT")

        assert all(b.vy != -2.5 for b in battle.entities.bones)
        assert battle.dialogue == "keep your feet still when they're blue."
        assert ACTION_FLAVOR[MenuAction.ACT] in battle.messages

    def test_item_heals(self, quiet_engine):
        battle = _to_first_menu(quiet_engine)
        battle.soul.hp = 50
        quiet_engine.choose_action(battle, MenuAction.ITEM)

        assert battle.soul.hp == 68
        assert ACTION_FLAVOR[MenuAction.ITEM] in battle.messages

    def test_item_heal_capped(self, quiet_engine):
        battle = _to_first_menu(quiet_engine)
        battle.soul.hp = 90
        quiet_engine.choose_action(battle, MenuAction.ITEM)

        assert battle.soul.hp == 92

    def test_mercy_advances(self, quiet_engine):
        battle = _to_first_menu(quiet_engine)
        quiet_engine.choose_action(battle, MenuAction.MERCY)

        assert battle.current_pattern == "first"
        assert ACTION_FLAVOR[MenuAction.MERCY] in battle.messages
        assert battle.stats.menu_actions == ["MERCY"]

    def test_action_ignored_when_menu_closed(self, engine):
        battle = engine.new_battle()
        assert not engine.choose_action(battle, MenuAction.FIGHT)

        _skip_intro(engine, battle)
        assert not engine.choose_action(battle, MenuAction.ITEM)
        assert battle.phase_index == 0
        assert battle.stats.menu_actions == []

    def test_pending_effects_cancelled_by_next_pattern(self, engine):
        battle = _to_first_menu(engine)
        engine.choose_action(battle, MenuAction.FIGHT)
        assert len(battle.effects) == 1

        battle.phase = BattlePhase.MENU
        engine.choose_action(battle, MenuAction.FIGHT)

        assert {e.source for e in battle.effects.pending()} == {"stairs_and_swipe"}

    def test_every_pattern_then_stall(self, engine):
        battle = _to_first_menu(engine)
        seen = []
        for _ in range(len(engine.library)):
            battle.phase = BattlePhase.MENU
            engine.choose_action(battle, MenuAction.FIGHT)
            seen.append(battle.current_pattern)

        assert seen == engine.library.names

        battle.phase = BattlePhase.MENU
        engine.choose_action(battle, MenuAction.FIGHT)
        assert battle.phase == BattlePhase.STALL
        assert battle.current_pattern == "stall"


# ---------------------------------------------------------------------------
# Toggles
# ---------------------------------------------------------------------------

class TestToggles:
    def test_mode_toggle_is_edge_triggered(self, quiet_engine):
        battle = _to_first_menu(quiet_engine)
        _tick(quiet_engine, battle, 3, {InputKey.MODE_TOGGLE})
        assert battle.soul.mode == SoulMode.FREE_ROAM

        _tick(quiet_engine, battle, 1)
        _tick(quiet_engine, battle, 1, {InputKey.MODE_TOGGLE})
        assert battle.soul.mode == SoulMode.PLATFORMING

    def test_mute_toggle(self, engine):
        battle = engine.new_battle()
        engine.update(battle, {InputKey.MUTE_TOGGLE}, TICK)

        assert battle.muted


# ---------------------------------------------------------------------------
# End of battle
# ---------------------------------------------------------------------------

class TestLoss:
    def test_death_ends_battle(self, quiet_engine):
        battle = _to_first_menu(quiet_engine)
        quiet_engine.choose_action(battle, MenuAction.FIGHT)
        battle.soul.hp = 1.0
        battle.soul.x, battle.soul.y = 300.0, 300.0
        battle.entities.spawn_bone(Rect(x=280, y=280, w=60, h=60))

        _tick(quiet_engine, battle, 1)

        assert battle.phase == BattlePhase.FINISHED
        assert battle.battle_result == "loss"
        assert battle.soul.hp == 0
        assert battle.dialogue == LOSS_TEXT

    def test_corruption_drain_can_kill(self, quiet_engine):
        battle = _to_first_menu(quiet_engine)
        battle.soul.hp = 1.0
        battle.soul.corruption = 10.0

        _tick(quiet_engine, battle, 1)

        assert battle.battle_result == "loss"

    def test_finished_battle_ignores_updates(self, quiet_engine):
        battle = _to_first_menu(quiet_engine)
        battle.soul.hp = 1.0
        battle.soul.corruption = 10.0
        _tick(quiet_engine, battle, 1)
        tick = battle.tick

        _tick(quiet_engine, battle, 5, {InputKey.LEFT})

        assert battle.tick == tick
        assert not quiet_engine.choose_action(battle, MenuAction.FIGHT)


class TestStallAndWin:
    def _to_stall(self, engine: BattleEngine) -> BattleState:
        battle = _to_first_menu(engine)
        for _ in range(len(engine.library) + 1):
            battle.phase = BattlePhase.MENU
            engine.choose_action(battle, MenuAction.FIGHT)
        assert battle.phase == BattlePhase.STALL
        return battle

    def test_idle_unlocks_finisher(self, quiet_engine):
        battle = self._to_stall(quiet_engine)
        _tick(quiet_engine, battle, 499)
        assert battle.phase == BattlePhase.STALL
        assert battle.stall.guard_dropped

        _tick(quiet_engine, battle, 1)
        assert battle.phase == BattlePhase.FINISHER
        assert battle.menu_open
        assert battle.dialogue == FINISHER_OPEN_TEXT

    def test_guard_drop_recolors_lid(self, quiet_engine):
        battle = self._to_stall(quiet_engine)
        _tick(quiet_engine, battle, 375)

        lid = battle.entities.find_bone("enclosure_top")
        assert lid.color == BoneColor.GUARDED

    def test_moving_delays_finisher(self, quiet_engine):
        battle = self._to_stall(quiet_engine)
        _tick(quiet_engine, battle, 400)
        _tick(quiet_engine, battle, 1, {InputKey.LEFT})
        _tick(quiet_engine, battle, 200)

        assert battle.phase == BattlePhase.STALL
        assert not battle.stall.finisher_ready

    def test_only_fight_wins(self, quiet_engine):
        battle = self._to_stall(quiet_engine)
        _tick(quiet_engine, battle, 500)

        for action in (MenuAction.ACT, MenuAction.ITEM, MenuAction.MERCY):
            assert not quiet_engine.choose_action(battle, action)
        assert battle.phase == BattlePhase.FINISHER

        assert quiet_engine.choose_action(battle, MenuAction.FIGHT)
        assert battle.battle_result == "win"
        assert battle.is_over
        assert battle.dialogue == WIN_TEXT

    def test_win_is_final(self, quiet_engine):
        battle = self._to_stall(quiet_engine)
        _tick(quiet_engine, battle, 500)
        quiet_engine.choose_action(battle, MenuAction.FIGHT)
        messages = list(battle.messages)
        hp, corruption, tick = battle.soul.hp, battle.soul.corruption, battle.tick

        assert not quiet_engine.choose_action(battle, MenuAction.FIGHT)
        _tick(quiet_engine, battle, 20, {InputKey.LEFT, InputKey.UP})

        assert battle.battle_result == "win"
        assert battle.messages == messages
        assert (battle.soul.hp, battle.soul.corruption) == (hp, corruption)
        assert battle.tick == tick

    def test_stall_actions_before_finisher_ignored(self, quiet_engine):
        battle = self._to_stall(quiet_engine)

        assert not quiet_engine.choose_action(battle, MenuAction.FIGHT)
        assert battle.phase == BattlePhase.STALL

    def test_phase_index_never_decreases(self, quiet_engine):
        battle = quiet_engine.new_battle()
        _skip_intro(quiet_engine, battle)
        last = battle.phase_index
        for _ in range(1200):
            if battle.menu_open:
                quiet_engine.choose_action(battle, MenuAction.FIGHT)
            if battle.is_over:
                break
            quiet_engine.update(battle, frozenset(), TICK)
            assert battle.phase_index >= last
            last = battle.phase_index

        assert battle.battle_result == "win"


class TestReset:
    def test_reset_cancels_and_restarts(self, engine):
        battle = _to_first_menu(engine)
        engine.choose_action(battle, MenuAction.FIGHT)
        assert not battle.effects.is_empty

        fresh = engine.reset(battle)

        assert battle.effects.is_empty
        assert fresh.phase == BattlePhase.INTRO
        assert fresh.clock_ms == 0
        assert fresh.soul.hp == fresh.soul.hp_max


class TestBoundsHold:
    @pytest.mark.parametrize("seed", range(5))
    def test_hp_and_corruption_bounded_every_tick(self, engine, seed):
        sim = EncounterSimulator(engine=engine)
        agent = RandomAgent(rng=GameRNG(seed), hesitate_chance=0.5)
        battle = engine.new_battle()
        cap = battle.config.corruption_cap

        for _ in range(3000):
            if battle.phase == BattlePhase.INTRO:
                engine.advance_intro(battle)
            sim.step(battle, agent)
            assert 0 <= battle.soul.corruption <= cap
            assert 0 <= battle.soul.hp <= battle.soul.hp_max
            if battle.is_over:
                break
