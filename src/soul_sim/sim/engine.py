"""Battle state machine -- sequences the intro, patterns, menus and stall.

``BattleEngine`` holds only configuration-level collaborators (the pattern
library); every bit of mutable state lives on the ``BattleState`` passed
into ``update`` and ``choose_action``.

Tick order (``update``):

1. Clamp the elapsed time, advance the clocks, resolve due effects.
2. Edge-triggered toggles (movement mode, mute).
3. Intro: advance the dialogue timer and stop there.
4. Menu timer: a pattern that has run its course opens the menu.
5. Soul movement, entity advance and cull.
6. Collisions, corruption drain/decay, loss check.
7. Stall idle detection (may open the finishing menu).
"""

from __future__ import annotations

import logging
from typing import AbstractSet

from soul_sim.sim.content.dialogue import (
    ACTION_FLAVOR,
    FINISHER_OPEN_TEXT,
    INTRO_DONE_TEXT,
    INTRO_LINES,
    LOSS_TEXT,
    WIN_TEXT,
)
from soul_sim.sim.content.patterns import PatternLibrary
from soul_sim.sim.core.battle_state import BattlePhase, BattleState, MenuAction
from soul_sim.sim.core.config import BattleConfig
from soul_sim.sim.core.input import InputKey
from soul_sim.sim.effects import resolve_effect
from soul_sim.sim.mechanics.damage import resolve_collisions, tick_corruption
from soul_sim.sim.mechanics.movement import move_soul
from soul_sim.sim.mechanics.stall import StallEvent, update_stall

logger = logging.getLogger(__name__)


class BattleEngine:
    """Drives a ``BattleState`` through the encounter.

    Parameters
    ----------
    library:
        Pattern library to draw numbered patterns from.  Defaults to the
        scripted encounter.
    intro_lines:
        Opening dialogue, one line per intro step.
    """

    def __init__(
        self,
        library: PatternLibrary | None = None,
        intro_lines: tuple[str, ...] = INTRO_LINES,
    ) -> None:
        self.library = library or PatternLibrary()
        self.intro_lines = intro_lines

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def new_battle(self, config: BattleConfig | None = None) -> BattleState:
        """Create a battle showing the first intro line."""
        battle = BattleState.new(config)
        if self.intro_lines:
            battle.say(self.intro_lines[0])
        else:
            self._finish_intro(battle)
        return battle

    def reset(self, battle: BattleState) -> BattleState:
        """Cancel everything pending on *battle* and return a fresh one."""
        dropped = battle.effects.clear()
        logger.debug("Reset: cancelled %d pending effects", dropped)
        return self.new_battle(battle.config)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def update(
        self,
        battle: BattleState,
        held: AbstractSet[InputKey],
        delta_ms: float,
    ) -> BattleState:
        """Advance *battle* by one tick of *delta_ms* milliseconds.

        A finished battle or a non-positive *delta_ms* is a no-op.
        """
        if battle.is_over or delta_ms <= 0:
            return battle

        config = battle.config
        delta = min(delta_ms, config.max_delta_ms)
        battle.tick += 1
        battle.clock_ms += delta
        battle.pattern_elapsed_ms += delta

        for effect in battle.effects.pop_due(battle.clock_ms):
            resolve_effect(battle, effect)

        self._handle_toggles(battle, held)
        battle.previous_keys = frozenset(held)

        if battle.phase == BattlePhase.INTRO:
            battle.intro.line_elapsed_ms += delta
            if battle.intro.line_elapsed_ms >= config.intro_line_ms:
                self.advance_intro(battle)
            return battle

        if (
            battle.phase == BattlePhase.PLAYING
            and battle.pattern_elapsed_ms >= config.pattern_duration_ms
        ):
            battle.phase = BattlePhase.MENU
            logger.debug("Menu opened after pattern %s", battle.current_pattern)

        move_soul(battle.soul, held, battle.gravity, config)
        battle.entities.advance()
        battle.entities.cull(battle.arena, config.cull_margin)

        resolve_collisions(battle)
        tick_corruption(battle, delta)
        if battle.soul.is_dead:
            self._finish(battle, "loss")
            return battle

        if battle.phase == BattlePhase.STALL:
            events = update_stall(battle, held, delta)
            if StallEvent.FINISHER in events:
                battle.phase = BattlePhase.FINISHER
                battle.say(FINISHER_OPEN_TEXT)
        return battle

    # ------------------------------------------------------------------
    # External events
    # ------------------------------------------------------------------

    def advance_intro(self, battle: BattleState) -> None:
        """Show the next intro line, or start the fight after the last one."""
        if battle.phase != BattlePhase.INTRO:
            return
        battle.intro.line_index += 1
        battle.intro.line_elapsed_ms = 0.0
        if battle.intro.line_index < len(self.intro_lines):
            battle.say(self.intro_lines[battle.intro.line_index])
        else:
            self._finish_intro(battle)

    def choose_action(self, battle: BattleState, action: MenuAction | str) -> bool:
        """Apply a menu action.  Returns True if it had any effect.

        Actions arriving while the menu is closed are ignored.  In the
        finishing menu only FIGHT does anything.
        """
        action = MenuAction(action)
        if not battle.menu_open:
            logger.debug("Ignoring %s: menu closed (%s)", action.value, battle.phase.value)
            return False

        if battle.phase == BattlePhase.FINISHER:
            if action != MenuAction.FIGHT or not battle.stall.finisher_ready:
                logger.debug("Ignoring %s in finishing menu", action.value)
                return False
            battle.stats.menu_actions.append(action.value)
            battle.say(WIN_TEXT)
            self._finish(battle, "win")
            return True

        battle.stats.menu_actions.append(action.value)
        flavor = ACTION_FLAVOR[action]
        if action == MenuAction.ITEM:
            battle.soul.heal(battle.config.item_heal)
        if flavor is not None:
            battle.say(flavor)
        self._next_pattern(battle)
        return True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _finish_intro(self, battle: BattleState) -> None:
        battle.say(INTRO_DONE_TEXT)
        battle.phase = BattlePhase.PLAYING
        battle.pattern_elapsed_ms = 0.0
        self.library.run_cold_open(battle)
        logger.debug("Intro finished at %.0fms", battle.clock_ms)

    def _next_pattern(self, battle: BattleState) -> None:
        """Clear the arena and start the next numbered pattern or the stall."""
        battle.effects.clear()
        battle.entities.clear()
        soul = battle.soul
        soul.vx = 0.0
        soul.vy = 0.0
        soul.moved_this_tick = False
        battle.pattern_elapsed_ms = 0.0

        index = battle.phase_index
        battle.phase_index += 1

        if index > self.library.last_index:
            battle.phase = BattlePhase.STALL
            self.library.run_stall(battle)
            logger.debug("Entered stall phase")
            return

        battle.phase = BattlePhase.PLAYING
        self.library.run(battle, index)

    def _handle_toggles(self, battle: BattleState, held: AbstractSet[InputKey]) -> None:
        pressed = set(held) - set(battle.previous_keys)
        if InputKey.MODE_TOGGLE in pressed:
            mode = battle.soul.toggle_mode()
            logger.debug("Soul mode -> %s", mode.value)
        if InputKey.MUTE_TOGGLE in pressed:
            battle.muted = not battle.muted

    def _finish(self, battle: BattleState, result: str) -> None:
        if battle.is_over:
            return
        battle.phase = BattlePhase.FINISHED
        battle.battle_result = result
        dropped = battle.effects.clear()
        if result == "loss":
            battle.say(LOSS_TEXT)
        logger.info(
            "Battle over: %s at tick %d (%.0fms, hp=%.1f, %d effects cancelled)",
            result, battle.tick, battle.clock_ms, battle.soul.hp, dropped,
        )
