"""Random input agent -- mashes direction keys and picks menu actions at random.

The ``RandomAgent`` is the baseline for batch runs: it exercises every
movement path of the soul and every menu branch, and gives a lower bound
on survivability.

Behaviour:
    - Every ``hold_ticks`` ticks it rolls a new set of held directions;
      each direction is held with probability ``press_chance``.
    - With probability ``toggle_chance`` per roll it taps MODE_TOGGLE.
    - Menu actions are picked uniformly, with ``hesitate_chance`` of
      waiting one more tick instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from soul_sim.sim.core.input import DIRECTIONS, InputKey
from soul_sim.sim.core.rng import GameRNG
from soul_sim.sim.play_agents.base import PlayAgent

if TYPE_CHECKING:
    from soul_sim.sim.core.battle_state import BattleState, MenuAction

_ORDERED_DIRECTIONS = tuple(sorted(DIRECTIONS, key=lambda k: k.value))


class RandomAgent(PlayAgent):
    """Agent that holds random direction keys and picks random menu actions.

    Parameters
    ----------
    rng:
        Seeded RNG for deterministic randomness.  If ``None``, a default
        ``GameRNG(seed=0)`` is created.
    press_chance:
        Probability that each direction is held after a re-roll.
    hold_ticks:
        Ticks between re-rolls of the held set.
    toggle_chance:
        Probability of tapping the mode toggle on a re-roll.
    hesitate_chance:
        Probability of not answering an open menu on a given tick.
    """

    def __init__(
        self,
        rng: GameRNG | None = None,
        press_chance: float = 0.25,
        hold_ticks: int = 8,
        toggle_chance: float = 0.02,
        hesitate_chance: float = 0.9,
    ) -> None:
        if hold_ticks <= 0:
            raise ValueError(f"hold_ticks must be > 0, got {hold_ticks}")
        self._rng = rng or GameRNG(seed=0)
        self._press_chance = press_chance
        self._hold_ticks = hold_ticks
        self._toggle_chance = toggle_chance
        self._hesitate_chance = hesitate_chance
        self._held: frozenset[InputKey] = frozenset()
        self._ticks_left = 0

    # ------------------------------------------------------------------
    # PlayAgent interface
    # ------------------------------------------------------------------

    def choose_keys(self, battle: BattleState) -> frozenset[InputKey]:
        if self._ticks_left > 0:
            self._ticks_left -= 1
            # Toggles are taps: drop them after the first tick.
            self._held = frozenset(k for k in self._held if k in DIRECTIONS)
            return self._held

        held = {k for k in _ORDERED_DIRECTIONS if self._rng.chance(self._press_chance)}
        if self._rng.chance(self._toggle_chance):
            held.add(InputKey.MODE_TOGGLE)
        self._held = frozenset(held)
        self._ticks_left = self._hold_ticks - 1
        return self._held

    def choose_menu_action(
        self,
        battle: BattleState,
        actions: tuple[MenuAction, ...],
    ) -> MenuAction | None:
        if not actions:
            return None
        if self._rng.chance(self._hesitate_chance):
            return None
        return self._rng.random_choice(actions)
