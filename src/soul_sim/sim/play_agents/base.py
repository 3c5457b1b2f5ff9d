"""Base class for agents that play the encounter headlessly.

All play agents subclass ``PlayAgent``.  The encounter simulator asks for
the held keys once per tick and for a menu action whenever the menu is
open.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from soul_sim.sim.core.battle_state import BattleState, MenuAction
    from soul_sim.sim.core.input import InputKey


class PlayAgent(ABC):
    """Base class for agents that play the encounter."""

    @abstractmethod
    def choose_keys(self, battle: BattleState) -> frozenset[InputKey]:
        """Return the keys held for the next tick.

        Parameters
        ----------
        battle:
            The current encounter state, fully observable.
        """

    @abstractmethod
    def choose_menu_action(
        self,
        battle: BattleState,
        actions: tuple[MenuAction, ...],
    ) -> MenuAction | None:
        """Pick a menu action, or ``None`` to leave the menu open this tick.

        Parameters
        ----------
        battle:
            The current encounter state.
        actions:
            Actions offered by the menu.
        """

    def wants_intro_skip(self, battle: BattleState) -> bool:
        """Whether to skip the current intro line.  Default: never."""
        return False
