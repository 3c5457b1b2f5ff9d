"""Patient agent -- never touches the keys and answers menus sensibly.

Standing still is always safe against guarded bones and is the only way
through the stall phase.  Neutral bones and beams still hit it, so on the
scripted encounter it usually dies early; with harmless patterns it plays
the stall phase through to the win.  It heals when low and otherwise fights.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from soul_sim.sim.core.battle_state import BattlePhase, MenuAction
from soul_sim.sim.play_agents.base import PlayAgent

if TYPE_CHECKING:
    from soul_sim.sim.core.battle_state import BattleState
    from soul_sim.sim.core.input import InputKey
    from soul_sim.sim.core.rng import GameRNG


class PatientAgent(PlayAgent):
    """Holds no keys; heals below *heal_below* of max hp, else FIGHTs.

    Parameters
    ----------
    rng:
        Accepted for interface parity with ``RandomAgent``; unused.
    heal_below:
        HP fraction under which ITEM is chosen instead of FIGHT.
    skip_intro:
        Skip every intro line as soon as it appears.
    """

    def __init__(
        self,
        rng: GameRNG | None = None,
        heal_below: float = 0.5,
        skip_intro: bool = True,
    ) -> None:
        self._heal_below = heal_below
        self._skip_intro = skip_intro

    def choose_keys(self, battle: BattleState) -> frozenset[InputKey]:
        return frozenset()

    def choose_menu_action(
        self,
        battle: BattleState,
        actions: tuple[MenuAction, ...],
    ) -> MenuAction | None:
        if battle.phase == BattlePhase.FINISHER:
            return MenuAction.FIGHT
        soul = battle.soul
        if MenuAction.ITEM in actions and soul.hp < soul.hp_max * self._heal_below:
            return MenuAction.ITEM
        return MenuAction.FIGHT

    def wants_intro_skip(self, battle: BattleState) -> bool:
        return self._skip_intro
