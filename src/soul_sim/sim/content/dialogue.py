"""Scripted dialogue lines for the encounter."""

from __future__ import annotations

from soul_sim.sim.core.battle_state import MenuAction

INTRO_LINES: tuple[str, ...] = (
    "hey.",
    "you look tired. me too.",
    "still moving forward, huh.",
    "welp. guess we do this the hard way.",
    "just a heads-up... blue means don't move.",
    "try to keep up.",
    "ready?",
)

INTRO_DONE_TEXT = "..."

# FIGHT has no line of its own; the next pattern's message shows instead.
ACTION_FLAVOR: dict[MenuAction, str | None] = {
    MenuAction.FIGHT: None,
    MenuAction.ACT: "he doesn't seem interested.",
    MenuAction.ITEM: "you use a healing item.",
    MenuAction.MERCY: "not an option.",
}

FINISHER_OPEN_TEXT = "... now's your chance."
WIN_TEXT = "you swing while he sleeps. it's over."
LOSS_TEXT = "you died. refresh to retry."
