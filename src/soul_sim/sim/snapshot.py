"""Read-only per-frame views handed to the render, UI and HUD collaborators.

The core never reads these back.  All models are frozen.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pydantic import BaseModel

from soul_sim.sim.core.battle_state import MenuAction
from soul_sim.sim.core.entities import BoneColor, Rect, SoulMode

if TYPE_CHECKING:
    from soul_sim.sim.core.battle_state import BattleState


class SoulView(BaseModel):
    model_config = {"frozen": True}

    rect: Rect
    color: str
    """``"blue"`` while platforming, ``"red"`` while free-roaming."""


class BoneView(BaseModel):
    model_config = {"frozen": True}

    rect: Rect
    color: BoneColor


class BlasterView(BaseModel):
    model_config = {"frozen": True}

    origin: tuple[float, float]
    angle: float
    is_firing: bool


class RenderSnapshot(BaseModel):
    model_config = {"frozen": True}

    arena: Rect
    soul: SoulView
    bones: tuple[BoneView, ...]
    blasters: tuple[BlasterView, ...]


class UISnapshot(BaseModel):
    model_config = {"frozen": True}

    dialogue_text: str
    menu_open: bool
    available_actions: tuple[MenuAction, ...] = ()


class HUDSnapshot(BaseModel):
    model_config = {"frozen": True}

    hp: int
    hp_max: int
    corruption: int


def soul_color(mode: SoulMode) -> str:
    return "blue" if mode == SoulMode.PLATFORMING else "red"


def render_snapshot(battle: BattleState) -> RenderSnapshot:
    soul = battle.soul
    return RenderSnapshot(
        arena=battle.arena,
        soul=SoulView(rect=soul.rect, color=soul_color(soul.mode)),
        bones=tuple(BoneView(rect=b.rect, color=b.color) for b in battle.entities.bones),
        blasters=tuple(
            BlasterView(origin=(g.x, g.y), angle=g.angle, is_firing=g.is_firing)
            for g in battle.entities.blasters
        ),
    )


def ui_snapshot(battle: BattleState) -> UISnapshot:
    return UISnapshot(
        dialogue_text=battle.dialogue,
        menu_open=battle.menu_open,
        available_actions=tuple(MenuAction) if battle.menu_open else (),
    )


def hud_snapshot(battle: BattleState) -> HUDSnapshot:
    soul = battle.soul
    return HUDSnapshot(
        hp=max(0, math.floor(soul.hp)),
        hp_max=int(soul.hp_max),
        corruption=math.floor(soul.corruption),
    )
