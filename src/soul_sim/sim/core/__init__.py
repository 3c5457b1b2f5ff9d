"""Core simulation primitives for the battle core."""

from soul_sim.sim.core.battle_state import (
    BattlePhase,
    BattleState,
    BattleStats,
    IntroState,
    MenuAction,
    StallState,
)
from soul_sim.sim.core.config import BattleConfig, load_config
from soul_sim.sim.core.effect_queue import EffectQueue, EffectType, ScheduledEffect
from soul_sim.sim.core.entities import Blaster, Bone, BoneColor, Rect, Soul, SoulMode
from soul_sim.sim.core.entity_store import EntityStore
from soul_sim.sim.core.input import DIRECTIONS, InputKey, is_intro_advance, keys_from_names
from soul_sim.sim.core.rng import GameRNG

__all__ = [
    # config
    "BattleConfig",
    "load_config",
    # rng
    "GameRNG",
    # entities
    "Rect",
    "Soul",
    "SoulMode",
    "Bone",
    "BoneColor",
    "Blaster",
    "EntityStore",
    # input
    "InputKey",
    "DIRECTIONS",
    "keys_from_names",
    "is_intro_advance",
    # effect_queue
    "EffectType",
    "ScheduledEffect",
    "EffectQueue",
    # battle_state
    "BattlePhase",
    "MenuAction",
    "IntroState",
    "StallState",
    "BattleStats",
    "BattleState",
]
