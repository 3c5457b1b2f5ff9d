"""Logical input symbols and the raw-key mapping used by front ends.

The core never sees keyboard events; it is handed the set of
``InputKey`` values held during a tick.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class InputKey(str, Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    UP = "UP"
    DOWN = "DOWN"
    MODE_TOGGLE = "MODE_TOGGLE"
    MUTE_TOGGLE = "MUTE_TOGGLE"


DIRECTIONS = frozenset({InputKey.LEFT, InputKey.RIGHT, InputKey.UP, InputKey.DOWN})

# Raw key names (lower-cased, as browsers and pygame report them) to symbols.
KEY_BINDINGS: dict[str, InputKey] = {
    "arrowleft": InputKey.LEFT,
    "a": InputKey.LEFT,
    "left": InputKey.LEFT,
    "arrowright": InputKey.RIGHT,
    "d": InputKey.RIGHT,
    "right": InputKey.RIGHT,
    "arrowup": InputKey.UP,
    "w": InputKey.UP,
    "up": InputKey.UP,
    " ": InputKey.UP,
    "space": InputKey.UP,
    "arrowdown": InputKey.DOWN,
    "s": InputKey.DOWN,
    "down": InputKey.DOWN,
    "c": InputKey.MODE_TOGGLE,
    "m": InputKey.MUTE_TOGGLE,
}

# Keys that skip the current intro line.
INTRO_ADVANCE_KEYS = frozenset({"z", "enter", "return"})


def keys_from_names(names: Iterable[str]) -> frozenset[InputKey]:
    """Translate raw key names into the held ``InputKey`` set.

    Unbound names are dropped.
    """
    held: set[InputKey] = set()
    for name in names:
        key = KEY_BINDINGS.get(name.lower())
        if key is not None:
            held.add(key)
    return frozenset(held)


def is_moving(held: Iterable[InputKey]) -> bool:
    """True if any directional key is held."""
    return any(k in DIRECTIONS for k in held)


def is_intro_advance(names: Iterable[str]) -> bool:
    """True if any raw key name skips the current intro line.

    Front ends call ``BattleEngine.advance_intro`` when this holds for the
    keys pressed this frame.
    """
    return any(name.lower() in INTRO_ADVANCE_KEYS for name in names)
