"""Core battle mechanics.

Re-exports the primary functions from each mechanics module for convenience.

Usage::

    from soul_sim.sim.mechanics import (
        rect_overlap, ray_hit,
        move_soul, clamp_to_arena,
        apply_hit, apply_corruption, resolve_collisions,
        update_stall,
    )
"""

# -- geometry ----------------------------------------------------------------
from .geometry import ray_hit, rect_overlap

# -- movement ----------------------------------------------------------------
from .movement import clamp_to_arena, move_soul

# -- damage ------------------------------------------------------------------
from .damage import (
    apply_corruption,
    apply_hit,
    bone_hurts,
    resolve_collisions,
    tick_corruption,
)

# -- stall -------------------------------------------------------------------
from .stall import StallEvent, update_stall

__all__ = [
    # geometry
    "rect_overlap",
    "ray_hit",
    # movement
    "move_soul",
    "clamp_to_arena",
    # damage
    "apply_hit",
    "apply_corruption",
    "bone_hurts",
    "resolve_collisions",
    "tick_corruption",
    # stall
    "StallEvent",
    "update_stall",
]
