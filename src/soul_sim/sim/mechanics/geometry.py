"""Pure collision tests: rectangle overlap and point-vs-beam."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from soul_sim.sim.core.entities import Rect


def rect_overlap(a: Rect, b: Rect) -> bool:
    """Axis-aligned overlap; rectangles that only share an edge do not overlap."""
    return (
        a.x < b.x + b.w
        and a.x + a.w > b.x
        and a.y < b.y + b.h
        and a.y + a.h > b.y
    )


def ray_hit(
    point: tuple[float, float],
    origin: tuple[float, float],
    angle: float,
    length: float,
    half_width: float,
) -> bool:
    """Return True if *point* lies inside the beam cast from *origin*.

    The offset ``point - origin`` is projected onto the beam direction.  A
    hit needs the forward projection strictly inside ``(0, length)`` and
    the perpendicular distance strictly below *half_width*.
    """
    dx, dy = math.cos(angle), math.sin(angle)
    ox, oy = point[0] - origin[0], point[1] - origin[1]
    forward = ox * dx + oy * dy
    perpendicular = abs(ox * dy - oy * dx)
    return 0 < forward < length and perpendicular < half_width
