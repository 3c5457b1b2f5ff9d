"""Live bone and blaster collections.

Entities are only changed by spawning, by ``advance`` and by ``cull``;
collision resolution reads them without mutating anything.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from soul_sim.sim.core.entities import Blaster, Bone, BoneColor, Rect


class EntityStore(BaseModel):
    """Owns every projectile currently in the arena."""

    bones: list[Bone] = Field(default_factory=list)
    blasters: list[Blaster] = Field(default_factory=list)

    # -- spawning ------------------------------------------------------------

    def spawn_bone(
        self,
        rect: Rect,
        color: BoneColor = BoneColor.NEUTRAL,
        velocity: tuple[float, float] = (0.0, 0.0),
        tag: str | None = None,
    ) -> Bone:
        """Add a bone covering *rect* that drifts by *velocity* per tick.

        Raises ``ValueError`` if the rectangle has no area.
        """
        bone = Bone(
            x=rect.x, y=rect.y, w=rect.w, h=rect.h,
            color=color, vx=velocity[0], vy=velocity[1], tag=tag,
        )
        self.bones.append(bone)
        return bone

    def spawn_blaster(
        self,
        origin: tuple[float, float],
        angle: float,
        lifetime: int = 70,
        fire_threshold: int = 40,
    ) -> Blaster:
        if lifetime <= 0:
            raise ValueError(f"blaster lifetime must be > 0, got {lifetime}")
        blaster = Blaster(
            x=origin[0], y=origin[1], angle=angle,
            lifetime=lifetime, fire_threshold=fire_threshold,
        )
        self.blasters.append(blaster)
        return blaster

    def find_bone(self, tag: str) -> Bone | None:
        for b in self.bones:
            if b.tag == tag:
                return b
        return None

    def replace_bone(self, old: Bone, new: Bone) -> None:
        """Swap *old* for *new* at the same position in the list."""
        for i, b in enumerate(self.bones):
            if b is old:
                self.bones[i] = new
                return
        raise ValueError(f"bone {old!r} is not in the store")

    # -- per-tick ------------------------------------------------------------

    def advance(self) -> None:
        """Move every bone by its velocity and age every blaster one tick."""
        for bone in self.bones:
            bone.x += bone.vx
            bone.y += bone.vy
        for blaster in self.blasters:
            blaster.lifetime -= 1

    def cull(self, bounds: Rect, margin: float) -> int:
        """Drop bones entirely outside *bounds* grown by *margin*, and
        expired blasters.  Returns how many entities were removed."""
        left = bounds.x - margin
        top = bounds.y - margin
        right = bounds.right + margin
        bottom = bounds.bottom + margin

        kept_bones = [
            b for b in self.bones
            if not (
                b.x + b.w < left or b.x > right
                or b.y + b.h < top or b.y > bottom
            )
        ]
        kept_blasters = [g for g in self.blasters if not g.is_expired]
        removed = (
            len(self.bones) - len(kept_bones)
            + len(self.blasters) - len(kept_blasters)
        )
        self.bones = kept_bones
        self.blasters = kept_blasters
        return removed

    def clear(self) -> None:
        self.bones.clear()
        self.blasters.clear()

    # -- queries -------------------------------------------------------------

    @property
    def firing_blasters(self) -> list[Blaster]:
        return [g for g in self.blasters if g.is_firing]

    def __len__(self) -> int:
        return len(self.bones) + len(self.blasters)
