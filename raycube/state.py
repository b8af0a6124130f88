"""Mutable player state: position, facing, field of view and held keys."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from raycube.geometry import FOV_ANGLE, Cardinal, Point

_FACING = {
    Cardinal.N: 3 * math.pi / 2,
    Cardinal.E: 0.0,
    Cardinal.S: math.pi / 2,
    Cardinal.W: math.pi,
}


@dataclass
class MoveKeys:
    """Which movement keys are currently held down."""

    w: bool = False
    a: bool = False
    s: bool = False
    d: bool = False

    def any(self) -> bool:
        """True when at least one movement key is held."""
        return self.w or self.a or self.s or self.d


@dataclass
class Fov:
    """Field of view: its width and its current left and right edges."""

    angle: float = FOV_ANGLE
    half_left: float = 0.0
    half_right: float = 0.0


@dataclass
class Player:
    """The player's place in the map and the way it is looking."""

    position: Point = field(default_factory=Point)
    tile: Point = field(default_factory=Point)
    direction: float = 0.0
    perpendicular_direction: float = 0.0
    move: MoveKeys = field(default_factory=MoveKeys)
    rotate_right: bool = False
    rotate_left: bool = False
    fov: Fov = field(default_factory=Fov)

    def set_orientation(self, orientation: Cardinal) -> None:
        """Face the given compass point and refresh the derived view angles."""
        if orientation in _FACING:
            self.direction = _FACING[orientation]
        self.update_view()

    def update_view(self) -> None:
        """Recompute the perpendicular direction and the field-of-view edges."""
        self.perpendicular_direction = self.direction - math.pi / 2
        self.fov.half_left = self.direction - self.fov.angle / 2
        self.fov.half_right = self.direction + self.fov.angle / 2