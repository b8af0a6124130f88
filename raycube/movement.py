"""Keyboard state, rotation and collision-checked stepping of the player."""

from __future__ import annotations

import math
from enum import Enum
from typing import Dict, Tuple

from raycube.geometry import (
    TAU,
    Cardinal,
    Point,
    is_inside_map_perimeter,
    is_wall,
    tile_reference,
)
from raycube.mapfile import GameMap
from raycube.state import MoveKeys, Player

FOOT_STEP = 5
DEGREE = math.pi / 180
RADIUS = 5
CIRCUMFERENCE_CHECKS = 36

# Smallest stride tried before giving up on a move.
_MIN_STEP = 3


class Key(Enum):
    """Keys the game reacts to."""

    W = "w"
    A = "a"
    S = "s"
    D = "d"
    LEFT = "left"
    RIGHT = "right"
    ESCAPE = "escape"


_MOVE_KEYS = {Key.W: "w", Key.A: "a", Key.S: "s", Key.D: "d"}

# Unit offsets (dx, dy) for each movement key, per facing.
_OFFSETS: Dict[Cardinal, Dict[str, Tuple[int, int]]] = {
    Cardinal.N: {"w": (0, -1), "s": (0, 1), "a": (-1, 0), "d": (1, 0)},
    Cardinal.S: {"w": (0, 1), "s": (0, -1), "a": (1, 0), "d": (-1, 0)},
    Cardinal.E: {"w": (1, 0), "s": (-1, 0), "a": (0, -1), "d": (0, 1)},
    Cardinal.W: {"w": (-1, 0), "s": (1, 0), "a": (0, 1), "d": (0, -1)},
    Cardinal.NE: {"w": (1, -1), "s": (-1, 1), "a": (-1, -1), "d": (1, 1)},
    Cardinal.NW: {"w": (-1, -1), "s": (1, 1), "a": (-1, 1), "d": (1, -1)},
    Cardinal.SE: {"w": (1, 1), "s": (-1, -1), "a": (1, -1), "d": (-1, 1)},
    Cardinal.SW: {"w": (-1, 1), "s": (1, -1), "a": (1, 1), "d": (-1, -1)},
}

# Half-open ranges of the perpendicular direction and the facing they mean.
_DIRECTION_RANGES = (
    (-0.3925, 0.3925, Cardinal.S),
    (0.3925, 1.1775, Cardinal.SW),
    (1.1775, 1.9625, Cardinal.W),
    (1.9625, 2.7475, Cardinal.NW),
    (2.7475, 3.5325, Cardinal.N),
    (3.5325, 4.3175, Cardinal.NE),
    (-1.1775, -0.3925, Cardinal.SE),
)


def key_press(player: Player, key: Key) -> bool:
    """Record a pressed key; return True when the key asks to quit."""
    if key is Key.ESCAPE:
        return True
    if key in _MOVE_KEYS:
        setattr(player.move, _MOVE_KEYS[key], True)
    elif key is Key.RIGHT:
        player.rotate_right = True
    elif key is Key.LEFT:
        player.rotate_left = True
    return False


def key_release(player: Player, key: Key) -> None:
    """Record a released key."""
    if key in _MOVE_KEYS:
        setattr(player.move, _MOVE_KEYS[key], False)
    elif key is Key.RIGHT:
        player.rotate_right = False
    elif key is Key.LEFT:
        player.rotate_left = False


def step_direction(perpendicular_direction: float) -> Cardinal:
    """Facing used for stepping, derived from the perpendicular direction."""
    angle = perpendicular_direction
    for low, high, facing in _DIRECTION_RANGES:
        if low <= angle < high:
            return facing
    if 4.3175 <= angle <= 4.713 or -1.571 <= angle < -1.1775:
        return Cardinal.E
    return Cardinal.NONE


def step_offset(direction: Cardinal, keys: MoveKeys, step: float) -> Point:
    """Displacement caused by the held keys when facing ``direction``."""
    table = _OFFSETS.get(direction)
    if table is None:
        return Point(0, 0)
    dx = dy = 0
    for name in ("w", "s", "a", "d"):
        if getattr(keys, name):
            ux, uy = table[name]
            dx += ux
            dy += uy
    return Point(dx * step, dy * step)


def update_rotation(player: Player) -> bool:
    """Turn the player by one degree if a rotation key is held.

    The view angles are refreshed in any case. Returns True if it turned.
    """
    rotated = False
    if player.rotate_right:
        player.direction += DEGREE
        if player.direction > TAU:
            player.direction -= TAU
        rotated = True
    elif player.rotate_left:
        player.direction -= DEGREE
        if player.direction < 0:
            player.direction += TAU
        rotated = True
    player.update_view()
    return rotated


def is_collision(position: Point, game_map: GameMap) -> bool:
    """Tell whether the player's circle at ``position`` touches a wall or the edge."""
    for index in range(CIRCUMFERENCE_CHECKS):
        angle = TAU * index / CIRCUMFERENCE_CHECKS
        edge = Point(
            position.x + RADIUS * math.cos(angle),
            position.y + RADIUS * math.sin(angle),
        )
        if not is_inside_map_perimeter(edge, game_map.width, game_map.height):
            return True
        if is_wall(edge, game_map.grid):
            return True
    return False


def try_move(player: Player, game_map: GameMap) -> bool:
    """Step the player, shortening the stride until it fits; True if it moved."""
    if not player.move.any():
        return False
    direction = step_direction(player.perpendicular_direction)
    start = player.position
    for decrement in range(FOOT_STEP - _MIN_STEP + 1):
        offset = step_offset(direction, player.move, FOOT_STEP - decrement)
        candidate = Point(start.x + offset.x, start.y + offset.y)
        if not is_collision(candidate, game_map):
            player.position = candidate
            player.tile = tile_reference(candidate)
            return True
    return False


def update(player: Player, game_map: GameMap) -> bool:
    """Apply one frame of movement and rotation; True if the view changed."""
    moved = try_move(player, game_map)
    rotated = update_rotation(player)
    return moved or rotated