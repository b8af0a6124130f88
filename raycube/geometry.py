"""Points, compass directions and the grid arithmetic used by the ray caster."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence

TILE_SIZE = 64
FOV_ANGLE = math.pi / 3
EPSILON = 1e-6
PI_FIX = 1e-4
SCALE_FACTOR = TILE_SIZE * 600
TAU = 2 * math.pi


@dataclass(frozen=True)
class Point:
    """A point in map pixel coordinates (y grows downwards)."""

    x: float = 0.0
    y: float = 0.0


class Cardinal(IntEnum):
    """Compass direction of a ray or of a facing; NONE when undetermined."""

    NONE = 0
    N = 1
    S = 2
    E = 3
    W = 4
    NE = 5
    NW = 6
    SE = 7
    SW = 8


class Increment(IntEnum):
    """Which grid axis a ray crossed on its last step."""

    NONE = 0
    X = 1
    Y = 2


def _div(numerator: float, denominator: float) -> float:
    """Divide like IEEE floats do, giving infinity instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _grid_index(coordinate: float) -> Optional[int]:
    """Cell index of a pixel coordinate, truncating toward zero."""
    pixel = math.trunc(coordinate)
    index = int(pixel / TILE_SIZE)
    return index if index >= 0 else None


def tile_reference(point: Point) -> Point:
    """Return the column and row of the tile holding ``point``."""
    return Point(math.trunc(point.x / TILE_SIZE), math.trunc(point.y / TILE_SIZE))


def normalize_angle(angle: float) -> float:
    """Bring ``angle`` into the range [0, 2*pi)."""
    result = angle % TAU
    if result >= TAU:
        result -= TAU
    return result


def cardinal_direction(angle: float) -> Cardinal:
    """Classify an angle into one of the eight compass directions."""
    angle = normalize_angle(angle)
    if abs(angle) < EPSILON or abs(angle - TAU) < EPSILON:
        return Cardinal.E
    if abs(angle - math.pi) < EPSILON:
        return Cardinal.W
    if abs(angle - math.pi / 2) < EPSILON:
        return Cardinal.S
    if abs(angle - 3 * math.pi / 2) < EPSILON:
        return Cardinal.N
    if 0 < angle < math.pi / 2:
        return Cardinal.SE
    if math.pi / 2 < angle < math.pi:
        return Cardinal.SW
    if math.pi < angle < 3 * math.pi / 2:
        return Cardinal.NW
    if 3 * math.pi / 2 < angle < TAU:
        return Cardinal.NE
    return Cardinal.NONE


def side_point(first_point: Point, direction: Cardinal) -> Point:
    """Return the corner of the current tile a ray heading ``direction`` aims at."""
    tile = tile_reference(first_point)
    left = int(tile.x) * TILE_SIZE
    right = (int(tile.x) + 1) * TILE_SIZE
    top = int(tile.y) * TILE_SIZE
    bottom = (int(tile.y) + 1) * TILE_SIZE
    if direction in (Cardinal.NE, Cardinal.E, Cardinal.NONE):
        return Point(right, top)
    if direction in (Cardinal.NW, Cardinal.W, Cardinal.N):
        return Point(left, top)
    if direction == Cardinal.SE:
        return Point(right, bottom)
    if direction in (Cardinal.SW, Cardinal.S):
        return Point(left, bottom)
    return Point(0, 0)


def calc_delta(first_point: Point, second_point: Point, direction: Cardinal) -> Point:
    """Horizontal and vertical distances from a point to its side point."""
    if direction in (Cardinal.E, Cardinal.NONE, Cardinal.NE, Cardinal.SE):
        dx = abs(second_point.x - first_point.x)
    else:
        dx = abs(second_point.x - first_point.x - 1)
    if direction in (Cardinal.N, Cardinal.NE, Cardinal.NW):
        dy = abs(first_point.y - second_point.y + 1)
    else:
        dy = abs(first_point.y - second_point.y)
    return Point(dx, dy)


def calculate_path(delta: Point, alpha: float) -> Point:
    """Ray lengths needed to cover ``delta.x`` (as x) and ``delta.y`` (as y)."""
    if abs(alpha - math.pi / 2) < EPSILON or abs(alpha - 3 * math.pi / 2) < EPSILON:
        path_x = abs(_div(delta.y, math.sin(alpha)))
    else:
        path_x = abs(_div(delta.x, math.cos(alpha)))
    if (
        abs(alpha - math.pi) < EPSILON
        or abs(alpha - TAU) < EPSILON
        or abs(alpha) < EPSILON
    ):
        path_y = abs(_div(delta.x, math.cos(alpha)))
    else:
        path_y = abs(_div(delta.y, math.sin(alpha)))
    return Point(path_x, path_y)


def advance(point: Point, path: float, alpha: float) -> Point:
    """Move ``point`` by ``|path|`` along the angle ``alpha``."""
    length = abs(path)
    return Point(point.x + length * math.cos(alpha), point.y + length * math.sin(alpha))


def distance(first: Point, second: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(first.x - second.x, first.y - second.y)


def find_intersection(p1: Point, p1_angle: float, p2: Point, p2_angle: float) -> Point:
    """Intersect the line through ``p1`` at ``p1_angle`` with the one through ``p2``.

    Vertical lines are nudged slightly so that their slope stays finite.
    Raises ValueError when the lines are parallel.
    """
    if abs(math.cos(p1_angle)) <= PI_FIX:
        p1_angle += PI_FIX
    if abs(math.cos(p2_angle)) <= PI_FIX:
        p2_angle += PI_FIX
    m1 = math.tan(p1_angle)
    m2 = math.tan(p2_angle)
    if m1 == m2:
        raise ValueError("lines are parallel")
    c1 = p1.y - m1 * p1.x
    c2 = p2.y - m2 * p2.x
    x = (c2 - c1) / (m1 - m2)
    return Point(x, m1 * x + c1)


def is_wall(point: Point, grid: Sequence[str]) -> bool:
    """Tell whether ``point`` lies inside a wall tile of ``grid``."""
    if not grid:
        return False
    width = len(grid[0])
    height = len(grid)
    if point.x / TILE_SIZE >= width or point.y / TILE_SIZE >= height:
        return False
    row = _grid_index(point.y)
    col = _grid_index(point.x)
    if row is None or col is None or row >= height or col >= len(grid[row]):
        return False
    return grid[row][col] == "1"


def is_inside_map_perimeter(point: Point, width: int, height: int) -> bool:
    """Tell whether ``point`` lies inside the map, excluding its outer ring of tiles."""
    return (
        TILE_SIZE <= point.x < width * TILE_SIZE - TILE_SIZE
        and TILE_SIZE <= point.y < height * TILE_SIZE - TILE_SIZE
    )


def screen_x(ray_angle: float, fov_left: float, win_width: float) -> float:
    """Horizontal screen position of a ray within the field of view."""
    return (ray_angle - fov_left) / FOV_ANGLE * win_width


def wall_height(projection_length: float) -> float:
    """On-screen height of a wall slice seen at ``projection_length``."""
    height = SCALE_FACTOR / projection_length
    return height * (1 - height * 0.0001)


def texture_x(impact_point: Point, last_increment: Increment) -> int:
    """Column inside a texture matching where a ray hit its wall tile."""
    tile = tile_reference(impact_point)
    if last_increment == Increment.Y:
        return math.trunc(impact_point.x - tile.x * TILE_SIZE)
    return math.trunc(impact_point.y - tile.y * TILE_SIZE)