"""Casting a single ray through the wall grid until it meets a wall."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from raycube.geometry import (
    TILE_SIZE,
    Cardinal,
    Increment,
    Point,
    advance,
    calc_delta,
    calculate_path,
    cardinal_direction,
    is_inside_map_perimeter,
    is_wall,
    side_point,
)
from raycube.mapfile import GameMap

# Offset used to look at the tile just behind an end point when deciding
# whether it sits on a wall corner.
_CORNER_SHIFT = 35
# Distances from a tile edge at which an end point counts as lying on it.
_EDGE_REMAINDERS = (0, TILE_SIZE - 1)

# For each diagonal, the pixel offsets (dx, dy) of the two neighbours that,
# when both are walls, close the gap a ray would otherwise slip through.
_SQUEEZE_OFFSETS = {
    Cardinal.NE: (-1, 1),
    Cardinal.NW: (1, 1),
    Cardinal.SE: (-1, -1),
    Cardinal.SW: (1, -1),
}


@dataclass(frozen=True)
class Ray:
    """Result of casting a ray: where it stopped and which wall face it saw."""

    direction: Cardinal = Cardinal.NONE
    first_point: Point = field(default_factory=Point)
    path: Point = field(default_factory=Point)
    end_point: Point = field(default_factory=Point)
    last_increment: Increment = Increment.NONE
    orientation: Cardinal = Cardinal.NONE


def _tile_index(coordinate: float) -> int:
    """Tile index of a pixel coordinate, truncating toward zero at each step."""
    return int(math.trunc(coordinate) / TILE_SIZE)


def _cell(grid: Sequence[str], row: int, col: int) -> str:
    if 0 <= row < len(grid) and 0 <= col < len(grid[row]):
        return grid[row][col]
    return ""


def _is_wall_cell(grid: Sequence[str], col: int, row: int) -> bool:
    return _cell(grid, row, col) == "1"


def _is_open_corner(grid: Sequence[str], col: int, row: int) -> bool:
    return _cell(grid, row, col + 1) == "0" and _cell(grid, row + 1, col) == "0"


def _on_tile_edge(coordinate: float) -> bool:
    start = int(coordinate / TILE_SIZE) * TILE_SIZE
    return abs(start - coordinate) in _EDGE_REMAINDERS


def _corner_tile(end_point: Point) -> tuple:
    return (
        _tile_index(end_point.x - _CORNER_SHIFT),
        _tile_index(end_point.y - _CORNER_SHIFT),
    )


def _step_along_x(first_point: Point, path: Point, alpha: float, grid: Sequence[str]):
    end_point = advance(first_point, path.x, alpha)
    increment = Increment.X
    if is_wall(end_point, grid):
        x, y = _corner_tile(end_point)
        if (
            _is_wall_cell(grid, x, y)
            and not _is_wall_cell(grid, x, y + 1)
            and not _is_open_corner(grid, x, y)
            and not _is_wall_cell(grid, x + 1, y + 1)
            and _on_tile_edge(end_point.x)
        ):
            increment = Increment.Y
            end_point = advance(first_point, path.y, alpha)
    return end_point, increment


def _step_along_y(first_point: Point, path: Point, alpha: float, grid: Sequence[str]):
    end_point = advance(first_point, path.y, alpha)
    increment = Increment.Y
    if is_wall(end_point, grid):
        x, y = _corner_tile(end_point)
        if (
            _is_wall_cell(grid, x, y)
            and not _is_wall_cell(grid, x + 1, y)
            and not _is_open_corner(grid, x, y)
            and not _is_wall_cell(grid, x + 1, y + 1)
            and _on_tile_edge(end_point.y)
        ):
            increment = Increment.X
            end_point = advance(first_point, path.x, alpha)
    return end_point, increment


def _next_end_point(first_point: Point, path: Point, alpha: float, grid: Sequence[str]):
    if abs(path.x) < abs(path.y):
        return _step_along_x(first_point, path, alpha, grid)
    return _step_along_y(first_point, path, alpha, grid)


def passes_between_walls(direction: Cardinal, grid: Sequence[str], point: Point) -> bool:
    """Tell whether a diagonal ray at ``point`` squeezes between two touching walls."""
    offsets = _SQUEEZE_OFFSETS.get(direction)
    if offsets is None or not grid:
        return False
    dx, dy = offsets
    rows = len(grid)
    cols = len(grid[0])
    px = math.trunc(point.x)
    py = math.trunc(point.y)
    row = int(py / TILE_SIZE)
    col = int(px / TILE_SIZE)
    side_row = int((py + dy) / TILE_SIZE)
    side_col = int((px + dx) / TILE_SIZE)
    if row >= rows or side_col >= cols or side_row >= rows or col >= cols:
        return False
    return _cell(grid, row, side_col) == "1" and _cell(grid, side_row, col) == "1"


def orientation_for(direction: Cardinal, last_increment: Increment) -> Cardinal:
    """Which face of a wall a ray heading ``direction`` sees after its last step."""
    if last_increment == Increment.X:
        if direction in (Cardinal.NW, Cardinal.SW, Cardinal.W):
            return Cardinal.E
        return Cardinal.W
    if direction in (Cardinal.NW, Cardinal.NE, Cardinal.N):
        return Cardinal.S
    return Cardinal.N


def cast_ray(start: Point, alpha: float, game_map: GameMap) -> Ray:
    """Walk a ray from ``start`` at angle ``alpha`` tile by tile until it hits a wall.

    A ray that starts outside the playable area never moves and reports an
    end point at the origin.
    """
    grid = game_map.grid
    direction = cardinal_direction(alpha)
    first_point = start
    path = Point()
    end_point = Point()
    last_increment = Increment.NONE
    while is_inside_map_perimeter(first_point, game_map.width, game_map.height):
        corner = side_point(first_point, direction)
        delta = calc_delta(first_point, corner, direction)
        path = calculate_path(delta, alpha)
        end_point, last_increment = _next_end_point(first_point, path, alpha, grid)
        if passes_between_walls(direction, grid, end_point) or is_wall(end_point, grid):
            break
        first_point = end_point
    return Ray(
        direction=direction,
        first_point=first_point,
        path=path,
        end_point=end_point,
        last_increment=last_increment,
        orientation=orientation_for(direction, last_increment),
    )