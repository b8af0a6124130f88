"""Software rendering of the top-down map and the first-person scene."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

from raycube.geometry import (
    FOV_ANGLE,
    TILE_SIZE,
    Cardinal,
    Point,
    distance,
    find_intersection,
    screen_x,
    texture_x,
    wall_height,
)
from raycube.mapfile import GameMap
from raycube.raycast import Ray, cast_ray
from raycube.state import Player

BLACK = 0x000000
WHITE = 0xFFFFFF
GRAY = 0x808080
RED = 0xFF0000
GREEN = 0x00FF00
PINK = 0xFFC0CB
YELLOW = 0xFFFF00


@dataclass
class Canvas:
    """A width x height buffer of packed 0xRRGGBB pixels."""

    width: int
    height: int
    pixels: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("canvas dimensions must not be negative")
        size = self.width * self.height
        if not self.pixels:
            self.pixels = [BLACK] * size
        elif len(self.pixels) != size:
            raise ValueError("pixel count does not match the canvas size")

    def _contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_pixel(self, x: float, y: float) -> int:
        """Colour at (x, y); RED for coordinates outside the canvas."""
        col, row = math.trunc(x), math.trunc(y)
        if not self._contains(col, row):
            return RED
        return self.pixels[row * self.width + col]

    def put_pixel(self, x: float, y: float, color: int) -> None:
        """Set the colour at (x, y); coordinates outside the canvas are ignored."""
        col, row = math.trunc(x), math.trunc(y)
        if self._contains(col, row):
            self.pixels[row * self.width + col] = color

    def to_rgb_bytes(self) -> bytes:
        """Pixels as packed RGB bytes, row by row."""
        return b"".join(
            bytes(((c >> 16) & 0xFF, (c >> 8) & 0xFF, c & 0xFF)) for c in self.pixels
        )


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> Iterator[Tuple[int, int]]:
    """Yield the integer points of the segment from (x0, y0) to (x1, y1)."""
    x0, y0, x1, y1 = (math.trunc(v) for v in (x0, y0, x1, y1))
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy


def draw_line(canvas: Canvas, start: Point, end: Point, color: int) -> None:
    """Draw a straight segment between two points."""
    for x, y in bresenham_line(start.x, start.y, end.x, end.y):
        canvas.put_pixel(x, y, color)


def _draw_tile(canvas: Canvas, left: int, top: int, color: int) -> None:
    """Fill one tile, keeping its last row and column black as a grid margin."""
    last = TILE_SIZE - 1
    for dy in range(TILE_SIZE):
        for dx in range(TILE_SIZE):
            shade = BLACK if dy == last or dx == last else color
            canvas.put_pixel(left + dx, top + dy, shade)


def _tile_color(grid: Sequence[str], row: int, col: int) -> int:
    line = grid[row] if row < len(grid) else ""
    if col >= len(line):
        return BLACK
    char = line[col]
    if char == "1":
        return GRAY
    if char == "0":
        return WHITE
    if char == " ":
        return BLACK
    return RED


def draw_2d_map(canvas: Canvas, game_map: GameMap) -> None:
    """Draw every tile of the map as a coloured square."""
    for row in range(game_map.height):
        for col in range(game_map.width):
            _draw_tile(
                canvas,
                col * TILE_SIZE,
                row * TILE_SIZE,
                _tile_color(game_map.grid, row, col),
            )


def draw_player(canvas: Canvas, position: Point, radius: int, color: int) -> None:
    """Draw a filled disc of ``radius`` centred on ``position``."""
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if dx * dx + dy * dy <= radius * radius:
                canvas.put_pixel(position.x + dx, position.y + dy, color)


def draw_fov_boundaries(canvas: Canvas, player: Player, game_map: GameMap) -> None:
    """Draw the left and right edges of the field of view on the map."""
    for angle in (player.fov.half_left, player.fov.half_right):
        ray = cast_ray(player.position, angle, game_map)
        end = Point(math.trunc(ray.end_point.x), math.trunc(ray.end_point.y))
        draw_line(canvas, player.position, end, RED)


def draw_floor_and_ceiling(canvas: Canvas, floor: int, ceiling: int) -> None:
    """Paint the upper half with the ceiling colour and the lower with the floor."""
    half = canvas.height // 2
    for y in range(canvas.height):
        color = ceiling if y < half else floor
        for x in range(canvas.width):
            canvas.put_pixel(x, y, color)


def orientation_color(orientation: Cardinal) -> int:
    """Flat colour used for a wall face when textures are switched off."""
    if orientation == Cardinal.N:
        return RED
    if orientation == Cardinal.S:
        return GREEN
    if orientation == Cardinal.W:
        return PINK
    return YELLOW


def texture_index(orientation: Cardinal) -> int:
    """Index of the texture (north, south, west, east) for a wall face."""
    if orientation == Cardinal.N:
        return 0
    if orientation == Cardinal.S:
        return 1
    if orientation == Cardinal.W:
        return 2
    return 3


def _draw_wall_slice(
    canvas: Canvas,
    column: float,
    height: float,
    tex_column: int,
    ray: Ray,
    textures: Optional[Sequence[Canvas]],
    show_colors: bool,
) -> None:
    y = canvas.height / 2 - height / 2
    y_min = y
    y_max = y + height
    if y < 0:
        y = 0
    texture = None if show_colors or textures is None else textures[
        texture_index(ray.orientation)
    ]
    flat = orientation_color(ray.orientation)
    while y < y_max and y < canvas.height:
        if texture is None:
            color = flat
        else:
            tex_row = math.trunc(texture.height * (y - y_min) / height)
            color = texture.get_pixel(tex_column, tex_row)
        canvas.put_pixel(column, y, color)
        y += 1


def draw_3d_scene(
    canvas: Canvas,
    player: Player,
    game_map: GameMap,
    textures: Optional[Sequence[Canvas]],
    show_colors: bool = False,
) -> None:
    """Render the first-person view: ceiling, floor, then one wall slice per ray.

    ``textures`` holds the north, south, west and east wall images; it may be
    None when ``show_colors`` asks for flat colours instead.
    """
    if not show_colors and (textures is None or len(textures) < 4):
        raise ValueError("four wall textures are needed unless show_colors is set")
    draw_floor_and_ceiling(canvas, game_map.floor_color, game_map.ceiling_color)
    if canvas.width <= 0:
        return
    left = player.fov.half_left
    right = player.fov.half_right
    step = FOV_ANGLE / canvas.width
    angle = left
    while angle < right:
        ray = cast_ray(player.position, angle, game_map)
        angle_now = angle
        angle += step
        projection = find_intersection(
            player.position,
            player.perpendicular_direction,
            ray.end_point,
            player.direction,
        )
        try:
            height = wall_height(distance(ray.end_point, projection))
        except ZeroDivisionError:
            continue
        column = screen_x(angle_now, left, canvas.width)
        tex_column = texture_x(ray.end_point, ray.last_increment)
        _draw_wall_slice(canvas, column, height, tex_column, ray, textures, show_colors)