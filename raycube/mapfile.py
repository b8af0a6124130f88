"""Reading and validating ``.cub`` scene descriptions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

from raycube.geometry import TILE_SIZE, Cardinal, Point

_SETTINGS_COUNT = 6
_BLANK = " \t\r\n\v\f"
_DIGITS = "0123456789"
_MAP_CHARACTERS = frozenset("01NSEW \t")
_BORDER_CHARACTERS = frozenset("1 \t")
_PLAYER_ORIENTATION = {
    "N": Cardinal.N,
    "S": Cardinal.S,
    "E": Cardinal.E,
    "W": Cardinal.W,
}
_TEXTURE_KEYS = ("NO", "SO", "WE", "EA")
_COLOR_KEYS = ("F", "C")


class MapError(ValueError):
    """Raised when a scene file is unreadable or describes an invalid map."""


@dataclass(frozen=True)
class GameMap:
    """A validated scene: wall grid, textures, colours and player start."""

    grid: Tuple[str, ...]
    width: int
    height: int
    north_texture: str
    south_texture: str
    west_texture: str
    east_texture: str
    floor: str
    ceiling: str
    player_position: Point
    player_orientation: Cardinal

    @property
    def texture_paths(self) -> Tuple[str, str, str, str]:
        """Texture paths in north, south, west, east order."""
        return (
            self.north_texture,
            self.south_texture,
            self.west_texture,
            self.east_texture,
        )

    @property
    def floor_color(self) -> int:
        """Floor colour as a packed 0xRRGGBB integer."""
        return color_to_int(self.floor)

    @property
    def ceiling_color(self) -> int:
        """Ceiling colour as a packed 0xRRGGBB integer."""
        return color_to_int(self.ceiling)


def _is_blank(line: str) -> bool:
    return line.strip(_BLANK) == ""


def load_map(path: str | os.PathLike) -> GameMap:
    """Read and validate the scene file at ``path``."""
    file_path = Path(path)
    suffix = file_path.suffix
    if suffix and suffix[1:] != "cub":
        raise MapError("invalid map: the file must have a .cub extension")
    if not file_path.exists():
        raise MapError(f"invalid path: {file_path}")
    try:
        text = file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise MapError(f"cannot read {file_path}: {exc}") from exc
    return parse_map(text)


def split_sections(text: str) -> Tuple[List[str], List[str]]:
    """Split a scene into its first six non-blank lines and the map lines.

    Blank lines are skipped, except that a blank line between two map lines
    makes the scene invalid.
    """
    lines = iter(text.split("\n"))
    settings: List[str] = []
    for line in lines:
        if len(settings) == _SETTINGS_COUNT:
            # Put the line back in front of the rest.
            lines = _prepend(line, lines)
            break
        if not _is_blank(line):
            settings.append(line)

    map_lines: List[str] = []
    gap_seen = False
    for line in lines:
        if _is_blank(line):
            if map_lines:
                gap_seen = True
            continue
        if gap_seen:
            raise MapError("invalid map: blank line inside the map")
        map_lines.append(line)
    return settings, map_lines


def _prepend(first, rest):
    yield first
    yield from rest


def normalize_spaces(line: str) -> str:
    """Drop leading and trailing spaces and collapse runs of spaces to one."""
    return " ".join(part for part in line.split(" ") if part)


def parse_color(text: str) -> Tuple[int, int, int]:
    """Parse an ``R,G,B`` colour whose components are decimal numbers 0-255."""
    parts = [part for part in text.split(",") if part]
    if len(parts) != 3 or not all(
        all(ch in _DIGITS for ch in part) for part in parts
    ):
        raise MapError(f"invalid color format: {text!r}")
    red, green, blue = (int(part) for part in parts)
    if any(value > 255 for value in (red, green, blue)):
        raise MapError(f"invalid color format: {text!r}")
    return red, green, blue


def color_to_int(text: str) -> int:
    """Pack an ``R,G,B`` colour into a 0xRRGGBB integer."""
    red, green, blue = parse_color(text)
    return red << 16 | green << 8 | blue


def _read_settings(lines: Sequence[str]) -> Tuple[dict, dict]:
    textures: dict = {}
    colors: dict = {}
    for raw in lines:
        line = normalize_spaces(raw)
        key = next((k for k in _TEXTURE_KEYS if line.startswith(k + " ")), None)
        if key is not None:
            path = line[len(key) + 1:]
            textures[key] = path
            if not os.path.exists(path):
                raise MapError(f"invalid texture path: {path!r}")
            continue
        key = next((k for k in _COLOR_KEYS if line.startswith(k + " ")), None)
        if key is not None:
            color = line[len(key) + 1:]
            parse_color(color)
            colors[key] = color
            continue
        raise MapError(f"invalid map: unexpected line {line!r}")
    if any(k not in textures for k in _TEXTURE_KEYS) or any(
        k not in colors for k in _COLOR_KEYS
    ):
        raise MapError("missing information: textures or colours are incomplete")
    return textures, colors


def find_player(grid: Sequence[str]) -> Tuple[Point, Cardinal]:
    """Locate the single player start and check every map character."""
    found = None
    for row_index, row in enumerate(grid):
        for col_index, char in enumerate(row):
            if char not in _MAP_CHARACTERS:
                raise MapError(f"invalid character {char!r} in map")
            if char in _PLAYER_ORIENTATION:
                if found is not None:
                    raise MapError("invalid character: more than one player")
                position = Point(
                    col_index * TILE_SIZE + TILE_SIZE // 2,
                    row_index * TILE_SIZE + TILE_SIZE // 2,
                )
                found = (position, _PLAYER_ORIENTATION[char])
    if found is None:
        raise MapError("invalid character: no player in map")
    return found


def _cell(grid: Sequence[str], row: int, col: int) -> str:
    if 0 <= row < len(grid) and 0 <= col < len(grid[row]):
        return grid[row][col]
    return ""


def _check_spaces(grid: Sequence[str], i: int) -> None:
    row = grid[i]
    for j in range(1, len(row) - 1):
        if row[j] != " ":
            continue
        neighbours = (
            _cell(grid, i - 1, j),
            _cell(grid, i + 1, j),
            row[j - 1],
            row[j + 1],
        )
        if "0" in neighbours:
            raise MapError("map is not closed: space inside row adjacent to '0'")


def _check_overhang(longer: str, start: int, where: str) -> None:
    if any(ch != "1" for ch in longer[start:]):
        raise MapError(f"map is not closed: gap in shorter row ({where} row)")


def check_map_closed(grid: Sequence[str]) -> Tuple[int, int]:
    """Check that walls enclose the map; return its width and height."""
    height = len(grid)
    if height == 0:
        raise MapError("map is empty")
    if any(ch not in _BORDER_CHARACTERS for ch in grid[0]):
        raise MapError("map is not closed: first row")
    if any(ch not in _BORDER_CHARACTERS for ch in grid[-1]):
        raise MapError("map is not closed: last row")

    width = 0
    for i, row in enumerate(grid):
        width = max(width, len(row))
        if row[0] not in _BORDER_CHARACTERS:
            raise MapError("map is not closed: first column")
        if row[-1] not in _BORDER_CHARACTERS:
            raise MapError("map is not closed: last column")
        _check_spaces(grid, i)

    for i in range(1, height):
        row_length = len(grid[i])
        _check_overhang(grid[i - 1], row_length, "previous")
        if i >= height - 1:
            break
        if row_length < len(grid[i + 1]):
            _check_overhang(grid[i + 1], row_length, "next")
    return width, height


def pad_grid(grid: Sequence[str], width: int, height: int) -> List[str]:
    """Return a ``height`` x ``width`` copy of ``grid`` filled out with spaces."""
    rows = [row[:width].ljust(width) for row in grid[:height]]
    rows.extend(" " * width for _ in range(height - len(rows)))
    return rows


def parse_map(text: str) -> GameMap:
    """Validate the text of a scene and build its :class:`GameMap`."""
    settings, map_lines = split_sections(text)
    textures, colors = _read_settings(settings)
    grid = tuple(map_lines)
    position, orientation = find_player(grid)
    width, height = check_map_closed(grid)
    return GameMap(
        grid=grid,
        width=width,
        height=height,
        north_texture=textures["NO"],
        south_texture=textures["SO"],
        west_texture=textures["WE"],
        east_texture=textures["EA"],
        floor=colors["F"],
        ceiling=colors["C"],
        player_position=position,
        player_orientation=orientation,
    )