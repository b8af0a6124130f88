# raycube

raycube is a small first-person maze viewer. It reads a `.cub` scene file,
checks that the map in it is valid and enclosed by walls, and renders the
scene with a grid-based ray caster: textured walls, a flat floor colour and
a flat ceiling colour. The window is drawn with pygame; wall textures are
loaded with Pillow.

## Installing

```
pip install .
```

## Running

```
raycube path/to/level.cub
```

The command takes exactly one argument, the path to a scene file. If the
argument is missing, or the scene or one of its textures cannot be loaded,
a message starting with `Error` is printed and the command exits with
status 1.

The window is one 64-pixel tile per map cell, capped at 1000 pixels on each
side, and the game runs at up to 60 frames per second.

### Controls

| Key            | Action                               |
|----------------|--------------------------------------|
| `W` / `S`      | move forward / backward              |
| `A` / `D`      | step sideways                        |
| `←` / `→`      | turn left / right, one degree a frame |
| `Esc`          | quit                                 |

Closing the window also quits. A move that would bring the player's circle
into a wall or onto the outer ring of tiles is retried with a shorter
stride, and dropped if even that does not fit.

## The `.cub` format

A scene file must have the extension `.cub` (a file without any extension
is also accepted). Its first six non-blank lines are the elements, in any
order; extra spaces inside them are ignored:

```
NO ./textures/north.png
SO ./textures/south.png
WE ./textures/west.png
EA ./textures/east.png
F 220,100,0
C 225,30,0
```

- `NO`, `SO`, `WE`, `EA` name the wall texture for each side. Each path
  must exist; any image Pillow can open will do.
- `F` and `C` give the floor and ceiling colours as three decimal numbers
  from 0 to 255, separated by commas.

Each element must appear; any other line among the first six is an error.

After the elements comes the map, built from these characters:

- `1` a wall
- `0` an empty floor tile
- `N`, `S`, `E`, `W` the player's start and the direction it faces
  (exactly one of them)
- spaces and tabs, for cells outside the map

The map is valid only when:

- the first and last rows, and the first and last character of every row,
  hold only walls, spaces or tabs;
- no space inside a row touches a `0` above, below, left or right;
- where a row is shorter than its neighbour, the neighbour's overhanging
  part is all walls;
- there is no blank line between map lines.

```
111111
100101
101001
1100N1
111111
```

## Using it as a library

Each part can be used on its own:

- `raycube.mapfile`: `load_map(path)` and `parse_map(text)` return a frozen
  `GameMap` (grid, width, height, texture paths, `floor_color` and
  `ceiling_color` as `0xRRGGBB`, player start and orientation) and raise
  `MapError` for invalid input. `parse_color`, `color_to_int`,
  `find_player`, `check_map_closed`, `split_sections`, `normalize_spaces`
  and `pad_grid` are the steps behind them.
- `raycube.geometry`: `Point`, the `Cardinal` and `Increment` enums, and
  the grid arithmetic of the ray caster (`cardinal_direction`,
  `side_point`, `calculate_path`, `is_wall`, `wall_height`, …).
- `raycube.state`: the `Player` dataclass with its held keys (`MoveKeys`)
  and field of view (`Fov`).
- `raycube.raycast`: `cast_ray(start, alpha, game_map)` returns a `Ray`
  with its end point on a wall and the wall face it saw (`orientation`).
- `raycube.movement`: `key_press`, `key_release` and `update` drive a
  `Player` over a `GameMap`; `is_collision` checks a position.
- `raycube.render`: a `Canvas` of packed `0xRRGGBB` pixels, and functions
  drawing the top-down map (`draw_2d_map`, `draw_player`,
  `draw_fov_boundaries`) and the first-person view (`draw_3d_scene`).
- `raycube.app`: `Game`, `load_texture`, `window_size` and the `main`
  entry point.

```python
from raycube.mapfile import load_map
from raycube.raycast import cast_ray
from raycube.app import Game

game_map = load_map("level.cub")
ray = cast_ray(game_map.player_position, 0.0, game_map)
print(ray.end_point, ray.orientation)

# Render one frame off-screen with flat wall colours instead of textures.
game = Game(game_map, show_colors=True)
frame = game.render()
print(frame.width, frame.height, hex(frame.get_pixel(0, 0)))
```

`Game` also takes `show_2d=True` to draw a top-down overview next to the
first-person view; the `raycube` command does not expose that option.

## What it does not do

The command only renders and walks through a static scene: there are no
sprites, doors, enemies, sound, mouse look or settings beyond the one
scene file, and textures are sampled without any lighting or shading.

## Running the tests

```
pip install .[test]
pytest
```