"""The playable game: window setup, input handling and the main loop."""

from __future__ import annotations

import os
import sys
from typing import Dict, List, Optional, Sequence, Tuple

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402
from PIL import Image  # noqa: E402

from raycube.geometry import TILE_SIZE, tile_reference  # noqa: E402
from raycube.mapfile import GameMap, MapError, load_map  # noqa: E402
from raycube.movement import RADIUS, Key, key_press, key_release, update  # noqa: E402
from raycube.render import (  # noqa: E402
    BLACK,
    Canvas,
    draw_2d_map,
    draw_3d_scene,
    draw_fov_boundaries,
    draw_player,
)
from raycube.state import Player  # noqa: E402

MAX_WINDOW_SIDE = 1000
FRAMES_PER_SECOND = 60

_KEYMAP: Dict[int, Key] = {
    pygame.K_w: Key.W,
    pygame.K_a: Key.A,
    pygame.K_s: Key.S,
    pygame.K_d: Key.D,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_ESCAPE: Key.ESCAPE,
}


def window_size(map_width: int, map_height: int) -> Tuple[int, int]:
    """Window size for a map, one tile per cell, capped at 1000 pixels a side."""
    return (
        min(TILE_SIZE * map_width, MAX_WINDOW_SIDE),
        min(TILE_SIZE * map_height, MAX_WINDOW_SIDE),
    )


def load_texture(path: str | os.PathLike) -> Canvas:
    """Load an image file into a canvas of packed 0xRRGGBB pixels."""
    try:
        with Image.open(path) as image:
            rgb = image.convert("RGB")
            width, height = rgb.size
            pixels: List[int] = [r << 16 | g << 8 | b for r, g, b in rgb.getdata()]
    except (OSError, ValueError) as exc:
        raise MapError(f"cannot load texture {os.fspath(path)!r}: {exc}") from exc
    return Canvas(width, height, pixels)


def translate_key(pygame_key: int) -> Optional[Key]:
    """The game key bound to a pygame key code, or None if it is unbound."""
    return _KEYMAP.get(pygame_key)


class Game:
    """A running scene: the map, the player and the frames drawn from them."""

    def __init__(
        self,
        game_map: GameMap,
        textures: Optional[Sequence[Canvas]] = None,
        show_2d: bool = False,
        show_colors: bool = False,
    ) -> None:
        if not show_colors and (textures is None or len(textures) < 4):
            raise ValueError("four wall textures are needed unless show_colors is set")
        self.game_map = game_map
        self.textures = list(textures) if textures is not None else None
        self.show_2d = show_2d
        self.show_colors = show_colors
        self.window = window_size(game_map.width, game_map.height)
        self.player = Player(
            position=game_map.player_position,
            tile=tile_reference(game_map.player_position),
        )
        self.player.set_orientation(game_map.player_orientation)
        self.running = True
        self.frame: Optional[Canvas] = None
        self.overview: Optional[Canvas] = None

    def handle_key_down(self, key: Key) -> bool:
        """Record a pressed key; return True if it asked the game to quit."""
        if key_press(self.player, key):
            self.running = False
            return True
        return False

    def handle_key_up(self, key: Key) -> None:
        """Record a released key."""
        key_release(self.player, key)

    def tick(self) -> bool:
        """Advance one frame; redraw and return True if the view changed."""
        changed = update(self.player, self.game_map)
        if changed:
            self.render()
        return changed

    def render(self) -> Canvas:
        """Draw the first-person view (and the map overview if enabled)."""
        width, height = self.window
        scene = Canvas(width, height)
        draw_3d_scene(scene, self.player, self.game_map, self.textures, self.show_colors)
        self.frame = scene
        if self.show_2d:
            overview = Canvas(
                self.game_map.width * TILE_SIZE, self.game_map.height * TILE_SIZE
            )
            draw_2d_map(overview, self.game_map)
            draw_player(overview, self.player.position, RADIUS, BLACK)
            draw_fov_boundaries(overview, self.player, self.game_map)
            self.overview = overview
        return scene

    def _present(self, screen) -> None:
        width, height = self.window
        if self.frame is not None:
            surface = pygame.image.frombuffer(
                self.frame.to_rgb_bytes(), (self.frame.width, self.frame.height), "RGB"
            )
            screen.blit(surface, (0, 0))
        if self.show_2d and self.overview is not None:
            surface = pygame.image.frombuffer(
                self.overview.to_rgb_bytes(),
                (self.overview.width, self.overview.height),
                "RGB",
            )
            screen.blit(surface, (width, 0), pygame.Rect(0, 0, width, height))
        pygame.display.flip()

    def run(self) -> None:
        """Open the window and play until the player quits."""
        pygame.init()
        try:
            width, height = self.window
            total_width = width * 2 if self.show_2d else width
            screen = pygame.display.set_mode((total_width, height), pygame.RESIZABLE)
            pygame.display.set_caption("raycube")
            clock = pygame.time.Clock()
            self.render()
            while self.running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.KEYDOWN:
                        key = translate_key(event.key)
                        if key is not None:
                            self.handle_key_down(key)
                    elif event.type == pygame.KEYUP:
                        key = translate_key(event.key)
                        if key is not None:
                            self.handle_key_up(key)
                    elif event.type == pygame.VIDEORESIZE:
                        self.render()
                if not self.running:
                    break
                self.tick()
                self._present(screen)
                clock.tick(FRAMES_PER_SECOND)
        finally:
            pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load the scene named on the command line and play it."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("Error\nInvalid parameters: usage: raycube <map.cub>")
        return 1
    try:
        game_map = load_map(args[0])
        textures = [load_texture(path) for path in game_map.texture_paths]
    except MapError as exc:
        print(f"Error\n{exc}")
        return 1
    Game(game_map, textures).run()
    return 0