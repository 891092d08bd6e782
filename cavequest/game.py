"""Main loop: window, input handling, camera tracking and frame drawing."""

from __future__ import annotations

import argparse
import logging
from typing import Optional

import pygame

from cavequest.gameobject import GameObject
from cavequest.world import RenderedFrame, World

logger = logging.getLogger(__name__)

WINDOW_TITLE = "My Game"
WINDOW_SIZE = 800
BACKGROUND_COLOUR = (60, 34, 15)
PLAYER_START = (600, 250)

DEFAULT_MAP = "resources/map.tmx"
DEFAULT_PLAYER_IMAGE = "resources/Heroes/Man/Naked/Idle.png"
DEFAULT_TILESET = "resources/Cave Tiles/Cave Tiles.png"

_MOUSE_BUTTON_NAMES = {1: "left", 2: "middle", 3: "right"}


class Game:
    """Owns the window, the world and the player, and runs the frame loop."""

    def __init__(self, map_path, player_image_path, tileset_path):
        self.map_path = map_path
        self.player_image_path = player_image_path
        self.tileset_path = tileset_path
        self.world: Optional[World] = None
        self.player: Optional[GameObject] = None
        self.surface: Optional[pygame.Surface] = None
        self.camera_x = 0.0
        self.camera_y = 0.0
        self.screen_width = WINDOW_SIZE
        self.screen_height = WINDOW_SIZE
        self.running = False
        self._video_started = False

    def init(self) -> bool:
        """Open the window and load the map and the player.

        Returns False when the window cannot be created.
        """
        self.running = True
        pygame.init()
        self._video_started = True
        try:
            self.surface = pygame.display.set_mode(
                (WINDOW_SIZE, WINDOW_SIZE), pygame.RESIZABLE
            )
        except pygame.error as exc:
            logger.error("Window creation failed: %s", exc)
            return False
        pygame.display.set_caption(WINDOW_TITLE)
        self.screen_width = WINDOW_SIZE
        self.screen_height = WINDOW_SIZE

        self.world = World(self.tileset_path)
        self.world.load_from_tmx(self.map_path)
        self.player = GameObject(*PLAYER_START, self.player_image_path)
        return True

    def _parts(self) -> tuple[World, GameObject]:
        if self.world is None or self.player is None:
            raise RuntimeError("game is not initialised")
        return self.world, self.player

    def render(self) -> RenderedFrame:
        """Draw one frame; returns what the world drew."""
        world, player = self._parts()
        surface = pygame.display.get_surface() or self.surface
        if surface is None:
            raise RuntimeError("no display surface to draw on")
        self.surface = surface
        surface.fill(BACKGROUND_COLOUR)
        frame = world.render(
            surface,
            int(self.camera_x),
            int(self.camera_y),
            self.screen_width,
            self.screen_height,
        )
        player.render(surface, self.camera_x, self.camera_y)
        pygame.display.flip()
        return frame

    def handle_events(self) -> None:
        """Take at most one pending event from the queue and act on it."""
        event = pygame.event.poll()
        if event.type != pygame.NOEVENT:
            self.handle_event(event)

    def handle_event(self, event) -> None:
        """React to a single input or window event."""
        world, player = self._parts()

        if event.type == pygame.QUIT:
            self.running = False

        elif event.type == pygame.WINDOWRESIZED:
            self.screen_width, self.screen_height = int(event.x), int(event.y)
            logger.info("Window resized to: %dx%d", self.screen_width, self.screen_height)

        elif event.type == pygame.MOUSEBUTTONDOWN:
            name = _MOUSE_BUTTON_NAMES.get(event.button)
            if name is not None:
                logger.info("%s mouse pressed", name)

        elif event.type == pygame.KEYDOWN:
            key = event.key
            if key == pygame.K_w:
                player.jump(world)
            if key == pygame.K_s:
                player.set_velocity(player.dx, player.speed)
            if key == pygame.K_a:
                player.set_velocity(-player.speed, player.dy)
            if key == pygame.K_d:
                player.set_velocity(player.speed, player.dy)

        elif event.type == pygame.KEYUP:
            key = event.key
            if key == pygame.K_a and player.dx < 0:
                player.set_velocity(0, player.dy)
            if key == pygame.K_d and player.dx > 0:
                player.set_velocity(0, player.dy)
            if key == pygame.K_w and player.dy < 0:
                player.set_velocity(player.dx, 0)
            if key == pygame.K_s and player.dy > 0:
                player.set_velocity(player.dx, 0)

    def run(self) -> None:
        """Loop over events, updates and drawing until the game stops."""
        last_time = pygame.time.get_ticks()
        try:
            while self.running:
                current_time = pygame.time.get_ticks()
                delta_time = (current_time - last_time) / 1000.0
                last_time = current_time
                self.handle_events()
                self.update(delta_time)
                self.render()
        finally:
            self.cleanup()

    def cleanup(self) -> None:
        """Release the player, the world and the window; safe to call twice."""
        self.player = None
        self.world = None
        self.surface = None
        if self._video_started:
            pygame.quit()
            self._video_started = False

    def update(self, delta_time) -> None:
        """Resolve collisions, move the player and centre the camera on it."""
        world, player = self._parts()
        world.check_wall_collisions(player, self.camera_x, self.camera_y)
        player.update(delta_time)
        self.camera_x = float(
            int(player.x) + int(player.width) // 2 - self.screen_width // 2
        )
        self.camera_y = float(
            int(player.y) + int(player.height) // 2 - self.screen_height // 2
        )


def main(argv=None) -> int:
    """Start the game and run it until the window is closed."""
    parser = argparse.ArgumentParser(prog="cavequest", description="Run the cave game.")
    parser.add_argument("--map", default=DEFAULT_MAP, help="TMX map file")
    parser.add_argument("--player-image", default=DEFAULT_PLAYER_IMAGE, help="player sprite sheet")
    parser.add_argument("--tileset", default=DEFAULT_TILESET, help="tileset image")
    args = parser.parse_args(argv)

    logger.info("Main function started")
    game = Game(args.map, args.player_image, args.tileset)
    if game.init():
        game.run()
    else:
        game.cleanup()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())