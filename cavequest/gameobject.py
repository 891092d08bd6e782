"""The player-controlled sprite: position, velocity, gravity and drawing."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import pygame

logger = logging.getLogger(__name__)

FRAMES_PER_SHEET = 4


class GroundProbe(Protocol):
    """Anything that can tell whether the player stands on the ground."""

    def is_on_ground(self) -> bool: ...


class GameObject:
    """A sprite-sheet object moved by velocity and pulled down by gravity.

    Velocity components are whole numbers, as are the sprite's width and
    height; the position is kept as a float so small steps accumulate.
    """

    GRAVITY = 400.0
    JUMP_POWER = 300.0
    DEFAULT_SPEED = 99

    def __init__(self, x, y, image_path):
        self.x = float(int(x))
        self.y = float(int(y))
        self.width = 0
        self.height = 0
        self._dx = 0
        self._dy = 0
        self.speed = self.DEFAULT_SPEED
        self.is_jumping = False
        self.texture: Optional[pygame.Surface] = None
        self.source_rect = pygame.Rect(0, 0, 0, 0)
        self.dest_rect = pygame.Rect(int(self.x), int(self.y), 0, 0)

        try:
            texture = pygame.image.load(str(image_path))
        except (pygame.error, OSError, FileNotFoundError) as exc:
            logger.warning("Failed to load image %s: %s", image_path, exc)
            return

        self.texture = texture
        image_width, image_height = texture.get_size()
        frame_width = image_width / FRAMES_PER_SHEET
        frame_height = float(image_height)
        self.width = int(frame_width)
        self.height = int(frame_height)
        self.source_rect = pygame.Rect(0, 0, self.width, self.height)
        self.dest_rect = pygame.Rect(int(self.x), int(self.y), self.width, self.height)
        logger.debug("Loaded texture %s (%dx%d)", image_path, image_width, image_height)

    @property
    def dx(self) -> int:
        """Horizontal velocity, truncated to a whole number."""
        return self._dx

    @dx.setter
    def dx(self, value) -> None:
        self._dx = int(value)

    @property
    def dy(self) -> int:
        """Vertical velocity, truncated to a whole number."""
        return self._dy

    @dy.setter
    def dy(self, value) -> None:
        self._dy = int(value)

    def update(self, delta_time) -> None:
        """Apply gravity, then advance the position by one time step."""
        self.dy = self.dy + self.GRAVITY * delta_time
        self.x += self.dx * delta_time
        self.y += self.dy * delta_time
        self.dest_rect.x = int(self.x)
        self.dest_rect.y = int(self.y)

    def render(self, surface, camera_x, camera_y):
        """Draw the first sprite frame relative to the camera.

        Returns the on-screen rectangle as (x, y, width, height), or None
        when there is no texture to draw.
        """
        if self.texture is None:
            logger.warning("Trying to render an object without a texture")
            return None
        screen_x = float(self.x - camera_x)
        screen_y = float(self.y - camera_y)
        surface.blit(self.texture, (screen_x, screen_y), self.source_rect)
        return (screen_x, screen_y, float(self.width), float(self.height))

    def set_velocity(self, dx, dy) -> None:
        """Set the horizontal velocity; vertical velocity is left to gravity."""
        self.dx = dx

    def jump(self, world: GroundProbe) -> None:
        """Launch upwards if the world reports the object is on the ground."""
        if world.is_on_ground():
            self.dy = -self.JUMP_POWER
            self.is_jumping = True