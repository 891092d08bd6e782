"""Tile map loaded from a TMX file, with a collision grid and tile drawing."""

from __future__ import annotations

import logging
import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional

import pygame

logger = logging.getLogger(__name__)

TILESET_COLUMNS = 8
COLLISION_OVERLAY_COLOUR = (255, 0, 0, 120)
_INT_MAX = 2**31 - 1
_INT_MIN = -(2**31)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

Rect = tuple[float, float, float, float]


def _int_attribute(element: ET.Element, name: str, default: int = 0) -> int:
    value = element.get(name)
    if value is None:
        return default
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else default


def _float_attribute(element: ET.Element, name: str, default: float = 0.0) -> float:
    value = element.get(name)
    if value is None:
        return default
    match = _LEADING_FLOAT.match(value)
    return float(match.group(1)) if match else default


def _parse_tile_value(token: str) -> int:
    """Read the leading integer of a CSV token, as a strict string-to-int does."""
    match = _LEADING_INT.match(token)
    if not match:
        raise ValueError(f"invalid tile value: {token!r}")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"tile value out of range: {token!r}")
    return value


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _trunc_divmod(value: int, divisor: int) -> tuple[int, int]:
    quotient = int(value / divisor)
    return quotient, value - quotient * divisor


@dataclass
class RenderedFrame:
    """What a call to World.render drew, in screen coordinates."""

    tiles: list[tuple[Rect, Rect]] = field(default_factory=list)
    collisions: list[Rect] = field(default_factory=list)


class World:
    """An infinite-mode TMX map made of chunks, with a collision layer."""

    def __init__(self, tileset_path):
        self.tileset: Optional[pygame.Surface] = None
        self.tile_size = 0.0
        self.map_width = 0
        self.map_height = 0
        self.min_chunk_x = 0
        self.min_chunk_y = 0
        self.first_gid = 0
        self.tiles: list[list[int]] = []
        self.collision_map: list[list[bool]] = []
        try:
            self.tileset = pygame.image.load(str(tileset_path))
        except (pygame.error, OSError) as exc:
            logger.warning("Failed to load tileset %s: %s", tileset_path, exc)

    def load_from_tmx(self, filename) -> None:
        """Load the map from a TMX file; a file that cannot be read is logged."""
        try:
            root = ET.parse(str(filename)).getroot()
        except (OSError, ET.ParseError) as exc:
            logger.warning("Failed to load TMX file %s: %s", filename, exc)
            return
        self._load(root)

    def load_from_string(self, text) -> None:
        """Load the map from TMX text; text that is not XML is logged."""
        try:
            root = ET.fromstring(text)
        except ET.ParseError as exc:
            logger.warning("Failed to parse TMX text: %s", exc)
            return
        self._load(root)

    def _load(self, root: ET.Element) -> None:
        if root.tag != "map":
            logger.warning("No map element found in TMX")
            return

        self.map_width = _int_attribute(root, "width")
        self.map_height = _int_attribute(root, "height")
        self.tile_size = float(_int_attribute(root, "tilewidth"))

        self._parse_tileset(root.find("tileset"))

        group = root.find("group")
        if group is None:
            logger.info("No group element found")
            return
        layer = group.find("layer")
        if layer is None:
            logger.info("No layer element found")
            return
        self._parse_layer(layer)
        self._parse_collision_layer(group.find("objectgroup"))

    def _parse_tileset(self, tileset: Optional[ET.Element]) -> None:
        if tileset is None:
            return
        self.first_gid = _int_attribute(tileset, "firstgid")
        logger.debug("Tileset first GID: %d", self.first_gid)

    def _parse_layer(self, layer: ET.Element) -> None:
        data = layer.find("data")
        if data is None:
            return

        chunks = data.findall("chunk")
        self.tiles = []
        if not chunks:
            self.min_chunk_x = self.min_chunk_y = 0
            self.map_width = self.map_height = 0
            logger.info("Layer holds no chunks")
            return

        self.min_chunk_x = min(_int_attribute(c, "x") for c in chunks)
        self.min_chunk_y = min(_int_attribute(c, "y") for c in chunks)
        max_x = max(_int_attribute(c, "x") + _int_attribute(c, "width") for c in chunks)
        max_y = max(_int_attribute(c, "y") + _int_attribute(c, "height") for c in chunks)
        self.map_width = max_x - self.min_chunk_x
        self.map_height = max_y - self.min_chunk_y
        self.tiles = [[0] * max(self.map_width, 0) for _ in range(max(self.map_height, 0))]
        logger.debug("Determined map size: %dx%d", self.map_width, self.map_height)

        for chunk in chunks:
            self._read_chunk(chunk)

        logger.debug("Map:\n%s", self._describe_tiles())

    def _read_chunk(self, chunk: ET.Element) -> None:
        origin_x = _int_attribute(chunk, "x") - self.min_chunk_x
        origin_y = _int_attribute(chunk, "y") - self.min_chunk_y
        width = _int_attribute(chunk, "width")
        height = _int_attribute(chunk, "height")

        text = chunk.text or ""
        tokens = text.split(",") if text else []
        if tokens and tokens[-1] == "":
            tokens.pop()
        values = iter(tokens)

        for row in range(height):
            for column in range(width):
                token = next(values, None)
                if token is None:
                    logger.warning("Unexpected end of CSV data while reading chunk")
                    return
                tile = _parse_tile_value(token)
                gx, gy = origin_x + column, origin_y + row
                if 0 <= gx < self.map_width and 0 <= gy < self.map_height:
                    self.tiles[gy][gx] = tile
                else:
                    logger.debug("Skipping out-of-bounds tile (%d, %d)", gx, gy)

    def _describe_tiles(self) -> str:
        return "\n".join(
            "".join("." if t == 0 else str(t % 10) for t in row) for row in self.tiles
        )

    def _parse_collision_layer(self, object_group: Optional[ET.Element]) -> None:
        if object_group is None:
            return

        objects = object_group.findall("object")
        if objects and self.tile_size == 0:
            raise ValueError("map tile width must be non-zero to place collision objects")

        self.collision_map = [
            [False] * max(self.map_width, 0) for _ in range(max(self.map_height, 0))
        ]

        size = self.tile_size
        for obj in objects:
            x = _round_half_away(_float_attribute(obj, "x") / size) - self.min_chunk_x
            y = _round_half_away(_float_attribute(obj, "y") / size) - self.min_chunk_y
            width = _round_half_away(_float_attribute(obj, "width", size) / size) or 1
            height = _round_half_away(_float_attribute(obj, "height", size) / size) or 1
            logger.debug("Collision object at (%d, %d) size %dx%d tiles", x, y, width, height)

            for tile_x in range(x, x + width):
                for tile_y in range(y, y + height):
                    if 0 <= tile_x < self.map_width and 0 <= tile_y < self.map_height:
                        self.collision_map[tile_y][tile_x] = True

        logger.debug(
            "Collision map:\n%s",
            "\n".join("".join("#" if c else "." for c in row) for row in self.collision_map),
        )

    def check_wall_collisions(self, player, camera_x, camera_y) -> None:
        """Push the player out of every solid tile it overlaps (AABB)."""
        size = self.tile_size
        for i, row in enumerate(self.collision_map):
            for j, solid in enumerate(row):
                if not solid:
                    continue
                px, py = int(player.x), int(player.y)
                pw, ph = int(player.width), int(player.height)
                dist_x = int(px + pw // 2 - (j * size + size / 2))
                dist_y = int(py + ph // 2 - (i * size + size / 2))
                half_w = int(pw // 2 + size / 2)
                half_h = int(ph // 2 + size / 2)

                if abs(dist_x) >= half_w or abs(dist_y) >= half_h:
                    continue

                overlap_x = half_w - abs(dist_x)
                overlap_y = half_h - abs(dist_y)
                if overlap_x >= overlap_y:
                    if dist_y > 0:
                        player.y = float(py + overlap_y)
                    else:
                        self.is_on_ground()
                        player.y = float(py - overlap_y)
                    player.dy = 0
                elif dist_x > 0:
                    player.x = float(px + overlap_x)
                else:
                    player.x = float(px - overlap_x)

    def is_on_ground(self) -> bool:
        """Report whether the player stands on the ground; always true."""
        return True

    def render(self, surface, camera_x, camera_y, screen_width, screen_height) -> RenderedFrame:
        """Draw visible tiles and a translucent overlay on solid tiles."""
        frame = RenderedFrame()
        if not self.tiles or not self.tiles[0]:
            logger.warning("Tiles are not initialised")
        size = self.tile_size
        if size == 0:
            raise ValueError("cannot render a map with a tile size of zero")

        camera_x, camera_y = int(camera_x), int(camera_y)
        start_x = int(camera_x / size)
        start_y = int(camera_y / size)
        end_x = int(start_x + screen_width / size)
        end_y = int(start_y + screen_height / size)

        rows = len(self.tiles)
        columns = len(self.tiles[0]) if self.tiles else 0
        for x in range(start_x, end_x):
            for y in range(start_y, end_y):
                if not (0 <= y < rows and 0 <= x < columns):
                    continue
                tile_id = self.tiles[y][x]
                if tile_id == 0:
                    continue
                row, column = _trunc_divmod(tile_id - 1, TILESET_COLUMNS)
                source = (float(column * size), float(row * size), size, size)
                dest = (float(int(x * size - camera_x)), float(int(y * size - camera_y)), size, size)
                if self.tileset is not None:
                    surface.blit(
                        self.tileset,
                        (dest[0], dest[1]),
                        pygame.Rect(int(source[0]), int(source[1]), int(size), int(size)),
                    )
                frame.tiles.append((source, dest))

        overlay = pygame.Surface((int(size), int(size)), pygame.SRCALPHA)
        overlay.fill(COLLISION_OVERLAY_COLOUR)
        rows = len(self.collision_map)
        columns = len(self.collision_map[0]) if self.collision_map else 0
        for x in range(start_x, end_x):
            for y in range(start_y, end_y):
                if 0 <= y < rows and 0 <= x < columns and self.collision_map[y][x]:
                    box = (float(int(x * size - camera_x)), float(int(y * size - camera_y)), size, size)
                    surface.blit(overlay, (box[0], box[1]))
                    frame.collisions.append(box)
        return frame