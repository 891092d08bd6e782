import pygame
import pytest

from cavequest.gameobject import GameObject

RED = (255, 0, 0)
BLACK = (0, 0, 0)


@pytest.fixture
def sheet_path(tmp_path):
    sheet = pygame.Surface((8, 3))
    sheet.fill(RED)
    path = tmp_path / "sheet.bmp"
    pygame.image.save(sheet, str(path))
    return path


class _Ground:
    def __init__(self, on_ground):
        self.on_ground = on_ground

    def is_on_ground(self):
        return self.on_ground


def test_missing_image_leaves_no_texture(tmp_path):
    obj = GameObject(600, 250, tmp_path / "missing.png")
    assert obj.texture is None
    assert (obj.width, obj.height) == (0, 0)
    assert (obj.x, obj.y) == (600.0, 250.0)


def test_frame_size_is_quarter_of_sheet_width(sheet_path):
    obj = GameObject(0, 0, sheet_path)
    assert obj.width * 4 == 8
    assert obj.height == 3
    assert obj.source_rect.size == (obj.width, obj.height)


def test_defaults_from_source(sheet_path):
    obj = GameObject(1, 2, sheet_path)
    assert obj.speed == 99
    assert obj.dx == 0 and obj.dy == 0
    assert obj.is_jumping is False


def test_set_velocity_changes_only_dx(sheet_path):
    obj = GameObject(0, 0, sheet_path)
    obj.dy = 7
    obj.set_velocity(obj.speed, 50)
    assert obj.dx == obj.speed
    assert obj.dy == 7


def test_velocity_is_truncated(sheet_path):
    obj = GameObject(0, 0, sheet_path)
    obj.set_velocity(-3.9, 0)
    assert obj.dx == -3
    obj.dy = 12.8
    assert obj.dy == 12


def test_update_with_zero_time_keeps_position(sheet_path):
    obj = GameObject(10, 20, sheet_path)
    obj.set_velocity(obj.speed, 0)
    obj.update(0.0)
    assert (obj.x, obj.y) == (10.0, 20.0)
    assert obj.dy == 0


def test_update_applies_gravity_downwards(sheet_path):
    obj = GameObject(10, 20, sheet_path)
    obj.update(0.1)
    assert obj.dy > 0
    assert obj.y > 20
    assert obj.x == 10
    assert obj.dest_rect.topleft == (int(obj.x), int(obj.y))


def test_update_moves_left_with_negative_velocity(sheet_path):
    obj = GameObject(100, 0, sheet_path)
    obj.set_velocity(-obj.speed, 0)
    obj.update(0.05)
    assert obj.x < 100


def test_jump_on_ground(sheet_path):
    obj = GameObject(0, 0, sheet_path)
    obj.jump(_Ground(True))
    assert obj.dy == -300
    assert obj.is_jumping is True


def test_jump_in_air_does_nothing(sheet_path):
    obj = GameObject(0, 0, sheet_path)
    obj.jump(_Ground(False))
    assert obj.dy == 0
    assert obj.is_jumping is False


def test_jump_then_gravity_slows_ascent(sheet_path):
    obj = GameObject(0, 100, sheet_path)
    obj.jump(_Ground(True))
    obj.update(0.1)
    assert -300 < obj.dy < 0
    assert obj.y < 100


def test_render_draws_first_frame_at_camera_offset(sheet_path):
    obj = GameObject(13, 24, sheet_path)
    screen = pygame.Surface((20, 20))
    screen.fill(BLACK)
    rect = obj.render(screen, 10, 20)
    assert rect == (3.0, 4.0, float(obj.width), float(obj.height))
    assert screen.get_at((3, 4))[:3] == RED
    assert screen.get_at((3 + obj.width, 4))[:3] == BLACK


def test_render_without_texture_returns_none(tmp_path):
    obj = GameObject(0, 0, tmp_path / "nothing.png")
    screen = pygame.Surface((4, 4))
    screen.fill(BLACK)
    assert obj.render(screen, 0, 0) is None
    assert screen.get_at((0, 0))[:3] == BLACK