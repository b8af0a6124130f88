import math

import pytest

from raycube.geometry import TAU, TILE_SIZE, Cardinal, Point
from raycube.mapfile import GameMap
from raycube.movement import (
    DEGREE,
    FOOT_STEP,
    RADIUS,
    Key,
    is_collision,
    key_press,
    key_release,
    step_direction,
    step_offset,
    try_move,
    update,
    update_rotation,
)
from raycube.state import MoveKeys, Player


def _map():
    grid = ("11111", "10001", "10N01", "10001", "11111")
    return GameMap(
        grid=grid,
        width=5,
        height=5,
        north_texture="n.xpm",
        south_texture="s.xpm",
        west_texture="w.xpm",
        east_texture="e.xpm",
        floor="10,20,30",
        ceiling="40,50,60",
        player_position=Point(160, 160),
        player_orientation=Cardinal.N,
    )


def _player(position=Point(160, 160), orientation=Cardinal.N):
    player = Player(position=position)
    player.set_orientation(orientation)
    return player


def test_key_press_and_release_toggle_state():
    player = Player()
    assert key_press(player, Key.W) is False
    assert key_press(player, Key.RIGHT) is False
    assert player.move.w and player.rotate_right
    key_release(player, Key.W)
    key_release(player, Key.RIGHT)
    assert not player.move.w and not player.rotate_right


def test_escape_requests_quit():
    assert key_press(Player(), Key.ESCAPE) is True


@pytest.mark.parametrize(
    "angle, expected",
    [
        (0.0, Cardinal.S),
        (math.pi, Cardinal.N),
        (math.pi / 2, Cardinal.W),
        (-math.pi / 2, Cardinal.E),
        (3 * math.pi / 2, Cardinal.E),
        (10.0, Cardinal.NONE),
    ],
)
def test_step_direction(angle, expected):
    assert step_direction(angle) == expected


def test_step_offset_facing_north():
    assert step_offset(Cardinal.N, MoveKeys(w=True), 4) == Point(0, -4)
    assert step_offset(Cardinal.E, MoveKeys(d=True), 4) == Point(0, 4)


@pytest.mark.parametrize("direction", [c for c in Cardinal if c != Cardinal.NONE])
def test_step_offset_opposite_keys_cancel(direction):
    forward = step_offset(direction, MoveKeys(w=True), 3)
    back = step_offset(direction, MoveKeys(s=True), 3)
    assert forward == Point(-back.x, -back.y)
    assert step_offset(direction, MoveKeys(w=True, s=True), 3) == Point(0, 0)


def test_step_offset_without_direction_is_zero():
    assert step_offset(Cardinal.NONE, MoveKeys(w=True, a=True), 5) == Point(0, 0)


def test_rotation_right_and_wrap():
    player = _player(orientation=Cardinal.E)
    player.rotate_right = True
    assert update_rotation(player) is True
    assert player.direction == pytest.approx(DEGREE)
    player.direction = TAU - DEGREE / 2
    update_rotation(player)
    assert 0 <= player.direction < DEGREE


def test_rotation_left_wraps_below_zero():
    player = _player(orientation=Cardinal.E)
    player.rotate_left = True
    update_rotation(player)
    assert player.direction == pytest.approx(TAU - DEGREE)
    assert player.fov.half_left == pytest.approx(player.direction - player.fov.angle / 2)


def test_no_rotation_reports_false():
    player = _player()
    assert update_rotation(player) is False
    assert player.perpendicular_direction == pytest.approx(player.direction - math.pi / 2)


def test_collision_detection():
    game_map = _map()
    assert is_collision(Point(160, 160), game_map) is False
    assert is_collision(Point(TILE_SIZE + 2, 160), game_map) is True


def test_try_move_forward():
    game_map = _map()
    player = _player()
    player.move.w = True
    assert try_move(player, game_map) is True
    assert player.position == Point(160, 160 - FOOT_STEP)
    assert player.tile == Point(2, 2)


def test_try_move_shortens_stride_near_wall():
    game_map = _map()
    player = _player(position=Point(160, TILE_SIZE + RADIUS + 3))
    player.move.w = True
    assert try_move(player, game_map) is True
    assert player.position.y == TILE_SIZE + RADIUS


def test_try_move_blocked_keeps_position():
    game_map = _map()
    start = Point(160, TILE_SIZE + RADIUS)
    player = _player(position=start)
    player.move.w = True
    assert try_move(player, game_map) is False
    assert player.position == start


def test_try_move_without_keys():
    player = _player()
    assert try_move(player, _map()) is False
    assert player.position == Point(160, 160)


def test_update_reports_changes():
    game_map = _map()
    player = _player()
    assert update(player, game_map) is False
    player.rotate_left = True
    assert update(player, game_map) is True