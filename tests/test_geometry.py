import math

import pytest

from raycube.geometry import (
    FOV_ANGLE,
    SCALE_FACTOR,
    TAU,
    TILE_SIZE,
    Cardinal,
    Increment,
    Point,
    advance,
    calc_delta,
    calculate_path,
    cardinal_direction,
    distance,
    find_intersection,
    is_inside_map_perimeter,
    is_wall,
    normalize_angle,
    screen_x,
    side_point,
    texture_x,
    tile_reference,
    wall_height,
)

GRID = ["111", "101", "111"]


@pytest.mark.parametrize("x,y", [(100.0, 200.0), (0.0, 0.0), (63.9, 64.0), (250.5, 17.2)])
def test_tile_reference_contains_point(x, y):
    tile = tile_reference(Point(x, y))
    assert tile.x * TILE_SIZE <= x < (tile.x + 1) * TILE_SIZE
    assert tile.y * TILE_SIZE <= y < (tile.y + 1) * TILE_SIZE


@pytest.mark.parametrize("angle", [-10.0, -math.pi / 2, 0.0, 7.5, 100.0, TAU])
def test_normalize_angle_in_range_and_equivalent(angle):
    result = normalize_angle(angle)
    assert 0 <= result < TAU
    assert math.cos(result) == pytest.approx(math.cos(angle))
    assert math.sin(result) == pytest.approx(math.sin(angle))


@pytest.mark.parametrize(
    "angle,expected",
    [
        (0.0, Cardinal.E),
        (TAU, Cardinal.E),
        (math.pi, Cardinal.W),
        (math.pi / 2, Cardinal.S),
        (3 * math.pi / 2, Cardinal.N),
        (math.pi / 4, Cardinal.SE),
        (3 * math.pi / 4, Cardinal.SW),
        (5 * math.pi / 4, Cardinal.NW),
        (7 * math.pi / 4, Cardinal.NE),
        (-math.pi / 2, Cardinal.N),
    ],
)
def test_cardinal_direction(angle, expected):
    assert cardinal_direction(angle) is expected


@pytest.mark.parametrize("direction", list(Cardinal))
def test_side_point_is_a_corner_of_current_tile(direction):
    point = Point(100.0, 150.0)
    corner = side_point(point, direction)
    tile = tile_reference(point)
    assert corner.x % TILE_SIZE == 0 and corner.y % TILE_SIZE == 0
    assert corner.x in (tile.x * TILE_SIZE, (tile.x + 1) * TILE_SIZE)
    assert corner.y in (tile.y * TILE_SIZE, (tile.y + 1) * TILE_SIZE)


def test_side_point_follows_direction():
    point = Point(100.0, 150.0)
    ne = side_point(point, Cardinal.NE)
    assert ne.x > point.x and ne.y < point.y
    sw = side_point(point, Cardinal.SW)
    assert sw.x < point.x and sw.y > point.y
    se = side_point(point, Cardinal.SE)
    assert se.x > point.x and se.y > point.y
    nw = side_point(point, Cardinal.NW)
    assert nw.x < point.x and nw.y < point.y


@pytest.mark.parametrize("direction", [Cardinal.NE, Cardinal.SE, Cardinal.SW, Cardinal.NW])
def test_calc_delta_stays_within_a_tile(direction):
    point = Point(100.0, 150.0)
    delta = calc_delta(point, side_point(point, direction), direction)
    assert 0 <= delta.x <= TILE_SIZE + 1
    assert 0 <= delta.y <= TILE_SIZE + 1


def test_calc_delta_east_is_plain_difference():
    first = Point(70.0, 70.0)
    second = Point(128.0, 64.0)
    delta = calc_delta(first, second, Cardinal.E)
    assert delta.x == second.x - first.x
    assert delta.y == first.y - second.y


def test_calculate_path_horizontal_ray():
    delta = Point(20.0, 30.0)
    path = calculate_path(delta, 0.0)
    assert path.x == pytest.approx(delta.x)
    assert path.y == pytest.approx(delta.x)


def test_calculate_path_vertical_ray():
    delta = Point(20.0, 30.0)
    path = calculate_path(delta, math.pi / 2)
    assert path.x == pytest.approx(delta.y)
    assert path.y == pytest.approx(delta.y)


def test_calculate_path_diagonal_reaches_both_deltas():
    delta = Point(10.0, 40.0)
    alpha = math.pi / 3
    path = calculate_path(delta, alpha)
    assert abs(path.x * math.cos(alpha)) == pytest.approx(delta.x)
    assert abs(path.y * math.sin(alpha)) == pytest.approx(delta.y)


@pytest.mark.parametrize("alpha", [0.0, 0.7, 2.5, 4.0])
def test_advance_covers_the_path_length(alpha):
    start = Point(10.0, 20.0)
    end = advance(start, -12.5, alpha)
    assert distance(start, end) == pytest.approx(12.5)


def test_distance_is_symmetric_and_zero_on_self():
    a = Point(1.0, 2.0)
    b = Point(4.0, 6.0)
    assert distance(a, b) == distance(b, a)
    assert distance(a, a) == 0
    assert distance(a, b) == pytest.approx(5.0)


def test_find_intersection_lies_on_both_lines():
    p1, a1 = Point(0.0, 0.0), math.pi / 4
    p2, a2 = Point(10.0, 0.0), 3 * math.pi / 4
    hit = find_intersection(p1, a1, p2, a2)
    assert (hit.y - p1.y) == pytest.approx((hit.x - p1.x) * math.tan(a1))
    assert (hit.y - p2.y) == pytest.approx((hit.x - p2.x) * math.tan(a2))


def test_find_intersection_with_vertical_line_is_finite():
    hit = find_intersection(Point(32.0, 0.0), math.pi / 2, Point(0.0, 50.0), 0.0)
    assert hit.y == pytest.approx(50.0)
    assert hit.x == pytest.approx(32.0, abs=0.1)


def test_find_intersection_parallel_raises():
    with pytest.raises(ValueError):
        find_intersection(Point(0.0, 0.0), 0.3, Point(5.0, 5.0), 0.3)


def test_is_wall():
    assert is_wall(Point(32.0, 32.0), GRID)
    assert not is_wall(Point(96.0, 96.0), GRID)
    assert is_wall(Point(160.0, 96.0), GRID)
    assert not is_wall(Point(1000.0, 32.0), GRID)
    assert not is_wall(Point(32.0, 1000.0), GRID)


def test_is_wall_short_row_is_not_wall():
    grid = ["1111", "10"]
    assert not is_wall(Point(3 * TILE_SIZE + 1, TILE_SIZE + 1), grid)


def test_is_inside_map_perimeter():
    assert is_inside_map_perimeter(Point(TILE_SIZE, TILE_SIZE), 3, 3)
    assert not is_inside_map_perimeter(Point(2 * TILE_SIZE, TILE_SIZE), 3, 3)
    assert not is_inside_map_perimeter(Point(TILE_SIZE - 1, TILE_SIZE), 3, 3)
    assert not is_inside_map_perimeter(Point(TILE_SIZE, 2 * TILE_SIZE), 3, 3)


def test_screen_x_spans_window():
    left = 1.0
    assert screen_x(left, left, 800) == 0
    assert screen_x(left + FOV_ANGLE, left, 800) == pytest.approx(800)
    assert screen_x(left + FOV_ANGLE / 2, left, 800) == pytest.approx(400)


def test_wall_height_shrinks_with_distance():
    heights = [wall_height(length) for length in (64.0, 128.0, 256.0, 512.0)]
    assert heights == sorted(heights, reverse=True)
    assert wall_height(SCALE_FACTOR) == pytest.approx(0.9999)


def test_wall_height_zero_distance_raises():
    with pytest.raises(ZeroDivisionError):
        wall_height(0.0)


def test_texture_x_uses_axis_of_last_increment():
    impact = Point(2 * TILE_SIZE + 5.7, 3 * TILE_SIZE + 9.2)
    assert texture_x(impact, Increment.Y) == 5
    assert texture_x(impact, Increment.X) == 9


@pytest.mark.parametrize("x,y", [(0.0, 0.0), (63.99, 127.5), (300.2, 77.7)])
def test_texture_x_within_tile(x, y):
    for increment in Increment:
        assert 0 <= texture_x(Point(x, y), increment) < TILE_SIZE