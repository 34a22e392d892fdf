import math

import pytest

from models.entities import Point, Vine


def make_vine(x=10.0, y=50.0, angle=0.0, speed=1.0, turn_speed=0.0, max_length=100.0):
    return Vine(
        x=x,
        y=y,
        angle=angle,
        speed=speed,
        turn_speed=turn_speed,
        max_length=max_length,
        color="#7fff00",
        line_width=2.0,
        points=[Point(x, y)],
    )


def test_create_draws_parameters_from_ranges(fixed_random):
    vine = Vine.create(fixed_random([0.5]), 5.0, 6.0, "#ff69b4", 4.0, 200.0, 50.0)
    assert vine.points == [Point(5.0, 6.0)]
    assert vine.angle == pytest.approx(math.pi)
    assert vine.speed == pytest.approx(1.5)
    assert vine.turn_speed == pytest.approx(0.0)
    assert vine.max_length == pytest.approx(150.0)
    assert vine.line_width == pytest.approx(3.0)
    assert not vine.is_grown


def test_create_lower_bounds(fixed_random):
    vine = Vine.create(fixed_random([0.0]), 0.0, 0.0, "#ff69b4", 4.0, 200.0, 50.0)
    assert vine.speed == pytest.approx(0.5)
    assert vine.turn_speed == pytest.approx(-0.06)
    assert vine.max_length == pytest.approx(50.0)
    assert vine.line_width == pytest.approx(2.0)


def test_update_turns_and_appends_head():
    vine = make_vine(turn_speed=0.1, speed=2.0)
    assert vine.update(100, 100)
    assert vine.angle == pytest.approx(0.1)
    head = vine.points[-1]
    assert head.x == pytest.approx(10.0 + 2 * math.cos(0.1))
    assert head.y == pytest.approx(50.0 + 2 * math.sin(0.1))
    assert len(vine.points) == 2


def test_leaving_canvas_stops_growth_without_appending():
    vine = make_vine(x=1.0, angle=math.pi, speed=2.0)
    assert not vine.update(100, 100)
    assert vine.is_grown
    assert vine.points == [Point(1.0, 50.0)]


def test_length_budget_caps_point_count():
    vine = make_vine(max_length=3.5)
    assert vine.update(100, 100)
    assert vine.update(100, 100)
    assert not vine.update(100, 100)
    assert vine.is_grown
    assert len(vine.points) == math.floor(3.5) + 1


def test_grown_vine_never_grows_again():
    vine = make_vine(max_length=2.0)
    while vine.update(100, 100):
        pass
    count = len(vine.points)
    for _ in range(10):
        assert not vine.update(100, 100)
    assert len(vine.points) == count


def test_fade_removes_oldest_point_first():
    vine = make_vine()
    vine.points = [Point(0, 0), Point(1, 1), Point(2, 2)]
    assert vine.fade()
    assert vine.points == [Point(1, 1), Point(2, 2)]
    assert not vine.fade()
    assert vine.points == [Point(2, 2)]
    assert not vine.fade()
    assert vine.points == []
    assert not vine.fade()
