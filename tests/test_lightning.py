import math

import pytest

from models.entities import LightningBolt, Point
from utils.random_source import SeededRandom


def test_midpoint_draws_give_straight_channel(fixed_random):
    bolt = LightningBolt.generate(fixed_random([0.5]), Point(0, 0), Point(0, 150), "#ffffff")
    assert len(bolt.segments) == 16
    for i, point in enumerate(bolt.segments):
        assert point.x == pytest.approx(0.0)
        assert point.y == pytest.approx(i * 10.0)
    assert len(bolt.branches) == 3
    for branch in bolt.branches:
        assert branch[0] == bolt.segments[6]
        assert len(branch) == 8
        assert branch[3].x == pytest.approx(bolt.segments[6].x + math.cos(math.pi) * 24)
    assert bolt.line_width == pytest.approx(2.5)
    assert bolt.life == 1.0
    assert bolt.decay == 0.02


def test_jitter_is_perpendicular_to_channel(fixed_random):
    bolt = LightningBolt.generate(fixed_random([1.0 - 1e-12]), Point(0, 0), Point(100, 0), "#ffffff")
    for i, point in enumerate(bolt.segments):
        assert point.x == pytest.approx(i * 100 / 15)
        assert abs(point.y) == pytest.approx(15.0, abs=1e-6)


@pytest.mark.parametrize("seed", range(25))
def test_geometry_bounds(seed):
    bolt = LightningBolt.generate(SeededRandom(seed), Point(50, 10), Point(120, 300), "#00ffff")
    assert len(bolt.segments) == 16
    assert 2 <= len(bolt.branches) <= 4
    roots = bolt.segments[1:13]
    for branch in bolt.branches:
        assert 6 <= len(branch) <= 10
        assert branch[0] in roots
    assert 1.5 <= bolt.line_width < 3.5


def test_degenerate_bolt_has_no_jitter(fixed_random):
    bolt = LightningBolt.generate(fixed_random([0.9]), Point(5, 5), Point(5, 5), "#ffffff")
    assert all(p == Point(5, 5) for p in bolt.segments)


def test_life_burns_down_without_touching_geometry():
    bolt = LightningBolt.generate(SeededRandom(3), Point(0, 0), Point(0, 100), "#ffffff")
    segments = list(bolt.segments)
    branches = [list(b) for b in bolt.branches]
    for _ in range(49):
        assert bolt.update()
    assert bolt.display_width == pytest.approx(bolt.line_width * bolt.life)
    alive = True
    for _ in range(2):
        alive = bolt.update()
    assert not alive
    assert bolt.segments == segments
    assert bolt.branches == branches
