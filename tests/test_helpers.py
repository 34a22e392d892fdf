import pytest

from models.errors import MalformedColorError
from utils.helpers import clamp, in_extended_viewport, parse_hex_color, parse_hex_color_strict
from utils.random_source import SeededRandom, choice, make_random, randint_below, uniform


@pytest.mark.parametrize(
    "value, expected",
    [
        ("#ff00ff", (255, 0, 255)),
        ("00ffff", (0, 255, 255)),
        ("#FF8C00", (255, 140, 0)),
        ("#zz0000", (255, 255, 255)),
        ("#fff", (255, 255, 255)),
        ("", (255, 255, 255)),
        ("##ff00ff", (255, 255, 255)),
    ],
)
def test_parse_hex_color(value, expected):
    assert parse_hex_color(value) == expected


def test_strict_parser_raises():
    with pytest.raises(MalformedColorError):
        parse_hex_color_strict("#12345g")


def test_clamp_prefers_upper_bound_when_inverted():
    assert clamp(5.0, 0.0, 10.0) == 5.0
    assert clamp(-1.0, 0.0, 10.0) == 0.0
    assert clamp(5.0, 10.0, 4.0) == 4.0


def test_extended_viewport_is_exclusive():
    assert in_extended_viewport(-49.9, 10, 100, 100, 50)
    assert not in_extended_viewport(-50.0, 10, 100, 100, 50)
    assert not in_extended_viewport(10, 150.0, 100, 100, 50)


def test_seeded_random_is_reproducible():
    a, b = SeededRandom(9), SeededRandom(9)
    assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]


def test_draw_helpers_stay_in_range(fixed_random):
    rng = fixed_random([0.0, 0.999999, 0.5])
    assert uniform(rng, 2.0, 4.0) == 2.0
    assert randint_below(rng, 3) == 2
    assert choice(rng, ["a", "b", "c"]) == "b"


def test_make_random_seeds_when_configured():
    assert isinstance(make_random("3"), SeededRandom)
    assert not isinstance(make_random(None), SeededRandom)
