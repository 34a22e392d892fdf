# server/utils/helpers.py
"""Utility functions and helpers."""

import logging
import string
from typing import Tuple

from config.settings import FALLBACK_RGB
from models.errors import MalformedColorError

logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset(string.hexdigits)


def parse_hex_color_strict(value: str) -> Tuple[int, int, int]:
    """Parse ``#rrggbb`` (leading ``#`` optional) into an RGB byte triple."""
    digits = value[1:] if value.startswith("#") else value
    if len(digits) != 6 or not _HEX_DIGITS.issuperset(digits):
        raise MalformedColorError(value)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def parse_hex_color(value: str) -> Tuple[int, int, int]:
    """Resolve a palette entry to RGB, falling back to opaque white."""
    try:
        return parse_hex_color_strict(value)
    except MalformedColorError:
        logger.debug("Falling back to white for color %r", value)
        return FALLBACK_RGB


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]; high wins when the range is inverted."""
    return min(max(value, low), high)


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b by factor t."""
    return a + (b - a) * t


def in_extended_viewport(
    x: float, y: float, width: float, height: float, margin: float
) -> bool:
    """Check if a point lies strictly inside the canvas grown by margin."""
    return -margin < x < width + margin and -margin < y < height + margin


def in_canvas(x: float, y: float, width: float, height: float) -> bool:
    """Check if a point lies inside [0, width] x [0, height]."""
    return 0.0 <= x <= width and 0.0 <= y <= height
