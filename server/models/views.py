# server/models/views.py
"""Read-only snapshot records handed to hosts for rendering."""

from dataclasses import dataclass
from typing import List, Tuple

from models.entities import LightningBolt, Particle, Point, Vine
from utils.helpers import parse_hex_color

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class ParticleView:
    """A particle as the renderer sees it: size already scaled by life."""

    x: float
    y: float
    size: float
    life: float
    color: RGB

    @classmethod
    def of(cls, particle: Particle) -> "ParticleView":
        return cls(
            x=particle.x,
            y=particle.y,
            size=particle.display_size,
            life=particle.life,
            color=parse_hex_color(particle.color),
        )


@dataclass(frozen=True)
class VineView:
    """Vine trail geometry."""

    points: Tuple[Point, ...]
    color: RGB
    line_width: float
    growing: bool

    @classmethod
    def of(cls, vine: Vine) -> "VineView":
        return cls(
            points=tuple(vine.points),
            color=parse_hex_color(vine.color),
            line_width=vine.line_width,
            growing=not vine.is_grown,
        )


@dataclass(frozen=True)
class LightningView:
    """Lightning geometry with stroke width scaled by life."""

    segments: Tuple[Point, ...]
    branches: Tuple[Tuple[Point, ...], ...]
    color: RGB
    line_width: float
    life: float

    @classmethod
    def of(cls, bolt: LightningBolt) -> "LightningView":
        return cls(
            segments=tuple(bolt.segments),
            branches=tuple(tuple(branch) for branch in bolt.branches),
            color=parse_hex_color(bolt.color),
            line_width=bolt.display_width,
            life=bolt.life,
        )


@dataclass(frozen=True)
class RenderPoint:
    """One entry of the flat per-point buffer used by point-only renderers."""

    x: float
    y: float
    size: float
    life: float
    color: RGB


def point_dict(point: Point) -> dict:
    return {"x": point.x, "y": point.y}


def particle_to_dict(view: ParticleView) -> dict:
    return {
        "x": view.x,
        "y": view.y,
        "size": view.size,
        "life": view.life,
        "color": list(view.color),
    }


def vine_to_dict(view: VineView) -> dict:
    return {
        "points": [point_dict(p) for p in view.points],
        "color": list(view.color),
        "lineWidth": view.line_width,
        "growing": view.growing,
    }


def lightning_to_dict(view: LightningView) -> dict:
    return {
        "segments": [point_dict(p) for p in view.segments],
        "branches": [[point_dict(p) for p in branch] for branch in view.branches],
        "color": list(view.color),
        "lineWidth": view.line_width,
        "life": view.life,
    }


def render_point_to_dict(view: RenderPoint) -> dict:
    return {
        "x": view.x,
        "y": view.y,
        "size": view.size,
        "life": view.life,
        "color": list(view.color),
    }


def bounded(items: List, capacity) -> List:
    """Truncate to capacity (None means unbounded)."""
    if capacity is None:
        return items
    if capacity < 0:
        raise ValueError("capacity must be non-negative")
    return items[:capacity]
