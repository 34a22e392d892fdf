# server/models/entities.py
"""Simulation entity models and their per-tick update rules."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from config.settings import *
from models.errors import InvalidModeError
from utils.helpers import clamp, in_canvas, in_extended_viewport, lerp
from utils.random_source import RandomSource, randint_below, uniform


@dataclass(frozen=True)
class Point:
    """An immutable 2D point."""

    x: float
    y: float


class ParticleMode(Enum):
    """Kinematic behaviour of a particle."""

    GRAVITY = "gravity"
    BOUNCE = "bounce"
    BURST = "burst"
    CONSTELLATION = "constellation"
    VORTEX = "vortex"


class SpawnMode(Enum):
    """Visual modes a host can spawn, with their wire tags."""

    VINE = 0
    GRAVITY = 1
    BOUNCE = 2
    BURST = 3
    LIGHTNING = 4
    CONSTELLATION = 5
    VORTEX = 6

    @classmethod
    def parse(cls, tag: Union["SpawnMode", int, str]) -> "SpawnMode":
        """Resolve a mode object, wire integer or name (case-insensitive)."""
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, int) and not isinstance(tag, bool):
            try:
                return cls(tag)
            except ValueError:
                raise InvalidModeError(tag) from None
        if isinstance(tag, str):
            key = tag.strip().upper()
            if key.isascii() and key.isdecimal():
                return cls.parse(int(key))
            if key in cls.__members__:
                return cls[key]
        raise InvalidModeError(tag)

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass
class VortexOrbit:
    """Orbital state carried only by vortex particles."""

    origin_x: float
    origin_y: float
    angle: float
    radius: float


@dataclass
class Particle:
    """A single moving dot."""

    x: float
    y: float
    vx: float
    vy: float
    size: float
    color: str
    mode: ParticleMode
    life: float = 1.0
    decay: float = DEFAULT_DECAY
    orbit: Optional[VortexOrbit] = None

    def __post_init__(self):
        if (self.mode is ParticleMode.VORTEX) != (self.orbit is not None):
            raise ValueError("Only vortex particles carry an orbit")

    def update(self, width: float, height: float) -> bool:
        """Advance one tick; return whether the particle survives."""
        if self.orbit is not None:
            orbit = self.orbit
            orbit.angle += VORTEX_ANGULAR_SPEED
            orbit.radius = max(orbit.radius - VORTEX_INWARD_SPEED, 0.0)
            self.x = orbit.origin_x + math.cos(orbit.angle) * orbit.radius
            self.y = orbit.origin_y + math.sin(orbit.angle) * orbit.radius
        else:
            self.vx *= FRICTION
            self.vy *= FRICTION
            if self.mode is ParticleMode.GRAVITY:
                self.vy += GRAVITY

            self.x += self.vx
            self.y += self.vy

            if self.mode is ParticleMode.BOUNCE:
                self._bounce(width, height)

        self.life -= self.decay
        return self.life > 0 and in_extended_viewport(
            self.x, self.y, width, height, VIEWPORT_MARGIN
        )

    def _bounce(self, width: float, height: float):
        """Reflect off the canvas walls, losing energy on impact."""
        if self.x < self.size or self.x > width - self.size:
            self.vx *= -BOUNCE_RESTITUTION
            self.x = clamp(self.x, self.size, width - self.size)
        if self.y < self.size or self.y > height - self.size:
            self.vy *= -BOUNCE_RESTITUTION
            self.y = clamp(self.y, self.size, height - self.size)

    @property
    def display_size(self) -> float:
        return self.size * self.life


@dataclass
class Vine:
    """A growing polyline steered by a constant turn bias."""

    x: float
    y: float
    angle: float
    speed: float
    turn_speed: float
    max_length: float
    color: str
    line_width: float
    points: List[Point] = field(default_factory=list)
    is_grown: bool = False

    @classmethod
    def create(
        cls,
        rng: RandomSource,
        x: float,
        y: float,
        color: str,
        size: float,
        max_length: float = VINE_MAX_LENGTH,
        min_length: float = VINE_MIN_LENGTH,
    ) -> "Vine":
        """Seed a vine at (x, y) with randomized heading and length budget."""
        return cls(
            x=x,
            y=y,
            angle=uniform(rng, 0.0, 2 * math.pi),
            speed=uniform(rng, VINE_MIN_SPEED, VINE_MIN_SPEED + VINE_SPEED_RANGE),
            turn_speed=uniform(rng, -VINE_TURN_RANGE / 2, VINE_TURN_RANGE / 2),
            max_length=uniform(rng, min_length, min_length + max_length),
            color=color,
            line_width=uniform(rng, size * 0.5, size),
            points=[Point(x, y)],
        )

    def update(self, width: float, height: float) -> bool:
        """Grow one step; return whether the vine is still growing."""
        if self.is_grown:
            return False

        self.angle += self.turn_speed
        self.x += math.cos(self.angle) * self.speed
        self.y += math.sin(self.angle) * self.speed

        if not in_canvas(self.x, self.y, width, height):
            self.is_grown = True
            return False

        self.points.append(Point(self.x, self.y))

        if len(self.points) > self.max_length:
            self.is_grown = True
            return False

        return True

    def fade(self) -> bool:
        """Drop the oldest point; return whether the trail is still visible."""
        if not self.points:
            return False
        del self.points[0]
        return len(self.points) > 1


@dataclass
class LightningBolt:
    """A one-shot jagged bolt with side branches; only life changes."""

    segments: List[Point]
    branches: List[List[Point]]
    color: str
    line_width: float
    life: float = 1.0
    decay: float = LIGHTNING_DECAY

    @classmethod
    def generate(
        cls, rng: RandomSource, start: Point, end: Point, color: str
    ) -> "LightningBolt":
        """Build the main channel and its branches in one pass."""
        dx = end.y - start.y
        dy = -(end.x - start.x)
        length = math.hypot(dx, dy)
        # Degenerate bolt: no direction, so no perpendicular jitter
        nx, ny = (dx / length, dy / length) if length > 0 else (0.0, 0.0)

        last = LIGHTNING_SEGMENTS - 1
        segments = []
        for i in range(LIGHTNING_SEGMENTS):
            t = i / last
            offset = (rng.random() - 0.5) * LIGHTNING_JITTER
            segments.append(
                Point(
                    lerp(start.x, end.x, t) + nx * offset,
                    lerp(start.y, end.y, t) + ny * offset,
                )
            )

        branches = []
        branch_count = LIGHTNING_MIN_BRANCHES + randint_below(rng, LIGHTNING_BRANCH_CHOICES)
        for _ in range(branch_count):
            root_index = int(math.floor(rng.random() * (len(segments) * LIGHTNING_BRANCH_REACH))) + 1
            if root_index >= len(segments):
                continue

            root = segments[root_index]
            point_count = LIGHTNING_MIN_BRANCH_POINTS + randint_below(
                rng, LIGHTNING_BRANCH_POINT_CHOICES
            )
            branch_angle = rng.random() * 2 * math.pi
            branch = [root]
            for i in range(1, point_count + 1):
                dist = i * LIGHTNING_BRANCH_STEP
                offset = (rng.random() - 0.5) * LIGHTNING_BRANCH_JITTER
                branch.append(
                    Point(
                        root.x + math.cos(branch_angle) * dist + offset,
                        root.y + math.sin(branch_angle) * dist + offset,
                    )
                )
            branches.append(branch)

        return cls(
            segments=segments,
            branches=branches,
            color=color,
            line_width=uniform(rng, 1.5, 3.5),
        )

    def update(self) -> bool:
        """Burn down one tick of life."""
        self.life -= self.decay
        return self.life > 0

    @property
    def display_width(self) -> float:
        return self.line_width * self.life
