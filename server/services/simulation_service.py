# server/services/simulation_service.py
"""Core simulation logic and state management."""

import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple

from models.entities import (
    LightningBolt,
    Particle,
    ParticleMode,
    Point,
    SpawnMode,
    Vine,
    VortexOrbit,
)
from models.views import (
    LightningView,
    ParticleView,
    RenderPoint,
    VineView,
    bounded,
    lightning_to_dict,
    particle_to_dict,
    vine_to_dict,
)
from config.settings import *
from utils.helpers import parse_hex_color
from utils.random_source import RandomSource, SystemRandom, choice, uniform

logger = logging.getLogger(__name__)


class Simulation:
    """Owns every live entity and advances them one tick at a time."""

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        colors: Sequence[str] = PALETTE,
        lightning_colors: Sequence[str] = LIGHTNING_COLORS,
        max_particles: int = MAX_PARTICLES,
        max_lightnings: Optional[int] = MAX_LIGHTNINGS,
        max_length: float = VINE_MAX_LENGTH,
        min_length: float = VINE_MIN_LENGTH,
        vine_fade: bool = True,
        fixed_canvas: Optional[Tuple[float, float]] = None,
    ):
        if not colors:
            raise ValueError("palette must not be empty")
        if not lightning_colors:
            raise ValueError("lightning palette must not be empty")
        if max_particles < 0 or (max_lightnings is not None and max_lightnings < 0):
            raise ValueError("capacities must be non-negative")

        self.rng: RandomSource = rng if rng is not None else SystemRandom()
        self.colors: Tuple[str, ...] = tuple(colors)
        self.lightning_colors: Tuple[str, ...] = tuple(lightning_colors)
        self.max_particles = max_particles
        self.max_lightnings = max_lightnings
        self.max_length = max_length
        self.min_length = min_length
        self.vine_fade = vine_fade
        self.fixed_canvas = fixed_canvas

        self.vines: List[Vine] = []
        self.grown_vines: List[Vine] = []
        self.particles: List[Particle] = []
        self.lightnings: List[LightningBolt] = []

        # Last canvas seen by tick(); lightning aims relative to its height
        self.canvas_width = DEFAULT_CANVAS_WIDTH
        self.canvas_height = DEFAULT_CANVAS_HEIGHT

    @classmethod
    def from_profile(cls, profile: str, rng: Optional[RandomSource] = None) -> "Simulation":
        """Build an engine configured for one of HOST_PROFILES."""
        try:
            options = HOST_PROFILES[profile]
        except KeyError:
            raise ValueError(f"Unknown host profile: {profile!r}") from None
        return cls(rng=rng, **options)

    # Spawning
    def spawn(self, mode, x: float, y: float, count: int = 1, size: float = DEFAULT_BRUSH_SIZE):
        """Dispatch a spawn request; unknown modes raise before any mutation."""
        mode = SpawnMode.parse(mode)
        if count < 0:
            raise ValueError("count must be non-negative")

        if mode is SpawnMode.VINE:
            self.spawn_vine(x, y, size)
        elif mode is SpawnMode.GRAVITY:
            self.spawn_gravity(x, y, count, size)
        elif mode is SpawnMode.BOUNCE:
            self.spawn_bounce(x, y, count, size)
        elif mode is SpawnMode.BURST:
            self.spawn_burst(x, y, count, size)
        elif mode is SpawnMode.LIGHTNING:
            self.spawn_lightning(x, y)
        elif mode is SpawnMode.CONSTELLATION:
            self.spawn_constellation(x, y, count, size)
        elif mode is SpawnMode.VORTEX:
            self.spawn_vortex(x, y, count, size)

    def _pick_color(self) -> str:
        return choice(self.rng, self.colors)

    def spawn_vine(self, x: float, y: float, size: float) -> Vine:
        """Plant a single vine at (x, y)."""
        color = self._pick_color()
        vine = Vine.create(self.rng, x, y, color, size, self.max_length, self.min_length)
        self.vines.append(vine)
        return vine

    def spawn_gravity(self, x: float, y: float, count: int, size: float) -> List[Particle]:
        """Fountain of particles thrown upward that fall back down."""
        color = self._pick_color()
        batch = []
        for _ in range(count):
            vx = uniform(self.rng, -2.0, 2.0)
            vy = uniform(self.rng, -7.0, -2.0)
            batch.append(
                Particle(x, y, vx, vy, size * 0.5, color, ParticleMode.GRAVITY)
            )
        return self._add_particles(batch)

    def spawn_bounce(self, x: float, y: float, count: int, size: float) -> List[Particle]:
        """Particles that ricochet off the canvas walls."""
        color = self._pick_color()
        batch = []
        for _ in range(count):
            vx = uniform(self.rng, -4.0, 4.0)
            vy = uniform(self.rng, -4.0, 4.0)
            batch.append(
                Particle(x, y, vx, vy, size * 0.5, color, ParticleMode.BOUNCE)
            )
        return self._add_particles(batch)

    def spawn_burst(self, x: float, y: float, count: int, size: float) -> List[Particle]:
        """Ring of particles flying outward at evenly spaced angles."""
        color = self._pick_color()
        batch = []
        for i in range(count):
            angle = (2 * math.pi / count) * i
            speed = uniform(self.rng, 2.0, 8.0)
            particle_size = size * uniform(self.rng, 0.5, 1.0) * 0.5
            batch.append(
                Particle(
                    x,
                    y,
                    math.cos(angle) * speed,
                    math.sin(angle) * speed,
                    particle_size,
                    color,
                    ParticleMode.BURST,
                )
            )
        return self._add_particles(batch)

    def spawn_constellation(self, x: float, y: float, count: int, size: float) -> List[Particle]:
        """Slow, long-lived stars scattered around (x, y)."""
        color = self._pick_color()
        batch = []
        for _ in range(count):
            offset_x = uniform(self.rng, -30.0, 30.0)
            offset_y = uniform(self.rng, -30.0, 30.0)
            vx = uniform(self.rng, -0.25, 0.25)
            vy = uniform(self.rng, -0.25, 0.25)
            particle_size = size * uniform(self.rng, 0.6, 1.1)
            batch.append(
                Particle(
                    x + offset_x,
                    y + offset_y,
                    vx,
                    vy,
                    particle_size,
                    color,
                    ParticleMode.CONSTELLATION,
                    decay=CONSTELLATION_DECAY,
                )
            )
        return self._add_particles(batch)

    def spawn_vortex(self, x: float, y: float, count: int, size: float) -> List[Particle]:
        """Particles spiralling inward around (x, y)."""
        color = self._pick_color()
        batch = []
        for i in range(count):
            angle = (2 * math.pi / count) * i + uniform(self.rng, 0.0, VORTEX_ANGLE_JITTER)
            radius = uniform(self.rng, VORTEX_MIN_RADIUS, VORTEX_MIN_RADIUS + VORTEX_RADIUS_RANGE)
            batch.append(
                Particle(
                    x + math.cos(angle) * radius,
                    y + math.sin(angle) * radius,
                    math.cos(angle) * VORTEX_TANGENT_SPEED,
                    math.sin(angle) * VORTEX_TANGENT_SPEED,
                    size * 0.6,
                    color,
                    ParticleMode.VORTEX,
                    decay=VORTEX_DECAY,
                    orbit=VortexOrbit(x, y, angle, radius),
                )
            )
        return self._add_particles(batch)

    def spawn_lightning(self, x: float, y: float, height: Optional[float] = None) -> LightningBolt:
        """Strike a bolt from (x, y), preferring downward endpoints."""
        if height is None:
            height = self.fixed_canvas[1] if self.fixed_canvas else self.canvas_height

        end_x = x + (self.rng.random() - 0.5) * LIGHTNING_SPREAD
        end_y = y + uniform(self.rng, 0.2, 0.8) * height * 0.5
        color = choice(self.rng, self.lightning_colors)

        bolt = LightningBolt.generate(self.rng, Point(x, y), Point(end_x, end_y), color)
        self.lightnings.append(bolt)
        self._limit_lightnings()
        return bolt

    # Capacity management
    def _add_particles(self, batch: List[Particle]) -> List[Particle]:
        self.particles.extend(batch)
        self._limit_particles()
        return batch

    def _limit_particles(self):
        """Evict the oldest-inserted particles beyond capacity."""
        excess = len(self.particles) - self.max_particles
        if excess > 0:
            del self.particles[:excess]
            logger.debug("Evicted %d oldest particles", excess)

    def _limit_lightnings(self):
        """Evict the oldest bolts beyond capacity, when capped."""
        if self.max_lightnings is None:
            return
        excess = len(self.lightnings) - self.max_lightnings
        if excess > 0:
            del self.lightnings[:excess]
            logger.debug("Evicted %d oldest lightning bolts", excess)

    # Stepping
    def tick(self, width: float, height: float):
        """Advance every entity exactly once and drop the dead ones."""
        self.canvas_width = width
        self.canvas_height = height

        growing = []
        for vine in self.vines:
            if vine.update(width, height):
                growing.append(vine)
            elif self.vine_fade:
                self.grown_vines.append(vine)
        self.vines = growing

        self.grown_vines = [vine for vine in self.grown_vines if vine.fade()]
        self.particles = [p for p in self.particles if p.update(width, height)]
        self.lightnings = [bolt for bolt in self.lightnings if bolt.update()]

    def clear(self):
        """Drop every entity."""
        self.vines.clear()
        self.grown_vines.clear()
        self.particles.clear()
        self.lightnings.clear()

    # Getter methods for simulation state
    def get_particles(self, capacity: Optional[int] = None) -> List[ParticleView]:
        """Particle snapshots in insertion order, at most capacity of them."""
        return [ParticleView.of(p) for p in bounded(self.particles, capacity)]

    def get_vines(self, capacity: Optional[int] = None) -> List[VineView]:
        """Growing vines first, then fading ones."""
        return [VineView.of(v) for v in bounded(self.vines + self.grown_vines, capacity)]

    def get_lightnings(self, capacity: Optional[int] = None) -> List[LightningView]:
        return [LightningView.of(b) for b in bounded(self.lightnings, capacity)]

    def get_render_points(self, capacity: Optional[int] = None) -> List[RenderPoint]:
        """Flatten particles, vine points and bolt segments into one buffer."""
        if capacity is not None and capacity < 0:
            raise ValueError("capacity must be non-negative")
        written: List[RenderPoint] = []
        for point in self._iter_render_points():
            if capacity is not None and len(written) >= capacity:
                break
            written.append(point)
        return written

    def _iter_render_points(self) -> Iterable[RenderPoint]:
        for particle in self.particles:
            view = ParticleView.of(particle)
            yield RenderPoint(view.x, view.y, view.size, view.life, view.color)

        for vine in self.vines + self.grown_vines:
            rgb = parse_hex_color(vine.color)
            for point in vine.points:
                yield RenderPoint(point.x, point.y, vine.line_width, 1.0, rgb)

        for bolt in self.lightnings:
            rgb = parse_hex_color(bolt.color)
            for point in bolt.segments:
                yield RenderPoint(point.x, point.y, bolt.display_width, bolt.life, rgb)

    def get_stats(self) -> dict:
        """Entity counts per collection."""
        return {
            "totalParticles": len(self.particles),
            "totalVines": len(self.vines),
            "totalGrownVines": len(self.grown_vines),
            "totalLightnings": len(self.lightnings),
        }

    def snapshot(self) -> dict:
        """Full render state as JSON-ready dictionaries."""
        return {
            "particles": [particle_to_dict(v) for v in self.get_particles()],
            "vines": [vine_to_dict(VineView.of(v)) for v in self.vines],
            "grownVines": [vine_to_dict(VineView.of(v)) for v in self.grown_vines],
            "lightnings": [lightning_to_dict(v) for v in self.get_lightnings()],
        }
