# server/services/engine_handle.py
"""Single-owner handle that host bindings drive the engine through."""

import logging
from typing import List, Optional

from config.settings import DEFAULT_BRUSH_SIZE, PROFILE
from models.entities import SpawnMode
from models.errors import EngineDestroyedError
from models.views import LightningView, ParticleView, RenderPoint, VineView
from utils.random_source import RandomSource
from .simulation_service import Simulation

logger = logging.getLogger(__name__)


class EngineHandle:
    """Create/spawn/tick/query/clear/destroy surface over one Simulation.

    Every operation checks the handle is still alive before touching the
    engine, and spawn validates its mode tag before any mutation.
    """

    def __init__(self, simulation: Simulation, profile: str = PROFILE):
        self._simulation: Optional[Simulation] = simulation
        self.profile = profile

    @classmethod
    def create(cls, profile: str = PROFILE, rng: Optional[RandomSource] = None) -> "EngineHandle":
        simulation = Simulation.from_profile(profile, rng=rng)
        logger.info("Created %s engine", profile)
        return cls(simulation, profile)

    def destroy(self):
        """Release the engine. Destroying twice is a no-op."""
        if self._simulation is None:
            return
        self._simulation.clear()
        self._simulation = None
        logger.info("Destroyed %s engine", self.profile)

    @property
    def alive(self) -> bool:
        return self._simulation is not None

    @property
    def simulation(self) -> Simulation:
        if self._simulation is None:
            raise EngineDestroyedError("engine handle used after destroy()")
        return self._simulation

    def spawn(self, mode_tag, x: float, y: float, count: int = 1, size: float = DEFAULT_BRUSH_SIZE) -> SpawnMode:
        """Spawn by wire tag; raises InvalidModeError for unknown tags."""
        mode = SpawnMode.parse(mode_tag)
        self.simulation.spawn(mode, x, y, count, size)
        return mode

    def tick(self, width: float, height: float):
        self.simulation.tick(width, height)

    def clear(self):
        self.simulation.clear()
        logger.info("Cleared %s engine", self.profile)

    def particle_count(self) -> int:
        return len(self.simulation.particles)

    def vine_count(self) -> int:
        simulation = self.simulation
        return len(simulation.vines) + len(simulation.grown_vines)

    def lightning_count(self) -> int:
        return len(self.simulation.lightnings)

    def get_particles(self, capacity: Optional[int] = None) -> List[ParticleView]:
        return self.simulation.get_particles(capacity)

    def get_vines(self, capacity: Optional[int] = None) -> List[VineView]:
        return self.simulation.get_vines(capacity)

    def get_lightnings(self, capacity: Optional[int] = None) -> List[LightningView]:
        return self.simulation.get_lightnings(capacity)

    def get_render_points(self, capacity: Optional[int] = None) -> List[RenderPoint]:
        return self.simulation.get_render_points(capacity)
