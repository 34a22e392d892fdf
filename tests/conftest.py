import itertools

import pytest

from services.simulation_service import Simulation
from utils.random_source import SeededRandom


class FixedRandom:
    """Cycles through a fixed list of draws."""

    def __init__(self, values):
        self._values = itertools.cycle(values)

    def random(self):
        return next(self._values)


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def simulation():
    return Simulation(rng=SeededRandom(1234))
