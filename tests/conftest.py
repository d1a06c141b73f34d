import random
import pytest

from cafe_sim.models import Rect
from cafe_sim.recipes import load_catalog


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def rng():
    """Seeded generator so agent and quiz randomness is repeatable."""
    return random.Random(1234)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def area():
    return Rect(200, 400, 880, 250)


@pytest.fixture
def catalog():
    return load_catalog()
