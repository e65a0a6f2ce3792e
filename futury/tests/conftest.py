"""
Shared fixtures: a hand-driven time source and ready-made sessions.
"""

import pytest

from futury.catalog import default_catalog
from futury.core.simulation import Simulation

SECONDS_PER_YEAR = 86400.0


class FakeTimeSource:
    """Monotonic clock advanced explicitly by tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds

    def advance_years(self, years: float):
        self.now += years * SECONDS_PER_YEAR


@pytest.fixture
def fake_time():
    return FakeTimeSource()


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def sim(fake_time, catalog):
    """Session started in 2100 with the default nation and no sample events."""
    simulation = Simulation(catalog=catalog, time_source=fake_time)
    simulation.new_session("ESA", epoch_year=2100, sample_events=False)
    return simulation
