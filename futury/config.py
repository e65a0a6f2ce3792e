"""
FUTURY - Configuration
Time scale, economy parameters, and engine cadence.
"""

from dataclasses import dataclass, field
from typing import Dict
from enum import Enum


class Resource(Enum):
    """Resources tracked by the ledger."""
    BUDGET = "budget"
    SCIENCE = "science"
    POPULATION = "population"
    ENERGY = "energy"
    MATERIALS = "materials"
    FOOD = "food"
    WATER = "water"
    OXYGEN = "oxygen"


RESOURCE_NAMES = tuple(r.value for r in Resource)


@dataclass
class TimeConfig:
    """Calendar scale: 24 real hours = 1 simulation year."""

    seconds_per_year: float = 86400.0
    days_per_year: float = 365.25

    # Plausible epoch range for a session
    min_epoch_year: float = 2000.0
    max_epoch_year: float = 3000.0

    default_start_year: float = 2100.0

    @property
    def scale(self) -> float:
        """Simulation years per real second."""
        return 1.0 / self.seconds_per_year


@dataclass
class EconomyConfig:
    """Starting stocks and base production (per simulation year)."""

    starting_stocks: Dict[str, float] = field(default_factory=lambda: {
        "budget": 1_000_000,
        "science": 10_000,
        "population": 500_000_000,
        "energy": 1000,
        "materials": 500,
        "food": 1000,
        "water": 1000,
        "oxygen": 1000,
    })

    # Balanced so a Mars mission ($500K) is reachable in ~2 real days
    base_production: Dict[str, float] = field(default_factory=lambda: {
        "budget": 250_000,
        "science": 1500,
        "population": 0.02,  # 2% compounding growth per year
        "energy": 150,
        "materials": 120,
        "food": 120,
        "water": 120,
        "oxygen": 100,
    })

    # Display/persistence precision (decimal places)
    population_precision: int = 0
    default_precision: int = 2

    # Caps for building-derived mission modifiers
    max_mission_cost_reduction: float = 0.75
    max_launch_speed_bonus: float = 0.5

    def precision_for(self, resource: str) -> int:
        if resource == Resource.POPULATION.value:
            return self.population_precision
        return self.default_precision


@dataclass
class EngineConfig:
    """Orchestrator cadence and gameplay defaults."""

    tick_interval_s: float = 1.0       # At most one tick per real second
    autosave_interval_s: float = 300.0  # 5 minutes

    default_origin: str = "Earth"
    home_location: str = "Earth"
    baseline_travel_years: float = 0.1  # Unknown routes
    colonists_per_colony: int = 50


# Default configurations
TIME = TimeConfig()
ECONOMY = EconomyConfig()
ENGINE = EngineConfig()
