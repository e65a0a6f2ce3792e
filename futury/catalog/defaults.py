"""
FUTURY - Built-in Catalog
Minimal catalog used when the catalog service is unreachable, so the
simulation stays playable offline.
"""

from .models import BuildingType, Catalog, NationProfile, RouteTable
from ..config import EngineConfig, ENGINE


# Travel times in simulation years (24h real = 1 year)
TRAVEL_TIMES = {
    ("Earth", "Moon"): 0.125,     # ~3 hours real
    ("Earth", "Mars"): 2.5,       # 2.5 days real
    ("Earth", "Jupiter"): 5.5,
    ("Earth", "Saturn"): 8.0,
    ("Earth", "Uranus"): 12.0,
    ("Earth", "Neptune"): 15.0,
    ("Mars", "Jupiter"): 3.0,
    ("Mars", "Saturn"): 5.5,
}

MISSION_COSTS = {
    "Moon": {"budget": 100_000, "science": 500, "energy": 50, "materials": 10},
    "Mars": {"budget": 500_000, "science": 2000, "energy": 200, "materials": 50},
    "Jupiter": {"budget": 2_000_000, "science": 10_000, "energy": 500, "materials": 100},
    "Saturn": {"budget": 5_000_000, "science": 25_000, "energy": 1000, "materials": 200},
    "Uranus": {"budget": 10_000_000, "science": 50_000, "energy": 2000, "materials": 500},
    "Neptune": {"budget": 20_000_000, "science": 100_000, "energy": 5000, "materials": 1000},
}

DEFAULT_MISSION_COST = {"budget": 1_000_000, "science": 5000, "energy": 100, "materials": 20}

LOCATIONS = ["Mercury", "Venus", "Earth", "Moon", "Mars", "Jupiter", "Saturn", "Uranus", "Neptune"]

COLONIZABLE = ["Mars", "Moon"]

ARRIVAL_REWARDS = {
    "Mars": {"science": 5000, "population": 50},
}

BUILDING_TYPES = [
    BuildingType(
        code="RESEARCH_CENTER",
        name="Research Center",
        category="RESEARCH",
        budget_cost=500_000,
        materials_cost=200,
        energy_cost=50,
        construction_years=2.0,
        max_per_location=10,
        effects={"science_production": 50, "research_speed_bonus": 0.1},
        description="Advanced research facility. Increases science production.",
    ),
    BuildingType(
        code="SPACE_PORT",
        name="Space Port",
        category="SPACEPORT",
        budget_cost=1_000_000,
        materials_cost=500,
        energy_cost=100,
        construction_years=3.0,
        max_per_location=3,
        effects={"mission_cost_reduction": 0.15, "mission_capacity": 2, "launch_speed_bonus": 0.1},
        description="Orbital launch facility. Reduces mission costs and travel time.",
    ),
    BuildingType(
        code="ENERGY_PLANT",
        name="Energy Plant",
        category="PRODUCTION",
        budget_cost=300_000,
        materials_cost=300,
        energy_cost=0,
        construction_years=2.0,
        max_per_location=15,
        effects={"energy_production": 100, "efficiency_bonus": 0.05},
        description="Power generation facility.",
    ),
    BuildingType(
        code="FARM_COMPLEX",
        name="Farm Complex",
        category="PRODUCTION",
        budget_cost=150_000,
        materials_cost=100,
        energy_cost=30,
        construction_years=1.0,
        max_per_location=20,
        effects={"food_production": 50, "water_production": 30, "population_growth_bonus": 0.02},
        description="Agricultural complex. Produces food and water.",
    ),
]

NATIONS = [
    NationProfile("USA", "United States", budget=1_200_000, science=12_000,
                  population=330_000_000, budget_multiplier=1.2, science_multiplier=1.0),
    NationProfile("China", "China", budget=1_000_000, science=10_000,
                  population=1_400_000_000, budget_multiplier=1.0, science_multiplier=1.0),
    NationProfile("Russia", "Russia", budget=1_000_000, science=11_000,
                  population=144_000_000, budget_multiplier=1.0, science_multiplier=1.1),
    NationProfile("ESA", "European Space Agency", budget=1_100_000, science=10_500,
                  population=450_000_000, budget_multiplier=1.05, science_multiplier=1.05),
]


def default_catalog(config: EngineConfig = ENGINE) -> Catalog:
    """Build the built-in catalog. Mutable tables are copied per call."""
    return Catalog(
        building_types={b.code: b for b in BUILDING_TYPES},
        nations={n.code: n for n in NATIONS},
        routes=RouteTable(TRAVEL_TIMES, default_years=config.baseline_travel_years),
        mission_costs={k: dict(v) for k, v in MISSION_COSTS.items()},
        default_mission_cost=dict(DEFAULT_MISSION_COST),
        locations=list(LOCATIONS),
        colonizable=list(COLONIZABLE),
        arrival_rewards={k: dict(v) for k, v in ARRIVAL_REWARDS.items()},
        default_nation="ESA",
        source="builtin",
    )
