"""
FUTURY - Catalog Models
Read-only game data: building types, nations, routes, mission costs.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from ..config import ENGINE


@dataclass(frozen=True)
class BuildingType:
    """A constructible building, as supplied by the catalog."""
    code: str
    name: str
    category: str
    budget_cost: float = 0.0
    materials_cost: float = 0.0
    energy_cost: float = 0.0
    construction_years: float = 1.0
    max_per_location: int = 99
    effects: Mapping[str, float] = field(default_factory=dict)
    description: str = ""

    @property
    def costs(self) -> Dict[str, float]:
        return {
            "budget": self.budget_cost,
            "materials": self.materials_cost,
            "energy": self.energy_cost,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuildingType":
        effects = dict(data.get("effects") or {})
        # Older catalogs carried the cap inside the effect map
        max_per_location = data.get("max_per_location",
                                    data.get("max_per_planet", effects.pop("max_per_planet", 99)))
        return cls(
            code=data.get("code", data.get("building_code")),
            name=data.get("name", ""),
            category=data.get("category", ""),
            budget_cost=float(data.get("budget_cost", 0)),
            materials_cost=float(data.get("materials_cost", 0)),
            energy_cost=float(data.get("energy_cost", 0)),
            construction_years=float(data.get("construction_years",
                                              data.get("construction_time_years", 1.0))),
            max_per_location=int(max_per_location),
            effects={k: float(v) for k, v in effects.items()},
            description=data.get("description", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "category": self.category,
            "budget_cost": self.budget_cost,
            "materials_cost": self.materials_cost,
            "energy_cost": self.energy_cost,
            "construction_years": self.construction_years,
            "max_per_location": self.max_per_location,
            "effects": dict(self.effects),
            "description": self.description,
        }


@dataclass(frozen=True)
class NationProfile:
    """Starting stats and bonuses for a playable nation."""
    code: str
    name: str
    budget: float = 1_000_000
    science: float = 10_000
    population: float = 500_000_000
    budget_multiplier: float = 1.0
    science_multiplier: float = 1.0

    @property
    def starting_stocks(self) -> Dict[str, float]:
        return {"budget": self.budget, "science": self.science, "population": self.population}

    @property
    def starting_multipliers(self) -> Dict[str, float]:
        return {"budget": self.budget_multiplier, "science": self.science_multiplier}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NationProfile":
        return cls(
            code=data["code"],
            name=data.get("name", data["code"]),
            budget=float(data.get("budget", data.get("starting_budget", 1_000_000))),
            science=float(data.get("science", data.get("starting_science", 10_000))),
            population=float(data.get("population", data.get("starting_population", 500_000_000))),
            budget_multiplier=float(data.get("budget_multiplier", 1.0)),
            science_multiplier=float(data.get("science_multiplier", 1.0)),
        )


class RouteTable:
    """
    Symmetric travel durations (simulation years) between location pairs.

    Unknown pairs fall back to a baseline duration rather than being
    rejected.
    """

    def __init__(self, durations: Optional[Mapping[Tuple[str, str], float]] = None,
                 default_years: float = ENGINE.baseline_travel_years):
        self.default_years = default_years
        self._durations: Dict[FrozenSet[str], float] = {}
        for (a, b), years in (durations or {}).items():
            self.set(a, b, years)

    def set(self, a: str, b: str, years: float):
        if years < 0:
            raise ValueError(f"Negative travel time for {a}-{b}: {years}")
        self._durations[frozenset((a, b))] = float(years)

    def get(self, a: str, b: str) -> float:
        return self._durations.get(frozenset((a, b)), self.default_years)

    def has_route(self, a: str, b: str) -> bool:
        return frozenset((a, b)) in self._durations

    def to_dict(self) -> Dict[str, float]:
        return {"-".join(sorted(pair)): years for pair, years in self._durations.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, float],
                  default_years: float = ENGINE.baseline_travel_years) -> "RouteTable":
        table = cls(default_years=default_years)
        for route, years in data.items():
            a, _, b = route.partition("-")
            table.set(a, b, years)
        return table

    def __len__(self) -> int:
        return len(self._durations)


@dataclass
class Catalog:
    """Everything the core reads from the catalog collaborator."""
    building_types: Dict[str, BuildingType]
    nations: Dict[str, NationProfile]
    routes: RouteTable
    mission_costs: Dict[str, Dict[str, float]]
    default_mission_cost: Dict[str, float]
    locations: List[str]
    colonizable: List[str] = field(default_factory=list)
    arrival_rewards: Dict[str, Dict[str, float]] = field(default_factory=dict)
    default_nation: str = "ESA"
    source: str = "builtin"

    def building_type(self, code: str) -> Optional[BuildingType]:
        return self.building_types.get(code)

    def nation(self, code: Optional[str]) -> NationProfile:
        """Nation by code, falling back to the default nation."""
        if code in self.nations:
            return self.nations[code]
        return self.nations[self.default_nation]

    def mission_cost(self, destination: str) -> Dict[str, float]:
        return dict(self.mission_costs.get(destination, self.default_mission_cost))

    def is_location(self, name: str) -> bool:
        return name in self.locations
