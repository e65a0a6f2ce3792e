"""
FUTURY - Construction Queue
Building construction, completion, and production bonuses.

State machine: BUILDING -> COMPLETED (terminal).
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional
from enum import Enum, auto
import logging

from .ledger import ResourceLedger
from .registry import EntityRegistry
from ..catalog.models import BuildingType
from ..errors import InsufficientResources, PerLocationLimitReached, UnknownEntityType

logger = logging.getLogger(__name__)


# Effect keys that contribute to bonuses; anything else is ignored
BONUS_KEYS = (
    "science_production",
    "energy_production",
    "food_production",
    "water_production",
    "mission_cost_reduction",
    "mission_capacity",
    "research_speed_bonus",
    "efficiency_bonus",
    "population_growth_bonus",
    "launch_speed_bonus",
)


class BuildingStatus(Enum):
    BUILDING = "BUILDING"
    COMPLETED = "COMPLETED"


class StartRejection(Enum):
    """Why a construction cannot start."""
    UNKNOWN_TYPE = auto()
    INSUFFICIENT_RESOURCES = auto()
    PER_LOCATION_LIMIT = auto()


@dataclass
class StartCheck:
    allowed: bool
    reason: Optional[StartRejection] = None
    message: str = ""
    missing: Dict[str, float] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.allowed


@dataclass
class BuildingInstance:
    """A building under construction or completed at one location."""
    building_id: str
    type_code: str
    name: str
    location: str
    start_year: float
    duration_years: float
    effects: Dict[str, float]  # Frozen copy of the type's effects
    status: BuildingStatus = BuildingStatus.BUILDING
    progress: float = 0.0

    @property
    def completion_year(self) -> float:
        return self.start_year + self.duration_years

    @property
    def is_completed(self) -> bool:
        return self.status == BuildingStatus.COMPLETED

    def progress_at(self, year: float) -> float:
        if self.duration_years <= 0:
            return 1.0
        return min(1.0, max(0.0, (year - self.start_year) / self.duration_years))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "building_id": self.building_id,
            "type_code": self.type_code,
            "name": self.name,
            "location": self.location,
            "start_year": self.start_year,
            "duration_years": self.duration_years,
            "effects": dict(self.effects),
            "status": self.status.value,
            "progress": self.progress,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuildingInstance":
        return cls(
            building_id=str(data["building_id"]),
            type_code=data["type_code"],
            name=data.get("name", data["type_code"]),
            location=data["location"],
            start_year=float(data["start_year"]),
            duration_years=float(data["duration_years"]),
            effects={k: float(v) for k, v in (data.get("effects") or {}).items()},
            status=BuildingStatus(data.get("status", BuildingStatus.BUILDING.value)),
            progress=float(data.get("progress", 0.0)),
        )


class ConstructionQueue:
    """
    Starts and completes buildings under per-location caps.

    Completed buildings stay in the registry and feed bonus aggregation.
    """

    def __init__(self, registry: EntityRegistry[BuildingInstance], ledger: ResourceLedger,
                 building_types: Callable[[str], Optional[BuildingType]]):
        self.buildings = registry
        self.ledger = ledger
        self._lookup_type = building_types

    def count(self, type_code: str, location: str) -> int:
        """Instances of a type at a location, building or completed."""
        return len([
            b for b in self.buildings
            if b.type_code == type_code and b.location == location
        ])

    def can_start(self, type_code: str, location: str) -> StartCheck:
        building_type = self._lookup_type(type_code)
        if building_type is None:
            return StartCheck(False, StartRejection.UNKNOWN_TYPE,
                              f"Building type not found: {type_code}")

        costs = building_type.costs
        if not self.ledger.can_afford(costs):
            return StartCheck(False, StartRejection.INSUFFICIENT_RESOURCES,
                              "Insufficient resources", self.ledger.missing(costs))

        if self.count(type_code, location) >= building_type.max_per_location:
            return StartCheck(False, StartRejection.PER_LOCATION_LIMIT,
                              f"Maximum {building_type.max_per_location} {building_type.name} "
                              f"per location")

        return StartCheck(True)

    def start(self, type_code: str, location: str, current_year: float) -> BuildingInstance:
        """
        Debit the ledger and begin construction.

        Raises:
            UnknownEntityType, InsufficientResources, PerLocationLimitReached
        """
        check = self.can_start(type_code, location)
        if not check:
            if check.reason == StartRejection.UNKNOWN_TYPE:
                raise UnknownEntityType("building type", type_code)
            if check.reason == StartRejection.INSUFFICIENT_RESOURCES:
                raise InsufficientResources(check.missing)
            limit = self._lookup_type(type_code).max_per_location
            raise PerLocationLimitReached(type_code, location, limit)

        building_type = self._lookup_type(type_code)

        exact = self.ledger.spend(building_type.costs)
        if not exact:
            # Lenient: the start is honored with whatever was available
            logger.warning(f"{building_type.name}: cost debit clamped, starting anyway")

        building_id = self.buildings.new_id()
        instance = BuildingInstance(
            building_id=building_id,
            type_code=type_code,
            name=building_type.name,
            location=location,
            start_year=current_year,
            duration_years=building_type.construction_years,
            effects=dict(building_type.effects),
        )
        self.buildings.add(building_id, instance)

        logger.info(f"Construction started: {instance.name} on {location}, "
                    f"completion {instance.completion_year:.3f}")
        return instance

    def advance(self, current_year: float) -> List[BuildingInstance]:
        """
        Update progress of every BUILDING instance.

        Returns:
            Instances completed during this call, each reported once.
        """
        completed = []

        for building in self.buildings:
            if building.status != BuildingStatus.BUILDING:
                continue

            building.progress = max(building.progress, building.progress_at(current_year))

            if current_year >= building.completion_year or building.progress >= 1.0:
                building.status = BuildingStatus.COMPLETED
                building.progress = 1.0
                completed.append(building)
                logger.info(f"Construction completed: {building.name} on {building.location}")

        return completed

    def aggregate_bonuses(self, location: str) -> Dict[str, float]:
        """Sum recognized effects of completed buildings at a location."""
        bonuses = {key: 0.0 for key in BONUS_KEYS}

        for building in self.buildings:
            if building.location != location or not building.is_completed:
                continue
            for effect, value in building.effects.items():
                if effect in bonuses:
                    bonuses[effect] += value

        return bonuses

    def total_bonuses(self) -> Dict[str, float]:
        """Bonuses summed over every location."""
        totals = {key: 0.0 for key in BONUS_KEYS}
        for location in self.locations():
            for key, value in self.aggregate_bonuses(location).items():
                totals[key] += value
        return totals

    def restore(self, buildings: List[BuildingInstance]):
        self.buildings.clear()
        for building in buildings:
            self.buildings.add(building.building_id, building)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def buildings_at(self, location: str) -> List[BuildingInstance]:
        return [b for b in self.buildings if b.location == location]

    def in_construction(self) -> List[BuildingInstance]:
        return [b for b in self.buildings if b.status == BuildingStatus.BUILDING]

    def completed_count(self, type_code: str, location: str) -> int:
        return len([
            b for b in self.buildings_at(location)
            if b.type_code == type_code and b.is_completed
        ])

    def locations(self) -> List[str]:
        seen = []
        for building in self.buildings:
            if building.location not in seen:
                seen.append(building.location)
        return seen

    def get(self, building_id: str) -> Optional[BuildingInstance]:
        return self.buildings.get(building_id)

    def all_buildings(self) -> List[BuildingInstance]:
        return self.buildings.values()
