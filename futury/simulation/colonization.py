"""
FUTURY - Colonization Registry
Tracks which locations have been explored and colonized.

A location is explored when any mission arrives there. A COLONIZATION
mission arriving at a colonizable location founds a colony.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set
import logging

from ..config import EngineConfig, ENGINE

logger = logging.getLogger(__name__)


@dataclass
class Colony:
    location: str
    founded_year: Optional[float] = None  # None for the home location
    population: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "founded_year": self.founded_year,
            "population": self.population,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Colony":
        founded = data.get("founded_year")
        return cls(
            location=data["location"],
            founded_year=None if founded is None else float(founded),
            population=int(data.get("population", 0)),
        )


@dataclass
class ArrivalOutcome:
    """What an arrival changed."""
    location: str
    newly_explored: bool = False
    colonized: bool = False
    reason: str = ""


class ColonizationRegistry:
    """Explored and colonized locations for one session."""

    def __init__(self, colonizable: List[str], config: EngineConfig = ENGINE):
        self.config = config
        self.colonizable = list(colonizable)
        self.explored: Set[str] = set()
        self.colonies: Dict[str, Colony] = {}
        self.reset()

    def reset(self):
        """Home location colonized, nothing explored."""
        self.explored = {self.config.home_location}
        self.colonies = {self.config.home_location: Colony(self.config.home_location)}

    def is_explored(self, location: str) -> bool:
        return location in self.explored

    def is_colonized(self, location: str) -> bool:
        return location in self.colonies

    def can_colonize(self, location: str) -> Optional[str]:
        """None if colonizable, otherwise the reason it is not."""
        if self.is_colonized(location):
            return f"{location} already colonized"
        if location not in self.colonizable:
            return f"{location} cannot be colonized"
        return None

    def mark_explored(self, location: str, year: float) -> bool:
        if location in self.explored:
            return False
        self.explored.add(location)
        logger.info(f"{location} explored in year {year:.2f}")
        return True

    def colonize(self, location: str, year: float, population: Optional[int] = None) -> Optional[Colony]:
        reason = self.can_colonize(location)
        if reason:
            logger.warning(f"Cannot colonize {location}: {reason}")
            return None

        if population is None:
            population = self.config.colonists_per_colony
        colony = Colony(location=location, founded_year=year, population=population)
        self.colonies[location] = colony
        self.explored.add(location)

        logger.info(f"{location} colonized in year {year:.2f} - population {population}")
        return colony

    def handle_arrival(self, destination: str, colonization: bool, year: float) -> ArrivalOutcome:
        outcome = ArrivalOutcome(location=destination)
        outcome.newly_explored = self.mark_explored(destination, year)

        if colonization:
            reason = self.can_colonize(destination)
            if reason:
                outcome.reason = reason
            else:
                outcome.colonized = self.colonize(destination, year) is not None

        return outcome

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def get_state(self) -> Dict[str, Any]:
        return {
            "explored": sorted(self.explored),
            "colonies": [c.to_dict() for c in self.colonies.values()],
        }

    def set_state(self, state: Mapping[str, Any]):
        self.reset()
        self.explored.update(state.get("explored", []))
        for entry in state.get("colonies", []):
            colony = Colony.from_dict(entry)
            self.colonies[colony.location] = colony
            self.explored.add(colony.location)

    def get_status(self) -> Dict:
        return {
            "explored": sorted(self.explored),
            "colonized": sorted(self.colonies),
            "colonists": sum(c.population for c in self.colonies.values()),
        }
