"""
FUTURY - Mission Lifecycle
Spacecraft missions traveling between two locations.

State machine: TRAVELING -> ARRIVED (terminal).
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Mapping, Optional
from enum import Enum
import logging

from .registry import EntityRegistry
from ..catalog.models import RouteTable

logger = logging.getLogger(__name__)


class MissionType(Enum):
    EXPLORATION = "EXPLORATION"
    COLONIZATION = "COLONIZATION"
    OTHER = "OTHER"


class MissionStatus(Enum):
    TRAVELING = "TRAVELING"
    ARRIVED = "ARRIVED"


@dataclass
class Mission:
    """A launched mission. Never deleted, only moved to ARRIVED."""
    mission_id: str
    name: str
    origin: str
    destination: str
    mission_type: MissionType
    launch_year: float
    arrival_year: float
    status: MissionStatus = MissionStatus.TRAVELING
    progress: float = 0.0

    @property
    def travel_years(self) -> float:
        return self.arrival_year - self.launch_year

    @property
    def is_active(self) -> bool:
        return self.status == MissionStatus.TRAVELING

    def progress_at(self, year: float) -> float:
        """Fraction of the trip covered at `year`, clamped to 0..1."""
        duration = self.travel_years
        if duration <= 0:
            return 1.0
        return min(1.0, max(0.0, (year - self.launch_year) / duration))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mission_type"] = self.mission_type.value
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Mission":
        return cls(
            mission_id=str(data["mission_id"]),
            name=data.get("name", ""),
            origin=data["origin"],
            destination=data["destination"],
            mission_type=MissionType(data.get("mission_type", MissionType.EXPLORATION.value)),
            launch_year=float(data["launch_year"]),
            arrival_year=float(data["arrival_year"]),
            status=MissionStatus(data.get("status", MissionStatus.TRAVELING.value)),
            progress=float(data.get("progress", 0.0)),
        )


class MissionLifecycle:
    """
    Creates, advances, and completes missions.

    Travel durations come from a symmetric route table; unknown pairs use
    the table's baseline duration.
    """

    def __init__(self, registry: EntityRegistry[Mission], routes: RouteTable):
        self.missions = registry
        self.routes = routes

    def travel_time(self, origin: str, destination: str) -> float:
        return self.routes.get(origin, destination)

    def launch(self, origin: str, destination: str, mission_type: MissionType,
               current_year: float, duration: Optional[float] = None,
               name: Optional[str] = None) -> Mission:
        """
        Create a TRAVELING mission departing at current_year.

        Resources must already have been debited by the caller.
        """
        if duration is None:
            duration = self.travel_time(origin, destination)
        if duration < 0:
            raise ValueError(f"Negative travel duration: {duration}")

        mission_id = self.missions.new_id()
        mission = Mission(
            mission_id=mission_id,
            name=name or f"Mission to {destination}",
            origin=origin,
            destination=destination,
            mission_type=mission_type,
            launch_year=current_year,
            arrival_year=current_year + duration,
        )
        self.missions.add(mission_id, mission)

        logger.info(f"Mission launched: {mission.name} ({origin} -> {destination}), "
                    f"ETA {mission.arrival_year:.3f} ({self.format_travel_time(duration)})")
        return mission

    def advance(self, current_year: float) -> List[Mission]:
        """
        Update progress of every TRAVELING mission.

        Returns:
            Missions that arrived during this call. A mission is reported
            in exactly one batch.
        """
        arrived = []

        for mission in self.missions:
            if mission.status != MissionStatus.TRAVELING:
                continue

            mission.progress = max(mission.progress, mission.progress_at(current_year))

            if current_year >= mission.arrival_year:
                mission.status = MissionStatus.ARRIVED
                mission.progress = 1.0
                arrived.append(mission)
                logger.info(f"Mission arrived: {mission.name} at {mission.destination} "
                            f"(year {current_year:.3f})")

        return arrived

    def restore(self, missions: List[Mission]):
        """Replace all missions with restored ones."""
        self.missions.clear()
        for mission in missions:
            self.missions.add(mission.mission_id, mission)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def active_missions(self) -> List[Mission]:
        return [m for m in self.missions if m.is_active]

    def all_missions(self) -> List[Mission]:
        return self.missions.values()

    def get(self, mission_id: str) -> Optional[Mission]:
        return self.missions.get(mission_id)

    def find(self, destination: str, status: Optional[MissionStatus] = None,
             mission_type: Optional[MissionType] = None) -> List[Mission]:
        return [
            m for m in self.missions
            if m.destination == destination
            and (status is None or m.status == status)
            and (mission_type is None or m.mission_type == mission_type)
        ]

    @staticmethod
    def format_travel_time(years: float) -> str:
        """Real-time duration of a trip (1 year = 24 real hours)."""
        hours = years * 24
        if hours < 24:
            return f"{hours:.1f} hours"
        return f"{hours / 24:.1f} days"

    def get_status(self) -> Dict:
        missions = self.all_missions()
        return {
            "total": len(missions),
            "traveling": len([m for m in missions if m.is_active]),
            "arrived": len([m for m in missions if m.status == MissionStatus.ARRIVED]),
        }
