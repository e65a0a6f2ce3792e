"""
FUTURY - Simulation Engine
Owns one clock, ledger, mission lifecycle and construction queue per
session and advances them in a fixed order each tick.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union, TYPE_CHECKING
from enum import Enum, auto
import json
import logging
import time

from .clock import SimClock
from .construction import BuildingInstance, ConstructionQueue
from .ledger import ResourceLedger
from .missions import Mission, MissionLifecycle, MissionStatus, MissionType
from .registry import EntityRegistry
from ..catalog import Catalog, NationProfile, default_catalog
from ..config import (
    EconomyConfig, EngineConfig, TimeConfig, ECONOMY, ENGINE, TIME, Resource,
)
from ..errors import InsufficientResources, PerLocationLimitReached, UnknownEntityType
from ..simulation.colonization import ColonizationRegistry
from ..simulation.events import EventScheduler, ScheduledEvent, create_sample_events
from ..simulation.metrics import MetricsCollector

if TYPE_CHECKING:
    from ..persistence.manager import SaveManager, SaveResult

logger = logging.getLogger(__name__)


# Building effect -> ledger resource
RATE_BONUSES = {
    "science_production": Resource.SCIENCE.value,
    "energy_production": Resource.ENERGY.value,
    "food_production": Resource.FOOD.value,
    "water_production": Resource.WATER.value,
    "population_growth_bonus": Resource.POPULATION.value,
}

MULTIPLIER_BONUSES = {
    "research_speed_bonus": Resource.SCIENCE.value,
    "efficiency_bonus": Resource.ENERGY.value,
}


class RejectionReason(Enum):
    """Why a user action was refused."""
    SESSION_NOT_STARTED = auto()
    UNKNOWN_TYPE = auto()
    UNKNOWN_LOCATION = auto()
    INSUFFICIENT_RESOURCES = auto()
    PER_LOCATION_LIMIT = auto()
    ALREADY_COLONIZED = auto()
    MISSION_IN_PROGRESS = auto()


@dataclass
class ActionResult:
    """Outcome of a user action. On failure nothing was mutated."""
    success: bool
    reason: Optional[RejectionReason] = None
    message: str = ""
    mission: Optional[Mission] = None
    building: Optional[BuildingInstance] = None
    costs: Dict[str, float] = field(default_factory=dict)
    missing: Dict[str, float] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def rejected(cls, reason: RejectionReason, message: str,
                 missing: Optional[Dict[str, float]] = None) -> "ActionResult":
        logger.warning(f"Action rejected ({reason.name}): {message}")
        return cls(False, reason, message, missing=dict(missing or {}))


@dataclass
class TickReport:
    """Transitions that happened during one tick. Each is reported once."""
    tick: int
    year: float
    elapsed_years: float
    arrived_missions: List[Mission] = field(default_factory=list)
    completed_buildings: List[BuildingInstance] = field(default_factory=list)
    triggered_events: List[ScheduledEvent] = field(default_factory=list)
    colonized: List[str] = field(default_factory=list)
    resources: Dict[str, float] = field(default_factory=dict)
    paused: bool = False

    @property
    def has_transitions(self) -> bool:
        return bool(self.arrived_missions or self.completed_buildings
                    or self.triggered_events or self.colonized)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tick": self.tick,
            "year": self.year,
            "elapsed_years": self.elapsed_years,
            "arrived_missions": [m.mission_id for m in self.arrived_missions],
            "completed_buildings": [b.building_id for b in self.completed_buildings],
            "triggered_events": [e.event_id for e in self.triggered_events],
            "colonized": list(self.colonized),
            "resources": dict(self.resources),
            "paused": self.paused,
        }


class Simulation:
    """
    Session orchestrator.

    Per tick:
    1. Clock tick
    2. Ledger accrual over the years elapsed since the previous tick
    3. Mission advance
    4. Construction advance, then building bonuses re-applied
    5. Arrival colonization and scheduled events
    6. Listener notification with the TickReport

    The host calls `update()` from its loop; ticks are gated to
    `tick_interval_s` of real time.
    """

    def __init__(self, catalog: Optional[Catalog] = None,
                 config: EngineConfig = ENGINE,
                 time_config: TimeConfig = TIME,
                 economy_config: EconomyConfig = ECONOMY,
                 time_source: Callable[[], float] = time.monotonic,
                 save_manager: Optional["SaveManager"] = None):
        self.config = config
        self.economy_config = economy_config
        self.catalog = catalog or default_catalog(config)
        self._now = time_source

        # Core components
        self.clock = SimClock(time_config, time_source)
        self.ledger = ResourceLedger(economy_config)
        self.missions = MissionLifecycle(EntityRegistry(prefix="M"), self.catalog.routes)
        self.construction = ConstructionQueue(EntityRegistry(prefix="B"), self.ledger,
                                              self.catalog.building_type)

        # Gameplay layers
        self.colonization = ColonizationRegistry(self.catalog.colonizable, config)
        self.events = EventScheduler(self.ledger)
        self.metrics = MetricsCollector()
        self.save_manager = save_manager

        self.nation: Optional[NationProfile] = None
        self.tick_count = 0
        self._last_year: Optional[float] = None
        self._last_update: Optional[float] = None
        self._last_autosave: Optional[float] = None

        # Callbacks
        self.listeners: List[Callable[[TickReport], None]] = []
        self.on_tick_complete: Optional[Callable] = None

    @property
    def started(self) -> bool:
        return self.clock.initialized

    @property
    def current_year(self) -> float:
        return self.clock.current_year

    def new_session(self, nation_code: Optional[str] = None,
                    epoch_year: Optional[float] = None,
                    current_year: Optional[float] = None,
                    sample_events: bool = True):
        """
        Start a fresh session.

        Unknown nation codes fall back to the catalog's default nation.

        Raises:
            InvalidTimeRange: Unusable epoch/current year.
        """
        if epoch_year is None:
            epoch_year = self.clock.config.default_start_year

        self.clock.init(epoch_year, current_year)

        self.nation = self.catalog.nation(nation_code)
        self.ledger.initialize(self.nation.starting_stocks, self.nation.starting_multipliers)

        self.missions.restore([])
        self.construction.restore([])
        self.colonization.reset()
        self.events.set_state([])
        self.metrics = MetricsCollector()

        if sample_events:
            create_sample_events(self.events, self.clock.epoch_year)

        self.tick_count = 0
        self.resync()

        logger.info(f"New session: {self.nation.name}, year {self.clock.current_year:.2f}")

    def resync(self):
        """Re-derive bonuses and restart accrual from the clock's current year."""
        self._apply_building_bonuses()
        self._last_year = self.clock.current_year
        self._last_update = None
        self._last_autosave = self._now()

    # =========================================================================
    # TICK
    # =========================================================================

    def update(self, now: Optional[float] = None) -> Optional[TickReport]:
        """Run a tick if at least `tick_interval_s` has passed since the last one."""
        if now is None:
            now = self._now()

        if self._last_update is not None and now - self._last_update < self.config.tick_interval_s:
            return None

        self._last_update = now
        report = self.tick()
        self._maybe_autosave(now)
        return report

    def tick(self) -> TickReport:
        """Execute one tick unconditionally."""
        if not self.started:
            raise RuntimeError("Simulation session not started")

        # 1. Clock
        previous = self._last_year if self._last_year is not None else self.clock.current_year
        year = self.clock.tick()
        elapsed = max(0.0, year - previous)
        self._last_year = year

        # 2. Resources
        self.ledger.advance(elapsed)

        # 3. Missions
        arrived = self.missions.advance(year)

        # 4. Construction
        completed = self.construction.advance(year)
        self._apply_building_bonuses()

        # 5. Colonization and scheduled events
        colonized = self._handle_arrivals(arrived, year)
        triggered = self.events.process(year)

        self.tick_count += 1
        report = TickReport(
            tick=self.tick_count,
            year=year,
            elapsed_years=elapsed,
            arrived_missions=arrived,
            completed_buildings=completed,
            triggered_events=triggered,
            colonized=colonized,
            resources=self.ledger.get_all(),
            paused=self.clock.paused,
        )

        logger.debug(f"Tick {self.tick_count}: year {year:.5f} (+{elapsed:.6f})")

        # 6. Notify
        self.metrics.record_tick(report)
        self._notify(report)
        return report

    def _handle_arrivals(self, arrived: List[Mission], year: float) -> List[str]:
        colonized = []
        for mission in arrived:
            outcome = self.colonization.handle_arrival(
                mission.destination, mission.mission_type == MissionType.COLONIZATION, year)
            if outcome.colonized:
                self.ledger.grant(self.catalog.arrival_rewards.get(mission.destination, {}))
                colonized.append(mission.destination)
            elif outcome.reason:
                logger.warning(f"{mission.name}: no colony founded ({outcome.reason})")
        return colonized

    def _apply_building_bonuses(self):
        """
        Push building effects into the ledger.

        The ledger holds one national stock per resource, so effects are
        summed over every location before being applied. Replaces the
        previous bonuses rather than adding to them.
        """
        totals = self.construction.total_bonuses()

        rate_bonuses: Dict[str, float] = {}
        for effect, resource in RATE_BONUSES.items():
            rate_bonuses[resource] = rate_bonuses.get(resource, 0.0) + totals[effect]

        multiplier_bonuses: Dict[str, float] = {}
        for effect, resource in MULTIPLIER_BONUSES.items():
            multiplier_bonuses[resource] = multiplier_bonuses.get(resource, 0.0) + totals[effect]

        self.ledger.set_building_bonuses(rate_bonuses, multiplier_bonuses)

    def _notify(self, report: TickReport):
        callbacks = [self.on_tick_complete] if self.on_tick_complete else []
        for listener in callbacks + list(self.listeners):
            try:
                listener(report)
            except Exception:
                # One faulty listener must not stall the session
                logger.exception(f"Tick listener {listener!r} failed")

    def add_listener(self, listener: Callable[[TickReport], None]):
        if listener not in self.listeners:
            self.listeners.append(listener)

    def remove_listener(self, listener: Callable[[TickReport], None]):
        if listener in self.listeners:
            self.listeners.remove(listener)

    def _maybe_autosave(self, now: float) -> Optional["SaveResult"]:
        if self.save_manager is None or self.config.autosave_interval_s <= 0:
            return None
        if self._last_autosave is not None and now - self._last_autosave < self.config.autosave_interval_s:
            return None

        self._last_autosave = now
        return self.save_manager.save(self, slot=self.save_manager.autosave_slot)

    # =========================================================================
    # USER ACTIONS
    # =========================================================================

    def _bonus(self, effect: str, cap: float) -> float:
        return min(cap, max(0.0, self.construction.total_bonuses()[effect]))

    def mission_cost(self, destination: str) -> Dict[str, float]:
        """Launch cost after building cost reductions."""
        reduction = self._bonus("mission_cost_reduction",
                                self.economy_config.max_mission_cost_reduction)
        return {k: v * (1 - reduction) for k, v in self.catalog.mission_cost(destination).items()}

    def mission_duration(self, origin: str, destination: str) -> float:
        """Travel time after building speed bonuses."""
        speed = self._bonus("launch_speed_bonus", self.economy_config.max_launch_speed_bonus)
        return self.missions.travel_time(origin, destination) * (1 - speed)

    def request_mission_launch(self, destination: str,
                               mission_type: Union[MissionType, str] = MissionType.EXPLORATION,
                               origin: Optional[str] = None,
                               name: Optional[str] = None) -> ActionResult:
        """Validate, pay for, and launch a mission."""
        if not self.started:
            return ActionResult.rejected(RejectionReason.SESSION_NOT_STARTED, "No active session")

        origin = origin or self.config.default_origin
        for location in (origin, destination):
            if not self.catalog.is_location(location):
                self.metrics.record_rejection()
                return ActionResult.rejected(RejectionReason.UNKNOWN_LOCATION,
                                             str(UnknownEntityType("location", location)))

        try:
            mission_type = MissionType(mission_type)
        except ValueError:
            self.metrics.record_rejection()
            return ActionResult.rejected(RejectionReason.UNKNOWN_TYPE,
                                         str(UnknownEntityType("mission type", str(mission_type))))

        if mission_type == MissionType.COLONIZATION:
            if self.colonization.is_colonized(destination):
                self.metrics.record_rejection()
                return ActionResult.rejected(RejectionReason.ALREADY_COLONIZED,
                                             f"{destination} is already colonized")
            if self.missions.find(destination, MissionStatus.TRAVELING, MissionType.COLONIZATION):
                self.metrics.record_rejection()
                return ActionResult.rejected(RejectionReason.MISSION_IN_PROGRESS,
                                             f"A colonization mission to {destination} is under way")

        costs = self.mission_cost(destination)
        if not self.ledger.can_afford(costs):
            self.metrics.record_rejection()
            missing = self.ledger.missing(costs)
            return ActionResult.rejected(RejectionReason.INSUFFICIENT_RESOURCES,
                                         str(InsufficientResources(missing)), missing)

        self.ledger.spend(costs)
        mission = self.missions.launch(origin, destination, mission_type,
                                       self.clock.current_year,
                                       duration=self.mission_duration(origin, destination),
                                       name=name)
        self.metrics.record_launch()

        return ActionResult(True, message=f"{mission.name} launched", mission=mission, costs=costs)

    def request_construction_start(self, type_code: str, location: str) -> ActionResult:
        """Validate, pay for, and start a building."""
        if not self.started:
            return ActionResult.rejected(RejectionReason.SESSION_NOT_STARTED, "No active session")

        if not self.catalog.is_location(location):
            self.metrics.record_rejection()
            return ActionResult.rejected(RejectionReason.UNKNOWN_LOCATION,
                                         str(UnknownEntityType("location", location)))

        try:
            building = self.construction.start(type_code, location, self.clock.current_year)
        except UnknownEntityType as e:
            reason, message, missing = RejectionReason.UNKNOWN_TYPE, str(e), {}
        except InsufficientResources as e:
            reason, message, missing = RejectionReason.INSUFFICIENT_RESOURCES, str(e), e.missing
        except PerLocationLimitReached as e:
            reason, message, missing = RejectionReason.PER_LOCATION_LIMIT, str(e), {}
        else:
            self.metrics.record_construction()
            building_type = self.catalog.building_type(type_code)
            return ActionResult(True, message=f"{building.name} construction started",
                                building=building, costs=building_type.costs)

        self.metrics.record_rejection()
        return ActionResult.rejected(reason, message, missing)

    # =========================================================================
    # CONTROL / STATUS
    # =========================================================================

    def pause(self):
        self.clock.pause()

    def resume(self):
        self.clock.resume()

    @property
    def paused(self) -> bool:
        return self.clock.paused

    def get_status(self) -> Dict:
        """Get current session status."""
        return {
            "nation": self.nation.code if self.nation else None,
            "tick": self.tick_count,
            "year": self.clock.year,
            "precise_year": self.clock.current_year,
            "date": self.clock.format_game_date() if self.started else None,
            "paused": self.clock.paused,
            "resources": self.ledger.get_all(),
            "missions": self.missions.get_status(),
            "buildings": {
                "total": len(self.construction.all_buildings()),
                "in_construction": len(self.construction.in_construction()),
            },
            "colonization": self.colonization.get_status(),
            "pending_events": len(self.events.pending()),
            "active_events": len(self.events.active()),
        }

    def get_final_report(self) -> Dict:
        return {
            "status": self.get_status(),
            "metrics": self.metrics.get_summary(),
            "missions": [m.to_dict() for m in self.missions.all_missions()],
            "buildings": [b.to_dict() for b in self.construction.all_buildings()],
            "event_history": self.events.event_history,
        }

    def export_log(self, filepath: str):
        """Export session report to a JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.get_final_report(), f, indent=2, default=str)

        logger.info(f"Session log exported to {filepath}")
