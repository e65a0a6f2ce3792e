"""
FUTURY - Metrics Collection
Per-tick resource history and lifecycle counters for a session.

Key metrics tracked:
- Resource levels over simulation time
- Missions launched and arrived
- Buildings started and completed
- Colonies founded and events triggered
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, TYPE_CHECKING
import json
import logging

if TYPE_CHECKING:
    from ..core.simulation import TickReport

logger = logging.getLogger(__name__)


@dataclass
class LifecycleCounters:
    missions_launched: int = 0
    missions_arrived: int = 0
    buildings_started: int = 0
    buildings_completed: int = 0
    colonies_founded: int = 0
    events_triggered: int = 0
    actions_rejected: int = 0

    def to_dict(self) -> Dict[str, int]:
        return dict(self.__dict__)


@dataclass
class ResourceSample:
    tick: int
    year: float
    resources: Dict[str, float]


class MetricsCollector:
    """
    Records one sample per tick.

    History is capped at `max_samples`; older samples are dropped, totals
    are kept.
    """

    def __init__(self, max_samples: int = 10_000):
        self.max_samples = max_samples
        self.history: List[ResourceSample] = []
        self.counters = LifecycleCounters()
        self.ticks = 0
        self.first_year: Optional[float] = None

    def record_tick(self, report: "TickReport"):
        self.ticks += 1
        if self.first_year is None:
            self.first_year = report.year

        self.history.append(ResourceSample(report.tick, report.year, dict(report.resources)))
        if len(self.history) > self.max_samples:
            del self.history[0]

        self.counters.missions_arrived += len(report.arrived_missions)
        self.counters.buildings_completed += len(report.completed_buildings)
        self.counters.colonies_founded += len(report.colonized)
        self.counters.events_triggered += len(report.triggered_events)

    def record_launch(self):
        self.counters.missions_launched += 1

    def record_construction(self):
        self.counters.buildings_started += 1

    def record_rejection(self):
        self.counters.actions_rejected += 1

    def resource_series(self, resource: str) -> List[float]:
        return [s.resources.get(resource, 0.0) for s in self.history]

    def resource_change(self, resource: str) -> float:
        """Change between the first and last retained samples."""
        series = self.resource_series(resource)
        if len(series) < 2:
            return 0.0
        return series[-1] - series[0]

    def get_summary(self) -> Dict:
        last = self.history[-1] if self.history else None
        return {
            "ticks": self.ticks,
            "first_year": self.first_year,
            "last_year": last.year if last else None,
            "counters": self.counters.to_dict(),
            "final_resources": dict(last.resources) if last else {},
        }

    def export_json(self, filepath: str):
        data = self.get_summary()
        data["history"] = [s.__dict__ for s in self.history]

        with open(filepath, "w") as f:
            json.dump(data, f, indent=2, default=str)

        logger.info(f"Metrics exported to {filepath}")
