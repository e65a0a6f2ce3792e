"""
FUTURY - Scheduled Game Events
Year-triggered narrative and economic events.

Event categories:
- TUTORIAL: onboarding milestones
- TECH: research breakthroughs
- MISSION: limited-time mission opportunities
- RANDOM: crises and windfalls
- RESOURCE: stock changes
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
from enum import Enum
import logging

from ..config import RESOURCE_NAMES
from ..core.ledger import ResourceLedger

logger = logging.getLogger(__name__)


class GameEventType(Enum):
    TUTORIAL = "TUTORIAL"
    TECH = "TECH"
    MISSION = "MISSION"
    RANDOM = "RANDOM"
    RESOURCE = "RESOURCE"


EVENT_ICONS = {
    GameEventType.TUTORIAL: "📚",
    GameEventType.TECH: "🔬",
    GameEventType.MISSION: "🚀",
    GameEventType.RANDOM: "⚠️",
    GameEventType.RESOURCE: "💰",
}


@dataclass
class ScheduledEvent:
    """
    An event due at a simulation year.

    `data` carries the payload. An event whose `data` names an
    `effect` of the form "<resource>_<label>" with a numeric `value`
    shifts that resource's multiplier by `value` for `duration` years.
    """
    event_id: str
    trigger_year: float
    event_type: GameEventType
    data: Dict[str, Any] = field(default_factory=dict)

    # Runtime state
    triggered: bool = False
    active: bool = False

    @property
    def title(self) -> str:
        return self.data.get("title", f"{self.event_type.value.title()} Event")

    @property
    def message(self) -> str:
        return f"{EVENT_ICONS.get(self.event_type, '📡')} {self.title}"

    @property
    def effect_resource(self) -> Optional[str]:
        effect = self.data.get("effect")
        if not effect or "value" not in self.data:
            return None
        resource = effect.split("_", 1)[0]
        return resource if resource in RESOURCE_NAMES else None

    @property
    def duration(self) -> float:
        return float(self.data.get("duration", 0.0))

    @property
    def end_year(self) -> float:
        return self.trigger_year + self.duration

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "trigger_year": self.trigger_year,
            "event_type": self.event_type.value,
            "data": dict(self.data),
            "triggered": self.triggered,
            "active": self.active,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScheduledEvent":
        return cls(
            event_id=str(data["event_id"]),
            trigger_year=float(data["trigger_year"]),
            event_type=GameEventType(data["event_type"]),
            data=dict(data.get("data") or {}),
            triggered=bool(data.get("triggered", False)),
            active=bool(data.get("active", False)),
        )


class EventScheduler:
    """
    Triggers scheduled events once their year is reached.

    Each event triggers exactly once. Multiplier effects are applied to the
    ledger on trigger and reverted when their duration has elapsed.
    """

    def __init__(self, ledger: ResourceLedger):
        self.ledger = ledger
        self.events: List[ScheduledEvent] = []
        self.event_history: List[Dict] = []
        self._next_id = 1

    def schedule(self, trigger_year: float, event_type: GameEventType,
                 data: Optional[Dict[str, Any]] = None) -> ScheduledEvent:
        event = ScheduledEvent(
            event_id=str(self._next_id),
            trigger_year=trigger_year,
            event_type=event_type,
            data=dict(data or {}),
        )
        self._next_id += 1
        self.events.append(event)
        self.events.sort(key=lambda e: e.trigger_year)
        logger.info(f"Scheduled {event_type.value} '{event.title}' at year {trigger_year:.2f}")
        return event

    def cancel(self, event_id: str) -> bool:
        """Drop a pending event. Triggered events cannot be cancelled."""
        for event in self.events:
            if event.event_id == event_id and not event.triggered:
                self.events.remove(event)
                return True
        return False

    def process(self, current_year: float) -> List[ScheduledEvent]:
        """
        Trigger due events and expire finished effects.

        Returns:
            Events triggered by this call, in trigger-year order.
        """
        triggered = []

        for event in self.events:
            if event.triggered or event.trigger_year > current_year:
                continue
            self._trigger_event(event, current_year)
            triggered.append(event)

        for event in self.events:
            if event.active and current_year >= event.end_year:
                self._deactivate_event(event)

        return triggered

    def _trigger_event(self, event: ScheduledEvent, current_year: float):
        event.triggered = True

        self.event_history.append({
            "year": current_year,
            "event_id": event.event_id,
            "event_type": event.event_type.value,
            "title": event.title,
        })

        logger.info(f"EVENT TRIGGERED: {event.message} (year {current_year:.2f})")

        resource = event.effect_resource
        if resource:
            delta = float(event.data["value"])
            self.ledger.apply_multiplier_delta(resource, delta)
            event.active = True
            logger.warning(f"{event.title}: {resource} multiplier {delta:+.0%} "
                           f"for {event.duration:.1f} years")

    def _deactivate_event(self, event: ScheduledEvent):
        event.active = False
        resource = event.effect_resource
        if resource:
            self.ledger.apply_multiplier_delta(resource, -float(event.data["value"]))
        logger.info(f"Event ended: {event.title}")

    # =========================================================================
    # QUERIES / PERSISTENCE
    # =========================================================================

    def pending(self) -> List[ScheduledEvent]:
        return [e for e in self.events if not e.triggered]

    def active(self) -> List[ScheduledEvent]:
        return [e for e in self.events if e.active]

    def get_state(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self.events]

    def set_state(self, state: List[Mapping[str, Any]]):
        """Restore events. Active effects are already folded into saved multipliers."""
        self.events = sorted((ScheduledEvent.from_dict(e) for e in state),
                             key=lambda e: e.trigger_year)
        numeric = [int(e.event_id) for e in self.events if e.event_id.isdigit()]
        self._next_id = max(numeric, default=0) + 1


def create_sample_events(scheduler: EventScheduler, start_year: float) -> List[ScheduledEvent]:
    """Seed the standard opening events for a new session."""
    return [
        scheduler.schedule(start_year + 0.1, GameEventType.TUTORIAL, {
            "title": "First Mission Available",
            "description": "Your space program is ready for its first mission!",
            "action": "UNLOCK_MISSIONS",
        }),
        scheduler.schedule(start_year + 1, GameEventType.TECH, {
            "title": "Research Breakthrough",
            "description": "Scientists have made a breakthrough in propulsion technology!",
            "tech_id": "PROPULSION_BOOST_1",
            "bonus": "+10% mission speed",
        }),
        scheduler.schedule(start_year + 2, GameEventType.RANDOM, {
            "title": "Budget Crisis",
            "description": "Global economic downturn affects space program funding.",
            "effect": "budget_penalty",
            "value": -0.2,
            "duration": 1.0,
        }),
        scheduler.schedule(start_year + 3, GameEventType.MISSION, {
            "title": "Special Mission Opportunity",
            "description": "A unique asteroid is passing near Mars. Limited time mission available!",
            "mission_id": f"ASTEROID_{int(start_year) + 3}",
            "expires": start_year + 3.2,
        }),
    ]
