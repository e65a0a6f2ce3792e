"""
FUTURY - Simulation Package
Gameplay layers around the core: colonization, scheduled events, metrics.
"""

from .colonization import ArrivalOutcome, Colony, ColonizationRegistry
from .events import EventScheduler, GameEventType, ScheduledEvent, create_sample_events
from .metrics import LifecycleCounters, MetricsCollector

__all__ = [
    "ArrivalOutcome",
    "Colony",
    "ColonizationRegistry",
    "EventScheduler",
    "GameEventType",
    "ScheduledEvent",
    "create_sample_events",
    "LifecycleCounters",
    "MetricsCollector",
]
