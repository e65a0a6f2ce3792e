"""
FUTURY - Core Module
Clock, resource ledger, mission and construction lifecycles, and the
simulation engine that ties them together.
"""

from .clock import SimClock
from .registry import EntityRegistry
from .ledger import ResourceLedger, ResourceStock
from .missions import Mission, MissionLifecycle, MissionStatus, MissionType
from .construction import (
    BONUS_KEYS,
    BuildingInstance,
    BuildingStatus,
    ConstructionQueue,
    StartCheck,
    StartRejection,
)
from .simulation import ActionResult, RejectionReason, Simulation, TickReport

__all__ = [
    # Clock
    "SimClock",

    # Registry
    "EntityRegistry",

    # Ledger
    "ResourceLedger",
    "ResourceStock",

    # Missions
    "Mission",
    "MissionLifecycle",
    "MissionStatus",
    "MissionType",

    # Construction
    "BONUS_KEYS",
    "BuildingInstance",
    "BuildingStatus",
    "ConstructionQueue",
    "StartCheck",
    "StartRejection",

    # Simulation
    "ActionResult",
    "RejectionReason",
    "Simulation",
    "TickReport",
]
