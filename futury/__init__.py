"""
FUTURY - Simulation Core
Continuous-time economy and mission simulation for a space-colonization
game.

One simulation year passes every 24 real hours. Missions travel between
solar-system locations, buildings produce bonuses, and colonies grow from
successful colonization missions.
"""

__version__ = "1.0.0"

from .config import (
    TIME,
    ECONOMY,
    ENGINE,
    TimeConfig,
    EconomyConfig,
    EngineConfig,
    Resource,
)

from .errors import (
    FuturyError,
    InvalidTimeRange,
    UnknownEntityType,
    InsufficientResources,
    PerLocationLimitReached,
    CatalogUnavailable,
    PersistenceError,
)

from .core import (
    SimClock,
    EntityRegistry,
    ResourceLedger,
    Mission,
    MissionLifecycle,
    MissionStatus,
    MissionType,
    BuildingInstance,
    BuildingStatus,
    ConstructionQueue,
    ActionResult,
    RejectionReason,
    Simulation,
    TickReport,
)

__all__ = [
    # Version info
    "__version__",

    # Config
    "TIME",
    "ECONOMY",
    "ENGINE",
    "TimeConfig",
    "EconomyConfig",
    "EngineConfig",
    "Resource",

    # Errors
    "FuturyError",
    "InvalidTimeRange",
    "UnknownEntityType",
    "InsufficientResources",
    "PerLocationLimitReached",
    "CatalogUnavailable",
    "PersistenceError",

    # Core classes
    "SimClock",
    "EntityRegistry",
    "ResourceLedger",
    "Mission",
    "MissionLifecycle",
    "MissionStatus",
    "MissionType",
    "BuildingInstance",
    "BuildingStatus",
    "ConstructionQueue",
    "ActionResult",
    "RejectionReason",
    "Simulation",
    "TickReport",
]
