"""
FUTURY - Game State Snapshots
Converts a running session to and from a plain JSON-compatible dict.
"""

from typing import Any, Dict, Mapping, TYPE_CHECKING
import logging
import math

from ..core.construction import BuildingInstance
from ..core.missions import Mission
from ..errors import InvalidTimeRange, PersistenceError
from ..simulation.colonization import Colony
from ..simulation.events import ScheduledEvent

if TYPE_CHECKING:
    from ..core.simulation import Simulation

logger = logging.getLogger(__name__)


STATE_VERSION = 1

REQUIRED_KEYS = ("epoch_year", "current_year", "resources", "missions", "buildings")

RESOURCE_FIELDS = ("amount", "base_rate", "multiplier")


def build_game_state(sim: "Simulation") -> Dict[str, Any]:
    """Snapshot everything needed to resume the session."""
    return {
        "version": STATE_VERSION,
        "nation": sim.nation.code if sim.nation else None,
        "epoch_year": sim.clock.epoch_year,
        "current_year": sim.clock.current_year,
        "tick": sim.tick_count,
        "resources": sim.ledger.get_state(),
        "missions": [m.to_dict() for m in sim.missions.all_missions()],
        "buildings": [b.to_dict() for b in sim.construction.all_buildings()],
        "colonization": sim.colonization.get_state(),
        "events": sim.events.get_state(),
    }


def _parse_resources(entries: Mapping[str, Any]) -> Dict[str, Dict[str, float]]:
    """Convert saved ledger entries to finite floats. Unset fields are left out."""
    parsed = {}
    for name, entry in entries.items():
        values = {}
        for field_name in RESOURCE_FIELDS:
            if field_name not in entry:
                continue
            value = float(entry[field_name])
            if not math.isfinite(value):
                raise ValueError(f"{name}.{field_name} is not finite")
            values[field_name] = value
        parsed[name] = values
    return parsed


def apply_game_state(sim: "Simulation", state: Mapping[str, Any]):
    """
    Restore a session from `build_game_state` output.

    The clock resumes from the saved current year; no time passes
    between save and restore.

    Raises:
        PersistenceError: Missing keys or malformed entries. The session
            is left untouched in that case.
    """
    if not isinstance(state, Mapping):
        raise PersistenceError(f"Game state must be a mapping, got {type(state).__name__}")

    missing = [key for key in REQUIRED_KEYS if key not in state]
    if missing:
        raise PersistenceError(f"Game state missing keys: {', '.join(missing)}")

    version = state.get("version", STATE_VERSION)
    if not isinstance(version, int) or version > STATE_VERSION:
        raise PersistenceError(f"Unsupported game state version {version}")

    # Parse entities before touching the session
    try:
        resources = _parse_resources(state["resources"])
        missions = [Mission.from_dict(m) for m in state["missions"]]
        buildings = [BuildingInstance.from_dict(b) for b in state["buildings"]]
        colonization = state.get("colonization") or {}
        for colony in colonization.get("colonies", []):
            Colony.from_dict(colony)
        list(colonization.get("explored", []))
        for event in state.get("events") or []:
            ScheduledEvent.from_dict(event)
        tick = int(state.get("tick", 0))
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise PersistenceError(f"Malformed game state: {e}") from e

    try:
        sim.clock.init(state["epoch_year"], state["current_year"])
    except InvalidTimeRange as e:
        raise PersistenceError(f"Invalid saved years: {e}") from e

    sim.nation = sim.catalog.nation(state.get("nation"))
    sim.ledger.set_state(resources)
    sim.missions.restore(missions)
    sim.construction.restore(buildings)
    sim.colonization.set_state(colonization)
    sim.events.set_state(state.get("events") or [])
    sim.tick_count = tick
    sim.resync()

    logger.info(f"Game state restored: year {sim.clock.current_year:.4f}, "
                f"{len(missions)} missions, {len(buildings)} buildings")
