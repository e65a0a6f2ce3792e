"""
FUTURY - Save Manager
Saves and loads sessions through a pluggable storage backend.

Failures are logged and reported in a SaveResult; they never propagate
into the simulation tick.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union, TYPE_CHECKING
import json
import logging

from .state import apply_game_state, build_game_state
from ..errors import PersistenceError

if TYPE_CHECKING:
    from ..core.simulation import Simulation

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    success: bool
    slot: str
    action: str = "save"
    saved_at: Optional[str] = None
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.success


class JsonFileBackend:
    """One JSON file per save slot in a directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, slot: str) -> Path:
        if not slot or "/" in slot or "\\" in slot or slot.startswith("."):
            raise PersistenceError(f"Invalid save slot name: {slot!r}")
        return self.directory / f"{slot}.json"

    def write(self, slot: str, payload: Dict[str, Any]):
        path = self._path(slot)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Cannot write {path}: {e}") from e

    def read(self, slot: str) -> Dict[str, Any]:
        path = self._path(slot)
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            raise PersistenceError(f"No save in slot '{slot}'") from e
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Cannot read {path}: {e}") from e

    def exists(self, slot: str) -> bool:
        return self._path(slot).exists()

    def delete(self, slot: str) -> bool:
        path = self._path(slot)
        if not path.exists():
            return False
        path.unlink()
        return True

    def list_slots(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))


class SaveManager:
    """
    Session save/load on top of a backend.

    Each save is an envelope: `{"saved_at": <ISO time>, "game_state": {...}}`.
    """

    def __init__(self, backend: JsonFileBackend, autosave_slot: str = "autosave"):
        self.backend = backend
        self.autosave_slot = autosave_slot
        self.last_result: Optional[SaveResult] = None

    def save(self, sim: "Simulation", slot: str = "manual") -> SaveResult:
        saved_at = datetime.now().isoformat()
        try:
            self.backend.write(slot, {"saved_at": saved_at, "game_state": build_game_state(sim)})
        except PersistenceError as e:
            logger.error(f"Save to '{slot}' failed: {e}")
            result = SaveResult(False, slot, "save", error=str(e))
        else:
            logger.info(f"Game saved to '{slot}' at year {sim.clock.current_year:.4f}")
            result = SaveResult(True, slot, "save", saved_at=saved_at)

        self.last_result = result
        return result

    def load(self, sim: "Simulation", slot: str = "manual") -> SaveResult:
        try:
            envelope = self.backend.read(slot)
            if not isinstance(envelope, dict) or "game_state" not in envelope:
                raise PersistenceError(f"Slot '{slot}' holds no game state")
            apply_game_state(sim, envelope["game_state"])
        except PersistenceError as e:
            logger.error(f"Load from '{slot}' failed: {e}")
            result = SaveResult(False, slot, "load", error=str(e))
        else:
            logger.info(f"Game loaded from '{slot}'")
            result = SaveResult(True, slot, "load", saved_at=envelope.get("saved_at"))

        self.last_result = result
        return result

    def has_save(self, slot: str = "manual") -> bool:
        return self.backend.exists(slot)

    def delete(self, slot: str) -> bool:
        deleted = self.backend.delete(slot)
        if deleted:
            logger.info(f"Deleted save slot '{slot}'")
        return deleted
