"""
FUTURY - Persistence Package
Session snapshots and save slots.
"""

from .state import STATE_VERSION, apply_game_state, build_game_state
from .manager import JsonFileBackend, SaveManager, SaveResult

__all__ = [
    "STATE_VERSION",
    "apply_game_state",
    "build_game_state",
    "JsonFileBackend",
    "SaveManager",
    "SaveResult",
]
