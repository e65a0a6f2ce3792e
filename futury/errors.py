"""
FUTURY - Errors
Exception taxonomy shared by the simulation core.
"""

from typing import Dict, Optional


class FuturyError(Exception):
    """Base class for simulation errors."""
    pass


class InvalidTimeRange(FuturyError, ValueError):
    """Clock initialized with unusable years. Fatal to session start."""
    pass


class UnknownEntityType(FuturyError):
    """Unrecognized building type or mission destination."""

    def __init__(self, kind: str, code: str):
        self.kind = kind
        self.code = code
        super().__init__(f"Unknown {kind}: {code}")


class InsufficientResources(FuturyError):
    """Action cannot be paid for. Nothing was mutated."""

    def __init__(self, missing: Optional[Dict[str, float]] = None):
        self.missing = dict(missing or {})
        detail = ", ".join(f"{k}: {v:.2f}" for k, v in self.missing.items())
        super().__init__(f"Insufficient resources ({detail})" if detail else "Insufficient resources")


class PerLocationLimitReached(FuturyError):
    """Building type already at its per-location maximum."""

    def __init__(self, type_code: str, location: str, limit: int):
        self.type_code = type_code
        self.location = location
        self.limit = limit
        super().__init__(f"Maximum {limit} {type_code} per location reached on {location}")


class CatalogUnavailable(FuturyError):
    """Remote catalog could not be fetched or parsed."""
    pass


class PersistenceError(FuturyError):
    """Save or load failed."""
    pass
