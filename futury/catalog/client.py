"""
FUTURY - Catalog Client
HTTP client for the catalog service (building types, nations, routes,
mission costs), plus the offline fallback.

Catalog API Endpoints:
- GET /api/buildings        - Building type definitions
- GET /api/nations          - Nation starting stats
- GET /api/routes           - Travel times, mission costs, locations
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union
import json
import logging
from urllib.parse import urljoin

# Standard library HTTP, as in the rest of the project
from urllib.request import Request, urlopen
from urllib.error import HTTPError, URLError

from .defaults import default_catalog
from .models import BuildingType, Catalog, NationProfile, RouteTable
from ..config import EngineConfig, ENGINE
from ..errors import CatalogUnavailable

logger = logging.getLogger(__name__)


class CatalogClient:
    """
    REST client for the catalog service.

    Every failure (network, HTTP status, malformed payload) surfaces as
    CatalogUnavailable so callers have a single fallback branch.
    """

    DEFAULT_BASE_URL = "http://localhost:8000"
    DEFAULT_TIMEOUT = 10  # seconds

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: int = DEFAULT_TIMEOUT,
                 config: EngineConfig = ENGINE):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.config = config

    def _get(self, endpoint: str) -> Any:
        """
        GET a JSON endpoint.

        Unwraps the `{"success": ..., "data": ...}` envelope used by the
        game backend.

        Raises:
            CatalogUnavailable: On any transport or payload error.
        """
        url = urljoin(self.base_url, endpoint.lstrip("/"))
        request = Request(url, headers={"Accept": "application/json"}, method="GET")

        try:
            response = urlopen(request, timeout=self.timeout)
            payload = json.loads(response.read().decode("utf-8") or "{}")

        except HTTPError as e:
            logger.error(f"HTTP {e.code} from catalog service: {url}")
            raise CatalogUnavailable(f"Catalog request failed: {e.code} {e.reason}") from e

        except URLError as e:
            logger.error(f"Failed to connect to catalog service: {e.reason}")
            raise CatalogUnavailable(f"Cannot connect to catalog at {url}: {e.reason}") from e

        except (OSError, ValueError) as e:
            raise CatalogUnavailable(f"Catalog request failed: {e}") from e

        if isinstance(payload, dict) and "success" in payload:
            if not payload.get("success"):
                raise CatalogUnavailable(f"Catalog service error: {payload.get('error', 'unknown')}")
            return payload.get("data")
        return payload

    def fetch_catalog(self) -> Catalog:
        """Fetch and assemble the full catalog."""
        buildings = self._get("/api/buildings")
        nations = self._get("/api/nations")
        routes = self._get("/api/routes")

        try:
            return catalog_from_dict({
                "buildings": buildings,
                "nations": nations,
                **(routes or {}),
            }, config=self.config, source=self.base_url)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CatalogUnavailable(f"Malformed catalog payload: {e}") from e


def catalog_from_dict(data: Dict[str, Any], config: EngineConfig = ENGINE,
                      source: str = "remote") -> Catalog:
    """
    Build a Catalog from its JSON shape.

    Sections missing from `data` are taken from the built-in catalog.
    """
    base = default_catalog(config)

    building_types = base.building_types
    if data.get("buildings"):
        building_types = {}
        for entry in data["buildings"]:
            if isinstance(entry.get("effects_data"), str):
                entry = {**entry, "effects": json.loads(entry["effects_data"] or "{}")}
            building = BuildingType.from_dict(entry)
            building_types[building.code] = building

    nations = base.nations
    if data.get("nations"):
        nations = {n.code: n for n in (NationProfile.from_dict(e) for e in data["nations"])}

    routes = base.routes
    if data.get("travel_times"):
        routes = RouteTable.from_dict(data["travel_times"], default_years=config.baseline_travel_years)

    default_nation = data.get("default_nation", base.default_nation)
    if default_nation not in nations:
        default_nation = next(iter(nations))

    return Catalog(
        building_types=building_types,
        nations=nations,
        routes=routes,
        mission_costs=data.get("mission_costs") or base.mission_costs,
        default_mission_cost=data.get("default_mission_cost") or base.default_mission_cost,
        locations=data.get("locations") or base.locations,
        colonizable=data.get("colonizable") or base.colonizable,
        arrival_rewards=data.get("arrival_rewards") or base.arrival_rewards,
        default_nation=default_nation,
        source=source,
    )


def load_catalog(client: Optional[CatalogClient] = None,
                 config: EngineConfig = ENGINE) -> Catalog:
    """
    Remote catalog if reachable, otherwise the built-in one.

    This is the only place the fallback decision is made.
    """
    if client is None:
        return default_catalog(config)

    try:
        catalog = client.fetch_catalog()
    except CatalogUnavailable as e:
        logger.warning(f"Catalog unavailable, using built-in defaults: {e}")
        return default_catalog(config)

    logger.info(f"Loaded catalog from {catalog.source}: "
                f"{len(catalog.building_types)} building types, {len(catalog.nations)} nations")
    return catalog


def load_catalog_file(path: Union[str, Path], config: EngineConfig = ENGINE) -> Catalog:
    """
    Read a catalog JSON file.

    Raises:
        CatalogUnavailable: File missing or malformed.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return catalog_from_dict(data, config=config, source=str(path))
    except (OSError, KeyError, TypeError, ValueError, AttributeError) as e:
        raise CatalogUnavailable(f"Cannot read catalog file {path}: {e}") from e
