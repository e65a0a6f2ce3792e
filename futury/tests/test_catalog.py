"""
Test: Catalog
Built-in data, JSON parsing, remote client failures, and the fallback.
"""

import json
import logging
from urllib.error import HTTPError, URLError

import pytest

from futury.catalog import (
    BuildingType,
    CatalogClient,
    NationProfile,
    RouteTable,
    catalog_from_dict,
    default_catalog,
    load_catalog,
    load_catalog_file,
)
from futury.catalog import client as client_module
from futury.errors import CatalogUnavailable


class FakeResponse:

    def __init__(self, payload):
        self._body = json.dumps(payload).encode("utf-8")

    def read(self):
        return self._body


class TestDefaultCatalog:

    def test_contents(self, catalog):
        assert set(catalog.building_types) == {
            "RESEARCH_CENTER", "SPACE_PORT", "ENERGY_PLANT", "FARM_COMPLEX",
        }
        assert set(catalog.nations) == {"USA", "China", "Russia", "ESA"}
        assert catalog.colonizable == ["Mars", "Moon"]
        assert catalog.source == "builtin"

    def test_unknown_nation_falls_back(self, catalog):
        assert catalog.nation("ATLANTIS").code == "ESA"
        assert catalog.nation(None).code == "ESA"
        assert catalog.nation("USA").budget == 1_200_000

    def test_mission_costs(self, catalog):
        assert catalog.mission_cost("Mars")["budget"] == 500_000
        assert catalog.mission_cost("Mercury") == catalog.default_mission_cost

        cost = catalog.mission_cost("Mars")
        cost["budget"] = 0
        assert catalog.mission_cost("Mars")["budget"] == 500_000

    def test_calls_return_independent_tables(self):
        first = default_catalog()
        first.mission_costs["Mars"]["budget"] = 1
        assert default_catalog().mission_costs["Mars"]["budget"] == 500_000


class TestModels:

    def test_route_table(self):
        routes = RouteTable({("Earth", "Mars"): 2.5}, default_years=0.1)
        assert routes.get("Mars", "Earth") == 2.5
        assert routes.has_route("Mars", "Earth")
        assert routes.get("Earth", "Pluto") == 0.1
        assert not routes.has_route("Earth", "Pluto")

        restored = RouteTable.from_dict(routes.to_dict())
        assert restored.get("Earth", "Mars") == 2.5
        assert len(restored) == 1

    def test_route_table_rejects_negative(self):
        with pytest.raises(ValueError):
            RouteTable({("Earth", "Mars"): -1})

    def test_building_type_aliases(self):
        building = BuildingType.from_dict({
            "building_code": "MINE",
            "name": "Mine",
            "category": "PRODUCTION",
            "budget_cost": "250000",
            "construction_time_years": 1.5,
            "effects": {"max_per_planet": 4, "energy_production": 10},
        })
        assert building.code == "MINE"
        assert building.max_per_location == 4
        assert building.construction_years == 1.5
        assert building.effects == {"energy_production": 10.0}
        assert building.costs == {"budget": 250_000, "materials": 0, "energy": 0}

    def test_building_type_round_trip(self, catalog):
        port = catalog.building_type("SPACE_PORT")
        assert BuildingType.from_dict(port.to_dict()) == port

    def test_nation_from_dict(self):
        nation = NationProfile.from_dict({"code": "IND", "starting_budget": 900_000})
        assert nation.name == "IND"
        assert nation.starting_stocks["budget"] == 900_000
        assert nation.starting_multipliers == {"budget": 1.0, "science": 1.0}


class TestCatalogFromDict:

    def test_missing_sections_use_defaults(self):
        catalog = catalog_from_dict({}, source="test")
        assert set(catalog.building_types) == set(default_catalog().building_types)
        assert catalog.source == "test"

    def test_effects_data_json_string(self):
        catalog = catalog_from_dict({
            "buildings": [{
                "code": "DOME",
                "name": "Habitat Dome",
                "category": "HOUSING",
                "effects_data": '{"population_growth_bonus": 0.01}',
            }],
        })
        assert list(catalog.building_types) == ["DOME"]
        assert catalog.building_type("DOME").effects == {"population_growth_bonus": 0.01}

    def test_default_nation_must_exist(self):
        catalog = catalog_from_dict({"nations": [{"code": "JPN", "name": "Japan"}]})
        assert catalog.default_nation == "JPN"
        assert catalog.nation("ESA").code == "JPN"

    def test_travel_times(self):
        catalog = catalog_from_dict({"travel_times": {"Earth-Ceres": 4.0}})
        assert catalog.routes.get("Ceres", "Earth") == 4.0
        assert catalog.routes.get("Earth", "Mars") == catalog.routes.default_years


class TestCatalogClient:

    def test_fetch_catalog(self, monkeypatch):
        responses = {
            "/api/buildings": [{"code": "DOME", "name": "Dome", "category": "HOUSING"}],
            "/api/nations": [{"code": "USA", "name": "United States"}],
            "/api/routes": {"travel_times": {"Earth-Mars": 2.0}, "locations": ["Earth", "Mars"]},
        }
        client = CatalogClient("http://catalog.test")
        monkeypatch.setattr(client, "_get", lambda endpoint: responses[endpoint])

        catalog = client.fetch_catalog()
        assert list(catalog.building_types) == ["DOME"]
        assert catalog.locations == ["Earth", "Mars"]
        assert catalog.routes.get("Mars", "Earth") == 2.0
        assert catalog.source == "http://catalog.test/"

    def test_envelope_unwrapped(self, monkeypatch):
        monkeypatch.setattr(client_module, "urlopen",
                            lambda request, timeout: FakeResponse({"success": True, "data": [1, 2]}))
        assert CatalogClient()._get("/api/buildings") == [1, 2]

    def test_envelope_failure(self, monkeypatch):
        monkeypatch.setattr(client_module, "urlopen",
                            lambda request, timeout: FakeResponse({"success": False, "error": "db down"}))
        with pytest.raises(CatalogUnavailable, match="db down"):
            CatalogClient()._get("/api/buildings")

    @pytest.mark.parametrize("error", [
        URLError("connection refused"),
        HTTPError("http://localhost:8000/api/buildings", 503, "Service Unavailable", {}, None),
        OSError("timed out"),
    ])
    def test_transport_errors(self, monkeypatch, error):
        def fail(request, timeout):
            raise error

        monkeypatch.setattr(client_module, "urlopen", fail)
        with pytest.raises(CatalogUnavailable):
            CatalogClient().fetch_catalog()

    def test_malformed_payload(self, monkeypatch):
        client = CatalogClient()
        monkeypatch.setattr(client, "_get", lambda endpoint: [{"name": "no code"}]
                            if endpoint == "/api/nations" else None)
        with pytest.raises(CatalogUnavailable):
            client.fetch_catalog()


class StubClient:

    def __init__(self, result=None):
        self.result = result

    def fetch_catalog(self):
        if self.result is None:
            raise CatalogUnavailable("offline")
        return self.result


class TestLoadCatalog:

    def test_no_client_uses_builtin(self):
        assert load_catalog().source == "builtin"

    def test_fallback_on_unavailable(self, caplog):
        with caplog.at_level(logging.WARNING):
            catalog = load_catalog(StubClient())

        assert catalog.source == "builtin"
        assert "using built-in defaults" in caplog.text

    def test_remote_catalog_used(self):
        remote = catalog_from_dict({}, source="remote")
        assert load_catalog(StubClient(remote)) is remote

    def test_load_catalog_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"mission_costs": {"Mars": {"budget": 1}}}))

        catalog = load_catalog_file(path)
        assert catalog.mission_cost("Mars") == {"budget": 1}
        assert catalog.source == str(path)

    def test_load_catalog_file_errors(self, tmp_path):
        with pytest.raises(CatalogUnavailable):
            load_catalog_file(tmp_path / "missing.json")

        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        with pytest.raises(CatalogUnavailable):
            load_catalog_file(bad)
