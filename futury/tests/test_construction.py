"""
Test: Construction Queue
Validation order, per-location caps, completion, and bonus aggregation.
"""

import pytest

from futury.catalog import BuildingType, default_catalog
from futury.core.construction import (
    BuildingInstance,
    BuildingStatus,
    ConstructionQueue,
    StartRejection,
)
from futury.core.ledger import ResourceLedger
from futury.core.registry import EntityRegistry
from futury.errors import InsufficientResources, PerLocationLimitReached, UnknownEntityType


LAB = BuildingType(
    code="LAB",
    name="Laboratory",
    category="RESEARCH",
    budget_cost=500_000,
    construction_years=1.0,
    max_per_location=1,
    effects={"science_production": 10, "cloaking_field": 3},
)


def make_queue(types=None, stocks=None):
    ledger = ResourceLedger()
    ledger.initialize(stocks)
    if types is None:
        types = default_catalog().building_types
    queue = ConstructionQueue(EntityRegistry(prefix="B"), ledger, types.get)
    return queue, ledger


class TestStart:

    def test_budget_scenario(self):
        queue, ledger = make_queue({"LAB": LAB}, {"budget": 1_000_000})

        first = queue.start("LAB", "Earth", 2100.0)
        assert first.status == BuildingStatus.BUILDING
        assert ledger.get("budget") == 500_000

        with pytest.raises(PerLocationLimitReached):
            queue.start("LAB", "Earth", 2100.0)
        assert ledger.get("budget") == 500_000
        assert queue.count("LAB", "Earth") == 1

    def test_cap_is_per_location(self):
        queue, _ = make_queue({"LAB": LAB}, {"budget": 1_000_000})
        queue.start("LAB", "Earth", 2100.0)
        queue.start("LAB", "Mars", 2100.0)
        assert queue.locations() == ["Earth", "Mars"]

    def test_completed_buildings_count_toward_cap(self):
        queue, _ = make_queue({"LAB": LAB}, {"budget": 1_000_000})
        queue.start("LAB", "Earth", 2100.0)
        queue.advance(2101.0)

        check = queue.can_start("LAB", "Earth")
        assert not check
        assert check.reason == StartRejection.PER_LOCATION_LIMIT

    def test_unknown_type(self):
        queue, ledger = make_queue()
        assert queue.can_start("DEATH_STAR", "Earth").reason == StartRejection.UNKNOWN_TYPE

        with pytest.raises(UnknownEntityType):
            queue.start("DEATH_STAR", "Earth", 2100.0)
        assert ledger.get("budget") == 1_000_000

    def test_insufficient_resources(self):
        queue, ledger = make_queue(stocks={"budget": 100})

        check = queue.can_start("FARM_COMPLEX", "Earth")
        assert check.reason == StartRejection.INSUFFICIENT_RESOURCES
        assert check.missing == {"budget": 149_900}

        with pytest.raises(InsufficientResources) as excinfo:
            queue.start("FARM_COMPLEX", "Earth", 2100.0)
        assert excinfo.value.missing == {"budget": 149_900}
        assert ledger.get("budget") == 100
        assert len(queue.all_buildings()) == 0

    def test_start_debits_all_costs(self):
        queue, ledger = make_queue()
        queue.start("RESEARCH_CENTER", "Earth", 2100.0)

        assert ledger.get("budget") == 500_000
        assert ledger.get("materials") == 300
        assert ledger.get("energy") == 950

    def test_effects_are_copied(self):
        queue, _ = make_queue({"LAB": LAB}, {"budget": 1_000_000})
        building = queue.start("LAB", "Earth", 2100.0)

        building.effects["science_production"] = 999
        assert LAB.effects["science_production"] == 10


class TestAdvance:

    def test_completion_reported_once(self):
        queue, _ = make_queue()
        farm = queue.start("FARM_COMPLEX", "Earth", 2100.0)

        assert queue.advance(2100.5) == []
        assert farm.progress == pytest.approx(0.5)
        assert queue.in_construction() == [farm]

        assert queue.advance(2101.0) == [farm]
        assert farm.status == BuildingStatus.COMPLETED
        assert farm.progress == 1.0

        assert queue.advance(2105.0) == []
        assert queue.in_construction() == []

    def test_completes_at_inexact_completion_year(self):
        beacon = BuildingType(code="BEACON", name="Beacon", category="RESEARCH",
                              budget_cost=1000, construction_years=0.1)
        queue, _ = make_queue({"BEACON": beacon})
        building = queue.start("BEACON", "Moon", 2100.3)

        assert queue.advance(building.completion_year) == [building]
        assert building.status == BuildingStatus.COMPLETED
        assert building.progress == 1.0

    def test_completion_year(self):
        queue, _ = make_queue()
        port = queue.start("SPACE_PORT", "Earth", 2100.25)
        assert port.completion_year == 2103.25


class TestBonuses:

    def test_aggregate_completed_only(self):
        queue, _ = make_queue()
        queue.start("FARM_COMPLEX", "Earth", 2100.0)
        queue.advance(2101.0)
        queue.start("FARM_COMPLEX", "Earth", 2101.0)

        bonuses = queue.aggregate_bonuses("Earth")
        assert bonuses["food_production"] == 50
        assert bonuses["water_production"] == 30
        assert bonuses["population_growth_bonus"] == 0.02
        assert bonuses["science_production"] == 0

    def test_unknown_effects_ignored(self):
        queue, _ = make_queue({"LAB": LAB}, {"budget": 1_000_000})
        queue.start("LAB", "Earth", 2100.0)
        queue.advance(2101.0)

        bonuses = queue.aggregate_bonuses("Earth")
        assert "cloaking_field" not in bonuses
        assert bonuses["science_production"] == 10

    def test_aggregate_is_per_location(self):
        queue, _ = make_queue({"LAB": LAB}, {"budget": 1_000_000})
        queue.start("LAB", "Earth", 2100.0)
        queue.start("LAB", "Mars", 2100.0)
        queue.advance(2101.0)

        assert queue.aggregate_bonuses("Earth")["science_production"] == 10
        assert queue.aggregate_bonuses("Moon")["science_production"] == 0
        assert queue.total_bonuses()["science_production"] == 20

    def test_aggregate_is_pure(self):
        queue, _ = make_queue()
        queue.start("FARM_COMPLEX", "Earth", 2100.0)
        queue.advance(2101.0)
        assert queue.aggregate_bonuses("Earth") == queue.aggregate_bonuses("Earth")


def test_instance_round_trip():
    queue, _ = make_queue()
    farm = queue.start("FARM_COMPLEX", "Moon", 2100.0)
    queue.advance(2100.4)

    restored = BuildingInstance.from_dict(farm.to_dict())
    assert restored.to_dict() == farm.to_dict()
    assert queue.buildings_at("Moon") == [farm]
    assert queue.completed_count("FARM_COMPLEX", "Moon") == 0
