"""
Tests for gameplay layers:
- Scheduled events and their multiplier effects
- Colonization registry
- Metrics collection
"""

import json

import pytest

from futury.core.ledger import ResourceLedger
from futury.core.missions import MissionType
from futury.simulation.colonization import ColonizationRegistry
from futury.simulation.events import (
    EventScheduler,
    GameEventType,
    ScheduledEvent,
    create_sample_events,
)
from futury.simulation.metrics import MetricsCollector


@pytest.fixture
def scheduler():
    ledger = ResourceLedger()
    ledger.initialize()
    return EventScheduler(ledger)


# =============================================================================
# SCHEDULED EVENT TESTS
# =============================================================================

class TestEventScheduler:

    def test_sample_events(self, scheduler):
        events = create_sample_events(scheduler, 2100)

        assert [e.event_type for e in events] == [
            GameEventType.TUTORIAL, GameEventType.TECH, GameEventType.RANDOM, GameEventType.MISSION,
        ]
        assert [e.trigger_year for e in events] == pytest.approx([2100.1, 2101, 2102, 2103])
        assert events[3].data["mission_id"] == "ASTEROID_2103"

    def test_triggers_exactly_once(self, scheduler):
        create_sample_events(scheduler, 2100)

        assert scheduler.process(2100.05) == []
        triggered = scheduler.process(2100.2)
        assert [e.title for e in triggered] == ["First Mission Available"]
        assert scheduler.process(2100.6) == []
        assert len(scheduler.pending()) == 3

    def test_catch_up_triggers_in_order(self, scheduler):
        create_sample_events(scheduler, 2100)
        triggered = scheduler.process(2101.5)
        assert [e.event_type for e in triggered] == [GameEventType.TUTORIAL, GameEventType.TECH]

    def test_budget_crisis_applies_and_reverts(self, scheduler):
        create_sample_events(scheduler, 2100)
        ledger = scheduler.ledger

        scheduler.process(2102.0)
        assert ledger.multiplier("budget") == pytest.approx(0.8)
        assert [e.title for e in scheduler.active()] == ["Budget Crisis"]

        scheduler.process(2102.9)
        assert ledger.multiplier("budget") == pytest.approx(0.8)

        triggered = scheduler.process(2103.0)
        assert ledger.multiplier("budget") == pytest.approx(1.0)
        assert scheduler.active() == []
        assert [e.event_type for e in triggered] == [GameEventType.MISSION]

    def test_unknown_effect_resource_ignored(self, scheduler):
        scheduler.schedule(2100, GameEventType.RANDOM,
                           {"title": "Morale Boost", "effect": "morale_boost", "value": 0.5})
        triggered = scheduler.process(2100)

        assert len(triggered) == 1
        assert not triggered[0].active
        assert scheduler.ledger.multiplier("budget") == 1.0

    def test_cancel(self, scheduler):
        event = scheduler.schedule(2105, GameEventType.RESOURCE, {"title": "Windfall"})
        assert scheduler.cancel(event.event_id)
        assert scheduler.pending() == []

        fired = scheduler.schedule(2100, GameEventType.RESOURCE)
        scheduler.process(2100)
        assert not scheduler.cancel(fired.event_id)

    def test_messages(self, scheduler):
        crisis = create_sample_events(scheduler, 2100)[2]
        assert crisis.message == "⚠️ Budget Crisis"
        assert scheduler.schedule(2100, GameEventType.TECH).title == "Tech Event"

    def test_state_round_trip(self, scheduler):
        create_sample_events(scheduler, 2100)
        scheduler.process(2102.5)
        state = json.loads(json.dumps(scheduler.get_state()))

        restored = EventScheduler(scheduler.ledger)
        restored.set_state(state)

        assert restored.get_state() == scheduler.get_state()
        assert restored.schedule(2200, GameEventType.TECH).event_id == "5"

    def test_history(self, scheduler):
        create_sample_events(scheduler, 2100)
        scheduler.process(2101.0)
        assert [h["event_type"] for h in scheduler.event_history] == ["TUTORIAL", "TECH"]


def test_scheduled_event_effect_resource():
    event = ScheduledEvent("1", 2100, GameEventType.RANDOM,
                           {"effect": "science_surge", "value": 0.1, "duration": 2})
    assert event.effect_resource == "science"
    assert event.end_year == 2102

    assert ScheduledEvent("2", 2100, GameEventType.RANDOM, {"effect": "science_surge"}).effect_resource is None


# =============================================================================
# COLONIZATION TESTS
# =============================================================================

class TestColonization:

    def test_home_is_colonized(self):
        registry = ColonizationRegistry(["Mars", "Moon"])
        assert registry.is_colonized("Earth")
        assert registry.is_explored("Earth")
        assert not registry.is_explored("Mars")

    def test_exploration_arrival(self):
        registry = ColonizationRegistry(["Mars", "Moon"])
        outcome = registry.handle_arrival("Jupiter", colonization=False, year=2105.5)

        assert outcome.newly_explored
        assert not outcome.colonized
        assert not registry.handle_arrival("Jupiter", colonization=False, year=2106).newly_explored

    def test_colonization_arrival(self):
        registry = ColonizationRegistry(["Mars", "Moon"])
        outcome = registry.handle_arrival("Mars", colonization=True, year=2102.5)

        assert outcome.colonized
        colony = registry.colonies["Mars"]
        assert colony.population == 50
        assert colony.founded_year == 2102.5

    def test_non_colonizable(self):
        registry = ColonizationRegistry(["Mars", "Moon"])
        outcome = registry.handle_arrival("Saturn", colonization=True, year=2110)

        assert not outcome.colonized
        assert "cannot be colonized" in outcome.reason
        assert registry.is_explored("Saturn")

    def test_second_colonization_rejected(self):
        registry = ColonizationRegistry(["Mars"])
        registry.colonize("Mars", 2102)
        assert registry.colonize("Mars", 2104) is None
        assert registry.colonies["Mars"].founded_year == 2102

    def test_state_round_trip(self):
        registry = ColonizationRegistry(["Mars", "Moon"])
        registry.handle_arrival("Moon", colonization=True, year=2100.2)
        registry.mark_explored("Venus", 2101)

        restored = ColonizationRegistry(["Mars", "Moon"])
        restored.set_state(json.loads(json.dumps(registry.get_state())))

        assert restored.get_state() == registry.get_state()
        assert restored.get_status()["colonists"] == 50


# =============================================================================
# METRICS TESTS
# =============================================================================

class TestMetrics:

    def test_counters_follow_session(self, sim, fake_time):
        sim.request_mission_launch("Moon", MissionType.COLONIZATION)
        sim.request_construction_start("FARM_COMPLEX", "Earth")
        sim.request_mission_launch("Pluto")

        fake_time.advance_years(0.5)
        sim.tick()
        fake_time.advance_years(0.5)
        sim.tick()

        counters = sim.metrics.counters
        assert counters.missions_launched == 1
        assert counters.missions_arrived == 1
        assert counters.colonies_founded == 1
        assert counters.buildings_started == 1
        assert counters.buildings_completed == 1
        assert counters.actions_rejected == 1

    def test_resource_history(self, sim, fake_time):
        for _ in range(3):
            fake_time.advance_years(0.1)
            sim.tick()

        assert len(sim.metrics.resource_series("budget")) == 3
        assert sim.metrics.resource_change("budget") == pytest.approx(250_000 * 1.05 * 0.2)

        summary = sim.metrics.get_summary()
        assert summary["ticks"] == 3
        assert summary["first_year"] == pytest.approx(2100.1)

    def test_history_is_capped(self, sim):
        sim.metrics = MetricsCollector(max_samples=2)
        for _ in range(5):
            sim.tick()

        assert len(sim.metrics.history) == 2
        assert sim.metrics.ticks == 5

    def test_export_json(self, sim, tmp_path):
        sim.tick()
        path = tmp_path / "metrics.json"
        sim.metrics.export_json(str(path))

        data = json.loads(path.read_text())
        assert data["ticks"] == 1
        assert len(data["history"]) == 1
