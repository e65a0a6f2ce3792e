#!/usr/bin/env python3
"""
Run a demo FUTURY session and export its reports:
1. Session workbook (Excel)
2. Mission briefing (Word)
3. Session log (JSON)

Real time is simulated, so several game years pass in a few seconds.
"""

import logging
import os
import sys

from futury import Simulation, MissionType
from futury.reports import export_session_briefing, export_session_workbook

OUTPUT_DIR = os.environ.get("FUTURY_REPORT_DIR", "reports")

SECONDS_PER_TICK = 3600   # One real hour per tick
TOTAL_TICKS = 24 * 4      # Four simulation years


class SteppedTime:
    """Time source advanced by hand."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def run_demo_session(nation: str = "ESA") -> Simulation:
    clock = SteppedTime()
    sim = Simulation(time_source=clock)
    sim.new_session(nation)

    sim.request_construction_start("FARM_COMPLEX", "Earth")
    sim.request_mission_launch("Moon", MissionType.EXPLORATION)

    for _ in range(TOTAL_TICKS):
        clock.now += SECONDS_PER_TICK
        report = sim.update(clock.now)

        for mission in report.arrived_missions:
            print(f"  Year {report.year:.2f}: {mission.name} arrived")
        for building in report.completed_buildings:
            print(f"  Year {report.year:.2f}: {building.name} completed on {building.location}")
        for event in report.triggered_events:
            print(f"  Year {report.year:.2f}: {event.message}")

        # Expand once the budget allows it
        if sim.construction.can_start("RESEARCH_CENTER", "Earth") and \
                sim.construction.count("RESEARCH_CENTER", "Earth") == 0:
            sim.request_construction_start("RESEARCH_CENTER", "Earth")
        if not sim.colonization.is_colonized("Moon") and \
                not sim.missions.find("Moon", mission_type=MissionType.COLONIZATION) and \
                sim.ledger.can_afford(sim.mission_cost("Moon")):
            sim.request_mission_launch("Moon", MissionType.COLONIZATION)

    return sim


# ============================================================================
# MAIN
# ============================================================================
if __name__ == '__main__':
    logging.basicConfig(level=logging.WARNING)
    nation = sys.argv[1] if len(sys.argv) > 1 else "ESA"

    print("=" * 60)
    print(f"FUTURY demo session ({nation})")
    print("=" * 60)
    sim = run_demo_session(nation)

    os.makedirs(OUTPUT_DIR, exist_ok=True)
    workbook = export_session_workbook(sim, os.path.join(OUTPUT_DIR, "futury_session.xlsx"))
    briefing = export_session_briefing(sim, os.path.join(OUTPUT_DIR, "futury_briefing.docx"))
    log_path = os.path.join(OUTPUT_DIR, "futury_session.json")
    sim.export_log(log_path)

    print("\n" + "=" * 60)
    print("REPORTS CREATED")
    print("=" * 60)
    print(f"  {workbook}")
    print(f"  {briefing}")
    print(f"  {log_path}")
    print(f"\nFinal date: {sim.clock.format_game_date()}")
