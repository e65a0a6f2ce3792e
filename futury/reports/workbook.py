"""
FUTURY - Session Workbook
Excel export of a session: resources, missions, buildings, history, events.
"""

from pathlib import Path
from typing import List, Sequence, Union, TYPE_CHECKING
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from ..config import RESOURCE_NAMES

if TYPE_CHECKING:
    from ..core.simulation import Simulation

logger = logging.getLogger(__name__)


HEADER_COLOR = "1F4E79"
TRAVELING_COLOR = "FFEB9C"
DONE_COLOR = "C6EFCE"

header_fill = PatternFill(start_color=HEADER_COLOR, end_color=HEADER_COLOR, fill_type="solid")
header_font = Font(bold=True, color="FFFFFF")
active_fill = PatternFill(start_color=TRAVELING_COLOR, end_color=TRAVELING_COLOR, fill_type="solid")
done_fill = PatternFill(start_color=DONE_COLOR, end_color=DONE_COLOR, fill_type="solid")
thin_border = Border(
    left=Side(style='thin'), right=Side(style='thin'),
    top=Side(style='thin'), bottom=Side(style='thin')
)


def _write_table(ws, title: str, headers: Sequence[str], rows: List[Sequence],
                 widths: Sequence[int] = ()):
    ws['A1'] = title
    ws['A1'].font = Font(bold=True, size=14)

    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=3, column=col, value=header)
        cell.fill = header_fill
        cell.font = header_font
        cell.border = thin_border

    for row_idx, row_data in enumerate(rows, 4):
        for col_idx, value in enumerate(row_data, 1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            cell.border = thin_border

    for col, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(col)].width = width


def _shade_status(ws, status_column: int, row_count: int, done_value: str):
    for row in range(4, 4 + row_count):
        done = ws.cell(row=row, column=status_column).value == done_value
        for cell in ws[row]:
            cell.fill = done_fill if done else active_fill


def build_session_workbook(sim: "Simulation") -> Workbook:
    wb = Workbook()
    nation = sim.nation.name if sim.nation else "-"

    # ===== SHEET 1: Resources =====
    ws1 = wb.active
    ws1.title = "Resources"
    resource_rows = [
        [name, sim.ledger.get(name), round(sim.ledger.production(name), 4),
         round(sim.ledger.multiplier(name), 4), sim.ledger.status(name)]
        for name in RESOURCE_NAMES
    ]
    _write_table(ws1, f"FUTURY SESSION - {nation} - {sim.clock.format_game_date()}",
                 ['Resource', 'Amount', 'Production / yr', 'Multiplier', 'Status'],
                 resource_rows, widths=(14, 18, 16, 12, 10))

    # ===== SHEET 2: Missions =====
    ws2 = wb.create_sheet("Missions")
    missions = sim.missions.all_missions()
    mission_rows = [
        [m.mission_id, m.name, m.mission_type.value, m.origin, m.destination,
         round(m.launch_year, 4), round(m.arrival_year, 4), f"{m.progress:.0%}", m.status.value]
        for m in missions
    ]
    _write_table(ws2, "MISSIONS",
                 ['ID', 'Name', 'Type', 'Origin', 'Destination', 'Launch', 'Arrival',
                  'Progress', 'Status'],
                 mission_rows, widths=(6, 28, 14, 10, 12, 11, 11, 10, 11))
    _shade_status(ws2, 9, len(mission_rows), "ARRIVED")

    # ===== SHEET 3: Buildings =====
    ws3 = wb.create_sheet("Buildings")
    buildings = sim.construction.all_buildings()
    building_rows = [
        [b.building_id, b.name, b.location, round(b.start_year, 4),
         round(b.completion_year, 4), f"{b.progress:.0%}", b.status.value]
        for b in buildings
    ]
    _write_table(ws3, "BUILDINGS",
                 ['ID', 'Building', 'Location', 'Started', 'Completion', 'Progress', 'Status'],
                 building_rows, widths=(6, 22, 12, 11, 11, 10, 12))
    _shade_status(ws3, 7, len(building_rows), "COMPLETED")

    # ===== SHEET 4: History =====
    ws4 = wb.create_sheet("History")
    history_rows = [
        [sample.tick, round(sample.year, 6)] + [sample.resources.get(n, 0.0) for n in RESOURCE_NAMES]
        for sample in sim.metrics.history
    ]
    _write_table(ws4, "RESOURCE HISTORY", ['Tick', 'Year'] + list(RESOURCE_NAMES), history_rows)

    # ===== SHEET 5: Events =====
    ws5 = wb.create_sheet("Events")
    event_rows = [
        [e.event_id, round(e.trigger_year, 2), e.event_type.value, e.title,
         "Yes" if e.triggered else "No", "Yes" if e.active else "No"]
        for e in sim.events.events
    ]
    _write_table(ws5, "SCHEDULED EVENTS",
                 ['ID', 'Year', 'Type', 'Title', 'Triggered', 'Active'],
                 event_rows, widths=(6, 10, 12, 36, 10, 8))

    return wb


def export_session_workbook(sim: "Simulation", output_path: Union[str, Path]) -> Path:
    """Write the session workbook and return its path."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    wb = build_session_workbook(sim)
    wb.save(output_path)

    logger.info(f"Session workbook written to {output_path}")
    return output_path
