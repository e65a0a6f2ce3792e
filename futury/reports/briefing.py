"""
FUTURY - Session Briefing
Word document summarizing a session for the player.
"""

from pathlib import Path
from typing import Sequence, Union, TYPE_CHECKING
import logging

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from ..config import RESOURCE_NAMES

if TYPE_CHECKING:
    from ..core.simulation import Simulation

logger = logging.getLogger(__name__)


def set_cell_shading(cell, color: str):
    """Set cell background color."""
    shading = OxmlElement('w:shd')
    shading.set(qn('w:fill'), color)
    cell._tc.get_or_add_tcPr().append(shading)


def add_formatted_table(doc, headers: Sequence[str], rows: Sequence[Sequence],
                        header_color: str = "1F4E79"):
    """Add a table with a shaded, bold header row."""
    table = doc.add_table(rows=1, cols=len(headers))
    table.style = 'Table Grid'

    header_cells = table.rows[0].cells
    for i, header in enumerate(headers):
        header_cells[i].text = header
        run = header_cells[i].paragraphs[0].runs[0]
        run.bold = True
        run.font.color.rgb = RGBColor(255, 255, 255)
        set_cell_shading(header_cells[i], header_color)

    for row_data in rows:
        row = table.add_row()
        for i, cell_data in enumerate(row_data):
            row.cells[i].text = str(cell_data)

    return table


def build_session_briefing(sim: "Simulation"):
    doc = Document()

    style = doc.styles['Normal']
    style.font.name = 'Calibri'
    style.font.size = Pt(11)

    # Title
    title = doc.add_heading('FUTURY MISSION BRIEFING', 0)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER

    subtitle = doc.add_paragraph(sim.nation.name if sim.nation else 'Space Program')
    subtitle.alignment = WD_ALIGN_PARAGRAPH.CENTER
    subtitle.runs[0].font.size = Pt(16)
    subtitle.runs[0].bold = True

    info = doc.add_paragraph()
    info.alignment = WD_ALIGN_PARAGRAPH.CENTER
    info.add_run(f'{sim.clock.format_game_date()}\n').bold = True
    info.add_run(f'Ticks simulated: {sim.tick_count}')

    # Status
    doc.add_heading('Program Status', level=1)
    colonization = sim.colonization.get_status()
    p = doc.add_paragraph()
    p.add_run('Colonized: ').bold = True
    p.add_run(', '.join(colonization['colonized']))
    p = doc.add_paragraph()
    p.add_run('Explored: ').bold = True
    p.add_run(', '.join(colonization['explored']))

    # Resources
    doc.add_heading('Resources', level=1)
    add_formatted_table(doc, ['Resource', 'Amount', 'Production / yr', 'Status'], [
        [name.title(), sim.ledger.format_amount(name),
         f"{sim.ledger.production(name):,.2f}", sim.ledger.status(name)]
        for name in RESOURCE_NAMES
    ])

    # Missions
    doc.add_heading('Missions', level=1)
    missions = sim.missions.all_missions()
    if missions:
        add_formatted_table(doc, ['Mission', 'Route', 'Type', 'Progress', 'Status'], [
            [m.name, f"{m.origin} → {m.destination}", m.mission_type.value,
             f"{m.progress:.0%}", m.status.value]
            for m in missions
        ])
    else:
        doc.add_paragraph('No missions launched yet.').runs[0].italic = True

    # Buildings
    doc.add_heading('Infrastructure', level=1)
    buildings = sim.construction.all_buildings()
    if buildings:
        add_formatted_table(doc, ['Building', 'Location', 'Progress', 'Status'], [
            [b.name, b.location, f"{b.progress:.0%}", b.status.value]
            for b in buildings
        ])
    else:
        doc.add_paragraph('No buildings constructed yet.').runs[0].italic = True

    # Events
    history = sim.events.event_history
    if history:
        doc.add_heading('Event Log', level=1)
        for entry in history:
            doc.add_paragraph(f"Year {entry['year']:.2f}: {entry['title']}", style='List Bullet')

    return doc


def export_session_briefing(sim: "Simulation", output_path: Union[str, Path]) -> Path:
    """Write the briefing document and return its path."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = build_session_briefing(sim)
    doc.save(str(output_path))

    logger.info(f"Session briefing written to {output_path}")
    return output_path
