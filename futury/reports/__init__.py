"""
FUTURY - Reports Package
Session exports: Excel workbook and Word briefing.
"""

from .workbook import build_session_workbook, export_session_workbook
from .briefing import build_session_briefing, export_session_briefing

__all__ = [
    "build_session_workbook",
    "export_session_workbook",
    "build_session_briefing",
    "export_session_briefing",
]
