"""Write a crossword's clue sheet to an XLSX file."""

from __future__ import annotations

import openpyxl
from openpyxl.styles import Font
from openpyxl.worksheet.worksheet import Worksheet

from grid_builder import build_clue_lists
from models import Crossword, NumberedClue

HEADER_FONT = Font(bold=True, size=12)


def write_clues_xlsx(crossword: Crossword, output_path: str) -> None:
    """Write across and down clues to an Excel workbook.

    Numbering is embedded in the clue cell: '1. Clue text'.
    Answers, read off the grid, are in column B.
    A second sheet holds the puzzle's title, author, copyright and notes.
    """
    across, down = build_clue_lists(crossword)

    wb = openpyxl.Workbook()
    clues_ws = wb.active
    clues_ws.title = "Clues"
    next_row = _write_section(clues_ws, 1, "ACROSS", across)
    _write_section(clues_ws, next_row + 1, "DOWN", down)  # one blank row between
    clues_ws.column_dimensions["A"].width = 60
    clues_ws.column_dimensions["B"].width = 15

    meta_ws = wb.create_sheet(title="Puzzle")
    rows = (
        ("Title", crossword.title),
        ("Author", crossword.author),
        ("Copyright", crossword.copyright),
        ("Notes", crossword.notes),
        ("Size", f"{crossword.width}x{crossword.height}"),
    )
    for row, (label, value) in enumerate(rows, start=1):
        meta_ws.cell(row=row, column=1, value=label).font = HEADER_FONT
        meta_ws.cell(row=row, column=2, value=value or None)
    meta_ws.column_dimensions["A"].width = 15
    meta_ws.column_dimensions["B"].width = 60

    wb.save(output_path)


def _write_section(ws: Worksheet, row: int, label: str, clues: list[NumberedClue]) -> int:
    """Bold header then one row per clue; returns the first row after it."""
    ws.cell(row=row, column=1, value=label).font = HEADER_FONT
    for offset, clue in enumerate(clues, start=1):
        ws.cell(row=row + offset, column=1, value=f"{clue.number}. {clue.clue_text}")
        ws.cell(row=row + offset, column=2, value=clue.answer)
    return row + len(clues) + 1
