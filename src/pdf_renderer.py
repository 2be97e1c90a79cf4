"""Render a crossword to a printable PDF using ReportLab.

Page 1 carries a title banner, the grid and as many clue columns as fit
below it; remaining clues continue on full-height pages. The last page is
the answer key.
"""

from __future__ import annotations

from dataclasses import dataclass
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.platypus import Paragraph

from grid_builder import build_clue_lists, number_grid
from models import Crossword, NumberedClue, NumberedKind

PAGE_W, PAGE_H = letter  # 612 x 792
MARGIN = 36
BANNER_H = 28.0
SECTION_HEADER_H = 14.0
CLUE_COLS = 3
CLUE_GUTTER = 12.0

CLUE_STYLE = ParagraphStyle(
    "ClueStyle",
    fontName="Helvetica",
    fontSize=9.0,
    leading=10.5,
    spaceAfter=1.5,
)


@dataclass
class LayoutParams:
    """Grid placement for one page."""

    grid_width: int
    grid_height: int
    cell_size: float
    number_font_size: float
    grid_x: float = 0.0
    grid_y: float = 0.0  # top of grid in page coords

    @property
    def grid_w(self) -> float:
        return self.cell_size * self.grid_width

    @property
    def grid_h(self) -> float:
        return self.cell_size * self.grid_height


def render_pdf(crossword: Crossword, output_path: str) -> None:
    """Draw the puzzle page(s) and the answer key."""
    from reportlab.pdfgen.canvas import Canvas

    across, down = build_clue_lists(crossword)
    title = crossword.title or "CROSSWORD"
    layout = _compute_layout(crossword)

    c = Canvas(output_path, pagesize=letter)
    c.setTitle(title)
    if crossword.author:
        c.setAuthor(crossword.author)

    banner_y = _draw_title_banner(c, title)
    layout.grid_y = banner_y - 8
    _draw_grid(c, crossword, layout, show_answers=False)
    _draw_footer(c, crossword)
    _draw_clues(c, across, down, top=layout.grid_y - layout.grid_h - 12)
    c.showPage()

    banner_y = _draw_title_banner(c, "ANSWER KEY")
    layout.grid_y = banner_y - 20
    _draw_grid(c, crossword, layout, show_answers=True)
    c.showPage()

    c.save()


def _compute_layout(crossword: Crossword) -> LayoutParams:
    """Pick a cell size from the grid's longer side, capped to fit the page."""
    size = max(crossword.width, crossword.height)
    if size <= 13:
        cell_size, number_font = 24.0, 8.5
    elif size <= 15:
        cell_size, number_font = 24.0, 8.0
    elif size <= 17:
        cell_size, number_font = 21.0, 7.0
    else:
        cell_size, number_font = 17.0, 6.0

    cell_size = min(
        cell_size,
        (PAGE_W - 2 * MARGIN) / crossword.width,
        (PAGE_H - 2 * MARGIN - BANNER_H - 20) / crossword.height,
    )
    number_font = min(number_font, cell_size * 0.35)
    layout = LayoutParams(crossword.width, crossword.height, cell_size, number_font)
    layout.grid_x = (PAGE_W - layout.grid_w) / 2
    return layout


def _clue_markup(clue: NumberedClue) -> str:
    """Format clue as ``<b>N.</b> text`` with XML escaping."""
    return f"<b>{clue.number}.</b> {escape(clue.clue_text)}"


def _clue_items(across: list[NumberedClue], down: list[NumberedClue]):
    """Yield ("header", label) and ("clue", Paragraph) in reading order."""
    for label, clues in (("ACROSS", across), ("DOWN", down)):
        yield "header", label
        for clue in clues:
            yield "clue", Paragraph(_clue_markup(clue), CLUE_STYLE)


# ─── Drawing functions ──────────────────────────────────────────────────────


def _draw_title_banner(c, title: str) -> float:
    """Black rect + white centered bold text; returns the banner's bottom y."""
    w = PAGE_W - 2 * MARGIN
    y = PAGE_H - MARGIN - BANNER_H

    c.setFillColorRGB(0, 0, 0)
    c.rect(MARGIN, y, w, BANNER_H, fill=1, stroke=0)

    c.setFillColorRGB(1, 1, 1)
    c.setFont("Helvetica-Bold", 16)
    text_w = stringWidth(title, "Helvetica-Bold", 16)
    c.drawString(MARGIN + (w - text_w) / 2, y + (BANNER_H - 16) / 2 + 2, title)
    return y


def _draw_grid(c, crossword: Crossword, layout: LayoutParams, show_answers: bool) -> None:
    """Draw the grid: walls, open cells, numbers and optionally the fill."""
    cs = layout.cell_size
    numbered = number_grid(crossword.grid())

    for idx, (cell, num_cell) in enumerate(zip(crossword.cells, numbered)):
        r, col = divmod(idx, crossword.width)
        cx = layout.grid_x + col * cs
        cy = layout.grid_y - (r + 1) * cs

        if cell.is_wall:
            c.setFillColorRGB(0, 0, 0)
            c.rect(cx, cy, cs, cs, fill=1, stroke=0)
            continue

        c.setFillColorRGB(1, 1, 1)
        c.setStrokeColorRGB(0, 0, 0)
        c.setLineWidth(0.5)
        c.rect(cx, cy, cs, cs, fill=1, stroke=1)
        c.setFillColorRGB(0, 0, 0)

        if num_cell.kind == NumberedKind.NUMBERED:
            c.setFont("Helvetica-Bold", layout.number_font_size)
            c.drawString(cx + 1.5, cy + cs - layout.number_font_size - 1, str(num_cell.number))

        if show_answers and cell.text:
            font_size = cs * 0.45
            lw = stringWidth(cell.text, "Helvetica", font_size)
            # Rebus text shrinks to the cell width.
            if lw > cs * 0.9:
                font_size *= cs * 0.9 / lw
                lw = stringWidth(cell.text, "Helvetica", font_size)
            c.setFont("Helvetica", font_size)
            c.drawString(cx + cs * 0.55 - lw / 2, cy + cs * 0.42 - font_size / 2, cell.text)

    c.setStrokeColorRGB(0, 0, 0)
    c.setLineWidth(1.5)
    c.rect(layout.grid_x, layout.grid_y - layout.grid_h, layout.grid_w, layout.grid_h,
           fill=0, stroke=1)


def _draw_clues(c, across: list[NumberedClue], down: list[NumberedClue], top: float) -> None:
    """Flow clues down each column in turn, starting new pages as needed."""
    col_w = (PAGE_W - 2 * MARGIN - CLUE_GUTTER * (CLUE_COLS - 1)) / CLUE_COLS
    col = 0
    y = top

    for kind, item in _clue_items(across, down):
        if kind == "header":
            h = SECTION_HEADER_H + 4
        else:
            _, h = item.wrap(col_w, PAGE_H)
            h += CLUE_STYLE.spaceAfter

        if y - h < MARGIN:
            col += 1
            y = top
            # Out of columns, or too little room under the grid on page 1.
            if col == CLUE_COLS or y - h < MARGIN:
                c.showPage()
                col = 0
                top = y = PAGE_H - MARGIN

        x = MARGIN + col * (col_w + CLUE_GUTTER)
        if kind == "header":
            _draw_section_header(c, item, x, y, col_w)
        else:
            item.drawOn(c, x, y - h)
        y -= h


def _draw_section_header(c, text: str, x: float, y: float, width: float) -> None:
    """Black rect + white bold text."""
    c.setFillColorRGB(0, 0, 0)
    c.rect(x, y - SECTION_HEADER_H, width, SECTION_HEADER_H, fill=1, stroke=0)

    c.setFillColorRGB(1, 1, 1)
    c.setFont("Helvetica-Bold", 9)
    c.drawString(x + 4, y - SECTION_HEADER_H + 3.5, text)


def _draw_footer(c, crossword: Crossword) -> None:
    """Author and copyright in small print along the bottom margin."""
    parts = [f"by {crossword.author}" if crossword.author else "", crossword.copyright]
    line = " | ".join(part for part in parts if part)
    if line:
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 7)
        c.drawString(MARGIN, MARGIN / 2, line)
