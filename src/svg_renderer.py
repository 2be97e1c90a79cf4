"""Render a crossword grid as standalone SVG."""

from __future__ import annotations

from xml.sax.saxutils import escape

from grid_builder import number_grid
from models import Crossword, CrosswordCell, NumberedCell, NumberedKind

FONT_FAMILY = "Helvetica, Arial, sans-serif"


def render_svg(
    crossword: Crossword,
    output_path: str,
    show_answers: bool = False,
    cell_size: float | None = None,
) -> None:
    """Write the crossword grid to an SVG file."""
    size = max(crossword.width, crossword.height)
    if cell_size is None:
        cell_size = _default_cell_size(size)
    number_font = _number_font_size(size)
    grid_w = cell_size * crossword.width
    grid_h = cell_size * crossword.height

    elements: list[str] = []
    numbered = number_grid(crossword.grid())
    for idx, (cell, num_cell) in enumerate(zip(crossword.cells, numbered)):
        r, c = divmod(idx, crossword.width)
        elements.extend(
            _cell_elements(cell, num_cell, c * cell_size, r * cell_size,
                           cell_size, number_font, show_answers)
        )
    elements.append(
        f'<rect x="0" y="0" width="{grid_w}" height="{grid_h}" '
        f'fill="none" stroke="black" stroke-width="1.5"/>'
    )

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write('<?xml version="1.0" encoding="UTF-8"?>\n')
        f.write(
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{grid_w}" '
            f'height="{grid_h}" viewBox="0 0 {grid_w} {grid_h}">\n'
        )
        for element in elements:
            f.write(f"  {element}\n")
        f.write('</svg>\n')


def render_puzzle_svg(crossword: Crossword, output_path: str) -> None:
    """Render puzzle grid (no answers) to SVG."""
    render_svg(crossword, output_path, show_answers=False)


def render_answer_svg(crossword: Crossword, output_path: str) -> None:
    """Render answer grid (with letters) to SVG."""
    render_svg(crossword, output_path, show_answers=True)


def _cell_elements(
    cell: CrosswordCell,
    num_cell: NumberedCell,
    x: float,
    y: float,
    size: float,
    number_font: float,
    show_answers: bool,
) -> list[str]:
    """SVG elements for one cell: its square, clue number and fill."""
    if cell.is_wall:
        return [f'<rect x="{x}" y="{y}" width="{size}" height="{size}" fill="black"/>']

    out = [
        f'<rect x="{x}" y="{y}" width="{size}" height="{size}" '
        f'fill="white" stroke="black" stroke-width="0.5"/>'
    ]
    if num_cell.kind == NumberedKind.NUMBERED:
        out.append(
            f'<text x="{x + 1.5}" y="{y + number_font + 1}" font-family="{FONT_FAMILY}" '
            f'font-weight="bold" font-size="{number_font}" fill="black">'
            f'{num_cell.number}</text>'
        )
    if show_answers and cell.text:
        font = size * 0.45
        if len(cell.text) > 1:
            font /= len(cell.text) * 0.6
        out.append(
            f'<text x="{x + size * 0.55}" y="{y + size * 0.58}" text-anchor="middle" '
            f'dominant-baseline="central" font-family="{FONT_FAMILY}" '
            f'font-size="{font}" fill="black">{escape(cell.text)}</text>'
        )
    return out


def _default_cell_size(grid_size: int) -> float:
    if grid_size <= 15:
        return 24.0
    elif grid_size <= 17:
        return 21.0
    else:
        return 17.0


def _number_font_size(grid_size: int) -> float:
    if grid_size <= 13:
        return 8.5
    elif grid_size <= 15:
        return 8.0
    elif grid_size <= 17:
        return 7.0
    else:
        return 6.0
