"""Tests for pdf_renderer.py."""

import os
import re
import tempfile

import pytest

from grid_builder import expected_grid_nums
from models import Crossword, CrosswordCell, Direction, NumberedClue
from pdf_renderer import PAGE_H, PAGE_W, MARGIN, render_pdf, _compute_layout, _clue_markup


def _make_crossword(width, height, cells=None, clue_text="Clue", **meta):
    """All-letter grid (or *cells*) with one clue per expected number."""
    if cells is None:
        cells = (CrosswordCell.char("A"),) * (width * height)
    cells = tuple(cells)
    across, down = expected_grid_nums(Crossword(width, height, cells, (), ()).grid())
    return Crossword(
        width, height, cells,
        across_clues=tuple((n, clue_text) for n in across),
        down_clues=tuple((n, clue_text) for n in down),
        **meta,
    )


def _make_simple_puzzle():
    """3x3 with a center wall: CAT / RUN across, CAR / TON down."""
    cells = [
        CrosswordCell.wall() if ch == "#" else CrosswordCell.char(ch)
        for ch in "CATA#ORUN"
    ]
    return Crossword(
        3, 3, tuple(cells),
        across_clues=((1, "Feline"), (3, "Sprint")),
        down_clues=((1, "Vehicle"), (2, "Heavy weight")),
        title="Mini",
        author="A. Setter",
        copyright="(c) 2026",
    )


def _page_count(path):
    with open(path, "rb") as f:
        return len(re.findall(rb'/Type\s*/Page[^s]', f.read()))


def _render(xword):
    with tempfile.NamedTemporaryFile(suffix=".pdf", delete=False) as f:
        path = f.name
    render_pdf(xword, path)
    return path


class TestRenderPdf:
    def test_creates_valid_pdf(self):
        path = _render(_make_simple_puzzle())
        try:
            assert os.path.exists(path)
            with open(path, "rb") as f:
                header = f.read(8)
                assert header == b"%PDF-1.4"
        finally:
            os.unlink(path)

    def test_two_pages(self):
        path = _render(_make_simple_puzzle())
        try:
            assert _page_count(path) == 2
        finally:
            os.unlink(path)

    def test_page_size(self):
        path = _render(_make_simple_puzzle())
        try:
            with open(path, "rb") as f:
                content = f.read()
                # ReportLab writes MediaBox with page dimensions
                assert b"612" in content  # width
                assert b"792" in content  # height
        finally:
            os.unlink(path)

    def test_rebus_and_untitled(self):
        cells = [CrosswordCell.from_text(t) for t in ["ON", "TO", "LY", "ON"]]
        xword = Crossword(
            2, 2, tuple(cells),
            across_clues=((1, "Aware of"), (3, "French <city> & more")),
            down_clues=((1, "Solely"), (2, "Animated sort")),
        )
        path = _render(xword)
        try:
            assert os.path.getsize(path) > 0
        finally:
            os.unlink(path)

    def test_long_clue_lists_continue_on_new_pages(self):
        xword = _make_crossword(15, 15, clue_text="A very long clue. " * 40)
        path = _render(xword)
        try:
            assert _page_count(path) > 2
        finally:
            os.unlink(path)

    def test_tall_grid_moves_clues_to_next_page(self):
        path = _render(_make_crossword(1, 60))
        try:
            assert _page_count(path) == 3
        finally:
            os.unlink(path)


class TestComputeLayout:
    def test_default_15x15(self):
        layout = _compute_layout(_make_crossword(15, 15))
        assert layout.cell_size == 24.0
        assert layout.grid_width == 15
        assert layout.grid_height == 15
        assert layout.grid_w == 360.0

    def test_cell_size_scaling(self):
        assert _compute_layout(_make_crossword(13, 13)).cell_size == 24.0
        assert _compute_layout(_make_crossword(17, 17)).cell_size == 21.0
        assert _compute_layout(_make_crossword(21, 21)).cell_size == 17.0

    def test_rectangular(self):
        layout = _compute_layout(_make_crossword(10, 4))
        assert layout.grid_w == 240.0
        assert layout.grid_h == 96.0
        assert layout.grid_x == (PAGE_W - 240.0) / 2

    def test_wide_grid_fits_page_width(self):
        layout = _compute_layout(_make_crossword(255, 1))
        assert layout.grid_w <= PAGE_W - 2 * MARGIN + 1e-9

    def test_tall_grid_fits_page_height(self):
        layout = _compute_layout(_make_crossword(1, 255))
        assert layout.grid_h < PAGE_H - 2 * MARGIN

    def test_number_font_scales_with_small_cells(self):
        layout = _compute_layout(_make_crossword(100, 100))
        assert layout.number_font_size <= layout.cell_size * 0.35


class TestClueMarkup:
    def test_escapes_text(self):
        clue = NumberedClue(7, "Salt & <pepper>", "X", Direction.DOWN)
        assert _clue_markup(clue) == "<b>7.</b> Salt &amp; &lt;pepper&gt;"
