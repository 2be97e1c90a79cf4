"""Derive clue numbering from a grid's wall layout and build numbered clue lists."""

from __future__ import annotations

from models import (
    UNNUMBERED_CELL,
    WALL_CELL,
    Crossword,
    Direction,
    Grid,
    NumberedCell,
    NumberedKind,
    NumberedClue,
)


def number_grid(grid: Grid) -> list[NumberedCell]:
    """Scan L→R, T→B and number every cell where an across or down word starts.

    One shared counter; a cell starting both directions takes a single number.
    """
    numbered: list[NumberedCell] = []
    counter = 1
    for r in range(grid.height):
        for c in range(grid.width):
            if grid.is_wall(r, c):
                numbered.append(WALL_CELL)
                continue
            is_across = _starts_across(grid, r, c)
            is_down = _starts_down(grid, r, c)
            if is_across or is_down:
                numbered.append(
                    NumberedCell(NumberedKind.NUMBERED, counter, is_across, is_down)
                )
                counter += 1
            else:
                numbered.append(UNNUMBERED_CELL)
    return numbered


def expected_grid_nums(grid: Grid) -> tuple[list[int], list[int]]:
    """Return the clue numbers the across and down lists must carry, in order."""
    across: list[int] = []
    down: list[int] = []
    for cell in number_grid(grid):
        if cell.is_across:
            across.append(cell.number)
        if cell.is_down:
            down.append(cell.number)
    return across, down


def build_clue_lists(
    crossword: Crossword,
) -> tuple[list[NumberedClue], list[NumberedClue]]:
    """Pair each clue with the answer its run spells out on the grid."""
    grid = crossword.grid()
    starts = {
        cell.number: idx
        for idx, cell in enumerate(number_grid(grid))
        if cell.kind == NumberedKind.NUMBERED
    }

    across = [
        NumberedClue(
            number=number,
            clue_text=text,
            answer=_read_answer(grid, starts[number], Direction.ACROSS),
            direction=Direction.ACROSS,
        )
        for number, text in crossword.across_clues
    ]
    down = [
        NumberedClue(
            number=number,
            clue_text=text,
            answer=_read_answer(grid, starts[number], Direction.DOWN),
            direction=Direction.DOWN,
        )
        for number, text in crossword.down_clues
    ]
    return across, down


def _read_answer(grid: Grid, start: int, direction: Direction) -> str:
    """Concatenate cell text from *start* until a wall or the edge."""
    r, c = divmod(start, grid.width)
    dr = 1 if direction == Direction.DOWN else 0
    dc = 1 if direction == Direction.ACROSS else 0

    parts: list[str] = []
    while r < grid.height and c < grid.width and not grid.is_wall(r, c):
        parts.append(grid.cell(r, c).text)
        r += dr
        c += dc
    return "".join(parts)


def _starts_across(grid: Grid, r: int, c: int) -> bool:
    """Left is wall/edge AND right is open (runs of one are not numbered)."""
    if grid.is_wall(r, c):
        return False
    left_is_edge_or_wall = (c == 0) or grid.is_wall(r, c - 1)
    right_is_open = (c + 1 < grid.width) and not grid.is_wall(r, c + 1)
    return left_is_edge_or_wall and right_is_open


def _starts_down(grid: Grid, r: int, c: int) -> bool:
    """Top is wall/edge AND bottom is open."""
    if grid.is_wall(r, c):
        return False
    top_is_edge_or_wall = (r == 0) or grid.is_wall(r - 1, c)
    bottom_is_open = (r + 1 < grid.height) and not grid.is_wall(r + 1, c)
    return top_is_edge_or_wall and bottom_is_open
