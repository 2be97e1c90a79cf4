"""Validate crossword input: dimensions, rebus count and clue numbering."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from grid_builder import expected_grid_nums
from models import (
    MAX_CLUE_NUMBER,
    MAX_DIMENSION,
    MAX_REBUSES,
    CellKind,
    ClueError,
    Crossword,
    CrosswordArgs,
    CrosswordCell,
    ExtraClue,
    Grid,
    InvalidClue,
    InvalidGridItem,
    InvalidGridLength,
    InvalidGridSize,
    InvalidMetadata,
    MismatchedClueCount,
    MisorderedClues,
    MissingClue,
    TooManyRebuses,
)
from multi_error import MultiError

logger = logging.getLogger(__name__)

METADATA_FIELDS = ("title", "author", "copyright", "notes")


def validate_clues(expected: list[int], actual: Sequence[tuple[int, str]]) -> None:
    """Check a clue list against the numbers the grid expects.

    Checks run in order and the first failure is raised: ordering, then
    count, then the first positional mismatch.
    """
    numbers = [number for number, _ in actual]
    if any(a >= b for a, b in zip(numbers, numbers[1:])):
        raise MisorderedClues()
    if len(expected) != len(numbers):
        raise MismatchedClueCount(expected=len(expected), actual=len(numbers))
    for exp, act in zip(expected, numbers):
        if exp != act:
            if exp < act:
                raise MissingClue(exp)
            raise ExtraClue(act)


def validate(args: CrosswordArgs) -> Crossword:
    """Turn unvalidated input into a Crossword, or raise MultiError.

    Bad dimensions, a cell count other than width * height, non-string
    metadata and grid entries that are not cells are reported alone under
    "grid"; everything after them needs a complete grid.
    """
    issues = MultiError()

    if not (_is_dimension(args.width) and _is_dimension(args.height)):
        issues.insert("grid", InvalidGridSize(args.width, args.height))
        raise issues

    expected_len = args.width * args.height
    if len(args.cells) != expected_len:
        issues.insert("grid", InvalidGridLength(expected_len, len(args.cells)))
        raise issues

    for name in METADATA_FIELDS:
        value = getattr(args, name)
        if not isinstance(value, str):
            issues.insert("grid", InvalidMetadata(name, value))
            raise issues

    built: list[CrosswordCell] = []
    for idx, value in enumerate(args.cells):
        cell = _to_cell(value)
        if cell is None:
            row, col = divmod(idx, args.width)
            issues.insert("grid", InvalidGridItem(row, col, value))
            raise issues
        built.append(cell)
    cells = tuple(built)
    grid = Grid(args.width, args.height, cells)

    rebuses = {cell.text for cell in cells if cell.kind == CellKind.REBUS}
    if len(rebuses) > MAX_REBUSES:
        issues.insert("grid", TooManyRebuses(len(rebuses)))

    exp_across, exp_down = expected_grid_nums(grid)
    across = _check_clue_list(issues, "across_clues", exp_across, args.across_clues)
    down = _check_clue_list(issues, "down_clues", exp_down, args.down_clues)

    if not issues.is_empty():
        logger.debug("Crossword rejected: %s", issues)
        raise issues

    logger.debug(
        "Validated %dx%d crossword with %d across / %d down clues",
        args.width, args.height, len(across), len(down),
    )
    return Crossword(
        width=args.width,
        height=args.height,
        cells=cells,
        across_clues=across,
        down_clues=down,
        title=args.title,
        author=args.author,
        copyright=args.copyright,
        notes=args.notes,
    )


def _check_clue_list(
    issues: MultiError, section: str, expected: list[int], clues: Iterable
) -> tuple[tuple[int, str], ...]:
    try:
        normalized = normalize_clues(clues)
        validate_clues(expected, normalized)
    except (InvalidClue, ClueError) as err:
        issues.insert(section, err)
        return ()
    return normalized


def normalize_clues(clues: Iterable) -> tuple[tuple[int, str], ...]:
    """Coerce (number, text) pairs into a tuple, raising InvalidClue on bad entries."""
    result: list[tuple[int, str]] = []
    for i, entry in enumerate(clues):
        try:
            number, text = entry
        except (TypeError, ValueError):
            raise InvalidClue(i, "expected a (number, text) pair") from None
        if isinstance(number, bool) or not isinstance(number, int):
            raise InvalidClue(i, f"clue number must be an integer, found {number!r}")
        if not 0 <= number <= MAX_CLUE_NUMBER:
            raise InvalidClue(i, f"clue number {number} is out of range")
        if not isinstance(text, str):
            raise InvalidClue(i, f"clue text must be a string, found {text!r}")
        result.append((number, text))
    return tuple(result)


def _is_dimension(value: object) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 1 <= value <= MAX_DIMENSION
    )


def _to_cell(value: CrosswordCell | str | None) -> CrosswordCell | None:
    """Accept a cell or its raw text; anything else → None."""
    if isinstance(value, CrosswordCell):
        return value
    if value is None or isinstance(value, str):
        return CrosswordCell.from_text(value)
    return None
