"""Convert crosswords to and from the ipuz JSON format.

Only the crossword subset is handled: dimensions, a labeled ``puzzle``
grid, a ``solution`` grid, numbered Across/Down clue lists and the four
metadata strings. Loading checks the labels against the numbering implied
by the solution's walls and reports every problem at once.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from grid_builder import expected_grid_nums, number_grid
from models import (
    MAX_CLUE_NUMBER,
    MAX_DIMENSION,
    MAX_REBUSES,
    CellKind,
    CellLabel,
    ClueError,
    Crossword,
    CrosswordCell,
    CrosswordError,
    Grid,
    InvalidGridSize,
    InvalidHeight,
    InvalidNumbering,
    InvalidSolutionItem,
    InvalidWidth,
    LabeledCellError,
    MalformedPuzzleError,
    NumberedKind,
    TooManyRebuses,
)
from multi_error import MultiError
from validation import validate_clues

logger = logging.getLogger(__name__)

IPUZ_VERSION = "http://ipuz.org/v1"
ACCEPTED_VERSIONS = frozenset({"http://ipuz.org/v1", "http://ipuz.org/v2"})
IPUZ_KIND = "http://ipuz.org/crossword#1"
DEFAULT_BLOCK = "#"
DEFAULT_EMPTY = 0

METADATA_KEYS = ("title", "copyright", "author", "notes")


@dataclass(frozen=True)
class StringOrNum:
    """A JSON value that is either a string or an integer, nothing else."""

    value: str | int

    @classmethod
    def parse(cls, raw) -> StringOrNum:
        if isinstance(raw, str):
            return cls(raw)
        if isinstance(raw, int) and not isinstance(raw, bool):
            return cls(raw)
        raise ValueError(f"expected a string or an integer, found {json.dumps(raw)}")

    @property
    def is_string(self) -> bool:
        return isinstance(self.value, str)


@dataclass
class IpuzRaw:
    """The document's fields after shape checks, before any content checks."""

    title: str
    copyright: str
    author: str
    notes: str
    width: int
    height: int
    block: StringOrNum
    empty: StringOrNum
    puzzle: list[list]
    solution: list[list]
    across: list[tuple[int, str]]
    down: list[tuple[int, str]]


# ─── Serialize ──────────────────────────────────────────────────────────────


def to_json(
    crossword: Crossword,
    block: str | int = DEFAULT_BLOCK,
    empty: str | int = DEFAULT_EMPTY,
) -> bytes:
    """Serialize *crossword* as an ipuz document (UTF-8 JSON bytes).

    Raises ValueError when the markers would not read back unambiguously:
    *block* equal to *empty*, or an open cell whose text is the block marker.
    """
    block = StringOrNum.parse(block).value
    empty = StringOrNum.parse(empty).value
    if block == empty:
        raise ValueError(f"block and empty markers must differ, both are {json.dumps(block)}")
    for idx, cell in enumerate(crossword.cells):
        if not cell.is_wall and cell.text == block:
            row, col = divmod(idx, crossword.width)
            raise ValueError(
                f"cell at {row},{col} holds the block marker {json.dumps(block)}"
            )

    labels = []
    for cell in number_grid(crossword.grid()):
        if cell.kind == NumberedKind.WALL:
            labels.append(block)
        elif cell.kind == NumberedKind.EMPTY:
            labels.append({"cell": empty})
        else:
            labels.append({"cell": cell.number})

    solution = [block if cell.is_wall else cell.text for cell in crossword.cells]

    doc = {
        "version": IPUZ_VERSION,
        "kind": [IPUZ_KIND],
        "title": crossword.title,
        "copyright": crossword.copyright,
        "author": crossword.author,
        "notes": crossword.notes,
        "dimensions": {"width": crossword.width, "height": crossword.height},
        "block": block,
        "empty": empty,
        "puzzle": _chunk(labels, crossword.width),
        "solution": _chunk(solution, crossword.width),
        "clues": {
            "Across": [[n, text] for n, text in crossword.across_clues],
            "Down": [[n, text] for n, text in crossword.down_clues],
        },
    }
    return json.dumps(doc, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def write_ipuz(crossword: Crossword, path: str | Path) -> None:
    """Write ``to_json(crossword)`` to *path* with the default markers."""
    Path(path).write_bytes(to_json(crossword))


def _chunk(items: list, width: int) -> list[list]:
    return [items[i:i + width] for i in range(0, len(items), width)]


# ─── Deserialize ────────────────────────────────────────────────────────────


def read_ipuz(path: str | Path) -> Crossword:
    """Open *path* and load it with ``from_json``."""
    path = Path(path)
    if not path.exists():
        raise CrosswordError(f"File not found: {path}")
    return from_json(path.read_bytes())


def from_json(data: bytes | str) -> Crossword:
    """Parse and validate an ipuz document.

    Raises MalformedPuzzleError when the JSON itself is unusable and
    MultiError with every content problem found otherwise.
    """
    try:
        doc = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedPuzzleError(f"Error reading ipuz JSON: {e}") from e

    raw = parse_raw(doc)
    return _validate_raw(raw)


def parse_raw(doc) -> IpuzRaw:
    """Check the document's shape and pull out its fields."""
    if not isinstance(doc, dict):
        raise MalformedPuzzleError("ipuz document must be a JSON object")

    version = _require(doc, "version")
    if version not in ACCEPTED_VERSIONS:
        raise MalformedPuzzleError(f"Unsupported ipuz version: {version!r}")

    kind = _require(doc, "kind")
    if not isinstance(kind, list) or IPUZ_KIND not in kind:
        raise MalformedPuzzleError(f"File is not a crossword (kind must include {IPUZ_KIND!r})")

    meta = {}
    for key in METADATA_KEYS:
        value = doc.get(key, "")
        if not isinstance(value, str):
            raise MalformedPuzzleError(f"{key!r} must be a string")
        meta[key] = value

    dimensions = _require(doc, "dimensions")
    if not isinstance(dimensions, dict):
        raise MalformedPuzzleError("'dimensions' must be an object")
    width = _require_int(dimensions, "width")
    height = _require_int(dimensions, "height")

    try:
        block = StringOrNum.parse(doc.get("block", DEFAULT_BLOCK))
        empty = StringOrNum.parse(doc.get("empty", DEFAULT_EMPTY))
    except ValueError as e:
        raise MalformedPuzzleError(f"Invalid block/empty marker: {e}") from None

    puzzle = _require_rows(doc, "puzzle")
    solution = _require_rows(doc, "solution")

    clues = _require(doc, "clues")
    if not isinstance(clues, dict):
        raise MalformedPuzzleError("'clues' must be an object")
    across = _parse_clue_list(_require(clues, "Across"), "Across")
    down = _parse_clue_list(_require(clues, "Down"), "Down")

    return IpuzRaw(
        width=width,
        height=height,
        block=block,
        empty=empty,
        puzzle=puzzle,
        solution=solution,
        across=across,
        down=down,
        **meta,
    )


def _require(obj: dict, key: str):
    if key not in obj:
        raise MalformedPuzzleError(f"Missing required key {key!r}")
    return obj[key]


def _require_int(obj: dict, key: str) -> int:
    value = _require(obj, key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedPuzzleError(f"{key!r} must be an integer, found {json.dumps(value)}")
    return value


def _require_rows(doc: dict, key: str) -> list[list]:
    rows = _require(doc, key)
    if not isinstance(rows, list) or not all(isinstance(r, list) for r in rows):
        raise MalformedPuzzleError(f"{key!r} must be a list of rows")
    return rows


def _parse_clue_list(entries, direction: str) -> list[tuple[int, str]]:
    """Accept ``[number, text]`` pairs or ``{"number": n, "clue": text}`` objects."""
    if not isinstance(entries, list):
        raise MalformedPuzzleError(f"clues.{direction} must be a list")

    clues = []
    for i, entry in enumerate(entries):
        if isinstance(entry, dict):
            number, text = entry.get("number"), entry.get("clue")
        elif isinstance(entry, list) and len(entry) == 2:
            number, text = entry
        else:
            raise MalformedPuzzleError(f"clues.{direction}[{i}] must be a [number, text] pair")

        if isinstance(number, bool) or not isinstance(number, int):
            raise MalformedPuzzleError(f"clues.{direction}[{i}] has a non-integer number")
        if not 0 <= number <= MAX_CLUE_NUMBER:
            raise MalformedPuzzleError(f"clues.{direction}[{i}] number {number} is out of range")
        if not isinstance(text, str):
            raise MalformedPuzzleError(f"clues.{direction}[{i}] text must be a string")
        clues.append((number, text))
    return clues


def _validate_raw(raw: IpuzRaw) -> Crossword:
    issues = MultiError()

    if not (1 <= raw.width <= MAX_DIMENSION and 1 <= raw.height <= MAX_DIMENSION):
        issues.insert("puzzle", InvalidGridSize(raw.width, raw.height))
        raise issues

    for section, rows in (("puzzle", raw.puzzle), ("solution", raw.solution)):
        err = _check_dimensions(raw.width, raw.height, rows)
        if err is not None:
            issues.insert(section, err)

    # Everything below indexes rows by the declared dimensions.
    if not issues.is_empty():
        raise issues

    width = raw.width
    cells: list[CrosswordCell] = []
    for idx, elem in enumerate(_flatten(raw.solution)):
        cell = _solution_cell(elem, raw.block)
        if cell is None:
            issues.insert(
                "solution",
                InvalidSolutionItem(idx // width, idx % width, raw.block.value, elem),
            )
            raise issues
        cells.append(cell)

    rebuses = {cell.text for cell in cells if cell.kind == CellKind.REBUS}
    if len(rebuses) > MAX_REBUSES:
        issues.insert("solution", TooManyRebuses(len(rebuses)))

    grid = Grid(raw.width, raw.height, tuple(cells))
    labels = _flatten(raw.puzzle)
    for idx, (num_cell, lab_cell) in enumerate(zip(number_grid(grid), labels)):
        row, col = divmod(idx, width)
        try:
            actual = resolve_label(lab_cell, raw.block, raw.empty)
        except ValueError as e:
            issues.insert("puzzle", LabeledCellError(row, col, str(e)))
            break
        expected = num_cell.label()
        if actual != expected:
            issues.insert("puzzle", InvalidNumbering(row, col, expected, actual))
            break

    exp_across, exp_down = expected_grid_nums(grid)
    for section, expected, actual in (
        ("clues.Across", exp_across, raw.across),
        ("clues.Down", exp_down, raw.down),
    ):
        try:
            validate_clues(expected, actual)
        except ClueError as err:
            issues.insert(section, err)

    if not issues.is_empty():
        logger.debug("ipuz document rejected: %s", issues)
        raise issues

    return Crossword(
        width=raw.width,
        height=raw.height,
        cells=tuple(cells),
        across_clues=tuple(raw.across),
        down_clues=tuple(raw.down),
        title=raw.title,
        author=raw.author,
        copyright=raw.copyright,
        notes=raw.notes,
    )


def _check_dimensions(width: int, height: int, rows: list[list]):
    if len(rows) != height:
        return InvalidHeight(height=height, actual=len(rows))
    for row, r in enumerate(rows):
        if len(r) != width:
            return InvalidWidth(row=row, width=width, actual=len(r))
    return None


def _flatten(rows: list[list]) -> list:
    return [item for row in rows for item in row]


def _solution_cell(elem, block: StringOrNum) -> CrosswordCell | None:
    """Block marker → wall, string → empty/char/rebus, anything else → None."""
    try:
        if StringOrNum.parse(elem) == block:
            return CrosswordCell.wall()
    except ValueError:
        return None
    if isinstance(elem, str):
        return CrosswordCell.from_text(elem)
    return None


def resolve_label(raw, block: StringOrNum, empty: StringOrNum) -> CellLabel:
    """Resolve a puzzle-grid entry to block, no label or a clue number.

    Raises ValueError with the reason when the entry is unsupported.
    """
    if isinstance(raw, dict):
        if "cell" not in raw:
            raise ValueError('labeled cell object has no "cell" key')
        raw = raw["cell"]
    value = StringOrNum.parse(raw)
    if value == block:
        return CellLabel(NumberedKind.WALL)
    if value == empty:
        return CellLabel(NumberedKind.EMPTY)
    if value.is_string:
        raise ValueError(f"string labels are unsupported (found {json.dumps(value.value)})")
    if not 0 <= value.value <= MAX_CLUE_NUMBER:
        raise ValueError(f"numeric label is out of supported range (found {value.value})")
    return CellLabel(NumberedKind.NUMBERED, value.value)
