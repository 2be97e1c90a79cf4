"""Data models for the crossword converter."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum

MAX_DIMENSION = 255
MAX_REBUSES = 99
MAX_CLUE_NUMBER = 0xFFFF


class CellKind(Enum):
    EMPTY = "EMPTY"
    CHAR = "CHAR"
    REBUS = "REBUS"
    WALL = "WALL"


class NumberedKind(Enum):
    WALL = "WALL"
    EMPTY = "EMPTY"
    NUMBERED = "NUMBERED"


class Direction(Enum):
    ACROSS = "ACROSS"
    DOWN = "DOWN"


@dataclass(frozen=True)
class CrosswordCell:
    """One solution cell: empty, a single letter, a rebus string or a wall."""

    kind: CellKind
    text: str = ""

    @classmethod
    def wall(cls) -> CrosswordCell:
        return cls(CellKind.WALL)

    @classmethod
    def empty(cls) -> CrosswordCell:
        return cls(CellKind.EMPTY)

    @classmethod
    def char(cls, letter: str) -> CrosswordCell:
        if len(letter) != 1:
            raise ValueError(f"Char cell needs exactly one character, got {letter!r}")
        return cls(CellKind.CHAR, letter)

    @classmethod
    def rebus(cls, text: str) -> CrosswordCell:
        if len(text) < 2:
            raise ValueError(f"Rebus cell needs at least two characters, got {text!r}")
        return cls(CellKind.REBUS, text)

    @classmethod
    def from_text(cls, text: str | None) -> CrosswordCell:
        """None is a wall; otherwise the length picks empty, char or rebus."""
        if text is None:
            return cls.wall()
        if len(text) == 0:
            return cls.empty()
        if len(text) == 1:
            return cls.char(text)
        return cls.rebus(text)

    @property
    def is_wall(self) -> bool:
        return self.kind == CellKind.WALL


@dataclass(frozen=True)
class CellLabel:
    """The number label a puzzle cell carries (or block / no label)."""

    kind: NumberedKind
    number: int | None = None

    def __str__(self) -> str:
        if self.kind == NumberedKind.WALL:
            return "block"
        if self.kind == NumberedKind.EMPTY:
            return "no label"
        return f"#{self.number}"


@dataclass(frozen=True)
class NumberedCell:
    """Per-cell numbering derived from the wall layout. Never stored."""

    kind: NumberedKind
    number: int | None = None
    is_across: bool = False
    is_down: bool = False

    def label(self) -> CellLabel:
        return CellLabel(self.kind, self.number)


WALL_CELL = NumberedCell(NumberedKind.WALL)
UNNUMBERED_CELL = NumberedCell(NumberedKind.EMPTY)


@dataclass(frozen=True)
class Grid:
    """Read-only row-major view over a crossword's cells."""

    width: int
    height: int
    cells: tuple[CrosswordCell, ...]

    def cell(self, row: int, col: int) -> CrosswordCell:
        return self.cells[row * self.width + col]

    def is_wall(self, row: int, col: int) -> bool:
        return self.cell(row, col).is_wall


@dataclass
class CrosswordArgs:
    """Unvalidated construction input, filled in by the caller."""

    width: int
    height: int
    cells: list[CrosswordCell | str | None] = field(default_factory=list)
    across_clues: list[tuple[int, str]] = field(default_factory=list)
    down_clues: list[tuple[int, str]] = field(default_factory=list)
    title: str = ""
    author: str = ""
    copyright: str = ""
    notes: str = ""


@dataclass(frozen=True)
class Crossword:
    """A validated crossword. Build through ``validation.validate``."""

    width: int
    height: int
    cells: tuple[CrosswordCell, ...]
    across_clues: tuple[tuple[int, str], ...]
    down_clues: tuple[tuple[int, str], ...]
    title: str = ""
    author: str = ""
    copyright: str = ""
    notes: str = ""

    def grid(self) -> Grid:
        return Grid(self.width, self.height, self.cells)

    def rows(self) -> list[tuple[CrosswordCell, ...]]:
        return [
            self.cells[r * self.width:(r + 1) * self.width]
            for r in range(self.height)
        ]


@dataclass(frozen=True)
class NumberedClue:
    """A clue with its grid-assigned number and the answer read off the grid."""

    number: int
    clue_text: str
    answer: str
    direction: Direction


class CrosswordError(Exception):
    """Base for every error raised while validating or converting a crossword."""


class EncodingError(CrosswordError):
    """A text field cannot be represented in the output character encoding."""

    def __init__(self, field: str, encoding: str):
        super().__init__(f"{field} cannot be encoded as {encoding}")
        self.field = field
        self.encoding = encoding


class MalformedPuzzleError(CrosswordError):
    """The JSON document is unreadable or has the wrong shape."""


class PuzzleIssue(CrosswordError):
    """A user-fixable content problem, filed under one MultiError section."""


class ClueError(PuzzleIssue):
    """A clue list disagrees with the numbering implied by the grid."""


@dataclass
class MisorderedClues(ClueError):
    def __str__(self) -> str:
        return "found misordered clues. Clue numbers must be strictly increasing"


@dataclass
class MismatchedClueCount(ClueError):
    expected: int
    actual: int

    def __str__(self) -> str:
        return f"expected {self.expected} clues, found {self.actual}"


@dataclass
class MissingClue(ClueError):
    number: int

    def __str__(self) -> str:
        return f"missing clue #{self.number}"


@dataclass
class ExtraClue(ClueError):
    number: int

    def __str__(self) -> str:
        return f"found extraneous clue #{self.number}"


@dataclass
class InvalidClue(PuzzleIssue):
    index: int
    reason: str

    def __str__(self) -> str:
        return f"clue {self.index} is invalid: {self.reason}"


@dataclass
class TooManyRebuses(PuzzleIssue):
    count: int

    def __str__(self) -> str:
        return f"found {self.count} distinct rebuses, at most {MAX_REBUSES} are supported"


@dataclass
class InvalidGridSize(PuzzleIssue):
    width: object
    height: object

    def __str__(self) -> str:
        return (
            f"grid must be between 1x1 and {MAX_DIMENSION}x{MAX_DIMENSION}, "
            f"found {self.width}x{self.height}"
        )


@dataclass
class InvalidGridLength(PuzzleIssue):
    expected: int
    actual: int

    def __str__(self) -> str:
        return f"expected exactly width * height = {self.expected} grid entries, found {self.actual}"


@dataclass
class InvalidHeight(PuzzleIssue):
    height: int
    actual: int

    def __str__(self) -> str:
        return f"grid is height {self.height}, but found {self.actual} rows"


@dataclass
class InvalidWidth(PuzzleIssue):
    row: int
    width: int
    actual: int

    def __str__(self) -> str:
        return f"grid is width {self.width}, but row {self.row} is length {self.actual}"


@dataclass
class InvalidSolutionItem(PuzzleIssue):
    row: int
    col: int
    block: object
    actual: object

    def __str__(self) -> str:
        return (
            f"invalid solution item at {self.row},{self.col}: expected string or "
            f"block ({json.dumps(self.block)}), but found {json.dumps(self.actual)}"
        )


@dataclass
class InvalidNumbering(PuzzleIssue):
    row: int
    col: int
    expected: CellLabel
    actual: CellLabel

    def __str__(self) -> str:
        return (
            f"invalid numbering at {self.row},{self.col}: "
            f"expected {self.expected} but found {self.actual}"
        )


@dataclass
class LabeledCellError(PuzzleIssue):
    row: int
    col: int
    reason: str

    def __str__(self) -> str:
        return f"error in labeled cell at {self.row},{self.col}: {self.reason}"


@dataclass
class InvalidGridItem(PuzzleIssue):
    row: int
    col: int
    actual: object

    def __str__(self) -> str:
        return (
            f"invalid grid item at {self.row},{self.col}: expected a cell, "
            f"a string or None, but found {type(self.actual).__name__}"
        )


@dataclass
class InvalidMetadata(PuzzleIssue):
    field: str
    actual: object

    def __str__(self) -> str:
        return f"{self.field} must be a string, found {type(self.actual).__name__}"
