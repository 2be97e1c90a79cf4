"""Tests for validation.py."""

import pytest

from grid_builder import expected_grid_nums
from models import (
    CellKind,
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
from validation import normalize_clues, validate, validate_clues


def _clues(numbers, prefix="clue"):
    return [(n, f"{prefix} {n}") for n in numbers]


def _args_for(width, height, cells, **kwargs):
    """Args whose clue lists match the grid's numbering."""
    grid = Grid(width, height, tuple(CrosswordCell.from_text(c) for c in cells))
    across, down = expected_grid_nums(grid)
    return CrosswordArgs(
        width=width,
        height=height,
        cells=list(cells),
        across_clues=_clues(across, "across"),
        down_clues=_clues(down, "down"),
        **kwargs,
    )


class TestValidateClues:
    def test_matching(self):
        validate_clues([1, 2, 3], _clues([1, 2, 3]))

    def test_empty(self):
        validate_clues([], [])

    def test_misordered_wins_over_count(self):
        with pytest.raises(MisorderedClues):
            validate_clues([1, 2, 3], [(1, "x"), (3, "y"), (2, "z")])

    def test_misordered_even_when_lengths_differ(self):
        with pytest.raises(MisorderedClues):
            validate_clues([1, 2], [(2, "a"), (1, "b"), (3, "c")])

    def test_duplicate_numbers_are_misordered(self):
        with pytest.raises(MisorderedClues):
            validate_clues([1, 2], [(1, "a"), (1, "b")])

    def test_count_mismatch(self):
        with pytest.raises(MismatchedClueCount) as exc_info:
            validate_clues([1, 2, 3], _clues([1, 2]))
        assert exc_info.value == MismatchedClueCount(expected=3, actual=2)
        assert str(exc_info.value) == "expected 3 clues, found 2"

    def test_missing_clue(self):
        with pytest.raises(MissingClue) as exc_info:
            validate_clues([1, 2, 3], _clues([1, 3, 4]))
        assert exc_info.value.number == 2

    def test_extra_clue(self):
        with pytest.raises(ExtraClue) as exc_info:
            validate_clues([1, 3, 4], _clues([1, 2, 3]))
        assert exc_info.value.number == 2


class TestNormalizeClues:
    def test_returns_tuples(self):
        assert normalize_clues([[1, "a"], (2, "b")]) == ((1, "a"), (2, "b"))

    def test_rejects_non_pair(self):
        with pytest.raises(InvalidClue) as exc_info:
            normalize_clues([(1, "a"), (2,)])
        assert exc_info.value.index == 1

    def test_rejects_bool_number(self):
        with pytest.raises(InvalidClue):
            normalize_clues([(True, "a")])

    def test_rejects_out_of_range_number(self):
        with pytest.raises(InvalidClue):
            normalize_clues([(70000, "a")])

    def test_rejects_non_string_text(self):
        with pytest.raises(InvalidClue):
            normalize_clues([(1, None)])


class TestValidate:
    def test_one_long_grid(self):
        args = CrosswordArgs(
            width=2,
            height=2,
            cells=[
                CrosswordCell.char("A"), CrosswordCell.char("B"),
                CrosswordCell.char("C"), CrosswordCell.wall(),
            ],
            across_clues=[(1, "Layout testing strategy")],
            down_clues=[(1, "Initials in cooling")],
            title="one long",
            author="me",
        )
        xword = validate(args)
        assert isinstance(xword, Crossword)
        assert xword.across_clues == ((1, "Layout testing strategy"),)
        assert xword.down_clues == ((1, "Initials in cooling"),)
        assert xword.title == "one long"

    def test_raw_strings_become_cells(self):
        xword = validate(_args_for(2, 2, ["ON", "", "A", None]))
        assert [c.kind for c in xword.cells] == [
            CellKind.REBUS, CellKind.EMPTY, CellKind.CHAR, CellKind.WALL,
        ]

    def test_result_is_immutable(self):
        xword = validate(_args_for(2, 2, ["A", "B", "C", "D"]))
        assert isinstance(xword.cells, tuple)
        with pytest.raises(AttributeError):
            xword.title = "changed"

    def test_wrong_grid_length_short_circuits(self):
        args = CrosswordArgs(
            width=2, height=2, cells=["A", "B", "C"],
            across_clues=[(5, "bad"), (1, "order")],
            down_clues=[(9, "bad")],
        )
        with pytest.raises(MultiError) as exc_info:
            validate(args)
        assert dict(exc_info.value.errors) == {"grid": InvalidGridLength(4, 3)}

    @pytest.mark.parametrize("width,height", [(0, 1), (1, 0), (256, 1), (1, 256)])
    def test_invalid_grid_size(self, width, height):
        args = CrosswordArgs(width=width, height=height, cells=[])
        with pytest.raises(MultiError) as exc_info:
            validate(args)
        assert dict(exc_info.value.errors) == {"grid": InvalidGridSize(width, height)}

    def test_max_size_accepted(self):
        cells = [None] * (255 * 255)
        xword = validate(CrosswordArgs(width=255, height=255, cells=cells))
        assert xword.width == 255

    def test_both_clue_lists_reported(self):
        args = CrosswordArgs(
            width=2, height=2, cells=["A", "B", "C", "D"],
            across_clues=[(1, "a")],
            down_clues=[(2, "b"), (1, "c")],
        )
        with pytest.raises(MultiError) as exc_info:
            validate(args)
        assert dict(exc_info.value.errors) == {
            "across_clues": MismatchedClueCount(expected=2, actual=1),
            "down_clues": MisorderedClues(),
        }

    def test_malformed_clue_entry(self):
        args = _args_for(2, 2, ["A", "B", "C", "D"])
        args.across_clues = [(1, "a"), ("3", "b")]
        with pytest.raises(MultiError) as exc_info:
            validate(args)
        assert isinstance(exc_info.value["across_clues"], InvalidClue)
        assert "down_clues" not in exc_info.value

    def test_99_distinct_rebuses_accepted(self):
        cells = [f"R{i:02d}" for i in range(99)] + ["A"]
        xword = validate(_args_for(10, 10, cells))
        assert sum(c.kind == CellKind.REBUS for c in xword.cells) == 99

    def test_100_distinct_rebuses_rejected(self):
        cells = [f"R{i:02d}" for i in range(100)]
        with pytest.raises(MultiError) as exc_info:
            validate(_args_for(10, 10, cells))
        assert exc_info.value["grid"] == TooManyRebuses(100)

    def test_repeated_rebus_counts_once(self):
        cells = ["ON"] * 100
        xword = validate(_args_for(10, 10, cells))
        assert len({c.text for c in xword.cells}) == 1

    def test_rebus_error_reported_with_clue_errors(self):
        args = _args_for(10, 10, [f"R{i:02d}" for i in range(100)])
        args.down_clues = []
        with pytest.raises(MultiError) as exc_info:
            validate(args)
        assert set(exc_info.value.errors) == {"grid", "down_clues"}

    def test_bad_cell_type(self):
        args = CrosswordArgs(width=2, height=2, cells=["A", "B", 42, "D"])
        with pytest.raises(MultiError) as exc_info:
            validate(args)
        assert dict(exc_info.value.errors) == {"grid": InvalidGridItem(1, 0, 42)}
        assert str(exc_info.value["grid"]) == (
            "invalid grid item at 1,0: expected a cell, a string or None, but found int"
        )

    @pytest.mark.parametrize("name", ["title", "author", "copyright", "notes"])
    def test_non_string_metadata(self, name):
        args = _args_for(2, 2, ["A", "B", "C", "D"])
        setattr(args, name, None)
        with pytest.raises(MultiError) as exc_info:
            validate(args)
        assert dict(exc_info.value.errors) == {"grid": InvalidMetadata(name, None)}

    def test_metadata_checked_before_encoding(self):
        args = _args_for(2, 2, ["A", "B", "C", "D"], title=7)
        with pytest.raises(MultiError, match="title must be a string, found int"):
            validate(args)
