"""Collect one error per input section so every problem is reported in one pass."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from models import CrosswordError, PuzzleIssue

SECTIONS = frozenset({
    "grid",
    "across_clues",
    "down_clues",
    "puzzle",
    "solution",
    "clues.Across",
    "clues.Down",
})


class MultiError(CrosswordError):
    """Section name → the last error filed under it.

    Raised by ``validation.validate`` and ``ipuz_codec.from_json`` once all
    independent checks have run.
    """

    def __init__(self, errors: Mapping[str, PuzzleIssue] | None = None):
        super().__init__()
        self._errors: dict[str, PuzzleIssue] = {}
        for section, err in (errors or {}).items():
            self.insert(section, err)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, PuzzleIssue]]) -> MultiError:
        this = cls()
        for section, err in pairs:
            this.insert(section, err)
        return this

    def insert(self, section: str, err: PuzzleIssue) -> None:
        """File *err* under *section*, replacing whatever was there."""
        if section not in SECTIONS:
            raise KeyError(f"Unknown error section: {section!r}")
        self._errors[section] = err

    def is_empty(self) -> bool:
        return not self._errors

    @property
    def errors(self) -> Mapping[str, PuzzleIssue]:
        return MappingProxyType(self._errors)

    def to_dict(self) -> dict[str, str]:
        """Section → message, the shape a form shows beside each field."""
        return {section: str(err) for section, err in self._errors.items()}

    def __contains__(self, section: str) -> bool:
        return section in self._errors

    def __getitem__(self, section: str) -> PuzzleIssue:
        return self._errors[section]

    def __str__(self) -> str:
        return "; ".join(f"{section}: {err}" for section, err in self._errors.items())
