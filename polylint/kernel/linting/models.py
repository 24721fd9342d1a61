"""Core models for the polylint diagnostics stream."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Location:
    """Position in a source file: 1-based line, 0-based column."""

    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single lint finding.

    ``filename``, ``location``, ``message`` and ``fatal`` form the wire shape
    consumed by presentation layers. ``rule_id`` names the producing rule and
    is used for filtering only.
    """

    filename: str
    location: Location
    message: str
    fatal: bool = True
    rule_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON wire shape."""
        return {
            "filename": self.filename,
            "location": {"line": self.location.line, "column": self.location.column},
            "message": self.message,
            "fatal": self.fatal,
        }


class LintReport:
    """Aggregated diagnostics from the component rules and the conformance checker."""

    __slots__ = ("_diagnostics",)

    def __init__(self) -> None:
        """Initialize an empty lint report."""
        self._diagnostics: list[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic to the report."""
        self._diagnostics.append(diagnostic)

    def extend(self, diagnostics: list[Diagnostic]) -> None:
        """Append diagnostics, keeping their order."""
        self._diagnostics.extend(diagnostics)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """All diagnostics in the order they were produced."""
        return self._diagnostics

    @property
    def fatal(self) -> list[Diagnostic]:
        """Diagnostics that block success."""
        return [d for d in self._diagnostics if d.fatal]

    def by_rule(self, rule_id: str) -> list[Diagnostic]:
        """Diagnostics produced by one rule."""
        return [d for d in self._diagnostics if d.rule_id == rule_id]

    @property
    def is_clean(self) -> bool:
        """True if no diagnostics were produced."""
        return len(self._diagnostics) == 0

    @property
    def has_fatal(self) -> bool:
        """True if any diagnostic blocks success."""
        return any(d.fatal for d in self._diagnostics)
