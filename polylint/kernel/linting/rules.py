"""Lint rule protocol, registry and runner for component models."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Protocol

from polylint.kernel.components import ComponentModel
from polylint.kernel.linting.models import Diagnostic, LintReport
from polylint.kernel.logging import get_logger

logger = get_logger(__name__)


class LintRule(Protocol):
    """Protocol for a single lint rule.

    Rules are independent: a rule reads the model and returns its own
    diagnostics, never looking at another rule's output. ``path`` is the
    entry document of the run; rules that do not need it ignore it.
    """

    rule_id: str
    description: str

    def check(self, model: ComponentModel, path: str) -> list[Diagnostic]:
        """Run this rule against the model and return diagnostics."""
        ...


class RuleRegistry:
    """Ordered collection of rules keyed by rule id."""

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[LintRule] = ()) -> None:
        self._rules: dict[str, LintRule] = {}
        for rule in rules:
            self.register(rule)

    def register(self, rule: LintRule) -> LintRule:
        """Add a rule; a rule id may only be registered once."""
        if rule.rule_id in self._rules:
            raise ValueError(f"Rule '{rule.rule_id}' is already registered")
        self._rules[rule.rule_id] = rule
        return rule

    def get(self, rule_id: str) -> LintRule | None:
        return self._rules.get(rule_id)

    @property
    def rule_ids(self) -> list[str]:
        return list(self._rules)

    def __iter__(self) -> Iterator[LintRule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def without(self, rule_ids: Iterable[str]) -> list[LintRule]:
        """Registered rules minus the given ids, in registry order."""
        skipped = set(rule_ids)
        return [rule for rule in self._rules.values() if rule.rule_id not in skipped]


def run_rules(rules: Iterable[LintRule], model: ComponentModel, path: str) -> LintReport:
    """Run rules in order against a component model and return a report.

    Exceptions raised by a rule are programming errors and propagate.
    """
    report = LintReport()
    for rule in rules:
        diagnostics = rule.check(model, path)
        logger.debug(
            "Rule {rule_id} produced {count} diagnostic(s)",
            rule_id=rule.rule_id,
            count=len(diagnostics),
        )
        report.extend(diagnostics)
    return report
