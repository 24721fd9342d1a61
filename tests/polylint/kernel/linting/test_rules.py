"""Tests for polylint.kernel.linting.rules."""

from __future__ import annotations

import pytest

from polylint.kernel.components import ComponentModel
from polylint.kernel.linting.models import Diagnostic, Location
from polylint.kernel.linting.rules import RuleRegistry, run_rules


class _StaticRule:
    """Rule that reports one fixed message."""

    description = "test rule"

    def __init__(self, rule_id: str) -> None:
        self.rule_id = rule_id
        self.seen_paths: list[str] = []

    def check(self, model: ComponentModel, path: str) -> list[Diagnostic]:
        self.seen_paths.append(path)
        return [
            Diagnostic(
                filename=path, location=Location(1, 0), message=self.rule_id, rule_id=self.rule_id
            )
        ]


class _BrokenRule:
    rule_id = "broken"
    description = "always fails"

    def check(self, model: ComponentModel, path: str) -> list[Diagnostic]:
        raise RuntimeError("rule bug")


def _empty_model() -> ComponentModel:
    return ComponentModel([], {})


class TestRuleRegistry:
    def test_register_and_get(self) -> None:
        rule = _StaticRule("a")
        registry = RuleRegistry()
        assert registry.register(rule) is rule
        assert registry.get("a") is rule
        assert registry.get("missing") is None

    def test_duplicate_rule_id_rejected(self) -> None:
        registry = RuleRegistry([_StaticRule("a")])
        with pytest.raises(ValueError, match="already registered"):
            registry.register(_StaticRule("a"))

    def test_order_preserved(self) -> None:
        registry = RuleRegistry([_StaticRule("b"), _StaticRule("a"), _StaticRule("c")])
        assert registry.rule_ids == ["b", "a", "c"]
        assert [rule.rule_id for rule in registry] == ["b", "a", "c"]
        assert len(registry) == 3

    def test_without(self) -> None:
        registry = RuleRegistry([_StaticRule("a"), _StaticRule("b"), _StaticRule("c")])
        assert [rule.rule_id for rule in registry.without(["b", "unknown"])] == ["a", "c"]


class TestRunRules:
    def test_diagnostics_in_rule_order(self) -> None:
        report = run_rules([_StaticRule("b"), _StaticRule("a")], _empty_model(), "index.html")
        assert [d.message for d in report.diagnostics] == ["b", "a"]

    def test_path_passed_to_rules(self) -> None:
        rule = _StaticRule("a")
        run_rules([rule], _empty_model(), "entry.html")
        assert rule.seen_paths == ["entry.html"]

    def test_rule_exceptions_propagate(self) -> None:
        with pytest.raises(RuntimeError, match="rule bug"):
            run_rules([_StaticRule("a"), _BrokenRule()], _empty_model(), "index.html")

    def test_no_rules(self) -> None:
        assert run_rules([], _empty_model(), "index.html").is_clean
