"""Tests for polylint.kernel.conformance.policy."""

from __future__ import annotations

import pytest

from polylint.kernel.conformance.policy import (
    PathFilter,
    Policy,
    Requirement,
    RequirementSpec,
    RequirementType,
    from_requirements,
)
from polylint.kernel.exceptions import ConfigurationError


def _requirement(**entry) -> Requirement:
    entry.setdefault("type", "BANNED_NAME")
    entry.setdefault("value", ["eval"])
    return Requirement.from_spec(entry)


# ---------------------------------------------------------------------------
# RequirementSpec
# ---------------------------------------------------------------------------


class TestRequirementSpec:
    def test_scalars_become_lists(self) -> None:
        spec = RequirementSpec.model_validate(
            {"type": "BANNED_NAME", "value": "eval", "whitelist": "vendor/"}
        )
        assert spec.value == ["eval"]
        assert spec.whitelist == ["vendor/"]

    def test_list_items_become_strings(self) -> None:
        spec = RequirementSpec.model_validate({"type": "BANNED_NAME", "value": ["eval", 3]})
        assert spec.value == ["eval", "3"]

    def test_missing_lists(self) -> None:
        spec = RequirementSpec.model_validate({"type": "BANNED_NAME"})
        assert spec.value == []
        assert spec.whitelist is None
        assert spec.only_apply_to is None

    def test_unknown_keys_ignored(self) -> None:
        spec = RequirementSpec.model_validate({"type": "BANNED_NAME", "extends": "base"})
        assert spec.type == "BANNED_NAME"


# ---------------------------------------------------------------------------
# PathFilter
# ---------------------------------------------------------------------------


class TestPathFilter:
    def test_none_when_nothing_given(self) -> None:
        assert PathFilter.build(None, None) is None

    @pytest.mark.parametrize("value", ["a/b/c.js", "a/b/", "a/b", "a/", "a"])
    def test_directory_prefixes(self, value: str) -> None:
        path_filter = PathFilter.build([value], None)
        assert path_filter is not None
        assert path_filter("a/b/c.js")

    @pytest.mark.parametrize("value", ["a/bc", "b", "a/b/c", "c.js"])
    def test_non_prefixes(self, value: str) -> None:
        path_filter = PathFilter.build([value], None)
        assert path_filter is not None
        assert not path_filter("a/b/c.js")

    def test_regexp_matches_anywhere(self) -> None:
        path_filter = PathFilter.build(None, [r"_test\.js$"])
        assert path_filter is not None
        assert path_filter("src/app/widget_test.js")
        assert not path_filter("src/app/widget.js")

    def test_case_insensitive_flag(self) -> None:
        path_filter = PathFilter.build(None, ["(?i)VENDOR/"])
        assert path_filter is not None
        assert path_filter("lib/vendor/x.js")

    def test_windows_separators(self) -> None:
        path_filter = PathFilter.build(["third_party/"], None)
        assert path_filter is not None
        assert path_filter("third_party\\lib\\x.js")

    def test_empty_lists_match_nothing(self) -> None:
        path_filter = PathFilter.build([], [])
        assert path_filter is not None
        assert not path_filter("anything.js")

    def test_invalid_regexp(self) -> None:
        with pytest.raises(ConfigurationError, match="invalid path regular expression"):
            PathFilter.build(None, ["(unclosed"])


# ---------------------------------------------------------------------------
# Requirement
# ---------------------------------------------------------------------------


class TestRequirement:
    def test_from_spec(self) -> None:
        requirement = _requirement(error_message="eval is not allowed", rule_id="no-eval")
        assert requirement.kind is RequirementType.BANNED_NAME
        assert requirement.value == ("eval",)
        assert requirement.error_message == "eval is not allowed"
        assert requirement.rule_id == "no-eval"
        assert requirement.include is None
        assert requirement.exclude is None

    def test_applies_everywhere_by_default(self) -> None:
        assert _requirement().applies_to("any/path.js")

    def test_whitelist(self) -> None:
        requirement = _requirement(whitelist=["third_party/"])
        assert not requirement.applies_to("third_party/lib.js")
        assert requirement.applies_to("src/app.js")

    def test_whitelist_regexp(self) -> None:
        requirement = _requirement(whitelist_regexp=[r"\.min\.js$"])
        assert not requirement.applies_to("dist/app.min.js")
        assert requirement.applies_to("dist/app.js")

    def test_only_apply_to(self) -> None:
        requirement = _requirement(only_apply_to=["src/"])
        assert requirement.applies_to("src/app.js")
        assert not requirement.applies_to("test/app.js")

    def test_only_apply_to_regexp(self) -> None:
        requirement = _requirement(only_apply_to_regexp=["^src/.*\\.js$"])
        assert requirement.applies_to("src/a/b.js")
        assert not requirement.applies_to("lib/src/b.js")

    def test_whitelist_and_only_apply_to_conflict(self) -> None:
        with pytest.raises(ConfigurationError, match="both whitelist"):
            _requirement(whitelist=["a/"], only_apply_to=["b/"])

    def test_regexp_variants_conflict(self) -> None:
        with pytest.raises(ConfigurationError):
            _requirement(whitelist_regexp=["a"], only_apply_to_regexp=["b"])

    def test_custom_requires_js_module(self) -> None:
        with pytest.raises(ConfigurationError, match="js_module"):
            _requirement(type="CUSTOM")

    def test_js_module_only_on_custom(self) -> None:
        with pytest.raises(ConfigurationError, match="js_module"):
            _requirement(js_module="checks.js")

    def test_custom_with_js_module(self) -> None:
        requirement = _requirement(type="CUSTOM", js_module="checks.js")
        assert requirement.kind is RequirementType.CUSTOM

    def test_unknown_type(self) -> None:
        with pytest.raises(ConfigurationError, match="invalid requirement type"):
            _requirement(type="BANNED_THING")

    def test_missing_type(self) -> None:
        with pytest.raises(ConfigurationError, match="missing requirement type"):
            Requirement.from_spec({"value": ["eval"]})

    def test_rule_id_names_error_component(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            _requirement(type="NOPE", rule_id="my-rule")
        assert exc_info.value.component == "my-rule"

    def test_type_numbers(self) -> None:
        assert RequirementType.CUSTOM.value == 1
        assert RequirementType.BANNED_PROPERTY_CALL.value == 10


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------


class TestPolicy:
    def test_from_requirements(self) -> None:
        policy = from_requirements(
            {
                "requirement": [
                    {"type": "BANNED_NAME", "value": ["eval"]},
                    {"type": "BANNED_PROPERTY", "value": ["Object.prototype.innerHTML"]},
                ]
            }
        )
        assert len(policy) == 2
        assert [r.kind for r in policy.requirements] == [
            RequirementType.BANNED_NAME,
            RequirementType.BANNED_PROPERTY,
        ]

    def test_empty_requirement_list(self) -> None:
        assert len(from_requirements({"requirement": []})) == 0

    def test_missing_requirement_array(self) -> None:
        with pytest.raises(ConfigurationError, match="missing requirement array"):
            from_requirements({})

    def test_requirement_not_a_list(self) -> None:
        with pytest.raises(ConfigurationError, match="missing requirement array"):
            from_requirements({"requirement": {"type": "BANNED_NAME"}})

    def test_entry_not_a_mapping(self) -> None:
        with pytest.raises(ConfigurationError, match=r"requirement\[1\]"):
            from_requirements({"requirement": [{"type": "BANNED_NAME"}, "eval"]})

    def test_applicable_to_keeps_order(self) -> None:
        policy = Policy(
            [
                _requirement(rule_id="first", only_apply_to=["src/"]),
                _requirement(rule_id="second"),
                _requirement(rule_id="third", whitelist=["src/"]),
            ]
        )
        assert [r.rule_id for r in policy.applicable_to("src/a.js")] == ["first", "second"]
        assert [r.rule_id for r in policy.applicable_to("lib/a.js")] == ["second", "third"]
