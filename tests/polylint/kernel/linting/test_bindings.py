"""Tests for polylint.kernel.linting.bindings."""

from __future__ import annotations

import pytest

from polylint.adapters.html_parser import parse_html
from polylint.kernel.components import ComponentDefinition, ComponentModel
from polylint.kernel.dom import Element, Text
from polylint.kernel.linting.bindings import (
    attribute_binding_expressions,
    bad_binding_expressions,
    dom_module_templates,
    extract_bad_binding_expression,
    is_a11y_attribute,
    is_bad_binding_expression,
    is_native_binding,
    is_problematic_attribute,
    text_binding_expressions,
)


def _model(html: str, tag_name: str = "x-foo") -> ComponentModel:
    document = parse_html(html, "test.html")
    return ComponentModel([ComponentDefinition(tag_name=tag_name)], {"test.html": document})


def _element(tag_name: str) -> Element:
    return Element(tag_name=tag_name)


# ---------------------------------------------------------------------------
# Delimiter checks
# ---------------------------------------------------------------------------


class TestBadBindingExpression:
    @pytest.mark.parametrize("text", ["{{x", "{{x}", "x}}", "[[x", "[[x]", "x]]", "{x}}"])
    def test_unbalanced(self, text: str) -> None:
        assert extract_bad_binding_expression(text) == text
        assert is_bad_binding_expression(text)

    @pytest.mark.parametrize(
        "text", ["{{x}}", "[[x]]", "plain text", "{{a}} and [[b]]", "{{f(a, 'b')}}", ""]
    )
    def test_balanced(self, text: str) -> None:
        assert extract_bad_binding_expression(text) is None

    def test_second_binding_unclosed(self) -> None:
        assert is_bad_binding_expression("{{a}} and {{b")

    def test_opening_after_closing(self) -> None:
        assert is_bad_binding_expression("}} {{")


# ---------------------------------------------------------------------------
# Attribute classification
# ---------------------------------------------------------------------------


class TestAttributeClassification:
    def test_native_binding(self) -> None:
        assert is_native_binding("class$")
        assert is_native_binding("href$")
        assert not is_native_binding("class")
        assert not is_native_binding("value$")

    @pytest.mark.parametrize("name", ["class", "style", "hidden", "data-id", "tabindex"])
    def test_problematic(self, name: str) -> None:
        assert is_problematic_attribute(name, _element("div"))

    @pytest.mark.parametrize("name", ["class$", "value", "items", "data-id$"])
    def test_not_problematic(self, name: str) -> None:
        assert not is_problematic_attribute(name, _element("div"))

    def test_for_only_problematic_on_label(self) -> None:
        assert is_problematic_attribute("for", _element("label"))
        assert not is_problematic_attribute("for", _element("div"))

    def test_a11y(self) -> None:
        assert is_a11y_attribute("aria-label")
        assert is_a11y_attribute("role")
        assert is_a11y_attribute("ARIA-HIDDEN")
        assert not is_a11y_attribute("aria-unknown")
        assert not is_a11y_attribute("label")


# ---------------------------------------------------------------------------
# Template queries
# ---------------------------------------------------------------------------


class TestTemplateQueries:
    def test_only_first_dom_module_searched(self) -> None:
        model = _model(
            '<dom-module id="x-foo"><template><span>{{a}}</span></template></dom-module>'
            '<dom-module id="x-foo"><template><span>{{b}}</span></template></dom-module>'
        )
        assert len(dom_module_templates(model, "x-foo")) == 1
        assert [o.expression for o in text_binding_expressions(model, "x-foo")] == ["{{a}}"]

    def test_unknown_component(self) -> None:
        model = _model("<div>{{a}}</div>")
        assert dom_module_templates(model, "x-foo") == []
        assert text_binding_expressions(model, "x-foo") == []

    def test_text_outside_template_ignored(self) -> None:
        model = _model(
            '<dom-module id="x-foo"><p>{{outside}}</p><template></template></dom-module>'
        )
        assert text_binding_expressions(model, "x-foo") == []

    def test_nested_template_content_excluded(self) -> None:
        model = _model(
            '<dom-module id="x-foo"><template>'
            '<template is="dom-repeat" items="{{items}}"><span title="{{item.title}}">'
            "{{item.name}}</span></template>"
            "</template></dom-module>"
        )
        assert text_binding_expressions(model, "x-foo") == []
        attributes = attribute_binding_expressions(model, "x-foo")
        assert [o.attribute_name for o in attributes] == ["items"]
        assert attributes[0].parsed.keys == ("items",)

    def test_text_binding_occurrence(self) -> None:
        model = _model(
            '<dom-module id="x-foo"><template><b>{{user.name}}</b></template></dom-module>'
        )
        [occurrence] = text_binding_expressions(model, "x-foo")
        assert isinstance(occurrence.node, Text)
        assert occurrence.attribute_name is None
        assert occurrence.parsed.keys == ("user",)

    def test_attribute_binding_occurrence(self) -> None:
        model = _model(
            '<dom-module id="x-foo"><template>'
            '<a href$="{{link}}" title="[[label]]" target="_blank"></a>'
            "</template></dom-module>"
        )
        occurrences = attribute_binding_expressions(model, "x-foo")
        assert [(o.attribute_name, o.native) for o in occurrences] == [
            ("href$", True),
            ("title", False),
        ]
        assert all(isinstance(o.node, Element) and o.node.tag_name == "a" for o in occurrences)


class TestBadBindingExpressions:
    def test_text_and_attribute(self) -> None:
        model = _model(
            '<dom-module id="x-foo"><template>'
            '<span>{{broken}</span><div title="[[open"></div><p>{{fine}}</p>'
            "</template></dom-module>"
        )
        occurrences = bad_binding_expressions(model, "x-foo")
        assert [(o.expression, o.attribute_name) for o in occurrences] == [
            ("{{broken}", None),
            ("[[open", "title"),
        ]
