"""Locate binding expressions inside a component's templates.

Only the component's own outermost ``<template>`` elements (those with no
template ancestor) inside its first ``<dom-module>`` are searched. Content of
templates nested inside them (``dom-repeat``, ``dom-if``) introduces its own
scope and is skipped, although the nested ``<template>`` element's own
attributes are still collected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from polylint.kernel.components import ComponentModel
from polylint.kernel.dom import (
    Attribute,
    Element,
    Node,
    Text,
    all_of,
    is_template,
    is_text,
    iter_tree,
    not_,
    parent_matches,
    walk_all,
)
from polylint.kernel.expressions import (
    ParsedExpression,
    extract_binding_expression,
    parse_expression,
)

# Suffix marking a binding to the native DOM attribute instead of a property
NATIVE_BINDING_MARKER = "$"

NATIVE_ATTRIBUTES = frozenset({
    "accesskey",
    "class",
    "contenteditable",
    "contextmenu",
    "dir",
    "draggable",
    "dropzone",
    "hidden",
    "href",
    "id",
    "itemprop",
    "lang",
    "spellcheck",
    "style",
    "tabindex",
    "title",
})

# WAI-ARIA states and properties, plus the host-language "role" attribute
A11Y_ATTRIBUTES = frozenset({
    "aria-activedescendant",
    "aria-atomic",
    "aria-autocomplete",
    "aria-busy",
    "aria-checked",
    "aria-controls",
    "aria-describedby",
    "aria-disabled",
    "aria-dropeffect",
    "aria-expanded",
    "aria-flowto",
    "aria-grabbed",
    "aria-haspopup",
    "aria-hidden",
    "aria-invalid",
    "aria-label",
    "aria-labelledby",
    "aria-level",
    "aria-live",
    "aria-multiline",
    "aria-multiselectable",
    "aria-orientation",
    "aria-owns",
    "aria-posinset",
    "aria-pressed",
    "aria-readonly",
    "aria-relevant",
    "aria-required",
    "aria-selected",
    "aria-setsize",
    "aria-sort",
    "aria-valuemax",
    "aria-valuemin",
    "aria-valuenow",
    "aria-valuetext",
    "role",
})

DATA_ATTRIBUTE_PREFIX = "data-"

# {{x} and [[x] (open without close), then the mirror cases on the reversed text
_OPEN_WITHOUT_CLOSE = (
    re.compile(r"\{\{([^}]*)\}(?!\})"),
    re.compile(r"\[\[([^\]]*)\](?!\])"),
)
_CLOSE_WITHOUT_OPEN_REVERSED = (
    re.compile(r"\}\}([^{]*)\{(?!\{)"),
    re.compile(r"\]\]([^\[]*)\[(?!\[)"),
)
_DELIMITER_PAIRS = (("{{", "}}"), ("[[", "]]"))

_in_nested_template = parent_matches(all_of(is_template, parent_matches(is_template)))


@dataclass(frozen=True, slots=True)
class BindingOccurrence:
    """A binding expression found in a template.

    Attributes
    ----------
    expression : str
        Raw delimited text, e.g. ``{{foo}}``
    node : Node
        Text node, or the element owning the attribute
    parsed : ParsedExpression
        The parsed expression
    attribute_name : str | None
        Attribute name when the binding is an attribute value
    native : bool
        True for ``name$=`` bindings to a native attribute
    """

    expression: str
    node: Node
    parsed: ParsedExpression
    attribute_name: str | None = None
    native: bool = False


@dataclass(frozen=True, slots=True)
class BadBindingOccurrence:
    """Text whose binding delimiters do not pair up."""

    expression: str
    node: Node
    attribute_name: str | None = None
    unwrapped: str | None = None


# ---------------------------------------------------------------------------
# Delimiter checks
# ---------------------------------------------------------------------------


def is_binding_expression(text: str) -> bool:
    return extract_binding_expression(text) is not None


def extract_bad_binding_expression(text: str) -> str | None:
    """Return ``text`` if its binding delimiters are unbalanced, else None.

    Catches an opening ``{{``/``[[`` closed by a single brace/bracket,
    a closing ``}}``/``]]`` opened by a single one, and any opening
    delimiter with no closing delimiter after it (or the reverse).

    Examples
    --------
    >>> extract_bad_binding_expression("{{name}")
    '{{name}'
    >>> extract_bad_binding_expression("{{name}}") is None
    True
    """
    if any(pattern.search(text) for pattern in _OPEN_WITHOUT_CLOSE):
        return text
    reversed_text = text[::-1]
    if any(pattern.search(reversed_text) for pattern in _CLOSE_WITHOUT_OPEN_REVERSED):
        return text
    if any(
        _has_unpaired_delimiters(text, opening, closing) for opening, closing in _DELIMITER_PAIRS
    ):
        return text
    return None


def _has_unpaired_delimiters(text: str, opening: str, closing: str) -> bool:
    """True unless opening and closing delimiters strictly alternate."""
    expect_opening = True
    position = 0
    while True:
        next_open = text.find(opening, position)
        next_close = text.find(closing, position)
        if next_open < 0 and next_close < 0:
            return not expect_opening
        is_opening = next_close < 0 or 0 <= next_open < next_close
        if is_opening != expect_opening:
            return True
        expect_opening = not expect_opening
        position = (next_open if is_opening else next_close) + len(opening)


def is_bad_binding_expression(text: str) -> bool:
    return extract_bad_binding_expression(text) is not None


# ---------------------------------------------------------------------------
# Attribute classification
# ---------------------------------------------------------------------------


def is_native_attribute(name: str) -> bool:
    return name in NATIVE_ATTRIBUTES


def is_native_binding(attribute_name: str) -> bool:
    """True for ``name$`` where ``name`` is a native attribute."""
    return attribute_name.endswith(NATIVE_BINDING_MARKER) and is_native_attribute(
        attribute_name[: -len(NATIVE_BINDING_MARKER)]
    )


def is_problematic_attribute(attribute_name: str, element: Node) -> bool:
    """True when a binding targets a native attribute without the ``$`` marker.

    ``for`` only counts on ``<label>``; any ``data-*`` attribute counts.
    """
    if attribute_name.endswith(NATIVE_BINDING_MARKER):
        return False
    name = attribute_name.lower()
    if name == "for":
        return isinstance(element, Element) and element.tag_name == "label"
    if is_native_attribute(name):
        return True
    return name.startswith(DATA_ATTRIBUTE_PREFIX)


def is_a11y_attribute(attribute_name: str) -> bool:
    return attribute_name.lower() in A11Y_ATTRIBUTES


# ---------------------------------------------------------------------------
# Template queries
# ---------------------------------------------------------------------------


def dom_module_templates(model: ComponentModel, component_id: str) -> list[Element]:
    """Outermost templates of the first ``<dom-module>`` registered for ``component_id``."""
    dom_modules = model.dom_modules(component_id)
    if not dom_modules:
        return []
    outer_template = all_of(is_template, not_(parent_matches(is_template)))
    return [node for node in walk_all(dom_modules[0], outer_template) if isinstance(node, Element)]


def text_nodes_in_templates(model: ComponentModel, component_id: str) -> list[Text]:
    text_nodes: list[Text] = []
    for template in dom_module_templates(model, component_id):
        for node in walk_all(template, all_of(is_text, not_(_in_nested_template))):
            if isinstance(node, Text):
                text_nodes.append(node)
    return text_nodes


def attributes_in_templates(model: ComponentModel, component_id: str) -> list[Attribute]:
    """Every attribute of every element in the component's templates, in document order."""
    attributes: list[Attribute] = []
    for template in dom_module_templates(model, component_id):
        for node in iter_tree(template):
            if isinstance(node, Element) and not _in_nested_template(node):
                attributes.extend(node.attributes)
    return attributes


# ---------------------------------------------------------------------------
# Binding occurrences
# ---------------------------------------------------------------------------


def text_binding_expressions(model: ComponentModel, component_id: str) -> list[BindingOccurrence]:
    return [
        BindingOccurrence(
            expression=node.value,
            node=node,
            parsed=parse_expression(node.value),
        )
        for node in text_nodes_in_templates(model, component_id)
        if is_binding_expression(node.value)
    ]


def attribute_binding_expressions(
    model: ComponentModel, component_id: str
) -> list[BindingOccurrence]:
    return [
        BindingOccurrence(
            expression=attribute.value,
            node=attribute.element,
            parsed=parse_expression(attribute.value),
            attribute_name=attribute.name,
            native=is_native_binding(attribute.name),
        )
        for attribute in attributes_in_templates(model, component_id)
        if attribute.value and is_binding_expression(attribute.value)
    ]


def bad_binding_expressions(model: ComponentModel, component_id: str) -> list[BadBindingOccurrence]:
    """Text nodes and attribute values with unbalanced delimiters."""
    occurrences = [
        BadBindingOccurrence(
            expression=node.value,
            node=node,
            unwrapped=extract_binding_expression(node.value),
        )
        for node in text_nodes_in_templates(model, component_id)
        if is_bad_binding_expression(node.value)
    ]
    occurrences.extend(
        BadBindingOccurrence(
            expression=attribute.value,
            node=attribute.element,
            attribute_name=attribute.name,
            unwrapped=extract_binding_expression(attribute.value),
        )
        for attribute in attributes_in_templates(model, component_id)
        if attribute.value and is_bad_binding_expression(attribute.value)
    )
    return occurrences
