"""Template tree nodes and query primitives.

The tree is produced by :mod:`polylint.adapters.html_parser`. Nodes know
their owning document and where they start in it; the lint rules only ever
read them.

Examples
--------
Find every ``<template>`` that is not nested inside another template::

    outer = walk_all(document, all_of(is_template, not_(parent_matches(is_template))))
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from polylint.kernel.linting.models import Location

Predicate = Callable[["Node"], bool]


@dataclass(eq=False, slots=True)
class Node:
    """Base class of every template tree node."""

    document: str = ""
    location: Location = field(default_factory=lambda: Location(0, 0))
    parent: Element | Document | None = field(default=None, repr=False)

    @property
    def children(self) -> list[Node]:
        return []

    def ancestors(self) -> Iterator[Node]:
        """Yield parents from the closest outwards."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent


@dataclass(eq=False, slots=True)
class Text(Node):
    """A run of character data."""

    value: str = ""


@dataclass(eq=False, slots=True)
class Attribute:
    """One attribute of an element, in source order.

    Names are lower-cased by the HTML parser; a trailing ``$`` (native binding
    marker) is preserved.
    """

    name: str
    value: str | None
    element: Element = field(repr=False)


@dataclass(eq=False, slots=True)
class Element(Node):
    """An element with attributes and ordered children."""

    tag_name: str = ""
    attributes: list[Attribute] = field(default_factory=list)
    child_nodes: list[Node] = field(default_factory=list, repr=False)

    @property
    def children(self) -> list[Node]:
        return self.child_nodes

    def get_attribute(self, name: str) -> str | None:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return None

    def has_attribute(self, name: str) -> bool:
        return any(attribute.name == name for attribute in self.attributes)


@dataclass(eq=False, slots=True)
class Document(Node):
    """Root of a parsed HTML file."""

    href: str = ""
    child_nodes: list[Node] = field(default_factory=list, repr=False)

    @property
    def children(self) -> list[Node]:
        return self.child_nodes


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def has_tag_name(name: str) -> Predicate:
    def predicate(node: Node) -> bool:
        return isinstance(node, Element) and node.tag_name == name

    return predicate


def has_attr_value(name: str, value: str) -> Predicate:
    def predicate(node: Node) -> bool:
        return isinstance(node, Element) and node.get_attribute(name) == value

    return predicate


def is_text(node: Node) -> bool:
    return isinstance(node, Text)


def all_of(*predicates: Predicate) -> Predicate:
    def predicate(node: Node) -> bool:
        return all(p(node) for p in predicates)

    return predicate


def not_(inner: Predicate) -> Predicate:
    def predicate(node: Node) -> bool:
        return not inner(node)

    return predicate


def parent_matches(inner: Predicate) -> Predicate:
    """Match nodes with any ancestor satisfying ``inner``."""

    def predicate(node: Node) -> bool:
        return any(inner(ancestor) for ancestor in node.ancestors())

    return predicate


is_template = has_tag_name("template")


# ---------------------------------------------------------------------------
# Walking
# ---------------------------------------------------------------------------


def iter_tree(node: Node) -> Iterator[Node]:
    """Yield ``node`` and its descendants in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def walk_all(node: Node, predicate: Predicate) -> list[Node]:
    """Return ``node`` and every descendant matching ``predicate``, in document order."""
    return [candidate for candidate in iter_tree(node) if predicate(candidate)]


def walk_first(node: Node, predicate: Predicate) -> Node | None:
    return next((candidate for candidate in iter_tree(node) if predicate(candidate)), None)


def walk_prior(node: Node, predicate: Predicate) -> Node | None:
    """Search backwards in document order from ``node``.

    Earlier siblings are checked last-to-first, taking the latest match in
    each sibling's subtree, then the parent, then the parent's earlier
    siblings, and so on up to the document root.
    """
    current = node
    while current.parent is not None:
        parent = current.parent
        index = next(i for i, child in enumerate(parent.children) if child is current)
        for sibling in reversed(parent.children[:index]):
            matches = walk_all(sibling, predicate)
            if matches:
                return matches[-1]
        if predicate(parent):
            return parent
        current = parent
    return None


def text_content(node: Node) -> str:
    """Concatenate the text of ``node`` and all its descendants."""
    if isinstance(node, Text):
        return node.value
    return "".join(text_content(child) for child in node.children)


__all__ = [
    "Attribute",
    "Document",
    "Element",
    "Node",
    "Predicate",
    "Text",
    "all_of",
    "has_attr_value",
    "has_tag_name",
    "is_template",
    "is_text",
    "iter_tree",
    "not_",
    "parent_matches",
    "text_content",
    "walk_all",
    "walk_first",
    "walk_prior",
]
