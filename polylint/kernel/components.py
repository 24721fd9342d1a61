"""Read-only component model consumed by the lint rules.

A :class:`ComponentModel` is built once per lint run by
:func:`polylint.adapters.component_analyzer.load_component_model` (or by hand
in tests) and never mutated afterwards. Lookups that the rules repeat, such
as finding the ``<dom-module>`` registrations for an id, are precomputed in
the constructor.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from polylint.kernel.dom import (
    Document,
    Element,
    Node,
    Predicate,
    has_tag_name,
    walk_all,
)
from polylint.kernel.linting.models import Location

FUNCTION_TYPE = "Function"


@dataclass(frozen=True, slots=True)
class SourcePosition:
    """A location together with the file it belongs to."""

    filename: str
    location: Location


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """One declared property (or method) of a component.

    Attributes
    ----------
    name : str
        Property name
    type : str
        Declared type name; methods are ``"Function"``
    observer : str | None
        Name of the observer method declared for this property
    position : SourcePosition | None
        Where the property is declared
    observer_position : SourcePosition | None
        Where the observer name is written
    """

    name: str
    type: str = ""
    observer: str | None = None
    position: SourcePosition | None = None
    observer_position: SourcePosition | None = None

    @property
    def is_function(self) -> bool:
        return self.type == FUNCTION_TYPE


@dataclass(frozen=True, slots=True)
class ObserverDescriptor:
    """One entry of a component's ``observers`` array."""

    expression: str
    position: SourcePosition | None = None


@dataclass(frozen=True, slots=True)
class ComponentDefinition:
    """A registered component.

    ``tag_name`` is the component's ``is`` identifier, which is also the tag
    name it registers.
    """

    tag_name: str
    properties: tuple[PropertyDescriptor, ...] = ()
    observers: tuple[ObserverDescriptor, ...] = ()
    script_element: Element | None = None
    content_href: str = ""
    position: SourcePosition | None = None


class ComponentModel:
    """All components and documents of one lint run.

    Parameters
    ----------
    components : Iterable[ComponentDefinition]
        Registrations in discovery order
    documents : Mapping[str, Document]
        Parsed documents keyed by href, in load order
    """

    __slots__ = ("_dom_modules", "components", "documents", "elements_by_tag_name")

    def __init__(
        self,
        components: Iterable[ComponentDefinition],
        documents: Mapping[str, Document],
    ) -> None:
        self.components: tuple[ComponentDefinition, ...] = tuple(components)
        self.documents: dict[str, Document] = dict(documents)
        self.elements_by_tag_name: dict[str, ComponentDefinition] = {}
        for component in self.components:
            self.elements_by_tag_name.setdefault(component.tag_name, component)
        self._dom_modules: dict[str, list[Element]] = {}
        for element in self.walk_all_documents(has_tag_name("dom-module")):
            module_id = element.get_attribute("id") if isinstance(element, Element) else None
            if module_id is not None:
                self._dom_modules.setdefault(module_id, []).append(element)

    def dom_modules(self, component_id: str) -> list[Element]:
        """Return every ``<dom-module id=component_id>`` in document order."""
        return list(self._dom_modules.get(component_id, ()))

    def walk_all_documents(self, predicate: Predicate) -> list[Node]:
        """Return matching nodes across all documents, in load order."""
        matches: list[Node] = []
        for document in self.documents.values():
            matches.extend(walk_all(document, predicate))
        return matches

    def loaded_document(self, href: str) -> Document | None:
        return self.documents.get(href)
