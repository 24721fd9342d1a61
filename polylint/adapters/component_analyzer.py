"""Discover component registrations in HTML documents and their scripts.

Starting from an entry document, the analyzer follows local HTML imports
(``<link rel="import" href="...">``), parses every inline and local external
``<script>`` with tree-sitter and reads the object literal passed to each
``Polymer({...})`` call::

    Polymer({
      is: 'x-card',
      properties: {
        title: String,
        open: {type: Boolean, observer: '_openChanged'},
      },
      observers: ['_layout(title, open)'],
      _openChanged: function() {},
    });

Methods become properties of type ``Function`` so the lint rules can treat
properties and methods uniformly.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path

from tree_sitter import Node

from polylint.adapters.html_parser import parse_html_file
from polylint.adapters.javascript import parse_javascript, parse_javascript_file
from polylint.kernel.components import (
    FUNCTION_TYPE,
    ComponentDefinition,
    ComponentModel,
    ObserverDescriptor,
    PropertyDescriptor,
    SourcePosition,
)
from polylint.kernel.conformance.checker import ParsedScript
from polylint.kernel.conformance.trie import node_text
from polylint.kernel.dom import Document, Element, Text, has_tag_name, text_content, walk_all
from polylint.kernel.exceptions import ResourceNotFoundError
from polylint.kernel.logging import get_logger

logger = get_logger(__name__)

REGISTRATION_FUNCTION = "Polymer"

_JS_SCRIPT_TYPES = frozenset({
    "",
    "text/javascript",
    "application/javascript",
    "module",
})
_FUNCTION_NODES = frozenset({
    "function",
    "function_expression",
    "arrow_function",
    "generator_function",
})


def _is_remote(href: str) -> bool:
    return "://" in href or href.startswith("//") or href.startswith("data:")


def _resolve(document_href: str, href: str) -> str:
    """Resolve ``href`` against the directory of ``document_href``."""
    href = href.split("#", 1)[0].split("?", 1)[0]
    return os.path.normpath(os.path.join(os.path.dirname(document_href), href))


def _is_import_link(element: Element) -> bool:
    rel = element.get_attribute("rel") or ""
    return "import" in rel.lower().split()


# ---------------------------------------------------------------------------
# Object literal helpers
# ---------------------------------------------------------------------------


def _string_value(node: Node | None) -> str | None:
    if node is None or node.type != "string":
        return None
    return node_text(node)[1:-1]


def _key_name(node: Node | None) -> str | None:
    if node is None:
        return None
    if node.type in ("property_identifier", "number"):
        return node_text(node)
    return _string_value(node)


def _members(obj: Node) -> Iterator[tuple[str, Node, Node | None]]:
    """Yield ``(key, key_node, value_node)`` for each member of an object literal.

    Method definitions yield None as the value.
    """
    for child in obj.named_children:
        if child.type == "pair":
            key_node = child.child_by_field_name("key")
            key = _key_name(key_node)
            if key is not None and key_node is not None:
                yield key, key_node, child.child_by_field_name("value")
        elif child.type == "method_definition":
            name_node = child.child_by_field_name("name")
            key = _key_name(name_node)
            if key is not None and name_node is not None:
                yield key, name_node, None


def _registration_objects(script: ParsedScript) -> Iterator[Node]:
    """Object literals passed as the first argument to ``Polymer(...)``."""
    stack = [script.tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == "call_expression":
            function = node.child_by_field_name("function")
            arguments = node.child_by_field_name("arguments")
            if (
                function is not None
                and function.type == "identifier"
                and node_text(function) == REGISTRATION_FUNCTION
                and arguments is not None
                and arguments.named_children
                and arguments.named_children[0].type == "object"
            ):
                yield arguments.named_children[0]
        stack.extend(reversed(node.named_children))


# ---------------------------------------------------------------------------
# Analyzer
# ---------------------------------------------------------------------------


class ComponentAnalyzer:
    """Loads documents, scripts and component registrations for one entry file.

    Parameters
    ----------
    follow_imports : bool
        Follow HTML imports from the entry document

    Attributes
    ----------
    documents : dict[str, Document]
        Parsed documents keyed by href, in load order
    scripts : dict[str, list[ParsedScript]]
        Parsed scripts keyed by the path a conformance policy filters on:
        the document href for inline scripts, the file path for external ones
    components : list[ComponentDefinition]
        Registrations in discovery order
    """

    def __init__(self, follow_imports: bool = True) -> None:
        self.follow_imports = follow_imports
        self.documents: dict[str, Document] = {}
        self.scripts: dict[str, list[ParsedScript]] = {}
        self.components: list[ComponentDefinition] = []

    def analyze(self, entry: str | Path) -> ComponentModel:
        """Load ``entry`` and everything it imports.

        Raises
        ------
        ResourceNotFoundError
            If the entry document does not exist
        ParseError
            If a document cannot be read
        """
        href = os.path.normpath(str(entry))
        if not Path(href).is_file():
            raise ResourceNotFoundError("document", href)
        self._load_document(href)
        logger.debug(
            "Loaded {documents} document(s) with {components} component(s) from {entry}",
            documents=len(self.documents),
            components=len(self.components),
            entry=href,
        )
        return ComponentModel(self.components, self.documents)

    def _load_document(self, href: str) -> None:
        if href in self.documents:
            return
        document = parse_html_file(href)
        self.documents[href] = document

        for element in walk_all(document, has_tag_name("script")):
            if isinstance(element, Element):
                self._load_script(href, element)

        if not self.follow_imports:
            return
        for element in walk_all(document, has_tag_name("link")):
            if not isinstance(element, Element) or not _is_import_link(element):
                continue
            import_href = element.get_attribute("href")
            if not import_href:
                continue
            if _is_remote(import_href):
                logger.warning("Skipping remote import {href}", href=import_href)
                continue
            resolved = _resolve(href, import_href)
            if not Path(resolved).is_file():
                logger.warning(
                    "Import {href} from {document} not found", href=import_href, document=href
                )
                continue
            self._load_document(resolved)

    def _load_script(self, document_href: str, element: Element) -> None:
        script_type = (element.get_attribute("type") or "").strip().lower()
        if script_type not in _JS_SCRIPT_TYPES:
            return

        src = element.get_attribute("src")
        if src:
            if _is_remote(src):
                logger.debug("Skipping remote script {src}", src=src)
                return
            resolved = _resolve(document_href, src)
            if not Path(resolved).is_file():
                logger.warning(
                    "Script {src} from {document} not found", src=src, document=document_href
                )
                return
            script = parse_javascript_file(resolved)
            key = resolved
        else:
            first = element.child_nodes[0] if element.child_nodes else None
            if not isinstance(first, Text) or not text_content(element).strip():
                return
            script = parse_javascript(
                text_content(element),
                source=document_href,
                line_offset=first.location.line - 1,
                column_offset=first.location.column,
            )
            key = document_href

        self.scripts.setdefault(key, []).append(script)
        for registration in _registration_objects(script):
            component = self._read_registration(script, registration, element)
            if component is not None:
                self.components.append(component)

    def _read_registration(
        self, script: ParsedScript, obj: Node, element: Element
    ) -> ComponentDefinition | None:
        def position(node: Node) -> SourcePosition:
            return SourcePosition(script.source or "", script.location_of(node))

        tag_name: str | None = None
        properties: list[PropertyDescriptor] = []
        observers: list[ObserverDescriptor] = []

        for key, key_node, value in _members(obj):
            if value is None:
                properties.append(
                    PropertyDescriptor(name=key, type=FUNCTION_TYPE, position=position(key_node))
                )
            elif key == "is":
                tag_name = _string_value(value)
            elif key == "properties" and value.type == "object":
                properties.extend(self._read_properties(value, position))
            elif key == "observers" and value.type == "array":
                observers.extend(
                    ObserverDescriptor(expression=expression, position=position(item))
                    for item in value.named_children
                    if (expression := _string_value(item)) is not None
                )
            elif value.type in _FUNCTION_NODES:
                properties.append(
                    PropertyDescriptor(name=key, type=FUNCTION_TYPE, position=position(key_node))
                )

        if not tag_name:
            logger.debug("Ignoring Polymer() call without 'is' in {source}", source=script.source)
            return None
        return ComponentDefinition(
            tag_name=tag_name,
            properties=tuple(properties),
            observers=tuple(observers),
            script_element=element,
            content_href=script.source or "",
            position=position(obj),
        )

    def _read_properties(
        self, obj: Node, position: Callable[[Node], SourcePosition]
    ) -> list[PropertyDescriptor]:
        properties = []
        for name, key_node, value in _members(obj):
            prop_type = ""
            observer = None
            observer_position = None
            if value is None or value.type in _FUNCTION_NODES:
                prop_type = FUNCTION_TYPE
            elif value.type == "identifier":
                # shorthand form: name: String
                prop_type = node_text(value)
            elif value.type == "object":
                for option, _, option_value in _members(value):
                    if option_value is None:
                        continue
                    if option == "type" and option_value.type == "identifier":
                        prop_type = node_text(option_value)
                    elif option == "observer" and (
                        observer_name := _string_value(option_value)
                    ) is not None:
                        observer = observer_name
                        observer_position = position(option_value)
            properties.append(
                PropertyDescriptor(
                    name=name,
                    type=prop_type,
                    observer=observer,
                    position=position(key_node),
                    observer_position=observer_position,
                )
            )
        return properties


def load_component_model(entry: str | Path, follow_imports: bool = True) -> ComponentModel:
    """Build the component model for one entry document."""
    return ComponentAnalyzer(follow_imports=follow_imports).analyze(entry)
