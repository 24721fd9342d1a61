"""Build template trees from HTML text with the standard-library parser.

Every node records the href of its document and where it starts (1-based
line, 0-based column). Void elements never get children and stray end tags
are ignored; no other HTML tree-construction rules are applied, so
``<template>`` content stays an ordinary subtree.
"""

from __future__ import annotations

from html.parser import HTMLParser
from pathlib import Path

from polylint.kernel.dom import Attribute, Document, Element, Text
from polylint.kernel.exceptions import ParseError, ResourceNotFoundError
from polylint.kernel.linting.models import Location
from polylint.kernel.logging import get_logger

logger = get_logger(__name__)

VOID_ELEMENTS = frozenset({
    "area",
    "base",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "keygen",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
})


class _TreeBuilder(HTMLParser):
    def __init__(self, href: str) -> None:
        super().__init__(convert_charrefs=True)
        self.href = href
        self.document = Document(document=href, location=Location(1, 0), href=href)
        self._open: list[Element | Document] = [self.document]

    def _location(self) -> Location:
        line, column = self.getpos()
        return Location(line, column)

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        parent = self._open[-1]
        element = Element(
            document=self.href,
            location=self._location(),
            parent=parent,
            tag_name=tag,
        )
        element.attributes = [Attribute(name, value, element) for name, value in attrs]
        parent.child_nodes.append(element)
        if tag not in VOID_ELEMENTS:
            self._open.append(element)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.handle_starttag(tag, attrs)
        if tag not in VOID_ELEMENTS:
            self._open.pop()

    def handle_endtag(self, tag: str) -> None:
        for index in range(len(self._open) - 1, 0, -1):
            node = self._open[index]
            if isinstance(node, Element) and node.tag_name == tag:
                del self._open[index:]
                return
        logger.debug("Ignoring stray </{tag}> in {href}", tag=tag, href=self.href)

    def handle_data(self, data: str) -> None:
        parent = self._open[-1]
        if parent.child_nodes and isinstance(parent.child_nodes[-1], Text):
            parent.child_nodes[-1].value += data
            return
        parent.child_nodes.append(
            Text(document=self.href, location=self._location(), parent=parent, value=data)
        )


def parse_html(text: str, href: str) -> Document:
    """Parse HTML text into a :class:`Document` owned by ``href``."""
    builder = _TreeBuilder(href)
    builder.feed(text)
    builder.close()
    return builder.document


def parse_html_file(path: str | Path, href: str | None = None) -> Document:
    """Read and parse an HTML file.

    Raises
    ------
    ResourceNotFoundError
        If the file does not exist
    ParseError
        If the file cannot be read or decoded
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ResourceNotFoundError("document", str(path))
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Cannot read {path}: {e}") from e
    logger.debug("Parsing {path}", path=str(path))
    return parse_html(text, href if href is not None else str(path))
