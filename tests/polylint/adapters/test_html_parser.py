"""Tests for polylint.adapters.html_parser."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from polylint.adapters.html_parser import parse_html, parse_html_file
from polylint.kernel.dom import Element, Text, has_tag_name, walk_all, walk_first
from polylint.kernel.exceptions import ParseError, ResourceNotFoundError
from polylint.kernel.linting.models import Location

if TYPE_CHECKING:
    from pathlib import Path


def _element(document, tag_name: str) -> Element:
    node = walk_first(document, has_tag_name(tag_name))
    assert isinstance(node, Element)
    return node


class TestParseHtml:
    def test_document(self) -> None:
        document = parse_html("<p>hi</p>", "index.html")
        assert document.href == "index.html"
        assert document.document == "index.html"
        assert document.location == Location(1, 0)

    def test_element_locations(self) -> None:
        document = parse_html("<div>\n  <span>x</span>\n</div>", "index.html")
        assert _element(document, "div").location == Location(1, 0)
        assert _element(document, "span").location == Location(2, 2)

    def test_text_location(self) -> None:
        document = parse_html("<div>\n  <b>{{name}}</b></div>", "index.html")
        text = _element(document, "b").children[0]
        assert isinstance(text, Text)
        assert text.value == "{{name}}"
        assert text.location == Location(2, 5)

    def test_attributes_in_source_order(self) -> None:
        document = parse_html('<a href$="{{link}}" Title="t" hidden></a>', "index.html")
        anchor = _element(document, "a")
        assert [(a.name, a.value) for a in anchor.attributes] == [
            ("href$", "{{link}}"),
            ("title", "t"),
            ("hidden", None),
        ]
        assert all(a.element is anchor for a in anchor.attributes)
        assert anchor.get_attribute("title") == "t"
        assert anchor.has_attribute("hidden")
        assert not anchor.has_attribute("id")

    def test_parent_links(self) -> None:
        document = parse_html("<ul><li>one</li></ul>", "index.html")
        item = _element(document, "li")
        assert item.parent is _element(document, "ul")
        assert item.document == "index.html"

    def test_void_elements_have_no_children(self) -> None:
        document = parse_html('<div><link rel="import" href="a.html"><p>x</p></div>', "i.html")
        div = _element(document, "div")
        assert [c.tag_name for c in div.children if isinstance(c, Element)] == ["link", "p"]

    def test_self_closing_element(self) -> None:
        document = parse_html("<div><x-icon/><span></span></div>", "i.html")
        div = _element(document, "div")
        assert [c.tag_name for c in div.children if isinstance(c, Element)] == [
            "x-icon",
            "span",
        ]

    def test_stray_end_tag_ignored(self) -> None:
        document = parse_html("<div></span><p></p></div>", "i.html")
        assert _element(document, "p").parent is _element(document, "div")

    def test_template_content_is_a_subtree(self) -> None:
        document = parse_html(
            '<dom-module id="x-a"><template><span>{{a}}</span></template></dom-module>', "i.html"
        )
        template = _element(document, "template")
        assert [c.tag_name for c in template.children if isinstance(c, Element)] == ["span"]

    def test_script_content_is_text(self) -> None:
        document = parse_html("<script>if (a < b) { go(); }</script>", "i.html")
        script = _element(document, "script")
        [text] = script.children
        assert isinstance(text, Text)
        assert text.value == "if (a < b) { go(); }"

    def test_char_refs_converted(self) -> None:
        document = parse_html("<p>a &amp; b</p>", "i.html")
        [text] = _element(document, "p").children
        assert isinstance(text, Text)
        assert text.value == "a & b"

    def test_unclosed_elements(self) -> None:
        document = parse_html("<div><p>text", "i.html")
        assert len(walk_all(document, has_tag_name("p"))) == 1


class TestParseHtmlFile:
    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "page.html"
        path.write_text("<x-a></x-a>", encoding="utf-8")
        document = parse_html_file(path)
        assert document.href == str(path)
        assert _element(document, "x-a").document == str(path)

    def test_explicit_href(self, tmp_path: Path) -> None:
        path = tmp_path / "page.html"
        path.write_text("<p></p>", encoding="utf-8")
        assert parse_html_file(path, href="page.html").href == "page.html"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ResourceNotFoundError, match="not found"):
            parse_html_file(tmp_path / "missing.html")

    def test_undecodable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.html"
        path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(ParseError):
            parse_html_file(path)
