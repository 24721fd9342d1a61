"""Tests for polylint.adapters.component_analyzer."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from polylint.adapters.component_analyzer import ComponentAnalyzer, load_component_model
from polylint.adapters.javascript import parse_javascript, parse_javascript_file
from polylint.kernel.components import FUNCTION_TYPE
from polylint.kernel.exceptions import ResourceNotFoundError
from polylint.kernel.linting.models import Location

if TYPE_CHECKING:
    from pathlib import Path

_CARD = """<dom-module id="x-card">
  <template><span>{{title}}</span></template>
</dom-module>
<script>
  Polymer({
    is: 'x-card',
    properties: {
      title: String,
      open: {type: Boolean, observer: '_openChanged'},
      count: {value: 0},
    },
    observers: ['_layout(title, open)'],
    _openChanged: function() {},
    _layout() {},
    label: 'static',
  });
</script>
"""

_INDEX = """<link rel="import" href="x-card.html">
<x-card></x-card>
"""


def _write(directory: Path, name: str, content: str) -> str:
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return os.path.normpath(str(path))


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A two-document project: index.html importing x-card.html."""
    _write(tmp_path, "x-card.html", _CARD)
    _write(tmp_path, "index.html", _INDEX)
    return tmp_path


class TestRegistrations:
    def test_component_read_from_inline_script(self, project: Path) -> None:
        model = load_component_model(project / "x-card.html")
        [component] = model.components
        assert component.tag_name == "x-card"
        assert component.content_href == os.path.normpath(str(project / "x-card.html"))
        assert component.script_element is not None
        assert component.script_element.tag_name == "script"

    def test_properties_and_methods(self, project: Path) -> None:
        model = load_component_model(project / "x-card.html")
        [component] = model.components
        assert [(p.name, p.type) for p in component.properties] == [
            ("title", "String"),
            ("open", "Boolean"),
            ("count", ""),
            ("_openChanged", FUNCTION_TYPE),
            ("_layout", FUNCTION_TYPE),
        ]

    def test_property_observer(self, project: Path) -> None:
        model = load_component_model(project / "x-card.html")
        [component] = model.components
        open_prop = next(p for p in component.properties if p.name == "open")
        assert open_prop.observer == "_openChanged"
        assert open_prop.observer_position is not None
        assert open_prop.observer_position.location.line == 9

    def test_observers_array(self, project: Path) -> None:
        model = load_component_model(project / "x-card.html")
        [component] = model.components
        [observer] = component.observers
        assert observer.expression == "_layout(title, open)"
        assert observer.position is not None
        assert observer.position.location.line == 12

    def test_positions_include_script_offset(self, project: Path) -> None:
        model = load_component_model(project / "x-card.html")
        [component] = model.components
        assert component.position is not None
        assert component.position.location == Location(5, 10)
        title = component.properties[0]
        assert title.position is not None
        assert title.position.location == Location(8, 6)

    def test_registration_without_is_ignored(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "anon.html", "<script>Polymer({properties: {}});</script>")
        assert load_component_model(path).components == ()

    def test_non_javascript_script_ignored(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "data.html",
            "<script type=\"application/json\">{\"is\": \"x-a\"}</script>"
            "<script type=\"text/x-template\">Polymer({is: 'x-b'});</script>",
        )
        analyzer = ComponentAnalyzer()
        model = analyzer.analyze(path)
        assert model.components == ()
        assert analyzer.scripts == {}

    def test_registration_inside_iife(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "wrapped.html",
            "<script>(function() {\n  Polymer({is: 'x-wrapped'});\n})();</script>",
        )
        model = load_component_model(path)
        assert [c.tag_name for c in model.components] == ["x-wrapped"]


class TestImports:
    def test_imports_followed(self, project: Path) -> None:
        analyzer = ComponentAnalyzer()
        model = analyzer.analyze(project / "index.html")
        assert list(model.documents) == [
            os.path.normpath(str(project / "index.html")),
            os.path.normpath(str(project / "x-card.html")),
        ]
        assert "x-card" in model.elements_by_tag_name

    def test_imports_not_followed(self, project: Path) -> None:
        model = load_component_model(project / "index.html", follow_imports=False)
        assert len(model.documents) == 1
        assert model.components == ()

    def test_import_cycle(self, tmp_path: Path) -> None:
        _write(tmp_path, "a.html", '<link rel="import" href="b.html">')
        _write(tmp_path, "b.html", '<link rel="import" href="a.html">')
        model = load_component_model(tmp_path / "a.html")
        assert len(model.documents) == 2

    def test_import_in_subdirectory(self, tmp_path: Path) -> None:
        _write(tmp_path, "elements/x-a.html", '<link rel="import" href="../shared/x-b.html">')
        _write(tmp_path, "shared/x-b.html", "<script>Polymer({is: 'x-b'});</script>")
        model = load_component_model(tmp_path / "elements" / "x-a.html")
        assert [c.tag_name for c in model.components] == ["x-b"]

    def test_missing_and_remote_imports_skipped(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "index.html",
            '<link rel="import" href="missing.html">'
            '<link rel="import" href="https://cdn.example.com/x.html">'
            '<link rel="stylesheet" href="style.css">',
        )
        model = load_component_model(path)
        assert len(model.documents) == 1

    def test_dom_modules_across_documents(self, project: Path) -> None:
        model = load_component_model(project / "index.html")
        [dom_module] = model.dom_modules("x-card")
        assert dom_module.document == os.path.normpath(str(project / "x-card.html"))

    def test_missing_entry(self, tmp_path: Path) -> None:
        with pytest.raises(ResourceNotFoundError):
            load_component_model(tmp_path / "missing.html")


class TestScripts:
    def test_inline_script_keyed_by_document(self, project: Path) -> None:
        analyzer = ComponentAnalyzer()
        analyzer.analyze(project / "x-card.html")
        href = os.path.normpath(str(project / "x-card.html"))
        assert list(analyzer.scripts) == [href]
        [script] = analyzer.scripts[href]
        assert script.source == href
        assert script.line_offset == 3
        assert script.column_offset == 8

    def test_external_script(self, tmp_path: Path) -> None:
        js_path = _write(tmp_path, "x-ext.js", "Polymer({\n  is: 'x-ext',\n  go() {},\n});\n")
        html_path = _write(
            tmp_path,
            "x-ext.html",
            '<dom-module id="x-ext"></dom-module>\n<script src="x-ext.js"></script>\n',
        )
        analyzer = ComponentAnalyzer()
        model = analyzer.analyze(html_path)
        assert list(analyzer.scripts) == [js_path]
        [component] = model.components
        assert component.tag_name == "x-ext"
        assert component.content_href == js_path
        assert component.position is not None
        assert component.position.filename == js_path
        assert component.position.location == Location(1, 8)
        assert component.script_element is not None
        assert component.script_element.document == html_path

    def test_missing_external_script_skipped(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "index.html", '<script src="gone.js"></script>')
        analyzer = ComponentAnalyzer()
        analyzer.analyze(path)
        assert analyzer.scripts == {}

    def test_empty_inline_script_skipped(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "index.html", "<script>\n  </script><script></script>")
        analyzer = ComponentAnalyzer()
        analyzer.analyze(path)
        assert analyzer.scripts == {}


class TestParseJavascript:
    def test_source_and_offsets(self) -> None:
        script = parse_javascript("a;", source="page.html", line_offset=3, column_offset=2)
        assert script.source == "page.html"
        assert script.location_of(script.tree.root_node) == Location(4, 2)

    def test_syntax_errors_do_not_raise(self) -> None:
        script = parse_javascript("function (")
        assert script.tree.root_node.has_error

    def test_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "a.js", "var a = 1;")
        assert parse_javascript_file(path).source == path

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ResourceNotFoundError, match="Script"):
            parse_javascript_file(tmp_path / "missing.js")
