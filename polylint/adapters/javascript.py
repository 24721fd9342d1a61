"""Parse JavaScript with tree-sitter into :class:`ParsedScript` objects."""

from __future__ import annotations

from pathlib import Path

from tree_sitter import Parser

from polylint.kernel.conformance.checker import ParsedScript
from polylint.kernel.conformance.node_types import JS_LANGUAGE
from polylint.kernel.exceptions import ParseError, ResourceNotFoundError


def parse_javascript(
    text: str,
    source: str | None = None,
    line_offset: int = 0,
    column_offset: int = 0,
) -> ParsedScript:
    """Parse script text.

    Syntax errors do not raise; they appear as ``ERROR`` nodes in the tree.

    Parameters
    ----------
    text : str
        JavaScript source
    source : str | None
        File the text belongs to
    line_offset : int
        Lines before the text in ``source`` (for inline ``<script>`` content)
    column_offset : int
        Column of the first character of the text in ``source``
    """
    parser = Parser(JS_LANGUAGE)
    encoded = text.encode("utf-8")
    return ParsedScript(
        tree=parser.parse(encoded),
        source=source,
        line_offset=line_offset,
        column_offset=column_offset,
        text=encoded,
    )


def parse_javascript_file(path: str | Path) -> ParsedScript:
    """Read and parse a JavaScript file.

    Raises
    ------
    ResourceNotFoundError
        If the file does not exist
    ParseError
        If the file cannot be read or decoded
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ResourceNotFoundError("script", str(path))
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Cannot read {path}: {e}") from e
    return parse_javascript(text, source=str(path))
