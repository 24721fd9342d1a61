"""Readers that turn HTML and JavaScript files into the models the kernel checks."""

from polylint.adapters.component_analyzer import ComponentAnalyzer, load_component_model
from polylint.adapters.html_parser import parse_html, parse_html_file
from polylint.adapters.javascript import parse_javascript, parse_javascript_file

__all__ = [
    "ComponentAnalyzer",
    "load_component_model",
    "parse_html",
    "parse_html_file",
    "parse_javascript",
    "parse_javascript_file",
]
