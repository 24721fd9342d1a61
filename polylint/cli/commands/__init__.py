"""CLI command modules."""

from . import lint_cmd

__all__ = ["lint_cmd"]
