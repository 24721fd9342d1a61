"""Conformance policy matching for JavaScript sources."""

from polylint.kernel.conformance.checker import LintOptions, ParsedScript, lint, lint_script
from polylint.kernel.conformance.policy import (
    PathFilter,
    Policy,
    Requirement,
    RequirementSpec,
    RequirementType,
    from_requirements,
)
from polylint.kernel.conformance.trie import ASTTypeTrie, ChildPosition, compile_requirements

__all__ = [
    "ASTTypeTrie",
    "ChildPosition",
    "LintOptions",
    "ParsedScript",
    "PathFilter",
    "Policy",
    "Requirement",
    "RequirementSpec",
    "RequirementType",
    "compile_requirements",
    "from_requirements",
    "lint",
    "lint_script",
]
