"""JavaScript grammar and the node types the conformance checker understands."""

from __future__ import annotations

from functools import lru_cache

import tree_sitter_javascript as tsjs
from tree_sitter import Language

JS_LANGUAGE = Language(tsjs.language())

# Node types the requirement tests register under
IDENTIFIER = "identifier"
SHORTHAND_PROPERTY_IDENTIFIER = "shorthand_property_identifier"
SHORTHAND_PROPERTY_IDENTIFIER_PATTERN = "shorthand_property_identifier_pattern"
MEMBER_EXPRESSION = "member_expression"
SUBSCRIPT_EXPRESSION = "subscript_expression"
ASSIGNMENT_EXPRESSION = "assignment_expression"
AUGMENTED_ASSIGNMENT_EXPRESSION = "augmented_assignment_expression"
CALL_EXPRESSION = "call_expression"
STRING = "string"

# Parents whose identifier children name a label rather than a binding
LABEL_CONTEXTS = frozenset({"labeled_statement", "break_statement", "continue_statement"})

# Produced by the parser for text it could not fit to the grammar
ERROR = "ERROR"


@lru_cache(maxsize=1)
def known_node_types() -> frozenset[str]:
    """Every named node type of the bundled JavaScript grammar.

    Anything else met during traversal (``ERROR`` nodes in particular) is
    reported as an unrecognized node type.
    """
    kinds = set()
    for kind_id in range(JS_LANGUAGE.node_kind_count):
        kind = JS_LANGUAGE.node_kind_for_id(kind_id)
        if kind and JS_LANGUAGE.node_kind_is_named(kind_id) and kind != ERROR:
            kinds.add(kind)
    return frozenset(kinds)
