"""Index of requirement tests keyed by syntax node type.

Requirements are compiled into an :class:`ASTTypeTrie` so a single traversal
of a script applies every requirement at once. The trie maps a node type to
an edge holding the tests that run on nodes of that type. An edge may also
hold child tries keyed by a child path (``left``, ``function``,
``arguments.0``), for tests that only apply when a particular child has a
particular type, such as a member expression on the left of an assignment.

Examples
--------
Register a test for member expressions assigned to::

    trie = ASTTypeTrie()
    trie.add(test, "assignment_expression", ChildPosition("left", "member_expression"))
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import lru_cache

from tree_sitter import Node

from polylint.kernel.conformance.node_types import (
    ASSIGNMENT_EXPRESSION,
    AUGMENTED_ASSIGNMENT_EXPRESSION,
    CALL_EXPRESSION,
    IDENTIFIER,
    LABEL_CONTEXTS,
    MEMBER_EXPRESSION,
    SHORTHAND_PROPERTY_IDENTIFIER,
    SHORTHAND_PROPERTY_IDENTIFIER_PATTERN,
    STRING,
    SUBSCRIPT_EXPRESSION,
)
from polylint.kernel.conformance.policy import Requirement, RequirementType
from polylint.kernel.logging import get_logger

logger = get_logger(__name__)

# (edge node, traversal node, parent of the traversal node)
RequirementTest = Callable[[Node, Node, Node | None], None]
Reporter = Callable[[Node, str], None]

_ASSIGNMENTS = (ASSIGNMENT_EXPRESSION, AUGMENTED_ASSIGNMENT_EXPRESSION)
_PROPERTY_ACCESSES = (MEMBER_EXPRESSION, SUBSCRIPT_EXPRESSION)
# {eval} and const {eval} = o name the variable without an identifier node
_NAME_NODES = (IDENTIFIER, SHORTHAND_PROPERTY_IDENTIFIER, SHORTHAND_PROPERTY_IDENTIFIER_PATTERN)


@dataclass(frozen=True, slots=True)
class ChildPosition:
    """A step from an edge node to one of its children."""

    path: str
    node_type: str


class TrieEdge:
    """Tests for one node type plus child tries keyed by child path."""

    __slots__ = ("descendants", "tests")

    def __init__(self) -> None:
        self.tests: list[RequirementTest] = []
        self.descendants: dict[str, ASTTypeTrie] = {}

    def lookup(self, node: Node, out: list[tuple[TrieEdge, Node]]) -> None:
        if self.tests:
            out.append((self, node))
        for path, subtrie in self.descendants.items():
            child = resolve_child_path(node, path)
            if child is not None:
                subtrie.lookup(child, out)


class ASTTypeTrie:
    """Maps node types to :class:`TrieEdge` objects.

    Parameters
    ----------
    child_property_path : str | None
        Path from the parent edge's node to the nodes this trie sees;
        None for the root
    """

    __slots__ = ("child_property_path", "edges")

    def __init__(self, child_property_path: str | None = None) -> None:
        self.child_property_path = child_property_path
        self.edges: dict[str, TrieEdge] = {}

    def edge(self, node_type: str) -> TrieEdge:
        if node_type not in self.edges:
            self.edges[node_type] = TrieEdge()
        return self.edges[node_type]

    def add(self, test: RequirementTest, node_type: str, *positions: ChildPosition) -> None:
        """Register ``test`` under ``node_type``, descending through ``positions``.

        Raises
        ------
        ValueError
            If a child path is empty
        """
        trie = self
        current_type = node_type
        for position in positions:
            if not position.path:
                raise ValueError("Child property path must not be empty")
            edge = trie.edge(current_type)
            if position.path not in edge.descendants:
                edge.descendants[position.path] = ASTTypeTrie(position.path)
            trie = edge.descendants[position.path]
            current_type = position.node_type
        trie.edge(current_type).tests.append(test)

    def lookup(
        self, node: Node, out: list[tuple[TrieEdge, Node]] | None = None
    ) -> list[tuple[TrieEdge, Node]]:
        """Collect ``(edge, edge_node)`` pairs whose tests apply to ``node``."""
        if out is None:
            out = []
        edge = self.edges.get(node.type)
        if edge is not None:
            edge.lookup(node, out)
        return out

    def test_count(self) -> int:
        """Number of registered tests, including those in child tries."""
        count = 0
        for edge in self.edges.values():
            count += len(edge.tests)
            count += sum(subtrie.test_count() for subtrie in edge.descendants.values())
        return count


def resolve_child_path(node: Node, path: str) -> Node | None:
    """Follow a dotted path of field names and named-child indexes."""
    current: Node | None = node
    for part in path.split("."):
        if current is None:
            return None
        if part.isdigit():
            index = int(part)
            children = current.named_children
            current = children[index] if index < len(children) else None
        else:
            current = current.child_by_field_name(part)
    return current


# ---------------------------------------------------------------------------
# Node helpers
# ---------------------------------------------------------------------------


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def dotted_name(node: Node) -> str | None:
    """``a.b.c`` for a chain of plain member accesses, else None."""
    if node.type in (IDENTIFIER, "this"):
        return node_text(node)
    if node.type != MEMBER_EXPRESSION:
        return None
    target = node.child_by_field_name("object")
    prop = node.child_by_field_name("property")
    if target is None or prop is None:
        return None
    prefix = dotted_name(target)
    if prefix is None:
        return None
    return f"{prefix}.{node_text(prop)}"


def accessed_property(node: Node) -> str | None:
    """Property name read by ``obj.name`` or ``obj['name']``."""
    if node.type == MEMBER_EXPRESSION:
        prop = node.child_by_field_name("property")
        return node_text(prop) if prop is not None else None
    if node.type == SUBSCRIPT_EXPRESSION:
        index = node.child_by_field_name("index")
        if index is not None and index.type == STRING:
            return node_text(index)[1:-1]
    return None


def _same_node(a: Node | None, b: Node | None) -> bool:
    if a is None or b is None:
        return False
    return a.type == b.type and a.start_byte == b.start_byte and a.end_byte == b.end_byte


def is_assignment_target(node: Node, parent: Node | None) -> bool:
    return (
        parent is not None
        and parent.type in _ASSIGNMENTS
        and _same_node(parent.child_by_field_name("left"), node)
    )


def _message(requirement: Requirement, matched: str) -> str:
    if requirement.error_message:
        return requirement.error_message
    return f"{matched} violates {requirement.kind.name} requirement"


def _banned_properties(requirement: Requirement) -> frozenset[str]:
    # Arguments.prototype.callee bans every access to .callee
    return frozenset(value.rsplit(".", 1)[-1] for value in requirement.value)


# ---------------------------------------------------------------------------
# Requirement compilers
# ---------------------------------------------------------------------------


def _compile_banned_name(trie: ASTTypeTrie, requirement: Requirement, report: Reporter) -> None:
    names = frozenset(value for value in requirement.value if "." not in value)
    qualified = frozenset(value for value in requirement.value if "." in value)

    def test_identifier(edge_node: Node, node: Node, parent: Node | None) -> None:
        # labels parse as statement_identifier, so the grammar already exempts them
        if parent is not None and parent.type in LABEL_CONTEXTS:
            return
        name = node_text(edge_node)
        if name in names:
            report(edge_node, _message(requirement, name))

    def test_member(edge_node: Node, node: Node, parent: Node | None) -> None:
        name = dotted_name(edge_node)
        if name is not None and name in qualified:
            report(edge_node, _message(requirement, name))

    if names:
        for name_node in _NAME_NODES:
            trie.add(test_identifier, name_node)
    if qualified:
        trie.add(test_member, MEMBER_EXPRESSION)


def _compile_banned_property(
    trie: ASTTypeTrie, requirement: Requirement, report: Reporter
) -> None:
    properties = _banned_properties(requirement)

    def test(edge_node: Node, node: Node, parent: Node | None) -> None:
        name = accessed_property(edge_node)
        if name is not None and name in properties:
            report(edge_node, _message(requirement, name))

    for access in _PROPERTY_ACCESSES:
        trie.add(test, access)


def _compile_banned_property_read(
    trie: ASTTypeTrie, requirement: Requirement, report: Reporter
) -> None:
    properties = _banned_properties(requirement)

    def test(edge_node: Node, node: Node, parent: Node | None) -> None:
        if is_assignment_target(node, parent):
            return
        name = accessed_property(edge_node)
        if name is not None and name in properties:
            report(edge_node, _message(requirement, name))

    for access in _PROPERTY_ACCESSES:
        trie.add(test, access)


def _compile_banned_property_write(
    trie: ASTTypeTrie, requirement: Requirement, report: Reporter
) -> None:
    properties = _banned_properties(requirement)

    def test(edge_node: Node, node: Node, parent: Node | None) -> None:
        name = accessed_property(edge_node)
        if name is not None and name in properties:
            report(edge_node, _message(requirement, name))

    for assignment in _ASSIGNMENTS:
        for access in _PROPERTY_ACCESSES:
            trie.add(test, assignment, ChildPosition("left", access))


def _compile_banned_property_call(
    trie: ASTTypeTrie, requirement: Requirement, report: Reporter
) -> None:
    properties = _banned_properties(requirement)

    def test(edge_node: Node, node: Node, parent: Node | None) -> None:
        name = accessed_property(edge_node)
        if name is not None and name in properties:
            report(edge_node, _message(requirement, name))

    for access in _PROPERTY_ACCESSES:
        trie.add(test, CALL_EXPRESSION, ChildPosition("function", access))


_COMPILERS: dict[RequirementType, Callable[[ASTTypeTrie, Requirement, Reporter], None]] = {
    RequirementType.BANNED_NAME: _compile_banned_name,
    RequirementType.BANNED_PROPERTY: _compile_banned_property,
    RequirementType.BANNED_PROPERTY_READ: _compile_banned_property_read,
    RequirementType.BANNED_PROPERTY_WRITE: _compile_banned_property_write,
    RequirementType.BANNED_PROPERTY_CALL: _compile_banned_property_call,
}

UNSUPPORTED_KINDS = frozenset(set(RequirementType) - set(_COMPILERS))


@lru_cache(maxsize=None)
def _warn_unsupported(kind: RequirementType) -> None:
    logger.warning("Requirement type {kind} is not yet supported; skipping", kind=kind.name)


def compile_requirements(requirements: Iterable[Requirement], report: Reporter) -> ASTTypeTrie:
    """Build a fresh trie for ``requirements`` whose tests call ``report``.

    Requirement kinds without a matcher compile to nothing and are logged
    once per process.
    """
    trie = ASTTypeTrie()
    for requirement in requirements:
        compiler = _COMPILERS.get(requirement.kind)
        if compiler is None:
            _warn_unsupported(requirement.kind)
            continue
        compiler(trie, requirement, report)
    logger.debug("Compiled conformance trie with {count} test(s)", count=trie.test_count())
    return trie
