"""Apply a conformance policy to parsed scripts."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from tree_sitter import Node, Tree

from polylint.kernel.conformance.node_types import known_node_types
from polylint.kernel.conformance.policy import Policy, Requirement
from polylint.kernel.conformance.trie import ASTTypeTrie, Reporter, compile_requirements
from polylint.kernel.linting.models import Diagnostic, Location
from polylint.kernel.logging import get_logger

logger = get_logger(__name__)

# rule_id carried by every policy violation
CONFORMANCE_RULE_ID = "conformance"


@dataclass(frozen=True, slots=True)
class ParsedScript:
    """A parsed script and where its text sits in its file.

    Attributes
    ----------
    tree : Tree
        tree-sitter syntax tree
    source : str | None
        File the script text came from; None to report under the policy path
    line_offset : int
        Lines preceding the script text in ``source``
    column_offset : int
        Column at which the script text starts on its first line
    text : bytes
        UTF-8 script text the tree was parsed from
    """

    tree: Tree
    source: str | None = None
    line_offset: int = 0
    column_offset: int = 0
    text: bytes = b""

    def location_of(self, node: Node) -> Location:
        """Document location of ``node``, with the column counted in characters."""
        row, column = node.start_point
        if self.text:
            line_start = node.start_byte - column
            prefix = self.text[line_start : node.start_byte]
            column = len(prefix.decode("utf-8", errors="replace"))
        if row == 0:
            column += self.column_offset
        return Location(line=row + 1 + self.line_offset, column=column)


@dataclass(frozen=True, slots=True)
class LintOptions:
    verbose: bool = False
    debug: bool = False


def lint_script(trie: ASTTypeTrie, script: ParsedScript, report: Reporter) -> None:
    """Visit every named node of ``script`` once, running matching tests.

    Nodes of a type the grammar does not define are reported and their
    children are still visited.
    """
    known = known_node_types()
    stack: list[tuple[Node, Node | None]] = [(script.tree.root_node, None)]
    while stack:
        node, parent = stack.pop()
        if node.type not in known:
            report(node, f"Unrecognized node type {node.type}")
        else:
            for edge, edge_node in trie.lookup(node):
                for test in edge.tests:
                    test(edge_node, node, parent)
        stack.extend((child, node) for child in reversed(node.named_children))


def lint(
    paths_to_scripts: Mapping[str, Sequence[ParsedScript]],
    policy: Policy,
    options: LintOptions | None = None,
) -> list[Diagnostic]:
    """Check scripts against the requirements that apply to their path.

    Parameters
    ----------
    paths_to_scripts : Mapping[str, Sequence[ParsedScript]]
        Scripts grouped by the path the policy filters on
    policy : Policy
        Conformance policy
    options : LintOptions | None
        Logging switches

    Returns
    -------
    list[Diagnostic]
        One fatal diagnostic per violation, grouped by path in mapping order
    """
    options = options or LintOptions()
    diagnostics: list[Diagnostic] = []

    for path, scripts in paths_to_scripts.items():
        requirements = policy.applicable_to(path)
        if not requirements:
            logger.debug("No conformance requirements apply to {path}", path=path)
            continue
        if options.verbose:
            logger.info(
                "Checking {count} script(s) in {path} against {requirements} requirement(s)",
                count=len(scripts),
                path=path,
                requirements=len(requirements),
            )

        diagnostics.extend(_lint_path(path, scripts, requirements, options))
    return diagnostics


def _lint_path(
    path: str,
    scripts: Sequence[ParsedScript],
    requirements: Sequence[Requirement],
    options: LintOptions,
) -> list[Diagnostic]:
    violations: list[tuple[Node, str]] = []

    def report(node: Node, message: str) -> None:
        violations.append((node, message))

    trie = compile_requirements(requirements, report)
    diagnostics: list[Diagnostic] = []
    for script in scripts:
        start = len(violations)
        lint_script(trie, script, report)
        for node, message in violations[start:]:
            if options.debug:
                logger.debug("Violation at {type} node: {message}", type=node.type, message=message)
            diagnostics.append(
                Diagnostic(
                    filename=script.source or path,
                    location=script.location_of(node),
                    message=message,
                    fatal=True,
                    rule_id=CONFORMANCE_RULE_ID,
                )
            )
    return diagnostics
