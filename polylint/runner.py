"""Lint a set of input files with the component rules and a conformance policy."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from polylint.adapters.component_analyzer import ComponentAnalyzer
from polylint.adapters.javascript import parse_javascript_file
from polylint.kernel.conformance.checker import LintOptions, ParsedScript, lint
from polylint.kernel.conformance.policy import Policy
from polylint.kernel.linting.component_rules import run_component_rules
from polylint.kernel.linting.models import LintReport
from polylint.kernel.linting.rules import RuleRegistry
from polylint.kernel.logging import get_logger

logger = get_logger(__name__)

JAVASCRIPT_SUFFIXES = frozenset({".js", ".mjs"})


def lint_paths(
    inputs: Iterable[str | Path],
    policy: Policy | None = None,
    disable: Iterable[str] = (),
    follow_imports: bool = True,
    registry: RuleRegistry | None = None,
    options: LintOptions | None = None,
) -> LintReport:
    """Lint each input and collect every diagnostic in one report.

    HTML inputs are analyzed for components and checked with the enabled
    rules; when a policy is given, every script they load is then checked
    against it. JavaScript inputs are only checked against the policy. A
    script reached from more than one input is checked once.

    Parameters
    ----------
    inputs : Iterable[str | Path]
        HTML or JavaScript files
    policy : Policy | None
        Conformance policy; None skips conformance checking
    disable : Iterable[str]
        Rule ids to skip
    follow_imports : bool
        Follow HTML imports from each HTML input
    registry : RuleRegistry | None
        Rules to run; defaults to the built-in rules
    options : LintOptions | None
        Conformance logging switches

    Returns
    -------
    LintReport
        Per input: rule diagnostics, then conformance diagnostics

    Raises
    ------
    ResourceNotFoundError
        If an input does not exist
    ParseError
        If an input cannot be read
    """
    disabled = frozenset(disable)
    report = LintReport()
    checked_scripts: set[str] = set()

    for entry in inputs:
        path = str(entry)
        scripts: dict[str, list[ParsedScript]] = {}

        if Path(path).suffix in JAVASCRIPT_SUFFIXES:
            scripts[path] = [parse_javascript_file(path)]
        else:
            analyzer = ComponentAnalyzer(follow_imports=follow_imports)
            model = analyzer.analyze(path)
            report.extend(run_component_rules(model, path, disabled, registry).diagnostics)
            scripts = analyzer.scripts

        if policy is None:
            continue
        new_scripts = {key: parsed for key, parsed in scripts.items() if key not in checked_scripts}
        checked_scripts.update(new_scripts)
        report.extend(lint(new_scripts, policy, options))

    logger.debug(
        "Linted {count} diagnostic(s), {fatal} fatal",
        count=len(report.diagnostics),
        fatal=len(report.fatal),
    )
    return report
