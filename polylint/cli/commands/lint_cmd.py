"""Lint commands for the polylint CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from polylint.compiler.config_loader import load_config
from polylint.compiler.policy_loader import load_policy
from polylint.kernel.config.models import LoggingConfig
from polylint.kernel.exceptions import PolylintError
from polylint.kernel.linting.component_rules import default_registry
from polylint.kernel.linting.models import Diagnostic, LintReport
from polylint.kernel.logging import configure_logging
from polylint.runner import lint_paths

console = Console()

_OUTPUT_FORMATS = ("text", "json")

# Exit codes
EXIT_FATAL_DIAGNOSTICS = 1
EXIT_CONFIGURATION_ERROR = 2


def lint(
    files: Annotated[
        list[Path],
        typer.Argument(
            help="HTML or JavaScript files to lint",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    policy: Annotated[
        Path | None,
        typer.Option(
            "--policy",
            "-p",
            help="Conformance policy file (JSON or YAML)",
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="kind: Config YAML or TOML file; defaults to [tool.polylint] discovery",
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format (text, json)",
        ),
    ] = "text",
    disable: Annotated[
        str,
        typer.Option(
            "--disable",
            "-d",
            help="Comma-separated rule IDs to skip (e.g., element-not-defined)",
        ),
    ] = "",
    no_follow_imports: Annotated[
        bool,
        typer.Option(
            "--no-follow-imports",
            help="Only analyze the given files, not their HTML imports",
        ),
    ] = False,
) -> None:
    """Lint component files for binding errors and policy violations.

    Exits with status 1 when any fatal diagnostic is reported and with
    status 2 when the configuration or policy cannot be used.

    Examples
    --------
    polylint lint index.html
    polylint lint index.html --policy conformance.json
    polylint lint index.html --format json
    polylint lint index.html --disable element-not-defined,native-attribute-binding
    """
    if output_format not in _OUTPUT_FORMATS:
        console.print(
            f"[red]Invalid format '{escape(output_format)}'.[/red] Choose from: text, json"
        )
        raise typer.Exit(EXIT_CONFIGURATION_ERROR)

    try:
        settings = load_config(config)
        if settings.logging != LoggingConfig():
            configure_logging(
                level=settings.logging.level,
                format=settings.logging.format,
                output_file=settings.logging.output_file,
                use_color=settings.logging.use_color,
                include_timestamp=settings.logging.include_timestamp,
            )
        policy_path = policy or settings.policy
        jsconf_policy = load_policy(policy_path) if policy_path else None
    except PolylintError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_CONFIGURATION_ERROR) from e

    disabled_ids = set(settings.disable)
    disabled_ids.update(rule_id.strip() for rule_id in disable.split(",") if rule_id.strip())
    if disabled_ids:
        known_ids = set(default_registry().rule_ids)
        unknown = disabled_ids - known_ids
        if unknown:
            console.print(
                f"[yellow]Unknown rule ID(s): {', '.join(sorted(unknown))}[/yellow]  "
                f"Known: {', '.join(sorted(known_ids))}"
            )

    try:
        report = lint_paths(
            files,
            policy=jsconf_policy,
            disable=disabled_ids,
            follow_imports=settings.follow_imports and not no_follow_imports,
        )
    except PolylintError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_CONFIGURATION_ERROR) from e

    if output_format == "json":
        _print_json(report.diagnostics)
    else:
        _print_text(files, report)

    if report.has_fatal:
        raise typer.Exit(EXIT_FATAL_DIAGNOSTICS)


def rules() -> None:
    """List the built-in lint rules."""
    table = Table(show_header=True, border_style="dim")
    table.add_column("Rule", style="cyan")
    table.add_column("Description")
    for rule in default_registry():
        table.add_row(rule.rule_id, rule.description)
    console.print(table)


def _print_text(files: list[Path], report: LintReport) -> None:
    """Print lint results as a rich table."""
    console.print()

    if report.is_clean:
        console.print(f"[green]No issues found:[/green] {', '.join(str(f) for f in files)}")
        console.print()
        return

    console.print(
        f"[bold]{len(report.diagnostics)} issue(s)[/bold]  "
        f"[red]{len(report.fatal)} fatal[/red]"
    )
    console.print()

    table = Table(show_header=True, border_style="dim")
    table.add_column("Location", style="green")
    table.add_column("Rule", style="cyan")
    table.add_column("Message")

    for diagnostic in report.diagnostics:
        location = (
            f"{diagnostic.filename}:{diagnostic.location.line}:{diagnostic.location.column}"
        )
        message = escape(diagnostic.message)
        if diagnostic.fatal:
            message = f"[red]{message}[/red]"
        table.add_row(escape(location), diagnostic.rule_id, message)

    console.print(table)
    console.print()


def _print_json(diagnostics: list[Diagnostic]) -> None:
    """Print lint results as a JSON list of diagnostics."""
    typer.echo(json.dumps([d.to_dict() for d in diagnostics], indent=2))
