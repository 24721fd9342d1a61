"""polylint CLI - Main entrypoint."""

from importlib.metadata import PackageNotFoundError, version

import typer
from rich.console import Console

from polylint.cli.commands import lint_cmd
from polylint.kernel.logging import configure_logging

# Create the main Typer app
app = typer.Typer(
    name="polylint",
    help="polylint - Static checks for web component bindings and JavaScript conformance.",
    no_args_is_help=True,
    invoke_without_command=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

# Create console for rich output
console = Console()

app.command(name="lint", help="Lint HTML and JavaScript files")(lint_cmd.lint)
app.command(name="rules", help="List the built-in lint rules")(lint_cmd.rules)


def _package_version() -> str:
    try:
        return version("polylint")
    except PackageNotFoundError:
        return "0.0.0.dev0"


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Enable debug logging"),
    show_version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
    ),
) -> None:
    """polylint - Static checks for web component bindings and JavaScript conformance.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    if ctx.obj is None:
        ctx.obj = {}
    ctx.obj.update({"quiet": quiet, "verbose": verbose})

    if quiet:
        configure_logging(level="ERROR", format="console", include_timestamp=False)
    elif verbose:
        configure_logging(level="DEBUG", format="rich")

    if show_version:
        console.print(
            f"[bold blue]polylint[/bold blue] version [green]{_package_version()}[/green]"
        )
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
