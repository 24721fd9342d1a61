"""Entry point for running polylint as a module: ``python -m polylint``."""

from __future__ import annotations


def main() -> None:
    """Main entry point for module execution."""
    from polylint.cli.main import main as cli_main

    cli_main()


if __name__ == "__main__":
    main()
