"""Command line interface for polylint."""
