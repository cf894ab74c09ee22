"""Command-line interface."""

from wait_for_green.cli.main import cli


__all__ = ["cli"]
