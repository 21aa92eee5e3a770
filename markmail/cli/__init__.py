"""Command line interface."""

from markmail.cli.main import cli

__all__ = ["cli"]
