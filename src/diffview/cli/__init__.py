"""Command-line interface for diffview."""

from diffview.cli.main import cli, main

__all__ = ["cli", "main"]
