"""Command-line interface for conxml."""

from conxml.cli.cli import app

__all__ = ["app"]
