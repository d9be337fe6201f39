"""CLI package for spacectl.

This package contains the Typer application and all subcommands.
"""

from spacectl.cli.main import app

__all__ = ["app"]
