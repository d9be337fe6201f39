"""CLI commands for spacectl.

This package contains all subcommand implementations.
"""

from spacectl.cli.commands import backup, clean, config, scan

__all__ = ["backup", "clean", "config", "scan"]
