"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich, plus human-readable
byte sizes.
"""

from __future__ import annotations

import re
import sys

from rich.console import Console
from rich.table import Table

from spacectl.core.theme import get_theme

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")

_SIZE_PATTERN = re.compile(r"^([\d.]+)\s*(B|KB|MB|GB|TB)$", re.IGNORECASE)


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_size(size_bytes: int | float) -> str:
    """Format a byte count using binary units.

    Args:
        size_bytes: Number of bytes.

    Returns:
        A string such as "0 B", "512 B" or "1.5 GB".
    """
    if size_bytes <= 0:
        return "0 B"

    exponent = 0
    value = float(size_bytes)
    while value >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1

    if exponent == 0:
        return f"{value:.0f} B"
    return f"{value:.1f} {_SIZE_UNITS[exponent]}"


def parse_size(text: str) -> int:
    """Parse a human-readable size such as "500MB" or "1.5 GB".

    Args:
        text: Size string with a B/KB/MB/GB/TB suffix (case-insensitive).

    Returns:
        Number of bytes, or 0 if the string cannot be parsed.
    """
    match = _SIZE_PATTERN.match(text.strip())
    if match is None:
        return 0

    try:
        value = float(match.group(1))
    except ValueError:
        return 0

    return int(value * 1024 ** _SIZE_UNITS.index(match.group(2).upper()))


def create_scan_table(title: str = "Reclaimable Space") -> Table:
    """Create a pre-configured table for per-category scan results.

    Args:
        title: Table title.

    Returns:
        Rich Table with category, safety, item-count and size columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Category", no_wrap=True)
    table.add_column("Safety", no_wrap=True)
    table.add_column("Items", style="muted", justify="right")
    table.add_column("Size", style="size", justify="right")
    table.add_column("Note", style="muted", overflow="ellipsis")
    return table


def create_items_table(title: str) -> Table:
    """Create a table listing individual items of one category.

    Args:
        title: Table title.

    Returns:
        Rich Table with index, name, size and path columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", style="muted", justify="right", width=4)
    table.add_column("Name", style="text", no_wrap=True, overflow="ellipsis")
    table.add_column("Size", style="size", justify="right")
    table.add_column("Path", style="muted", overflow="fold")
    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
