"""Shared Rich display functions for scan and clean results."""

from rich.table import Table

from spacectl.core.theme import safety_style
from spacectl.models.item import CleanSummary, ScanResult, ScanSummary
from spacectl.utils.formatting import (
    console,
    create_items_table,
    create_scan_table,
    format_size,
)


def create_summary_table(summary: ScanSummary, title: str = "Reclaimable Space") -> Table:
    """Create a table with one row per scanned category.

    Categories without items are listed only when their scanner failed.

    Args:
        summary: Scan summary to display.
        title: Table title.

    Returns:
        Rich Table with category, safety, item count and size.
    """
    table = create_scan_table(title)

    for result in summary.results:
        category = result.category
        if not result.items and not result.error:
            continue

        style = safety_style(category.safety_level)
        if result.error:
            note = f"[error]{result.error}[/]"
        else:
            note = category.safety_note or ""
        table.add_row(
            f"[{style}]●[/] {category.name}",
            f"[{style}]{category.safety_level.value}[/]",
            str(len(result.items)),
            format_size(result.total_size),
            note,
        )

    return table


def create_result_items_table(result: ScanResult, limit: int | None = None) -> Table:
    """Create a numbered table of the items of one category.

    Args:
        result: Scan result whose items are listed.
        limit: Show at most this many items.

    Returns:
        Rich Table; row numbers are the indices used for item selection.
    """
    table = create_items_table(f"{result.category.name} ({format_size(result.total_size)})")
    items = result.items[:limit] if limit else result.items

    for index, item in enumerate(items, start=1):
        table.add_row(str(index), item.name, format_size(item.size_bytes), item.path)

    return table


def print_clean_summary(summary: CleanSummary, dry_run: bool = False) -> None:
    """Print per-category outcomes and totals of a clean batch."""
    verb = "Would free" if dry_run else "Freed"

    console.print()
    for result in summary.results:
        if result.cleaned_items > 0:
            console.print(
                f"  [success]✓[/] {result.category.name}: "
                f"{result.cleaned_items} items, {format_size(result.freed_bytes)}"
            )
        for error in result.errors:
            console.print(f"  [error]✗[/] {result.category.name}: {error}")

    console.print()
    console.print(f"[bold]{verb}:[/] [success]{format_size(summary.total_freed)}[/]")
    console.print(f"[muted]Cleaned {summary.total_cleaned} items[/]")

    if summary.backup_dir is not None:
        console.print(f"[muted]Backup saved to {summary.backup_dir}[/]")
    if summary.total_errors:
        console.print(f"[error]Errors: {summary.total_errors}[/]")
