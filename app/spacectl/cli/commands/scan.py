"""Scan command implementation.

Reports how much space each cleanup category could reclaim.
"""

import json
from enum import Enum
from typing import Annotated

import typer

from spacectl.cli.display import create_result_items_table, create_summary_table
from spacectl.cli.types import get_store, is_quiet, run_scans, select_scanners
from spacectl.models.category import CategoryId
from spacectl.models.item import ScanSummary
from spacectl.utils.formatting import console, format_size, print_success, print_warning

app = typer.Typer(
    help="Scan for reclaimable disk space.",
    invoke_without_command=True,
)


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


@app.callback(invoke_without_command=True)
def scan_categories(
    ctx: typer.Context,
    categories: Annotated[
        list[CategoryId] | None,
        typer.Option(
            "--category",
            "-c",
            help="Category to scan (repeatable). Defaults to all enabled categories.",
            case_sensitive=False,
        ),
    ] = None,
    details: Annotated[
        bool,
        typer.Option(
            "--details",
            "-d",
            help="List the items found in each category.",
        ),
    ] = False,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-n",
            help="Limit number of items listed per category.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Scan cleanup categories and show reclaimable space.

    Examples:
        spacectl scan                        # Scan all enabled categories
        spacectl scan -c trash -c downloads  # Scan selected categories
        spacectl scan --details --limit 10   # Show the largest items
        spacectl scan --format json          # Output as JSON
    """
    if ctx.invoked_subcommand is not None:
        return

    config = get_store(ctx).get()
    scanners = select_scanners(categories, config)
    if not scanners:
        print_warning("No categories selected.")
        return

    summary = run_scans(
        scanners, config, quiet=is_quiet(ctx) or output_format == OutputFormat.JSON
    )

    if output_format == OutputFormat.JSON:
        _print_json(summary)
    else:
        _print_table(summary, details, limit)

    if summary.errors:
        for error in summary.errors:
            print_warning(f"Scan failed for {error}")
        raise typer.Exit(code=1)


def _print_table(summary: ScanSummary, details: bool, limit: int | None) -> None:
    if summary.total_items == 0 and not summary.errors:
        print_success("Nothing to clean. No reclaimable items found.")
        return

    console.print(create_summary_table(summary))

    if details:
        for result in summary.results:
            if result.items:
                console.print(create_result_items_table(result, limit))

    console.print(
        f"\n[dim]Found {summary.total_items} items ({format_size(summary.total_size)} total)[/dim]"
    )


def _print_json(summary: ScanSummary) -> None:
    data = {
        "total_size": summary.total_size,
        "total_items": summary.total_items,
        "categories": [
            {
                "id": result.category.id.value,
                "name": result.category.name,
                "safety_level": result.category.safety_level.value,
                "total_size": result.total_size,
                "error": result.error,
                "items": [
                    {
                        "path": item.path,
                        "name": item.name,
                        "size_bytes": item.size_bytes,
                        "is_directory": item.is_directory,
                        "modified_at": item.modified_at.isoformat() if item.modified_at else None,
                    }
                    for item in result.items
                ],
            }
            for result in summary.results
        ],
    }
    console.print_json(json.dumps(data))
