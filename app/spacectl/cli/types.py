"""Shared types and utilities for CLI commands.

This module provides helpers used across multiple CLI command modules:
access to the per-invocation config store, scanner selection, the scan
progress display and parsing of interactive item selections.
"""

from collections.abc import Sequence

import typer
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from spacectl.core.config import Config, ConfigStore
from spacectl.core.orchestrator import scan_all
from spacectl.models.category import CategoryId
from spacectl.models.item import ScanSummary
from spacectl.scanners.base import Scanner, ScanOptions
from spacectl.scanners.registry import build_registry
from spacectl.utils.formatting import err_console, print_warning


def get_store(ctx: typer.Context) -> ConfigStore:
    """Return the config store created by the main callback.

    Falls back to a fresh store when a command runs without the main
    callback (e.g. a sub-application invoked directly).
    """
    ctx.ensure_object(dict)
    store = ctx.obj.get("config")
    if not isinstance(store, ConfigStore):
        store = ConfigStore()
        ctx.obj["config"] = store
    return store


def is_quiet(ctx: typer.Context) -> bool:
    """Whether --quiet was passed to the main command."""
    return bool(ctx.obj and ctx.obj.get("quiet"))


def select_scanners(categories: Sequence[CategoryId] | None, config: Config) -> list[Scanner]:
    """Pick the scanners for a command invocation.

    Args:
        categories: Categories requested on the command line. If empty,
            the config's default and excluded categories decide.
        config: Active configuration.

    Returns:
        Scanners in registration order (or request order when explicit).
    """
    registry = build_registry()

    if categories:
        requested = list(dict.fromkeys(categories))
    else:
        requested = config.select_categories(registry.keys())

    scanners: list[Scanner] = []
    for category_id in requested:
        scanner = registry.get(category_id)
        if scanner is None:
            print_warning(f"Category '{category_id.value}' has no scanner and is skipped.")
            continue
        scanners.append(scanner)
    return scanners


def run_scans(scanners: Sequence[Scanner], config: Config, quiet: bool = False) -> ScanSummary:
    """Run scanners with a progress bar on stderr.

    Args:
        scanners: Scanners to run.
        config: Active configuration (parallelism and scan options).
        quiet: Hide the progress bar.

    Returns:
        The scan summary.
    """
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[info]{task.description}[/]"),
        BarColumn(bar_width=30),
        MofNCompleteColumn(),
        console=err_console,
        transient=True,
        disable=quiet,
    )

    with progress:
        task_id = progress.add_task("Scanning...", total=len(scanners))

        def _on_progress(completed: int, total: int, scanner: Scanner) -> None:
            progress.update(
                task_id, completed=completed, description=f"Scanned {scanner.category.name}"
            )

        return scan_all(
            scanners,
            parallel=config.parallel_scans,
            concurrency=config.concurrency,
            options=ScanOptions.from_config(config),
            on_progress=_on_progress,
        )


def parse_selection(text: str, count: int) -> list[int]:
    """Parse an item selection such as ``1,3-5`` or ``all``.

    Args:
        text: User input. Empty input selects nothing.
        count: Number of selectable items (1-based indices).

    Returns:
        Sorted, de-duplicated zero-based indices.

    Raises:
        ValueError: If the input contains an invalid token or index.
    """
    text = text.strip().lower()
    if not text or text == "none":
        return []
    if text == "all":
        return list(range(count))

    selected: set[int] = set()
    for token in text.replace(" ", "").split(","):
        if not token:
            continue
        if "-" in token:
            start_text, _, end_text = token.partition("-")
            start, end = int(start_text), int(end_text)
            if start > end:
                msg = f"Invalid range: {token}"
                raise ValueError(msg)
            indices = range(start, end + 1)
        else:
            indices = range(int(token), int(token) + 1)

        for index in indices:
            if not 1 <= index <= count:
                msg = f"Item {index} is out of range (1-{count})"
                raise ValueError(msg)
            selected.add(index - 1)

    return sorted(selected)
