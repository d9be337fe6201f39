"""Clean pipeline.

Routes each selected category either through its scanner's own cleanup or,
when a backup manager is supplied, into a single backup session shared by
the whole batch.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from spacectl.filesystem.backup import BackupManager
from spacectl.filesystem.remover import ProgressCallback
from spacectl.models.category import CategoryId
from spacectl.models.item import CleanableItem, CleanResult, CleanSummary
from spacectl.scanners.base import Scanner
from spacectl.scanners.registry import build_registry

logger = logging.getLogger(__name__)

# Called with (category, index, total, item) before each item is processed.
CleanProgressCallback = Callable[[CategoryId, int, int, CleanableItem], None]


@dataclass(frozen=True, slots=True)
class CategorySelection:
    """Items of one category chosen for cleanup.

    Attributes:
        category_id: Category the items belong to.
        items: Items to clean, as returned by the category's scanner.
    """

    category_id: CategoryId
    items: tuple[CleanableItem, ...]


def _merge(first: CleanResult, second: CleanResult) -> CleanResult:
    return CleanResult(
        category=first.category,
        cleaned_items=first.cleaned_items + second.cleaned_items,
        freed_bytes=first.freed_bytes + second.freed_bytes,
        errors=first.errors + second.errors,
    )


def _category_progress(
    category_id: CategoryId, on_progress: CleanProgressCallback | None
) -> ProgressCallback | None:
    if on_progress is None:
        return None

    def _progress(index: int, total: int, item: CleanableItem) -> None:
        on_progress(category_id, index, total, item)

    return _progress


def clean_selection(
    selections: Sequence[CategorySelection],
    *,
    dry_run: bool = False,
    backup: BackupManager | None = None,
    on_progress: CleanProgressCallback | None = None,
    scanners: Mapping[CategoryId, Scanner] | None = None,
) -> CleanSummary:
    """Clean the selected items, category by category.

    With a backup manager (and outside a dry run), every real item of the
    batch is moved into one shared session. Virtual items, which belong to
    an external tool, always go through the scanner's own cleanup.

    Args:
        selections: Categories and items to clean, in processing order.
        dry_run: Report what would be freed without changing anything.
        backup: Backup manager to relocate items with, or None to delete.
        on_progress: Invoked before each item is removed or backed up.
        scanners: Scanner per category. Defaults to the built-in registry.

    Returns:
        CleanSummary with one result per non-empty selection.
    """
    registry = scanners if scanners is not None else build_registry()
    session_dir: Path | None = None
    session_error: str | None = None
    results: list[CleanResult] = []

    for selection in selections:
        if not selection.items:
            continue

        scanner = registry.get(selection.category_id)
        if scanner is None:
            logger.warning("No scanner for category %s", selection.category_id.value)
            continue

        progress = _category_progress(selection.category_id, on_progress)

        if backup is None or dry_run:
            results.append(
                scanner.clean(selection.items, dry_run=dry_run, on_progress=progress)
            )
            continue

        real = [item for item in selection.items if not item.virtual]
        virtual = [item for item in selection.items if item.virtual]

        result = CleanResult(category=scanner.category, cleaned_items=0, freed_bytes=0)

        if real:
            if session_dir is None and session_error is None:
                try:
                    session_dir = backup.ensure_backup_dir()
                except RuntimeError as e:
                    logger.error("Cannot create backup session: %s", e)
                    session_error = str(e)

            if session_dir is not None:
                stats = backup.backup_items(real, on_progress=progress, session_dir=session_dir)
                result = CleanResult(
                    category=scanner.category,
                    cleaned_items=stats.success,
                    freed_bytes=stats.relocated_bytes,
                    errors=stats.errors,
                )
            else:
                result = CleanResult(
                    category=scanner.category,
                    cleaned_items=0,
                    freed_bytes=0,
                    errors=(f"Backup failed: {session_error}",),
                )

        if virtual:
            result = _merge(result, scanner.clean(virtual, on_progress=progress))

        results.append(result)

    return CleanSummary(results=tuple(results), backup_dir=session_dir)
