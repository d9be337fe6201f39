"""Safe filesystem removal.

Handles deletion of scanned items with dry-run support, path safety
validation at the moment of deletion, and symlink-aware removal that
re-checks the entry type immediately before acting.
"""

import logging
import os
import shutil
import stat
from collections.abc import Callable, Sequence

from spacectl.filesystem.protected import validate_path_safety
from spacectl.models.item import CleanableItem, RemovalResult, RemovalStats

logger = logging.getLogger(__name__)

# Called with (index, total, item) before each item; index is 1-based.
ProgressCallback = Callable[[int, int, CleanableItem], None]


class SafeRemover:
    """Removes filesystem paths after validating them.

    Every path is validated again right before deletion, even if it was
    validated at scan time. The entry is re-stat'ed without following
    links so that a file swapped for a symlink after scanning only loses
    the link, never the link target.

    Attributes:
        _dry_run: If True, report success without touching the filesystem.
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the SafeRemover.

        Args:
            dry_run: If True, report what would be deleted without deleting.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def remove(self, path: str) -> RemovalResult:
        """Remove a single path.

        Args:
            path: Absolute path to remove.

        Returns:
            RemovalResult indicating success or failure.
        """
        if self._dry_run:
            logger.info("Dry-run: would remove %s", path)
            return RemovalResult(path=path, success=True, dry_run=True)

        violation = validate_path_safety(path)
        if violation is not None:
            logger.error(violation.message)
            return RemovalResult(path=path, success=False, error=violation.message)

        try:
            st = os.lstat(path)

            if stat.S_ISLNK(st.st_mode):
                # Only the link goes away, never its target
                os.unlink(path)
            elif stat.S_ISDIR(st.st_mode):
                shutil.rmtree(path)
            else:
                os.unlink(path)

        except FileNotFoundError:
            logger.debug("Path vanished before removal: %s", path)
            return RemovalResult(path=path, success=False, error=f"Path does not exist: {path}")
        except PermissionError:
            logger.debug("Permission denied removing %s", path)
            return RemovalResult(path=path, success=False, error=f"Permission denied: {path}")
        except OSError as e:
            logger.warning("Failed to remove %s: %s", path, e.strerror or e)
            return RemovalResult(path=path, success=False, error=f"Failed to remove {path}: {e}")

        logger.debug("Removed %s", path)
        return RemovalResult(path=path, success=True)

    def remove_items(
        self,
        items: Sequence[CleanableItem],
        on_progress: ProgressCallback | None = None,
    ) -> RemovalStats:
        """Remove items strictly one after another, in list order.

        Args:
            items: Items to remove.
            on_progress: Optional callback invoked before each removal.

        Returns:
            RemovalStats with success/failure counts and freed bytes.
        """
        success = 0
        failed = 0
        freed = 0
        errors: list[str] = []
        total = len(items)

        for index, item in enumerate(items, start=1):
            if on_progress is not None:
                on_progress(index, total, item)

            if item.virtual:
                failed += 1
                errors.append(f"Cannot remove external resource as a path: {item.path}")
                continue

            result = self.remove(item.path)
            if result.success:
                success += 1
                freed += item.size_bytes
            else:
                failed += 1
                errors.append(result.error or f"Failed to remove {item.path}")

        return RemovalStats(success=success, failed=failed, freed_bytes=freed, errors=tuple(errors))


def remove_item(path: str, dry_run: bool = False) -> bool:
    """Remove a single path safely.

    Args:
        path: Absolute path to remove.
        dry_run: If True, return success without touching the filesystem.

    Returns:
        True if the path was removed (or would be, in a dry run).
    """
    return SafeRemover(dry_run=dry_run).remove(path).success


def remove_items(
    items: Sequence[CleanableItem],
    dry_run: bool = False,
    on_progress: ProgressCallback | None = None,
) -> RemovalStats:
    """Remove a batch of items sequentially.

    Args:
        items: Items to remove.
        dry_run: If True, count every item as removed without touching it.
        on_progress: Optional callback invoked before each removal.

    Returns:
        RemovalStats with success/failure counts and freed bytes.
    """
    return SafeRemover(dry_run=dry_run).remove_items(items, on_progress=on_progress)
