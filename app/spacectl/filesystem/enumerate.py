"""Filesystem enumeration helpers used by scanners.

Every helper works on ``lstat`` results, so symbolic links are reported
as links (with the size of the link itself) and never followed. Errors on
individual entries are swallowed so that one unreadable entry never aborts
a scan.
"""

import logging
import os
import stat
import time
from datetime import UTC, datetime

from spacectl.models.item import CleanableItem

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 24 * 60 * 60


def get_directory_size(path: str) -> int:
    """Sum the sizes of all entries below a directory.

    Symlinks contribute their own size and are not followed.

    Args:
        path: Directory to measure.

    Returns:
        Total size in bytes, 0 if the directory cannot be read.
    """
    total = 0

    try:
        entries = list(os.scandir(path))
    except OSError:
        return 0

    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                total += get_directory_size(entry.path)
            else:
                total += entry.stat(follow_symlinks=False).st_size
        except OSError:
            continue

    return total


def _item_from_stat(path: str, name: str, st: os.stat_result) -> CleanableItem:
    is_directory = stat.S_ISDIR(st.st_mode)
    size = get_directory_size(path) if is_directory else st.st_size
    return CleanableItem(
        path=path,
        size_bytes=size,
        name=name,
        is_directory=is_directory,
        modified_at=datetime.fromtimestamp(st.st_mtime, tz=UTC),
    )


def stat_item(path: str, name: str | None = None) -> CleanableItem | None:
    """Build a CleanableItem for a single path.

    Args:
        path: Absolute, normalized path.
        name: Display name. Defaults to the basename.

    Returns:
        The item, or None if the path cannot be stat'ed.
    """
    try:
        st = os.lstat(path)
    except OSError:
        return None
    return _item_from_stat(path, name or os.path.basename(path), st)


def find_items(
    path: str,
    *,
    recursive: bool = False,
    min_age_days: int | None = None,
    min_size: int | None = None,
    max_depth: int = 10,
) -> list[CleanableItem]:
    """Enumerate entries below a directory with optional filters.

    Args:
        path: Directory to enumerate.
        recursive: Descend into subdirectories (never through symlinks).
        min_age_days: Skip entries modified more recently than this.
        min_size: Skip entries smaller than this many bytes.
        max_depth: Maximum recursion depth when ``recursive`` is set.

    Returns:
        Matching items in filesystem order.
    """
    items: list[CleanableItem] = []
    now = time.time()

    def _walk(current: str, depth: int) -> None:
        if depth > max_depth:
            return

        try:
            entries = list(os.scandir(current))
        except OSError as e:
            logger.debug("Cannot read directory %s: %s", current, e)
            return

        for entry in entries:
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError:
                continue

            if min_age_days is not None:
                age_days = (now - st.st_mtime) / _SECONDS_PER_DAY
                if age_days < min_age_days:
                    continue

            item = _item_from_stat(entry.path, entry.name, st)
            if min_size is not None and item.size_bytes < min_size:
                continue
            items.append(item)

            if recursive and item.is_directory:
                _walk(entry.path, depth + 1)

    _walk(path, 0)
    return items
