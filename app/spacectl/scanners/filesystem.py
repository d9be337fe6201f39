"""Scanners for categories that are plain directories on disk.

Most categories are "everything directly inside these folders" or "these
few well-known cache locations". Both shapes are covered by the two
scanners in this module; the registry configures one instance per
category.
"""

import glob
import logging
import os
from dataclasses import dataclass, replace

from spacectl.filesystem.enumerate import find_items, stat_item
from spacectl.filesystem.protected import PathTraversalError, expand_path, is_protected_path
from spacectl.models.category import CategoryId
from spacectl.models.item import CleanableItem, ScanResult
from spacectl.scanners.base import Scanner, ScanOptions

logger = logging.getLogger(__name__)

_GLOB_CHARS = frozenset("*?[")


def resolve_roots(patterns: tuple[str, ...]) -> list[str]:
    """Expand root patterns into existing directories.

    Patterns may start with ``~`` and may contain glob wildcards. Patterns
    that escape the home directory or match nothing are skipped.

    Args:
        patterns: Root patterns in search order.

    Returns:
        Canonical directory paths, without duplicates, in pattern order.
    """
    roots: list[str] = []

    for pattern in patterns:
        try:
            expanded = expand_path(pattern)
        except PathTraversalError as e:
            logger.warning("Skipping scan root %s: %s", pattern, e)
            continue

        if _GLOB_CHARS.intersection(expanded):
            candidates = sorted(glob.glob(expanded))
        else:
            candidates = [expanded]

        for candidate in candidates:
            candidate = os.path.normpath(candidate)
            if os.path.isdir(candidate) and candidate not in roots:
                roots.append(candidate)

    return roots


@dataclass(frozen=True, slots=True)
class DirectoryScanner(Scanner):
    """Lists the direct children of one or more directories.

    Attributes:
        category_id: Category this scanner serves.
        roots: Directory patterns whose children are reported.
        age_filtered: Only report entries older than ScanOptions.days_old.
        name_prefix: Prepended to each item's display name.
        name_limit: Truncate the basename to this many characters.
    """

    category_id: CategoryId
    roots: tuple[str, ...]
    age_filtered: bool = False
    name_prefix: str = ""
    name_limit: int | None = None

    def _display_name(self, name: str) -> str:
        if self.name_limit is not None and len(name) > self.name_limit:
            name = f"{name[: self.name_limit]}..."
        return f"{self.name_prefix}{name}"

    def scan(self, options: ScanOptions) -> ScanResult:
        min_age = options.days_old if self.age_filtered else None
        items: list[CleanableItem] = []

        for root in resolve_roots(self.roots):
            for item in find_items(root, min_age_days=min_age):
                if is_protected_path(item.path):
                    continue
                if self.name_prefix or self.name_limit is not None:
                    item = replace(item, name=self._display_name(item.name))
                items.append(item)

        return self.build_result(items)


@dataclass(frozen=True, slots=True)
class LocationScanner(Scanner):
    """Reports whole, named locations as single items.

    Attributes:
        category_id: Category this scanner serves.
        locations: (display name, path) pairs. Paths may start with ``~``.
    """

    category_id: CategoryId
    locations: tuple[tuple[str, str], ...]

    def scan(self, options: ScanOptions) -> ScanResult:
        items: list[CleanableItem] = []

        for name, location in self.locations:
            try:
                path = expand_path(location)
            except PathTraversalError as e:
                logger.warning("Skipping location %s: %s", location, e)
                continue

            if is_protected_path(path):
                continue

            item = stat_item(path, name)
            # Empty caches are not worth offering
            if item is not None and item.size_bytes > 0:
                items.append(item)

        return self.build_result(items)
