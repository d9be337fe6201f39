"""Large file detection in user document folders."""

import logging
import os
from dataclasses import dataclass
from datetime import UTC, datetime

from spacectl.models.category import CategoryId
from spacectl.models.item import CleanableItem, ScanResult
from spacectl.scanners.base import Scanner, ScanOptions
from spacectl.scanners.filesystem import resolve_roots

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LargeFilesScanner(Scanner):
    """Finds regular files at or above ScanOptions.min_size.

    Hidden entries are skipped and symlinks are never followed. Results are
    sorted largest first.
    """

    category_id: CategoryId = CategoryId.LARGE_FILES
    roots: tuple[str, ...] = ("~/Downloads", "~/Documents")
    max_depth: int = 3

    def scan(self, options: ScanOptions) -> ScanResult:
        items: list[CleanableItem] = []

        for root in resolve_roots(self.roots):
            self._collect(root, options.min_size, 0, items)

        items.sort(key=lambda item: item.size_bytes, reverse=True)
        return self.build_result(items)

    def _collect(
        self, directory: str, min_size: int, depth: int, items: list[CleanableItem]
    ) -> None:
        if depth > self.max_depth:
            return

        try:
            entries = list(os.scandir(directory))
        except OSError as e:
            logger.debug("Cannot read directory %s: %s", directory, e)
            return

        for entry in entries:
            if entry.name.startswith("."):
                continue

            try:
                if entry.is_file(follow_symlinks=False):
                    st = entry.stat(follow_symlinks=False)
                    if st.st_size >= min_size:
                        items.append(
                            CleanableItem(
                                path=entry.path,
                                size_bytes=st.st_size,
                                name=entry.name,
                                modified_at=datetime.fromtimestamp(st.st_mtime, tz=UTC),
                            )
                        )
                elif entry.is_dir(follow_symlinks=False):
                    self._collect(entry.path, min_size, depth + 1, items)
            except OSError:
                continue
