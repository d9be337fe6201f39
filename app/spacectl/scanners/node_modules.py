"""node_modules discovery under project roots."""

import logging
import os
from dataclasses import dataclass

from spacectl.filesystem.enumerate import stat_item
from spacectl.models.category import CategoryId
from spacectl.models.item import CleanableItem, ScanResult
from spacectl.scanners.base import DEFAULT_PROJECT_ROOTS, Scanner, ScanOptions
from spacectl.scanners.filesystem import resolve_roots

logger = logging.getLogger(__name__)

NODE_MODULES = "node_modules"


@dataclass(frozen=True, slots=True)
class NodeModulesScanner(Scanner):
    """Finds node_modules directories below the configured project roots.

    A matched directory is reported as one item and not descended into.
    Hidden directories are skipped.
    """

    category_id: CategoryId = CategoryId.NODE_MODULES
    max_depth: int = 5

    def _roots(self, options: ScanOptions) -> list[str]:
        configured = options.node_modules_roots + options.project_roots
        return resolve_roots(configured or DEFAULT_PROJECT_ROOTS)

    def scan(self, options: ScanOptions) -> ScanResult:
        found: dict[str, CleanableItem] = {}

        for root in self._roots(options):
            self._collect(root, 0, found)

        return self.build_result(found.values())

    def _collect(self, directory: str, depth: int, found: dict[str, CleanableItem]) -> None:
        if depth > self.max_depth:
            return

        try:
            entries = list(os.scandir(directory))
        except OSError as e:
            logger.debug("Cannot read directory %s: %s", directory, e)
            return

        for entry in entries:
            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError:
                continue

            if entry.name == NODE_MODULES:
                # Nested roots can reach the same directory twice
                if entry.path in found:
                    continue
                project = os.path.basename(directory)
                item = stat_item(entry.path, f"{project}/{NODE_MODULES}")
                if item is not None:
                    found[entry.path] = item
            elif not entry.name.startswith("."):
                self._collect(entry.path, depth + 1, found)
