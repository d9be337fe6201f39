"""Unused localization bundles inside installed applications."""

import logging
import os
from dataclasses import dataclass

from spacectl.filesystem.enumerate import stat_item
from spacectl.models.category import CategoryId
from spacectl.models.item import CleanableItem, ScanResult
from spacectl.scanners.base import Scanner, ScanOptions

logger = logging.getLogger(__name__)

KEEP_LANGUAGES: frozenset[str] = frozenset({"en", "en_US", "en_GB", "pt", "pt_BR", "pt_PT", "Base"})

_LPROJ_SUFFIX = ".lproj"


@dataclass(frozen=True, slots=True)
class LanguageFilesScanner(Scanner):
    """Finds ``*.lproj`` bundles for languages outside KEEP_LANGUAGES.

    Attributes:
        applications_dir: Directory holding ``*.app`` bundles.
        keep: Language codes whose bundles are never reported.
    """

    category_id: CategoryId = CategoryId.LANGUAGE_FILES
    applications_dir: str = "/Applications"
    keep: frozenset[str] = KEEP_LANGUAGES

    def scan(self, options: ScanOptions) -> ScanResult:
        items: list[CleanableItem] = []

        try:
            apps = sorted(os.listdir(self.applications_dir))
        except OSError:
            return self.build_result(items)

        for app in apps:
            if not app.endswith(".app"):
                continue

            resources = os.path.join(self.applications_dir, app, "Contents", "Resources")
            try:
                names = sorted(os.listdir(resources))
            except OSError:
                continue

            for name in names:
                if not name.endswith(_LPROJ_SUFFIX):
                    continue
                if name.removesuffix(_LPROJ_SUFFIX) in self.keep:
                    continue

                item = stat_item(os.path.join(resources, name), f"{app}: {name}")
                if item is not None:
                    items.append(item)

        return self.build_result(items)
