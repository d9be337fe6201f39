"""Abstract base class for category scanners.

This module defines the Scanner interface that every cleanup category
implements, and the options that parameterize a scan run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from spacectl.filesystem.remover import ProgressCallback, remove_items
from spacectl.models.category import CATEGORIES, CategoryDescriptor, CategoryId
from spacectl.models.item import CleanableItem, CleanResult, ScanResult

if TYPE_CHECKING:
    from spacectl.core.config import Config

DEFAULT_DAYS_OLD = 30
DEFAULT_MIN_SIZE = 500 * 1024 * 1024

# Searched for node_modules when no roots are configured
DEFAULT_PROJECT_ROOTS: tuple[str, ...] = ("~/Projects", "~/Developer", "~/Code")


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Parameters shared by all scanners in one run.

    Attributes:
        days_old: Minimum age in days for age-filtered categories.
        min_size: Minimum size in bytes for the large-files category.
        node_modules_roots: Extra roots searched for node_modules.
        project_roots: Project roots, also searched for node_modules.
    """

    days_old: int = DEFAULT_DAYS_OLD
    min_size: int = DEFAULT_MIN_SIZE
    node_modules_roots: tuple[str, ...] = ()
    project_roots: tuple[str, ...] = ()

    @classmethod
    def from_config(cls, config: Config) -> ScanOptions:
        """Build scan options from a validated configuration."""
        return cls(
            days_old=config.downloads_days_old,
            min_size=config.large_files_min_size,
            node_modules_roots=tuple(config.extra_paths.node_modules),
            project_roots=tuple(config.extra_paths.projects),
        )


class Scanner(ABC):
    """Abstract base class for all category scanners.

    Scanners are stateless: a scan only reads the filesystem (or an
    external tool) and returns an immutable result, so any number of
    scanners can run concurrently.

    Example:
        >>> scanner = get_scanner(CategoryId.TRASH)
        >>> result = scanner.scan(ScanOptions())
        >>> print(result.total_size)
    """

    category_id: CategoryId

    @property
    def category(self) -> CategoryDescriptor:
        """Return the category this scanner handles."""
        return CATEGORIES[self.category_id]

    @abstractmethod
    def scan(self, options: ScanOptions) -> ScanResult:
        """Find reclaimable items for this category.

        Args:
            options: Parameters for this scan run.

        Returns:
            ScanResult with the items found.
        """

    def clean(
        self,
        items: Sequence[CleanableItem],
        dry_run: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> CleanResult:
        """Remove the given items.

        The default implementation deletes each path through the safe
        remover. Scanners backed by an external tool override this.

        Args:
            items: Items previously returned by scan().
            dry_run: If True, report what would be freed without deleting.
            on_progress: Optional callback invoked before each item.

        Returns:
            CleanResult with counts, freed bytes and errors.
        """
        stats = remove_items(items, dry_run=dry_run, on_progress=on_progress)
        return CleanResult(
            category=self.category,
            cleaned_items=stats.success,
            freed_bytes=stats.freed_bytes,
            errors=stats.errors,
        )

    def build_result(self, items: Iterable[CleanableItem]) -> ScanResult:
        """Wrap found items in a ScanResult for this category."""
        return ScanResult(category=self.category, items=tuple(items))
