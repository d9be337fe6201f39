"""Scan and clean data models.

This module defines the immutable records that flow between scanners,
the orchestrator, the remover and the backup manager.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from spacectl.models.category import CategoryDescriptor


@dataclass(frozen=True, slots=True)
class CleanableItem:
    """A filesystem entry (or external resource) that can be reclaimed.

    Attributes:
        path: Absolute, normalized filesystem path. For virtual items, an
            opaque resource identifier such as ``docker:images``.
        size_bytes: Reclaimable size in bytes.
        name: Display name.
        is_directory: Whether the entry is a directory.
        modified_at: Last modification time, None if unavailable.
        virtual: True for resources reclaimed by an external tool rather
            than by removing a path.
    """

    path: str
    size_bytes: int
    name: str
    is_directory: bool = False
    modified_at: datetime | None = None
    virtual: bool = False

    def __post_init__(self) -> None:
        """Validate item invariants after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Size must be non-negative, got {self.size_bytes}"
            raise ValueError(msg)
        if not self.virtual and (
            not os.path.isabs(self.path) or os.path.normpath(self.path) != self.path
        ):
            msg = f"Path must be absolute and normalized: {self.path}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Items found by one scanner.

    Attributes:
        category: Category that was scanned.
        items: Items found, in scanner order.
        error: Error message if the scanner failed, None otherwise.
    """

    category: CategoryDescriptor
    items: tuple[CleanableItem, ...] = ()
    error: str | None = None

    @property
    def total_size(self) -> int:
        """Aggregate size of all items in bytes."""
        return sum(item.size_bytes for item in self.items)


@dataclass(frozen=True, slots=True)
class ScanSummary:
    """Aggregated results of a full scan run.

    Attributes:
        results: One result per scanner, in registration order.
    """

    results: tuple[ScanResult, ...]

    @property
    def total_size(self) -> int:
        return sum(result.total_size for result in self.results)

    @property
    def total_items(self) -> int:
        return sum(len(result.items) for result in self.results)

    @property
    def errors(self) -> list[str]:
        """Scanner errors as ``"<category>: <message>"`` strings."""
        return [f"{r.category.id.value}: {r.error}" for r in self.results if r.error]


@dataclass(frozen=True, slots=True)
class CleanResult:
    """Outcome of cleaning one category.

    Attributes:
        category: Category that was cleaned.
        cleaned_items: Number of items removed or backed up.
        freed_bytes: Bytes reclaimed from the original locations.
        errors: Per-item error messages.
    """

    category: CategoryDescriptor
    cleaned_items: int
    freed_bytes: int
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CleanSummary:
    """Outcome of a full clean batch.

    Attributes:
        results: One result per cleaned category.
        backup_dir: Session directory holding backed-up items, if any.
    """

    results: tuple[CleanResult, ...]
    backup_dir: Path | None = None

    @property
    def total_freed(self) -> int:
        return sum(r.freed_bytes for r in self.results)

    @property
    def total_cleaned(self) -> int:
        return sum(r.cleaned_items for r in self.results)

    @property
    def total_errors(self) -> int:
        return sum(len(r.errors) for r in self.results)


@dataclass(frozen=True, slots=True)
class RemovalResult:
    """Result of a single removal operation.

    Attributes:
        path: Path that was operated on.
        success: Whether the path is gone (or would be, in a dry run).
        error: Error message if the operation failed, None otherwise.
        dry_run: Whether this was a dry run (no actual removal).
    """

    path: str
    success: bool
    error: str | None = None
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class RemovalStats:
    """Aggregate outcome of a removal batch."""

    success: int = 0
    failed: int = 0
    freed_bytes: int = 0
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class BackupStats:
    """Aggregate outcome of a backup batch.

    Attributes:
        session_dir: Session directory the items were moved into.
        success: Number of items relocated.
        failed: Number of items that could not be relocated.
        relocated_bytes: Total size of relocated items.
        errors: Per-item error messages.
    """

    session_dir: Path
    success: int = 0
    failed: int = 0
    relocated_bytes: int = 0
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RestoreResult:
    """Aggregate outcome of restoring one backup session."""

    success: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class BackupInfo:
    """A backup session on disk.

    Attributes:
        path: Session directory.
        modified_at: Session modification time.
        size_bytes: Total size of files in the session.
    """

    path: Path
    modified_at: datetime
    size_bytes: int
