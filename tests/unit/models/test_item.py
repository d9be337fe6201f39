"""Unit tests for scan and clean data models."""

from pathlib import Path

import pytest
from spacectl.models.category import CATEGORIES, CategoryId
from spacectl.models.item import (
    CleanableItem,
    CleanResult,
    CleanSummary,
    ScanResult,
    ScanSummary,
)


def _item(path: str, size: int = 100) -> CleanableItem:
    return CleanableItem(path=path, size_bytes=size, name=Path(path).name)


class TestCleanableItem:
    """Tests for CleanableItem validation."""

    def test_valid_item(self) -> None:
        """An absolute, normalized path is accepted."""
        item = _item("/tmp/cache/file.bin", 42)

        assert item.size_bytes == 42
        assert not item.virtual

    def test_rejects_negative_size(self) -> None:
        """Sizes must be non-negative."""
        with pytest.raises(ValueError, match="non-negative"):
            CleanableItem(path="/tmp/a", size_bytes=-1, name="a")

    def test_rejects_empty_path(self) -> None:
        """Empty paths are rejected."""
        with pytest.raises(ValueError, match="empty"):
            CleanableItem(path="", size_bytes=0, name="a")

    @pytest.mark.parametrize("path", ["relative/file", "/tmp/../etc", "/tmp//a", "/tmp/a/"])
    def test_rejects_non_normalized_paths(self, path: str) -> None:
        """Real paths must be absolute and normalized."""
        with pytest.raises(ValueError, match="absolute and normalized"):
            CleanableItem(path=path, size_bytes=0, name="a")

    def test_virtual_item_allows_identifier(self) -> None:
        """Virtual items carry opaque identifiers instead of paths."""
        item = CleanableItem(path="docker:images", size_bytes=10, name="Images", virtual=True)

        assert item.virtual

    def test_is_immutable(self) -> None:
        """Items are frozen."""
        item = _item("/tmp/a")
        with pytest.raises(AttributeError):
            item.size_bytes = 5  # type: ignore[misc]


class TestAggregates:
    """Tests for result and summary aggregates."""

    def test_scan_result_total_size(self) -> None:
        """ScanResult sums the sizes of its items."""
        result = ScanResult(
            category=CATEGORIES[CategoryId.TRASH],
            items=(_item("/tmp/a", 100), _item("/tmp/b", 250)),
        )

        assert result.total_size == 350

    def test_scan_summary_totals_and_errors(self) -> None:
        """ScanSummary aggregates items and formats errors."""
        ok = ScanResult(category=CATEGORIES[CategoryId.TRASH], items=(_item("/tmp/a", 10),))
        failed = ScanResult(category=CATEGORIES[CategoryId.DOCKER], error="boom")
        summary = ScanSummary(results=(ok, failed))

        assert summary.total_size == 10
        assert summary.total_items == 1
        assert summary.errors == ["docker: boom"]

    def test_clean_summary_totals(self) -> None:
        """CleanSummary aggregates freed bytes, counts and errors."""
        summary = CleanSummary(
            results=(
                CleanResult(CATEGORIES[CategoryId.TRASH], 2, 300),
                CleanResult(CATEGORIES[CategoryId.SYSTEM_CACHE], 1, 50, errors=("x",)),
            )
        )

        assert summary.total_freed == 350
        assert summary.total_cleaned == 3
        assert summary.total_errors == 1
        assert summary.backup_dir is None
