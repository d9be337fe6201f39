"""Data models for spacectl.

This module exports the category registry and the scan/clean records.
"""

from spacectl.models.category import (
    CATEGORIES,
    CategoryDescriptor,
    CategoryGroup,
    CategoryId,
    ConfirmationPolicy,
    SafetyLevel,
    get_category,
    is_valid_category_id,
)
from spacectl.models.item import (
    BackupInfo,
    BackupStats,
    CleanableItem,
    CleanResult,
    CleanSummary,
    RemovalResult,
    RemovalStats,
    RestoreResult,
    ScanResult,
    ScanSummary,
)

__all__ = [
    "CATEGORIES",
    "BackupInfo",
    "BackupStats",
    "CategoryDescriptor",
    "CategoryGroup",
    "CategoryId",
    "CleanResult",
    "CleanSummary",
    "CleanableItem",
    "ConfirmationPolicy",
    "RemovalResult",
    "RemovalStats",
    "RestoreResult",
    "SafetyLevel",
    "ScanResult",
    "ScanSummary",
    "get_category",
    "is_valid_category_id",
]
