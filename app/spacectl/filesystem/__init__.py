"""Filesystem safety, removal and backup.

This module provides path safety validation, the safe remover, the backup
manager and the enumeration helpers used by scanners.
"""

from spacectl.filesystem.backup import BackupManager, validate_restore_target
from spacectl.filesystem.protected import (
    ALLOWED_PATHS,
    PROTECTED_PATHS,
    PathSafetyViolation,
    PathTraversalError,
    UnsafeReason,
    expand_path,
    has_traversal_pattern,
    is_protected_path,
    is_within_home,
    validate_path_safety,
)
from spacectl.filesystem.remover import SafeRemover, remove_item, remove_items

__all__ = [
    "ALLOWED_PATHS",
    "PROTECTED_PATHS",
    "BackupManager",
    "PathSafetyViolation",
    "PathTraversalError",
    "SafeRemover",
    "UnsafeReason",
    "expand_path",
    "has_traversal_pattern",
    "is_protected_path",
    "is_within_home",
    "remove_item",
    "remove_items",
    "validate_path_safety",
    "validate_restore_target",
]
