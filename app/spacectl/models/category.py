"""Cleanup category registry.

This module defines the closed set of cleanup categories, their safety
levels and the confirmation policy that decides whether a category is
confirmed as a whole or item by item.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class CategoryId(str, Enum):
    """Identifier of a cleanup category.

    The set is closed: any other string is invalid input to every
    component that accepts category ids.
    """

    SYSTEM_CACHE = "system-cache"
    SYSTEM_LOGS = "system-logs"
    BROWSER_CACHE = "browser-cache"
    DEV_CACHE = "dev-cache"
    NODE_MODULES = "node-modules"
    DOWNLOADS = "downloads"
    TRASH = "trash"
    TEMP_FILES = "temp-files"
    IOS_BACKUPS = "ios-backups"
    MAIL_ATTACHMENTS = "mail-attachments"
    LARGE_FILES = "large-files"
    DUPLICATES = "duplicates"
    DOCKER = "docker"
    HOMEBREW = "homebrew"
    LANGUAGE_FILES = "language-files"


VALID_CATEGORY_IDS: frozenset[str] = frozenset(c.value for c in CategoryId)


class CategoryGroup(str, Enum):
    """Display group a category belongs to."""

    SYSTEM_JUNK = "System Junk"
    DEVELOPMENT = "Development"
    STORAGE = "Storage"
    BROWSERS = "Browsers"
    APPLICATIONS = "Applications"


class SafetyLevel(str, Enum):
    """How much care deleting a category requires.

    Attributes:
        SAFE: Regenerated automatically, no data loss.
        MODERATE: Regenerated on demand, may cost time or bandwidth.
        RISKY: May contain user data that cannot be recovered.
    """

    SAFE = "safe"
    MODERATE = "moderate"
    RISKY = "risky"


@dataclass(frozen=True, slots=True)
class CategoryDescriptor:
    """Immutable description of a cleanup category.

    Attributes:
        id: Category identifier.
        name: Human-readable name.
        group: Display group.
        safety_level: Deletion risk classification.
        description: Short explanation of what the category contains.
        safety_note: Optional warning shown before cleaning.
    """

    id: CategoryId
    name: str
    group: CategoryGroup
    safety_level: SafetyLevel
    description: str
    safety_note: str | None = None


def _descriptor(
    category_id: CategoryId,
    name: str,
    group: CategoryGroup,
    safety_level: SafetyLevel,
    description: str,
    safety_note: str | None = None,
) -> tuple[CategoryId, CategoryDescriptor]:
    return category_id, CategoryDescriptor(
        id=category_id,
        name=name,
        group=group,
        safety_level=safety_level,
        description=description,
        safety_note=safety_note,
    )


CATEGORIES: dict[CategoryId, CategoryDescriptor] = dict(
    [
        # =====================================================================
        # System junk
        # =====================================================================
        _descriptor(
            CategoryId.SYSTEM_CACHE,
            "User Cache Files",
            CategoryGroup.SYSTEM_JUNK,
            SafetyLevel.SAFE,
            "Application caches in the user library",
        ),
        _descriptor(
            CategoryId.SYSTEM_LOGS,
            "System Log Files",
            CategoryGroup.SYSTEM_JUNK,
            SafetyLevel.SAFE,
            "Diagnostic and application logs",
        ),
        _descriptor(
            CategoryId.TEMP_FILES,
            "Temporary Files",
            CategoryGroup.SYSTEM_JUNK,
            SafetyLevel.SAFE,
            "Files left behind in temporary directories",
        ),
        _descriptor(
            CategoryId.TRASH,
            "Trash",
            CategoryGroup.SYSTEM_JUNK,
            SafetyLevel.SAFE,
            "Items already moved to the trash",
        ),
        _descriptor(
            CategoryId.LANGUAGE_FILES,
            "Language Files",
            CategoryGroup.SYSTEM_JUNK,
            SafetyLevel.RISKY,
            "Unused localizations bundled with applications",
            "Removing localizations may break code-signed applications",
        ),
        # =====================================================================
        # Development
        # =====================================================================
        _descriptor(
            CategoryId.DEV_CACHE,
            "Development Cache",
            CategoryGroup.DEVELOPMENT,
            SafetyLevel.MODERATE,
            "Package manager caches and build artifacts",
            "Packages re-download on the next install",
        ),
        _descriptor(
            CategoryId.NODE_MODULES,
            "Node Modules",
            CategoryGroup.DEVELOPMENT,
            SafetyLevel.MODERATE,
            "Installed node_modules folders in project directories",
            "Projects need a fresh install before they run again",
        ),
        _descriptor(
            CategoryId.DOCKER,
            "Docker",
            CategoryGroup.DEVELOPMENT,
            SafetyLevel.MODERATE,
            "Unused images, containers and build cache",
        ),
        _descriptor(
            CategoryId.HOMEBREW,
            "Homebrew Cache",
            CategoryGroup.DEVELOPMENT,
            SafetyLevel.SAFE,
            "Downloaded bottles and outdated formula versions",
        ),
        # =====================================================================
        # Storage
        # =====================================================================
        _descriptor(
            CategoryId.DOWNLOADS,
            "Old Downloads",
            CategoryGroup.STORAGE,
            SafetyLevel.RISKY,
            "Files in Downloads older than the configured age",
            "Downloads may contain files you still need",
        ),
        _descriptor(
            CategoryId.LARGE_FILES,
            "Large Files",
            CategoryGroup.STORAGE,
            SafetyLevel.RISKY,
            "Files above the configured size threshold",
            "Large files are often personal documents or media",
        ),
        _descriptor(
            CategoryId.DUPLICATES,
            "Duplicate Files",
            CategoryGroup.STORAGE,
            SafetyLevel.RISKY,
            "Files with identical content",
            "Only one copy should be kept",
        ),
        _descriptor(
            CategoryId.IOS_BACKUPS,
            "iOS Backups",
            CategoryGroup.STORAGE,
            SafetyLevel.RISKY,
            "Local iPhone and iPad backups",
            "Deleted device backups cannot be restored",
        ),
        # =====================================================================
        # Browsers and applications
        # =====================================================================
        _descriptor(
            CategoryId.BROWSER_CACHE,
            "Browser Cache",
            CategoryGroup.BROWSERS,
            SafetyLevel.SAFE,
            "Web caches of installed browsers (not passwords or bookmarks)",
        ),
        _descriptor(
            CategoryId.MAIL_ATTACHMENTS,
            "Mail Attachments",
            CategoryGroup.APPLICATIONS,
            SafetyLevel.RISKY,
            "Attachments downloaded by the Mail application",
            "Attachments are re-downloaded only while the message exists on the server",
        ),
    ]
)


def is_valid_category_id(value: object) -> bool:
    """Check whether a value names a known category.

    Args:
        value: Candidate id, typically a string from untrusted input.

    Returns:
        True if the value is one of the fixed category ids.
    """
    if isinstance(value, CategoryId):
        return True
    if not isinstance(value, str):
        return False
    return value in VALID_CATEGORY_IDS


def get_category(category_id: CategoryId | str) -> CategoryDescriptor:
    """Look up a category descriptor.

    Raises:
        ValueError: If the id is not one of the fixed category ids.
    """
    return CATEGORIES[CategoryId(category_id)]


# Default policy: risky categories and a few bulky ones are confirmed item by item.
DEFAULT_PER_ITEM_CATEGORIES: tuple[CategoryId, ...] = (
    CategoryId.LARGE_FILES,
    CategoryId.IOS_BACKUPS,
)


@dataclass(frozen=True, slots=True)
class ConfirmationPolicy:
    """Decides whether a category is confirmed whole or item by item.

    Attributes:
        per_item_levels: Safety levels that always require item selection.
        per_item_categories: Additional categories that require item selection.
    """

    per_item_levels: frozenset[SafetyLevel] = field(
        default_factory=lambda: frozenset({SafetyLevel.RISKY})
    )
    per_item_categories: frozenset[CategoryId] = field(
        default_factory=lambda: frozenset(DEFAULT_PER_ITEM_CATEGORIES)
    )

    @classmethod
    def from_categories(cls, categories: Iterable[CategoryId]) -> "ConfirmationPolicy":
        """Build a policy with the default levels and the given categories."""
        return cls(per_item_categories=frozenset(categories))

    def requires_item_selection(self, category: CategoryDescriptor) -> bool:
        """Check if a category must be confirmed item by item."""
        return (
            category.safety_level in self.per_item_levels
            or category.id in self.per_item_categories
        )
