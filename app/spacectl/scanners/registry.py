"""Scanner registry.

Maps every category id to the scanner that serves it. The duplicates
category is registered as a category but has no scanner.
"""

from spacectl.models.category import CategoryId
from spacectl.scanners.base import Scanner
from spacectl.scanners.commands import DockerScanner, HomebrewScanner
from spacectl.scanners.filesystem import DirectoryScanner, LocationScanner
from spacectl.scanners.language_files import LanguageFilesScanner
from spacectl.scanners.large_files import LargeFilesScanner
from spacectl.scanners.node_modules import NodeModulesScanner

BROWSER_CACHES: tuple[tuple[str, str], ...] = (
    ("Chrome cache", "~/Library/Caches/Google/Chrome"),
    ("Safari cache", "~/Library/Caches/com.apple.Safari"),
    ("Firefox cache", "~/Library/Caches/Firefox/Profiles"),
    ("Arc cache", "~/Library/Caches/company.thebrowser.Browser"),
    ("Chrome cache", "~/.cache/google-chrome"),
    ("Chromium cache", "~/.cache/chromium"),
    ("Firefox cache", "~/.cache/mozilla/firefox"),
)

DEV_CACHES: tuple[tuple[str, str], ...] = (
    ("npm cache", "~/.npm/_cacache"),
    ("Yarn cache", "~/Library/Caches/Yarn"),
    ("pnpm store", "~/Library/pnpm/store"),
    ("pip cache", "~/.cache/pip"),
    ("CocoaPods cache", "~/Library/Caches/CocoaPods"),
    ("Gradle cache", "~/.gradle/caches"),
    ("Cargo cache", "~/.cargo/registry"),
    ("Xcode DerivedData", "~/Library/Developer/Xcode/DerivedData"),
    ("Xcode Archives", "~/Library/Developer/Xcode/Archives"),
)


def build_registry() -> dict[CategoryId, Scanner]:
    """Create one scanner per scannable category, in category order.

    Returns:
        Mapping of category id to scanner.
    """
    scanners: list[Scanner] = [
        DirectoryScanner(CategoryId.SYSTEM_CACHE, ("~/Library/Caches",)),
        DirectoryScanner(CategoryId.SYSTEM_LOGS, ("~/Library/Logs",)),
        LocationScanner(CategoryId.BROWSER_CACHE, BROWSER_CACHES),
        LocationScanner(CategoryId.DEV_CACHE, DEV_CACHES),
        NodeModulesScanner(),
        DirectoryScanner(CategoryId.DOWNLOADS, ("~/Downloads",), age_filtered=True),
        DirectoryScanner(CategoryId.TRASH, ("~/.Trash", "~/.local/share/Trash/files")),
        DirectoryScanner(CategoryId.TEMP_FILES, ("/tmp", "/private/var/folders/*/*/T")),
        DirectoryScanner(
            CategoryId.IOS_BACKUPS,
            ("~/Library/Application Support/MobileSync/Backup",),
            name_prefix="iOS Backup: ",
            name_limit=8,
        ),
        DirectoryScanner(
            CategoryId.MAIL_ATTACHMENTS,
            ("~/Library/Containers/com.apple.mail/Data/Library/Mail Downloads",),
        ),
        LargeFilesScanner(),
        DockerScanner(),
        HomebrewScanner(),
        LanguageFilesScanner(),
    ]
    return {scanner.category_id: scanner for scanner in scanners}


def get_scanner(category_id: CategoryId | str) -> Scanner | None:
    """Get the scanner for a category.

    Args:
        category_id: Category id or its string value.

    Returns:
        The scanner, or None for categories without one.

    Raises:
        ValueError: If the id is not one of the fixed category ids.
    """
    return build_registry().get(CategoryId(category_id))


def get_all_scanners() -> list[Scanner]:
    """Get every registered scanner in registration order."""
    return list(build_registry().values())
