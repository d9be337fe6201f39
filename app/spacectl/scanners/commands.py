"""Scanners for categories reclaimed through an external tool.

Docker and Homebrew manage their own storage, so these scanners ask the
tool how much it could free and delegate cleanup back to it. Binaries are
only looked up in fixed install locations, never through $PATH.
"""

import logging
import re
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass

from spacectl.filesystem.enumerate import stat_item
from spacectl.filesystem.protected import PathTraversalError, expand_path, is_protected_path
from spacectl.filesystem.remover import ProgressCallback
from spacectl.models.category import CategoryId
from spacectl.models.item import CleanableItem, CleanResult, ScanResult
from spacectl.scanners.base import Scanner, ScanOptions
from spacectl.utils.shell import find_executable, run_command

logger = logging.getLogger(__name__)

DOCKER_PATHS: tuple[str, ...] = (
    "/usr/local/bin/docker",
    "/opt/homebrew/bin/docker",
    "/Applications/Docker.app/Contents/Resources/bin/docker",
    "/usr/bin/docker",
)

BREW_PATHS: tuple[str, ...] = (
    "/opt/homebrew/bin/brew",
    "/usr/local/bin/brew",
    "/home/linuxbrew/.linuxbrew/bin/brew",
)

# Resource types reported by `docker system df`; anything else is ignored
DOCKER_RESOURCE_TYPES: frozenset[str] = frozenset(
    {"images", "containers", "local volumes", "build cache"}
)

_DOCKER_DF_FORMAT = "{{.Type}}\t{{.Size}}\t{{.Reclaimable}}"
_DOCKER_SIZE = re.compile(r"([\d.]+)\s*(B|KB|MB|GB|TB)", re.IGNORECASE)
_DOCKER_MULTIPLIERS = {
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}

_COMMAND_TIMEOUT = 30.0
_CLEANUP_TIMEOUT = 600.0


def parse_docker_size(text: str) -> int:
    """Parse a size as printed by the Docker CLI, e.g. ``1.2GB (50%)``.

    Args:
        text: Size column from `docker system df`.

    Returns:
        Size in bytes, 0 if the text contains no recognizable size.
    """
    match = _DOCKER_SIZE.search(text)
    if match is None:
        return 0

    try:
        value = float(match.group(1))
    except ValueError:
        return 0

    return int(value * _DOCKER_MULTIPLIERS[match.group(2).upper()])


def _report_items(
    items: Sequence[CleanableItem], on_progress: ProgressCallback | None
) -> None:
    """Announce every item before the tool cleans them all in one run."""
    if on_progress is None:
        return
    total = len(items)
    for index, item in enumerate(items, start=1):
        on_progress(index, total, item)


def _dry_run_result(scanner: Scanner, items: Sequence[CleanableItem]) -> CleanResult:
    return CleanResult(
        category=scanner.category,
        cleaned_items=len(items),
        freed_bytes=sum(item.size_bytes for item in items),
    )


def _run_cleanup(
    scanner: Scanner,
    binary_paths: tuple[str, ...],
    args: list[str],
    items: Sequence[CleanableItem],
    tool: str,
) -> CleanResult:
    """Run a tool's own cleanup command and report its effect.

    The tool frees what it reported during the scan, so on success the
    reported sizes count as freed.
    """
    binary = find_executable(binary_paths)
    if binary is None:
        return CleanResult(
            category=scanner.category,
            cleaned_items=0,
            freed_bytes=0,
            errors=(f"{tool} binary not found in safe locations",),
        )

    try:
        result = run_command([binary, *args], timeout=_CLEANUP_TIMEOUT)
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning("%s cleanup failed: %s", tool, e)
        return CleanResult(
            category=scanner.category,
            cleaned_items=0,
            freed_bytes=0,
            errors=(f"{tool} cleanup failed: {e}",),
        )

    if not result.success:
        message = result.stderr.strip() or f"exit code {result.returncode}"
        logger.warning("%s cleanup failed: %s", tool, message)
        return CleanResult(
            category=scanner.category,
            cleaned_items=0,
            freed_bytes=0,
            errors=(f"{tool} cleanup failed: {message}",),
        )

    return CleanResult(
        category=scanner.category,
        cleaned_items=len(items),
        freed_bytes=sum(item.size_bytes for item in items),
    )


@dataclass(frozen=True, slots=True)
class DockerScanner(Scanner):
    """Reports reclaimable Docker storage as virtual items.

    Each resource type with reclaimable space becomes one item whose path
    is an identifier like ``docker:build-cache``.
    """

    category_id: CategoryId = CategoryId.DOCKER

    def scan(self, options: ScanOptions) -> ScanResult:
        binary = find_executable(DOCKER_PATHS)
        if binary is None:
            logger.debug("Docker not found in safe locations")
            return self.build_result([])

        try:
            result = run_command(
                [binary, "system", "df", "--format", _DOCKER_DF_FORMAT],
                timeout=_COMMAND_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("docker system df failed: %s", e)
            return self.build_result([])

        if not result.success:
            # Usually the daemon is not running
            logger.debug("docker system df failed: %s", result.stderr.strip())
            return self.build_result([])

        return self.build_result(self.parse_df_output(result.stdout))

    @staticmethod
    def parse_df_output(output: str) -> list[CleanableItem]:
        """Turn `docker system df` output into virtual items.

        Args:
            output: Tab-separated type, size and reclaimable columns.

        Returns:
            One item per known resource type with reclaimable space.
        """
        items: list[CleanableItem] = []

        for line in output.strip().splitlines():
            parts = line.split("\t")
            if len(parts) < 3:
                continue

            resource_type = parts[0].strip()
            normalized = resource_type.lower()
            if normalized not in DOCKER_RESOURCE_TYPES:
                continue

            reclaimable = parse_docker_size(parts[2])
            if reclaimable <= 0:
                continue

            items.append(
                CleanableItem(
                    path=f"docker:{normalized.replace(' ', '-')}",
                    size_bytes=reclaimable,
                    name=f"Docker {resource_type}",
                    virtual=True,
                )
            )

        return items

    def clean(
        self,
        items: Sequence[CleanableItem],
        dry_run: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> CleanResult:
        _report_items(items, on_progress)
        if dry_run:
            return _dry_run_result(self, items)
        # Volumes are left alone: they may hold application data
        return _run_cleanup(self, DOCKER_PATHS, ["system", "prune", "-af"], items, "Docker")


@dataclass(frozen=True, slots=True)
class HomebrewScanner(Scanner):
    """Reports the Homebrew download cache."""

    category_id: CategoryId = CategoryId.HOMEBREW

    def scan(self, options: ScanOptions) -> ScanResult:
        binary = find_executable(BREW_PATHS)
        if binary is None:
            logger.debug("Homebrew not found in safe locations")
            return self.build_result([])

        try:
            result = run_command([binary, "--cache"], timeout=_COMMAND_TIMEOUT)
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("brew --cache failed: %s", e)
            return self.build_result([])

        cache = result.stdout.strip()
        if not result.success or not cache.startswith("/"):
            return self.build_result([])

        try:
            path = expand_path(cache)
        except PathTraversalError:
            return self.build_result([])

        if is_protected_path(path):
            return self.build_result([])

        item = stat_item(path, "Homebrew Download Cache")
        if item is None or item.size_bytes == 0:
            return self.build_result([])
        return self.build_result([item])

    def clean(
        self,
        items: Sequence[CleanableItem],
        dry_run: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> CleanResult:
        _report_items(items, on_progress)
        if dry_run:
            return _dry_run_result(self, items)
        return _run_cleanup(self, BREW_PATHS, ["cleanup", "--prune=all"], items, "Homebrew")
