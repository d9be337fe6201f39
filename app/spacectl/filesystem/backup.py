"""Backup and restore of removed items.

Items are moved (never copied) into a timestamped session directory under
the fixed backup root before they would otherwise be deleted. Inside a
session, everything that lived in the user's home directory is stored
below a single reserved ``HOME`` segment, so a session can be restored by
substituting the real home directory for that segment.

Restoring applies the same safety discipline as removal: the session must
live under the backup root, and every reconstructed target is validated
again before anything is moved.
"""

import logging
import os
import shutil
import stat
import time
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from spacectl.core.paths import HOME_PLACEHOLDER, ensure_dir, get_backup_root, get_home_dir
from spacectl.filesystem.enumerate import get_directory_size
from spacectl.filesystem.protected import (
    canonicalize,
    has_traversal_pattern,
    is_within_home,
    validate_path_safety,
)
from spacectl.filesystem.remover import ProgressCallback, SafeRemover
from spacectl.models.item import BackupInfo, BackupStats, CleanableItem, RestoreResult

logger = logging.getLogger(__name__)

BACKUP_RETENTION_DAYS = 7

_SECONDS_PER_DAY = 24 * 60 * 60


def validate_restore_target(target: str) -> str | None:
    """Validate a reconstructed restore target.

    Args:
        target: Path a backed-up file would be restored to.

    Returns:
        None if the target is acceptable, otherwise an error message.
    """
    if has_traversal_pattern(target):
        return f"Suspicious path pattern detected: {target}"

    if not is_within_home(target):
        return f"Path traversal detected: {target} resolves outside home directory"

    violation = validate_path_safety(target)
    if violation is not None:
        return violation.message

    return None


def _contains_files(directory: str) -> bool:
    """Check if any non-directory entry remains below a directory."""
    for _root, _dirs, files in os.walk(directory):
        if files:
            return True
    return False


def _session_timestamp() -> str:
    # No colons: they are illegal in path segments on some filesystems
    return datetime.now(UTC).strftime("%Y-%m-%dT%H-%M-%S-%fZ")


class BackupManager:
    """Moves items into backup sessions and restores them.

    Attributes:
        _backup_root: Directory holding all backup sessions.
    """

    def __init__(self, backup_root: Path | None = None) -> None:
        """Initialize the BackupManager.

        Args:
            backup_root: Override for the backup root. Defaults to
                ~/.spacectl/backup.
        """
        self._backup_root = backup_root if backup_root is not None else get_backup_root()

    @property
    def backup_root(self) -> Path:
        return self._backup_root

    def _is_inside_root(self, path: str) -> bool:
        root = os.path.realpath(self._backup_root)
        return os.path.realpath(path).startswith(root.rstrip("/") + "/")

    def ensure_backup_dir(self) -> Path:
        """Create a fresh, timestamped session directory.

        Returns:
            Path to the new session directory.

        Raises:
            RuntimeError: If the session directory cannot be created.
        """
        ensure_dir(self._backup_root, "backup")
        base = _session_timestamp()
        session_dir = self._backup_root / base
        suffix = 1

        while True:
            try:
                session_dir.mkdir()
                break
            except FileExistsError:
                session_dir = self._backup_root / f"{base}-{suffix}"
                suffix += 1
            except OSError as e:
                msg = f"Cannot create backup session {session_dir}: {e}"
                raise RuntimeError(msg) from e

        logger.debug("Created backup session %s", session_dir)
        return session_dir

    def _session_path_for(self, source: str, session_dir: Path) -> Path:
        """Compute where an item is stored inside a session."""
        home = canonicalize(str(get_home_dir()))
        if source.startswith(home.rstrip("/") + "/"):
            relative = os.path.relpath(source, home)
            return session_dir / HOME_PLACEHOLDER / relative
        # Outside home: mirror the absolute path; restore will not touch it
        return session_dir / source.lstrip("/")

    def backup_item(self, item: CleanableItem, session_dir: Path) -> bool:
        """Move an item into a backup session.

        Args:
            item: Item to relocate.
            session_dir: Session directory created by ensure_backup_dir().

        Returns:
            True if the item was moved, False otherwise.
        """
        if item.virtual:
            logger.warning("Cannot back up external resource: %s", item.path)
            return False

        violation = validate_path_safety(item.path)
        if violation is not None:
            logger.error(violation.message)
            return False

        if self._is_inside_root(item.path):
            logger.warning("Refusing to back up a path inside the backup root: %s", item.path)
            return False

        target = self._session_path_for(item.path, session_dir)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # shutil.move renames symlinks instead of following them
            shutil.move(item.path, target)
        except OSError as e:
            logger.warning("Failed to back up %s: %s", item.path, e)
            return False

        logger.debug("Backed up %s to %s", item.path, target)
        return True

    def backup_items(
        self,
        items: Sequence[CleanableItem],
        on_progress: ProgressCallback | None = None,
        session_dir: Path | None = None,
    ) -> BackupStats:
        """Back up items strictly one after another, in list order.

        Args:
            items: Items to relocate.
            on_progress: Optional callback invoked before each item.
            session_dir: Existing session to add to. A new session is
                created when omitted.

        Returns:
            BackupStats with the session directory and counts.

        Raises:
            RuntimeError: If a new session directory cannot be created.
        """
        session = session_dir if session_dir is not None else self.ensure_backup_dir()
        success = 0
        failed = 0
        relocated = 0
        errors: list[str] = []
        total = len(items)

        for index, item in enumerate(items, start=1):
            if on_progress is not None:
                on_progress(index, total, item)

            if self.backup_item(item, session):
                success += 1
                relocated += item.size_bytes
            else:
                failed += 1
                errors.append(f"Failed to back up {item.path}")

        return BackupStats(
            session_dir=session,
            success=success,
            failed=failed,
            relocated_bytes=relocated,
            errors=tuple(errors),
        )

    def restore_backup(self, session_dir: Path | str) -> RestoreResult:
        """Move every file of a session back to its original location.

        Entries are processed independently: a bad entry is recorded and
        the walk continues with the remaining ones. Empty directories are
        recreated, and a session left without files after a restore with no
        failures is removed.

        Args:
            session_dir: Session directory under the backup root.

        Returns:
            RestoreResult with counts and human-readable errors.
        """
        if not self._is_inside_root(str(session_dir)):
            return RestoreResult(
                success=0,
                failed=1,
                errors=[
                    f"Invalid backup directory: {session_dir} must be within {self._backup_root}"
                ],
            )

        resolved_session = os.path.realpath(session_dir)
        home = str(get_home_dir())
        success = 0
        failed = 0
        errors: list[str] = []

        def _restore_empty_dir(directory: str) -> None:
            nonlocal failed

            parts = Path(os.path.relpath(directory, resolved_session)).parts
            if len(parts) < 2 or parts[0] != HOME_PLACEHOLDER:
                return

            target = os.path.join(home, *parts[1:])
            error = validate_restore_target(target)
            if error is not None:
                errors.append(error)
                failed += 1
                return

            try:
                os.makedirs(target, exist_ok=True)
            except OSError as e:
                errors.append(f"Failed to recreate directory {target}: {e.strerror or e}")
                failed += 1
                return
            logger.debug("Recreated empty directory %s", target)

        def _restore_dir(directory: str) -> None:
            nonlocal success, failed

            try:
                entries = sorted(os.scandir(directory), key=lambda e: e.name)
            except OSError as e:
                errors.append(f"Failed to read directory {directory}: {e.strerror or e}")
                failed += 1
                return

            if not entries:
                _restore_empty_dir(directory)
                return

            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    _restore_dir(entry.path)
                    continue

                relative = Path(os.path.relpath(entry.path, resolved_session))
                parts = relative.parts

                if parts[0] != HOME_PLACEHOLDER:
                    errors.append(f"Skipping file outside expected HOME structure: {relative}")
                    failed += 1
                    continue

                if len(parts) == 1:
                    # A bare HOME entry has no original location
                    logger.debug("Skipping bare %s entry in %s", HOME_PLACEHOLDER, session_dir)
                    continue

                target = os.path.join(home, *parts[1:])

                error = validate_restore_target(target)
                if error is not None:
                    errors.append(error)
                    failed += 1
                    continue

                if os.path.isdir(target) and not os.path.islink(target):
                    errors.append(f"Cannot restore {relative}: a directory exists at {target}")
                    failed += 1
                    continue

                try:
                    os.makedirs(os.path.dirname(target), exist_ok=True)
                    shutil.move(entry.path, target)
                except OSError as e:
                    errors.append(f"Failed to restore {entry.name}: {e.strerror or e}")
                    failed += 1
                    continue

                logger.debug("Restored %s", target)
                success += 1

        _restore_dir(resolved_session)

        # A fully restored session is removed
        if failed == 0 and not _contains_files(resolved_session):
            removal = SafeRemover().remove(resolved_session)
            if not removal.success:
                logger.warning(
                    "Could not remove restored session %s: %s", session_dir, removal.error
                )

        return RestoreResult(success=success, failed=failed, errors=errors)

    def clean_old_backups(self, retention_days: int = BACKUP_RETENTION_DAYS) -> int:
        """Remove sessions older than the retention window.

        A missing backup root, or any error while sweeping, simply means
        nothing (more) is cleaned.

        Args:
            retention_days: Sessions modified longer ago than this are removed.

        Returns:
            Number of sessions removed.
        """
        cleaned = 0
        max_age = retention_days * _SECONDS_PER_DAY
        now = time.time()
        remover = SafeRemover()

        try:
            entries = list(os.scandir(self._backup_root))
        except OSError:
            return 0

        for entry in entries:
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError:
                continue

            if not stat.S_ISDIR(st.st_mode) or now - st.st_mtime <= max_age:
                continue

            if remover.remove(entry.path).success:
                logger.info("Removed expired backup session %s", entry.path)
                cleaned += 1

        return cleaned

    def list_backups(self) -> list[BackupInfo]:
        """List backup sessions, newest first.

        Returns:
            One BackupInfo per session directory; empty if none exist.
        """
        backups: list[BackupInfo] = []

        try:
            entries = list(os.scandir(self._backup_root))
        except OSError:
            return []

        for entry in entries:
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError:
                continue

            if not stat.S_ISDIR(st.st_mode):
                continue

            backups.append(
                BackupInfo(
                    path=Path(entry.path),
                    modified_at=datetime.fromtimestamp(st.st_mtime, tz=UTC),
                    size_bytes=get_directory_size(entry.path),
                )
            )

        backups.sort(key=lambda b: b.modified_at, reverse=True)
        return backups
