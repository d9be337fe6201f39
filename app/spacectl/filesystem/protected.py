"""Path safety validation.

This module decides whether a filesystem path may be mutated. It defines
the operating-system roots that must never be deleted, the temporary
locations that are explicitly allowed even when they resemble a protected
root, and the helpers that canonicalize and check user-supplied paths.

All checks are pure: paths are canonicalized with ``os.path.abspath``
(which collapses ``.`` and ``..`` segments) and symlinks are not resolved.
"""

import os
import re
from dataclasses import dataclass
from enum import Enum

from spacectl.core.paths import get_home_dir


# Roots that must never be modified, together with everything below them.
PROTECTED_PATHS: tuple[str, ...] = (
    "/System",
    "/usr",
    "/bin",
    "/sbin",
    "/etc",
    "/var/log",
    "/var/db",
    "/var/root",
    "/private/var/db",
    "/private/var/root",
    "/private/var/log",
    "/Library/Apple",
    "/Applications/Utilities",
)

# Temporary locations that are always allowed. Checked before PROTECTED_PATHS.
ALLOWED_PATHS: tuple[str, ...] = (
    "/tmp",
    "/private/tmp",
    "/var/tmp",
    "/private/var/tmp",
    "/var/folders",
    "/private/var/folders",
)

_TRAVERSAL_SEGMENT = re.compile(r"(^|/)\.\.($|/)")


class PathTraversalError(ValueError):
    """Raised when a home-relative path resolves outside the home directory."""


class UnsafeReason(str, Enum):
    """Reason a path was rejected by the safety validator.

    Attributes:
        PROTECTED: Path is, or descends from, a protected system root.
        ROOT_DIRECTORY: Path canonicalizes to the filesystem root.
        HOME_DIRECTORY: Path is the user's home directory itself.
    """

    PROTECTED = "protected"
    ROOT_DIRECTORY = "root_directory"
    HOME_DIRECTORY = "home_directory"


@dataclass(frozen=True, slots=True)
class PathSafetyViolation:
    """Why a path may not be mutated.

    Attributes:
        reason: Tagged rejection reason.
        path: The path as supplied by the caller.
        message: Human-readable explanation.
    """

    reason: UnsafeReason
    path: str
    message: str


def canonicalize(path: str) -> str:
    """Return the absolute form of ``path`` with ``.``/``..`` collapsed."""
    return os.path.abspath(path)


def _is_same_or_descendant(path: str, root: str) -> bool:
    return path == root or path.startswith(root.rstrip("/") + "/")


def is_within_home(path: str) -> bool:
    """Check if a path is the home directory or a strict descendant of it.

    Args:
        path: Path to check. Canonicalized before comparison.

    Returns:
        True if the canonical path lies inside the home directory.
    """
    return _is_same_or_descendant(canonicalize(path), str(get_home_dir()))


def expand_path(path: str, allow_outside_home: bool = False) -> str:
    """Expand a leading ``~`` and canonicalize the result.

    Args:
        path: Path to expand. Only ``~`` and ``~/...`` are expanded.
        allow_outside_home: If False, a home-relative input must stay inside
            the home directory after canonicalization.

    Returns:
        The absolute, canonical path.

    Raises:
        PathTraversalError: If a home-relative path escapes the home directory.
    """
    home = str(get_home_dir())

    if path == "~":
        expanded = home
    elif path.startswith("~/"):
        expanded = os.path.join(home, path[2:])
    else:
        expanded = path

    resolved = canonicalize(expanded)

    if not allow_outside_home and path.startswith("~"):
        if not _is_same_or_descendant(resolved, home):
            msg = f"Path traversal detected: {path} resolves outside home directory"
            raise PathTraversalError(msg)

    return resolved


def has_traversal_pattern(path: str) -> bool:
    """Cheap syntactic check for parent-directory segments.

    Only whole ``..`` segments count, so names such as ``..data`` or
    ``file..`` pass.

    Args:
        path: Raw path string.

    Returns:
        True if any segment of the path is exactly ``..``.
    """
    return _TRAVERSAL_SEGMENT.search(path) is not None


def is_protected_path(path: str) -> bool:
    """Check if a path is a protected system path.

    Allowed temporary roots win over protected roots, so ``/var/folders``
    stays deletable although ``/var/log`` and friends are not.

    Args:
        path: Path to check. Canonicalized before comparison.

    Returns:
        True if the path must never be modified.
    """
    resolved = canonicalize(path)

    if any(_is_same_or_descendant(resolved, allowed) for allowed in ALLOWED_PATHS):
        return False

    return any(_is_same_or_descendant(resolved, protected) for protected in PROTECTED_PATHS)


def validate_path_safety(path: str) -> PathSafetyViolation | None:
    """Validate that a path is safe to delete or overwrite.

    Args:
        path: Path to validate.

    Returns:
        None if the path is safe, otherwise the violation describing why not.
    """
    resolved = canonicalize(path)

    if is_protected_path(resolved):
        return PathSafetyViolation(
            reason=UnsafeReason.PROTECTED,
            path=path,
            message=f"Refusing to modify protected system path: {path}",
        )

    if resolved == "/":
        return PathSafetyViolation(
            reason=UnsafeReason.ROOT_DIRECTORY,
            path=path,
            message="Refusing to modify root directory",
        )

    if resolved == canonicalize(str(get_home_dir())):
        return PathSafetyViolation(
            reason=UnsafeReason.HOME_DIRECTORY,
            path=path,
            message="Refusing to modify home directory",
        )

    return None
