"""Application path management for spacectl.

This module provides the configuration directory (following the XDG Base
Directory Specification) and the fixed backup root.

Defaults:
- Config: ~/.config/spacectl/
- Backups: ~/.spacectl/backup/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "spacectl"

# Reserved path segment marking "this subtree mirrors the home directory"
HOME_PLACEHOLDER = "HOME"


def get_home_dir() -> Path:
    """Get the current user's home directory.

    Returns:
        Path to the home directory (respects $HOME).
    """
    return Path.home()


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return get_home_dir() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/spacectl/ (or XDG_CONFIG_HOME/spacectl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_rc_path() -> Path:
    """Get the legacy single-file configuration path.

    Returns:
        Path to ~/.spacectlrc.
    """
    return get_home_dir() / f".{APP_NAME}rc"


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/spacectl/config.json.
    """
    return get_config_dir() / "config.json"


def get_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/spacectl/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_backup_root() -> Path:
    """Get the fixed backup root directory.

    Every backup session is a timestamped subdirectory of this location.

    Returns:
        Path to ~/.spacectl/backup/.
    """
    return get_home_dir() / f".{APP_NAME}" / "backup"


def ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path
