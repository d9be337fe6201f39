"""User configuration.

Configuration is read from JSON, either ``~/.spacectlrc`` or
``~/.config/spacectl/config.json`` (first one that loads wins). Loading
never fails: every field is validated on its own, and a field that does
not validate falls back to its default with a warning, so one typo never
discards the rest of the file.
"""

import json
import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from spacectl.core.paths import get_config_dir, get_config_path, get_home_dir, get_rc_path
from spacectl.filesystem.protected import PathTraversalError, canonicalize, expand_path
from spacectl.models.category import (
    DEFAULT_PER_ITEM_CATEGORIES,
    CategoryId,
    ConfirmationPolicy,
    is_valid_category_id,
)

logger = logging.getLogger(__name__)

MAX_CONFIG_SIZE = 100 * 1024
MAX_EXTRA_PATHS = 50

# Extra scan roots must live below one of these (besides the home directory)
EXTRA_PATH_ROOTS: tuple[str, ...] = ("/Users", "/home", "/Volumes", "/media")

_GIB = 1024**3
_MIB = 1024**2


class ConfigError(Exception):
    """Raised when the configuration file cannot be written."""


class ExtraPaths(BaseModel):
    """Additional roots searched by path-based scanners.

    Attributes:
        node_modules: Roots searched for node_modules directories.
        projects: Project roots, also searched for node_modules.
    """

    model_config = ConfigDict(
        frozen=True, extra="ignore", alias_generator=to_camel, populate_by_name=True
    )

    node_modules: tuple[str, ...] = ()
    projects: tuple[str, ...] = ()


class Config(BaseModel):
    """Validated spacectl configuration.

    Attributes:
        downloads_days_old: Minimum age of Downloads entries offered for cleanup.
        large_files_min_size: Minimum size of files reported as large.
        backup_enabled: Back up items instead of deleting them by default.
        backup_retention_days: Age after which backup sessions are pruned.
        parallel_scans: Run scanners concurrently.
        concurrency: Maximum number of scanners running at once.
        default_categories: Categories scanned by default (None = all).
        exclude_categories: Categories never scanned by default.
        per_item_categories: Categories confirmed item by item, in addition
            to all risky categories.
        extra_paths: Additional scan roots.
    """

    model_config = ConfigDict(
        frozen=True, extra="ignore", alias_generator=to_camel, populate_by_name=True
    )

    downloads_days_old: Annotated[int, Field(ge=1, le=365)] = 30
    large_files_min_size: Annotated[int, Field(ge=1024, le=100 * _GIB)] = 500 * _MIB
    backup_enabled: bool = False
    backup_retention_days: Annotated[int, Field(ge=1, le=365)] = 7
    parallel_scans: bool = True
    concurrency: Annotated[int, Field(ge=1, le=16)] = 4
    default_categories: tuple[CategoryId, ...] | None = None
    exclude_categories: tuple[CategoryId, ...] | None = None
    per_item_categories: tuple[CategoryId, ...] = DEFAULT_PER_ITEM_CATEGORIES
    extra_paths: ExtraPaths = Field(default_factory=ExtraPaths)

    def confirmation_policy(self) -> ConfirmationPolicy:
        """Build the confirmation policy described by this config."""
        return ConfirmationPolicy.from_categories(self.per_item_categories)

    def select_categories(self, available: Iterable[CategoryId]) -> list[CategoryId]:
        """Apply default and excluded categories to the available ones.

        Args:
            available: Candidate categories, in display order.

        Returns:
            The candidates that are enabled by default, in the same order.
        """
        excluded = set(self.exclude_categories or ())
        return [
            category
            for category in available
            if (self.default_categories is None or category in self.default_categories)
            and category not in excluded
        ]


_NUMERIC_FIELDS = (
    "downloads_days_old",
    "large_files_min_size",
    "backup_retention_days",
    "concurrency",
)
_BOOL_FIELDS = ("backup_enabled", "parallel_scans")
_CATEGORY_FIELDS = ("default_categories", "exclude_categories", "per_item_categories")


def _alias(field_name: str) -> str:
    return to_camel(field_name)


def _validate_field(name: str, value: object) -> Any:
    """Validate one field in isolation.

    Raises:
        ValidationError: If the value violates the field's constraints.
    """
    partial = Config.model_validate({name: value})
    return getattr(partial, name)


def _validate_category_ids(key: str, value: object) -> list[CategoryId] | None:
    if not isinstance(value, list):
        logger.warning("Invalid %s value, expected a list; using default", key)
        return None

    valid: list[CategoryId] = []
    for entry in value:
        if is_valid_category_id(entry):
            valid.append(CategoryId(entry))
        else:
            logger.warning("Ignoring unknown category in %s: %r", key, entry)
    return valid


def _is_allowed_extra_path(path: str) -> bool:
    home = canonicalize(str(get_home_dir()))
    for root in (home, *EXTRA_PATH_ROOTS):
        if path == root or path.startswith(root.rstrip("/") + "/"):
            return True
    return False


def _validate_paths(key: str, value: object) -> list[str]:
    if not isinstance(value, list):
        logger.warning("Invalid %s value, expected a list of paths", key)
        return []

    strings = [entry for entry in value if isinstance(entry, str)][:MAX_EXTRA_PATHS]
    paths: list[str] = []

    for entry in strings:
        try:
            expanded = expand_path(entry)
        except PathTraversalError as e:
            logger.warning("Skipping %s entry: %s", key, e)
            continue

        if not _is_allowed_extra_path(expanded):
            logger.warning("Skipping path outside allowed directories: %s", entry)
            continue
        paths.append(expanded)

    return paths


def _validate_extra_paths(value: object) -> ExtraPaths | None:
    if not isinstance(value, Mapping):
        logger.warning("Invalid extraPaths value, expected an object; using default")
        return None

    fields: dict[str, list[str]] = {}
    for name in ("node_modules", "projects"):
        key = _alias(name)
        if key in value:
            fields[name] = _validate_paths(f"extraPaths.{key}", value[key])
    return ExtraPaths.model_validate(fields)


def validate_config(raw: object) -> Config:
    """Validate untrusted configuration data field by field.

    Args:
        raw: Parsed JSON. Anything other than a mapping yields the defaults.

    Returns:
        Config where every invalid or missing field holds its default.
    """
    if not isinstance(raw, Mapping):
        if raw is not None:
            logger.warning("Configuration must be a JSON object, using defaults")
        return Config()

    values: dict[str, Any] = {}

    for name in _NUMERIC_FIELDS:
        key = _alias(name)
        if key not in raw:
            continue
        try:
            values[name] = _validate_field(name, raw[key])
        except ValidationError:
            logger.warning("Invalid %s value %r, using default", key, raw[key])

    for name in _BOOL_FIELDS:
        key = _alias(name)
        if key in raw:
            values[name] = bool(raw[key])

    for name in _CATEGORY_FIELDS:
        key = _alias(name)
        if key not in raw:
            continue
        ids = _validate_category_ids(key, raw[key])
        if ids is not None:
            values[name] = tuple(ids)

    if "extraPaths" in raw:
        extra = _validate_extra_paths(raw["extraPaths"])
        if extra is not None:
            values["extra_paths"] = extra

    return Config.model_validate(values)


def _is_allowed_config_path(path: Path) -> bool:
    resolved = canonicalize(str(path))
    for directory in (get_home_dir(), get_config_dir()):
        root = canonicalize(str(directory))
        if resolved == root or resolved.startswith(root.rstrip("/") + "/"):
            return True
    return False


def _read_config_file(path: Path) -> Config | None:
    """Read and validate one config file.

    Returns:
        The validated config, or None if the file is missing or unusable.
    """
    try:
        size = path.stat().st_size
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Cannot access config file %s: %s", path, e)
        return None

    if size > MAX_CONFIG_SIZE:
        logger.warning("Config file %s is too large, ignoring it", path)
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        logger.warning("Failed to read config file %s: %s", path, e)
        return None
    except (ValueError, RecursionError) as e:
        logger.warning("Invalid JSON in config file %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Config file %s must contain a JSON object, ignoring it", path)
        return None

    logger.debug("Loaded configuration from %s", path)
    return validate_config(data)


def load_config(path: Path | None = None) -> Config:
    """Load the configuration.

    Args:
        path: Explicit config file. Must live under the home directory or
            the config directory. If None, the default locations are tried.

    Returns:
        The first config that loads, or the defaults.
    """
    if path is not None:
        if not _is_allowed_config_path(path):
            logger.warning("Config path %s must be within the home directory, using defaults", path)
            return Config()
        candidates = [path]
    else:
        candidates = [get_rc_path(), get_config_path()]

    for candidate in candidates:
        config = _read_config_file(candidate)
        if config is not None:
            return config

    return Config()


def get_default_config() -> Config:
    """Return a config holding only default values."""
    return Config()


def config_exists() -> bool:
    """Check whether any default config file exists."""
    return any(candidate.exists() for candidate in (get_rc_path(), get_config_path()))


def _config_to_dict(config: Config) -> dict[str, Any]:
    """Convert a Config to JSON-ready data with camelCase keys.

    None values are omitted to keep the file clean.
    """
    return config.model_dump(mode="json", by_alias=True, exclude_none=True)


def save_config(config: Config, path: Path | None = None) -> Path:
    """Save the configuration as JSON.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The Config to save.
        path: Destination. Defaults to ~/.spacectlrc.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_rc_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            json.dump(_config_to_dict(config), f, indent=2)
            f.write("\n")
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def init_config(path: Path | None = None, force: bool = False) -> Path:
    """Write a starter configuration file.

    Args:
        path: Destination. Defaults to ~/.spacectlrc.
        force: Overwrite an existing file.

    Returns:
        Path where the config was written.

    Raises:
        ConfigError: If the file exists and force is not set, or on write errors.
    """
    config_path = path or get_rc_path()
    if config_path.exists() and not force:
        raise ConfigError(f"Config file already exists: {config_path}")

    starter = Config(
        extra_paths=ExtraPaths(
            node_modules=("~/Projects", "~/Developer", "~/Code"),
            projects=("~/Projects", "~/Developer", "~/Code"),
        )
    )
    return save_config(starter, config_path)


class ConfigStore:
    """Lazily loaded, explicitly invalidated configuration cache.

    One store is created per CLI invocation and handed to commands through
    the typer context.

    Example:
        >>> store = ConfigStore()
        >>> store.get().concurrency
        4
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._config: Config | None = None

    @property
    def path(self) -> Path | None:
        return self._path

    def get(self) -> Config:
        """Return the cached config, loading it on first use."""
        if self._config is None:
            self._config = load_config(self._path)
        return self._config

    def invalidate(self) -> None:
        """Drop the cached config so the next get() reloads it."""
        self._config = None

    def save(self, config: Config) -> Path:
        """Persist a config and cache it.

        Raises:
            ConfigError: If the file cannot be written.
        """
        saved = save_config(config, self._path)
        self._config = config
        return saved
