"""Unit tests for application path management."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from spacectl.core.paths import (
    APP_NAME,
    ensure_dir,
    get_backup_root,
    get_config_dir,
    get_config_path,
    get_rc_path,
    get_theme_path,
)


class TestConfigPaths:
    """Tests for configuration path helpers."""

    def test_default_config_dir(self, home: Path) -> None:
        """get_config_dir returns ~/.config/spacectl when XDG_CONFIG_HOME is unset."""
        assert get_config_dir() == home / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME

    def test_file_locations(self, home: Path) -> None:
        """Config, rc and theme files have fixed names."""
        assert get_rc_path() == home / ".spacectlrc"
        assert get_config_path() == home / ".config" / APP_NAME / "config.json"
        assert get_theme_path() == home / ".config" / APP_NAME / "theme.toml"

    def test_backup_root(self, home: Path) -> None:
        """The backup root is fixed below home, independent of XDG."""
        with patch.dict(os.environ, {"XDG_DATA_HOME": "/somewhere"}):
            assert get_backup_root() == home / ".spacectl" / "backup"


class TestEnsureDir:
    """Tests for directory creation helpers."""

    def test_creates_nested(self, tmp_path: Path) -> None:
        """ensure_dir creates missing parents."""
        target = tmp_path / "a" / "b"

        assert ensure_dir(target, "test") == target
        assert target.is_dir()

    def test_existing_is_fine(self, tmp_path: Path) -> None:
        """ensure_dir accepts an existing directory."""
        assert ensure_dir(tmp_path, "test") == tmp_path

    def test_failure_raises_runtime_error(self, tmp_path: Path) -> None:
        """ensure_dir raises RuntimeError when creation fails."""
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(RuntimeError, match="Cannot create test directory"):
            ensure_dir(blocker / "sub", "test")
