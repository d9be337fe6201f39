"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point $HOME at an empty temporary directory.

    XDG overrides are cleared so that config and backup locations are all
    derived from the temporary home.
    """
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    for var in ("XDG_CONFIG_HOME", "XDG_DATA_HOME", "XDG_STATE_HOME", "XDG_CACHE_HOME"):
        monkeypatch.delenv(var, raising=False)
    return home_dir


@pytest.fixture
def sample_docker_df_output() -> str:
    """Sample `docker system df --format` output for testing."""
    return (
        "Images\t4.2GB\t3.1GB (73%)\n"
        "Containers\t120MB\t0B (0%)\n"
        "Local Volumes\t800MB\t512MB (64%)\n"
        "Build Cache\t1.5GB\t1.5GB\n"
    )
