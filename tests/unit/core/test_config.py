"""Unit tests for configuration loading and validation."""

import json
from pathlib import Path

import pytest
from spacectl.core.config import (
    MAX_CONFIG_SIZE,
    MAX_EXTRA_PATHS,
    Config,
    ConfigError,
    ConfigStore,
    config_exists,
    get_default_config,
    init_config,
    load_config,
    save_config,
    validate_config,
)
from spacectl.models.category import CategoryId


def _write_rc(home: Path, data: object) -> Path:
    path = home / ".spacectlrc"
    path.write_text(json.dumps(data))
    return path


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_empty_object_gives_defaults(self) -> None:
        """An empty object yields the default config."""
        assert validate_config({}) == get_default_config()

    def test_non_mapping_gives_defaults(self) -> None:
        """Arrays, strings and None are not configurations."""
        for raw in ([1, 2], "x", None, 42):
            assert validate_config(raw) == Config()

    def test_valid_numeric_fields(self) -> None:
        """In-range numeric values are kept."""
        config = validate_config(
            {"downloadsDaysOld": 90, "concurrency": 8, "backupRetentionDays": 14}
        )

        assert config.downloads_days_old == 90
        assert config.concurrency == 8
        assert config.backup_retention_days == 14

    @pytest.mark.parametrize("value", [-5, 0, 366, "soon", None, [30]])
    def test_invalid_days_fall_back_to_default(self, value: object) -> None:
        """Out-of-range or mistyped values fall back to the default."""
        config = validate_config({"downloadsDaysOld": value})

        assert config.downloads_days_old == 30

    def test_invalid_field_does_not_discard_others(self) -> None:
        """One bad field leaves the valid ones intact."""
        config = validate_config({"downloadsDaysOld": -5, "concurrency": 2})

        assert config.downloads_days_old == 30
        assert config.concurrency == 2

    def test_concurrency_bounds(self) -> None:
        """Concurrency must be between 1 and 16."""
        assert validate_config({"concurrency": 0}).concurrency == 4
        assert validate_config({"concurrency": 17}).concurrency == 4
        assert validate_config({"concurrency": 16}).concurrency == 16

    def test_large_files_min_size_bounds(self) -> None:
        """The size threshold is clamped to a sane range."""
        assert validate_config({"largeFilesMinSize": 10}).large_files_min_size == 500 * 1024**2
        assert validate_config({"largeFilesMinSize": 2048}).large_files_min_size == 2048

    def test_booleans_are_coerced(self) -> None:
        """Truthy and falsy values become booleans."""
        config = validate_config({"backupEnabled": 1, "parallelScans": 0})

        assert config.backup_enabled is True
        assert config.parallel_scans is False

    def test_unknown_categories_dropped_in_order(self) -> None:
        """Unknown category ids are dropped, the rest keep their order."""
        config = validate_config(
            {"defaultCategories": ["trash", "bogus", "system-cache", 7, "downloads"]}
        )

        assert config.default_categories == (
            CategoryId.TRASH,
            CategoryId.SYSTEM_CACHE,
            CategoryId.DOWNLOADS,
        )

    def test_category_field_must_be_list(self) -> None:
        """A non-list category field keeps its default."""
        config = validate_config({"excludeCategories": "trash"})

        assert config.exclude_categories is None

    def test_unknown_keys_ignored(self) -> None:
        """Unknown keys are ignored."""
        assert validate_config({"colour": "blue"}) == Config()


class TestExtraPaths:
    """Tests for extraPaths validation."""

    def test_expands_home_paths(self, home: Path) -> None:
        """~ paths are expanded and kept."""
        config = validate_config({"extraPaths": {"nodeModules": ["~/Projects"]}})

        assert config.extra_paths.node_modules == (str(home / "Projects"),)

    def test_rejects_paths_outside_allowed_roots(self, home: Path) -> None:
        """System locations are never scan roots."""
        config = validate_config(
            {"extraPaths": {"projects": ["/etc", "/opt/code", "/Users/someone/code"]}}
        )

        assert config.extra_paths.projects == ("/Users/someone/code",)

    def test_rejects_traversal(self, home: Path) -> None:
        """Home-relative paths that escape home are dropped."""
        config = validate_config({"extraPaths": {"projects": ["~/../../etc", "~/ok"]}})

        assert config.extra_paths.projects == (str(home / "ok"),)

    def test_non_strings_dropped_and_capped(self, home: Path) -> None:
        """Non-string entries are ignored and the list is capped."""
        entries: list[object] = [f"~/p{i}" for i in range(MAX_EXTRA_PATHS + 10)]
        entries.insert(0, 5)

        config = validate_config({"extraPaths": {"projects": entries}})

        assert len(config.extra_paths.projects) == MAX_EXTRA_PATHS
        assert config.extra_paths.projects[0] == str(home / "p0")

    def test_invalid_shape(self, home: Path) -> None:
        """A non-object extraPaths keeps the default."""
        config = validate_config({"extraPaths": ["~/Projects"]})

        assert config.extra_paths.node_modules == ()
        assert config.extra_paths.projects == ()


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_files_give_defaults(self, home: Path) -> None:
        """Without any config file the defaults are used."""
        assert load_config() == Config()
        assert not config_exists()

    def test_reads_rc_file(self, home: Path) -> None:
        """~/.spacectlrc is read first."""
        _write_rc(home, {"downloadsDaysOld": 60})

        assert load_config().downloads_days_old == 60
        assert config_exists()

    def test_falls_back_to_xdg_config(self, home: Path) -> None:
        """~/.config/spacectl/config.json is read when the rc file is missing."""
        path = home / ".config" / "spacectl" / "config.json"
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"concurrency": 2}))

        assert load_config().concurrency == 2

    def test_malformed_rc_falls_through(self, home: Path) -> None:
        """Invalid JSON in the rc file does not prevent loading config.json."""
        (home / ".spacectlrc").write_text("{not json")
        path = home / ".config" / "spacectl" / "config.json"
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"concurrency": 3}))

        assert load_config().concurrency == 3

    def test_non_object_file(self, home: Path) -> None:
        """A top-level array is ignored."""
        _write_rc(home, [1, 2, 3])

        assert load_config() == Config()

    def test_deeply_nested_json(self, home: Path) -> None:
        """JSON nested past the parser's recursion limit gives defaults."""
        (home / ".spacectlrc").write_text("[" * 50000)

        assert load_config() == Config()

    def test_oversized_file(self, home: Path) -> None:
        """Files larger than the size limit are ignored."""
        path = home / ".spacectlrc"
        path.write_text('{"concurrency": 2, "pad": "' + "x" * MAX_CONFIG_SIZE + '"}')

        assert load_config().concurrency == 4

    def test_explicit_path(self, home: Path) -> None:
        """An explicit path below home is used."""
        path = home / "custom.json"
        path.write_text(json.dumps({"backupEnabled": True}))

        assert load_config(path).backup_enabled is True

    def test_explicit_path_outside_home(self, home: Path, tmp_path: Path) -> None:
        """An explicit path outside home is refused."""
        path = tmp_path / "outside.json"
        path.write_text(json.dumps({"backupEnabled": True}))

        assert load_config(path) == Config()


class TestSaveConfig:
    """Tests for save_config and init_config."""

    def test_save_writes_camel_case_json(self, home: Path) -> None:
        """Saved files use camelCase keys and omit None values."""
        path = save_config(Config(concurrency=2))

        data = json.loads(path.read_text())
        assert path == home / ".spacectlrc"
        assert data["concurrency"] == 2
        assert "downloadsDaysOld" in data
        assert "defaultCategories" not in data

    def test_save_round_trip(self, home: Path) -> None:
        """A saved config loads back unchanged."""
        config = Config(
            downloads_days_old=45,
            exclude_categories=(CategoryId.DOCKER,),
            backup_enabled=True,
        )

        save_config(config)

        assert load_config() == config

    def test_save_leaves_no_temp_files(self, home: Path) -> None:
        """The atomic write cleans up after itself."""
        save_config(Config())

        assert [p.name for p in home.iterdir()] == [".spacectlrc"]

    def test_save_failure_raises(self, tmp_path: Path) -> None:
        """Unwritable destinations raise ConfigError."""
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(ConfigError):
            save_config(Config(), blocker / "config.json")

    def test_init_writes_starter(self, home: Path) -> None:
        """init_config writes project roots to the extra paths."""
        path = init_config()

        data = json.loads(path.read_text())
        assert data["extraPaths"]["projects"] == ["~/Projects", "~/Developer", "~/Code"]

    def test_init_refuses_overwrite(self, home: Path) -> None:
        """An existing file is kept unless force is given."""
        _write_rc(home, {"concurrency": 2})

        with pytest.raises(ConfigError, match="already exists"):
            init_config()

        init_config(force=True)
        assert "extraPaths" in json.loads((home / ".spacectlrc").read_text())


class TestConfigStore:
    """Tests for ConfigStore caching."""

    def test_caches_until_invalidated(self, home: Path) -> None:
        """get() returns the cached config until invalidate() is called."""
        store = ConfigStore()
        assert store.get().concurrency == 4

        _write_rc(home, {"concurrency": 2})
        assert store.get().concurrency == 4

        store.invalidate()
        assert store.get().concurrency == 2

    def test_save_updates_cache(self, home: Path) -> None:
        """save() persists the config and caches it."""
        store = ConfigStore(home / "custom.json")

        store.save(Config(concurrency=6))

        assert store.get().concurrency == 6
        assert (home / "custom.json").exists()
        assert store.path == home / "custom.json"
