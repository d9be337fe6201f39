"""Unit tests for DockerScanner and HomebrewScanner.

External tools are never executed: binary lookup and command execution
are patched at the module that uses them.
"""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from spacectl.models.category import CategoryId
from spacectl.models.item import CleanableItem
from spacectl.scanners.base import ScanOptions
from spacectl.scanners.commands import DockerScanner, HomebrewScanner, parse_docker_size
from spacectl.utils.shell import CommandResult

_GB = 1024**3
_MB = 1024**2


def _ok(stdout: str = "") -> CommandResult:
    return CommandResult(stdout=stdout, stderr="", returncode=0)


class TestParseDockerSize:
    """Tests for parse_docker_size function."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1.2GB (50%)", int(1.2 * _GB)),
            ("512MB", 512 * _MB),
            ("0B (0%)", 0),
            ("10kB", 10 * 1024),
            ("", 0),
            ("n/a", 0),
        ],
    )
    def test_parses_docker_sizes(self, text: str, expected: int) -> None:
        """Docker size strings are converted to bytes."""
        assert parse_docker_size(text) == expected


class TestDockerScanner:
    """Tests for DockerScanner class."""

    @pytest.fixture
    def scanner(self) -> DockerScanner:
        """Create DockerScanner instance."""
        return DockerScanner()

    def test_category(self, scanner: DockerScanner) -> None:
        """Scanner serves the docker category."""
        assert scanner.category.id == CategoryId.DOCKER

    def test_parse_df_output(self, sample_docker_df_output: str) -> None:
        """Only known types with reclaimable space become virtual items."""
        items = DockerScanner.parse_df_output(sample_docker_df_output)

        assert [item.path for item in items] == [
            "docker:images",
            "docker:local-volumes",
            "docker:build-cache",
        ]
        assert items[0].name == "Docker Images"
        assert items[0].size_bytes == int(3.1 * _GB)
        assert all(item.virtual for item in items)

    def test_parse_ignores_malformed_lines(self) -> None:
        """Lines without three columns or with unknown types are skipped."""
        output = "Images\t1GB\nNetworks\t1GB\t1GB\n\n"

        assert DockerScanner.parse_df_output(output) == []

    @patch("spacectl.scanners.commands.run_command")
    @patch("spacectl.scanners.commands.find_executable")
    def test_scan_runs_df(
        self,
        mock_find: MagicMock,
        mock_run: MagicMock,
        scanner: DockerScanner,
        sample_docker_df_output: str,
    ) -> None:
        """scan() runs `docker system df` with the resolved binary."""
        mock_find.return_value = "/usr/local/bin/docker"
        mock_run.return_value = _ok(sample_docker_df_output)

        result = scanner.scan(ScanOptions())

        assert len(result.items) == 3
        args = mock_run.call_args.args[0]
        assert args[:3] == ["/usr/local/bin/docker", "system", "df"]

    @patch("spacectl.scanners.commands.run_command")
    @patch("spacectl.scanners.commands.find_executable", return_value=None)
    def test_scan_without_docker(
        self, mock_find: MagicMock, mock_run: MagicMock, scanner: DockerScanner
    ) -> None:
        """No binary in the safe locations means no items."""
        result = scanner.scan(ScanOptions())

        assert result.items == ()
        assert result.error is None
        mock_run.assert_not_called()

    @patch("spacectl.scanners.commands.run_command")
    @patch("spacectl.scanners.commands.find_executable", return_value="/usr/bin/docker")
    def test_scan_daemon_not_running(
        self, mock_find: MagicMock, mock_run: MagicMock, scanner: DockerScanner
    ) -> None:
        """A failing df command yields no items."""
        mock_run.return_value = CommandResult(stdout="", stderr="Cannot connect", returncode=1)

        assert scanner.scan(ScanOptions()).items == ()

    @patch("spacectl.scanners.commands.run_command")
    @patch("spacectl.scanners.commands.find_executable", return_value="/usr/bin/docker")
    def test_scan_timeout(
        self, mock_find: MagicMock, mock_run: MagicMock, scanner: DockerScanner
    ) -> None:
        """A hanging docker CLI yields no items."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="docker", timeout=30)

        assert scanner.scan(ScanOptions()).items == ()

    @patch("spacectl.scanners.commands.run_command")
    @patch("spacectl.scanners.commands.find_executable", return_value="/usr/bin/docker")
    def test_clean_runs_prune(
        self, mock_find: MagicMock, mock_run: MagicMock, scanner: DockerScanner
    ) -> None:
        """clean() delegates to `docker system prune -af`."""
        mock_run.return_value = _ok()
        items = DockerScanner.parse_df_output("Images\t2GB\t1GB\n")

        result = scanner.clean(items)

        assert mock_run.call_args.args[0] == ["/usr/bin/docker", "system", "prune", "-af"]
        assert result.cleaned_items == 1
        assert result.freed_bytes == _GB

    @patch("spacectl.scanners.commands.run_command")
    @patch("spacectl.scanners.commands.find_executable", return_value="/usr/bin/docker")
    def test_clean_failure(
        self, mock_find: MagicMock, mock_run: MagicMock, scanner: DockerScanner
    ) -> None:
        """A failing prune reports an error and frees nothing."""
        mock_run.return_value = CommandResult(stdout="", stderr="permission denied", returncode=1)
        items = DockerScanner.parse_df_output("Images\t2GB\t1GB\n")

        result = scanner.clean(items)

        assert result.freed_bytes == 0
        assert result.errors == ("Docker cleanup failed: permission denied",)

    @patch("spacectl.scanners.commands.find_executable", return_value=None)
    def test_clean_without_binary(self, mock_find: MagicMock, scanner: DockerScanner) -> None:
        """Cleaning without docker reports a clear error."""
        items = DockerScanner.parse_df_output("Images\t2GB\t1GB\n")

        result = scanner.clean(items)

        assert result.errors == ("Docker binary not found in safe locations",)

    @patch("spacectl.scanners.commands.run_command")
    def test_clean_dry_run(self, mock_run: MagicMock, scanner: DockerScanner) -> None:
        """Dry run reports reclaimable space without running anything."""
        items = DockerScanner.parse_df_output("Images\t2GB\t1GB\n")

        result = scanner.clean(items, dry_run=True)

        assert result.freed_bytes == _GB
        mock_run.assert_not_called()

    @patch("spacectl.scanners.commands.run_command")
    @patch("spacectl.scanners.commands.find_executable", return_value="/usr/bin/docker")
    def test_clean_reports_progress(
        self, mock_find: MagicMock, mock_run: MagicMock, scanner: DockerScanner
    ) -> None:
        """Every item is announced to the progress callback before the prune."""
        mock_run.return_value = _ok()
        items = DockerScanner.parse_df_output("Images\t2GB\t1GB\nBuild Cache\t1GB\t512MB\n")
        on_progress = MagicMock()

        scanner.clean(items, on_progress=on_progress)

        assert [c.args[:2] for c in on_progress.call_args_list] == [(1, 2), (2, 2)]
        assert [c.args[2] for c in on_progress.call_args_list] == list(items)


class TestHomebrewScanner:
    """Tests for HomebrewScanner class."""

    @pytest.fixture
    def scanner(self) -> HomebrewScanner:
        """Create HomebrewScanner instance."""
        return HomebrewScanner()

    @patch("spacectl.scanners.commands.run_command")
    @patch("spacectl.scanners.commands.find_executable", return_value="/opt/homebrew/bin/brew")
    def test_scan_reports_cache(
        self, mock_find: MagicMock, mock_run: MagicMock, scanner: HomebrewScanner, home: Path
    ) -> None:
        """The cache directory reported by brew is one item."""
        cache = home / "Library" / "Caches" / "Homebrew"
        cache.mkdir(parents=True)
        (cache / "bottle.tar.gz").write_bytes(b"x" * 2048)
        mock_run.return_value = _ok(f"{cache}\n")

        result = scanner.scan(ScanOptions())

        assert len(result.items) == 1
        item = result.items[0]
        assert item.path == str(cache)
        assert item.name == "Homebrew Download Cache"
        assert item.size_bytes == 2048
        assert not item.virtual

    @patch("spacectl.scanners.commands.run_command")
    @patch("spacectl.scanners.commands.find_executable", return_value="/opt/homebrew/bin/brew")
    def test_scan_rejects_relative_cache(
        self, mock_find: MagicMock, mock_run: MagicMock, scanner: HomebrewScanner
    ) -> None:
        """A non-absolute cache path is ignored."""
        mock_run.return_value = _ok("Library/Caches/Homebrew\n")

        assert scanner.scan(ScanOptions()).items == ()

    @patch("spacectl.scanners.commands.run_command")
    @patch("spacectl.scanners.commands.find_executable", return_value="/opt/homebrew/bin/brew")
    def test_scan_rejects_protected_cache(
        self, mock_find: MagicMock, mock_run: MagicMock, scanner: HomebrewScanner
    ) -> None:
        """A cache path inside a protected root is ignored."""
        mock_run.return_value = _ok("/usr/local/share\n")

        assert scanner.scan(ScanOptions()).items == ()

    @patch("spacectl.scanners.commands.run_command")
    @patch("spacectl.scanners.commands.find_executable", return_value="/opt/homebrew/bin/brew")
    def test_scan_empty_cache(
        self, mock_find: MagicMock, mock_run: MagicMock, scanner: HomebrewScanner, home: Path
    ) -> None:
        """An empty cache is not offered."""
        cache = home / "brew-cache"
        cache.mkdir()
        mock_run.return_value = _ok(str(cache))

        assert scanner.scan(ScanOptions()).items == ()

    @patch("spacectl.scanners.commands.run_command")
    @patch("spacectl.scanners.commands.find_executable", return_value="/opt/homebrew/bin/brew")
    def test_clean_runs_cleanup(
        self, mock_find: MagicMock, mock_run: MagicMock, scanner: HomebrewScanner
    ) -> None:
        """clean() delegates to `brew cleanup --prune=all`."""
        mock_run.return_value = _ok()
        item = CleanableItem(path="/tmp/brew-cache", size_bytes=500, name="cache")

        result = scanner.clean([item])

        assert mock_run.call_args.args[0] == ["/opt/homebrew/bin/brew", "cleanup", "--prune=all"]
        assert result.freed_bytes == 500
