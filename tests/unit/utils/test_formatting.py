"""Unit tests for formatting helpers."""

import pytest
from spacectl.utils.formatting import format_size, parse_size


class TestFormatSize:
    """Tests for format_size function."""

    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, "0 B"),
            (-5, "0 B"),
            (512, "512 B"),
            (1023, "1023 B"),
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (1024**2, "1.0 MB"),
            (int(2.5 * 1024**3), "2.5 GB"),
            (1024**4, "1.0 TB"),
            (3 * 1024**5, "3072.0 TB"),
        ],
    )
    def test_formats_binary_units(self, size: int, expected: str) -> None:
        """Sizes use 1024-based units with one decimal above bytes."""
        assert format_size(size) == expected


class TestParseSize:
    """Tests for parse_size function."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("500MB", 500 * 1024**2),
            ("1.5 GB", int(1.5 * 1024**3)),
            ("10kb", 10 * 1024),
            ("  2TB ", 2 * 1024**4),
            ("42 B", 42),
        ],
    )
    def test_parses_sizes(self, text: str, expected: int) -> None:
        """Human-readable sizes are converted to bytes."""
        assert parse_size(text) == expected

    @pytest.mark.parametrize("text", ["", "MB", "12", "1.2.3 GB", "5 PB", "-1 GB"])
    def test_invalid_returns_zero(self, text: str) -> None:
        """Unparseable input yields 0."""
        assert parse_size(text) == 0
