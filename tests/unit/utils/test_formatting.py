"""Unit tests for formatting utilities."""

import pytest

from lunardisk.utils.formatting import displayable, format_duration, format_size


@pytest.mark.unit
class TestFormatSize:
    """Test byte count formatting."""

    @pytest.mark.parametrize(
        ("size_bytes", "expected"),
        [
            (0, "Zero KB"),
            (1, "1 byte"),
            (2, "2 bytes"),
            (999, "999 bytes"),
            (1000, "1 KB"),
            (1499, "1 KB"),
            (1500, "2 KB"),
            (999_000, "999 KB"),
            (999_999, "1 MB"),
            (1_000_000, "1 MB"),
            (1_500_000, "1.5 MB"),
            (999_960_000, "1 GB"),
            (1_234_567_890, "1.23 GB"),
            (2_000_000_000, "2 GB"),
            (3_500_000_000_000, "3.5 TB"),
        ],
    )
    def test_format_size(self, size_bytes: int, expected: str) -> None:
        """Test decimal units with unit-dependent precision."""
        assert format_size(size_bytes) == expected

    def test_negative_keeps_sign(self) -> None:
        """Test negative sizes are formatted with a leading minus."""
        assert format_size(-1_500_000) == "-1.5 MB"
        assert format_size(-1) == "-1 byte"


@pytest.mark.unit
class TestFormatDuration:
    """Test elapsed time formatting."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0.00s"),
            (0.4213, "0.42s"),
            (59.5, "59.50s"),
            (60, "1m"),
            (95, "1m 35s"),
            (3600, "1h"),
            (3665, "1h 1m"),
        ],
    )
    def test_format_duration(self, seconds: float, expected: str) -> None:
        """Test durations switch units at one minute and one hour."""
        assert format_duration(seconds) == expected

    def test_negative_rejected(self) -> None:
        """Test negative durations are rejected."""
        with pytest.raises(ValueError, match="non-negative"):
            _ = format_duration(-1)


@pytest.mark.unit
class TestDisplayable:
    """Test conversion of file names to printable text."""

    def test_surrogate_escapes_replaced(self) -> None:
        """Test undecodable bytes become replacement characters."""
        name = b"bad\xffname.bin".decode("utf-8", "surrogateescape")

        result = displayable(name)

        assert result == "bad�name.bin"
        _ = result.encode("utf-8")

    def test_valid_text_unchanged(self) -> None:
        """Test ordinary Unicode names pass through."""
        assert displayable("résumé ✓.txt") == "résumé ✓.txt"
