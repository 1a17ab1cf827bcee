"""Pure formatting utilities for human-readable output.

This module provides stateless formatting functions for converting raw byte
counts and durations into display strings. All functions are pure with no
side effects.
"""

from typing import Final

# Decimal unit steps (1000-based), matching how file managers report file sizes
_UNIT_STEP: Final[int] = 1000
_UNITS: Final[tuple[str, ...]] = ("KB", "MB", "GB", "TB", "PB", "EB")

# Decimal places shown per unit: KB whole, MB one place, GB and above two
_UNIT_PRECISION: Final[dict[str, int]] = {"KB": 0, "MB": 1}
_DEFAULT_PRECISION: Final[int] = 2

_MINUTE: Final[int] = 60
_HOUR: Final[int] = _MINUTE * 60


def format_size(size_bytes: int) -> str:
    """Convert a byte count to a human-readable file size.

    Uses decimal units (1 KB = 1000 bytes). Precision adapts to the unit and
    trailing zeros are dropped.

    Args:
        size_bytes: Number of bytes to format (negative values keep their sign)

    Returns:
        Human-readable size string

    Examples:
        >>> format_size(0)
        'Zero KB'
        >>> format_size(1)
        '1 byte'
        >>> format_size(532)
        '532 bytes'
        >>> format_size(1_500_000)
        '1.5 MB'
        >>> format_size(2_000_000_000)
        '2 GB'
        >>> format_size(1_234_567_890)
        '1.23 GB'
        >>> format_size(999_999)
        '1 MB'
        >>> format_size(999_960_000)
        '1 GB'
    """
    if size_bytes == 0:
        return "Zero KB"

    sign = "-" if size_bytes < 0 else ""
    magnitude = abs(size_bytes)

    if magnitude < _UNIT_STEP:
        unit = "byte" if magnitude == 1 else "bytes"
        return f"{sign}{magnitude} {unit}"

    value = float(magnitude)
    unit = _UNITS[0]
    precision = _DEFAULT_PRECISION
    for unit in _UNITS:
        value /= _UNIT_STEP
        precision = _UNIT_PRECISION.get(unit, _DEFAULT_PRECISION)
        # Move up when rounding would print 1000 of this unit
        if round(value, precision) < _UNIT_STEP:
            break

    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{sign}{text} {unit}"


def format_duration(seconds: float) -> str:
    """Convert an elapsed time to a short human-readable string.

    Args:
        seconds: Duration in seconds (must be non-negative)

    Returns:
        "0.42s" below one minute, "Xm Ys" below one hour, "Xh Ym" above

    Examples:
        >>> format_duration(0.4213)
        '0.42s'
        >>> format_duration(95)
        '1m 35s'
        >>> format_duration(3665)
        '1h 1m'
    """
    if seconds < 0:
        msg = "seconds must be non-negative"
        raise ValueError(msg)

    if seconds < _MINUTE:
        return f"{seconds:.2f}s"

    total_seconds = int(seconds)
    if total_seconds < _HOUR:
        minutes, remaining = divmod(total_seconds, _MINUTE)
        return f"{minutes}m {remaining}s" if remaining else f"{minutes}m"

    hours, remaining = divmod(total_seconds, _HOUR)
    minutes = remaining // _MINUTE
    return f"{hours}h {minutes}m" if minutes else f"{hours}h"


def displayable(text: str) -> str:
    """Make text safe to write to a strict UTF-8 stream.

    File names that are not valid UTF-8 reach Python with surrogate escapes;
    each undecodable byte is shown as U+FFFD instead.

    Examples:
        >>> displayable("bad\\udcffname.bin") == "bad\\ufffdname.bin"
        True
        >>> displayable("plain.txt")
        'plain.txt'
    """
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")
