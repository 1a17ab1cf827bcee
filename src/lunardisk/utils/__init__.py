"""Shared utility modules for common operations.

This package provides:
- Data size and duration formatting (pure, stateless functions)
- Logging setup with scan ID tracking
"""

from lunardisk.utils.formatting import (
    format_duration,
    format_size,
)

__all__ = [
    "format_duration",
    "format_size",
]
