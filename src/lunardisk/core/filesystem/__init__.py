"""Filesystem access and directory scanning into ``FileNode`` trees."""

from __future__ import annotations

from lunardisk.core.cancellation import CancellationToken, ScanCancelledError

from .access import LocalFileSystem
from .errors import (
    RECOVERABLE_ERRNOS,
    ScanError,
    ScanNotFoundError,
    ScanUnreadableError,
    is_recoverable,
)
from .scanner import DEFAULT_SKIPPED_PATH_SAMPLE_LIMIT, DirectoryScanner

__all__ = [
    "DEFAULT_SKIPPED_PATH_SAMPLE_LIMIT",
    "RECOVERABLE_ERRNOS",
    "CancellationToken",
    "DirectoryScanner",
    "LocalFileSystem",
    "ScanCancelledError",
    "ScanError",
    "ScanNotFoundError",
    "ScanUnreadableError",
    "is_recoverable",
]
