"""Scan error taxonomy and recoverable-error classification.

Per-child failures are classified by their OS error number. Recoverable
failures drop a single child from the tree; everything else aborts the
whole scan with ``ScanUnreadableError``.
"""

from __future__ import annotations

import errno
from typing import Final

# OS error numbers whose effect is scoped to skipping one child
RECOVERABLE_ERRNOS: Final[frozenset[int]] = frozenset(
    {
        errno.EACCES,  # permission denied
        errno.EPERM,  # operation not permitted
        errno.ENOENT,  # entry vanished during traversal
        errno.ENOTDIR,  # entry changed type during traversal
        errno.EBADF,  # bad file descriptor
        errno.EIO,  # I/O fault
    }
)


class ScanError(Exception):
    """Base exception for scan failures."""

    def __init__(self, message: str, path: str) -> None:
        """Initialize the error.

        Args:
            message: Error message
            path: Path the failure refers to
        """
        super().__init__(message)
        self.path: str = path


class ScanNotFoundError(ScanError):
    """The requested scan root does not exist."""

    def __init__(self, path: str) -> None:
        """Initialize the not found error.

        Args:
            path: Requested root path, exactly as given by the caller
        """
        super().__init__(f"Path not found: {path}", path)


class ScanUnreadableError(ScanError):
    """Metadata or a directory listing could not be read."""

    def __init__(self, path: str, cause: OSError) -> None:
        """Initialize the unreadable error.

        Args:
            path: Path that could not be read
            cause: Underlying operating system error
        """
        reason = cause.strerror or str(cause)
        super().__init__(f"Could not read path {path}: {reason}", path)
        self.cause: OSError = cause


def is_recoverable(error: BaseException) -> bool:
    """Decide whether a per-child failure should skip the child.

    ``ScanUnreadableError`` is unwrapped to its underlying cause first.

    Args:
        error: Exception raised while reading or scanning a child

    Returns:
        True if the child should be omitted and traversal should continue

    Examples:
        >>> is_recoverable(PermissionError(errno.EACCES, "Permission denied"))
        True
        >>> is_recoverable(OSError(errno.ENOSPC, "No space left on device"))
        False
    """
    if isinstance(error, ScanUnreadableError):
        return is_recoverable(error.cause)
    if isinstance(error, OSError):
        return error.errno in RECOVERABLE_ERRNOS
    return False
