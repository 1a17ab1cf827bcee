"""Cooperative cancellation for long-running traversals.

A ``CancellationToken`` is created by the caller and passed down the call
chain. Traversals poll it at defined checkpoints; nothing is interrupted
mid-call. The token wraps a ``threading.Event`` so it can be tripped from the
event loop while the traversal runs in a worker thread.
"""

from __future__ import annotations

import threading


class ScanCancelledError(Exception):
    """Raised at a checkpoint once the caller has requested cancellation.

    This is a control signal, not a scan failure, and deliberately does not
    derive from ``ScanError``.
    """

    def __init__(self, path: str | None = None) -> None:
        """Initialize the cancellation signal.

        Args:
            path: Path being visited when cancellation was observed
        """
        message = "Scan cancelled" if path is None else f"Scan cancelled at {path}"
        super().__init__(message)
        self.path: str | None = path


class CancellationToken:
    """Thread-safe, one-way cancellation flag."""

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event: threading.Event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, path: str | None = None) -> None:
        """Raise ``ScanCancelledError`` if cancellation was requested.

        Args:
            path: Path being visited, recorded on the raised signal

        Raises:
            ScanCancelledError: If the token has been cancelled
        """
        if self._event.is_set():
            raise ScanCancelledError(path)
