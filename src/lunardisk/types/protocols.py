"""Protocol definitions for component interfaces.

This module defines structural subtyping protocols that establish
contracts for the filesystem access layer and the scanning capability
without requiring inheritance, so test doubles can stand in for either.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from lunardisk.types.models import EntryMetadata, FileNode, ScanOutcome

if TYPE_CHECKING:
    from lunardisk.core.cancellation import CancellationToken


@runtime_checkable
class FileSystemAccess(Protocol):
    """Protocol for the host filesystem as seen by the scan engine.

    Implementations raise ``OSError`` (with ``errno`` set) on failure; the
    scan engine classifies those errors into skip-or-abort decisions.
    """

    def exists(self, path: str) -> bool:
        """Check whether a path exists.

        Args:
            path: Absolute path to check

        Returns:
            True if the path exists
        """
        ...

    def metadata(self, path: str, *, follow_symlinks: bool = False) -> EntryMetadata:
        """Read metadata for a single entry.

        Args:
            path: Absolute path of the entry
            follow_symlinks: Resolve a symbolic link to its target (keyword-only)

        Returns:
            Entry metadata

        Raises:
            OSError: If the metadata cannot be read
        """
        ...

    def list_directory(self, path: str) -> list[str]:
        """List the entries of a directory.

        Args:
            path: Absolute path of the directory

        Returns:
            Absolute paths of the directory's entries, in no particular order

        Raises:
            OSError: If the directory cannot be listed
        """
        ...


@runtime_checkable
class FileScanning(Protocol):
    """Protocol for components able to measure a root into a ``FileNode`` tree."""

    async def scan(
        self,
        root_path: str,
        max_depth: int | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> FileNode:
        """Scan a root path into a tree without blocking the event loop."""
        ...

    async def scan_with_diagnostics(
        self,
        root_path: str,
        max_depth: int | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> ScanOutcome:
        """Scan a root path and report the children skipped along the way."""
        ...
