"""Directory scanner that measures one root into an immutable ``FileNode`` tree.

The scanner walks depth-first and builds bottom-up: every child is fully
constructed before its parent. It supports:
- Deterministic child ordering (ascending path)
- An optional depth cap below which sizes are still computed exactly
- A partial-failure policy that drops unreadable children
- Cooperative cancellation through a ``CancellationToken``
- Async integration using asyncio.to_thread so the event loop never blocks

The scanner itself holds no mutable state; each call owns a private
traversal context, so concurrent scans need no coordination.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import Final

from lunardisk.core.cancellation import CancellationToken, ScanCancelledError
from lunardisk.core.filesystem.access import LocalFileSystem
from lunardisk.core.filesystem.errors import (
    ScanError,
    ScanNotFoundError,
    ScanUnreadableError,
    is_recoverable,
)
from lunardisk.types.models import EntryMetadata, FileNode, ScanDiagnostics, ScanOutcome
from lunardisk.types.protocols import FileSystemAccess

logger = logging.getLogger(__name__)

DEFAULT_SKIPPED_PATH_SAMPLE_LIMIT: Final[int] = 5


@dataclass(slots=True)
class _ScanContext:
    """Traversal state owned by a single scan call."""

    max_depth: int | None
    cancellation: CancellationToken
    sample_limit: int
    skipped_item_count: int = 0
    sampled_skipped_paths: list[str] = field(default_factory=list)

    def note_skipped(self, path: str, error: BaseException) -> None:
        self.skipped_item_count += 1
        if len(self.sampled_skipped_paths) < self.sample_limit:
            self.sampled_skipped_paths.append(path)
        logger.debug(
            "Skipping unreadable entry",
            extra={"path": path, "error": str(error)},
        )

    def diagnostics(self) -> ScanDiagnostics:
        return ScanDiagnostics(
            skipped_item_count=self.skipped_item_count,
            sampled_skipped_paths=tuple(self.sampled_skipped_paths),
        )


def _display_name(path: str) -> str:
    return os.path.basename(path) or path


class DirectoryScanner:
    """Scanner producing size-annotated trees from a filesystem root.

    Symbolic links below the root are never followed and never counted.
    Hard-linked files are counted once per link.
    """

    def __init__(
        self,
        filesystem: FileSystemAccess | None = None,
        *,
        skipped_path_sample_limit: int = DEFAULT_SKIPPED_PATH_SAMPLE_LIMIT,
    ) -> None:
        """Initialize the directory scanner.

        Args:
            filesystem: Filesystem access layer (defaults to the local filesystem)
            skipped_path_sample_limit: Maximum number of skipped paths kept in diagnostics
        """
        self.filesystem: FileSystemAccess = filesystem or LocalFileSystem()
        self.skipped_path_sample_limit: int = skipped_path_sample_limit

    async def scan(
        self,
        root_path: str,
        max_depth: int | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> FileNode:
        """Scan a root path into a tree without blocking the event loop.

        Args:
            root_path: Path to scan
            max_depth: Depth at which directories stop being materialized
            cancellation: Token polled at every checkpoint (keyword-only)

        Returns:
            Root node of the scanned tree

        Raises:
            ScanNotFoundError: If the root path does not exist
            ScanUnreadableError: If a non-recoverable read failure occurs
            ScanCancelledError: If cancellation was requested
        """
        outcome = await self.scan_with_diagnostics(
            root_path,
            max_depth,
            cancellation=cancellation,
        )
        return outcome.root

    async def scan_with_diagnostics(
        self,
        root_path: str,
        max_depth: int | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> ScanOutcome:
        """Async wrapper for the synchronous scan using asyncio.to_thread.

        Cancelling the awaiting task trips the token so the worker thread
        stops at its next checkpoint instead of finishing the traversal.

        Args:
            root_path: Path to scan
            max_depth: Depth at which directories stop being materialized
            cancellation: Token polled at every checkpoint (keyword-only)

        Returns:
            Scanned tree plus diagnostics about skipped children
        """
        token = cancellation or CancellationToken()
        try:
            # Context is automatically copied by asyncio.to_thread
            return await asyncio.to_thread(
                self.scan_sync_with_diagnostics,
                root_path,
                max_depth,
                cancellation=token,
            )
        except asyncio.CancelledError:
            token.cancel()
            raise

    def scan_sync(
        self,
        root_path: str,
        max_depth: int | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> FileNode:
        """Scan a root path on the calling thread.

        See ``scan`` for arguments and raised errors.
        """
        return self.scan_sync_with_diagnostics(
            root_path,
            max_depth,
            cancellation=cancellation,
        ).root

    def scan_sync_with_diagnostics(
        self,
        root_path: str,
        max_depth: int | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> ScanOutcome:
        """Scan a root path on the calling thread and collect diagnostics.

        Args:
            root_path: Path to scan
            max_depth: Depth at which directories stop being materialized
            cancellation: Token polled at every checkpoint (keyword-only)

        Returns:
            Scanned tree plus diagnostics about skipped children

        Raises:
            ScanNotFoundError: If the root path does not exist
            ScanUnreadableError: If a non-recoverable read failure occurs
            ScanCancelledError: If cancellation was requested
        """
        if max_depth is not None and max_depth < 0:
            msg = f"max_depth must be non-negative, got: {max_depth}"
            raise ValueError(msg)

        context = _ScanContext(
            max_depth=max_depth,
            cancellation=cancellation or CancellationToken(),
            sample_limit=self.skipped_path_sample_limit,
        )
        context.cancellation.raise_if_cancelled(root_path)

        if not self.filesystem.exists(root_path):
            raise ScanNotFoundError(root_path)

        logger.info(
            "Scan started",
            extra={"path": root_path, "max_depth": max_depth},
        )

        try:
            root = self._build_node(context, os.path.abspath(root_path), depth=0)
        except ScanCancelledError:
            logger.info("Scan cancelled", extra={"path": root_path})
            raise
        except ScanError as exc:
            logger.warning(
                "Scan aborted",
                extra={"path": root_path, "failed_path": exc.path, "error": str(exc)},
            )
            raise

        diagnostics = context.diagnostics()
        logger.info(
            "Scan complete",
            extra={
                "path": root_path,
                "size_bytes": root.size_bytes,
                "skipped_items": diagnostics.skipped_item_count,
            },
        )
        return ScanOutcome(root=root, diagnostics=diagnostics)

    def _build_node(
        self,
        context: _ScanContext,
        path: str,
        depth: int,
        metadata: EntryMetadata | None = None,
    ) -> FileNode:
        """Build the node for one entry, recursing into directories.

        Args:
            context: Traversal state for this scan call
            path: Absolute path of the entry
            depth: Depth of the entry below the root
            metadata: Metadata already read by the parent, if any

        Returns:
            Fully constructed node for the entry
        """
        context.cancellation.raise_if_cancelled(path)

        if metadata is None:
            # Only the root arrives without metadata; it is read through links
            metadata = self._read_metadata(path, follow_symlinks=True)

        name = _display_name(path)

        if not metadata.is_directory:
            return FileNode(
                name=name,
                path=path,
                is_directory=False,
                size_bytes=metadata.size_bytes,
            )

        if context.max_depth is not None and depth >= context.max_depth:
            return FileNode(
                name=name,
                path=path,
                is_directory=True,
                size_bytes=self._measure_directory(context, path),
            )

        children: list[FileNode] = []
        for child_path, child_metadata in self._readable_children(context, path):
            try:
                child = self._build_node(context, child_path, depth + 1, child_metadata)
            except ScanError as exc:
                if is_recoverable(exc):
                    context.note_skipped(exc.path, exc)
                    continue
                raise
            children.append(child)

        return FileNode(
            name=name,
            path=path,
            is_directory=True,
            size_bytes=sum(child.size_bytes for child in children),
            children=tuple(children),
        )

    def _measure_directory(self, context: _ScanContext, path: str) -> int:
        """Compute the recursive size of a directory without building nodes.

        Args:
            context: Traversal state for this scan call
            path: Absolute path of the directory

        Returns:
            Total size in bytes of all readable descendants
        """
        context.cancellation.raise_if_cancelled(path)

        total = 0
        for child_path, child_metadata in self._readable_children(context, path):
            if not child_metadata.is_directory:
                total += child_metadata.size_bytes
                continue
            try:
                total += self._measure_directory(context, child_path)
            except ScanError as exc:
                if is_recoverable(exc):
                    context.note_skipped(exc.path, exc)
                    continue
                raise
        return total

    def _readable_children(
        self,
        context: _ScanContext,
        path: str,
    ) -> list[tuple[str, EntryMetadata]]:
        """List a directory and read each child's metadata.

        Children whose metadata read fails recoverably are skipped, and
        symbolic links are dropped.

        Args:
            context: Traversal state for this scan call
            path: Absolute path of the directory

        Returns:
            Child paths in ascending order, paired with their metadata
        """
        readable: list[tuple[str, EntryMetadata]] = []
        for child_path in self._list_directory(context, path):
            context.cancellation.raise_if_cancelled(child_path)
            try:
                child_metadata = self._read_metadata(child_path)
            except ScanUnreadableError as exc:
                if is_recoverable(exc):
                    context.note_skipped(exc.path, exc)
                    continue
                raise
            if child_metadata.is_symlink:
                continue
            readable.append((child_path, child_metadata))
        return readable

    def _list_directory(self, context: _ScanContext, path: str) -> list[str]:
        context.cancellation.raise_if_cancelled(path)
        try:
            child_paths = self.filesystem.list_directory(path)
        except OSError as exc:
            raise ScanUnreadableError(path, exc) from exc
        context.cancellation.raise_if_cancelled(path)
        return sorted(child_paths)

    def _read_metadata(self, path: str, *, follow_symlinks: bool = False) -> EntryMetadata:
        try:
            return self.filesystem.metadata(path, follow_symlinks=follow_symlinks)
        except OSError as exc:
            raise ScanUnreadableError(path, exc) from exc
