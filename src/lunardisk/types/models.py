"""Data models for lunardisk.

This module defines immutable dataclasses used throughout the application
for type-safe data transfer between the scan engine, the search engine and
the presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class FileNode:
    """Immutable snapshot of one filesystem entry and its aggregated subtree.

    Directory nodes own their children exclusively. For a directory whose
    children are materialized, ``size_bytes`` equals the sum of the children's
    sizes; a depth-capped directory has no children but still carries its
    true recursive size.
    """

    name: str
    path: str
    is_directory: bool
    size_bytes: int
    children: tuple[FileNode, ...] = ()

    @property
    def id(self) -> str:
        """Stable identifier of the node (its absolute path at scan time)."""
        return self.path

    def sorted_children_by_size(self) -> list[FileNode]:
        """Return children ordered by size descending, then name, then path."""
        return sorted(
            self.children,
            key=lambda child: (-child.size_bytes, child.name, child.path),
        )


@dataclass(slots=True, frozen=True)
class EntryMetadata:
    """Metadata for a single filesystem entry as read by the access layer.

    ``logical_size`` and ``allocated_size`` are ``None`` when the platform
    cannot report them.
    """

    is_directory: bool
    is_symlink: bool
    logical_size: int | None
    allocated_size: int | None

    @property
    def size_bytes(self) -> int:
        """Resolve the entry size: logical, else allocated, else zero."""
        if self.logical_size is not None:
            return self.logical_size
        if self.allocated_size is not None:
            return self.allocated_size
        return 0


@dataclass(slots=True, frozen=True)
class ScanDiagnostics:
    """Per-scan record of children omitted under the partial-failure policy."""

    skipped_item_count: int = 0
    sampled_skipped_paths: tuple[str, ...] = ()

    @property
    def is_partial_result(self) -> bool:
        return self.skipped_item_count > 0


@dataclass(slots=True, frozen=True)
class ScanOutcome:
    """A completed scan tree together with its diagnostics."""

    root: FileNode
    diagnostics: ScanDiagnostics = field(default_factory=ScanDiagnostics)


@dataclass(slots=True, frozen=True)
class FileNodeSearchMatch:
    """A matched node plus its depth below the search root (root is 0)."""

    node: FileNode
    depth: int


@dataclass(slots=True, frozen=True)
class FileNodeSearchResult:
    """Outcome of a tree search.

    ``matches`` is capped and ordered by size descending. The aggregate
    fields cover every match found, retained or not. ``cancelled`` is set
    when the search stopped early and the result is partial.
    """

    matches: tuple[FileNodeSearchMatch, ...] = ()
    total_match_count: int = 0
    total_match_bytes: int = 0
    matched_paths: frozenset[str] = frozenset()
    cancelled: bool = False
