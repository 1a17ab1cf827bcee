"""Scan summaries: node counts and the largest top-level items of a tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import NamedTuple

from lunardisk.types.models import FileNode


class NodeCounts(NamedTuple):
    files: int
    directories: int


def count_nodes(root: FileNode) -> NodeCounts:
    """Count file and directory nodes in a tree, root included.

    Args:
        root: Root of a scan tree

    Returns:
        Number of leaf nodes and directory nodes
    """
    files = 0
    directories = 0
    stack: list[FileNode] = [root]

    while stack:
        current = stack.pop()
        if current.is_directory:
            directories += 1
            stack.extend(current.children)
        else:
            files += 1

    return NodeCounts(files=files, directories=directories)


@dataclass(slots=True, frozen=True)
class ScanSummaryTopItem:
    name: str
    path: str
    size_bytes: int


@dataclass(slots=True, frozen=True)
class ScanSummary:
    """Immutable digest of a completed scan for display."""

    target_path: str
    total_size_bytes: int
    total_file_count: int
    total_directory_count: int
    top_items: tuple[ScanSummaryTopItem, ...]
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_root(cls, root: FileNode, target_path: str, *, top_n: int = 5) -> ScanSummary:
        """Summarize a scan tree.

        Args:
            root: Root of a completed scan tree
            target_path: Path the user asked to scan
            top_n: Number of largest direct children to keep (keyword-only)

        Returns:
            Summary with totals and the largest direct children
        """
        counts = count_nodes(root)
        top_items = tuple(
            ScanSummaryTopItem(name=child.name, path=child.path, size_bytes=child.size_bytes)
            for child in root.sorted_children_by_size()[:top_n]
        )
        return cls(
            target_path=target_path,
            total_size_bytes=root.size_bytes,
            total_file_count=counts.files,
            total_directory_count=counts.directories,
            top_items=top_items,
        )
