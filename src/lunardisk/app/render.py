"""Text and JSON rendering of scan reports for the command line."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from lunardisk.utils.formatting import displayable, format_duration, format_size

if TYPE_CHECKING:
    from lunardisk.app.runner import ScanReport
    from lunardisk.types.models import FileNode, FileNodeSearchResult

_SIZE_COLUMN_WIDTH = 10


def render_tree(root: FileNode, *, max_depth: int | None = None) -> list[str]:
    """Render a tree as indented lines, largest children first.

    Args:
        root: Root node to render
        max_depth: Deepest level to print (root is 0); None prints everything

    Returns:
        One line per printed node
    """
    lines: list[str] = []
    stack: list[tuple[FileNode, int]] = [(root, 0)]

    while stack:
        node, depth = stack.pop()
        suffix = "/" if node.is_directory else ""
        lines.append(f"{format_size(node.size_bytes):>{_SIZE_COLUMN_WIDTH}}  {'  ' * depth}{node.name}{suffix}")

        if max_depth is not None and depth >= max_depth:
            continue
        # Reversed so the largest child is popped first
        for child in reversed(node.sorted_children_by_size()):
            stack.append((child, depth + 1))

    return lines


def render_search(result: FileNodeSearchResult, query: str) -> list[str]:
    lines = [
        f'Search "{query}": {result.total_match_count} matches, '
        f"{format_size(result.total_match_bytes)} total"
        + (" (partial)" if result.cancelled else "")
    ]
    for match in result.matches:
        lines.append(f"{format_size(match.node.size_bytes):>{_SIZE_COLUMN_WIDTH}}  {match.node.path}")
    hidden = result.total_match_count - len(result.matches)
    if hidden > 0:
        lines.append(f"  ... {hidden} more not shown")
    return lines


def render_report(report: ScanReport, *, display_depth: int | None = 2) -> str:
    """Render a full scan report as human-readable text.

    Args:
        report: Completed scan report
        display_depth: Deepest tree level to print

    Returns:
        Multi-line report text
    """
    summary = report.summary
    lines = render_tree(report.root, max_depth=display_depth)
    lines.append("")
    lines.append(
        f"Total {format_size(summary.total_size_bytes)} in {summary.total_file_count} files "
        f"and {summary.total_directory_count} directories (scanned in {format_duration(report.elapsed_seconds)})"
    )

    diagnostics = report.diagnostics
    if diagnostics.is_partial_result:
        lines.append(f"Skipped {diagnostics.skipped_item_count} unreadable items, e.g.:")
        lines.extend(f"  {path}" for path in diagnostics.sampled_skipped_paths)

    if report.insights:
        lines.append("")
        lines.extend(f"[{insight.severity.value}] {insight.message}" for insight in report.insights)

    if report.search_result is not None and report.query:
        lines.append("")
        lines.extend(render_search(report.search_result, report.query))

    return displayable("\n".join(lines))


def node_to_dict(node: FileNode, *, max_depth: int | None = None, _depth: int = 0) -> dict[str, object]:
    """Convert a node and its descendants to JSON-compatible dictionaries."""
    data: dict[str, object] = {
        "name": node.name,
        "path": node.path,
        "is_directory": node.is_directory,
        "size_bytes": node.size_bytes,
    }
    if node.is_directory:
        if max_depth is not None and _depth >= max_depth:
            data["children"] = []
        else:
            data["children"] = [
                node_to_dict(child, max_depth=max_depth, _depth=_depth + 1) for child in node.children
            ]
    return data


def render_json(report: ScanReport, *, display_depth: int | None = None) -> str:
    payload: dict[str, object] = {
        "root": node_to_dict(report.root, max_depth=display_depth),
        "total_file_count": report.summary.total_file_count,
        "total_directory_count": report.summary.total_directory_count,
        "skipped_item_count": report.diagnostics.skipped_item_count,
        "sampled_skipped_paths": list(report.diagnostics.sampled_skipped_paths),
        "elapsed_seconds": report.elapsed_seconds,
    }
    if report.search_result is not None:
        payload["search"] = {
            "query": report.query,
            "total_match_count": report.search_result.total_match_count,
            "total_match_bytes": report.search_result.total_match_bytes,
            "cancelled": report.search_result.cancelled,
            "matches": [
                {"path": m.node.path, "size_bytes": m.node.size_bytes, "depth": m.depth}
                for m in report.search_result.matches
            ],
        }
    return json.dumps(payload, indent=2)
