"""Name search over a completed ``FileNode`` tree.

The search walks the tree iteratively (an explicit stack, so tree depth is
never bounded by the interpreter's recursion limit) and returns the largest
matches up to a limit, together with aggregate statistics computed over
every match found.

Unlike scanning, a cancelled search is not an error: the partial result
accumulated so far is returned with ``cancelled=True``.
"""

from __future__ import annotations

import asyncio
import bisect
import logging
from typing import Final

from lunardisk.core.cancellation import CancellationToken
from lunardisk.types.models import FileNode, FileNodeSearchMatch, FileNodeSearchResult

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT: Final[int] = 200


def _descending_size(match: FileNodeSearchMatch) -> int:
    return -match.node.size_bytes


def insert_match(
    top_matches: list[FileNodeSearchMatch],
    match: FileNodeSearchMatch,
    limit: int,
) -> None:
    """Insert a match into a size-descending list capped at ``limit``.

    Matches no larger than the smallest kept match are rejected once the
    list is full. Equal sizes keep their insertion order.

    Args:
        top_matches: List ordered by size descending, modified in place
        match: Candidate match
        limit: Maximum list length; nothing is retained when ``limit <= 0``
    """
    if limit <= 0:
        return
    if len(top_matches) >= limit and match.node.size_bytes <= top_matches[-1].node.size_bytes:
        return

    bisect.insort_right(top_matches, match, key=_descending_size)

    if len(top_matches) > limit:
        _ = top_matches.pop()


def search(
    root: FileNode,
    query: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
    *,
    cancellation: CancellationToken | None = None,
) -> FileNodeSearchResult:
    """Find nodes whose name contains ``query``, case-insensitively.

    Args:
        root: Root of a completed scan tree
        query: Text fragment to look for; empty matches nothing
        limit: Maximum number of matches retained in the result
        cancellation: Token checked once per visited node (keyword-only)

    Returns:
        Up to ``limit`` matches sorted by size descending, plus uncapped
        match count, byte total and matched path set

    Examples:
        >>> leaf = FileNode(name="Report.pdf", path="/r/Report.pdf", is_directory=False, size_bytes=10)
        >>> tree = FileNode(name="r", path="/r", is_directory=True, size_bytes=10, children=(leaf,))
        >>> search(tree, "report").total_match_count
        1
    """
    if not query:
        return FileNodeSearchResult()

    needle = query.casefold()
    top_matches: list[FileNodeSearchMatch] = []
    total_count = 0
    total_bytes = 0
    paths: set[str] = set()
    cancelled = False

    stack: list[tuple[FileNode, int]] = [(root, 0)]

    while stack:
        if cancellation is not None and cancellation.cancelled:
            cancelled = True
            break

        node, depth = stack.pop()

        if needle in node.name.casefold():
            total_count += 1
            total_bytes += node.size_bytes
            paths.add(node.path)
            insert_match(top_matches, FileNodeSearchMatch(node=node, depth=depth), limit)

        if node.is_directory:
            stack.extend((child, depth + 1) for child in node.children)

    if cancelled:
        logger.debug(
            "Search cancelled, returning partial result",
            extra={"query": query, "matches_so_far": total_count},
        )

    return FileNodeSearchResult(
        matches=tuple(top_matches),
        total_match_count=total_count,
        total_match_bytes=total_bytes,
        matched_paths=frozenset(paths),
        cancelled=cancelled,
    )


async def search_async(
    root: FileNode,
    query: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
    *,
    cancellation: CancellationToken | None = None,
) -> FileNodeSearchResult:
    """Async wrapper for ``search`` using asyncio.to_thread.

    Trees are immutable, so any number of searches may read the same tree
    concurrently. Cancelling the awaiting task trips the token so the worker
    thread stops at its next node.

    Args:
        root: Root of a completed scan tree
        query: Text fragment to look for
        limit: Maximum number of matches retained in the result
        cancellation: Token checked once per visited node (keyword-only)

    Returns:
        Search result, partial if the token was cancelled by another party
    """
    token = cancellation or CancellationToken()
    try:
        return await asyncio.to_thread(search, root, query, limit, cancellation=token)
    except asyncio.CancelledError:
        token.cancel()
        raise
