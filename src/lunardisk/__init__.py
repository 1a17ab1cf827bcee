"""Lunardisk - size-annotated directory trees and name search for disk usage views.

This package measures one filesystem root into an immutable tree of
``FileNode`` objects and answers name queries over that tree with a
bounded, size-ordered result list plus exact aggregate statistics.
"""

from lunardisk.core.filesystem import (
    DirectoryScanner,
    ScanCancelledError,
    ScanError,
    ScanNotFoundError,
    ScanUnreadableError,
)
from lunardisk.core.search import search, search_async
from lunardisk.types.models import (
    FileNode,
    FileNodeSearchMatch,
    FileNodeSearchResult,
)

__version__ = "0.1.0"

__all__ = [
    "DirectoryScanner",
    "FileNode",
    "FileNodeSearchMatch",
    "FileNodeSearchResult",
    "ScanCancelledError",
    "ScanError",
    "ScanNotFoundError",
    "ScanUnreadableError",
    "__version__",
    "search",
    "search_async",
]
