"""Type definitions and protocols for lunardisk.

This package provides:
- Data models (immutable dataclasses)
- Protocol definitions (structural subtyping interfaces)
"""

from lunardisk.types.models import (
    EntryMetadata,
    FileNode,
    FileNodeSearchMatch,
    FileNodeSearchResult,
    ScanDiagnostics,
    ScanOutcome,
)
from lunardisk.types.protocols import (
    FileScanning,
    FileSystemAccess,
)

__all__ = [
    # Data models
    "EntryMetadata",
    "FileNode",
    "FileNodeSearchMatch",
    "FileNodeSearchResult",
    "ScanDiagnostics",
    "ScanOutcome",
    # Protocols
    "FileScanning",
    "FileSystemAccess",
]
