"""Local filesystem access layer used by the scan engine."""

from __future__ import annotations

import os
import stat

from lunardisk.types.models import EntryMetadata

# st_blocks is counted in 512-byte units on POSIX systems
_BLOCK_SIZE = 512


class LocalFileSystem:
    """``FileSystemAccess`` implementation backed by the ``os`` module.

    Errors from the operating system propagate unchanged as ``OSError`` so
    the scan engine can classify them by ``errno``.
    """

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def metadata(self, path: str, *, follow_symlinks: bool = False) -> EntryMetadata:
        """Read entry metadata with ``lstat`` (or ``stat`` when following links).

        Args:
            path: Absolute path of the entry
            follow_symlinks: Resolve a symbolic link to its target

        Returns:
            Entry metadata with logical and allocated sizes

        Raises:
            OSError: If the entry cannot be stat'ed
        """
        st = os.stat(path) if follow_symlinks else os.lstat(path)
        blocks: int | None = getattr(st, "st_blocks", None)
        return EntryMetadata(
            is_directory=stat.S_ISDIR(st.st_mode),
            is_symlink=stat.S_ISLNK(st.st_mode),
            logical_size=st.st_size,
            allocated_size=blocks * _BLOCK_SIZE if blocks is not None else None,
        )

    def list_directory(self, path: str) -> list[str]:
        with os.scandir(path) as entries:
            return [entry.path for entry in entries]
