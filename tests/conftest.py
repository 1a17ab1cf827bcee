"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from lunardisk.types.models import FileNode
from lunardisk.utils.logging import ScanIdFilter
from tests.fixtures.fake_filesystem import FakeFileSystem
from tests.fixtures.trees import dir_node, file_node


@pytest.fixture
def sample_dir(tmp_path: Path) -> Path:
    """Create a small real directory tree.

    Layout::

        root/
            a.bin      4 bytes
            sub/
                b.bin  6 bytes
    """
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)
    _ = (root / "a.bin").write_bytes(b"x" * 4)
    _ = (root / "sub" / "b.bin").write_bytes(b"y" * 6)
    return root


@pytest.fixture
def fake_fs() -> FakeFileSystem:
    """Provide an in-memory filesystem rooted at ``/data``.

    Layout::

        /data/
            docs/report.pdf     300 bytes
            docs/notes.txt       20 bytes
            media/movie.mkv    5000 bytes
            media/raw/clip.mov 1200 bytes
            readme.md            10 bytes
    """
    return (
        FakeFileSystem()
        .add_file("/data/docs/report.pdf", 300)
        .add_file("/data/docs/notes.txt", 20)
        .add_file("/data/media/movie.mkv", 5000)
        .add_file("/data/media/raw/clip.mov", 1200)
        .add_file("/data/readme.md", 10)
    )


@pytest.fixture
def sample_tree() -> FileNode:
    """Provide a prebuilt tree mixing files and directories with shared names."""
    return dir_node(
        "/proj",
        dir_node(
            "/proj/Cache",
            file_node("/proj/Cache/cache.db", 900),
            file_node("/proj/Cache/index", 100),
        ),
        dir_node(
            "/proj/src",
            file_node("/proj/src/main.py", 50),
            dir_node("/proj/src/cache", file_node("/proj/src/cache/a.pyc", 30)),
        ),
        file_node("/proj/notes.txt", 5),
    )


@pytest.fixture(autouse=True)
def reset_root_logger() -> Generator[None, None, None]:
    """Remove handlers installed by configure_logging and restore the root level."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if any(isinstance(log_filter, ScanIdFilter) for log_filter in handler.filters):
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)
