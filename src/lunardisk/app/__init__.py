"""Command-line application layer: runner and report rendering."""

from __future__ import annotations

from .runner import ApplicationRunner, ScanReport

__all__ = ["ApplicationRunner", "ScanReport"]
