"""Application runner coordinating scan, summary, insights and search."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from lunardisk.core.cancellation import CancellationToken
from lunardisk.core.config import MainConfig
from lunardisk.core.filesystem.scanner import DirectoryScanner
from lunardisk.core.insights import HeuristicAnalyzer, Insight
from lunardisk.core.search import search_async
from lunardisk.core.summary import ScanSummary
from lunardisk.types.models import FileNode, FileNodeSearchResult, ScanDiagnostics
from lunardisk.types.protocols import FileScanning
from lunardisk.utils.logging import scan_id_context

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ScanReport:
    """Everything produced by one run: tree, digest, insights and search."""

    root: FileNode
    diagnostics: ScanDiagnostics
    summary: ScanSummary
    insights: tuple[Insight, ...]
    elapsed_seconds: float
    query: str | None = None
    search_result: FileNodeSearchResult | None = None


class ApplicationRunner:
    """Main application runner that coordinates all components.

    The timeout is layered over the scan from outside: the scan is raced
    against ``asyncio.timeout`` and the cancellation token is tripped when
    the deadline passes.
    """

    def __init__(
        self,
        config: MainConfig,
        *,
        scanner: FileScanning | None = None,
        analyzer: HeuristicAnalyzer | None = None,
    ) -> None:
        """Initialize the application runner.

        Args:
            config: Validated application configuration
            scanner: Scanning implementation (defaults to DirectoryScanner)
            analyzer: Insight generator (defaults to HeuristicAnalyzer)
        """
        self.config: MainConfig = config
        self.scanner: FileScanning = scanner or DirectoryScanner(
            skipped_path_sample_limit=config.scan.skipped_path_sample_limit,
        )
        self.analyzer: HeuristicAnalyzer = analyzer or HeuristicAnalyzer()

    async def run(
        self,
        path: str,
        *,
        query: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> ScanReport:
        """Scan a path, summarize it and optionally search it.

        Args:
            path: Root path to scan
            query: Optional name fragment to search for after the scan
            cancellation: Token tripped by signal handlers or the timeout

        Returns:
            Completed scan report

        Raises:
            ScanNotFoundError: If the path does not exist
            ScanUnreadableError: If the scan hits a non-recoverable failure
            ScanCancelledError: If cancellation was requested
            TimeoutError: If the configured timeout elapsed
        """
        token = cancellation or CancellationToken()
        scan_config = self.config.scan

        with scan_id_context():
            started = time.perf_counter()
            try:
                async with asyncio.timeout(scan_config.timeout_seconds):
                    outcome = await self.scanner.scan_with_diagnostics(
                        path,
                        scan_config.max_depth,
                        cancellation=token,
                    )
            except TimeoutError:
                token.cancel()
                logger.warning(
                    "Scan timed out",
                    extra={"path": path, "timeout_seconds": scan_config.timeout_seconds},
                )
                raise
            elapsed = time.perf_counter() - started

            # Tree walks run in worker threads, like the scan and search
            summary = await asyncio.to_thread(ScanSummary.from_root, outcome.root, path)
            insights = tuple(
                await asyncio.to_thread(self.analyzer.generate_insights, outcome.root, cancellation=token)
            )

            search_result: FileNodeSearchResult | None = None
            if query:
                search_result = await search_async(
                    outcome.root,
                    query,
                    self.config.search.limit,
                    cancellation=token,
                )
                logger.info(
                    "Search complete",
                    extra={"query": query, "total_match_count": search_result.total_match_count},
                )

        return ScanReport(
            root=outcome.root,
            diagnostics=outcome.diagnostics,
            summary=summary,
            insights=insights,
            elapsed_seconds=elapsed,
            query=query,
            search_result=search_result,
        )
