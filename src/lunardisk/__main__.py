"""Application entry point and CLI for lunardisk.

This module implements the main entry point for the lunardisk command,
providing CLI argument parsing, configuration loading, logging setup, and
scan lifecycle management with cooperative cancellation on SIGINT/SIGTERM.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import NoReturn

from lunardisk.app.render import render_json, render_report
from lunardisk.app.runner import ApplicationRunner
from lunardisk.core.cancellation import CancellationToken, ScanCancelledError
from lunardisk.core.config import (
    ConfigurationError,
    MainConfig,
    discover_config_file,
    load_main_config,
)
from lunardisk.core.filesystem.errors import ScanError
from lunardisk.utils.logging import configure_logging

__all__ = ["main"]

DEFAULT_DISPLAY_DEPTH = 2

# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_SCAN_ERROR = 2
EXIT_TIMEOUT = 3
EXIT_INTERRUPTED = 130


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        msg = f"must be non-negative, got {number}"
        raise argparse.ArgumentTypeError(msg)
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        msg = f"must be positive, got {number}"
        raise argparse.ArgumentTypeError(msg)
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the lunardisk command.

    CLI Arguments:
        PATH: Root directory (or file) to measure
        --max-depth: Depth below which directories are sized but not materialized
        --display-depth: Deepest tree level to print
        --search: Name fragment to search for after scanning
        --limit: Maximum number of search matches to list
        --timeout: Abandon the scan after this many seconds
        --config, -c: Path to configuration file
        --log-level: Override log level from config
        --json: Print the report as JSON
    """
    parser = argparse.ArgumentParser(
        prog="lunardisk",
        description="Measure a directory into a size-annotated tree and search it by name",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lunardisk ~/Downloads
  lunardisk /var --max-depth 3 --timeout 60
  lunardisk ~/Projects --search node_modules --limit 20
  lunardisk . --json > tree.json
        """,
    )

    _ = parser.add_argument("path", help="Root path to scan", metavar="PATH")

    _ = parser.add_argument(
        "--max-depth",
        type=_non_negative_int,
        help="Depth below which directories are sized but not materialized (overrides config)",
        metavar="N",
    )

    _ = parser.add_argument(
        "--display-depth",
        type=_non_negative_int,
        default=DEFAULT_DISPLAY_DEPTH,
        help=f"Deepest tree level to print (default: {DEFAULT_DISPLAY_DEPTH})",
        metavar="N",
    )

    _ = parser.add_argument(
        "--search",
        type=str,
        help="Name fragment to search for (case-insensitive)",
        metavar="QUERY",
    )

    _ = parser.add_argument(
        "--limit",
        type=_non_negative_int,
        help="Maximum number of search matches to list (overrides config)",
        metavar="N",
    )

    _ = parser.add_argument(
        "--timeout",
        type=_positive_float,
        help="Abandon the scan after this many seconds (overrides config)",
        metavar="SECONDS",
    )

    _ = parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Path to configuration file (default: discovered lunardisk.yaml)",
        metavar="PATH",
    )

    _ = parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from configuration",
        metavar="LEVEL",
    )

    _ = parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )

    return parser


def apply_overrides(config: MainConfig, args: argparse.Namespace) -> MainConfig:
    """Apply CLI overrides on top of the loaded configuration.

    Args:
        config: Configuration loaded from file (or defaults)
        args: Parsed command-line arguments

    Returns:
        New configuration with overrides applied
    """
    scan_updates: dict[str, object] = {}
    if args.max_depth is not None:  # pyright: ignore[reportAny]  # argparse boundary
        scan_updates["max_depth"] = args.max_depth  # pyright: ignore[reportAny]  # argparse boundary
    if args.timeout is not None:  # pyright: ignore[reportAny]  # argparse boundary
        scan_updates["timeout_seconds"] = args.timeout  # pyright: ignore[reportAny]  # argparse boundary

    search_updates: dict[str, object] = {}
    if args.limit is not None:  # pyright: ignore[reportAny]  # argparse boundary
        search_updates["limit"] = args.limit  # pyright: ignore[reportAny]  # argparse boundary

    application_updates: dict[str, object] = {}
    if args.log_level is not None:  # pyright: ignore[reportAny]  # argparse boundary
        application_updates["log_level"] = args.log_level  # pyright: ignore[reportAny]  # argparse boundary

    return config.model_copy(
        update={
            "scan": config.scan.model_copy(update=scan_updates),
            "search": config.search.model_copy(update=search_updates),
            "application": config.application.model_copy(update=application_updates),
        }
    )


async def async_main(
    *,
    path: str,
    config: MainConfig,
    query: str | None = None,
    display_depth: int | None = DEFAULT_DISPLAY_DEPTH,
    as_json: bool = False,
) -> str:
    """Async main function implementing one scan run.

    Args:
        path: Root path to scan
        config: Effective configuration (file plus CLI overrides)
        query: Optional name fragment to search for
        display_depth: Deepest tree level to print
        as_json: Render the report as JSON

    Returns:
        Rendered report

    Raises:
        ScanError: If the scan fails
        ScanCancelledError: If SIGINT/SIGTERM requested cancellation
        TimeoutError: If the configured timeout elapsed
    """
    logger = logging.getLogger(__name__)
    token = CancellationToken()

    def request_cancel() -> None:
        if not token.cancelled:
            logger.info("Cancellation requested by signal")
            token.cancel()

    # Register signal handlers for cooperative cancellation
    loop = asyncio.get_running_loop()
    registered: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, request_cancel)
        except (NotImplementedError, RuntimeError):
            # Signal handlers unavailable (non-main thread or unsupported platform)
            continue
        registered.append(sig)

    try:
        runner = ApplicationRunner(config)
        report = await runner.run(path, query=query, cancellation=token)
    finally:
        for sig in registered:
            _ = loop.remove_signal_handler(sig)

    if as_json:
        return render_json(report, display_depth=None)
    return render_report(report, display_depth=display_depth)


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the lunardisk command.

    Exit Codes:
        0: Success
        1: Configuration error
        2: Scan error (path not found or unreadable)
        3: Scan timed out
        130: Interrupted
    """
    args = build_parser().parse_args(argv)

    try:
        config_path: Path | None = args.config or discover_config_file()  # pyright: ignore[reportAny]  # argparse boundary
        config = apply_overrides(load_main_config(config_path), args)
    except ConfigurationError as exc:
        print(f"Configuration error:\n{exc}", file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)

    configure_logging(
        log_level=config.application.log_level,
        log_format=config.application.log_format,
    )

    try:
        output = asyncio.run(
            async_main(
                path=args.path,  # pyright: ignore[reportAny]  # argparse boundary
                config=config,
                query=args.search,  # pyright: ignore[reportAny]  # argparse boundary
                display_depth=args.display_depth,  # pyright: ignore[reportAny]  # argparse boundary
                as_json=args.json,  # pyright: ignore[reportAny]  # argparse boundary
            )
        )

    except ScanError as exc:
        print(f"Scan error: {exc}", file=sys.stderr)
        sys.exit(EXIT_SCAN_ERROR)

    except TimeoutError:
        print(
            f"Scan timed out after {config.scan.timeout_seconds} seconds",
            file=sys.stderr,
        )
        sys.exit(EXIT_TIMEOUT)

    except (ScanCancelledError, KeyboardInterrupt):
        print("\nScan cancelled", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)

    print(output)
    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
