"""Logging infrastructure with scan ID tracking and structured output.

This module configures standard-library logging for lunardisk. Every record
is stamped with the ID of the scan it belongs to, held in a ContextVar so
that the ID follows work offloaded with ``asyncio.to_thread`` (which copies
the current context into the worker thread).

Records can be rendered as plain text or as one JSON object per line;
fields passed through ``extra={...}`` are included in JSON output.
"""

import contextvars
import json
import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Final, Literal, TextIO, override

# Scan ID context variable for correlating log records of a single scan
scan_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "scan_id",
    default=None,
)

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(scan_id)s] - %(message)s"

# Attributes present on every LogRecord; anything else came in through extra={}
_STANDARD_RECORD_ATTRS: Final[frozenset[str]] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
        "asctime",
        "scan_id",
    }
)


class ScanIdFilter(logging.Filter):
    """Logging filter that adds the current scan ID to log records."""

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        scan_id = scan_id_var.get()
        record.scan_id = scan_id if scan_id is not None else "N/A"
        return True


class JsonFormatter(logging.Formatter):
    """Formatter rendering each record as a single-line JSON object."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: The log record to format

        Returns:
            JSON string with timestamp, level, logger, message, scan ID and extra fields
        """
        log_data: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "scan_id": getattr(record, "scan_id", None),
        }

        for key, value in record.__dict__.items():  # pyright: ignore[reportAny]  # LogRecord attributes
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # default=str keeps non-JSON values (paths, enums) loggable
        return json.dumps(log_data, ensure_ascii=False, default=str)


def configure_logging(
    *,
    log_level: str = "WARNING",
    log_format: Literal["text", "json"] = "text",
    stream: TextIO | None = None,
) -> None:
    """Configure application logging.

    Replaces any handlers on the root logger with a single stream handler
    carrying the scan ID filter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "text" for human-readable lines, "json" for JSON lines
        stream: Output stream (defaults to stderr so stdout stays machine-readable)

    Example:
        >>> configure_logging(log_level="INFO", log_format="json")
        >>> with scan_id_context("scan-1"):
        ...     logging.getLogger(__name__).info("Scan started", extra={"path": "/tmp"})
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
    handler.addFilter(ScanIdFilter())

    root_logger.addHandler(handler)


def generate_scan_id() -> str:
    return uuid.uuid4().hex[:12]


def set_scan_id(scan_id: str) -> None:
    _ = scan_id_var.set(scan_id)


def get_scan_id() -> str | None:
    return scan_id_var.get()


def clear_scan_id() -> None:
    _ = scan_id_var.set(None)


@contextmanager
def scan_id_context(scan_id: str | None = None) -> Generator[str, None, None]:
    """Bind a scan ID to the current context for the duration of a block.

    Args:
        scan_id: ID to bind; a fresh one is generated when omitted

    Yields:
        The bound scan ID
    """
    bound = scan_id or generate_scan_id()
    token = scan_id_var.set(bound)
    try:
        yield bound
    finally:
        scan_id_var.reset(token)
