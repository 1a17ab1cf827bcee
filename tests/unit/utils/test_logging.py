"""Unit tests for logging configuration and scan ID tracking."""

from __future__ import annotations

import asyncio
import io
import json
import logging
import sys

import pytest

from lunardisk.utils.logging import (
    JsonFormatter,
    ScanIdFilter,
    clear_scan_id,
    configure_logging,
    generate_scan_id,
    get_scan_id,
    scan_id_context,
    set_scan_id,
)


def _record(message: str = "hello", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("lunardisk.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
class TestScanId:
    """Test scan ID context handling."""

    def test_generate_is_unique(self) -> None:
        """Test generated IDs are short and distinct."""
        first, second = generate_scan_id(), generate_scan_id()

        assert first != second
        assert len(first) == 12

    def test_set_get_clear(self) -> None:
        """Test explicit setting and clearing."""
        set_scan_id("abc")
        try:
            assert get_scan_id() == "abc"
        finally:
            clear_scan_id()

        assert get_scan_id() is None

    def test_context_restores_previous(self) -> None:
        """Test nested contexts restore the outer ID."""
        with scan_id_context("outer") as outer:
            with scan_id_context() as inner:
                assert get_scan_id() == inner
                assert inner != outer
            assert get_scan_id() == "outer"

        assert get_scan_id() is None

    @pytest.mark.asyncio
    async def test_id_follows_worker_thread(self) -> None:
        """Test the ID is visible inside asyncio.to_thread workers."""
        with scan_id_context("threaded"):
            seen = await asyncio.to_thread(get_scan_id)

        assert seen == "threaded"


@pytest.mark.unit
class TestScanIdFilter:
    """Test the scan ID filter."""

    def test_adds_placeholder_without_scan(self) -> None:
        """Test records outside a scan get N/A."""
        record = _record()

        assert ScanIdFilter().filter(record)
        assert getattr(record, "scan_id") == "N/A"

    def test_adds_current_scan_id(self) -> None:
        """Test records inside a scan carry its ID."""
        record = _record()

        with scan_id_context("scan-42"):
            _ = ScanIdFilter().filter(record)

        assert getattr(record, "scan_id") == "scan-42"


@pytest.mark.unit
class TestJsonFormatter:
    """Test JSON log rendering."""

    def test_includes_standard_and_extra_fields(self) -> None:
        """Test extras passed through logging appear in the output."""
        record = _record("Scan complete", scan_id="s1", path="/data", size_bytes=10)

        data = json.loads(JsonFormatter().format(record))

        assert data["message"] == "Scan complete"
        assert data["level"] == "INFO"
        assert data["logger"] == "lunardisk.test"
        assert data["scan_id"] == "s1"
        assert data["path"] == "/data"
        assert data["size_bytes"] == 10
        assert "timestamp" in data
        assert "msg" not in data

    def test_non_json_values_are_stringified(self) -> None:
        """Test arbitrary objects do not break formatting."""
        record = _record(payload={1, 2})

        data = json.loads(JsonFormatter().format(record))

        assert isinstance(data["payload"], str)

    def test_exception_included(self) -> None:
        """Test exception tracebacks are rendered."""
        try:
            raise RuntimeError("kaput")
        except RuntimeError:
            record = logging.LogRecord(
                "lunardisk.test", logging.ERROR, __file__, 1, "failed", None, exc_info=sys.exc_info()
            )

        data = json.loads(JsonFormatter().format(record))

        assert "RuntimeError: kaput" in data["exception"]


@pytest.mark.unit
class TestConfigureLogging:
    """Test root logger configuration."""

    def test_text_output(self) -> None:
        """Test text format includes level and scan ID."""
        stream = io.StringIO()
        configure_logging(log_level="INFO", stream=stream)

        with scan_id_context("text-scan"):
            logging.getLogger("lunardisk.test").info("Scan started")

        output = stream.getvalue()
        assert "INFO" in output
        assert "[text-scan]" in output
        assert "Scan started" in output

    def test_json_output(self) -> None:
        """Test JSON format emits one object per line."""
        stream = io.StringIO()
        configure_logging(log_level="DEBUG", log_format="json", stream=stream)

        logging.getLogger("lunardisk.test").debug("walking", extra={"path": "/x"})

        data = json.loads(stream.getvalue().strip())
        assert data["message"] == "walking"
        assert data["path"] == "/x"
        assert data["scan_id"] == "N/A"

    def test_level_filters_records(self) -> None:
        """Test records below the configured level are dropped."""
        stream = io.StringIO()
        configure_logging(log_level="WARNING", stream=stream)

        logging.getLogger("lunardisk.test").info("hidden")

        assert stream.getvalue() == ""

    def test_reconfigure_replaces_handlers(self) -> None:
        """Test repeated configuration does not duplicate output."""
        stream = io.StringIO()
        configure_logging(log_level="INFO", stream=stream)
        configure_logging(log_level="INFO", stream=stream)

        logging.getLogger("lunardisk.test").info("once")

        assert stream.getvalue().count("once") == 1
