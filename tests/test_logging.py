"""Tests for logging setup and formatting."""

import logging

import orjson
from rich.console import Console

from simple_nominatim.core.logging import (
    JSONFormatter,
    RichConsoleHandler,
    get_contextual_logger,
    get_logger,
    setup_logging,
)


def make_record(**extra):
    record = logging.LogRecord(
        name="simple_nominatim.fetch",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Attempt %d failed",
        args=(1,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSON lines output."""

    def test_basic_fields(self):
        data = orjson.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "WARNING"
        assert data["logger"] == "simple_nominatim.fetch"
        assert data["message"] == "Attempt 1 failed"
        assert data["timestamp"].endswith("Z")

    def test_context_fields(self):
        record = make_record(endpoint="search", attempt=2, status_code=503, unrelated="x")
        data = orjson.loads(JSONFormatter().format(record))

        assert data["endpoint"] == "search"
        assert data["attempt"] == 2
        assert data["status_code"] == 503
        assert "unrelated" not in data


class TestRichConsoleHandler:
    """Tests for console output."""

    def test_endpoint_prefix(self):
        console = Console(record=True, width=120)
        handler = RichConsoleHandler(console=console)
        handler.setFormatter(logging.Formatter("%(message)s"))

        handler.emit(make_record(endpoint="reverse"))

        assert console.export_text().strip() == "[reverse] Attempt 1 failed"


class TestSetup:
    """Tests for logger wiring."""

    def test_file_handler_writes_json(self, tmp_path):
        log_file = tmp_path / "logs" / "client.log"
        logger = setup_logging(level="DEBUG", log_file=log_file, rich_console=False)

        get_contextual_logger("fetch", endpoint="status").debug("hello")
        for handler in logger.handlers:
            handler.flush()

        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        data = orjson.loads(line)
        assert data["message"] == "hello"
        assert data["endpoint"] == "status"

        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_get_logger_names(self):
        assert get_logger().name == "simple_nominatim"
        assert get_logger("cache").name == "simple_nominatim.cache"
