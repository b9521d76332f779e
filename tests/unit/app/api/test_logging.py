"""Tests for the loguru configuration."""

import json
import logging
from pathlib import Path

import pytest
from loguru import logger

from book_service.api.utils.app_startup import configure_logging
from book_service.runtime.config.config_data import ConfigData
from book_service.runtime.context import with_context


@pytest.fixture
def reset_loguru():
    yield
    logger.remove()


def _read_lines(path: Path) -> list[dict]:
    logger.complete()
    return [json.loads(line) for line in path.read_text().splitlines() if line]


@pytest.mark.usefixtures("reset_loguru")
class TestFileSink:
    def test_json_lines_carry_request_fields(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "service.log"
        override = ConfigData()
        override.logging.file = str(log_file)
        override.logging.format = "json"

        with with_context(override):
            configure_logging()

        logger.bind(
            request_id="req-42", method="GET", path="/api/books", status_code=200, duration_ms=1.5
        ).info("request.end")

        entry = next(e for e in _read_lines(log_file) if e["message"] == "request.end")
        assert entry["level"] == "INFO"
        assert entry["request_id"] == "req-42"
        assert entry["status_code"] == 200
        assert entry["duration_ms"] == 1.5
        assert entry["path"] == "/api/books"

    def test_json_lines_default_request_id_and_exception(self, tmp_path: Path):
        log_file = tmp_path / "service.log"
        override = ConfigData()
        override.logging.file = str(log_file)
        override.logging.format = "json"

        with with_context(override):
            configure_logging()

        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logger.exception("storage.failed")

        entry = next(e for e in _read_lines(log_file) if e["message"] == "storage.failed")
        assert entry["request_id"] == "-"
        assert entry["exception"] == "RuntimeError: boom"
        assert "status_code" not in entry

    def test_plain_lines(self, tmp_path: Path):
        log_file = tmp_path / "service.log"
        override = ConfigData()
        override.logging.file = str(log_file)

        with with_context(override):
            configure_logging()

        logger.bind(request_id="req-7").info("hello")
        logger.complete()

        line = next(line for line in log_file.read_text().splitlines() if "hello" in line)
        assert "[req-7]" in line
        assert not line.startswith("{")


@pytest.mark.usefixtures("reset_loguru")
class TestLibraryLevels:
    def test_configured_levels_applied(self):
        override = ConfigData()
        override.logging.library_levels = {"httpx": "ERROR", "uvicorn": "debug"}

        with with_context(override):
            configure_logging()

        assert logging.getLogger("httpx").level == logging.ERROR
        assert logging.getLogger("uvicorn").level == logging.DEBUG

    def test_sql_echo_controls_engine_logger(self):
        override = ConfigData()
        override.database.echo = True

        with with_context(override):
            configure_logging()

        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO

    def test_stdlib_records_reach_loguru(self, tmp_path: Path):
        log_file = tmp_path / "service.log"
        override = ConfigData()
        override.logging.file = str(log_file)
        override.logging.format = "json"

        with with_context(override):
            configure_logging()

        logging.getLogger("book_service.tests").warning("from stdlib")

        entry = next(e for e in _read_lines(log_file) if e["message"] == "from stdlib")
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "book_service.tests"
