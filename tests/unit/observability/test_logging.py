"""Unit tests for observability logging."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from schedin.observability.logging import JsonLoggerFactory, configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


class TestJsonLoggerFactory:
    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(logging.INFO)
        get_logger("schedin.test").info("job.inserted", job_name="job-X")
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "job.inserted"
        assert payload["job_name"] == "job-X"
        assert payload["level"] == "info"
        assert payload["logger"] == "schedin.test"
        assert "timestamp" in payload

    def test_level_name_string(self) -> None:
        configure_logging("warning")
        assert logging.getLogger().level == logging.WARNING

    def test_below_level_is_dropped(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("ERROR")
        get_logger("schedin.test").info("quiet")
        assert capsys.readouterr().err == ""

    def test_console_renderer(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(logging.INFO, json=False)
        get_logger("schedin.test").info("poller.started")
        assert "poller.started" in capsys.readouterr().err


class TestGetLogger:
    def test_binds_initial_values(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(logging.INFO)
        get_logger("schedin.test", job_id="abc").info("job.deleted")
        payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert payload["job_id"] == "abc"
