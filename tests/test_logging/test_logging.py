"""
Tests for the logging module: HUMAN level, HumanFormatter, HumanLogHandler,
and configure_logging pipelines.
"""

import io
import json
import logging
from pathlib import Path

import pytest
import structlog

from skillbook.config.schema import LoggingConfig
from skillbook.logging import (
    HUMAN,
    HumanFormatter,
    HumanLog,
    HumanLogHandler,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.root.handlers.clear()
    structlog.reset_defaults()


class TestHumanFormatter:
    def setup_method(self):
        self.fmt = HumanFormatter()

    def test_store_loaded(self):
        text = self.fmt.format_event("store.loaded", skills=2, references=5, malformed=0)
        assert text == "Loaded 2 skills, 5 references"

    def test_store_loaded_with_malformed(self):
        text = self.fmt.format_event("store.loaded", skills=1, references=0, malformed=2)
        assert "(2 malformed skipped)" in text

    def test_trigger(self):
        text = self.fmt.format_event("disclosure.trigger", query="widgets", matches=["alpha"])
        assert text == '\nQuery "widgets" -> 1 match: alpha'

    def test_trigger_without_matches(self):
        text = self.fmt.format_event("disclosure.trigger", query="gizmos", matches=[])
        assert "no matches" in text

    def test_expand(self):
        text = self.fmt.format_event("disclosure.expand", name="alpha", chars=120, links=3)
        assert text == "  expand alpha (120 chars, 3 links)"

    def test_reference(self):
        text = self.fmt.format_event("disclosure.reference", source="alpha", target="beta")
        assert text == "    ref alpha -> beta"

    def test_unknown_event(self):
        assert self.fmt.format_event("store.skip_unowned", path="x.md") is None


class TestHumanLogHandler:
    def test_formats_structlog_event_dict(self):
        stream = io.StringIO()
        handler = HumanLogHandler(stream=stream)
        record = logging.LogRecord(
            name="skillbook", level=HUMAN, pathname="", lineno=0,
            msg={"event": "disclosure.activate", "name": "alpha"},
            args=None, exc_info=None,
        )
        handler.emit(record)
        assert stream.getvalue() == "  activate alpha\n"

    def test_ignores_other_levels(self):
        stream = io.StringIO()
        handler = HumanLogHandler(stream=stream)
        record = logging.LogRecord(
            name="skillbook", level=logging.INFO, pathname="", lineno=0,
            msg={"event": "disclosure.activate", "name": "alpha"},
            args=None, exc_info=None,
        )
        handler.emit(record)
        assert stream.getvalue() == ""


class TestConfigureLogging:
    def test_quiet_installs_no_stream_handlers(self):
        configure_logging(LoggingConfig(), quiet=True)
        assert not any(
            isinstance(h, logging.StreamHandler) for h in logging.root.handlers
        )

    def test_human_and_console_handlers(self):
        configure_logging(LoggingConfig(level="human"))
        assert any(isinstance(h, HumanLogHandler) for h in logging.root.handlers)

    def test_error_level_drops_human_handler(self):
        configure_logging(LoggingConfig(level="error"))
        assert not any(isinstance(h, HumanLogHandler) for h in logging.root.handlers)

    def test_json_file_pipeline(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "skillbook.jsonl"
        configure_logging(LoggingConfig(file=log_file), quiet=True)

        HumanLog(structlog.get_logger("test")).activate("alpha")
        for handler in logging.root.handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").strip().splitlines()
        entry = json.loads(lines[-1])
        assert entry["event"] == "disclosure.activate"
        assert entry["name"] == "alpha"
        assert entry["level"] == "human"

    def test_human_events_work_without_configuration(self, caplog):
        structlog.reset_defaults()
        with caplog.at_level(HUMAN):
            HumanLog(get_logger("skillbook.test")).expand("alpha", chars=1, links=0)

        assert [r.levelno for r in caplog.records] == [HUMAN]
        assert "disclosure.expand" in caplog.records[0].getMessage()
        assert not hasattr(structlog.PrintLogger, "human")
