"""Unit tests for seedbed.logging."""

import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from seedbed.adapters.id_generators import SimpleIdGenerator
from seedbed.adapters.redactor import Redactor
from seedbed.logging import (
    LOGS_BANNER,
    LogSink,
    ThirdPartyPrefixFilter,
    config_console_handler,
    log_startup,
)

# pylint: disable=magic-value-comparison, redefined-outer-name

_names = SimpleIdGenerator()


def make_record(name: str, msg: str = "hello") -> logging.LogRecord:
    """A bare log record from logger `name`."""
    return logging.LogRecord(name, logging.INFO, __file__, 1, msg, None, None)


@pytest.fixture
def output() -> io.StringIO:
    """Buffer the sink's console writes to."""
    return io.StringIO()


@pytest.fixture
def sink(output):
    """A redacting sink with a unique logger name."""
    log_sink = LogSink(
        f"logging_{_names.new_id()}",
        redactor=Redactor(),
        console=Console(file=output, width=120, color_system=None),
    )
    yield log_sink
    log_sink.close()


class TestLogSink:
    """Tests for LogSink."""

    @staticmethod
    def test_captures_records(sink) -> None:
        """Records are kept in memory, formatted with the logger name."""
        sink.logger.info("Provisioning %s", "shop")

        assert len(sink.records) == 1
        assert sink.logger.name in sink.text()
        assert "INFO" in sink.text()
        assert sink.text().endswith("Provisioning shop")

    @staticmethod
    def test_does_not_propagate(sink, caplog: pytest.LogCaptureFixture) -> None:
        """Sink records stay out of the root logger."""
        with caplog.at_level(logging.DEBUG):
            sink.logger.warning("private")
        assert "private" not in caplog.text

    @staticmethod
    def test_redacts_secrets(sink) -> None:
        """Secrets are masked before the record is stored."""
        sink.logger.error("env ARANGO_ROOT_PASSWORD=%s", "hunter2")

        assert "hunter2" not in sink.text()
        assert "ARANGO_ROOT_PASSWORD=***" in sink.text()

    @staticmethod
    def test_dump_between_banners(sink, output) -> None:
        """dump() prints every line between two LOGS rules."""
        sink.logger.info("first [not markup]")
        sink.logger.info("second")

        sink.dump()

        printed = output.getvalue()
        assert printed.count(LOGS_BANNER) == 2
        assert "first [not markup]" in printed
        assert printed.index("first") < printed.index("second")

    @staticmethod
    def test_close_keeps_records(sink) -> None:
        """After close() new records are dropped but old ones stay."""
        sink.logger.info("kept")
        sink.close()
        sink.logger.info("dropped")

        assert "kept" in sink.text()
        assert "dropped" not in sink.text()

    @staticmethod
    def test_without_redactor(output) -> None:
        """No redactor means records are stored verbatim."""
        log_sink = LogSink(f"plain_{_names.new_id()}", console=Console(file=output))
        try:
            log_sink.logger.info("password=visible")
            assert "password=visible" in log_sink.text()
        finally:
            log_sink.close()

    @staticmethod
    def test_logger_not_registered(sink) -> None:
        """Sink loggers are not kept alive by logging's logger registry."""
        assert sink.logger.name not in logging.Logger.manager.loggerDict
        assert logging.getLogger(sink.logger.name) is not sink.logger

    @staticmethod
    def test_same_name_sinks_are_separate(output) -> None:
        """Two sinks for the same database name keep their own records."""
        first = LogSink("shop", console=Console(file=output))
        second = LogSink("shop", console=Console(file=output))
        try:
            first.logger.info("first run")
            second.logger.info("second run")

            assert first.logger is not second.logger
            assert "second run" not in first.text()
            assert "first run" not in second.text()
        finally:
            first.close()
            second.close()


class TestThirdPartyPrefixFilter:
    """Tests for ThirdPartyPrefixFilter."""

    @staticmethod
    def test_third_party_prefix() -> None:
        """Foreign loggers get their top-level package as prefix."""
        record = make_record("urllib3.connectionpool")
        assert ThirdPartyPrefixFilter().filter(record)
        assert record.prefix == "[urllib3]"

    @staticmethod
    def test_project_logger_has_no_prefix() -> None:
        """Project loggers are not annotated."""
        record = make_record("seedbed.harness.harness")
        assert ThirdPartyPrefixFilter().filter(record)
        assert record.prefix == ""


class TestConsoleHandler:
    """Tests for config_console_handler()."""

    @staticmethod
    def test_default() -> None:
        """The default handler filters records through the prefix filter."""
        handler = config_console_handler(level=logging.WARNING)

        assert isinstance(handler, RichHandler)
        assert handler.level == logging.WARNING
        assert any(isinstance(f, ThirdPartyPrefixFilter) for f in handler.filters)

    @staticmethod
    def test_debug_mode() -> None:
        """Debug mode forces DEBUG and drops the prefix filter."""
        handler = config_console_handler(level=logging.WARNING, debug_mode=True)

        assert handler.level == logging.DEBUG
        assert not handler.filters


def test_log_startup(sink) -> None:
    """The summary names the database and endpoint; diagnostics follow."""
    log_startup(
        sink.logger,
        app_version="1.2.3",
        endpoint="http://root:hunter2@db:8529",
        database="shop",
        image="arangodb:3.11",
        redactor=Redactor(),
    )

    summary = sink.records[0].getMessage()
    assert "SEEDBED 1.2.3" in summary
    assert "database=shop" in summary
    assert "instance=arangodb:3.11" in summary
    assert "hunter2" not in sink.text()
    assert any("python-arango" in r.getMessage() for r in sink.records)


def test_log_startup_attached(sink) -> None:
    """Attached servers are labelled as such."""
    log_startup(
        sink.logger,
        app_version="1.2.3",
        endpoint="http://db:8529",
        database="shop",
        image=None,
    )

    assert "instance=attached" in sink.records[0].getMessage()
