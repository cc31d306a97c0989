"""Tests for the logging reporter."""

import logging

import pytest

from atest_engine.models.result import Result
from atest_engine.reporters import LoggingReporter
from atest_engine.testing.factories import ResultFactory


@pytest.fixture
def reporter() -> LoggingReporter:
    """Create reporter logging to the root logger."""
    return LoggingReporter(logging.getLogger())


def test_logs_passing_result(
    reporter: LoggingReporter, caplog: pytest.LogCaptureFixture
) -> None:
    """Logs passes with a checkmark."""
    with caplog.at_level(logging.INFO):
        reporter.on_result(ResultFactory.build(description="adds", duration=0.5))

    assert "✓ adds: pass (0.500s)" in caplog.text
    assert "Expected" not in caplog.text


def test_logs_failure_details(
    reporter: LoggingReporter, caplog: pytest.LogCaptureFixture
) -> None:
    """Logs actual and expected values for failures at error level."""
    result = Result(description="compares", verdict="fail", actual=4, expected=5)

    with caplog.at_level(logging.INFO):
        reporter.on_result(result)

    assert "✗ compares: fail" in caplog.text
    assert "Result: 4" in caplog.text
    assert "Expected: 5" in caplog.text
    assert caplog.records[0].levelno == logging.ERROR


def test_logs_error_symbol(
    reporter: LoggingReporter, caplog: pytest.LogCaptureFixture
) -> None:
    """Logs errors with an exclamation mark."""
    result = Result(description="crashes", verdict="error", actual=ValueError("x"))

    with caplog.at_level(logging.INFO):
        reporter.on_result(result)

    assert "! crashes: error" in caplog.text
    assert "ValueError('x')" in caplog.text


def test_logs_info_message(
    reporter: LoggingReporter, caplog: pytest.LogCaptureFixture
) -> None:
    """Logs info messages on their own."""
    with caplog.at_level(logging.INFO):
        reporter.on_result(Result(description="Starting tests", verdict="info"))

    assert "i Starting tests" in caplog.text


def test_logs_group_and_completion(
    reporter: LoggingReporter, caplog: pytest.LogCaptureFixture
) -> None:
    """Logs group brackets and the final verdict."""
    with caplog.at_level(logging.INFO):
        reporter.on_group_start("parsers")
        reporter.on_group_end("fail")
        reporter.on_complete("pass")

    assert "Group: parsers" in caplog.text
    assert "Group verdict: FAIL" in caplog.text
    assert "Final verdict: PASS" in caplog.text


def test_default_logger_name() -> None:
    """Uses the package reporter logger by default."""
    assert LoggingReporter().log.name == "atest_engine.reporters"
