"""Reporter writing results to the standard logging module."""

import logging
from collections.abc import Mapping

from atest_engine.models.result import Result, SuiteVerdict, Verdict
from atest_engine.reporters.base import Reporter

VERDICT_SYMBOLS: Mapping[Verdict, str] = {
    "pass": "✓",
    "fail": "✗",
    "error": "!",
    "skip": "-",
    "info": "i",
}


class LoggingReporter(Reporter):
    """Logs every lifecycle call on the ``atest_engine.reporters`` logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.log = logger or logging.getLogger("atest_engine.reporters")

    def on_result(self, result: Result) -> None:
        symbol = VERDICT_SYMBOLS.get(result.verdict, "?")
        if result.verdict == "info":
            self.log.info("%s %s", symbol, result.description)
            return

        level = logging.ERROR if result.failed else logging.INFO
        self.log.log(
            level,
            "%s %s: %s (%.3fs)",
            symbol,
            result.description,
            result.verdict,
            result.duration,
        )
        if result.failed:
            self.log.log(level, "  Result: %r", result.actual)
            self.log.log(level, "  Expected: %r", result.expected)
        if result.source_location:
            self.log.debug("  Location: %s", result.source_location)

    def on_group_start(self, description: str) -> None:
        self.log.info("Group: %s", description)

    def on_group_end(self, verdict: SuiteVerdict) -> None:
        self.log.info("Group verdict: %s", verdict.upper())

    def on_progress(self, completed: int, total: int) -> None:
        self.log.debug("Progress: %d/%d", completed, total)

    def on_complete(self, verdict: SuiteVerdict) -> None:
        self.log.info("All tests complete. Final verdict: %s", verdict.upper())
