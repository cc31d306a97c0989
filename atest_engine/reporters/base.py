"""Abstract base class for result reporters."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from atest_engine.models.result import Result, SuiteVerdict


class Reporter(ABC):
    """Sink for the lifecycle calls made while a test run drains.

    Only :meth:`on_result` has to be implemented; the remaining callbacks
    default to doing nothing.
    """

    @abstractmethod
    def on_result(self, result: Result) -> None:
        """Receive a test, skip or info result, in declaration order."""

    def on_group_start(self, description: str) -> None:
        """Mark the start of a group's results."""

    def on_group_end(self, verdict: SuiteVerdict) -> None:
        """Mark the end of a group's results with its aggregate verdict."""

    def on_progress(self, completed: int, total: int) -> None:
        """Receive the number of tasks drained so far."""

    def on_complete(self, verdict: SuiteVerdict) -> None:
        """Receive the final suite verdict once the queue is drained."""


@dataclass(frozen=True)
class ReporterGroup(Reporter):
    """Forwards every callback to each reporter in turn."""

    reporters: Sequence[Reporter]

    def on_result(self, result: Result) -> None:
        for reporter in self.reporters:
            reporter.on_result(result)

    def on_group_start(self, description: str) -> None:
        for reporter in self.reporters:
            reporter.on_group_start(description)

    def on_group_end(self, verdict: SuiteVerdict) -> None:
        for reporter in self.reporters:
            reporter.on_group_end(verdict)

    def on_progress(self, completed: int, total: int) -> None:
        for reporter in self.reporters:
            reporter.on_progress(completed, total)

    def on_complete(self, verdict: SuiteVerdict) -> None:
        for reporter in self.reporters:
            reporter.on_complete(verdict)
