"""Execution of a single task to a verdict."""

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any

from atest_engine.equality import equal
from atest_engine.errors import OperationCancelledError, TestTimeoutError
from atest_engine.models.result import NOT_EXECUTED, Result, Verdict
from atest_engine.models.task import (
    Deferred,
    Immediate,
    Operand,
    Task,
    discard_operand,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Executor:
    """Runs tasks to results under a timeout.

    Operations are raced against a timer; an operation that loses the race
    is not cancelled and keeps running in the background, but its outcome
    no longer affects the reported result.
    """

    default_timeout_ms: float

    async def execute(self, task: Task) -> Result:
        """Run ``task`` and return its result.

        Never raises for faults of the operation itself: exceptions, rejected or
        cancelled awaitables and timeouts all become ``error`` results.
        """
        if task.kind == "info":
            return Result(description=task.description, verdict="info")

        if task.predetermined_verdict is not None:
            discard_operand(task.operand)
            return self._predetermined(task, task.predetermined_verdict)

        timeout_ms = task.timeout_ms
        if timeout_ms is None:
            timeout_ms = self.default_timeout_ms
        start = time.perf_counter()
        try:
            value = _resolve(task.operand)
            if inspect.isawaitable(value):
                value = await _race(value, timeout_ms)
            verdict: Verdict = "pass" if equal(value, task.expected) else "fail"
        except TestTimeoutError as e:
            log.warning("Test timed out after %g ms: %s", timeout_ms, task.description)
            return self._result(task, "error", e, start)
        except Exception as e:
            log.debug("Test raised %r: %s", e, task.description)
            return self._result(task, "error", e, start)

        return self._result(task, verdict, value, start)

    def _predetermined(self, task: Task, verdict: Verdict) -> Result:
        actual = task.predetermined_actual if verdict == "error" else NOT_EXECUTED
        return Result(
            description=task.description,
            verdict=verdict,
            actual=actual,
            expected=task.expected,
            source_location=task.source_location,
        )

    def _result(
        self, task: Task, verdict: Verdict, actual: Any, start: float
    ) -> Result:
        return Result(
            description=task.description,
            verdict=verdict,
            actual=actual,
            expected=task.expected,
            source_location=task.source_location,
            duration=time.perf_counter() - start,
        )


def _resolve(operand: Operand | None) -> Any:
    match operand:
        case Deferred(producer=producer):
            return producer()
        case Immediate(value=value):
            return value
        case None:
            return None


async def _race(awaitable: Any, timeout_ms: float) -> Any:
    """Wait for ``awaitable`` for at most ``timeout_ms`` milliseconds."""
    future = asyncio.ensure_future(awaitable)
    done, _ = await asyncio.wait({future}, timeout=timeout_ms / 1000)
    if future not in done:
        future.add_done_callback(_log_orphan)
        raise TestTimeoutError(timeout_ms)
    if future.cancelled():
        raise OperationCancelledError("Operation was cancelled before it settled")
    return future.result()


def _log_orphan(future: asyncio.Future[Any]) -> None:
    """Consume the outcome of an operation that already timed out."""
    if future.cancelled():
        log.debug("Timed-out operation was cancelled")
    elif (exc := future.exception()) is not None:
        log.debug("Timed-out operation later raised %r", exc)
    else:
        log.debug("Timed-out operation later completed with %r", future.result())
