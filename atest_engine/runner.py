"""Test runner: declaration queue and ordered execution."""

import asyncio
import inspect
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from atest_engine.config import RunnerConfig
from atest_engine.errors import NestedGroupError
from atest_engine.executor import Executor
from atest_engine.models.result import FAILING_VERDICTS, Result, SuiteVerdict
from atest_engine.models.task import Task, operand_of
from atest_engine.reporters.base import Reporter
from atest_engine.reporters.log_reporter import LoggingReporter

log = logging.getLogger(__name__)

GroupBody = Callable[[], Awaitable[None] | None]

_DeclarationUnit = Callable[[], Awaitable[None]]


@dataclass(kw_only=True)
class _OpenGroup:
    """Buffer of in-flight results for the group currently being drained."""

    description: str
    pending: list[asyncio.Future[Result]] = field(default_factory=list)


@dataclass(kw_only=True)
class TestRunner:
    """Collects test declarations and runs them in declaration order.

    Declarations append tasks to a queue; :meth:`run` drains it. Outside a
    group every task finishes before the next one starts. Inside a group all
    tasks start at once and their results are reported, in declaration
    order, once the whole group has settled.

    Group bodies that are ``async def`` functions cannot run at declaration
    time. They are queued as declaration units instead, and every later
    declaration is queued behind them so program order is kept. The queued
    units are settled one at a time when :meth:`run` starts.
    """

    __test__ = False

    config: RunnerConfig = field(default_factory=RunnerConfig)
    reporter: Reporter = field(default_factory=LoggingReporter)
    _tasks: list[Task] = field(init=False, default_factory=list)
    _backlog: deque[_DeclarationUnit] = field(init=False, default_factory=deque)
    _settling: bool = field(init=False, default=False)
    _group: str | None = field(init=False, default=None)
    _final_verdict: SuiteVerdict = field(init=False, default="pass")

    @property
    def final_verdict(self) -> SuiteVerdict:
        """``"fail"`` once any failing or erroring result was seen, else ``"pass"``."""
        return self._final_verdict

    @property
    def tasks(self) -> Sequence[Task]:
        """Tasks declared so far and not yet drained."""
        return list(self._tasks)

    def test(
        self,
        description: str,
        operation: Any,
        expected: Any,
        *,
        timeout_ms: float | None = None,
        source_location: str | None = None,
    ) -> None:
        """Declare a test comparing the outcome of ``operation`` to ``expected``.

        Args:
            description: Brief description of what the test checks
            operation: Zero-argument callable (sync or async), awaitable or value
            expected: Value the outcome must deep-equal to pass
            timeout_ms: Per-test override of the configured default timeout
            source_location: Where the test was declared, for reporting

        """
        self._declare(
            Task(
                kind="test",
                description=description,
                operand=operand_of(operation),
                expected=expected,
                timeout_ms=timeout_ms,
                source_location=source_location,
            )
        )

    def info(self, message: str) -> None:
        """Declare an informational message reported in sequence."""
        self._declare(Task(kind="info", description=message))

    def skip(
        self,
        description: str,
        operation: Any = None,
        expected: Any = None,
        *,
        source_location: str | None = None,
    ) -> None:
        """Declare a test that is reported as skipped without running."""
        self._declare(
            Task(
                kind="skip",
                description=description,
                operand=operand_of(operation),
                expected=expected,
                source_location=source_location,
                predetermined_verdict="skip",
            )
        )

    def error(
        self,
        description: str,
        exc: BaseException,
        *,
        source_location: str | None = None,
    ) -> None:
        """Report a fault caught while defining tests as an ``error`` result."""
        self._declare(
            Task(
                kind="test",
                description=description,
                source_location=source_location,
                predetermined_verdict="error",
                predetermined_actual=exc,
            )
        )

    def group(self, description: str, body: GroupBody) -> None:
        """Declare a group of independent tests.

        ``body`` declares the group's members. It may be a plain function or
        an ``async def``; faults it raises are reported as an ``error`` result
        inside the group.

        Raises:
            NestedGroupError: If called from inside another group's body

        """
        if self._group is not None:
            raise NestedGroupError(
                f"Group '{description}' cannot be opened inside group '{self._group}'"
            )

        if self._backlog and not self._settling:
            self._backlog.append(lambda: self._declare_group(description, body))
            return

        self._open(description)
        try:
            outcome = body()
        except Exception as e:
            self._close(description, e)
            return

        if not inspect.isawaitable(outcome):
            self._close(description)
            return

        # The body's declarations land when the awaitable is settled, so
        # everything declared after this point has to wait behind it.
        self._group = None
        self._backlog.append(lambda: self._finish_group(description, outcome))

    async def run(self) -> SuiteVerdict:
        """Execute every declared task and report the results.

        Returns:
            The final suite verdict, ``"pass"`` or ``"fail"``

        """
        await self._settle()
        tasks, self._tasks = self._tasks, []
        executor = Executor(default_timeout_ms=self.config.default_timeout_ms)
        total = len(tasks)
        log.info("Running %d task(s)...", total)

        self.reporter.on_progress(0, total)
        group: _OpenGroup | None = None
        for completed, task in enumerate(tasks, start=1):
            log.debug("Dispatching %s task: %s", task.kind, task.description)
            match task.kind:
                case "group_start":
                    if group is not None:
                        await self._flush(group)
                    group = _OpenGroup(description=task.description)
                    self.reporter.on_group_start(task.description)
                case "group_end":
                    if group is not None:
                        await self._flush(group)
                        group = None
                case _ if group is not None:
                    group.pending.append(
                        asyncio.ensure_future(executor.execute(task))
                    )
                case _:
                    self._emit(await executor.execute(task))
            self.reporter.on_progress(completed, total)

        if group is not None:
            await self._flush(group)

        log.info("Test run completed: %s", self._final_verdict)
        self.reporter.on_complete(self._final_verdict)
        return self._final_verdict

    def _declare(self, task: Task) -> None:
        if self._backlog and not self._settling:
            self._backlog.append(lambda: self._append(task))
        else:
            self._tasks.append(task)

    async def _append(self, task: Task) -> None:
        self._tasks.append(task)

    async def _declare_group(self, description: str, body: GroupBody) -> None:
        self._open(description)
        try:
            outcome = body()
        except Exception as e:
            self._close(description, e)
            return
        if inspect.isawaitable(outcome):
            await self._finish_group(description, outcome, reopen=False)
        else:
            self._close(description)

    async def _finish_group(
        self, description: str, outcome: Awaitable[None], *, reopen: bool = True
    ) -> None:
        if reopen:
            self._group = description
        try:
            await outcome
        except Exception as e:
            self._close(description, e)
            return
        self._close(description)

    async def _settle(self) -> None:
        """Run queued declaration units in the order they were declared."""
        self._settling = True
        try:
            while self._backlog:
                unit = self._backlog.popleft()
                await unit()
        finally:
            self._settling = False

    def _open(self, description: str) -> None:
        self._group = description
        self._tasks.append(Task(kind="group_start", description=description))

    def _close(self, description: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            log.error("Group '%s' failed while declaring tests: %s", description, exc)
            self._tasks.append(
                Task(
                    kind="test",
                    description=f"{description}: definition error",
                    predetermined_verdict="error",
                    predetermined_actual=exc,
                )
            )
        self._group = None
        self._tasks.append(Task(kind="group_end", description=description))

    async def _flush(self, group: _OpenGroup) -> None:
        results = await asyncio.gather(*group.pending)
        failed = False
        for result in results:
            failed = failed or result.failed
            self._emit(result)
        self.reporter.on_group_end("fail" if failed else "pass")

    def _emit(self, result: Result) -> None:
        if result.verdict in FAILING_VERDICTS:
            self._final_verdict = "fail"
        if self.config.only_failed and result.verdict in {"pass", "skip"}:
            return
        self.reporter.on_result(result)
