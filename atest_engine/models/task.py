"""Models for declared units of work."""

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from atest_engine.models.result import Verdict

TaskKind = Literal["test", "info", "skip", "group_start", "group_end"]


@dataclass(frozen=True, slots=True)
class Immediate:
    """Operand that is already a value, or an awaitable adopted as-is."""

    value: Any


@dataclass(frozen=True, slots=True)
class Deferred:
    """Operand produced by calling a zero-argument callable at execution time."""

    producer: Callable[[], Any]


Operand = Immediate | Deferred


def operand_of(operation: Any) -> Operand:
    """Tag a declared operation as an immediate value or a deferred producer."""
    if isinstance(operation, Immediate | Deferred):
        return operation
    if callable(operation):
        return Deferred(operation)
    return Immediate(operation)


def discard_operand(operand: Operand | None) -> None:
    """Close a coroutine operand that will never be awaited."""
    if isinstance(operand, Immediate) and inspect.iscoroutine(operand.value):
        operand.value.close()


@dataclass(frozen=True, kw_only=True)
class Task:
    """A queued unit of declared work.

    Tasks are created by the runner's declaration calls and consumed exactly
    once when the runner drains its queue.
    """

    kind: TaskKind
    description: str
    operand: Operand | None = None
    expected: Any = None
    source_location: str | None = None
    timeout_ms: float | None = None
    predetermined_verdict: Verdict | None = None
    predetermined_actual: Any = None
