"""Async helpers for use inside test operations."""

import asyncio
import inspect
import time
from collections.abc import Callable
from typing import Any


async def wait(ms: float) -> None:
    """Sleep for ``ms`` milliseconds."""
    await asyncio.sleep(ms / 1000)


async def when(
    expression: Any,
    timeout_ms: float = 1000,
    interval_ms: float = 100,
) -> Any:
    """Wait for an expression to become truthy.

    Args:
        expression: Callable (sync or async), awaitable or plain value
        timeout_ms: Maximum time to keep polling
        interval_ms: Pause between evaluations

    Returns:
        The first truthy evaluation, or the final evaluation on timeout

    Raises:
        Exception: Whatever the evaluation raises, immediately

    """
    if callable(expression):
        evaluate = expression
    else:
        # An awaitable can only be awaited once; keep its outcome.
        settled = await expression if inspect.isawaitable(expression) else expression

        def evaluate() -> Any:
            return settled

    deadline = asyncio.get_running_loop().time() + timeout_ms / 1000
    while True:
        result = evaluate()
        if inspect.isawaitable(result):
            result = await result
        if result or asyncio.get_running_loop().time() >= deadline:
            return result
        await wait(interval_ms)


async def benchmark(
    fn: Callable[..., Any], times: int = 1, *args: Any, **kwargs: Any
) -> float:
    """Call ``fn`` ``times`` times and return the elapsed milliseconds.

    Awaitable results are awaited before the next call.
    """
    start = time.perf_counter()
    for _ in range(times):
        result = fn(*args, **kwargs)
        if inspect.isawaitable(result):
            await result
    return (time.perf_counter() - start) * 1000
