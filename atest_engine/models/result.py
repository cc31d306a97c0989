"""Models for test execution results."""

from dataclasses import dataclass
from typing import Any, Final, Literal

Verdict = Literal["pass", "fail", "error", "skip", "info"]
SuiteVerdict = Literal["pass", "fail"]

FAILING_VERDICTS: Final = frozenset({"fail", "error"})


class _NotExecuted:
    """Marker used as the actual value of tasks whose operation never ran."""

    _instance: "_NotExecuted | None" = None

    def __new__(cls) -> "_NotExecuted":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<not executed>"


NOT_EXECUTED: Final = _NotExecuted()


@dataclass(frozen=True, kw_only=True)
class Result:
    """Outcome of a single test, skip or info task."""

    description: str
    verdict: Verdict
    actual: Any = None
    expected: Any = None
    source_location: str | None = None
    duration: float = 0.0

    @property
    def failed(self) -> bool:
        """Whether the verdict counts against the suite."""
        return self.verdict in FAILING_VERDICTS
