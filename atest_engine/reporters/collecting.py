"""Reporter keeping every lifecycle call in memory."""

from dataclasses import dataclass, field

from atest_engine.models.result import Result, SuiteVerdict
from atest_engine.reporters.base import Reporter


@dataclass
class CollectingReporter(Reporter):
    """Records results, group verdicts and progress for later inspection."""

    results: list[Result] = field(default_factory=list)
    groups: list[tuple[str, SuiteVerdict | None]] = field(default_factory=list)
    progress: list[tuple[int, int]] = field(default_factory=list)
    verdict: SuiteVerdict | None = None

    def on_result(self, result: Result) -> None:
        self.results.append(result)

    def on_group_start(self, description: str) -> None:
        self.groups.append((description, None))

    def on_group_end(self, verdict: SuiteVerdict) -> None:
        description, _ = self.groups[-1]
        self.groups[-1] = (description, verdict)

    def on_progress(self, completed: int, total: int) -> None:
        self.progress.append((completed, total))

    def on_complete(self, verdict: SuiteVerdict) -> None:
        self.verdict = verdict
