"""CLI entry point for running a test suite file."""

import argparse
import asyncio
import importlib.util
import inspect
import json
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from atest_engine.config import RunnerConfig
from atest_engine.errors import ConfigurationError
from atest_engine.models.result import Result
from atest_engine.reporters import CollectingReporter, ReporterGroup, load_reporter
from atest_engine.reporters.log_reporter import VERDICT_SYMBOLS
from atest_engine.runner import TestRunner

SUITE_FUNCTION = "suite"


def log_results_summary(log: logging.Logger, results: Sequence[Result]) -> None:
    """Log a formatted summary of test results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for result in results:
        symbol = VERDICT_SYMBOLS.get(result.verdict, "?")
        log.info(
            "%s %s: %s (%.2fs)",
            symbol,
            result.description,
            result.verdict,
            result.duration,
        )
        if result.source_location:
            log.info("  Location: %s", result.source_location)
        if result.failed:
            log.info("  Result: %r", result.actual)


def load_suite(path: Path) -> Callable[[TestRunner], Any]:
    """Import the suite file at ``path`` and return its ``suite`` function.

    Raises:
        ConfigurationError: If the file cannot be imported or defines no suite

    """
    if not path.is_file():
        raise ConfigurationError(f"Suite file not found: {path}")

    spec = importlib.util.spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Cannot import suite file: {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigurationError(f"Cannot import suite file: {path}: {e}") from e

    suite = getattr(module, SUITE_FUNCTION, None)
    if not callable(suite):
        raise ConfigurationError(
            f"{path} does not define a '{SUITE_FUNCTION}' function"
        )
    return suite


async def run(suite_path: Path, reporter_key: str, config_json: str) -> int:
    """Run the suite and return exit code."""
    log = logging.getLogger("atest_engine")

    config = RunnerConfig.model_validate_json(config_json)
    suite = load_suite(suite_path)

    log.info("Loading reporter: %s", reporter_key)
    collector = CollectingReporter()
    runner = TestRunner(
        config=config,
        reporter=ReporterGroup([load_reporter(reporter_key), collector]),
    )

    log.info("Declaring tests from %s", suite_path)
    declared = suite(runner)
    if inspect.isawaitable(declared):
        await declared

    verdict = await runner.run()

    log_results_summary(log, collector.results)
    print(json.dumps(format_output(collector.results), indent=2))

    return 1 if verdict == "fail" else 0


def format_output(results: Sequence[Result]) -> dict[str, Any]:
    """Format results for JSON output."""
    all_results = [
        {
            "description": result.description,
            "verdict": result.verdict,
            "duration": result.duration,
            "actual": _describe(result.actual),
            "expected": _describe(result.expected),
            "location": result.source_location,
        }
        for result in results
        if result.verdict != "info"
    ]

    return {
        "total": len(all_results),
        "passed": sum(1 for r in all_results if r["verdict"] == "pass"),
        "failed": sum(1 for r in all_results if r["verdict"] == "fail"),
        "errors": sum(1 for r in all_results if r["verdict"] == "error"),
        "skipped": sum(1 for r in all_results if r["verdict"] == "skip"),
        "results": all_results,
    }


def _describe(value: Any) -> str:
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return repr(value)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run a test suite file")
    parser.add_argument(
        "--suite",
        type=Path,
        required=True,
        help=f"Python file defining a '{SUITE_FUNCTION}(runner)' function",
    )
    parser.add_argument(
        "--reporter",
        default="logging",
        help="Reporter key (logging, collect)",
    )
    parser.add_argument(
        "--config",
        default="{}",
        help="JSON configuration for the runner",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        exit_code = asyncio.run(run(args.suite, args.reporter, args.config))
    except (ConfigurationError, ValidationError) as e:
        logging.getLogger("atest_engine").error("%s", e)
        exit_code = 2
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
