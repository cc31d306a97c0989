"""Reporters receiving results from a test run."""

from atest_engine.reporters.base import Reporter, ReporterGroup
from atest_engine.reporters.collecting import CollectingReporter
from atest_engine.reporters.loading import load_reporter
from atest_engine.reporters.log_reporter import LoggingReporter

__all__ = [
    "CollectingReporter",
    "LoggingReporter",
    "Reporter",
    "ReporterGroup",
    "load_reporter",
]
