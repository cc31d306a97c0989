"""Loading of reporters from entry points."""

from importlib.metadata import entry_points

from atest_engine.errors import ReporterNotFoundError
from atest_engine.reporters.base import Reporter

ENTRY_POINT_GROUP = "atest_engine.reporters"


def load_reporter(key: str) -> Reporter:
    """Load and instantiate a reporter by key.

    Args:
        key: The reporter key as registered in pyproject.toml
             (e.g., "logging", "collect")

    Returns:
        A new instance of the registered reporter class

    Raises:
        ReporterNotFoundError: If no reporter with the given key is found

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == key:
            reporter_cls: type[Reporter] = entry.load()
            return reporter_cls()

    available = [e.name for e in entries]
    raise ReporterNotFoundError(
        f"Reporter '{key}' not found. Available reporters: {available}"
    )
