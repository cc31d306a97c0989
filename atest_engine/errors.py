"""Exceptions raised by the test engine."""


class ConfigurationError(Exception):
    """Raised when the engine is set up with an unusable configuration.

    Configuration faults abort the setup or declaration call itself; they are
    never turned into test results.
    """


class InvalidTargetError(ConfigurationError, TypeError):
    """Raised when a spy is requested for an attribute that is not callable."""


class NestedGroupError(ConfigurationError):
    """Raised when a group is opened inside another group's body."""


class ReporterNotFoundError(ConfigurationError):
    """Raised when a reporter key is not registered."""


class TestTimeoutError(TimeoutError):
    """Outcome of a test whose operation did not settle in time."""

    __test__ = False

    def __init__(self, timeout_ms: float) -> None:
        """Create the error for the given timeout in milliseconds."""
        super().__init__(f"Test did not complete within {timeout_ms:g} ms")
        self.timeout_ms = timeout_ms


class OperationCancelledError(Exception):
    """Outcome of a test whose operation was cancelled before settling."""
