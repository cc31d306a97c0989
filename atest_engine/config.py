"""Configuration for the test runner."""

from pydantic import BaseModel, ConfigDict, Field


class RunnerConfig(BaseModel):
    """Options recognized by the test runner."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    only_failed: bool = Field(
        default=False,
        description="Suppress passing and skipped results (info is never suppressed)",
    )
    default_timeout_ms: float = Field(
        default=2000,
        gt=0,
        description="Timeout applied to tests that do not set their own",
    )
