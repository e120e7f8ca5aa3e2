"""Platform abstraction layer (processes and retry policy)."""

from .process import (
    ProcessError,
    run,
    run_silent,
)
from .runner import (
    CommandFailure,
    CommandRunner,
    FailFast,
    PromptingRetry,
    RetryPolicy,
)

__all__ = [
    # process
    "ProcessError",
    "run",
    "run_silent",
    # runner
    "CommandFailure",
    "CommandRunner",
    "FailFast",
    "PromptingRetry",
    "RetryPolicy",
]
