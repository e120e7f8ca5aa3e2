"""Process exit codes.

The release command has a binary contract: it exits 0 only after the draft
release was created (and metadata written when requested), 1 otherwise.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands. Values are part of the CLI contract."""

    OK = 0
    FAILURE = 1

    def __str__(self) -> str:
        return self.name.lower()
