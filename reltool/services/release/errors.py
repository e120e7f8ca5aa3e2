"""Failure records for the release workflow.

Each kind is a frozen dataclass with a `describe()` message. Components
return them inside `Err`; the CLI renders them and exits 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from reltool.git.client import CheckoutFailure, CloneFailure
from reltool.git.local import GitError
from reltool.platform.runner import CommandFailure

__all__ = [
    "CheckoutFailure",
    "CloneFailure",
    "CommandFailure",
    "CredentialsFailure",
    "GitError",
    "MergeRejected",
    "MetadataFailure",
    "MissingDocumentFailure",
    "NotFoundFailure",
    "ParseFailure",
    "ReleaseFailure",
    "RemoteHostFailure",
    "UnrecognizedRemoteFailure",
    "UnreadableDocumentFailure",
    "UnsupportedRepositoryFailure",
]


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """Malformed URL or version input."""

    value: str
    reason: str

    def describe(self) -> str:
        return f"{self.reason}: {self.value}"


@dataclass(frozen=True, slots=True)
class RemoteHostFailure:
    """Transport, authorization or API error reported by GitHub."""

    operation: str
    cause: str

    def describe(self) -> str:
        return f"GitHub request failed ({self.operation}): {self.cause}"


@dataclass(frozen=True, slots=True)
class NotFoundFailure:
    owner: str
    name: str

    def describe(self) -> str:
        return f"GitHub repository not found: {self.owner}/{self.name}"


@dataclass(frozen=True, slots=True)
class UnrecognizedRemoteFailure:
    remote_url: str

    def describe(self) -> str:
        return f"Failed to parse remote {self.remote_url}. Not a valid github repository."


@dataclass(frozen=True, slots=True)
class MergeRejected:
    """The merge call succeeded but GitHub did not merge the pull request."""

    pull_request_url: str
    message: str

    def describe(self) -> str:
        return (
            f"Was unable to merge pull request at: {self.pull_request_url}. "
            f"Received error: {self.message}"
        )


@dataclass(frozen=True, slots=True)
class MissingDocumentFailure:
    path: Path

    def describe(self) -> str:
        return (
            "Could not get draft release notes, as the change log file, "
            f"{self.path.name}, does not exist."
        )


@dataclass(frozen=True, slots=True)
class UnreadableDocumentFailure:
    """The change log exists but is not readable UTF-8 text."""

    path: Path
    cause: str

    def describe(self) -> str:
        return (
            "Could not get draft release notes, as the change log file, "
            f"{self.path.name}, could not be read: {self.cause}"
        )


@dataclass(frozen=True, slots=True)
class UnsupportedRepositoryFailure:
    repository: str
    supported: tuple[str, ...]

    def describe(self) -> str:
        return (
            f"Unsupported repository: {self.repository} "
            f"(supported: {', '.join(self.supported)})"
        )


@dataclass(frozen=True, slots=True)
class CredentialsFailure:
    message: str
    path: Path | None = None

    def describe(self) -> str:
        if self.path is not None:
            return f"{self.message}: {self.path}"
        return self.message


@dataclass(frozen=True, slots=True)
class MetadataFailure:
    path: Path
    message: str

    def describe(self) -> str:
        return f"Failed to write build metadata to {self.path}: {self.message}"


ReleaseFailure = (
    ParseFailure
    | CommandFailure
    | CloneFailure
    | CheckoutFailure
    | GitError
    | RemoteHostFailure
    | NotFoundFailure
    | UnrecognizedRemoteFailure
    | MergeRejected
    | MissingDocumentFailure
    | UnreadableDocumentFailure
    | UnsupportedRepositoryFailure
    | CredentialsFailure
    | MetadataFailure
)
