"""Failure presentation for the release command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reltool.core.errors import ErrorCode
from reltool.output.console import Style
from reltool.services.release.errors import (
    CheckoutFailure,
    CloneFailure,
    CommandFailure,
    CredentialsFailure,
    MergeRejected,
    MissingDocumentFailure,
    NotFoundFailure,
    ReleaseFailure,
    UnreadableDocumentFailure,
    UnsupportedRepositoryFailure,
)

if TYPE_CHECKING:
    from reltool.output.console import ConsoleProtocol

__all__ = ["print_release_failure", "release_failure_exit_code"]


def print_release_failure(failure: ReleaseFailure, console: ConsoleProtocol) -> None:
    """Print a failure with a recovery hint where one is known."""
    console.error(f"Unable to release candidate branch. {failure.describe()}")
    match failure:
        case CommandFailure(command=command) if command:
            console.print(f"command: {' '.join(command)}", Style.DIM)
        case CloneFailure(path=path):
            console.print(f"hint: check SSH access; partial clone left at {path}", Style.DIM)
        case CheckoutFailure(ref=ref):
            console.print(f"hint: does {ref} exist on the remote?", Style.DIM)
        case MergeRejected():
            console.print("hint: check the pull request checks and reviews, then retry", Style.DIM)
        case NotFoundFailure():
            console.print("hint: the token may lack access to this repository", Style.DIM)
        case MissingDocumentFailure() | UnreadableDocumentFailure():
            console.print(
                "hint: the pull request is merged; draft the release by hand", Style.DIM
            )
        case UnsupportedRepositoryFailure(supported=supported):
            console.print(f"supported: {', '.join(supported)}", Style.DIM)
        case CredentialsFailure():
            console.print("hint: pass --github-key or --github-key-file", Style.DIM)
        case _:
            pass


def release_failure_exit_code(failure: ReleaseFailure) -> int:
    """Every release failure exits 1."""
    del failure
    return int(ErrorCode.FAILURE)
