"""Git working-copy operations.

Usage:
    from reltool.git import RepositoryClient

    match RepositoryClient.clone(url, runner=runner, git_config=cfg.git, console=console):
        case Ok(client):
            with client:
                client.fetch()
                client.checkout_remote_branch("develop")
        case Err(failure):
            console.error(failure.describe())
"""

from reltool.git.client import (
    CheckoutFailure,
    CloneFailure,
    RepositoryClient,
    clone_repository,
)
from reltool.git.local import (
    CommitRef,
    GitCliLocalOps,
    GitError,
    GitStatus,
    LocalRepositoryOps,
    StatusEntry,
)
from reltool.git.remote import GitCliRemoteOps, RemoteRepositoryOps

__all__ = [
    # client
    "CheckoutFailure",
    "CloneFailure",
    "RepositoryClient",
    "clone_repository",
    # local
    "CommitRef",
    "GitCliLocalOps",
    "GitError",
    "GitStatus",
    "LocalRepositoryOps",
    "StatusEntry",
    # remote
    "GitCliRemoteOps",
    "RemoteRepositoryOps",
]
