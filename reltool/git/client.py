"""RepositoryClient: one working copy, from clone to disposal.

The client composes two capabilities:
- LocalRepositoryOps for reads and local mutations (checkout, stage, commit)
- RemoteRepositoryOps for network operations, retried through CommandRunner

The working copy lives in a fresh temporary directory created by `clone`.
Closing the client does not delete it; after a failed release the operator
can inspect exactly what the tool saw.
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

from reltool.core.config import GitConfig
from reltool.core.result import Err, Ok, Result
from reltool.git.local import CommitRef, GitCliLocalOps, GitError, LocalRepositoryOps
from reltool.git.remote import GitCliRemoteOps, RemoteRepositoryOps
from reltool.output.console import ConsoleProtocol, Style
from reltool.platform.runner import CommandFailure, CommandRunner

__all__ = [
    "CheckoutFailure",
    "CloneFailure",
    "RepositoryClient",
    "clone_repository",
]


@dataclass(frozen=True, slots=True)
class CloneFailure:
    remote_url: str
    path: Path
    cause: CommandFailure

    def describe(self) -> str:
        return f"Failed to clone {self.remote_url} into {self.path}: {self.cause.describe()}"


@dataclass(frozen=True, slots=True)
class CheckoutFailure:
    ref: str
    message: str

    def describe(self) -> str:
        return f"Failed to check out {self.ref}: {self.message}"


class RepositoryClient:
    """Lifecycle operations for exactly one working copy.

    Attributes:
        path: Working copy root
        branch: Ref last checked out through this client, None before any checkout
    """

    def __init__(
        self,
        *,
        path: Path,
        local: LocalRepositoryOps,
        remote: RemoteRepositoryOps,
        git_config: GitConfig,
        console: ConsoleProtocol,
    ) -> None:
        self.path = path
        self.branch: str | None = None
        self._local = local
        self._remote = remote
        self._git_config = git_config
        self._console = console
        self._closed = False

    @classmethod
    def clone(
        cls,
        remote_url: str,
        *,
        runner: CommandRunner,
        git_config: GitConfig,
        console: ConsoleProtocol,
        temp_root: Path | None = None,
    ) -> Result[RepositoryClient, CloneFailure]:
        """Clone `remote_url` into a new temporary directory."""
        path = Path(tempfile.mkdtemp(prefix="reltool-", dir=temp_root))
        console.print(f"Cloning {remote_url} into {path}...")

        remote = GitCliRemoteOps(runner=runner, path=path)
        cloned = remote.clone(remote_url)
        if isinstance(cloned, Err):
            return Err(CloneFailure(remote_url=remote_url, path=path, cause=cloned.error))

        return Ok(
            cls(
                path=path,
                local=GitCliLocalOps(path),
                remote=remote,
                git_config=git_config,
                console=console,
            )
        )

    def __enter__(self) -> RepositoryClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._console.print(f"Working copy kept at {self.path}", Style.DIM)

    @property
    def closed(self) -> bool:
        return self._closed

    # -- local ---------------------------------------------------------------

    def checkout(self, branch_ref: str) -> Result[None, CheckoutFailure]:
        self._console.print(f"Checking out branch... {branch_ref}")
        result = self._local.checkout(branch_ref)
        if isinstance(result, Err):
            return Err(CheckoutFailure(ref=branch_ref, message=result.error.message))
        self.branch = branch_ref
        return Ok(None)

    def checkout_remote_branch(
        self, branch: str, remote: str | None = None
    ) -> Result[None, CheckoutFailure]:
        """Check out `<remote>/<branch>` (detached), default remote from config."""
        return self.checkout(f"{remote or self._git_config.remote}/{branch}")

    def has_pending_changes(self) -> bool:
        """True for staged, unstaged or untracked changes.

        A working copy whose status cannot be read counts as dirty.
        """
        result = self._local.status()
        match result:
            case Ok(status):
                return not status.is_clean
            case Err(_):
                return True

    def stage(self, path: Path | str) -> Result[None, GitError]:
        file_path = Path(path)
        if not file_path.is_absolute():
            file_path = self.path / file_path
        self._console.print(f"Staging... {file_path}")
        return self._local.stage(file_path)

    def commit(self, message: str) -> Result[CommitRef, GitError]:
        self._console.print("Committing...")
        return self._local.commit(message)

    def get_remote_url(self, remote: str | None = None) -> Result[str, GitError]:
        return self._local.remote_url(remote or self._git_config.remote)

    def get_head_commit(self) -> Result[CommitRef, GitError]:
        return self._local.head()

    # -- network -------------------------------------------------------------

    def fetch(self, remote: str | None = None) -> Result[None, CommandFailure]:
        self._console.print("Fetching from remote...")
        return self._remote.fetch(remote or self._git_config.remote)

    def push(self, remote_branch: str) -> Result[None, CommandFailure]:
        self._console.print("Pushing to remote...")
        return self._remote.push(self._git_config.remote, remote_branch)

    def force_push(self, remote_branch: str) -> Result[None, CommandFailure]:
        self._console.print("Force Pushing to remote...")
        return self._remote.push(self._git_config.remote, remote_branch, force=True)

    def squash_merge(self, commit: CommitRef, message: str) -> Result[None, CommandFailure]:
        self._console.print("Performing squash merge...")
        return self._remote.squash_merge(commit.sha, message)

    def add_remote(self, name: str, remote_url: str) -> Result[None, CommandFailure]:
        self._console.print(f"Adding remote {remote_url} as {name}...")
        return self._remote.add_remote(name, remote_url)


def clone_repository(
    remote_url: str,
    *,
    runner: CommandRunner,
    git_config: GitConfig,
    console: ConsoleProtocol,
) -> Result[RepositoryClient, CloneFailure]:
    """Default working-copy factory used by the release orchestrator."""
    return RepositoryClient.clone(
        remote_url, runner=runner, git_config=git_config, console=console
    )
