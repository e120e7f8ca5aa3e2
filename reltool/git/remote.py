"""Network operations on a working copy.

Every operation here talks to a git server, so each one goes through the
CommandRunner and its retry policy. Output is streamed, not captured: SSH
passphrase prompts and transfer progress must reach the operator.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from reltool.core.result import Result
from reltool.platform.runner import CommandFailure, CommandRunner

__all__ = ["GitCliRemoteOps", "RemoteRepositoryOps"]

_GIT = "git"


class RemoteRepositoryOps(Protocol):
    """Out-of-process, retryable repository operations."""

    def clone(self, remote_url: str) -> Result[None, CommandFailure]: ...

    def fetch(self, remote: str) -> Result[None, CommandFailure]: ...

    def push(self, remote: str, branch: str, *, force: bool = False) -> Result[None, CommandFailure]: ...

    def squash_merge(self, sha: str, message: str) -> Result[None, CommandFailure]: ...

    def add_remote(self, name: str, remote_url: str) -> Result[None, CommandFailure]: ...


class GitCliRemoteOps:
    """RemoteRepositoryOps backed by `git` through a CommandRunner."""

    def __init__(self, *, runner: CommandRunner, path: Path) -> None:
        self.runner = runner
        self.path = path

    def clone(self, remote_url: str) -> Result[None, CommandFailure]:
        return self._git(["clone", remote_url, str(self.path)], "clone repository")

    def fetch(self, remote: str) -> Result[None, CommandFailure]:
        return self._git(["fetch", remote], "fetch")

    def push(self, remote: str, branch: str, *, force: bool = False) -> Result[None, CommandFailure]:
        args = ["push", remote, f"HEAD:refs/heads/{branch}"]
        if force:
            args.append("-f")
            return self._git(args, "force push branch")
        return self._git(args, "push branch")

    def squash_merge(self, sha: str, message: str) -> Result[None, CommandFailure]:
        return self._git(["merge", "--squash", sha, "-m", message], "squash merge")

    def add_remote(self, name: str, remote_url: str) -> Result[None, CommandFailure]:
        return self._git(["remote", "add", name, remote_url], "add remote")

    def _git(self, args: list[str], description: str) -> Result[None, CommandFailure]:
        return self.runner.run(_GIT, args, self.path, description=description)
