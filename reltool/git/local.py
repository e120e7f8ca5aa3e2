"""Local (non-network) operations on a working copy.

These read or mutate only the on-disk repository, so they are quick,
deterministic and never retried. `LocalRepositoryOps` is the capability the
RepositoryClient depends on; `GitCliLocalOps` implements it with the `git`
executable and captured output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from reltool.core.result import Err, Ok, Result
from reltool.platform.process import ProcessError
from reltool.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "CommitRef",
    "GitCliLocalOps",
    "GitError",
    "GitStatus",
    "LocalRepositoryOps",
    "StatusEntry",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a local git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message (git's stderr when available)
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1

    def describe(self) -> str:
        return f"git {self.command} failed: {self.message}"


@dataclass(frozen=True, slots=True)
class CommitRef:
    """An immutable commit identifier."""

    sha: str

    @property
    def short_sha(self) -> str:
        return self.sha[:8]


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """One `git status --porcelain` line: XY code and path."""

    xy: str
    path: str

    @property
    def is_staged(self) -> bool:
        return self.xy != "??" and self.xy[0] != " "

    @property
    def is_unstaged(self) -> bool:
        return self.xy != "??" and self.xy[1] != " "

    @property
    def is_untracked(self) -> bool:
        return self.xy == "??"


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Working tree state relative to HEAD."""

    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        return len(self.entries) == 0

    @property
    def staged(self) -> list[StatusEntry]:
        return [e for e in self.entries if e.is_staged]

    @property
    def unstaged(self) -> list[StatusEntry]:
        return [e for e in self.entries if e.is_unstaged]

    @property
    def untracked(self) -> list[StatusEntry]:
        return [e for e in self.entries if e.is_untracked]


class LocalRepositoryOps(Protocol):
    """In-process view of a working copy: synchronous, never retried."""

    def checkout(self, ref: str) -> Result[None, GitError]: ...

    def status(self) -> Result[GitStatus, GitError]: ...

    def stage(self, path: Path) -> Result[None, GitError]: ...

    def commit(self, message: str) -> Result[CommitRef, GitError]: ...

    def head(self) -> Result[CommitRef, GitError]: ...

    def remote_url(self, remote: str) -> Result[str, GitError]: ...


def parse_porcelain(output: str) -> GitStatus:
    """Parse `git status --porcelain=v1` output (no branch line)."""
    entries: list[StatusEntry] = []
    for line in output.splitlines():
        if len(line) < 4:
            continue
        if line.startswith("?? "):
            entries.append(StatusEntry(xy="??", path=line[3:]))
            continue
        entries.append(StatusEntry(xy=line[:2], path=line[3:]))
    return GitStatus(entries=tuple(entries))


class GitCliLocalOps:
    """LocalRepositoryOps backed by the `git` executable.

    Attributes:
        path: Working copy root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def checkout(self, ref: str) -> Result[None, GitError]:
        result = self._run(["checkout", ref])
        if isinstance(result, Err):
            return Err(self._error("checkout", result.error, fallback=f"unknown ref {ref}"))
        return Ok(None)

    def status(self) -> Result[GitStatus, GitError]:
        result = self._run(["status", "--porcelain=v1", "--untracked-files=all"])
        match result:
            case Err(e):
                return Err(self._error("status", e, fallback="git status failed"))
            case Ok(stdout):
                return Ok(parse_porcelain(stdout))

    def stage(self, path: Path) -> Result[None, GitError]:
        result = self._run(["add", "--", str(path)])
        if isinstance(result, Err):
            return Err(self._error("add", result.error, fallback=f"cannot stage {path}"))
        return Ok(None)

    def commit(self, message: str) -> Result[CommitRef, GitError]:
        # Author/committer come from git config; the timestamp is "now".
        result = self._run(["commit", "--allow-empty", "-m", message])
        if isinstance(result, Err):
            return Err(
                self._error(
                    "commit",
                    result.error,
                    fallback="Configure git user.name/user.email, then retry.",
                )
            )
        return self.head()

    def head(self) -> Result[CommitRef, GitError]:
        result = self._run(["rev-parse", "HEAD"])
        match result:
            case Err(e):
                return Err(self._error("rev-parse", e, fallback="no HEAD commit"))
            case Ok(stdout):
                return Ok(CommitRef(sha=stdout.strip()))

    def remote_url(self, remote: str) -> Result[str, GitError]:
        result = self._run(["remote", "get-url", "--push", remote])
        match result:
            case Err(e):
                return Err(self._error("remote get-url", e, fallback=f"no remote {remote}"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )

    @staticmethod
    def _error(command: str, error: ProcessError, *, fallback: str) -> GitError:
        return GitError(
            command=command,
            message=error.stderr.strip() or error.stdout.strip() or fallback,
            returncode=error.returncode,
        )
