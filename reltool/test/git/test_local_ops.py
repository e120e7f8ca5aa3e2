"""Tests for git/local.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from reltool.core.result import Err, Ok, Result
from reltool.git import local as local_mod
from reltool.git.local import CommitRef, GitCliLocalOps, StatusEntry, parse_porcelain
from reltool.platform.process import ProcessError

_SHA = "0123456789abcdef0123456789abcdef01234567"


class _FakeGit:
    """Maps a git subcommand to a canned stdout or error."""

    def __init__(self, responses: dict[str, Result[str, ProcessError]]) -> None:
        self.responses = responses
        self.calls: list[list[str]] = []

    def __call__(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        del cwd, env, timeout
        self.calls.append(cmd)
        # cmd = ["git", "-C", path, subcommand, ...]
        return self.responses[cmd[3]]


def _fail(stderr: str, returncode: int = 1) -> Err[ProcessError]:
    return Err(ProcessError(command=("git",), returncode=returncode, stdout="", stderr=stderr))


class TestStatusParsing:
    def test_empty_output_is_clean(self) -> None:
        assert parse_porcelain("").is_clean

    def test_entries(self) -> None:
        status = parse_porcelain("M  staged.py\n M unstaged.py\n?? new.txt\n")

        assert not status.is_clean
        assert [e.path for e in status.staged] == ["staged.py"]
        assert [e.path for e in status.unstaged] == ["unstaged.py"]
        assert [e.path for e in status.untracked] == ["new.txt"]

    def test_status_entry_flags(self) -> None:
        entry = StatusEntry(xy="MM", path="both.py")
        assert entry.is_staged and entry.is_unstaged and not entry.is_untracked


class TestGitCliLocalOps:
    def test_head(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        fake = _FakeGit({"rev-parse": Ok(f"{_SHA}\n")})
        monkeypatch.setattr(local_mod, "run_process", fake)

        result = GitCliLocalOps(tmp_path).head()

        assert result == Ok(CommitRef(sha=_SHA))
        assert fake.calls == [["git", "-C", str(tmp_path), "rev-parse", "HEAD"]]

    def test_checkout_unknown_ref(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        fake = _FakeGit(
            {"checkout": _fail("error: pathspec 'origin/nope' did not match any file(s)")}
        )
        monkeypatch.setattr(local_mod, "run_process", fake)

        result = GitCliLocalOps(tmp_path).checkout("origin/nope")

        assert isinstance(result, Err)
        assert result.error.command == "checkout"
        assert "did not match" in result.error.message

    def test_commit_allows_empty_and_returns_head(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        fake = _FakeGit({"commit": Ok(""), "rev-parse": Ok(_SHA)})
        monkeypatch.setattr(local_mod, "run_process", fake)

        result = GitCliLocalOps(tmp_path).commit("Release 1.0.0")

        assert result == Ok(CommitRef(sha=_SHA))
        assert fake.calls[0][3:] == ["commit", "--allow-empty", "-m", "Release 1.0.0"]

    def test_commit_failure_hint(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setattr(local_mod, "run_process", _FakeGit({"commit": _fail("")}))

        result = GitCliLocalOps(tmp_path).commit("msg")

        assert isinstance(result, Err)
        assert "user.name" in result.error.message

    def test_remote_url_uses_push_url(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        fake = _FakeGit({"remote": Ok("git@github.com:spatialos/gdk-for-unity.git\n")})
        monkeypatch.setattr(local_mod, "run_process", fake)

        result = GitCliLocalOps(tmp_path).remote_url("origin")

        assert result == Ok("git@github.com:spatialos/gdk-for-unity.git")
        assert fake.calls[0][3:] == ["remote", "get-url", "--push", "origin"]

    def test_status_includes_untracked(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        fake = _FakeGit({"status": Ok("?? notes.md\n")})
        monkeypatch.setattr(local_mod, "run_process", fake)

        result = GitCliLocalOps(tmp_path).status()

        assert isinstance(result, Ok)
        assert [e.path for e in result.value.untracked] == ["notes.md"]
