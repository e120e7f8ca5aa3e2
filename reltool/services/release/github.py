"""GitHub REST access through the `gh` CLI.

Every call is a blocking `gh api` invocation with the API token passed in
`GH_TOKEN`. Nothing here retries: a failed GitHub call is reported to the
orchestrator as-is.
"""

from __future__ import annotations

import json
import os
import re
import shutil
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO
from urllib.parse import quote

from reltool.core.result import Err, Ok, Result
from reltool.core.structured import StrDict, as_str_dict, get_bool, get_int, get_str
from reltool.git.local import CommitRef
from reltool.output.console import ConsoleProtocol, Style
from reltool.platform.process import run as run_process
from reltool.services.release.errors import (
    NotFoundFailure,
    RemoteHostFailure,
    UnrecognizedRemoteFailure,
)
from reltool.services.release.refs import parse_remote_url

__all__ = [
    "GH_TIMEOUT_SECONDS",
    "GitHubClient",
    "GitHubRepository",
    "MergeResult",
    "PullRequest",
    "ReleaseAsset",
    "ReleaseDraft",
]

GH_TIMEOUT_SECONDS = 60.0
GH_UPLOAD_TIMEOUT_SECONDS = 15 * 60.0

_HTTP_STATUS_RE = re.compile(r"HTTP (\d{3})")
# "https://uploads.github.com/repos/o/r/releases/1/assets{?name,label}"
_URI_TEMPLATE_RE = re.compile(r"\{[^}]*\}$")

# Statuses GitHub uses for "the merge did not happen" on PUT .../merge.
_MERGE_REFUSED_STATUSES = frozenset({405, 409})


@dataclass(frozen=True, slots=True)
class GitHubRepository:
    id: int
    owner: str
    name: str
    default_branch: str | None = None
    html_url: str | None = None

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True, slots=True)
class MergeResult:
    merged: bool
    message: str
    sha: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseDraft:
    """A release created on GitHub. Never mutated once returned."""

    id: int
    tag: str
    name: str
    body: str
    target_commit: CommitRef
    html_url: str
    upload_url: str
    is_draft: bool = True


@dataclass(frozen=True, slots=True)
class ReleaseAsset:
    id: int
    name: str
    content_type: str
    download_url: str | None = None


@dataclass(frozen=True, slots=True)
class PullRequest:
    number: int
    html_url: str


@dataclass(frozen=True, slots=True)
class _ApiError:
    status: int | None
    message: str
    payload: StrDict | None


def _parse_json_object(text: str) -> StrDict | None:
    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError:
        return None
    return as_str_dict(obj)


class GitHubClient:
    """Synchronous facade over the GitHub REST API.

    Attributes:
        host: GitHub hostname (github.com unless GitHub Enterprise)
    """

    def __init__(
        self,
        *,
        token: str | None,
        console: ConsoleProtocol,
        host: str = "github.com",
        workspace_root: Path | None = None,
    ) -> None:
        self.host = host
        self._token = token
        self._console = console
        self._workspace_root = workspace_root

    # -- repository ----------------------------------------------------------

    def resolve_repository(
        self, remote_url: str
    ) -> Result[GitHubRepository, UnrecognizedRemoteFailure | NotFoundFailure | RemoteHostFailure]:
        """Look up the GitHub repository behind a git remote URL."""
        parsed = parse_remote_url(remote_url)
        if isinstance(parsed, Err):
            return Err(UnrecognizedRemoteFailure(remote_url=remote_url))
        ref = parsed.value

        result = self._api(f"repos/{ref.owner}/{ref.name}")
        if isinstance(result, Err):
            if result.error.status == 404:
                return Err(NotFoundFailure(owner=ref.owner, name=ref.name))
            return Err(self._failure("get repository", result.error))

        data = result.value
        repo_id = get_int(data, "id")
        if repo_id is None:
            return Err(RemoteHostFailure("get repository", "response has no repository id"))

        return Ok(
            GitHubRepository(
                id=repo_id,
                owner=ref.owner,
                name=ref.name,
                default_branch=get_str(data, "default_branch"),
                html_url=get_str(data, "html_url"),
            )
        )

    # -- pull requests -------------------------------------------------------

    def merge_pull_request(
        self, repository: GitHubRepository, pull_request_id: int
    ) -> Result[MergeResult, RemoteHostFailure]:
        """Squash-merge a pull request server side.

        A refusal to merge (not mergeable, head changed, conflicts) comes back
        as Ok(MergeResult(merged=False)); only transport and auth problems
        are failures.
        """
        self._console.print(f"Merging pull request #{pull_request_id}...")
        result = self._api(
            f"repos/{repository.slug}/pulls/{pull_request_id}/merge",
            method="PUT",
            fields=(("merge_method", "squash"),),
        )
        if isinstance(result, Err):
            error = result.error
            if error.status in _MERGE_REFUSED_STATUSES:
                return Ok(MergeResult(merged=False, message=error.message))
            return Err(self._failure("merge pull request", error))

        data = result.value
        return Ok(
            MergeResult(
                merged=get_bool(data, "merged") is True,
                message=get_str(data, "message") or "",
                sha=get_str(data, "sha"),
            )
        )

    def create_pull_request(
        self,
        repository: GitHubRepository,
        *,
        head: str,
        base: str,
        title: str,
        body: str = "",
    ) -> Result[PullRequest, RemoteHostFailure]:
        result = self._api(
            f"repos/{repository.slug}/pulls",
            method="POST",
            fields=(("title", title), ("head", head), ("base", base), ("body", body)),
        )
        if isinstance(result, Err):
            return Err(self._failure("create pull request", result.error))

        data = result.value
        number = get_int(data, "number")
        html_url = get_str(data, "html_url")
        if number is None or html_url is None:
            return Err(RemoteHostFailure("create pull request", "unexpected pull request payload"))
        return Ok(PullRequest(number=number, html_url=html_url))

    # -- releases ------------------------------------------------------------

    def create_draft_release(
        self,
        repository: GitHubRepository,
        *,
        tag: str,
        body: str,
        name: str,
        target_commit: CommitRef,
    ) -> Result[ReleaseDraft, RemoteHostFailure]:
        """Create a draft release. Publishing is left to a human."""
        self._console.print(f"Drafting release {tag} at {target_commit.short_sha}...")
        result = self._api(
            f"repos/{repository.slug}/releases",
            method="POST",
            fields=(
                ("tag_name", tag),
                ("name", name),
                ("body", body),
                ("target_commitish", target_commit.sha),
            ),
            typed_fields=(("draft", "true"),),
        )
        if isinstance(result, Err):
            return Err(self._failure("create draft release", result.error))

        data = result.value
        release_id = get_int(data, "id")
        html_url = get_str(data, "html_url")
        upload_url = get_str(data, "upload_url")
        if release_id is None or html_url is None or upload_url is None:
            return Err(RemoteHostFailure("create draft release", "unexpected release payload"))

        return Ok(
            ReleaseDraft(
                id=release_id,
                tag=tag,
                name=name,
                body=body,
                target_commit=target_commit,
                html_url=html_url,
                upload_url=upload_url,
            )
        )

    def upload_asset(
        self,
        release: ReleaseDraft,
        *,
        file_name: str,
        content_type: str,
        data: BinaryIO,
    ) -> Result[ReleaseAsset, RemoteHostFailure]:
        """Attach the contents of `data` to a draft release as `file_name`."""
        url = _URI_TEMPLATE_RE.sub("", release.upload_url) + f"?name={quote(file_name)}"
        self._console.print(f"Uploading {file_name} to release {release.tag}...")

        with tempfile.TemporaryDirectory(prefix="reltool-asset-") as tmp:
            staged = Path(tmp) / "asset"
            with staged.open("wb") as out:
                shutil.copyfileobj(data, out)

            result = self._api(
                url,
                method="POST",
                headers=(f"Content-Type: {content_type}",),
                input_path=staged,
                timeout=GH_UPLOAD_TIMEOUT_SECONDS,
            )

        if isinstance(result, Err):
            return Err(self._failure("upload release asset", result.error))

        payload = result.value
        asset_id = get_int(payload, "id")
        if asset_id is None:
            return Err(RemoteHostFailure("upload release asset", "unexpected asset payload"))
        return Ok(
            ReleaseAsset(
                id=asset_id,
                name=get_str(payload, "name") or file_name,
                content_type=get_str(payload, "content_type") or content_type,
                download_url=get_str(payload, "browser_download_url"),
            )
        )

    # -- plumbing ------------------------------------------------------------

    def _api(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        fields: Sequence[tuple[str, str]] = (),
        typed_fields: Sequence[tuple[str, str]] = (),
        headers: Sequence[str] = (),
        input_path: Path | None = None,
        timeout: float = GH_TIMEOUT_SECONDS,
    ) -> Result[StrDict, _ApiError]:
        cmd = ["gh", "api", "--method", method]
        if self.host != "github.com":
            cmd.extend(["--hostname", self.host])
        for header in headers:
            cmd.extend(["-H", header])
        for key, value in fields:
            cmd.extend(["-f", f"{key}={value}"])
        for key, value in typed_fields:
            cmd.extend(["-F", f"{key}={value}"])
        if input_path is not None:
            cmd.extend(["--input", str(input_path)])
        cmd.append(endpoint)

        self._console.print(f"gh api --method {method} {endpoint}", Style.DIM)
        result = run_process(cmd, cwd=self._cwd(), env=self._env(), timeout=timeout)
        if isinstance(result, Err):
            e = result.error
            status_match = _HTTP_STATUS_RE.search(e.stderr)
            payload = _parse_json_object(e.stdout)
            message = (payload and get_str(payload, "message")) or e.stderr.strip() or str(e)
            return Err(
                _ApiError(
                    status=int(status_match.group(1)) if status_match else None,
                    message=message,
                    payload=payload,
                )
            )

        data = _parse_json_object(result.value)
        if data is None:
            return Err(_ApiError(status=None, message="gh api returned invalid JSON", payload=None))
        return Ok(data)

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        if self._token:
            env["GH_TOKEN"] = self._token
        return env

    def _cwd(self) -> Path:
        return self._workspace_root or Path.cwd()

    @staticmethod
    def _failure(operation: str, error: _ApiError) -> RemoteHostFailure:
        cause = error.message
        if error.status is not None:
            cause = f"HTTP {error.status}: {cause}"
        return RemoteHostFailure(operation=operation, cause=cause)
