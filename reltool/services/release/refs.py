"""URL grammar for pull requests and git remotes.

Two fixed patterns, each behind a pure function that returns a complete
record or a ParseFailure. There is no partially-parsed result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from reltool.core.result import Err, Ok, Result
from reltool.services.release.errors import ParseFailure

__all__ = [
    "ChangeRequestRef",
    "RemoteRepositoryRef",
    "parse_pull_request_url",
    "parse_remote_url",
]

# https://github.com/<owner>/<repo>/pull/<id>, optionally followed by /files, #..., ?...
_PULL_REQUEST_RE = re.compile(
    r"^(?:(?:.*/)?(?P<owner>[^/\s]+)/)?(?P<repo>[^/\s]+)/pull/(?P<id>[^/?#\s]*)(?:[/?#].*)?$"
)

# https://host/owner/name.git or git@host:owner/name.git
_REMOTE_URL_RE = re.compile(
    r"^(?:https://[^/\s]+/|git@[^:\s]+:)(?P<owner>[^/\s]+)/(?P<name>[^/\s]+?)\.git$"
)


@dataclass(frozen=True, slots=True)
class RemoteRepositoryRef:
    owner: str
    name: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True, slots=True)
class ChangeRequestRef:
    repository_name: str
    id: int
    owner: str | None = None


def parse_pull_request_url(url: str) -> Result[ChangeRequestRef, ParseFailure]:
    """Extract `(repository name, pull request id)` from a pull request URL.

    The owner segment is kept when the URL has one; a bare `repo/pull/<id>`
    parses with `owner=None`.
    """
    match = _PULL_REQUEST_RE.match(url.strip())
    if match is None:
        return Err(ParseFailure(value=url, reason="Malformed pull request url"))

    raw_id = match.group("id")
    if not raw_id.isascii() or not raw_id.isdigit():
        return Err(
            ParseFailure(
                value=url,
                reason=f"Expected number for pull request id, received '{raw_id}'",
            )
        )

    pull_request_id = int(raw_id)
    if pull_request_id < 1:
        return Err(ParseFailure(value=url, reason="Pull request id must be positive"))

    return Ok(
        ChangeRequestRef(
            repository_name=match.group("repo"),
            id=pull_request_id,
            owner=match.group("owner"),
        )
    )


def parse_remote_url(remote_url: str) -> Result[RemoteRepositoryRef, ParseFailure]:
    """Extract `owner/name` from an HTTPS or SSH git remote URL."""
    match = _REMOTE_URL_RE.match(remote_url.strip())
    if match is None:
        return Err(ParseFailure(value=remote_url, reason="Not a recognized git remote url"))
    return Ok(RemoteRepositoryRef(owner=match.group("owner"), name=match.group("name")))
