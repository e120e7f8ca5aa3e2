"""End-to-end release of a merged release candidate.

The workflow is strictly sequential and each step depends on the previous
one:

    1. parse the pull request URL and pick the release template
    2. resolve the GitHub repository
    3. squash-merge the pull request into the development branch
    4. clone the repository, fetch, check out <remote>/<dev-branch>
    5. extract the release notes from CHANGELOG.md
    6. render the release name and body
    7. create a draft release targeting HEAD
    8. record the release hash in the metadata sink (primary project only)

The first failure stops the run. Nothing is rolled back: a merged pull
request stays merged, and the operator re-runs or finishes by hand.
Fast-forwarding master and publishing the draft are left to the release
sheriff.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from reltool.core.config import Config
from reltool.core.result import Err, Ok, Result
from reltool.git.client import CloneFailure, RepositoryClient
from reltool.git.local import CommitRef
from reltool.output.console import ConsoleProtocol, Style
from reltool.services.release.changelog import read_release_notes
from reltool.services.release.errors import (
    MergeRejected,
    NotFoundFailure,
    ParseFailure,
    ReleaseFailure,
    RemoteHostFailure,
    UnrecognizedRemoteFailure,
)
from reltool.services.release.github import GitHubRepository, MergeResult, ReleaseDraft
from reltool.services.release.metadata import MetadataSink
from reltool.services.release.refs import ChangeRequestRef, parse_pull_request_url
from reltool.services.release.templates import ReleaseTemplate, lookup_template, render_release

__all__ = [
    "ReleaseOptions",
    "ReleaseOrchestrator",
    "RemoteHost",
    "RunResult",
    "WorkingCopyFactory",
    "validate_version",
]

_VERSION_RE = re.compile(r"^[0-9A-Za-z][0-9A-Za-z._+-]*$")


class RemoteHost(Protocol):
    """The slice of GitHubClient the release workflow needs."""

    def resolve_repository(
        self, remote_url: str
    ) -> Result[GitHubRepository, UnrecognizedRemoteFailure | NotFoundFailure | RemoteHostFailure]: ...

    def merge_pull_request(
        self, repository: GitHubRepository, pull_request_id: int
    ) -> Result[MergeResult, RemoteHostFailure]: ...

    def create_draft_release(
        self,
        repository: GitHubRepository,
        *,
        tag: str,
        body: str,
        name: str,
        target_commit: CommitRef,
    ) -> Result[ReleaseDraft, RemoteHostFailure]: ...


WorkingCopyFactory = Callable[[str], Result[RepositoryClient, CloneFailure]]


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    """Per-run inputs besides version and pull request URL.

    Attributes:
        github_user: Account owning the fork used for release branches
        git_repository_name: Repository name of that fork
    """

    github_user: str
    git_repository_name: str


@dataclass(frozen=True, slots=True)
class RunResult:
    repository: GitHubRepository
    pull_request: ChangeRequestRef
    commit: CommitRef
    release: ReleaseDraft
    metadata_written: bool = False


def validate_version(version: str) -> Result[str, ParseFailure]:
    """Reject versions that cannot be used as a git tag."""
    value = version.strip()
    if not _VERSION_RE.match(value) or ".." in value or value.endswith((".", ".lock")):
        return Err(ParseFailure(value=version, reason="Malformed release version"))
    return Ok(value)


class ReleaseOrchestrator:
    """Sequences the release workflow over injected collaborators."""

    def __init__(
        self,
        *,
        github: RemoteHost,
        clone: WorkingCopyFactory,
        config: Config,
        console: ConsoleProtocol,
        metadata_sink: MetadataSink | None = None,
    ) -> None:
        self._github = github
        self._clone = clone
        self._config = config
        self._console = console
        self._metadata_sink = metadata_sink

    def run_release(
        self,
        version: str,
        pull_request_url: str,
        options: ReleaseOptions,
    ) -> Result[RunResult, ReleaseFailure]:
        # Nothing external happens until every input has been validated.
        checked_version = validate_version(version)
        if isinstance(checked_version, Err):
            return checked_version
        version = checked_version.value

        parsed = parse_pull_request_url(pull_request_url)
        if isinstance(parsed, Err):
            return parsed
        pull_request = parsed.value
        repo_name = pull_request.repository_name

        github_cfg = self._config.github
        if pull_request.owner is not None and (
            pull_request.owner.casefold() != github_cfg.org.casefold()
        ):
            return Err(
                ParseFailure(
                    value=pull_request_url,
                    reason=f"Pull request is not in the {github_cfg.org} organization",
                )
            )

        template = lookup_template(repo_name)
        if isinstance(template, Err):
            return template

        remote_url = github_cfg.remote_url(github_cfg.org, repo_name)
        fork_url = github_cfg.remote_url(options.github_user, options.git_repository_name)
        self._console.header(f"Releasing {repo_name} {version}")
        self._console.print(f"upstream: {remote_url}", Style.DIM)
        self._console.print(f"fork: {fork_url}", Style.DIM)

        repository = self._github.resolve_repository(remote_url)
        if isinstance(repository, Err):
            return repository

        merged = self._github.merge_pull_request(repository.value, pull_request.id)
        if isinstance(merged, Err):
            return merged
        if not merged.value.merged:
            return Err(MergeRejected(pull_request_url=pull_request_url, message=merged.value.message))
        self._console.success(f"merged pull request #{pull_request.id}")

        cloned = self._clone(remote_url)
        if isinstance(cloned, Err):
            return cloned

        with cloned.value as working_copy:
            return self._release_from_working_copy(
                working_copy,
                repository=repository.value,
                pull_request=pull_request,
                template=template.value,
                version=version,
            )

    def _release_from_working_copy(
        self,
        working_copy: RepositoryClient,
        *,
        repository: GitHubRepository,
        pull_request: ChangeRequestRef,
        template: ReleaseTemplate,
        version: str,
    ) -> Result[RunResult, ReleaseFailure]:
        fetched = working_copy.fetch()
        if isinstance(fetched, Err):
            return fetched

        checked_out = working_copy.checkout_remote_branch(self._config.git.dev_branch)
        if isinstance(checked_out, Err):
            return checked_out

        head = working_copy.get_head_commit()
        if isinstance(head, Err):
            return head

        changelog_path = working_copy.path / self._config.release.changelog
        self._console.print(f"Reading {changelog_path.name}...")
        notes = read_release_notes(changelog_path)
        if isinstance(notes, Err):
            return notes

        rendered = render_release(template, version=version, changelog=notes.value)
        release = self._github.create_draft_release(
            repository,
            tag=version,
            body=rendered.body,
            name=rendered.name,
            target_commit=head.value,
        )
        if isinstance(release, Err):
            return release

        self._console.success("Release Successful!")
        self._console.print(f"Release hash: {head.value.sha}")
        self._console.print(f"Draft release: {release.value.html_url}")

        metadata_written = False
        release_cfg = self._config.release
        if repository.name == release_cfg.primary_project and self._metadata_sink is not None:
            written = self._metadata_sink.write(release_cfg.metadata_key, head.value.sha)
            if isinstance(written, Err):
                return written
            metadata_written = True

        return Ok(
            RunResult(
                repository=repository,
                pull_request=pull_request,
                commit=head.value,
                release=release.value,
                metadata_written=metadata_written,
            )
        )
