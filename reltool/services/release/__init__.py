"""Release workflow: merge, extract notes, draft the GitHub release."""

from __future__ import annotations

from reltool.services.release.changelog import extract_release_notes, read_release_notes
from reltool.services.release.github import GitHubClient
from reltool.services.release.orchestrator import ReleaseOptions, ReleaseOrchestrator, RunResult
from reltool.services.release.refs import parse_pull_request_url, parse_remote_url

__all__ = [
    "GitHubClient",
    "ReleaseOptions",
    "ReleaseOrchestrator",
    "RunResult",
    "extract_release_notes",
    "parse_pull_request_url",
    "parse_remote_url",
    "read_release_notes",
]
