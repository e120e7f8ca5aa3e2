from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import NoReturn

import typer

from reltool.core.config import (
    DEFAULT_CONFIG_FILENAME,
    Config,
    GitConfig,
    load_config,
    load_config_or_default,
)
from reltool.core.errors import ErrorCode
from reltool.core.result import Err
from reltool.git.client import clone_repository
from reltool.output.console import ConsoleProtocol, RichConsole, Style
from reltool.output.errors import print_release_failure, release_failure_exit_code
from reltool.platform.runner import CommandRunner, FailFast, PromptingRetry, RetryPolicy
from reltool.services.release.credentials import load_github_token
from reltool.services.release.github import GitHubClient
from reltool.services.release.metadata import FileMetadataSink
from reltool.services.release.orchestrator import ReleaseOptions, ReleaseOrchestrator


def _exit(err: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=int(code))


def _prompt(question: str) -> str:
    return typer.prompt(question, default="", show_default=False)


def _load_config(path: Path | None) -> Config:
    if path is None:
        loaded = load_config_or_default(Path.cwd() / DEFAULT_CONFIG_FILENAME)
    else:
        loaded = load_config(path)
    if isinstance(loaded, Err):
        _exit(loaded.error.message, code=ErrorCode.FAILURE)
    return loaded.value


def _apply_overrides(
    config: Config,
    *,
    git_remote: str | None,
    dev_branch: str | None,
    master_branch: str | None,
) -> Config:
    git = config.git
    return Config(
        github=config.github,
        git=GitConfig(
            remote=git_remote or git.remote,
            dev_branch=dev_branch or git.dev_branch,
            master_branch=master_branch or git.master_branch,
        ),
        release=config.release,
    )


def build_orchestrator(
    *,
    config: Config,
    token: str,
    policy: RetryPolicy,
    metadata_file: Path | None,
    console: ConsoleProtocol,
) -> ReleaseOrchestrator:
    runner = CommandRunner(policy=policy, console=console)
    return ReleaseOrchestrator(
        github=GitHubClient(token=token, console=console, host=config.github.host),
        clone=partial(clone_repository, runner=runner, git_config=config.git, console=console),
        config=config,
        console=console,
        metadata_sink=FileMetadataSink(metadata_file) if metadata_file is not None else None,
    )


def release(
    version: str = typer.Argument(..., help="The version that is being released."),
    pull_request_url: str = typer.Option(
        ...,
        "--pull-request-url",
        "-u",
        help="The link to the release candidate branch to merge.",
    ),
    github_user: str = typer.Option(
        ..., "--github-user", help="The user account that is using this."
    ),
    git_repository_name: str = typer.Option(
        ..., "--git-repository-name", help="The Git repository that we are targeting."
    ),
    github_key: str | None = typer.Option(
        None,
        "--github-key",
        help="The github API token. If this is set, this will override the github-key-file.",
    ),
    github_key_file: str | None = typer.Option(
        None,
        "--github-key-file",
        help="The location of the github token file. [default: ~/.ssh/github.token]",
    ),
    git_remote: str | None = typer.Option(
        None, "--git-remote", help="The git remote to push branches to. [default: origin]"
    ),
    dev_branch: str | None = typer.Option(
        None, "--dev-branch", help="The development branch. [default: develop]"
    ),
    master_branch: str | None = typer.Option(
        None, "--master-branch", help="The master branch. [default: master]"
    ),
    unattended: bool = typer.Option(
        False, "--unattended", help="Fail on the first git error instead of asking to retry."
    ),
    metadata_file: Path | None = typer.Option(
        None, "--metadata-file", help="Write build metadata (release hash) to this file."
    ),
    config_path: Path | None = typer.Option(
        None, "--config", help=f"Config file [default: ./{DEFAULT_CONFIG_FILENAME} if present]"
    ),
) -> None:
    """Merge a release branch and create a github release draft."""
    config = _apply_overrides(
        _load_config(config_path),
        git_remote=git_remote,
        dev_branch=dev_branch,
        master_branch=master_branch,
    )
    console = RichConsole()

    token = load_github_token(
        token=github_key,
        token_file=github_key_file or config.github.token_file,
    )
    if isinstance(token, Err):
        print_release_failure(token.error, console)
        raise typer.Exit(code=release_failure_exit_code(token.error))

    policy: RetryPolicy = FailFast() if unattended else PromptingRetry(prompt=_prompt)
    orchestrator = build_orchestrator(
        config=config,
        token=token.value,
        policy=policy,
        metadata_file=metadata_file,
        console=console,
    )

    result = orchestrator.run_release(
        version,
        pull_request_url,
        ReleaseOptions(github_user=github_user, git_repository_name=git_repository_name),
    )
    if isinstance(result, Err):
        print_release_failure(result.error, console)
        raise typer.Exit(code=release_failure_exit_code(result.error))

    console.print(
        "Fast-forward master and publish the draft when ready.",
        Style.DIM,
    )
