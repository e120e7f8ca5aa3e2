"""External command execution with an operator-facing retry policy.

Network git operations fail for transient reasons (VPN drops, expired SSH
agent, GitHub hiccups). In attended mode the operator decides whether to try
again; in unattended mode (CI) the first non-zero exit is final.

Usage:
    runner = CommandRunner(policy=PromptingRetry(prompt=typer.prompt), console=console)
    match runner.run("git", ["fetch", "origin"], repo_root, description="fetch"):
        case Ok(_):
            ...
        case Err(failure):
            console.error(failure.describe())
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from reltool.core.result import Err, Ok, Result
from reltool.output.console import ConsoleProtocol, Style
from reltool.platform.process import run_silent as run_process

__all__ = [
    "CommandFailure",
    "CommandRunner",
    "FailFast",
    "PromptFn",
    "PromptingRetry",
    "RetryPolicy",
]

PromptFn = Callable[[str], str]


@dataclass(frozen=True, slots=True)
class CommandFailure:
    """A command exited non-zero and no retry was (or will be) made."""

    description: str
    exit_code: int
    command: tuple[str, ...] = ()

    def describe(self) -> str:
        return f"Failed to {self.description} (exit {self.exit_code})."


@dataclass(frozen=True, slots=True)
class FailFast:
    """Unattended mode: the first failure is final."""


@dataclass(frozen=True, slots=True)
class PromptingRetry:
    """Attended mode: ask the operator before giving up.

    `prompt` receives the question and returns the raw answer.
    """

    prompt: PromptFn


RetryPolicy = FailFast | PromptingRetry


def _wants_retry(prompt: PromptFn, description: str) -> bool:
    question = f"Failed to {description}. Retry (y/n)?"
    while True:
        answer = prompt(question).strip().lower()
        if answer == "y":
            return True
        if answer == "n":
            return False


class CommandRunner:
    """Runs external executables under a RetryPolicy.

    Attributes:
        policy: FailFast or PromptingRetry.
    """

    def __init__(
        self,
        *,
        policy: RetryPolicy,
        console: ConsoleProtocol,
    ) -> None:
        self.policy = policy
        self._console = console

    def run(
        self,
        executable: str,
        arguments: Sequence[str],
        working_directory: Path,
        *,
        description: str,
    ) -> Result[None, CommandFailure]:
        """Run `executable arguments` until it succeeds or the policy gives up.

        Args:
            executable: Program to run (resolved through PATH).
            arguments: Arguments, passed without shell interpretation.
            working_directory: Directory the command runs in.
            description: Human-readable verb phrase, e.g. "push branch".

        Returns:
            Ok(None) once an attempt exits 0, Err(CommandFailure) otherwise.
        """
        cmd = [executable, *arguments]
        while True:
            self._console.print(
                f"Attempting to {description}. Running command [{' '.join(cmd)}]",
                Style.DIM,
            )
            result = run_process(cmd, cwd=working_directory)

            # Separates git's own output from ours.
            self._console.newline()

            if isinstance(result, Ok):
                return Ok(None)

            failure = CommandFailure(
                description=description,
                exit_code=result.error.returncode,
                command=tuple(cmd),
            )
            match self.policy:
                case FailFast():
                    return Err(failure)
                case PromptingRetry(prompt=prompt):
                    if not _wants_retry(prompt, description):
                        return Err(failure)
