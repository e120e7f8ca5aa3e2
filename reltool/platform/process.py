"""Subprocess primitives returning Result values.

`run` captures output (used for `git rev-parse`, `gh api` and other calls
whose stdout is parsed). `run_silent` lets output stream to the terminal
(used for clone/fetch/push so the operator sees git's progress and any
credential prompt).
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from reltool.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_silent"]

# returncode used when no exit status exists (spawn failure, timeout)
NO_EXIT_STATUS = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not be started or exited non-zero.

    Attributes:
        command: argv as executed
        returncode: exit code, NO_EXIT_STATUS if the process never ran or timed out
        stdout: captured standard output (empty for `run_silent`)
        stderr: captured standard error, or the OS / timeout error text
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def describe(self) -> str:
        detail = self.stderr.strip()
        return f"{self}: {detail}" if detail else str(self)

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def _invoke(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None,
    *,
    capture: bool,
    timeout: float | None = None,
) -> Result[subprocess.CompletedProcess[str], ProcessError]:
    argv = tuple(cmd)
    try:
        if capture:
            proc = subprocess.run(
                cmd,
                cwd=str(cwd),
                env=env,
                capture_output=True,
                encoding="utf-8",
                timeout=timeout,
                check=False,
            )
        else:
            proc = subprocess.run(cmd, cwd=str(cwd), env=env, text=True, check=False)
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return Err(ProcessError(argv, NO_EXIT_STATUS, partial, f"Command timed out after {timeout}s"))
    except OSError as e:
        return Err(ProcessError(argv, NO_EXIT_STATUS, "", str(e)))

    if proc.returncode != 0:
        return Err(ProcessError(argv, proc.returncode, proc.stdout or "", proc.stderr or ""))
    return Ok(proc)


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute `cmd` in `cwd` and return its stdout.

    `env` replaces the child's environment when given. A timeout or a
    missing executable is reported with NO_EXIT_STATUS.
    """
    match _invoke(cmd, cwd, env, capture=True, timeout=timeout):
        case Ok(proc):
            return Ok(proc.stdout)
        case Err(e):
            return Err(e)


def run_silent(cmd: list[str], cwd: Path) -> Result[None, ProcessError]:
    """Execute `cmd` with stdout/stderr attached to the terminal."""
    match _invoke(cmd, cwd, None, capture=False):
        case Ok(_):
            return Ok(None)
        case Err(e):
            return Err(e)
