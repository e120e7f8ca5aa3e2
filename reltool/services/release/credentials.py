from __future__ import annotations

from pathlib import Path

from reltool.core.result import Err, Ok, Result
from reltool.services.release.errors import CredentialsFailure


def load_github_token(*, token: str | None, token_file: str) -> Result[str, CredentialsFailure]:
    """Resolve the GitHub API token.

    An explicit token wins; otherwise the token file is read (a leading `~`
    is expanded). Surrounding whitespace is stripped in both cases.
    """
    if token is not None and token.strip():
        return Ok(token.strip())

    path = Path(token_file).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(
            CredentialsFailure(
                "Failed to get GitHub Token as the file specified does not exist",
                path=path,
            )
        )
    except OSError as e:
        return Err(CredentialsFailure(f"Failed to read GitHub token: {e}", path=path))

    value = text.strip()
    if not value:
        return Err(CredentialsFailure("GitHub token file is empty", path=path))
    return Ok(value)
