"""Typed configuration for the release tool.

All settings have defaults matching the GDK release process, so the config
file is optional. A file only needs the keys it overrides:

    [github]
    org = "spatialos"

    [git]
    dev_branch = "develop"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "GitConfig",
    "GitHubConfig",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_GITHUB_ORG",
    "DEFAULT_GITHUB_HOST",
    "DEFAULT_TOKEN_FILE",
    "DEFAULT_REMOTE",
    "DEFAULT_DEV_BRANCH",
    "DEFAULT_MASTER_BRANCH",
    "DEFAULT_CHANGELOG",
    "DEFAULT_PRIMARY_PROJECT",
    "DEFAULT_METADATA_KEY",
]

DEFAULT_CONFIG_FILENAME = "reltool.toml"

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULT_GITHUB_ORG = "spatialos"
DEFAULT_GITHUB_HOST = "github.com"
DEFAULT_TOKEN_FILE = "~/.ssh/github.token"

DEFAULT_REMOTE = "origin"
DEFAULT_DEV_BRANCH = "develop"
DEFAULT_MASTER_BRANCH = "master"

DEFAULT_CHANGELOG = "CHANGELOG.md"
DEFAULT_PRIMARY_PROJECT = "gdk-for-unity"
DEFAULT_METADATA_KEY = "gdk-for-unity-hash"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Where release repositories live on GitHub."""

    org: str = DEFAULT_GITHUB_ORG
    host: str = DEFAULT_GITHUB_HOST
    token_file: str = DEFAULT_TOKEN_FILE

    def remote_url(self, owner: str, name: str) -> str:
        """Canonical SSH remote for `owner/name`."""
        return f"git@{self.host}:{owner}/{name}.git"


@dataclass(frozen=True, slots=True)
class GitConfig:
    """Remote and branch naming for the working copy."""

    remote: str = DEFAULT_REMOTE
    dev_branch: str = DEFAULT_DEV_BRANCH
    master_branch: str = DEFAULT_MASTER_BRANCH


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    changelog: str = DEFAULT_CHANGELOG
    primary_project: str = DEFAULT_PRIMARY_PROJECT
    metadata_key: str = DEFAULT_METADATA_KEY


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    github: GitHubConfig = field(default_factory=GitHubConfig)
    git: GitConfig = field(default_factory=GitConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        github: StrDict = get_table(data, "github") or {}
        git: StrDict = get_table(data, "git") or {}
        release: StrDict = get_table(data, "release") or {}

        return cls(
            github=GitHubConfig(
                org=get_str(github, "org") or DEFAULT_GITHUB_ORG,
                host=get_str(github, "host") or DEFAULT_GITHUB_HOST,
                token_file=get_str(github, "token_file") or DEFAULT_TOKEN_FILE,
            ),
            git=GitConfig(
                remote=get_str(git, "remote") or DEFAULT_REMOTE,
                dev_branch=get_str(git, "dev_branch") or DEFAULT_DEV_BRANCH,
                master_branch=get_str(git, "master_branch") or DEFAULT_MASTER_BRANCH,
            ),
            release=ReleaseConfig(
                changelog=get_str(release, "changelog") or DEFAULT_CHANGELOG,
                primary_project=get_str(release, "primary_project") or DEFAULT_PRIMARY_PROJECT,
                metadata_key=get_str(release, "metadata_key") or DEFAULT_METADATA_KEY,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, mapping read and syntax errors to ConfigError."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config from `path`, or the defaults when no file exists there.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.is_file():
        return Ok(Config())
    return load_config(path)
