"""Tests for reltool.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from reltool.core.config import (
    Config,
    GitConfig,
    GitHubConfig,
    ReleaseConfig,
    load_config,
    load_config_or_default,
)
from reltool.core.result import Err, Ok


class TestDefaults:
    """Defaults match the GDK release process."""

    def test_github_defaults(self) -> None:
        config = GitHubConfig()
        assert config.org == "spatialos"
        assert config.host == "github.com"
        assert config.token_file == "~/.ssh/github.token"

    def test_git_defaults(self) -> None:
        config = GitConfig()
        assert config.remote == "origin"
        assert config.dev_branch == "develop"
        assert config.master_branch == "master"

    def test_release_defaults(self) -> None:
        config = ReleaseConfig()
        assert config.changelog == "CHANGELOG.md"
        assert config.primary_project == "gdk-for-unity"
        assert config.metadata_key == "gdk-for-unity-hash"

    def test_frozen(self) -> None:
        config = GitConfig()
        with pytest.raises(AttributeError):
            config.remote = "upstream"  # type: ignore[misc]


class TestRemoteUrl:
    def test_canonical_ssh_remote(self) -> None:
        assert GitHubConfig().remote_url("spatialos", "gdk-for-unity") == (
            "git@github.com:spatialos/gdk-for-unity.git"
        )

    def test_enterprise_host(self) -> None:
        config = GitHubConfig(host="github.example.com")
        assert config.remote_url("o", "r") == "git@github.example.com:o/r.git"


class TestFromDict:
    def test_empty_dict_gives_defaults(self) -> None:
        assert Config.from_dict({}) == Config()

    def test_partial_override(self) -> None:
        config = Config.from_dict({"git": {"dev_branch": "main"}, "github": {"org": "acme"}})
        assert config.git.dev_branch == "main"
        assert config.git.remote == "origin"
        assert config.github.org == "acme"

    def test_wrong_types_fall_back_to_defaults(self) -> None:
        config = Config.from_dict({"git": {"remote": 3, "dev_branch": "  "}, "release": "x"})
        assert config.git == GitConfig()
        assert config.release == ReleaseConfig()


class TestLoadConfig:
    def test_load_file(self, tmp_path: Path) -> None:
        path = tmp_path / "reltool.toml"
        path.write_text(
            '[github]\norg = "improbable"\n\n[release]\nchangelog = "NOTES.md"\n',
            encoding="utf-8",
        )

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.github.org == "improbable"
        assert result.value.release.changelog == "NOTES.md"

    def test_missing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "missing.toml"

        result = load_config(path)

        assert isinstance(result, Err)
        assert result.error.path == path
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "reltool.toml"
        path.write_text("[github\norg = ", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message

    def test_or_default(self, tmp_path: Path) -> None:
        assert load_config_or_default(tmp_path / "missing.toml") == Ok(Config())

    def test_or_default_reads_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "reltool.toml"
        path.write_text('[git]\ndev_branch = "trunk"\n', encoding="utf-8")

        result = load_config_or_default(path)

        assert isinstance(result, Ok)
        assert result.value.git.dev_branch == "trunk"

    def test_or_default_keeps_parse_errors(self, tmp_path: Path) -> None:
        path = tmp_path / "reltool.toml"
        path.write_text("[github\norg = ", encoding="utf-8")

        result = load_config_or_default(path)

        assert isinstance(result, Err)
        assert result.error.path == path
