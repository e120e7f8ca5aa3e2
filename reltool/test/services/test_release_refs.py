from __future__ import annotations

import pytest

from reltool.core.result import Err, Ok
from reltool.services.release.errors import ParseFailure
from reltool.services.release.refs import (
    ChangeRequestRef,
    RemoteRepositoryRef,
    parse_pull_request_url,
    parse_remote_url,
)


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        (
            "https://github.com/spatialos/gdk-for-unity/pull/42",
            ChangeRequestRef(repository_name="gdk-for-unity", id=42, owner="spatialos"),
        ),
        (
            "https://github.com/spatialos/gdk-for-unity-fps-starter-project/pull/7/files",
            ChangeRequestRef(
                repository_name="gdk-for-unity-fps-starter-project", id=7, owner="spatialos"
            ),
        ),
        (
            "https://github.com/spatialos/gdk-for-unity/pull/1001#issuecomment-123",
            ChangeRequestRef(repository_name="gdk-for-unity", id=1001, owner="spatialos"),
        ),
        ("blank-project/pull/3", ChangeRequestRef(repository_name="blank-project", id=3)),
    ],
)
def test_parse_pull_request_url(url: str, expected: ChangeRequestRef) -> None:
    assert parse_pull_request_url(url) == Ok(expected)


@pytest.mark.parametrize(
    "url",
    [
        "https://github.com/spatialos/gdk-for-unity/pull/abc",
        "https://github.com/spatialos/gdk-for-unity/pull/",
        "https://github.com/spatialos/gdk-for-unity/pull/0",
        "https://github.com/spatialos/gdk-for-unity/pull/-3",
        "https://github.com/spatialos/gdk-for-unity/pull/٣",
        "https://github.com/spatialos/gdk-for-unity/issues/42",
        "not a url",
        "",
    ],
)
def test_parse_pull_request_url_rejects(url: str) -> None:
    result = parse_pull_request_url(url)

    assert isinstance(result, Err)
    assert isinstance(result.error, ParseFailure)
    assert result.error.value == url


def test_non_numeric_id_reason_names_capture() -> None:
    result = parse_pull_request_url("https://github.com/o/r/pull/abc")

    assert isinstance(result, Err)
    assert "'abc'" in result.error.reason


def test_owner_is_the_segment_before_the_repository() -> None:
    result = parse_pull_request_url("https://github.example.com/someone-else/gdk-for-unity/pull/5")

    assert isinstance(result, Ok)
    assert result.value.owner == "someone-else"
    assert result.value.repository_name == "gdk-for-unity"


def test_bare_reference_has_no_owner() -> None:
    result = parse_pull_request_url("blank-project/pull/3")

    assert isinstance(result, Ok)
    assert result.value.owner is None


@pytest.mark.parametrize(
    ("remote_url", "owner", "name"),
    [
        ("https://github.com/spatialos/gdk-for-unity.git", "spatialos", "gdk-for-unity"),
        ("git@github.com:spatialos/gdk-for-unity.git", "spatialos", "gdk-for-unity"),
        ("git@github.example.com:bot/blank-project.git", "bot", "blank-project"),
        ("https://github.com/o/name.with.dots.git", "o", "name.with.dots"),
    ],
)
def test_parse_remote_url(remote_url: str, owner: str, name: str) -> None:
    assert parse_remote_url(remote_url) == Ok(RemoteRepositoryRef(owner=owner, name=name))


@pytest.mark.parametrize(
    "remote_url",
    [
        "https://github.com/spatialos/gdk-for-unity",
        "http://github.com/spatialos/gdk-for-unity.git",
        "https://github.com/spatialos.git",
        "https://github.com/a/b/c.git",
        "git@github.com:/gdk-for-unity.git",
        "ssh://git@github.com/spatialos/gdk-for-unity.git",
        "",
    ],
)
def test_parse_remote_url_rejects(remote_url: str) -> None:
    result = parse_remote_url(remote_url)

    assert isinstance(result, Err)
    assert isinstance(result.error, ParseFailure)


def test_remote_ref_slug() -> None:
    assert RemoteRepositoryRef(owner="spatialos", name="gdk-for-unity").slug == (
        "spatialos/gdk-for-unity"
    )
