from __future__ import annotations

from pathlib import Path

from reltool.core.result import Err, Ok
from reltool.services.release.changelog import (
    extract_release_notes,
    extract_section_lines,
    read_release_notes,
    split_lines,
)
from reltool.services.release.errors import MissingDocumentFailure, UnreadableDocumentFailure

_CHANGELOG = """\
# Changelog

## Unreleased

- Nothing yet

## `0.2.1` - 2019-04-15

### Added

- Feature A

### Fixed

- Bug B

## `0.2.0` - 2019-03-18

- Old stuff
"""


def test_extracts_second_section() -> None:
    assert extract_release_notes("## h1\n## h2\nbody2a\nbody2b\n## h3\nbody3") == (
        "body2a\nbody2b"
    )


def test_keeps_blank_lines_and_subsections_verbatim() -> None:
    notes = extract_release_notes(_CHANGELOG)

    assert notes == "\n### Added\n\n- Feature A\n\n### Fixed\n\n- Bug B\n"
    assert "Nothing yet" not in notes
    assert "Old stuff" not in notes


def test_only_exact_prefix_is_a_heading() -> None:
    document = "## h1\n## h2\n##not-a-heading\n### sub\n #### indented\n## h3\n"

    assert extract_release_notes(document) == "##not-a-heading\n### sub\n #### indented"


def test_single_heading_returns_trailing_content() -> None:
    assert extract_release_notes("# Changelog\n## Unreleased\n- a\n- b\n") == "- a\n- b"


def test_no_heading_returns_empty() -> None:
    assert extract_release_notes("# Changelog\n\nJust prose.\n") == ""
    assert extract_release_notes("") == ""


def test_empty_second_section() -> None:
    assert extract_release_notes("## h1\nx\n## h2\n## h3\ny\n") == ""


def test_stops_consuming_at_third_heading() -> None:
    consumed: list[str] = []

    def lines():
        for line in ["## h1", "## h2", "notes", "## h3", "after", "## h4"]:
            consumed.append(line)
            yield line

    assert extract_section_lines(lines()) == ["notes"]
    assert consumed == ["## h1", "## h2", "notes", "## h3"]


def test_read_release_notes(tmp_path: Path) -> None:
    changelog = tmp_path / "CHANGELOG.md"
    changelog.write_text("## Unreleased\r\n## `1.0.0`\r\n- Added X\r\n## `0.9.0`\r\n", encoding="utf-8")

    assert read_release_notes(changelog) == Ok("- Added X")


def test_read_release_notes_missing_file(tmp_path: Path) -> None:
    missing = tmp_path / "CHANGELOG.md"

    result = read_release_notes(missing)

    assert isinstance(result, Err)
    assert result.error == MissingDocumentFailure(path=missing)
    assert "CHANGELOG.md" in result.error.describe()


def test_read_release_notes_invalid_utf8(tmp_path: Path) -> None:
    changelog = tmp_path / "CHANGELOG.md"
    changelog.write_bytes(b"## Unreleased\n## 1.0\n\xff\n")

    result = read_release_notes(changelog)

    assert isinstance(result, Err)
    assert isinstance(result.error, UnreadableDocumentFailure)
    assert result.error.path == changelog


def test_read_release_notes_directory(tmp_path: Path) -> None:
    changelog = tmp_path / "CHANGELOG.md"
    changelog.mkdir()

    result = read_release_notes(changelog)

    assert isinstance(result, Err)
    assert isinstance(result.error, UnreadableDocumentFailure)
    assert "CHANGELOG.md" in result.error.describe()


def test_only_line_endings_split_lines() -> None:
    assert split_lines("a\x0cb c\r\nd\re\n") == ["a\x0cb c", "d", "e"]
    assert split_lines("") == []


def test_file_and_string_agree(tmp_path: Path) -> None:
    document = "## h1\n## h2\npage\x0cbreak\r\nsep\u2028arator\n## h3\n"
    changelog = tmp_path / "CHANGELOG.md"
    changelog.write_bytes(document.encode("utf-8"))

    assert read_release_notes(changelog) == Ok(extract_release_notes(document))
    assert extract_release_notes(document) == "page\x0cbreak\nsep\u2028arator"
