"""Release notes extraction from CHANGELOG.md.

The changelog is a sequence of level-2 sections. The first one is always
"Unreleased"; the second one holds the notes of the release being cut:

    # Changelog

    ## Unreleased            <- section 1, skipped

    ## `0.2.1` - 2019-04-15  <- section 2, extracted
    ### Added
    - ...

    ## `0.2.0` - 2019-03-18  <- section 3, reading stops here

Only lines starting with exactly "## " are headings; "### " subsections and
"##foo" belong to the body.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum, auto
from pathlib import Path

from reltool.core.result import Err, Ok, Result
from reltool.services.release.errors import MissingDocumentFailure, UnreadableDocumentFailure

__all__ = [
    "HEADING_PREFIX",
    "extract_release_notes",
    "extract_section_lines",
    "read_release_notes",
    "split_lines",
]

HEADING_PREFIX = "## "


class _State(Enum):
    BEFORE_FIRST_SECTION = auto()
    UNRELEASED = auto()
    TARGET = auto()
    DONE = auto()


def _advance(state: _State) -> _State:
    match state:
        case _State.BEFORE_FIRST_SECTION:
            return _State.UNRELEASED
        case _State.UNRELEASED:
            return _State.TARGET
        case _:
            return _State.DONE


def extract_section_lines(lines: Iterable[str]) -> list[str]:
    """Body lines of the second section, verbatim.

    Stops consuming `lines` at the third heading. With a single heading the
    body of that (unreleased) section is returned instead, since it is the
    section still open at end of input; with no heading the result is empty.
    """
    state = _State.BEFORE_FIRST_SECTION
    unreleased: list[str] = []
    target: list[str] = []

    for line in lines:
        if line.startswith(HEADING_PREFIX):
            state = _advance(state)
            if state is _State.DONE:
                break
            continue

        if state is _State.UNRELEASED:
            unreleased.append(line)
        elif state is _State.TARGET:
            target.append(line)

    if state is _State.UNRELEASED:
        return unreleased
    return target


def split_lines(document: str) -> list[str]:
    """Split on LF, CRLF and CR only, like reading the file in text mode.

    Other characters `str.splitlines` treats as breaks (form feed, U+2028, ...)
    stay inside the line.
    """
    lines = document.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def extract_release_notes(document: str) -> str:
    """Release notes (second level-2 section) of a changelog document."""
    return "\n".join(extract_section_lines(split_lines(document)))


def read_release_notes(
    path: Path,
) -> Result[str, MissingDocumentFailure | UnreadableDocumentFailure]:
    """Read `path` and extract its release notes.

    Returns:
        Ok(notes), Err(MissingDocumentFailure) if the file does not exist, or
        Err(UnreadableDocumentFailure) if it cannot be read as UTF-8 text
    """
    try:
        document = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(MissingDocumentFailure(path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(UnreadableDocumentFailure(path=path, cause=str(e)))
    return Ok(extract_release_notes(document))
