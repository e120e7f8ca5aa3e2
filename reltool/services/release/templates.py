"""Release name and body templates for each supported repository.

The table is fixed and looked up before any network call. `{version}` is the
only placeholder; the body is the preamble, a `---` rule, then the change log
section.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from reltool.core.result import Err, Ok, Result
from reltool.services.release.errors import UnsupportedRepositoryFailure

__all__ = [
    "RELEASE_TEMPLATES",
    "ReleaseTemplate",
    "RenderedRelease",
    "lookup_template",
    "render_release",
    "supported_repositories",
]

_FEEDBACK = (
    "Keep giving us your feedback and/or suggestions! Check out "
    "[our Discord](https://discord.gg/SCZTCYm), "
    "[our forums](https://forums.improbable.io/), or here in the "
    "[Github issues](https://github.com/spatialos/gdk-for-unity/issues"
    "?q=is%3Aissue+is%3Aopen+sort%3Aupdated-desc)!"
)


@dataclass(frozen=True, slots=True)
class ReleaseTemplate:
    """Release name and body preamble; `{version}` is substituted in both."""

    name_format: str
    body_preamble: str


@dataclass(frozen=True, slots=True)
class RenderedRelease:
    name: str
    body: str


_GDK = ReleaseTemplate(
    name_format="GDK for Unity Alpha Release {version}",
    body_preamble=(
        "In this release, we've ...\n"
        "\n"
        "We've also fixed ... \n"
        "\n"
        f"{_FEEDBACK}\n"
        "\n"
        "See the full release notes below! 👇"
    ),
)

_FPS_STARTER = ReleaseTemplate(
    name_format="GDK for Unity FPS Starter Project Alpha Release {version}",
    body_preamble=(
        "This release of the FPS Starter Project is intended for use with the "
        "GDK for Unity Alpha Release {version}.\n"
        "\n"
        f"{_FEEDBACK}"
    ),
)

_BLANK = ReleaseTemplate(
    name_format="GDK for Unity Blank Project Alpha Release {version}",
    body_preamble=(
        "This release of the Blank Project is intended for use with the "
        "GDK for Unity Alpha Release {version}.\n"
        "\n"
        f"{_FEEDBACK}"
    ),
)

# Repository name -> template. The short project names are accepted as well
# as the full GitHub repository names.
RELEASE_TEMPLATES: Mapping[str, ReleaseTemplate] = MappingProxyType(
    {
        "gdk-for-unity": _GDK,
        "gdk-for-unity-fps-starter-project": _FPS_STARTER,
        "fps-starter-project": _FPS_STARTER,
        "gdk-for-unity-blank-project": _BLANK,
        "blank-project": _BLANK,
    }
)


def supported_repositories() -> tuple[str, ...]:
    return tuple(sorted(RELEASE_TEMPLATES))


def lookup_template(repository: str) -> Result[ReleaseTemplate, UnsupportedRepositoryFailure]:
    template = RELEASE_TEMPLATES.get(repository)
    if template is None:
        return Err(
            UnsupportedRepositoryFailure(
                repository=repository,
                supported=supported_repositories(),
            )
        )
    return Ok(template)


def render_release(template: ReleaseTemplate, *, version: str, changelog: str) -> RenderedRelease:
    preamble = template.body_preamble.replace("{version}", version)
    return RenderedRelease(
        name=template.name_format.replace("{version}", version),
        body=f"{preamble}\n\n---\n\n{changelog}",
    )
