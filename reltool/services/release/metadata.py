"""Build metadata sink.

Downstream CI steps read release facts (e.g. the commit that was released)
from a plain `key=value` file, one record per line. The sink only appends.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from reltool.core.result import Err, Ok, Result
from reltool.services.release.errors import MetadataFailure

__all__ = ["FileMetadataSink", "MetadataSink"]


class MetadataSink(Protocol):
    """Write-only key/value store."""

    def write(self, key: str, value: str) -> Result[None, MetadataFailure]: ...


class FileMetadataSink:
    def __init__(self, path: Path) -> None:
        self.path = path

    def write(self, key: str, value: str) -> Result[None, MetadataFailure]:
        if "=" in key or "\n" in key or "\n" in value:
            return Err(MetadataFailure(path=self.path, message=f"invalid record: {key!r}"))
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(f"{key}={value}\n")
        except OSError as e:
            return Err(MetadataFailure(path=self.path, message=str(e)))
        return Ok(None)
