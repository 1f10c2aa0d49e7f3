"""Provenance material contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


OCI_SCHEME = "oci://"
GIT_PREFIX = "git+"
GIT_SUFFIX = ".git"


class MaterialExtractionError(ValueError):
    """Raised when a material cannot be extracted from execution status."""


@dataclass(frozen=True)
class ProvenanceMaterial:
    uri: str
    digest: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "digest", dict(self.digest))

    def as_dict(self) -> dict[str, Any]:
        return {"uri": self.uri, "digest": dict(self.digest)}


def spdx_git(url: str, revision: str = "") -> str:
    """Render a git url as an SPDX download location (``git+<url>.git[@rev]``)."""
    text = str(url or "").strip()
    if not text.startswith(GIT_PREFIX):
        text = GIT_PREFIX + text
    if not text.endswith(GIT_SUFFIX):
        text = text + GIT_SUFFIX
    if not revision:
        return text
    return f"{text}@{revision}"


def split_digest(value: str) -> tuple[str, str] | None:
    parts = str(value or "").split(":")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]
