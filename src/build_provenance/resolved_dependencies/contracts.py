"""Resolved dependency contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any, Iterable, Mapping


# Top level pipelineRef config source.
PIPELINE_CONFIG_NAME = "pipeline"
# Top level taskRef config source.
TASK_CONFIG_NAME = "task"
# Remote task config source of a pipeline task.
PIPELINE_TASK_CONFIG_NAME = "pipelineTask"
# Materials from type-hinted params or results.
INPUT_RESULT_NAME = "inputs/result"
PIPELINE_RESOURCE_NAME = "pipelineResource"

PROTECTED_NAMES: frozenset[str] = frozenset({PIPELINE_CONFIG_NAME, TASK_CONFIG_NAME})


class ResolvedDependencySerializationError(ValueError):
    """Raised when a resolved dependency cannot be serialized for identity comparison."""


@dataclass(frozen=True)
class ResourceDescriptor:
    uri: str = ""
    digest: Mapping[str, str] = field(default_factory=dict, hash=False)
    name: str = ""

    def __post_init__(self) -> None:
        # descriptors own their digest; later edits to the source snapshot must not leak in
        object.__setattr__(self, "digest", dict(self.digest))

    @property
    def is_protected(self) -> bool:
        return self.name in PROTECTED_NAMES

    def identity_key(self) -> str:
        """Canonical (uri, digest) serialization; ``name`` is never part of it."""
        try:
            return json.dumps(
                {"uri": self.uri, "digest": dict(self.digest)},
                sort_keys=True,
                separators=(",", ":"),
                ensure_ascii=True,
            )
        except (TypeError, ValueError) as exc:
            raise ResolvedDependencySerializationError(
                f"resolved dependency {self.uri!r} is not serializable: {exc}"
            ) from exc

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.name:
            payload["name"] = self.name
        if self.uri:
            payload["uri"] = self.uri
        if self.digest:
            payload["digest"] = dict(self.digest)
        return payload


def as_resolved_dependencies_payload(descriptors: Iterable[ResourceDescriptor]) -> list[dict[str, Any]]:
    return [descriptor.as_dict() for descriptor in descriptors]
