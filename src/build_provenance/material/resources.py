"""Materials from git pipeline resources bound to a task run."""

from __future__ import annotations

from build_provenance.objects import TaskRunObject

from .contracts import ProvenanceMaterial, spdx_git


PIPELINE_RESOURCE_TYPE_GIT = "git"


def from_task_resources(task_run: TaskRunObject) -> list[ProvenanceMaterial]:
    resources = task_run.spec.resources
    if resources is None:
        return []
    materials: list[ProvenanceMaterial] = []
    for binding in resources.inputs:
        spec = binding.resource_spec
        if spec is None or spec.type != PIPELINE_RESOURCE_TYPE_GIT:
            continue
        digest: dict[str, str] = {}
        for result in task_run.status.resources_result:
            if result.resource_name == binding.name and result.key == "commit":
                digest["sha1"] = result.value
        params = {param.name: param.value for param in spec.params}
        materials.append(
            ProvenanceMaterial(
                uri=spdx_git(params.get("url", ""), params.get("revision", "")),
                digest=digest,
            )
        )
    return materials
