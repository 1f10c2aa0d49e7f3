"""Materials from type-hinted params and results.

Two kinds of type hints are recognised:

* ``CHAINS-GIT_URL`` / ``CHAINS-GIT_COMMIT`` string params or results, which
  together describe the git source a run was built from;
* object results whose name ends with ``ARTIFACT_INPUTS`` and which carry a
  ``uri`` and an ``alg:hex`` ``digest``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from build_provenance.config import SlsaConfig
from build_provenance.objects import (
    Param,
    ParamSpec,
    PipelineRunObject,
    RunResult,
    TaskRunObject,
)

from .contracts import ProvenanceMaterial, spdx_git, split_digest


logger = logging.getLogger("build_provenance.material.params")

COMMIT_PARAM = "CHAINS-GIT_COMMIT"
URL_PARAM = "CHAINS-GIT_URL"
ARTIFACT_INPUTS_SUFFIX = "ARTIFACT_INPUTS"


def from_task_params_and_results(task_run: TaskRunObject) -> list[ProvenanceMaterial]:
    hints = _GitHints()
    if task_run.status.task_spec is not None:
        hints.scan_defaults(task_run.status.task_spec.params)
    hints.scan_values(task_run.spec.params)
    hints.scan_values(task_run.status.results)

    materials: list[ProvenanceMaterial] = []
    git_material = hints.material()
    if git_material is not None:
        materials.append(git_material)
    materials.extend(materials_from_structured_results(task_run.status.results))
    return materials


def from_pipeline_params_and_results(
    pipeline_run: PipelineRunObject,
    slsa_config: SlsaConfig | None = None,
    *,
    log: logging.Logger | None = None,
) -> list[ProvenanceMaterial]:
    active_logger = log or logger
    config = slsa_config or SlsaConfig()
    materials = materials_from_structured_results(pipeline_run.status.results)

    hints = _GitHints()
    spec = pipeline_run.status.pipeline_spec
    if spec is not None:
        if config.deep_inspection_enabled:
            for pipeline_task in pipeline_run.pipeline_tasks():
                task_run = pipeline_run.get_task_run_from_task(pipeline_task.name)
                if task_run is None or not task_run.is_complete():
                    active_logger.info(
                        "taskrun is not found or not completed for the task %s", pipeline_task.name
                    )
                    continue
                materials.extend(from_task_params_and_results(task_run))
        hints.scan_defaults(spec.params)
    hints.scan_values(pipeline_run.spec.params)
    hints.scan_values(pipeline_run.status.results)

    git_material = hints.material()
    if git_material is not None:
        materials.append(git_material)
    return materials


def materials_from_structured_results(results: Iterable[RunResult]) -> list[ProvenanceMaterial]:
    materials: list[ProvenanceMaterial] = []
    for result in results:
        if not result.name.endswith(ARTIFACT_INPUTS_SUFFIX):
            continue
        value = result.value
        if not isinstance(value, dict):
            logger.debug("skipping result %s: expected an object value", result.name)
            continue
        uri = value.get("uri")
        digest = value.get("digest")
        if not isinstance(uri, str) or not uri or not isinstance(digest, str):
            logger.debug("skipping result %s: uri and digest are required", result.name)
            continue
        parsed = split_digest(digest)
        if parsed is None:
            logger.debug("skipping result %s: digest %s is not alg:hex", result.name, digest)
            continue
        algorithm, hex_digest = parsed
        materials.append(ProvenanceMaterial(uri=uri, digest={algorithm: hex_digest}))
    return materials


class _GitHints:
    """Later scans override earlier ones."""

    def __init__(self) -> None:
        self.url = ""
        self.commit = ""

    def scan_defaults(self, params: Iterable[ParamSpec]) -> None:
        for param in params:
            if param.default is None:
                continue
            self._apply(param.name, param.default)

    def scan_values(self, values: Iterable[Param | RunResult]) -> None:
        for item in values:
            self._apply(item.name, item.value)

    def material(self) -> ProvenanceMaterial | None:
        if not self.url or not self.commit:
            return None
        return ProvenanceMaterial(uri=spdx_git(self.url), digest={"sha1": self.commit})

    def _apply(self, name: str, value: Any) -> None:
        if name == COMMIT_PARAM:
            self.commit = _string_value(value)
        elif name == URL_PARAM:
            self.url = _string_value(value)


def _string_value(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    return ""
