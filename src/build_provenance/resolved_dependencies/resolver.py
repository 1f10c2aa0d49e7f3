"""Build ``predicate.resolvedDependencies`` for task runs and pipeline runs."""

from __future__ import annotations

import logging
from typing import Iterable

from build_provenance.config import SlsaConfig
from build_provenance.material import (
    ProvenanceMaterial,
    from_pipeline_params_and_results,
    from_sidecar_images,
    from_step_images,
    from_task_params_and_results,
    from_task_resources,
)
from build_provenance.objects import PipelineRunObject, RefSource, TaskRunObject

from .contracts import (
    INPUT_RESULT_NAME,
    PIPELINE_CONFIG_NAME,
    PIPELINE_RESOURCE_NAME,
    PIPELINE_TASK_CONFIG_NAME,
    TASK_CONFIG_NAME,
    ResourceDescriptor,
)


logger = logging.getLogger("build_provenance.resolved_dependencies")


def resolve_task_run(
    task_run: TaskRunObject,
    *,
    log: logging.Logger | None = None,
) -> list[ResourceDescriptor]:
    """Collect everything that influenced a task run: config source, images, inputs, resources."""
    active_logger = log or logger
    resolved: list[ResourceDescriptor] = []

    ref_source = task_run.ref_source()
    if ref_source is not None:
        resolved.append(_from_ref_source(ref_source, TASK_CONFIG_NAME))

    resolved.extend(convert_materials_to_resolved_dependencies(_image_materials(task_run)))
    resolved.extend(
        convert_materials_to_resolved_dependencies(from_task_params_and_results(task_run), INPUT_RESULT_NAME)
    )
    resolved.extend(
        convert_materials_to_resolved_dependencies(from_task_resources(task_run), PIPELINE_RESOURCE_NAME)
    )

    deduped = remove_duplicate_resolved_dependencies(resolved)
    active_logger.debug(
        "task run %s resolved %d dependencies (%d before dedupe)",
        task_run.metadata.name,
        len(deduped),
        len(resolved),
    )
    return deduped


def resolve_pipeline_run(
    pipeline_run: PipelineRunObject,
    slsa_config: SlsaConfig | None = None,
    *,
    log: logging.Logger | None = None,
) -> list[ResourceDescriptor]:
    """Collect the pipeline config source, every executed pipeline task's config and images, and inputs."""
    active_logger = log or logger
    resolved: list[ResourceDescriptor] = []

    ref_source = pipeline_run.ref_source()
    if ref_source is not None:
        resolved.append(_from_ref_source(ref_source, PIPELINE_CONFIG_NAME))

    resolved.extend(_from_pipeline_tasks(pipeline_run, active_logger))

    materials = from_pipeline_params_and_results(pipeline_run, slsa_config, log=active_logger)
    resolved.extend(convert_materials_to_resolved_dependencies(materials, INPUT_RESULT_NAME))

    deduped = remove_duplicate_resolved_dependencies(resolved)
    active_logger.debug(
        "pipeline run %s resolved %d dependencies (%d before dedupe)",
        pipeline_run.metadata.name,
        len(deduped),
        len(resolved),
    )
    return deduped


def convert_materials_to_resolved_dependencies(
    materials: Iterable[ProvenanceMaterial],
    name: str = "",
) -> list[ResourceDescriptor]:
    return [
        ResourceDescriptor(uri=material.uri, digest=material.digest, name=name or "")
        for material in materials
    ]


def remove_duplicate_resolved_dependencies(
    resolved_dependencies: Iterable[ResourceDescriptor],
) -> list[ResourceDescriptor]:
    """Drop entries whose (uri, digest) was already emitted, keeping first-seen order.

    ``task`` and ``pipeline`` entries are always emitted, even when an earlier
    entry had the same uri and digest. That only lets the protected entry
    through; it does not restore entries skipped before it, and a later
    unnamed duplicate of a protected entry is still skipped.
    """
    out: list[ResourceDescriptor] = []
    seen: set[str] = set()
    for descriptor in resolved_dependencies:
        key = descriptor.identity_key()
        if key in seen and not descriptor.is_protected:
            continue
        seen.add(key)
        out.append(descriptor)
    return out


def _from_pipeline_tasks(
    pipeline_run: PipelineRunObject,
    active_logger: logging.Logger,
) -> list[ResourceDescriptor]:
    resolved: list[ResourceDescriptor] = []
    for pipeline_task in pipeline_run.pipeline_tasks():
        task_run = pipeline_run.get_task_run_from_task(pipeline_task.name)
        # tasks that did not execute during the pipeline run contribute nothing
        if task_run is None or not task_run.is_complete():
            active_logger.info("taskrun status not found for task %s", pipeline_task.name)
            continue
        ref_source = task_run.ref_source()
        if ref_source is not None:
            resolved.append(_from_ref_source(ref_source, PIPELINE_TASK_CONFIG_NAME))
        resolved.extend(convert_materials_to_resolved_dependencies(_image_materials(task_run)))
    return resolved


def _image_materials(task_run: TaskRunObject) -> list[ProvenanceMaterial]:
    materials = from_step_images(task_run.status.steps)
    materials.extend(from_sidecar_images(task_run.status.sidecars))
    return materials


def _from_ref_source(ref_source: RefSource, name: str) -> ResourceDescriptor:
    return ResourceDescriptor(uri=ref_source.uri, digest=ref_source.digest, name=name)
