"""Resolved dependency surfaces for SLSA provenance."""

from .contracts import (
    INPUT_RESULT_NAME,
    PIPELINE_CONFIG_NAME,
    PIPELINE_RESOURCE_NAME,
    PIPELINE_TASK_CONFIG_NAME,
    PROTECTED_NAMES,
    TASK_CONFIG_NAME,
    ResolvedDependencySerializationError,
    ResourceDescriptor,
    as_resolved_dependencies_payload,
)
from .resolver import (
    convert_materials_to_resolved_dependencies,
    remove_duplicate_resolved_dependencies,
    resolve_pipeline_run,
    resolve_task_run,
)

__all__ = [
    "INPUT_RESULT_NAME",
    "PIPELINE_CONFIG_NAME",
    "PIPELINE_RESOURCE_NAME",
    "PIPELINE_TASK_CONFIG_NAME",
    "PROTECTED_NAMES",
    "TASK_CONFIG_NAME",
    "ResolvedDependencySerializationError",
    "ResourceDescriptor",
    "as_resolved_dependencies_payload",
    "convert_materials_to_resolved_dependencies",
    "remove_duplicate_resolved_dependencies",
    "resolve_pipeline_run",
    "resolve_task_run",
]
