"""Material extraction from task run / pipeline run status."""

from .contracts import MaterialExtractionError, ProvenanceMaterial, spdx_git
from .images import from_image_id, from_sidecar_images, from_step_images
from .params import (
    from_pipeline_params_and_results,
    from_task_params_and_results,
    materials_from_structured_results,
)
from .resources import from_task_resources

__all__ = [
    "MaterialExtractionError",
    "ProvenanceMaterial",
    "from_image_id",
    "from_pipeline_params_and_results",
    "from_sidecar_images",
    "from_step_images",
    "from_task_params_and_results",
    "from_task_resources",
    "materials_from_structured_results",
    "spdx_git",
]
