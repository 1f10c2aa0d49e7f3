"""Task run / pipeline run status snapshot models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


PIPELINE_TASK_LABEL = "tekton.dev/pipelineTask"


class _StatusModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class RefSource(_StatusModel):
    uri: str = ""
    digest: dict[str, str] = Field(default_factory=dict)
    entry_point: Optional[str] = None


class Provenance(_StatusModel):
    ref_source: Optional[RefSource] = None


class StepState(_StatusModel):
    name: str = ""
    image_id: str = Field(default="", alias="imageID")


class SidecarState(_StatusModel):
    name: str = ""
    image_id: str = Field(default="", alias="imageID")


class Param(_StatusModel):
    name: str
    value: Any = None


class ParamSpec(_StatusModel):
    name: str
    type: str = "string"
    default: Any = None


class RunResult(_StatusModel):
    name: str
    type: str = "string"
    value: Any = None


class ResourceParam(_StatusModel):
    name: str
    value: str = ""


class ResourceSpec(_StatusModel):
    type: str = ""
    params: list[ResourceParam] = Field(default_factory=list)


class TaskResourceBinding(_StatusModel):
    name: str
    resource_spec: Optional[ResourceSpec] = None


class TaskRunResources(_StatusModel):
    inputs: list[TaskResourceBinding] = Field(default_factory=list)


class ResourceResult(_StatusModel):
    resource_name: str = ""
    key: str = ""
    value: str = ""


class ObjectMeta(_StatusModel):
    name: str = ""
    labels: dict[str, str] = Field(default_factory=dict)


class TaskSpec(_StatusModel):
    params: list[ParamSpec] = Field(default_factory=list)


class TaskRunSpec(_StatusModel):
    params: list[Param] = Field(default_factory=list)
    resources: Optional[TaskRunResources] = None


# v1 snapshots name results "results"; v1beta1 uses "taskResults" / "pipelineResults".
class TaskRunStatus(_StatusModel):
    provenance: Optional[Provenance] = None
    steps: list[StepState] = Field(default_factory=list)
    sidecars: list[SidecarState] = Field(default_factory=list)
    task_spec: Optional[TaskSpec] = None
    results: list[RunResult] = Field(
        default_factory=list, validation_alias=AliasChoices("results", "taskResults")
    )
    resources_result: list[ResourceResult] = Field(default_factory=list)
    completion_time: Optional[datetime] = None


class TaskRunObject(_StatusModel):
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: TaskRunSpec = Field(default_factory=TaskRunSpec)
    status: TaskRunStatus = Field(default_factory=TaskRunStatus)

    @property
    def pipeline_task_name(self) -> str | None:
        return self.metadata.labels.get(PIPELINE_TASK_LABEL)

    def is_complete(self) -> bool:
        return self.status.completion_time is not None

    def ref_source(self) -> RefSource | None:
        return _ref_source(self.status.provenance)


class PipelineTask(_StatusModel):
    name: str


class PipelineSpec(_StatusModel):
    tasks: list[PipelineTask] = Field(default_factory=list)
    finally_tasks: list[PipelineTask] = Field(default_factory=list, alias="finally")
    params: list[ParamSpec] = Field(default_factory=list)


class PipelineRunSpec(_StatusModel):
    params: list[Param] = Field(default_factory=list)


class PipelineRunStatus(_StatusModel):
    provenance: Optional[Provenance] = None
    pipeline_spec: Optional[PipelineSpec] = None
    results: list[RunResult] = Field(
        default_factory=list, validation_alias=AliasChoices("results", "pipelineResults")
    )
    completion_time: Optional[datetime] = None


class PipelineRunObject(_StatusModel):
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: PipelineRunSpec = Field(default_factory=PipelineRunSpec)
    status: PipelineRunStatus = Field(default_factory=PipelineRunStatus)
    task_runs: list[TaskRunObject] = Field(default_factory=list)

    def pipeline_tasks(self) -> list[PipelineTask]:
        """Declared stages: regular tasks followed by finally tasks."""
        spec = self.status.pipeline_spec
        if spec is None:
            return []
        return [*spec.tasks, *spec.finally_tasks]

    def get_task_run_from_task(self, task_name: str) -> TaskRunObject | None:
        for task_run in self.task_runs:
            if task_run.pipeline_task_name == task_name:
                return task_run
        return None

    def ref_source(self) -> RefSource | None:
        return _ref_source(self.status.provenance)


def _ref_source(provenance: Provenance | None) -> RefSource | None:
    if provenance is None:
        return None
    return provenance.ref_source
