from __future__ import annotations

import logging
from typing import Any

import pytest

from build_provenance.config import SlsaConfig
from build_provenance.material import MaterialExtractionError
from build_provenance.objects import PipelineRunObject
from build_provenance.resolved_dependencies import ResourceDescriptor, resolve_pipeline_run


COMPLETED = "2026-02-10T00:05:00Z"


def _child(task: str, *, images: list[str], completed: bool = True, **status: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "metadata": {"name": f"pr-1-{task}", "labels": {"tekton.dev/pipelineTask": task}},
        "status": {"steps": [{"imageID": image} for image in images], **status},
    }
    if completed:
        payload["status"]["completionTime"] = COMPLETED
    return payload


def _pipeline_run(tasks: list[str], children: list[dict[str, Any]], **extra: Any) -> PipelineRunObject:
    finally_tasks = extra.pop("finally_tasks", [])
    status: dict[str, Any] = {
        "provenance": {"refSource": {"uri": "git+https://github.com/org/pipelines.git", "digest": {"sha1": "p0"}}},
        "pipelineSpec": {
            "tasks": [{"name": name} for name in tasks],
            "finally": [{"name": name} for name in finally_tasks],
            "params": extra.pop("spec_params", []),
        },
        "results": extra.pop("results", []),
    }
    payload = {
        "metadata": {"name": "pr-1"},
        "spec": {"params": extra.pop("params", [])},
        "status": status,
        "taskRuns": children,
    }
    return PipelineRunObject.model_validate(payload)


def _tuples(resolved: list[ResourceDescriptor]) -> list[tuple[str, str, dict[str, str]]]:
    return [(item.name, item.uri, dict(item.digest)) for item in resolved]


def test_pipeline_run_skips_stage_without_task_run(caplog: pytest.LogCaptureFixture) -> None:
    pipeline_run = _pipeline_run(
        ["a", "b"],
        [_child("a", images=["reg/a@sha256:a1"])],
        params=[
            {"name": "CHAINS-GIT_URL", "value": "https://github.com/org/app"},
            {"name": "CHAINS-GIT_COMMIT", "value": "c1"},
        ],
    )
    with caplog.at_level(logging.INFO, logger="build_provenance.resolved_dependencies"):
        resolved = resolve_pipeline_run(pipeline_run)

    assert _tuples(resolved) == [
        ("pipeline", "git+https://github.com/org/pipelines.git", {"sha1": "p0"}),
        ("", "oci://reg/a", {"sha256": "a1"}),
        ("inputs/result", "git+https://github.com/org/app.git", {"sha1": "c1"}),
    ]
    assert "taskrun status not found for task b" in caplog.text


def test_pipeline_run_skips_incomplete_task_run() -> None:
    pipeline_run = _pipeline_run(
        ["a", "b"],
        [
            _child("a", images=["reg/a@sha256:a1"]),
            _child(
                "b",
                images=["reg/b@sha256:b1"],
                completed=False,
                provenance={"refSource": {"uri": "git+https://github.com/org/tasks.git", "digest": {"sha1": "t1"}}},
            ),
        ],
    )
    uris = [item.uri for item in resolve_pipeline_run(pipeline_run)]
    assert "oci://reg/b" not in uris
    assert "git+https://github.com/org/tasks.git" not in uris


def test_pipeline_run_orders_tasks_then_finally_and_dedupes() -> None:
    pipeline_run = _pipeline_run(
        ["build", "test"],
        [
            _child("cleanup", images=["reg/shell@sha256:s1"]),
            _child(
                "test",
                images=["reg/shell@sha256:s1", "reg/pytest@sha256:t1"],
                provenance={"refSource": {"uri": "git+https://github.com/org/tasks.git", "digest": {"sha1": "t0"}}},
            ),
            _child(
                "build",
                images=["reg/kaniko@sha256:k1", "reg/shell@sha256:s1"],
                provenance={"refSource": {"uri": "git+https://github.com/org/tasks.git", "digest": {"sha1": "t0"}}},
            ),
        ],
        finally_tasks=["cleanup"],
    )
    assert _tuples(resolve_pipeline_run(pipeline_run)) == [
        ("pipeline", "git+https://github.com/org/pipelines.git", {"sha1": "p0"}),
        ("pipelineTask", "git+https://github.com/org/tasks.git", {"sha1": "t0"}),
        ("", "oci://reg/kaniko", {"sha256": "k1"}),
        ("", "oci://reg/shell", {"sha256": "s1"}),
        ("", "oci://reg/pytest", {"sha256": "t1"}),
    ]


def test_pipeline_run_keeps_pipeline_config_when_task_shares_it() -> None:
    shared = {"uri": "git+https://github.com/org/pipelines.git", "digest": {"sha1": "p0"}}
    pipeline_run = _pipeline_run(
        ["a"],
        [_child("a", images=[], provenance={"refSource": shared})],
    )
    assert _tuples(resolve_pipeline_run(pipeline_run)) == [
        ("pipeline", "git+https://github.com/org/pipelines.git", {"sha1": "p0"}),
    ]


def test_pipeline_run_deep_inspection_adds_child_inputs() -> None:
    pipeline_run = _pipeline_run(
        ["a"],
        [
            _child(
                "a",
                images=["reg/a@sha256:a1"],
                results=[
                    {
                        "name": "source_ARTIFACT_INPUTS",
                        "type": "object",
                        "value": {"uri": "https://example.com/src.tar.gz", "digest": "sha256:f00"},
                    }
                ],
            )
        ],
    )
    shallow = _tuples(resolve_pipeline_run(pipeline_run, SlsaConfig(deep_inspection_enabled=False)))
    deep = _tuples(resolve_pipeline_run(pipeline_run, SlsaConfig(deep_inspection_enabled=True)))

    child_input = ("inputs/result", "https://example.com/src.tar.gz", {"sha256": "f00"})
    assert child_input not in shallow
    assert deep[-1] == child_input


def test_pipeline_run_without_spec_has_only_own_sources() -> None:
    pipeline_run = PipelineRunObject.model_validate({"status": {}})
    assert resolve_pipeline_run(pipeline_run) == []


def test_pipeline_run_child_image_failure_aborts() -> None:
    pipeline_run = _pipeline_run(
        ["a", "b"],
        [_child("a", images=["reg/a@sha256:a1"]), _child("b", images=["reg/b-without-digest"])],
    )
    with pytest.raises(MaterialExtractionError):
        resolve_pipeline_run(pipeline_run)


def test_pipeline_run_uses_injected_logger(caplog: pytest.LogCaptureFixture) -> None:
    pipeline_run = _pipeline_run(["missing"], [])
    custom = logging.getLogger("tests.resolved_dependencies.custom")
    with caplog.at_level(logging.INFO, logger="tests.resolved_dependencies.custom"):
        resolve_pipeline_run(pipeline_run, log=custom)
    assert any(record.name == "tests.resolved_dependencies.custom" for record in caplog.records)
