"""CLI for resolving provenance dependencies from run status snapshots."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .config import BuildProvenanceConfigError, SlsaConfig, load_slsa_config
from .logging_utils import configure_logging
from .material import MaterialExtractionError
from .objects import PipelineRunObject, TaskRunObject
from .resolved_dependencies import (
    ResolvedDependencySerializationError,
    as_resolved_dependencies_payload,
    resolve_pipeline_run,
    resolve_task_run,
)


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Build provenance tools")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-path", default=None, help="Optional log file")
    subparsers = parser.add_subparsers(dest="cmd", required=True)

    resolve = subparsers.add_parser("resolve", help="Print resolvedDependencies for one run snapshot")
    resolve.add_argument("kind", choices=["taskrun", "pipelinerun"])
    resolve.add_argument("--status", required=True, help="JSON or YAML run snapshot")
    resolve.add_argument(
        "--config",
        default=None,
        help="SLSA config YAML (pipelinerun only; defaults to built-in settings)",
    )

    args = parser.parse_args(argv)
    configure_logging(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        log_paths=[args.log_path] if args.log_path else None,
    )

    try:
        payload = _load_snapshot(Path(args.status))
        if args.kind == "taskrun":
            resolved = resolve_task_run(TaskRunObject.model_validate(payload))
        else:
            config = load_slsa_config(Path(args.config)) if args.config else SlsaConfig()
            resolved = resolve_pipeline_run(PipelineRunObject.model_validate(payload), config)
    except (
        BuildProvenanceConfigError,
        MaterialExtractionError,
        ResolvedDependencySerializationError,
        ValidationError,
        OSError,
        json.JSONDecodeError,
        yaml.YAMLError,
    ) as exc:
        raise SystemExit(f"resolve failed: {exc}") from exc

    print(json.dumps(as_resolved_dependencies_payload(resolved), indent=2))


def _load_snapshot(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


if __name__ == "__main__":
    main()
