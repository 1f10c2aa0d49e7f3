"""Configuration loader for SLSA provenance settings."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

DEFAULT_SLSA_CONFIG_PATH = Path("config/build_provenance/slsa_config_v0.yaml")


class BuildProvenanceConfigError(ValueError):
    """Raised when SLSA config payloads are invalid."""


class SlsaConfig(BaseModel):
    builder_id: str = "https://tekton.dev/chains/v2"
    build_type: str = "https://tekton.dev/chains/v2/slsa"
    deep_inspection_enabled: bool = False


def _expand_str(value: str) -> str:
    def replacer(match: re.Match[str]) -> str:
        token = match.group(1)
        if ":-" in token:
            key, default = token.split(":-", 1)
            actual = os.getenv(key, "")
            return actual if actual.strip() else default
        actual = os.getenv(token, "")
        if not actual.strip():
            raise BuildProvenanceConfigError(f"missing environment variable: {token}")
        return actual

    return _VAR_PATTERN.sub(replacer, value)


def _expand_payload(value: Any) -> Any:
    if isinstance(value, str):
        return _expand_str(value)
    if isinstance(value, list):
        return [_expand_payload(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _expand_payload(item) for key, item in value.items()}
    return value


def load_slsa_config(path: Path) -> SlsaConfig:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return SlsaConfig()
    if not isinstance(data, dict):
        raise BuildProvenanceConfigError("SLSA config must be a mapping")
    payload = data.get("slsa", data)
    if not isinstance(payload, dict):
        raise BuildProvenanceConfigError("slsa must be a mapping")
    expanded = _expand_payload(payload)
    try:
        return SlsaConfig(**expanded)
    except ValidationError as exc:
        raise BuildProvenanceConfigError(f"invalid SLSA config: {exc}") from exc
