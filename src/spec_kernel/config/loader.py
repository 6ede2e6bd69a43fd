from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from spec_kernel.config.models import EngineConfig


class ConfigError(ValueError):
    # Raised for invalid engine config (fail fast).
    pass


def load_yaml_config(path: Path) -> dict[str, object]:
    # Raw YAML mapping; an empty file is an empty mapping.
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    return raw


def load_engine_config(path: Path | None = None) -> EngineConfig:
    if path is None:
        return EngineConfig()
    return parse_engine_config(load_yaml_config(path))


def parse_engine_config(raw: dict[str, object]) -> EngineConfig:
    try:
        return EngineConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid engine config: {exc}") from exc
