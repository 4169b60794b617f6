from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from stepwise.config.models import EngineConfig

_SUPPORTED_VERSIONS = {1}


# ConfigError is raised for invalid configuration (fail fast).
class ConfigError(ValueError):
    pass


def load_config(path: Path) -> EngineConfig:
    # YAML loader; an empty file yields the defaults.
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file {path} is not valid YAML: {exc}") from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    return validate_config(raw)


def validate_config(raw: dict[str, Any]) -> EngineConfig:
    version = raw.get("version", 1)
    if version not in _SUPPORTED_VERSIONS:
        raise ConfigError(f"Unsupported config version: {version!r}")
    try:
        return EngineConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
