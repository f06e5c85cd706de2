"""Configuration loading helpers for fff."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from ..errors import ConfigurationError
from .models import FetchConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_ENV_VAR = "FFF_CONFIG"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {path}")
    return data


def resolve_config_path(path: Path | None = None) -> Path | None:
    """Return the explicit path, else the one named by ``FFF_CONFIG``."""

    if path is not None:
        return path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return None


def load_config(
    path: Path | None = None, overrides: Mapping[str, Any] | None = None
) -> FetchConfig:
    """Merge file settings with explicit overrides and validate the result."""

    payload: dict[str, Any] = {}
    config_path = resolve_config_path(path)
    if config_path is not None:
        if config_path.suffix not in CONFIG_EXTENSIONS:
            raise ConfigurationError(
                f"Unsupported configuration format {config_path.suffix!r}; "
                f"expected one of {', '.join(CONFIG_EXTENSIONS)}"
            )
        try:
            payload.update(_read_file(config_path))
        except OSError as exc:
            raise ConfigurationError(f"Cannot read configuration file {config_path}: {exc}") from exc
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Cannot parse configuration file {config_path}: {exc}") from exc
    if overrides:
        payload.update(overrides)
    try:
        return FetchConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


__all__ = ["CONFIG_ENV_VAR", "CONFIG_EXTENSIONS", "load_config", "resolve_config_path"]
