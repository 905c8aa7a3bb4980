from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import ValidatorConfig
from ..models.vocabulary import DEFAULT_VOCABULARY

"""Config loader.

Responsibilities:
- Load the optional YAML config (default ``config/validator.yml``)
- Validate it against ``config_schema.json`` (unknown keys rejected)
- Apply environment overrides (ENTRY_VALIDATOR_WORKERS / ENTRY_VALIDATOR_OUTPUT)
- Apply CLI overrides last

Precedence: CLI flags > environment > YAML > defaults.
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "apply_overrides",
]

DEFAULT_CONFIG_PATH = Path("config/validator.yml")
SCHEMA_PATH = Path(__file__).parent / "config_schema.json"

ENV_WORKERS = "ENTRY_VALIDATOR_WORKERS"
ENV_OUTPUT = "ENTRY_VALIDATOR_OUTPUT"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the config
            data fails validation (wrong types, unknown keys, ...)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")
    return data


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    raw_workers = env.get(ENV_WORKERS)
    if raw_workers:
        try:
            overrides["workers"] = int(raw_workers)
        except ValueError as e:
            raise ConfigError(f"{ENV_WORKERS} must be an integer, got {raw_workers!r}") from e
    raw_output = env.get(ENV_OUTPUT)
    if raw_output:
        overrides["output"] = raw_output
    return overrides


def apply_overrides(config: ValidatorConfig, **overrides: Any) -> ValidatorConfig:
    """Return a copy of ``config`` with non-None overrides applied.

    Raises:
        ConfigError: if ``workers`` or ``queue_size`` is not positive
    """
    changes = {k: v for k, v in overrides.items() if v is not None}
    for key in ("workers", "queue_size"):
        if key in changes and changes[key] < 1:
            raise ConfigError(f"{key} must be a positive integer, got {changes[key]}")
    return replace(config, **changes) if changes else config


def load_config(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ValidatorConfig:
    """Resolve the validator configuration.

    Args:
        path: YAML config path. When None the default path is used and may be
            absent; an explicitly given path must exist.
        env: Environment mapping (defaults to ``os.environ``)

    Returns:
        Resolved ValidatorConfig

    Raises:
        ConfigError: missing explicit file, invalid YAML, schema violation,
            invalid vocabulary, or malformed environment override
    """
    data: dict[str, Any] = {}
    if path is None:
        if DEFAULT_CONFIG_PATH.exists():
            data = _read_yaml(DEFAULT_CONFIG_PATH)
    elif not path.exists():
        raise ConfigError(f"config file not found: {path}")
    else:
        data = _read_yaml(path)

    _validate_config_schema(data)

    vocabulary = DEFAULT_VOCABULARY.with_overrides(data.get("vocabulary"))
    unknown_priority = set(vocabulary.priority_motives) - set(vocabulary.motives)
    if unknown_priority:
        raise ConfigError(f"priority_motives not listed in motives: {sorted(unknown_priority)}")

    config = ValidatorConfig(vocabulary=vocabulary)
    config = apply_overrides(
        config,
        workers=data.get("workers"),
        queue_size=data.get("queue_size"),
        output=data.get("output"),
        error_format=data.get("error_format"),
        sort_errors=data.get("sort_errors"),
    )
    return apply_overrides(config, **_env_overrides(os.environ if env is None else env))
