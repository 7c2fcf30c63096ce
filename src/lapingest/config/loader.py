"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
A minimal config only needs one entry under `sources`.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from lapingest.config.settings import (
    IngestConfig,
    LoadingConfig,
    LoggingConfig,
    SourceConfig,
    StorageBackend,
    StorageConfig,
)


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _process_config_values(data) if data else {}


def _build_source(index: int, data: Any) -> SourceConfig:
    """Build one source entry, rejecting entries without a type."""
    if not isinstance(data, dict) or not data.get("type"):
        msg = f"Source #{index} must specify 'type'"
        raise ValueError(msg)
    return SourceConfig(
        type=str(data["type"]),
        collections=data.get("collections") or [],
        settings=data.get("settings") or {},
    )


def config_from_dict(data: dict[str, Any]) -> IngestConfig:
    """
    Build a validated configuration from an already merged mapping.

    Args:
        data: Mapping shaped like the YAML file.

    Returns:
        Fully validated IngestConfig instance.
    """
    sources_data = data.get("sources") or []
    if not isinstance(sources_data, list) or not sources_data:
        msg = "Config must specify at least one entry under 'sources'"
        raise ValueError(msg)
    sources = tuple(_build_source(i, s) for i, s in enumerate(sources_data))

    storage_data = data.get("storage", {})
    storage = StorageConfig(
        backend=StorageBackend(str(storage_data.get("backend", "memory")).lower()),
        path=Path(storage_data["path"]) if storage_data.get("path") else None,
    )

    loading_data = data.get("loading", {})
    loading = LoadingConfig(
        max_workers=loading_data.get("max_workers", 4),
        validate_schemas=loading_data.get("validate", True),
    )

    logging_data = data.get("logging", {})
    logging = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        json_output=logging_data.get("json", False),
    )

    return IngestConfig(
        project=data.get("project") or "lapingest",
        storage=storage,
        loading=loading,
        sources=sources,
        logging=logging,
    )


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> IngestConfig:
    """
    Load ingestion configuration from YAML file(s).

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated IngestConfig instance.
    """
    # Load base config if provided
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        # Try to find base.yaml in same directory
        potential_base = config_path.parent / "base.yaml"
        is_base = potential_base.resolve() == config_path.resolve()
        base_data = (
            load_yaml(potential_base) if potential_base.exists() and not is_base else {}
        )

    main_data = load_yaml(config_path)

    # Main overrides base; lists (sources) are replaced, not merged
    merged = _deep_merge(base_data, main_data)

    return config_from_dict(merged)
