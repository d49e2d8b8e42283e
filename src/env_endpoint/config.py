"""YAML/dict config loader for env-endpoint.

Supports loading from a YAML file or a plain dict (for embedding
in a larger application config).

Example YAML:

    env_endpoint:
      enabled: true
      masking: legacy            # "all", "none" or "legacy"
      mask_patterns:
        - "aws\\..*"
      active_environments:
        - dev
      packages:
        - myapp
      include_environ: true
      property_sources:
        - path: application.yml
          name: application      # defaults to the file stem
          order: 0
"""

from __future__ import annotations
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .endpoint import ConfiguredEnvironmentFilter, EnvironmentEndpoint
from .environment import Environment
from .errors import ConfigError
from .sources import from_environ, from_yaml

logger = logging.getLogger(__name__)

DEFAULT_PORT = int(os.environ.get("ENV_ENDPOINT_PORT", "18792"))
DEFAULT_CONFIG = os.environ.get("ENV_ENDPOINT_CONFIG", "")


def load_config(data: Mapping[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    data = data or {}
    # Support nested under "env_endpoint" key or flat
    if isinstance(data, Mapping) and "env_endpoint" in data:
        data = data["env_endpoint"] or {}
    if not isinstance(data, Mapping):
        raise ConfigError("env_endpoint config must be a mapping")

    return {
        "enabled": _as_bool(data, "enabled", EnvironmentEndpoint.DEFAULT_ENABLED),
        "masking": data.get("masking", "all"),
        "mask_patterns": _as_list(data, "mask_patterns"),
        "active_environments": _as_list(data, "active_environments"),
        "packages": _as_list(data, "packages"),
        "include_environ": _as_bool(data, "include_environ", True),
        "property_sources": [
            _load_source_entry(entry) for entry in _as_list(data, "property_sources")
        ],
        "base_dir": data.get("base_dir"),
    }


def _as_list(data: Mapping[str, Any], key: str) -> list[Any]:
    """A list value; a single string counts as a one-item list."""
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"{key} must be a list or a string, got {type(value).__name__}")
    return list(value)


def _as_bool(data: Mapping[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}")
    return value


def _load_source_entry(entry: Any) -> dict[str, Any]:
    if isinstance(entry, str):
        entry = {"path": entry}
    if not isinstance(entry, Mapping) or "path" not in entry:
        raise ConfigError(f"property_sources entries need a 'path': {entry!r}")
    try:
        order = int(entry.get("order", 0))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid order for property source {entry['path']!r}") from exc
    return {"path": str(entry["path"]), "name": entry.get("name"), "order": order}


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file.

    Relative property source paths resolve against the file's directory.
    """
    path = Path(path).expanduser()
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Error reading configuration file {path}: {exc}") from exc

    cfg = load_config(raw)
    if cfg["base_dir"] is None:
        cfg["base_dir"] = str(path.parent)
    return cfg


def create_environment(
    config: Mapping[str, Any],
    environ: Mapping[str, str] | None = None,
) -> Environment:
    """Build an Environment holding every configured property source."""
    base_dir = Path(config.get("base_dir") or ".")
    env = Environment(
        active_names=config["active_environments"],
        packages=config["packages"],
    )
    for entry in config["property_sources"]:
        src_path = Path(entry["path"]).expanduser()
        if not src_path.is_absolute():
            src_path = base_dir / src_path
        env.add_property_source(from_yaml(src_path, name=entry["name"], order=entry["order"]))
    if config["include_environ"]:
        env.add_property_source(from_environ(environ))
    return env


def create_endpoint(
    config: Mapping[str, Any],
    environ: Mapping[str, str] | None = None,
) -> EnvironmentEndpoint:
    """Create a fully configured endpoint from a config dict."""
    cfg = load_config(config)

    environment_filter = ConfiguredEnvironmentFilter(cfg["masking"], cfg["mask_patterns"])
    endpoint = EnvironmentEndpoint(
        environment=create_environment(cfg, environ),
        environment_filter=environment_filter,
        enabled=cfg["enabled"],
    )
    logger.info(
        "env endpoint %s (masking=%s, %d extra patterns, %d property sources)",
        "enabled" if endpoint.enabled else "disabled",
        environment_filter.mode,
        len(environment_filter.patterns),
        len(endpoint.environment.property_sources),
    )
    return endpoint
