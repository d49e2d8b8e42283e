"""Property source loaders.

Usage:
    env = Environment(property_sources=[
        from_environ(),
        from_yaml("config/application.yml"),
        from_mapping("defaults", {"server.port": 8080}, order=-10),
    ])
"""

from __future__ import annotations
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .types import MapPropertySource, PropertyConvention

logger = logging.getLogger(__name__)

# Environment variables sort after file-based sources
ENV_ORDER = 100
ENV_SOURCE_NAME = "env"


def from_mapping(
    name: str,
    mapping: Mapping[str, Any],
    *,
    order: int = 0,
    convention: PropertyConvention = PropertyConvention.JAVA_PROPERTIES,
) -> MapPropertySource:
    """Wrap a flat key/value mapping. The mapping is copied."""
    return MapPropertySource(name=name, properties=dict(mapping), order=order, convention=convention)


def from_environ(
    environ: Mapping[str, str] | None = None,
    *,
    name: str = ENV_SOURCE_NAME,
    order: int = ENV_ORDER,
) -> MapPropertySource:
    """Snapshot of the process environment (or the given mapping)."""
    env = os.environ if environ is None else environ
    return MapPropertySource(
        name=name,
        properties=dict(env),
        order=order,
        convention=PropertyConvention.ENVIRONMENT_VARIABLE,
    )


def from_yaml(
    path: str | Path,
    *,
    name: str | None = None,
    order: int = 0,
) -> MapPropertySource:
    """Load a YAML document, flattening nested mappings to dotted keys.

    ``server: {port: 8080}`` becomes ``{"server.port": 8080}``; lists stay
    as values. An empty file yields an empty source.
    """
    path = Path(path).expanduser()
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Error reading property source {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Property source {path} must contain a mapping, got {type(data).__name__}")

    properties = flatten(data)
    logger.debug("Loaded %d properties from %s", len(properties), path)
    return MapPropertySource(name=name or path.stem, properties=properties, order=order)


def flatten(data: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested mappings into dotted keys, preserving document order."""
    out: dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping) and value:
            out.update(flatten(value, full_key))
        else:
            out[full_key] = value
    return out
