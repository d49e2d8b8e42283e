"""Core types."""

from __future__ import annotations
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable


# Written in place of a masked value
MASK_MARKER = "*****"


class FilterResult(Enum):
    """Decision for a single property key."""
    HIDE = "hide"     # omitted from the report
    MASK = "mask"     # reported with MASK_MARKER as the value
    PLAIN = "plain"   # reported with its real value


class PropertyConvention(Enum):
    """Naming style of the keys in a property source."""
    JAVA_PROPERTIES = "java_properties"            # server.port
    ENVIRONMENT_VARIABLE = "environment_variable"  # SERVER_PORT


@runtime_checkable
class PropertySource(Protocol):
    """Anything the report builder can walk."""
    name: str
    order: int
    convention: PropertyConvention

    def __iter__(self) -> Iterator[str]: ...

    def get(self, key: str) -> Any: ...


@dataclass(slots=True)
class MapPropertySource:
    """A property source backed by a plain mapping."""
    name: str
    properties: Mapping[str, Any] = field(default_factory=dict)
    order: int = 0            # lower sorts first in the report
    convention: PropertyConvention = PropertyConvention.JAVA_PROPERTIES

    def __iter__(self) -> Iterator[str]:
        return iter(self.properties)

    def __len__(self) -> int:
        return len(self.properties)

    def get(self, key: str) -> Any:
        return self.properties[key]
