"""The ``env`` management endpoint.

Each call builds a fresh FilterSpecification, lets the registered
EnvironmentEndpointFilter adjust it, then renders the report:

    endpoint = EnvironmentEndpoint(
        environment,
        environment_filter=ConfiguredEnvironmentFilter("legacy"),
    )
    endpoint.get_environment_info()          # full report
    endpoint.get_properties("application")   # one source, or None
"""

from __future__ import annotations
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from .environment import Environment
from .errors import ConfigError
from .patterns import compile_patterns
from .report import build_full_report, build_single_source_report
from .specification import FilterSpecification

logger = logging.getLogger(__name__)

MASKING_MODES = ("all", "none", "legacy")


@runtime_checkable
class EnvironmentEndpointFilter(Protocol):
    """Policy hook called once per request before any key is classified."""

    def specify_filtering(self, specification: FilterSpecification) -> None: ...


class ConfiguredEnvironmentFilter:
    """Policy hook driven by configuration: a masking mode plus patterns."""

    __slots__ = ("mode", "patterns")

    def __init__(self, mode: str = "all", patterns: Iterable[str | re.Pattern] = ()) -> None:
        if mode not in MASKING_MODES:
            raise ConfigError(f"Unknown masking mode {mode!r}, expected one of {', '.join(MASKING_MODES)}")
        self.mode = mode
        # Compiled here so a bad pattern fails at startup, not per request
        self.patterns = compile_patterns(patterns)

    def specify_filtering(self, specification: FilterSpecification) -> None:
        if self.mode == "legacy":
            specification.legacy_masking()
        elif self.mode == "none":
            specification.mask_none()
        else:
            specification.mask_all()
        specification.mask_patterns(*self.patterns)


@dataclass
class EnvironmentEndpoint:
    """Reports the environment's property sources with sensitive values masked."""

    NAME = "env"
    DEFAULT_ENABLED = False

    environment: Environment
    environment_filter: EnvironmentEndpointFilter | None = None
    enabled: bool = DEFAULT_ENABLED

    def create_filter_specification(self, principal: Any = None) -> FilterSpecification:
        spec = FilterSpecification(principal)
        if self.environment_filter is not None:
            self.environment_filter.specify_filtering(spec)
        return spec

    def get_environment_info(self, principal: Any = None) -> dict[str, Any]:
        """Full report: active environments, packages and every property source."""
        spec = self.create_filter_specification(principal)
        env = self.environment
        report = build_full_report(
            env.property_sources,
            spec,
            active_names=env.active_names,
            packages=env.packages,
        )
        logger.debug(
            "Built environment report with %d property sources",
            len(report["propertySources"]),
        )
        return report

    def get_properties(self, name: str, principal: Any = None) -> dict[str, Any] | None:
        """Report entry for the property source called ``name``; None if absent."""
        spec = self.create_filter_specification(principal)
        info = build_single_source_report(self.environment.property_sources, name, spec)
        if info is None:
            logger.debug("Property source %r not found", name)
        return info
