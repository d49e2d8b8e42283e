"""Report building — turns property sources into the environment report.

Output shape:

    {"activeEnvironments": [...],
     "packages": [...],
     "propertySources": [
         {"name": "env", "order": 0, "convention": "ENVIRONMENT_VARIABLE",
          "properties": {"API_TOKEN": "*****", "SERVER_PORT": "8080"}}]}

Every function here is pure: sources and the specification are only read.
"""

from __future__ import annotations
from collections.abc import Iterable
from typing import Any

from .specification import FilterSpecification
from .types import MASK_MARKER, FilterResult, PropertySource


def build_full_report(
    sources: Iterable[PropertySource],
    filter_spec: FilterSpecification,
    *,
    active_names: Iterable[str] = (),
    packages: Iterable[str] = (),
) -> dict[str, Any]:
    """Build the report for every source, lowest ``order`` first.

    ``sorted`` is stable, so sources with equal order keep their input order.
    """
    ordered = sorted(sources, key=lambda ps: ps.order)
    return {
        "activeEnvironments": list(active_names),
        "packages": list(packages),
        "propertySources": [
            build_property_source_info(ps, filter_spec) for ps in ordered
        ],
    }


def build_single_source_report(
    sources: Iterable[PropertySource],
    name: str,
    filter_spec: FilterSpecification,
) -> dict[str, Any] | None:
    """Report entry for the first source named exactly ``name``, or None."""
    for ps in sources:
        if ps.name == name:
            return build_property_source_info(ps, filter_spec)
    return None


def build_property_source_info(
    source: PropertySource,
    filter_spec: FilterSpecification,
) -> dict[str, Any]:
    """Report entry for one source."""
    return {
        "name": source.name,
        "order": source.order,
        "convention": source.convention.name,
        "properties": _filtered_properties(source, filter_spec),
    }


def _filtered_properties(
    source: PropertySource,
    filter_spec: FilterSpecification,
) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    for key in source:
        result = filter_spec.classify(key)
        if result is FilterResult.HIDE:
            continue
        # get() errors propagate; only PLAIN values are read at all
        properties[key] = MASK_MARKER if result is FilterResult.MASK else source.get(key)
    return properties
