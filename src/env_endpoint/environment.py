"""Environment — the registry of property sources the endpoint reports on.

Design goals:
  - Ordered: sources keep registration order; the report sorts by ``order``
  - Snapshot reads: a report walks a tuple taken under the lock, so sources
    registered mid-report never disturb it
  - Replace by name: registering a source twice keeps a single entry
"""

from __future__ import annotations
import logging
import threading
from collections.abc import Iterable

from .types import PropertySource

logger = logging.getLogger(__name__)


class Environment:
    """Active environment names, packages and property sources."""

    __slots__ = ("_active_names", "_packages", "_sources", "_lock")

    def __init__(
        self,
        active_names: Iterable[str] = (),
        packages: Iterable[str] = (),
        property_sources: Iterable[PropertySource] = (),
    ) -> None:
        self._active_names: tuple[str, ...] = tuple(active_names)
        self._packages: tuple[str, ...] = tuple(packages)
        self._sources: list[PropertySource] = []
        self._lock = threading.Lock()
        for ps in property_sources:
            self.add_property_source(ps)

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    def add_property_source(self, source: PropertySource) -> None:
        """Register a source, replacing any earlier one with the same name."""
        with self._lock:
            for idx, existing in enumerate(self._sources):
                if existing.name == source.name:
                    self._sources[idx] = source
                    logger.debug("Replaced property source %r", source.name)
                    return
            self._sources.append(source)
        logger.debug("Added property source %r (order=%d)", source.name, source.order)

    def get_property_source(self, name: str) -> PropertySource | None:
        for ps in self.property_sources:
            if ps.name == name:
                return ps
        return None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def property_sources(self) -> tuple[PropertySource, ...]:
        with self._lock:
            return tuple(self._sources)

    @property
    def active_names(self) -> tuple[str, ...]:
        return self._active_names

    @property
    def packages(self) -> tuple[str, ...]:
        return self._packages
