r"""FilterSpecification — the masking policy for one environment report.

A fresh specification is created for every request and handed to the
registered EnvironmentEndpointFilter (if any) before the report is built:

    spec = FilterSpecification(principal)
    spec.mask_none().mask_patterns(r".*password.*", r"aws\..*")

    spec.classify("db.password")  # FilterResult.MASK
    spec.classify("server.port")  # FilterResult.PLAIN

In ``mask_all`` mode (the default) the mask patterns list the keys that are
shown in plain text; in ``mask_none`` mode they list the keys that are masked.
"""

from __future__ import annotations
import re
from typing import Any

from .patterns import compile_patterns, legacy_patterns, matches_any
from .types import FilterResult


class FilterSpecification:
    """Per-request masking rules, configured through chained calls."""

    __slots__ = ("_principal", "_all_masked", "_masked_patterns", "_allowed_patterns")

    def __init__(self, principal: Any = None) -> None:
        self._principal = principal
        self._all_masked = True
        self._masked_patterns: list[re.Pattern] = []
        # Not consulted by classify(); reserved for hide rules
        self._allowed_patterns: list[re.Pattern] = []

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def mask_all(self) -> FilterSpecification:
        """Mask every value; mask patterns become plain-text exceptions."""
        self._all_masked = True
        return self

    def mask_none(self) -> FilterSpecification:
        """Show every value; mask patterns select what gets masked."""
        self._all_masked = False
        return self

    def mask_patterns(self, *patterns: str | re.Pattern) -> FilterSpecification:
        """Append patterns matched against whole property keys.

        Strings are compiled immediately; an invalid one raises
        InvalidPatternError and nothing from this call is added.
        """
        self._masked_patterns.extend(compile_patterns(patterns))
        return self

    def legacy_masking(self) -> FilterSpecification:
        """Restore the old default: show everything except secret-looking keys.

        Same as ``mask_none()`` plus case-insensitive patterns masking any key
        containing password, credential, certificate, key, secret or token.
        """
        self._all_masked = False
        self._masked_patterns.extend(legacy_patterns())
        return self

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def principal(self) -> Any:
        return self._principal

    @property
    def all_masked(self) -> bool:
        return self._all_masked

    @property
    def masked_patterns(self) -> tuple[re.Pattern, ...]:
        return tuple(self._masked_patterns)

    @property
    def allowed_patterns(self) -> tuple[re.Pattern, ...]:
        return tuple(self._allowed_patterns)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, key: str) -> FilterResult:
        """Decide how ``key`` appears in the report."""
        if matches_any(key, self._masked_patterns):
            return FilterResult.PLAIN if self._all_masked else FilterResult.MASK
        return FilterResult.MASK if self._all_masked else FilterResult.PLAIN

    def __repr__(self) -> str:
        return (
            f"FilterSpecification(all_masked={self._all_masked}, "
            f"masked_patterns={[p.pattern for p in self._masked_patterns]!r})"
        )
