"""Mask pattern helpers.

Patterns are matched against the whole property key (``re.fullmatch``),
so a substring rule has to spell out its wildcards: ``.*secret.*``.
"""

from __future__ import annotations
import re
from collections.abc import Iterable

from .errors import InvalidPatternError

# Key vocabulary masked by legacy_masking()
PROPERTY_NAMES_TO_MASK: tuple[str, ...] = (
    "password",
    "credential",
    "certificate",
    "key",
    "secret",
    "token",
)


def compile_pattern(pattern: str | re.Pattern, flags: int = 0) -> re.Pattern:
    """Return a compiled pattern, raising InvalidPatternError on bad syntax."""
    if isinstance(pattern, re.Pattern):
        if isinstance(pattern.pattern, bytes):
            raise InvalidPatternError(repr(pattern.pattern), TypeError("bytes patterns cannot match str keys"))
        return pattern
    if not isinstance(pattern, str):
        raise InvalidPatternError(repr(pattern), TypeError("pattern must be str or re.Pattern"))
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise InvalidPatternError(pattern, exc) from exc


def compile_patterns(patterns: Iterable[str | re.Pattern]) -> list[re.Pattern]:
    """Compile every pattern up front so a bad one rejects the whole batch."""
    return [compile_pattern(p) for p in patterns]


def legacy_patterns() -> list[re.Pattern]:
    """Case-insensitive ``.*<word>.*`` for each legacy vocabulary word."""
    return [
        re.compile(f".*{word}.*", re.IGNORECASE)
        for word in PROPERTY_NAMES_TO_MASK
    ]


def matches_any(key: str, patterns: Iterable[re.Pattern]) -> bool:
    """True when some pattern matches the entire key."""
    return any(p.fullmatch(key) for p in patterns)
