"""Exception classes for env-endpoint."""

from __future__ import annotations


class EnvEndpointError(Exception):
    """Base class for all env-endpoint errors."""


class InvalidPatternError(EnvEndpointError, ValueError):
    """Raised when a mask pattern is not a valid regular expression."""

    def __init__(self, pattern: str, orig_exc: Exception | None = None) -> None:
        self.pattern = pattern
        self.orig_exc = orig_exc
        msg = f"Invalid mask pattern {pattern!r}"
        if orig_exc is not None:
            msg += f": {orig_exc}"
        super().__init__(msg)


class ConfigError(EnvEndpointError):
    """Raised when loading or validating configuration fails."""
