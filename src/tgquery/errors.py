"""Application-level exception types for tgquery."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tgquery.envelope import ErrorDescriptor


class TgQueryError(Exception):
    """Base exception for tgquery."""


class ConfigurationError(TgQueryError):
    """Raised when settings fail validation."""


class InvalidArgumentError(TgQueryError, ValueError):
    """Raised before dispatch when a required parameter is absent or malformed."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"invalid argument '{name}': {reason}")
        self.name = name
        self.reason = reason


class UpstreamError(TgQueryError):
    """Raised when an errored envelope is unwrapped."""

    def __init__(self, error: ErrorDescriptor) -> None:
        super().__init__(f"upstream error {error.code}: {error.message}")
        self.error = error
