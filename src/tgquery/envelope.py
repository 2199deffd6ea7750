"""Result envelopes carrying either a payload or an engine error."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from tgquery.errors import UpstreamError


class Outcome(StrEnum):
    """Three-way state of a resolved envelope."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class ErrorDescriptor:
    """Opaque code/message pair reported by the engine."""

    code: int
    message: str

    @classmethod
    def from_reply(cls, reply: Mapping[str, Any]) -> ErrorDescriptor:
        """Build a descriptor from an engine ``error`` reply."""

        code = reply.get("code", 0)
        return cls(
            code=code if isinstance(code, int) and not isinstance(code, bool) else 0,
            message=str(reply.get("message", "")),
        )


@dataclass(frozen=True)
class ResultEnvelope[T]:
    """Holds a payload, an error, or neither for a domain miss.

    Use the ``found``/``not_found``/``failure`` constructors. A successful call
    whose answer is "no such entity" is ``Outcome.NOT_FOUND``, never an error.
    """

    payload: T | None = None
    error: ErrorDescriptor | None = None

    def __post_init__(self) -> None:
        if self.payload is not None and self.error is not None:
            raise ValueError("envelope cannot carry both a payload and an error")

    @classmethod
    def found(cls, payload: T) -> ResultEnvelope[T]:
        if payload is None:
            raise ValueError("found envelope requires a payload")
        return cls(payload=payload)

    @classmethod
    def not_found(cls) -> ResultEnvelope[T]:
        return cls()

    @classmethod
    def failure(cls, error: ErrorDescriptor) -> ResultEnvelope[T]:
        return cls(error=error)

    @property
    def outcome(self) -> Outcome:
        if self.error is not None:
            return Outcome.ERROR
        if self.payload is None:
            return Outcome.NOT_FOUND
        return Outcome.FOUND

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_found(self) -> bool:
        return self.outcome is Outcome.FOUND

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def map[U](self, fn: Callable[[T], U | None]) -> ResultEnvelope[U]:
        """Project a found payload; errors and misses pass through unchanged.

        A projection that yields ``None`` is a domain miss.
        """

        if self.payload is None:
            return self.retag()
        return ResultEnvelope(payload=fn(self.payload))

    def retag[U](self) -> ResultEnvelope[U]:
        """Re-type an error or miss envelope, keeping the same descriptor."""

        if self.payload is not None:
            raise ValueError("cannot retag an envelope that carries a payload")
        return ResultEnvelope(error=self.error)

    def unwrap(self) -> T | None:
        """Return the payload (``None`` on a miss) or raise ``UpstreamError``."""

        if self.error is not None:
            raise UpstreamError(self.error)
        return self.payload

    def payload_or[D](self, default: D) -> T | D:
        if self.payload is None:
            return default
        return self.payload
