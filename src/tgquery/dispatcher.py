"""Correlation shim between typed requests and the engine's reply channel."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

from tgquery.config import Settings
from tgquery.engine import ClientEngine
from tgquery.envelope import ErrorDescriptor, ResultEnvelope
from tgquery.handle import Pending
from tgquery.requests import Request

MALFORMED_REPLY_CODE = 502
ENGINE_FAILURE_CODE = 503
TIMEOUT_CODE = 504


def decode_reply[T: BaseModel](request: Request[T], reply: Any) -> ResultEnvelope[T]:
    """Turn one raw engine reply into an envelope for ``request``."""

    if reply is None:
        return ResultEnvelope.not_found()
    if not isinstance(reply, Mapping):
        logger.warning("dispatch.reply.unexpected type={} kind={}", request.type_name, type(reply).__name__)
        return ResultEnvelope.failure(
            ErrorDescriptor(MALFORMED_REPLY_CODE, f"unexpected {request.type_name} reply")
        )
    if reply.get("@type") == "error":
        return ResultEnvelope.failure(ErrorDescriptor.from_reply(reply))
    try:
        payload = request.parse_reply(reply)
    except ValidationError as exc:
        logger.warning(
            "dispatch.reply.malformed type={} reply_type={} errors={}",
            request.type_name,
            reply.get("@type"),
            exc.error_count(),
        )
        return ResultEnvelope.failure(
            ErrorDescriptor(MALFORMED_REPLY_CODE, f"malformed {request.type_name} reply")
        )
    return ResultEnvelope.found(payload)


class Dispatcher:
    """Sends one request per call and resolves its handle exactly once.

    Engine failures (timeouts, exceptions, malformed replies) come back as
    error envelopes; ``dispatch`` never raises for them.
    """

    def __init__(self, engine: ClientEngine, settings: Settings | None = None) -> None:
        self._engine = engine
        self._settings = settings or Settings()

    @property
    def timeout_seconds(self) -> float:
        return self._settings.request_timeout_seconds

    def dispatch[T: BaseModel](self, request: Request[T]) -> Pending[T]:
        return Pending.spawn(self._send(request))

    async def _send[T: BaseModel](self, request: Request[T]) -> ResultEnvelope[T]:
        with logger.contextualize(request=request.type_name):
            return await self._send_in_context(request)

    async def _send_in_context[T: BaseModel](self, request: Request[T]) -> ResultEnvelope[T]:
        logger.debug("dispatch.start type={}", request.type_name)
        start = time.monotonic()
        try:
            reply = await asyncio.wait_for(self._engine.send(request.to_query()), timeout=self.timeout_seconds)
        except TimeoutError:
            logger.warning("dispatch.timeout type={} timeout={}s", request.type_name, self.timeout_seconds)
            return ResultEnvelope.failure(
                ErrorDescriptor(TIMEOUT_CODE, f"{request.type_name} timed out after {self.timeout_seconds}s")
            )
        except Exception as exc:
            logger.opt(exception=True).warning("dispatch.engine_error type={}", request.type_name)
            return ResultEnvelope.failure(ErrorDescriptor(ENGINE_FAILURE_CODE, str(exc) or type(exc).__name__))
        finally:
            duration = time.monotonic() - start
            logger.debug("dispatch.end type={} duration={:.3f}ms", request.type_name, duration * 1000)
        return decode_reply(request, reply)
