"""Client engine boundary and a correlating adapter over a JSON transport."""

from __future__ import annotations

import asyncio
import json
import uuid
from collections.abc import Callable, Coroutine
from typing import Any, Protocol

from blinker import Signal
from loguru import logger

type Reply = dict[str, Any]
UpdateHandler = Callable[[Reply], Coroutine[Any, Any, None]]

CORRELATION_KEY = "@extra"


class ClientEngine(Protocol):
    """Single request/response primitive exposed by the external engine.

    ``send`` returns an object reply, an ``{"@type": "error"}`` reply, or
    ``None`` when the engine answers with an empty object.
    """

    async def send(self, query: dict[str, Any]) -> Reply | None: ...


class JsonTransport(Protocol):
    """Raw duplex channel to the engine process."""

    async def send(self, data: str) -> None: ...

    async def receive(self) -> str | None:
        """Return the next raw reply, or ``None`` once the channel is closed."""
        ...


class CorrelatedEngine:
    """Pairs engine replies with their queries through ``@extra`` ids.

    Replies carrying no known correlation id are engine updates and are
    published on the ``updates`` signal.
    """

    def __init__(self, transport: JsonTransport) -> None:
        self._transport = transport
        self._pending: dict[str, asyncio.Future[Reply]] = {}
        self._updates = Signal("tgquery.updates")
        self._closed = False

    @property
    def in_flight(self) -> int:
        return len(self._pending)

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, query: dict[str, Any]) -> Reply | None:
        if self._closed:
            raise ConnectionError("engine is closed")
        extra = uuid.uuid4().hex
        future: asyncio.Future[Reply] = asyncio.get_running_loop().create_future()
        self._pending[extra] = future
        try:
            await self._transport.send(json.dumps({**query, CORRELATION_KEY: extra}, ensure_ascii=False))
            return await future
        finally:
            self._pending.pop(extra, None)

    async def pump(self) -> None:
        """Route replies until the transport closes, then fail what is left."""

        logger.info("engine.pump.start")
        try:
            while True:
                raw = await self._transport.receive()
                if raw is None:
                    break
                await self._route(raw)
        finally:
            self.close()
            logger.info("engine.pump.stopped")

    def on_update(self, handler: UpdateHandler) -> Callable[[], None]:
        async def _receiver(sender: Any, *, update: Reply) -> None:
            await handler(update)

        self._updates.connect(_receiver, weak=False)
        return lambda: self._updates.disconnect(_receiver)

    def close(self) -> None:
        self._closed = True
        for future in self._pending.values():
            if not future.done():
                future.set_exception(ConnectionError("engine closed before reply"))

    async def _route(self, raw: str) -> None:
        try:
            reply = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("engine.reply.malformed size={}", len(raw))
            return
        if not isinstance(reply, dict):
            logger.warning("engine.reply.unexpected kind={}", type(reply).__name__)
            return

        extra = reply.pop(CORRELATION_KEY, None)
        future = self._pending.get(extra) if isinstance(extra, str) else None
        if future is None:
            logger.debug("engine.update type={}", reply.get("@type"))
            try:
                await self._updates.send_async(self, update=reply)
            except Exception:
                logger.exception("engine.update.handler_error type={}", reply.get("@type"))
            return
        if not future.done():
            future.set_result(reply)
