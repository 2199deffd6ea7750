from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from tgquery.config import Settings
from tgquery.dispatcher import ENGINE_FAILURE_CODE, Dispatcher
from tgquery.engine import CorrelatedEngine
from tgquery.requests import GetMe, GetUser


class QueueTransport:
    """In-memory transport; tests play the engine process."""

    def __init__(self) -> None:
        self.outgoing: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.incoming: asyncio.Queue[str | None] = asyncio.Queue()

    async def send(self, data: str) -> None:
        await self.outgoing.put(json.loads(data))

    async def receive(self) -> str | None:
        return await self.incoming.get()

    async def answer(self, query: dict[str, Any], reply: dict[str, Any]) -> None:
        await self.incoming.put(json.dumps({**reply, "@extra": query["@extra"]}))


@pytest.mark.asyncio
async def test_replies_are_correlated_out_of_order() -> None:
    transport = QueueTransport()
    engine = CorrelatedEngine(transport)
    pump = asyncio.create_task(engine.pump())
    try:
        first = asyncio.create_task(engine.send({"@type": "getUser", "user_id": 1}))
        second = asyncio.create_task(engine.send({"@type": "getUser", "user_id": 2}))
        query_one = await transport.outgoing.get()
        query_two = await transport.outgoing.get()
        assert query_one["@extra"] != query_two["@extra"]

        await transport.answer(query_two, {"@type": "user", "id": query_two["user_id"]})
        await transport.answer(query_one, {"@type": "user", "id": query_one["user_id"]})

        assert (await first) == {"@type": "user", "id": 1}
        assert (await second) == {"@type": "user", "id": 2}
        assert engine.in_flight == 0
    finally:
        await transport.incoming.put(None)
        await pump


@pytest.mark.asyncio
async def test_uncorrelated_replies_are_published_as_updates() -> None:
    transport = QueueTransport()
    engine = CorrelatedEngine(transport)
    updates: list[dict[str, Any]] = []

    async def _on_update(update: dict[str, Any]) -> None:
        updates.append(update)

    unsubscribe = engine.on_update(_on_update)
    await transport.incoming.put(json.dumps({"@type": "updateUser", "user": {"@type": "user", "id": 1}}))
    await transport.incoming.put("not json")
    await transport.incoming.put(json.dumps({"@type": "updateOption", "@extra": "unknown"}))
    await transport.incoming.put(None)
    await engine.pump()
    unsubscribe()

    assert [update["@type"] for update in updates] == ["updateUser", "updateOption"]
    assert engine.closed


@pytest.mark.asyncio
async def test_failing_update_handler_does_not_stop_pump() -> None:
    transport = QueueTransport()
    engine = CorrelatedEngine(transport)

    async def _broken(update: dict[str, Any]) -> None:
        raise RuntimeError("handler broke")

    engine.on_update(_broken)
    await transport.incoming.put(json.dumps({"@type": "updateOption"}))
    await transport.incoming.put(None)

    await engine.pump()

    assert engine.closed


@pytest.mark.asyncio
async def test_closing_fails_outstanding_calls_as_error_envelopes() -> None:
    transport = QueueTransport()
    engine = CorrelatedEngine(transport)
    dispatcher = Dispatcher(engine, Settings(_env_file=None, request_timeout_seconds=1.0))

    handle = dispatcher.dispatch(GetUser(1))
    await transport.outgoing.get()
    engine.close()
    result = await handle

    assert result.error is not None
    assert result.error.code == ENGINE_FAILURE_CODE
    assert engine.in_flight == 0


@pytest.mark.asyncio
async def test_send_after_close_resolves_as_error_envelope() -> None:
    engine = CorrelatedEngine(QueueTransport())
    engine.close()

    result = await Dispatcher(engine, Settings(_env_file=None)).dispatch(GetMe())

    assert result.error is not None
    assert result.error.message == "engine is closed"


@pytest.mark.asyncio
async def test_dispatcher_over_correlated_engine_parses_reply() -> None:
    transport = QueueTransport()
    engine = CorrelatedEngine(transport)
    pump = asyncio.create_task(engine.pump())
    try:
        handle = Dispatcher(engine, Settings(_env_file=None)).dispatch(GetMe())
        query = await transport.outgoing.get()
        assert query["@type"] == "getMe"
        await transport.answer(query, {"@type": "user", "id": 7, "first_name": "Me"})

        result = await handle

        assert result.payload is not None
        assert result.payload.id == 7
        assert "@extra" not in (result.payload.model_extra or {})
    finally:
        await transport.incoming.put(None)
        await pump
