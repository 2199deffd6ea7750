"""Scripted engine double and engine reply builders shared by the tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any


type ScriptedReply = dict[str, Any] | None | BaseException | Callable[[dict[str, Any]], Any]


class FakeEngine:
    """Engine double answering each query type from a scripted queue."""

    def __init__(self) -> None:
        self.queries: list[dict[str, Any]] = []
        self._replies: dict[str, list[ScriptedReply]] = {}
        self.gates: dict[str, asyncio.Event] = {}

    def script(self, type_name: str, *replies: ScriptedReply) -> None:
        self._replies.setdefault(type_name, []).extend(replies)

    def gate(self, type_name: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[type_name] = event
        return event

    @property
    def sent_types(self) -> list[str]:
        return [query["@type"] for query in self.queries]

    async def send(self, query: dict[str, Any]) -> dict[str, Any] | None:
        self.queries.append(query)
        gate = self.gates.get(query["@type"])
        if gate is not None:
            await gate.wait()
        replies = self._replies.get(query["@type"])
        if not replies:
            raise LookupError(f"no scripted reply for {query['@type']}")
        reply = replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply):
            reply = reply(query)
            if asyncio.iscoroutine(reply):
                reply = await reply
        return reply


def user_reply(user_id: int, *, profile_photo: dict[str, Any] | None = None, **extra: Any) -> dict[str, Any]:
    reply: dict[str, Any] = {"@type": "user", "id": user_id, "first_name": f"user{user_id}", **extra}
    if profile_photo is not None:
        reply["profile_photo"] = profile_photo
    return reply


def error_reply(message: str, code: int = 400) -> dict[str, Any]:
    return {"@type": "error", "code": code, "message": message}


def chat_reply(chat_id: int, chat_type: dict[str, Any], title: str = "") -> dict[str, Any]:
    return {"@type": "chat", "id": chat_id, "type": chat_type, "title": title}

