"""Single-resolution async handles over result envelopes."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Generator
from typing import Any

from loguru import logger

from tgquery.envelope import ResultEnvelope

type Continuation[T, U] = Callable[[ResultEnvelope[T]], Pending[U] | ResultEnvelope[U]]


class Pending[T]:
    """Awaitable handle to one ``ResultEnvelope``.

    The wrapped future resolves exactly once and may be awaited by any number
    of dependents. Awaiting is shielded: a waiter that gets cancelled stops
    waiting, but the request itself still runs to completion.

    Handles must be created while an event loop is running.
    """

    def __init__(self, future: asyncio.Future[ResultEnvelope[T]]) -> None:
        self._future = future
        self._future.add_done_callback(_log_fault)

    @classmethod
    def spawn(cls, coro: Coroutine[Any, Any, ResultEnvelope[T]]) -> Pending[T]:
        return cls(asyncio.ensure_future(coro))

    @classmethod
    def resolved(cls, envelope: ResultEnvelope[T]) -> Pending[T]:
        future: asyncio.Future[ResultEnvelope[T]] = asyncio.get_running_loop().create_future()
        future.set_result(envelope)
        return cls(future)

    def __await__(self) -> Generator[Any, None, ResultEnvelope[T]]:
        return asyncio.shield(self._future).__await__()

    def done(self) -> bool:
        return self._future.done()

    def map[U](self, fn: Callable[[T], U | None]) -> Pending[U]:
        """Project the found payload into a narrower envelope."""

        async def _project() -> ResultEnvelope[U]:
            envelope = await self
            return envelope.map(fn)

        return Pending.spawn(_project())

    def then[U](self, fn: Continuation[T, U]) -> Pending[U]:
        """Run ``fn`` once this handle resolves and adopt its result.

        ``fn`` sees the whole envelope, errors included, and returns either a
        final envelope or the handle of a dependent request.
        """

        async def _chain() -> ResultEnvelope[U]:
            envelope = await self
            follow_up = fn(envelope)
            if isinstance(follow_up, Pending):
                return await follow_up
            return follow_up

        return Pending.spawn(_chain())


def _log_fault(future: asyncio.Future[Any]) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.opt(exception=error).error("pending.fault error={}", type(error).__name__)
