"""Caller-driven cancellation for in-flight backend calls."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")


class RequestCancelledError(Exception):
    """The caller cancelled the request through its CancellationToken."""


class CancellationToken:
    """A flag the caller sets to abandon a pending request.

    Unlike cancelling the awaiting task, tripping the token resolves the call
    normally with a "cancelled" ServiceError envelope.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def race(self, start: Callable[[], Awaitable[T]]) -> T:
        """Run `start()` until it finishes or the token is tripped.

        Raises RequestCancelledError when the token wins. The request is
        cancelled in that case; its result is discarded.
        """
        if self.is_cancelled:
            raise RequestCancelledError()

        request = asyncio.ensure_future(start())
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({request, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not request.done():
                request.cancel()

        if request.done() and not request.cancelled():
            return request.result()
        raise RequestCancelledError()
