"""Shared test fixtures for pytest.

ENVIRONMENT is pinned to "test" before any application module is imported so
settings never try to read a developer's .env.dev file.
"""

import os
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import UTC, datetime

import httpx
import pytest
import pytest_asyncio


os.environ["ENVIRONMENT"] = "test"

from core.config import get_settings
from services.bakery import BakeryService
from services.timing import RequestTimer


BASE_URL = "http://baker.test/api/bakery"
SENT_AT = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


class FakeClock:
    """Monotonic clock the tests move forward by hand."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000

    def __call__(self) -> float:
        return self.now


@pytest.fixture(autouse=True)
def _fresh_settings() -> None:
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timer_factory(clock: FakeClock) -> Callable[[], RequestTimer]:
    return lambda: RequestTimer(wall_clock=lambda: SENT_AT, monotonic=clock)


@pytest_asyncio.fixture
async def make_service(
    timer_factory: Callable[[], RequestTimer],
) -> AsyncIterator[Callable[..., BakeryService]]:
    """Build a BakeryService whose backend is the given request handler."""
    clients: list[httpx.AsyncClient] = []

    def _make(handler: Handler, **kwargs: object) -> BakeryService:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        kwargs.setdefault("timer_factory", timer_factory)
        return BakeryService(client, BASE_URL, **kwargs)  # type: ignore[arg-type]

    yield _make

    for client in clients:
        await client.aclose()
