"""Round-trip timing for backend calls."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class RequestTimer:
    """Records when a request was sent and how long it took.

    `request_sent_at` is wall-clock time for display; the duration is taken
    from a monotonic clock so it is unaffected by clock adjustments.
    """

    wall_clock: Callable[[], datetime] = _utc_now
    monotonic: Callable[[], float] = time.monotonic
    request_sent_at: datetime = field(init=False)
    _started: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.request_sent_at = self.wall_clock()
        self._started = self.monotonic()

    def elapsed_ms(self) -> int:
        """Whole milliseconds since the timer was created, never negative."""
        return max(0, round((self.monotonic() - self._started) * 1000))
