"""Unit tests for request timing."""

from __future__ import annotations

from datetime import UTC, datetime

from services.timing import RequestTimer


T0 = datetime(2024, 1, 1, tzinfo=UTC)


class _Ticks:
    def __init__(self, *values: float) -> None:
        self._values = list(values)

    def __call__(self) -> float:
        return self._values.pop(0)


def test_records_sent_at_from_wall_clock() -> None:
    timer = RequestTimer(wall_clock=lambda: T0, monotonic=_Ticks(5.0))
    assert timer.request_sent_at == T0


def test_elapsed_is_whole_milliseconds() -> None:
    timer = RequestTimer(wall_clock=lambda: T0, monotonic=_Ticks(10.0, 10.1204))
    assert timer.elapsed_ms() == 120


def test_elapsed_never_negative() -> None:
    timer = RequestTimer(wall_clock=lambda: T0, monotonic=_Ticks(10.0, 9.5))
    assert timer.elapsed_ms() == 0


def test_default_clocks() -> None:
    timer = RequestTimer()
    assert timer.request_sent_at.tzinfo is UTC
    assert timer.elapsed_ms() >= 0
