"""OpenTelemetry tracing helpers.

Spans are emitted through the OpenTelemetry API. Without an SDK configured by
the hosting process the API hands out non-recording tracers, so instrumented
code runs unchanged in tests and local development.

Never add ingredient values, error bodies or other payload content to span
attributes; operation names, ids, outcome kinds and durations are enough to
correlate a trace with the structured logs.
"""

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.trace import Tracer


def get_tracer(name: str) -> Tracer:
    """Get a tracer for custom instrumentation, typically ``get_tracer(__name__)``."""
    return trace.get_tracer(name)
