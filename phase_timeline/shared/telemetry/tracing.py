"""Utility functions and decorators for timing phases of the current request"""
import asyncio
import logging
from collections.abc import Callable
from functools import wraps

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from phase_timeline.domain.entities.request_timeline import RequestTimeline
from phase_timeline.shared.context import current_timeline

logger = logging.getLogger(__name__)


class TimedPhase:
    """
    Context manager that times a phase on the current request timeline

    The phase also becomes an OpenTelemetry span of the same name. Outside a
    request (no bound timeline) only the span is recorded.

    Usage:
        with TimedPhase("db"):
            rows = fetch_rows()

        async with TimedPhase("render", {"template": "index"}):
            await render()
    """

    def __init__(
        self,
        name: str,
        attributes: dict | None = None,
        timeline: RequestTimeline | None = None,
    ):
        self.name = name
        self.attributes = attributes or {}
        self.timeline = timeline
        self.tracer = trace.get_tracer(__name__)
        self.span = None
        self.started = False
        self.duration_ms: float | None = None

    def __enter__(self):
        if self.timeline is None:
            self.timeline = current_timeline()
        if self.timeline is not None:
            self.started = self.timeline.start_clock(self.name)

        self.span = self.tracer.start_span(self.name)
        assert self.span is not None
        self.span.__enter__()
        for key, value in self.attributes.items():
            self.span.set_attribute(key, value)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        assert self.span is not None
        if self.started and self.timeline is not None:
            self.duration_ms = self.timeline.stop_clock(self.name)
            if self.duration_ms is not None:
                self.span.set_attribute("phase.duration_ms", self.duration_ms)

        if exc_type is not None:
            self.span.set_status(Status(StatusCode.ERROR, str(exc_val)))
            self.span.record_exception(exc_val)
        else:
            self.span.set_status(Status(StatusCode.OK))
        self.span.__exit__(exc_type, exc_val, exc_tb)

    async def __aenter__(self):
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return self.__exit__(exc_type, exc_val, exc_tb)


def timed_phase(phase_name: str | None = None, attributes: dict | None = None):
    """
    Decorator that times every call of a function as a request phase

    Usage:
        @timed_phase("load_metafile")
        async def load_metafile(path: str):
            ...

        @timed_phase()
        def parse(raw: str):
            ...

    Args:
        phase_name: Name of the phase (defaults to the function name)
        attributes: Additional attributes to add to the span
    """

    def decorator(func: Callable) -> Callable:
        name = phase_name or func.__name__

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            async with TimedPhase(name, attributes):
                return await func(*args, **kwargs)

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            with TimedPhase(name, attributes):
                return func(*args, **kwargs)

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        else:
            return sync_wrapper

    return decorator


def add_timeline_attributes(timeline: RequestTimeline) -> None:
    """
    Copy completed phase durations onto the current span

    Usage:
        add_timeline_attributes(current_timeline())
    """
    span = trace.get_current_span()
    if not span or not span.is_recording():
        return
    for name, record in timeline.completed_phases.items():
        span.set_attribute(f"phase.{name}.duration_ms", record.duration_ms)
    span.set_attribute("timeline.total_ms", timeline.total_elapsed())
