"""
Request context management using contextvars.

Provides async-safe storage for the timeline of the request being served.

Usage:
    # In middleware:
    token = bind_timeline(RequestTimeline())
    ...
    reset_timeline(token)

    # In any code running inside the request:
    timeline = current_timeline()  # Returns the request's timeline or None
    if timeline:
        timeline.start_clock("db")

    # Context is automatically isolated per request due to contextvars
"""

from contextvars import ContextVar, Token

from phase_timeline.domain.entities.request_timeline import RequestTimeline

_current_timeline: ContextVar[RequestTimeline | None] = ContextVar(
    "current_timeline", default=None
)


def bind_timeline(timeline: RequestTimeline) -> Token:
    """Make `timeline` the current request timeline; returns a reset token"""
    return _current_timeline.set(timeline)


def reset_timeline(token: Token) -> None:
    """Restore whatever timeline was current before `bind_timeline`"""
    _current_timeline.reset(token)


def current_timeline() -> RequestTimeline | None:
    """Get the current request timeline, or None outside a request."""
    return _current_timeline.get()
