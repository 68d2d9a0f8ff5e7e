"""Domain entities."""

from phase_timeline.domain.entities.request_timeline import Clock, RequestTimeline

__all__ = [
    "Clock",
    "RequestTimeline",
]
