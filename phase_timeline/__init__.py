"""Phase timeline: named, overlapping timed phases with live views and Server-Timing output."""

from phase_timeline.domain.entities.request_timeline import RequestTimeline
from phase_timeline.domain.value_objects.timing import (RenderedView,
                                                        format_duration)

__version__ = "1.0.0"

__all__ = [
    "RequestTimeline",
    "RenderedView",
    "format_duration",
]
