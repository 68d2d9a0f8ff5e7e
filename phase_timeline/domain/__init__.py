"""
Domain layer.

Holds the request timeline entity, its value objects and domain exceptions.
It has no dependencies on other layers.
"""

from phase_timeline.domain.entities import RequestTimeline
from phase_timeline.domain.exceptions import (TimelineException,
                                              TimelineRunNotFoundError,
                                              ValidationException)
from phase_timeline.domain.value_objects import (ActivePhaseView,
                                                 CompletedPhaseView,
                                                 PhaseRecord, RenderedView,
                                                 format_duration)

__all__ = [
    # Entities
    "RequestTimeline",
    # Value Objects
    "PhaseRecord",
    "CompletedPhaseView",
    "ActivePhaseView",
    "RenderedView",
    "format_duration",
    # Exceptions
    "TimelineException",
    "ValidationException",
    "TimelineRunNotFoundError",
]
