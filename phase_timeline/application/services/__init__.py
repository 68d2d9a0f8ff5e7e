"""Application services."""

from phase_timeline.application.services.timeline_driver import (
    PhaseScope,
    TimelineDriver,
    watch_views,
)
from phase_timeline.application.services.timeline_registry import (
    TimelineRegistry,
    TimelineRun,
)

__all__ = [
    "PhaseScope",
    "TimelineDriver",
    "watch_views",
    "TimelineRegistry",
    "TimelineRun",
]
