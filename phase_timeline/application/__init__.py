"""
Application layer.

This layer contains:
- Interfaces (ports) for display surfaces
- Services that drive timelines and track workflow runs
"""

from phase_timeline.application.interfaces import IDisplaySurface
from phase_timeline.application.services import (PhaseScope, TimelineDriver,
                                                 TimelineRegistry,
                                                 TimelineRun, watch_views)

__all__ = [
    # Interfaces
    "IDisplaySurface",
    # Services
    "PhaseScope",
    "TimelineDriver",
    "watch_views",
    "TimelineRegistry",
    "TimelineRun",
]
