"""Domain value objects."""

from phase_timeline.domain.value_objects.timing import (ActivePhaseView,
                                                        CompletedPhaseView,
                                                        PhaseRecord,
                                                        RenderedView,
                                                        format_duration)

__all__ = [
    "PhaseRecord",
    "CompletedPhaseView",
    "ActivePhaseView",
    "RenderedView",
    "format_duration",
]
