from phase_timeline.presentation.api.v1.schemas.timeline import (
    ActivePhaseResponse,
    CompletedPhaseResponse,
    PhaseStartResponse,
    PhaseStopResponse,
    RenderedViewResponse,
    ServerTimingResponse,
    TimelineRunResponse,
)

__all__ = [
    "ActivePhaseResponse",
    "CompletedPhaseResponse",
    "PhaseStartResponse",
    "PhaseStopResponse",
    "RenderedViewResponse",
    "ServerTimingResponse",
    "TimelineRunResponse",
]
