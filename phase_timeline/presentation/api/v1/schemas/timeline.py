from datetime import datetime

from pydantic import BaseModel

from phase_timeline.application.services.timeline_registry import TimelineRun
from phase_timeline.domain.value_objects.timing import RenderedView


class CompletedPhaseResponse(BaseModel):
    """Completed phase entry of a rendered view"""

    ordinal: int
    name: str
    formatted_duration: str
    duration_ms: float


class ActivePhaseResponse(BaseModel):
    """In-progress phase entry of a rendered view"""

    name: str
    formatted_elapsed: str
    elapsed_ms: float
    in_progress: bool = True


class RenderedViewResponse(BaseModel):
    """Live view of a timeline"""

    elapsed: str
    elapsed_ms: float
    completed: list[CompletedPhaseResponse]
    in_progress: list[ActivePhaseResponse]

    @classmethod
    def from_view(cls, view: RenderedView) -> "RenderedViewResponse":
        return cls.model_validate(view.to_dict())


class TimelineRunResponse(BaseModel):
    """Workflow run metadata"""

    run_id: str
    created_at: datetime
    active_phases: list[str]
    completed_phases: list[str]
    total_elapsed_ms: float

    @classmethod
    def from_run(cls, run: TimelineRun) -> "TimelineRunResponse":
        timeline = run.timeline
        return cls(
            run_id=run.run_id,
            created_at=run.created_at,
            active_phases=list(timeline.active_phases),
            completed_phases=[
                name
                for name in timeline.completed_phases
                if not timeline.is_running(name)
            ],
            total_elapsed_ms=timeline.total_elapsed(),
        )


class PhaseStartResponse(BaseModel):
    """Result of starting a phase; `started` is False if it was already running"""

    run_id: str
    name: str
    started: bool


class PhaseStopResponse(BaseModel):
    """Result of stopping a phase; `stopped` is False if it was not running"""

    run_id: str
    name: str
    stopped: bool
    duration_ms: float | None = None


class ServerTimingResponse(BaseModel):
    run_id: str
    server_timing: str
