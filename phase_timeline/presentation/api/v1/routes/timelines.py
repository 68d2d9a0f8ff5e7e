"""Timeline API endpoints

A remote driver for workflow runs: clients mark phase boundaries over HTTP
and read back live views, text summaries and Server-Timing values.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from phase_timeline.application.services.timeline_registry import (
    TimelineRegistry, TimelineRun)
from phase_timeline.presentation.api.dependencies import (get_phase_name,
                                                          get_timeline_registry,
                                                          get_timeline_run)
from phase_timeline.presentation.api.v1.schemas.timeline import (
    PhaseStartResponse, PhaseStopResponse, RenderedViewResponse,
    ServerTimingResponse, TimelineRunResponse)
from phase_timeline.presentation.api.websocket.hub import get_view_hub
from phase_timeline.presentation.middleware.server_timing import \
    SERVER_TIMING_HEADER
from phase_timeline.shared.telemetry.tracing import TimedPhase

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=TimelineRunResponse, status_code=status.HTTP_201_CREATED)
async def create_timeline_run(
    registry: Annotated[TimelineRegistry, Depends(get_timeline_registry)],
):
    """
    Start a new workflow run.

    The run gets its own timeline whose origin is the moment of creation.
    """
    run = registry.create()
    logger.info(f"Created timeline run {run.run_id}")
    return TimelineRunResponse.from_run(run)


@router.get("", response_model=list[TimelineRunResponse])
async def list_timeline_runs(
    registry: Annotated[TimelineRegistry, Depends(get_timeline_registry)],
):
    """List live workflow runs, oldest first."""
    return [TimelineRunResponse.from_run(run) for run in registry.list_runs()]


@router.get("/{run_id}", response_model=RenderedViewResponse)
async def get_timeline_view(run: Annotated[TimelineRun, Depends(get_timeline_run)]):
    """
    Render the live view of a run.

    In-progress phases report their elapsed time as of this call. A phase
    restarted after completing appears only under `in_progress`.
    """
    with TimedPhase("render"):
        view = run.timeline.render_display()
    return RenderedViewResponse.from_view(view)


@router.delete("/{run_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_timeline_run(
    run_id: str,
    registry: Annotated[TimelineRegistry, Depends(get_timeline_registry)],
):
    """End a workflow run and drop its timeline."""
    registry.discard(run_id)
    await get_view_hub().publish_discarded(run_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{run_id}/phases/{name:path}/start", response_model=PhaseStartResponse)
async def start_phase(
    run: Annotated[TimelineRun, Depends(get_timeline_run)],
    name: Annotated[str, Depends(get_phase_name)],
):
    """
    Start timing a phase.

    Starting a phase that is already running keeps its original start time
    and reports `started: false`.
    """
    started = run.timeline.start_clock(name)
    if started:
        await get_view_hub().publish_view(
            run.run_id, run.timeline.render_display()
        )
    return PhaseStartResponse(run_id=run.run_id, name=name, started=started)


@router.post("/{run_id}/phases/{name:path}/stop", response_model=PhaseStopResponse)
async def stop_phase(
    run: Annotated[TimelineRun, Depends(get_timeline_run)],
    name: Annotated[str, Depends(get_phase_name)],
):
    """
    Stop timing a phase.

    Stopping a phase that is not running is not an error: the response
    reports `stopped: false` and no duration.
    """
    duration = run.timeline.stop_clock(name)
    if duration is not None:
        await get_view_hub().publish_view(
            run.run_id, run.timeline.render_display()
        )
    return PhaseStopResponse(
        run_id=run.run_id,
        name=name,
        stopped=duration is not None,
        duration_ms=duration,
    )


@router.get("/{run_id}/summary", response_class=PlainTextResponse)
async def get_timeline_summary(run: Annotated[TimelineRun, Depends(get_timeline_run)]):
    """Human-readable report of completed phases in the order they first finished."""
    return run.timeline.render_summary_text()


@router.get("/{run_id}/server-timing", response_model=ServerTimingResponse)
async def get_server_timing(
    run: Annotated[TimelineRun, Depends(get_timeline_run)],
    response: Response,
):
    """
    Completed phases of a run encoded as `name;dur=<ms>` entries.

    The same value is also sent in the Server-Timing response header.
    """
    header = run.timeline.render_timing_header()
    if header:
        response.headers[SERVER_TIMING_HEADER] = header
    return ServerTimingResponse(run_id=run.run_id, server_timing=header)
