"""Server-Timing middleware for per-request phase timelines"""
import logging
from collections.abc import Callable

from fastapi import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from phase_timeline.domain.entities.request_timeline import RequestTimeline
from phase_timeline.shared.context import bind_timeline, reset_timeline
from phase_timeline.shared.telemetry.tracing import add_timeline_attributes

logger = logging.getLogger(__name__)

SERVER_TIMING_HEADER = "Server-Timing"


class ServerTimingMiddleware(BaseHTTPMiddleware):
    """
    Time every request and report its phases in a Server-Timing header.

    Features:
    - Creates a fresh RequestTimeline per request
    - Binds it as the current timeline (see `shared.context.current_timeline`)
      and exposes it as `request.state.timeline`
    - Times the whole handler as the `total` phase
    - Appends completed phases to any Server-Timing value the handler set

    Usage in handlers:
        from phase_timeline.shared.telemetry.tracing import TimedPhase
        with TimedPhase("db"):
            ...
    """

    def __init__(
        self,
        app,
        enabled: bool = True,
        log_timelines: bool = False,
        total_phase: str = "total",
    ) -> None:
        super().__init__(app)
        self.enabled = enabled
        self.log_timelines = log_timelines
        self.total_phase = total_phase

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.enabled:
            return await call_next(request)

        timeline = RequestTimeline()
        request.state.timeline = timeline
        token = bind_timeline(timeline)
        timeline.start_clock(self.total_phase)

        try:
            response = await call_next(request)
        finally:
            timeline.stop_clock(self.total_phase)
            reset_timeline(token)

        add_timeline_attributes(timeline)

        parts = [
            value
            for value in (
                response.headers.get(SERVER_TIMING_HEADER),
                timeline.render_timing_header(),
            )
            if value
        ]
        if parts:
            response.headers[SERVER_TIMING_HEADER] = ",".join(parts)

        if self.log_timelines:
            logger.debug(
                "%s %s\n%s", request.method, request.url.path, timeline.render_summary_text()
            )

        return response
