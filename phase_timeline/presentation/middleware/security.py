"""Cross-origin isolation middleware for high-resolution browser timing"""
import logging
from collections.abc import Callable

from fastapi import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


class CrossOriginIsolationMiddleware(BaseHTTPMiddleware):
    """
    Add the headers browsers require before exposing precise timers.

    Headers added:
    - Cross-Origin-Opener-Policy: Isolates the browsing context group
    - Cross-Origin-Embedder-Policy: Requires opt-in for cross-origin resources
    - Cross-Origin-Resource-Policy: Restricts who may embed our responses
    - Timing-Allow-Origin: Lets other origins read Server-Timing values
    """

    def __init__(
        self,
        app,
        timing_allow_origin: str = "*",
        isolate: bool = True,
    ) -> None:
        super().__init__(app)
        self.timing_allow_origin = timing_allow_origin
        self.isolate = isolate

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add cross-origin headers to response."""
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Error processing request: {e}")
            raise

        if self.isolate:
            response.headers["Cross-Origin-Opener-Policy"] = "same-origin"
            response.headers["Cross-Origin-Embedder-Policy"] = "require-corp"
            response.headers["Cross-Origin-Resource-Policy"] = "same-origin"

        if self.timing_allow_origin:
            response.headers["Timing-Allow-Origin"] = self.timing_allow_origin

        return response
