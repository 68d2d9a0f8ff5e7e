"""Shared test fixtures for pytest"""
import pytest
from httpx import ASGITransport, AsyncClient

from phase_timeline.application.services.timeline_registry import \
    TimelineRegistry
from phase_timeline.domain.entities.request_timeline import RequestTimeline
from phase_timeline.main import app
from phase_timeline.presentation.api.dependencies import set_timeline_registry
from phase_timeline.presentation.api.websocket.hub import set_view_hub


class FakeClock:
    """Monotonic clock stand-in that only moves when told to"""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        """Move the clock forward by `ms` milliseconds"""
        self.now += ms / 1000.0


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timeline(clock) -> RequestTimeline:
    """Timeline whose origin is t=0 on the fake clock"""
    return RequestTimeline(clock=clock)


@pytest.fixture
def registry(clock) -> TimelineRegistry:
    """Registry installed as the app's singleton for the duration of a test"""
    registry = TimelineRegistry(max_runs=10, clock=clock)
    set_timeline_registry(registry)
    yield registry
    set_timeline_registry(None)
    set_view_hub(None)


@pytest.fixture
async def client(registry):
    """HTTP client for API testing"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
