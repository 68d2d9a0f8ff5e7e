"""
Timeline driver.

Marks phase boundaries on a RequestTimeline as a workflow progresses and
pushes fresh renderings to a display surface on its own cadence. Whether the
live clock is still animating is explicit driver state, not a global flag.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from phase_timeline.application.interfaces.display import IDisplaySurface
from phase_timeline.domain.entities.request_timeline import RequestTimeline
from phase_timeline.domain.value_objects.timing import RenderedView

logger = logging.getLogger(__name__)


class PhaseScope:
    """
    Context manager that times one phase on a driver.

    Usage:
        with driver.phase("parse"):
            parse()

        async with driver.phase("load /metafile.json"):
            await fetch()

    The phase is stopped on exit, including when the body raises or is
    cancelled. If the phase was already running when the scope was entered,
    the scope leaves it alone.
    """

    def __init__(self, driver: TimelineDriver, name: str):
        self.driver = driver
        self.name = name
        self.started = False

    def __enter__(self) -> PhaseScope:
        self.started = self.driver.begin(self.name)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.started:
            self.driver.end(self.name)

    async def __aenter__(self) -> PhaseScope:
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


class TimelineDriver:
    """
    Drive a timeline and keep a display surface up to date.

    Errors raised by the display surface propagate to the caller of the
    driver method that triggered the update.
    """

    def __init__(
        self, display: IDisplaySurface, timeline: RequestTimeline | None = None
    ) -> None:
        self.display = display
        self.timeline = timeline if timeline is not None else RequestTimeline()
        self.animating = True

    def refresh(self) -> RenderedView:
        """Render the current state and hand it to the display"""
        view = self.timeline.render_display()
        self.display.update(view)
        return view

    def begin(self, name: str) -> bool:
        started = self.timeline.start_clock(name)
        if not started:
            logger.debug("Phase '%s' is already running", name)
        self.refresh()
        return started

    def end(self, name: str) -> float | None:
        duration = self.timeline.stop_clock(name)
        if duration is None:
            logger.debug("Phase '%s' was not running", name)
        self.refresh()
        return duration

    def phase(self, name: str) -> PhaseScope:
        return PhaseScope(self, name)

    def finish(self) -> str:
        """
        Stop the animated clock and log the final summary.

        Phases still running stay visible as in progress in the last update.
        """
        self.animating = False
        summary = self.timeline.render_summary_text()
        logger.info(summary)
        self.refresh()
        return summary

    async def run_display_loop(self, interval: float) -> None:
        """
        Refresh the display every `interval` seconds while animating.

        One more update is pushed after the animation stops so the display
        ends on the final state.
        """
        while self.animating:
            self.refresh()
            await asyncio.sleep(interval)
        self.refresh()


async def watch_views(
    timeline: RequestTimeline, interval: float
) -> AsyncIterator[RenderedView]:
    """
    Yield live views of a timeline for streaming consumers.

    The first view is yielded immediately. After that a view is yielded every
    `interval` seconds while any phase is in progress, plus once more when
    the timeline goes idle. While idle, a view is yielded only when the set of
    completed phases changed; polling continues so new phases resume the
    stream. The generator runs until the consumer stops iterating.
    """
    view = timeline.render_display()
    yield view
    last = view

    while True:
        await asyncio.sleep(interval)
        view = timeline.render_display()
        if view.is_idle and last.is_idle and view.completed == last.completed:
            continue
        last = view
        yield view
