"""
Request timeline domain entity.

Tracks named, possibly overlapping phases of a single workflow run against a
fixed origin. Nothing here raises for any sequence of start/stop calls: a
duplicate start or an unmatched stop is reported through the return value.
"""

import time
from collections.abc import Callable, Mapping
from types import MappingProxyType

from phase_timeline.domain.value_objects.timing import (ActivePhaseView,
                                                        CompletedPhaseView,
                                                        PhaseRecord,
                                                        RenderedView,
                                                        format_duration)

Clock = Callable[[], float]


class RequestTimeline:
    """
    Timeline of named phases for one workflow run.

    All instants come from a monotonic clock in seconds and are stored in
    milliseconds. `_completed` keeps insertion order, which is the order
    every rendering uses.
    """

    def __init__(self, clock: Clock = time.perf_counter) -> None:
        self._clock = clock
        self._origin = self._now()
        self._active: dict[str, float] = {}
        self._completed: dict[str, PhaseRecord] = {}

    def _now(self) -> float:
        return self._clock() * 1000.0

    @property
    def origin(self) -> float:
        """Clock reading (ms) captured at construction"""
        return self._origin

    @property
    def active_phases(self) -> Mapping[str, float]:
        """Running phases mapped to their start instant (ms)"""
        return MappingProxyType(self._active)

    @property
    def completed_phases(self) -> Mapping[str, PhaseRecord]:
        return MappingProxyType(self._completed)

    def is_running(self, name: str) -> bool:
        return name in self._active

    def is_completed(self, name: str) -> bool:
        return name in self._completed

    def has_active(self) -> bool:
        return bool(self._active)

    def start_clock(self, name: str) -> bool:
        """
        Start timing a phase.

        Returns False without touching the existing start instant if the
        phase is already running.
        """
        if name in self._active:
            return False
        self._active[name] = self._now()
        return True

    def stop_clock(self, name: str) -> float | None:
        """
        Stop timing a phase and record its duration.

        Returns the duration in milliseconds, or None if the phase is not
        running.
        """
        start = self._active.pop(name, None)
        if start is None:
            return None

        duration = self._now() - start
        # A re-run phase overwrites its record but keeps its original position
        self._completed[name] = PhaseRecord(
            duration_ms=duration, start_offset_ms=start - self._origin
        )
        return duration

    def total_elapsed(self) -> float:
        """Milliseconds since the timeline was created"""
        return self._now() - self._origin

    def render_summary_text(self) -> str:
        """
        Multi-line report of completed phases in insertion order.

        A phase restarted after completing is left out until it stops again.
        """
        lines = [f"Timeline ({format_duration(self.total_elapsed())}s total):"]
        for name, record in self._completed.items():
            if name in self._active:
                continue
            lines.append(
                f"{name}: {format_duration(record.duration_ms)}s "
                f"(started at +{format_duration(record.start_offset_ms)}s)"
            )
        return "\n".join(lines)

    def render_timing_header(self) -> str:
        """
        Encode completed phases as a Server-Timing header value.

        Format: `name;dur=<ms with 2 decimals>` joined by commas. Phases that
        are currently running are left out even if they completed before.
        """
        return ",".join(
            f"{name};dur={record.duration_ms:.2f}"
            for name, record in self._completed.items()
            if name not in self._active
        )

    def render_display(self) -> RenderedView:
        """
        Build a live view-model of the timeline.

        Running phases recompute their elapsed time on every call. A phase
        that was restarted after completing is shown only as in progress.
        """
        now = self._now()

        completed = []
        for name, record in self._completed.items():
            if name in self._active:
                continue
            completed.append(
                CompletedPhaseView(
                    ordinal=len(completed) + 1,
                    name=name,
                    formatted_duration=format_duration(record.duration_ms),
                    duration_ms=record.duration_ms,
                )
            )

        in_progress = tuple(
            ActivePhaseView(
                name=name,
                formatted_elapsed=format_duration(now - start),
                elapsed_ms=now - start,
            )
            for name, start in self._active.items()
        )

        return RenderedView(
            elapsed=format_duration(now - self._origin),
            elapsed_ms=now - self._origin,
            completed=tuple(completed),
            in_progress=in_progress,
        )

    def __str__(self) -> str:
        return self.render_summary_text()

    def __repr__(self) -> str:
        return (
            f"RequestTimeline(active={list(self._active)}, "
            f"completed={list(self._completed)})"
        )
