"""
Timing value objects.

Immutable records produced by the request timeline. The rendered view is a
plain view-model: callers map it onto whatever display surface they own.
"""

import math
from dataclasses import dataclass, field
from typing import Any


def format_duration(elapsed_ms: float) -> str:
    """
    Format a duration in milliseconds as seconds.

    Precision drops as magnitude grows:
    - under 1s: 2 decimal places ("0.23")
    - under 10s: 1 decimal place ("3.4")
    - otherwise: whole seconds, truncated ("14")
    """
    if elapsed_ms < 1000:
        return f"{elapsed_ms / 1000:.2f}"
    if elapsed_ms < 10000:
        return f"{elapsed_ms / 1000:.1f}"
    return str(math.floor(elapsed_ms / 1000))


@dataclass(frozen=True)
class PhaseRecord:
    """Result of one start/stop cycle of a phase"""

    duration_ms: float
    start_offset_ms: float


@dataclass(frozen=True)
class CompletedPhaseView:
    ordinal: int
    name: str
    formatted_duration: str
    duration_ms: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "ordinal": self.ordinal,
            "name": self.name,
            "formatted_duration": self.formatted_duration,
            "duration_ms": self.duration_ms,
        }


@dataclass(frozen=True)
class ActivePhaseView:
    name: str
    formatted_elapsed: str
    elapsed_ms: float
    in_progress: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "formatted_elapsed": self.formatted_elapsed,
            "elapsed_ms": self.elapsed_ms,
            "in_progress": self.in_progress,
        }


@dataclass(frozen=True)
class RenderedView:
    """
    Point-in-time rendering of a timeline.

    `completed` never contains a name that also appears in `in_progress`.
    """

    elapsed: str
    elapsed_ms: float
    completed: tuple[CompletedPhaseView, ...] = field(default_factory=tuple)
    in_progress: tuple[ActivePhaseView, ...] = field(default_factory=tuple)

    @property
    def is_idle(self) -> bool:
        """True when no phase is in progress"""
        return not self.in_progress

    def to_dict(self) -> dict[str, Any]:
        """Convert view to a JSON-compatible dictionary"""
        return {
            "elapsed": self.elapsed,
            "elapsed_ms": self.elapsed_ms,
            "completed": [entry.to_dict() for entry in self.completed],
            "in_progress": [entry.to_dict() for entry in self.in_progress],
        }
