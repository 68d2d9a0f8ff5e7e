"""
Display interfaces (ports) for the application layer.

A display surface is whatever the driver hands rendered views to: a log
sink, a terminal, a WebSocket. The timeline never touches it directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from phase_timeline.domain.value_objects.timing import RenderedView


class IDisplaySurface(Protocol):
    """Protocol for surfaces that show a rendered timeline view"""

    def update(self, view: RenderedView) -> None:
        """Replace whatever is shown with the given view"""
        ...
