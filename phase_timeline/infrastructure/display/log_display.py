"""Display surfaces that render timeline views as text."""

import logging

from phase_timeline.domain.value_objects.timing import RenderedView


def render_view_lines(view: RenderedView) -> list[str]:
    """
    Lay a rendered view out as text lines.

    The elapsed clock comes first, then running phases, then the completed
    list numbered by ordinal.
    """
    lines = [f"{view.elapsed}s"]
    lines.extend(
        f"  > {entry.name}: {entry.formatted_elapsed}s" for entry in view.in_progress
    )
    lines.extend(
        f"  {entry.ordinal}. {entry.formatted_duration}s {entry.name}"
        for entry in view.completed
    )
    return lines


class LoggingDisplay:
    """
    Write each rendered view to a logger.

    Identical consecutive renderings of an idle timeline are skipped so a
    fast refresh loop does not flood the log.
    """

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG):
        self.logger = logger or logging.getLogger(__name__)
        self.level = level
        self.last_view: RenderedView | None = None

    def update(self, view: RenderedView) -> None:
        previous = self.last_view
        self.last_view = view
        if (
            previous is not None
            and view.is_idle
            and previous.is_idle
            and view.completed == previous.completed
        ):
            return
        self.logger.log(self.level, "\n".join(render_view_lines(view)))


class BufferDisplay:
    """Keep every rendered view in memory, newest last"""

    def __init__(self) -> None:
        self.views: list[RenderedView] = []

    def update(self, view: RenderedView) -> None:
        self.views.append(view)

    @property
    def latest(self) -> RenderedView | None:
        return self.views[-1] if self.views else None
