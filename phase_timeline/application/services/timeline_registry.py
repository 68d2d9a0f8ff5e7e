"""
Timeline registry.

Holds one RequestTimeline per workflow run for remote drivers. Runs live
until they are discarded or evicted to make room for newer runs.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime

from phase_timeline.domain.entities.request_timeline import Clock, RequestTimeline
from phase_timeline.domain.exceptions import TimelineRunNotFoundError
from phase_timeline.shared.utils.datetime import utc_now
from phase_timeline.shared.utils.generators import generate_run_id

logger = logging.getLogger(__name__)


@dataclass
class TimelineRun:
    """A workflow run and its timeline"""

    run_id: str
    timeline: RequestTimeline
    created_at: datetime = field(default_factory=utc_now)


class TimelineRegistry:
    """
    In-memory registry of workflow runs.

    Bounded by `max_runs`; creating a run beyond that evicts the oldest.
    """

    def __init__(self, max_runs: int = 100, clock: Clock | None = None) -> None:
        if max_runs < 1:
            raise ValueError("max_runs must be at least 1")
        self.max_runs = max_runs
        self._clock = clock
        self._runs: OrderedDict[str, TimelineRun] = OrderedDict()

    def _new_timeline(self) -> RequestTimeline:
        if self._clock is None:
            return RequestTimeline()
        return RequestTimeline(clock=self._clock)

    def create(self, run_id: str | None = None) -> TimelineRun:
        """
        Start a new run with a fresh timeline.

        Passing the id of an existing run replaces it: a new run begins and
        the previous timeline is dropped.
        """
        run_id = run_id or generate_run_id()
        if run_id in self._runs:
            logger.info("Replacing timeline run %s", run_id)
            del self._runs[run_id]

        return self._insert(TimelineRun(run_id=run_id, timeline=self._new_timeline()))

    def register(self, run_id: str, timeline: RequestTimeline) -> TimelineRun:
        """Expose an externally driven timeline under a fixed run id"""
        self._runs.pop(run_id, None)
        return self._insert(TimelineRun(run_id=run_id, timeline=timeline))

    def _insert(self, run: TimelineRun) -> TimelineRun:
        self._runs[run.run_id] = run
        while len(self._runs) > self.max_runs:
            evicted_id, _ = self._runs.popitem(last=False)
            logger.info("Evicted timeline run %s (limit %d)", evicted_id, self.max_runs)
        return run

    def get(self, run_id: str) -> TimelineRun:
        try:
            return self._runs[run_id]
        except KeyError:
            raise TimelineRunNotFoundError(run_id) from None

    def discard(self, run_id: str) -> None:
        if self._runs.pop(run_id, None) is None:
            raise TimelineRunNotFoundError(run_id)
        logger.debug("Discarded timeline run %s", run_id)

    def list_runs(self) -> list[TimelineRun]:
        """Runs in creation order, oldest first"""
        return list(self._runs.values())

    def __len__(self) -> int:
        return len(self._runs)

    def __contains__(self, run_id: object) -> bool:
        return run_id in self._runs
