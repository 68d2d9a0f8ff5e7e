"""Fan-out of live timeline views to WebSocket watchers"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import WebSocket

from phase_timeline.domain.value_objects.timing import RenderedView

logger = logging.getLogger(__name__)

DISCARDED_CLOSE_CODE = 1000


class RunViewHub:
    """
    Tracks which sockets watch which workflow run.

    Phase boundaries published over HTTP are pushed to every watcher of the
    run right away, without waiting for the next poll of the stream.
    """

    def __init__(self) -> None:
        self._watchers: dict[str, set[WebSocket]] = {}

    @staticmethod
    def view_message(run_id: str, view: RenderedView) -> dict[str, Any]:
        return {"type": "view", "run_id": run_id, "view": view.to_dict()}

    async def attach(self, websocket: WebSocket, run_id: str) -> None:
        """Accept the socket and start sending it views of `run_id`"""
        await websocket.accept()
        self._watchers.setdefault(run_id, set()).add(websocket)
        logger.info(
            "Watcher attached to run %s (%d watching)",
            run_id,
            len(self._watchers[run_id]),
        )

    async def detach(self, websocket: WebSocket, run_id: str) -> None:
        watchers = self._watchers.get(run_id)
        if watchers is None:
            return
        watchers.discard(websocket)
        if not watchers:
            del self._watchers[run_id]
        logger.info("Watcher detached from run %s", run_id)

    async def send(self, websocket: WebSocket, message: dict[str, Any]) -> bool:
        """Send one message; False means the socket is gone"""
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            logger.debug("Dropping message for closed watcher: %s", e)
            return False
        return True

    async def _fan_out(self, run_id: str, message: dict[str, Any]) -> int:
        delivered = 0
        for websocket in list(self._watchers.get(run_id, ())):
            if await self.send(websocket, message):
                delivered += 1
            else:
                await self.detach(websocket, run_id)
        return delivered

    async def publish_view(self, run_id: str, view: RenderedView) -> int:
        """Push `view` to everyone watching `run_id`; returns the delivery count"""
        return await self._fan_out(run_id, self.view_message(run_id, view))

    async def publish_discarded(self, run_id: str) -> int:
        """Tell watchers the run is gone, then close their sockets"""
        delivered = await self._fan_out(run_id, {"type": "discarded", "run_id": run_id})
        for websocket in self._watchers.pop(run_id, set()):
            try:
                await websocket.close(code=DISCARDED_CLOSE_CODE)
            except Exception as e:
                logger.debug("Watcher already closed: %s", e)
        return delivered

    def watcher_count(self) -> int:
        return sum(len(watchers) for watchers in self._watchers.values())

    async def close_all(self) -> None:
        """Close every watcher socket (shutdown)"""
        for run_id in list(self._watchers):
            for websocket in self._watchers.pop(run_id):
                try:
                    await websocket.close()
                except Exception as e:
                    logger.debug("Error closing watcher: %s", e)
        logger.info("All timeline watchers closed")


_hub: RunViewHub | None = None


def get_view_hub() -> RunViewHub:
    global _hub
    if _hub is None:
        _hub = RunViewHub()
    return _hub


def set_view_hub(hub: RunViewHub | None) -> None:
    """Replace the global hub (startup and tests)"""
    global _hub
    _hub = hub
