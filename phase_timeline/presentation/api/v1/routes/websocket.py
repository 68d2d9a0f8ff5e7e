"""WebSocket endpoints for live timeline views"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from phase_timeline.application.services.timeline_driver import watch_views
from phase_timeline.domain.exceptions import TimelineRunNotFoundError
from phase_timeline.infrastructure.config.settings import get_settings
from phase_timeline.presentation.api.dependencies import get_timeline_registry
from phase_timeline.presentation.api.websocket.hub import get_view_hub

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/timelines/{run_id}")
async def timeline_view_websocket(websocket: WebSocket, run_id: str):
    """
    WebSocket endpoint streaming the live view of a workflow run.

    Views are pushed every `display_refresh_interval` seconds while any phase
    is in progress, and once more when the run goes idle. Starting or stopping
    a phase over HTTP pushes a view to watchers immediately. Discarding the
    run sends {"type": "discarded", "run_id": "..."} and closes the socket.

    Message Format (outgoing):
        {
            "type": "view",
            "run_id": "...",
            "view": {"elapsed": "0.12", "elapsed_ms": 120.0,
                     "completed": [...], "in_progress": [...]}
        }

    Client messages:
        "ping"    -> "pong"
        "refresh" -> one view pushed immediately
    """
    registry = get_timeline_registry()
    try:
        run = registry.get(run_id)
    except TimelineRunNotFoundError:
        await websocket.close(code=4004, reason="Unknown timeline run")
        return

    hub = get_view_hub()
    interval = get_settings().display_refresh_interval

    async def read_client():
        """Handle incoming messages from client"""
        try:
            while True:
                data = await websocket.receive_text()
                if data == "ping":
                    await websocket.send_text("pong")
                elif data == "refresh":
                    await hub.send(
                        websocket,
                        hub.view_message(run_id, run.timeline.render_display()),
                    )
        except WebSocketDisconnect:
            pass

    async def stream_views():
        """Forward live views until the run is discarded"""
        async for view in watch_views(run.timeline, interval):
            if run_id not in registry:
                break
            sent = await hub.send(websocket, hub.view_message(run_id, view))
            if not sent:
                break

    try:
        await hub.attach(websocket, run_id)

        client_task = asyncio.create_task(read_client())
        stream_task = asyncio.create_task(stream_views())

        try:
            # Wait for either task to complete (client disconnect or run discarded)
            done, pending = await asyncio.wait(
                [client_task, stream_task],
                return_when=asyncio.FIRST_COMPLETED,
            )

            for task in pending:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        except Exception as e:
            logger.error(f"WebSocket task error: {e}")
            client_task.cancel()
            stream_task.cancel()

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected for run {run_id}")
    finally:
        await hub.detach(websocket, run_id)


@router.get("/ws/status")
async def websocket_status():
    """
    Get WebSocket connection status.

    Returns the number of open watcher sockets for monitoring.
    """
    return {"total_connections": get_view_hub().watcher_count()}
