"""Live WebSocket connection handle and the JSON frame codec.

Frames on the wire are text messages shaped ``{"event": <name>, "data": <payload>}``
in both directions.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any
from uuid import uuid4

from fastapi import WebSocket, WebSocketDisconnect


logger = logging.getLogger(__name__)


class FrameError(ValueError):
    """Raised when an inbound frame is not a ``{event, data}`` JSON object."""


def decode_frame(raw: str) -> tuple[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise FrameError('Frame is not valid JSON') from exc
    if not isinstance(parsed, dict) or not isinstance(parsed.get('event'), str):
        raise FrameError('Frame must be an object with a string "event"')
    return parsed['event'], parsed.get('data')


def encode_frame(event: str, data: Any) -> dict[str, Any]:
    return {'event': event, 'data': data}


class RealtimeConnection:
    """One accepted WebSocket.

    ``emit`` only queues; a writer task started with ``pump`` drains the queue,
    so fanning an event out to a room never waits on a slow socket.
    """

    def __init__(self, websocket: WebSocket) -> None:
        self.sid = uuid4().hex
        self.websocket = websocket
        self._outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def emit(self, event: str, data: Any) -> None:
        self._outbox.put_nowait(encode_frame(event, data))

    async def pump(self) -> None:
        while True:
            frame = await self._outbox.get()
            try:
                await self.websocket.send_json(frame)
            except (WebSocketDisconnect, RuntimeError, OSError):
                logger.info('realtime_send_failed sid=%s event=%s', self.sid, frame.get('event'))
                return

    def __repr__(self) -> str:
        return f'RealtimeConnection(sid={self.sid!r})'
