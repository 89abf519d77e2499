import asyncio
import logging
from contextlib import suppress

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from portal.realtime.connection import FrameError, RealtimeConnection, decode_frame
from portal.realtime.context import RealtimeContext


router = APIRouter(tags=['Realtime'])
logger = logging.getLogger(__name__)


@router.websocket('/ws')
async def realtime_socket(websocket: WebSocket):
    realtime: RealtimeContext = websocket.app.state.realtime
    await websocket.accept()
    connection = RealtimeConnection(websocket)
    writer = asyncio.create_task(connection.pump())
    logger.info('realtime_connected sid=%s', connection.sid)
    try:
        while True:
            message = await websocket.receive()
            if message['type'] == 'websocket.disconnect':
                raise WebSocketDisconnect(message.get('code', 1000), message.get('reason'))
            raw = message.get('text')
            if raw is None:
                logger.warning('realtime_frame_invalid sid=%s error=binary frame', connection.sid)
                continue
            try:
                event, data = decode_frame(raw)
            except FrameError as exc:
                logger.warning('realtime_frame_invalid sid=%s error=%s', connection.sid, exc)
                continue
            await realtime.relay.handle_event(connection, event, data)
    except WebSocketDisconnect as exc:
        logger.info('realtime_disconnected sid=%s code=%s', connection.sid, exc.code)
    finally:
        realtime.registry.on_disconnect(connection)
        writer.cancel()
        with suppress(asyncio.CancelledError):
            await writer
