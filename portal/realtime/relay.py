"""Routes inbound real-time events and fans outbound ones out to rooms.

Chat is broadcast first and persisted afterwards; the two steps are
independent, and a failed write is only logged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from starlette.concurrency import run_in_threadpool

from portal.realtime.registry import Connection, ConnectionRegistry
from portal.request_context import current_endpoint, endpoint_label


logger = logging.getLogger(__name__)

IDENTIFY = 'identify'
JOIN_ROOM = 'joinRoom'
CHAT_MESSAGE = 'chat message'
PING = 'ping'
PONG = 'pong'
CONNECTION_ACCEPTED = 'connectionAccepted'

ChatStore = Callable[[Mapping[str, Any]], None]


class RealtimeRelay:
    def __init__(self, registry: ConnectionRegistry, store_message: ChatStore) -> None:
        self.registry = registry
        self._store_message = store_message

    def emit_to_room(self, room: str, event: str, data: Any, *, skip: Connection | None = None) -> int:
        delivered = 0
        for member in self.registry.members(room):
            if member is skip:
                continue
            member.emit(event, data)
            delivered += 1
        return delivered

    async def handle_event(self, connection: Connection, event: str, data: Any) -> None:
        token = current_endpoint.set(endpoint_label('WS', event))
        try:
            if event == IDENTIFY:
                self.registry.identify(connection, data)
            elif event == JOIN_ROOM:
                if not isinstance(data, str):
                    logger.warning('realtime_join_room_invalid sid=%s room=%r', connection.sid, data)
                    return
                self.registry.join_room(connection, data)
            elif event == CHAT_MESSAGE:
                await self.relay_chat(connection, data)
            elif event == PING:
                connection.emit(PONG, data)
            else:
                logger.warning('realtime_unknown_event sid=%s event=%s', connection.sid, event)
        finally:
            current_endpoint.reset(token)

    async def relay_chat(self, connection: Connection, message: Any) -> None:
        if not isinstance(message, Mapping):
            logger.warning('realtime_chat_invalid sid=%s payload=%r', connection.sid, message)
            return

        room = message.get('room')
        logger.info('realtime_chat room=%s sender=%s', room, message.get('sender'))
        if isinstance(room, str):
            self.emit_to_room(room, CHAT_MESSAGE, message, skip=connection)

        try:
            await run_in_threadpool(self._store_message, message)
        except Exception:
            logger.exception('realtime_chat_persist_failed room=%s sender=%s', room, message.get('sender'))

    def notify_connection_accepted(self, *, student_email: str, teacher_email: str) -> int:
        listener = self.registry.lookup(student_email)
        logger.info(
            'realtime_connection_accepted student=%s teacher=%s student_connected=%s keys=%s',
            student_email,
            teacher_email,
            listener is not None,
            self.registry.keys(),
        )
        delivered = self.emit_to_room(
            student_email,
            CONNECTION_ACCEPTED,
            {'teacherEmail': teacher_email, 'studentEmail': student_email},
        )
        if not delivered:
            logger.info('realtime_connection_accepted_dropped student=%s', student_email)
        return delivered
