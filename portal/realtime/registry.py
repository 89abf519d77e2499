"""Which live connection answers to which identity, and which rooms it joined.

Keys are either a bare email (older clients) or ``email:role``. One
connection can end up under both keys when a client sends both identify
forms; disconnect only drops the first key found for it, so the other stays
behind until overwritten.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class Connection(Protocol):
    sid: str

    def emit(self, event: str, data: Any) -> None: ...


def identity_key(payload: Any) -> str | None:
    """Registry key for an ``identify`` payload, or None when it is malformed."""
    if isinstance(payload, str):
        return payload
    if isinstance(payload, Mapping):
        email = payload.get('email')
        role = payload.get('role')
        if email and role:
            return f'{email}:{role}'
    return None


class ConnectionRegistry:
    def __init__(self) -> None:
        self._identities: dict[str, Connection] = {}
        self._rooms: dict[str, set[Connection]] = {}

    def __len__(self) -> int:
        return len(self._identities)

    def identify(self, connection: Connection, payload: Any) -> str | None:
        key = identity_key(payload)
        if key is None:
            logger.warning('realtime_identify_invalid sid=%s payload=%r', connection.sid, payload)
            return None
        self._identities[key] = connection
        self.join_room(connection, key)
        logger.info('realtime_identify key=%s sid=%s', key, connection.sid)
        return key

    def join_room(self, connection: Connection, room: str) -> None:
        self._rooms.setdefault(room, set()).add(connection)
        logger.info('realtime_join_room room=%s sid=%s', room, connection.sid)

    def lookup(self, key: str) -> Connection | None:
        return self._identities.get(key)

    def keys(self) -> list[str]:
        return list(self._identities)

    def members(self, room: str) -> list[Connection]:
        return list(self._rooms.get(room, ()))

    def rooms_of(self, connection: Connection) -> list[str]:
        return [room for room, members in self._rooms.items() if connection in members]

    def on_disconnect(self, connection: Connection) -> str | None:
        removed_key = None
        for key, owner in self._identities.items():
            if owner is connection:
                removed_key = key
                break
        if removed_key is not None:
            del self._identities[removed_key]

        for room in self.rooms_of(connection):
            members = self._rooms[room]
            members.discard(connection)
            if not members:
                del self._rooms[room]

        logger.info('realtime_disconnect sid=%s removed_key=%s', connection.sid, removed_key)
        return removed_key
