from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from sqlalchemy.orm import Session, sessionmaker

from portal.realtime.registry import ConnectionRegistry
from portal.realtime.relay import ChatStore, RealtimeRelay
from portal.services.chat_service import save_chat_message


@dataclass
class RealtimeContext:
    registry: ConnectionRegistry
    relay: RealtimeRelay


def chat_store(session_factory: sessionmaker[Session]) -> ChatStore:
    def store(message: Mapping[str, Any]) -> None:
        db = session_factory()
        try:
            save_chat_message(
                db,
                student_email=message.get('studentEmail'),
                teacher_email=message.get('teacherEmail'),
                sender=message.get('sender'),
                message=message.get('message'),
            )
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    return store


def build_realtime_context(session_factory: sessionmaker[Session]) -> RealtimeContext:
    registry = ConnectionRegistry()
    relay = RealtimeRelay(registry, chat_store(session_factory))
    return RealtimeContext(registry=registry, relay=relay)


def get_realtime(request: Request) -> RealtimeContext:
    return request.app.state.realtime
