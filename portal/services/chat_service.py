from __future__ import annotations

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from portal.core.errors import ValidationError
from portal.core.time_provider import TimeProvider, as_utc, default_time_provider, to_iso
from portal.models import ChatMessage


def save_chat_message(
    db: Session,
    *,
    student_email: str,
    teacher_email: str,
    sender: str,
    message: str,
    time_provider: TimeProvider = default_time_provider,
) -> ChatMessage:
    row = ChatMessage(
        student_email=student_email,
        teacher_email=teacher_email,
        sender=sender,
        message=message,
        timestamp=as_utc(time_provider.now()),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def list_chat_messages(db: Session, student_email: str | None, teacher_email: str | None) -> list[dict]:
    if not student_email or not teacher_email:
        raise ValidationError('Missing studentEmail or teacherEmail')

    # Either orientation counts as the same conversation.
    rows = (
        db.query(ChatMessage)
        .filter(
            or_(
                and_(ChatMessage.student_email == student_email, ChatMessage.teacher_email == teacher_email),
                and_(ChatMessage.student_email == teacher_email, ChatMessage.teacher_email == student_email),
            )
        )
        .order_by(ChatMessage.timestamp.asc(), ChatMessage.id.asc())
        .all()
    )
    return [
        {
            'sender': row.sender,
            'message': row.message,
            'timestamp': to_iso(as_utc(row.timestamp)),
        }
        for row in rows
    ]
