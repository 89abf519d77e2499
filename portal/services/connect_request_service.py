"""Student to teacher connect requests.

A request moves ``pending -> accepted`` and never leaves ``accepted``; there is
no reject or cancel. Duplicate detection looks at every request for the
(student, teacher) pair regardless of status, so a student can never re-send
to a teacher who already accepted them.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from portal.core.errors import DomainError, NotFoundError, ValidationError
from portal.models import ConnectRequestStatus, TeacherConnectRequest, User, UserType


logger = logging.getLogger(__name__)


def _find_user_id(db: Session, email: str, user_type: UserType) -> int | None:
    row = (
        db.query(User.id)
        .filter(User.email == email, User.user_type == user_type.value)
        .first()
    )
    return row.id if row else None


def _email_for(db: Session, user_id: int) -> str | None:
    row = db.query(User.email).filter(User.id == user_id).first()
    return row.email if row else None


def create_request(db: Session, student_email: str | None, teacher_id: int | None) -> TeacherConnectRequest:
    if not student_email or not teacher_id:
        raise ValidationError('Missing required fields')

    student_id = _find_user_id(db, student_email, UserType.STUDENT)
    if student_id is None:
        raise NotFoundError('Student not found')

    existing = (
        db.query(TeacherConnectRequest.id)
        .filter(
            TeacherConnectRequest.student_id == student_id,
            TeacherConnectRequest.teacher_id == teacher_id,
        )
        .first()
    )
    if existing:
        raise DomainError('Request already sent')

    row = TeacherConnectRequest(
        student_id=student_id,
        teacher_id=teacher_id,
        status=ConnectRequestStatus.PENDING.value,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info('connect_request_created request_id=%s student_id=%s teacher_id=%s', row.id, student_id, teacher_id)
    return row


def list_pending_for(db: Session, teacher_email: str | None) -> list[dict]:
    if not teacher_email:
        raise ValidationError('Missing teacher email')

    teacher_id = _find_user_id(db, teacher_email, UserType.TEACHER)
    if teacher_id is None:
        raise NotFoundError('Teacher not found')

    rows = (
        db.query(TeacherConnectRequest.id, User.email)
        .join(User, TeacherConnectRequest.student_id == User.id)
        .filter(
            TeacherConnectRequest.teacher_id == teacher_id,
            TeacherConnectRequest.status == ConnectRequestStatus.PENDING.value,
        )
        .order_by(TeacherConnectRequest.id.asc())
        .all()
    )
    return [{'id': row.id, 'student_email': row.email} for row in rows]


def accept_request(db: Session, request_id: int | None) -> dict:
    """Mark a request accepted and return the pair to notify.

    The returned ``student_email``/``teacher_email`` are what the real-time
    relay needs; whether anybody is listening does not affect the outcome.
    """
    if not request_id:
        raise ValidationError('Missing request ID')

    row = db.query(TeacherConnectRequest).filter(TeacherConnectRequest.id == request_id).first()
    if not row:
        raise NotFoundError('Request not found')

    student_email = _email_for(db, row.student_id)
    if student_email is None:
        raise NotFoundError('Student not found')
    teacher_email = _email_for(db, row.teacher_id)
    if teacher_email is None:
        raise NotFoundError('Teacher not found')

    row.status = ConnectRequestStatus.ACCEPTED.value
    db.commit()
    logger.info('connect_request_accepted request_id=%s student=%s teacher=%s', row.id, student_email, teacher_email)
    return {'student_email': student_email, 'teacher_email': teacher_email}
