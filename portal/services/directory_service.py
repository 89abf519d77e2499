from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from portal.core.errors import ResourceNotConfiguredError
from portal.core.time_provider import to_iso
from portal.models import AssociationMember, Event, TeacherInfo, User, UserType


ASSOCIATION_MEMBERS_TABLE = AssociationMember.__tablename__


def list_events(db: Session) -> list[dict]:
    rows = db.query(Event).order_by(Event.event_date.asc(), Event.id.asc()).all()
    return [
        {
            'title': row.title,
            'date': to_iso(row.event_date),
            'description': row.description,
            'registration_link': row.registration_link,
        }
        for row in rows
    ]


def list_teachers(db: Session) -> list[dict]:
    rows = (
        db.query(User, TeacherInfo)
        .outerjoin(TeacherInfo, TeacherInfo.user_id == User.id)
        .filter(User.user_type == UserType.TEACHER.value)
        .order_by(User.id.asc())
        .all()
    )
    teachers = []
    for user, info in rows:
        teachers.append(
            {
                'id': user.id,
                'email': user.email,
                'qualification': info.qualification if info else None,
                'classHandling': info.class_handling if info else None,
                'achievements': info.achievements if info else None,
                'picture': info.picture if info else None,
            }
        )
    return teachers


def association_members_configured(db: Session) -> bool:
    return inspect(db.get_bind()).has_table(ASSOCIATION_MEMBERS_TABLE)


def list_association_members(db: Session) -> list[dict]:
    if not association_members_configured(db):
        raise ResourceNotConfiguredError('Association members table does not exist')
    rows = db.query(AssociationMember).order_by(AssociationMember.name.asc()).all()
    return [
        {
            'id': row.id,
            'name': row.name,
            'position': row.position,
            'department': row.department,
            'email': row.email,
            'picture': row.picture,
        }
        for row in rows
    ]
