from datetime import date, datetime
from enum import Enum
from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portal.db import Base


class UserType(str, Enum):
    STUDENT = 'student'
    TEACHER = 'teacher'


class ConnectRequestStatus(str, Enum):
    PENDING = 'pending'
    ACCEPTED = 'accepted'


class BookAction(str, Enum):
    REQUEST = 'request'
    RETURN = 'return'


class User(Base):
    __tablename__ = 'users'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    # Stored and compared as plain text; login matches the literal value.
    password: Mapped[str] = mapped_column(String(255))
    user_type: Mapped[str] = mapped_column(String(20), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    teacher_info: Mapped['TeacherInfo | None'] = relationship('TeacherInfo', back_populates='user', uselist=False)


class TeacherInfo(Base):
    __tablename__ = 'teacher_info'
    __table_args__ = (
        UniqueConstraint('user_id', name='uq_teacher_info_user_id'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey('users.id'), index=True)
    qualification: Mapped[str | None] = mapped_column(String(255), nullable=True)
    class_handling: Mapped[str | None] = mapped_column(Text, nullable=True)
    achievements: Mapped[str | None] = mapped_column(Text, nullable=True)
    picture: Mapped[str | None] = mapped_column(String(500), nullable=True)

    user: Mapped['User'] = relationship('User', back_populates='teacher_info')


class Event(Base):
    __tablename__ = 'events'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    event_date: Mapped[date] = mapped_column('date', Date, index=True)
    description: Mapped[str] = mapped_column(Text, default='')
    registration_link: Mapped[str | None] = mapped_column(String(500), nullable=True)


class TeacherConnectRequest(Base):
    __tablename__ = 'teacher_connect_requests'
    __table_args__ = (
        Index('ix_teacher_connect_requests_teacher_status', 'teacher_id', 'status'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    student_id: Mapped[int] = mapped_column(ForeignKey('users.id'), index=True)
    teacher_id: Mapped[int] = mapped_column(ForeignKey('users.id'), index=True)
    status: Mapped[str] = mapped_column(String(20), default=ConnectRequestStatus.PENDING.value)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    student: Mapped['User'] = relationship('User', foreign_keys=[student_id])


class Book(Base):
    __tablename__ = 'books'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), index=True)
    author: Mapped[str] = mapped_column(String(255), default='')
    available_copies: Mapped[int] = mapped_column(Integer, default=0)


class BookLog(Base):
    __tablename__ = 'book_logs'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    book_id: Mapped[int] = mapped_column(ForeignKey('books.id'), index=True)
    action: Mapped[str] = mapped_column(String(20))
    user_email: Mapped[str] = mapped_column(String(255), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class AssociationMember(Base):
    __tablename__ = 'association_members'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    position: Mapped[str] = mapped_column(String(120), default='')
    department: Mapped[str] = mapped_column(String(120), default='')
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    picture: Mapped[str | None] = mapped_column(String(500), nullable=True)


class ChatMessage(Base):
    __tablename__ = 'chat_messages'
    __table_args__ = (
        Index('ix_chat_messages_pair_timestamp', 'student_email', 'teacher_email', 'timestamp'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    student_email: Mapped[str] = mapped_column(String(255))
    teacher_email: Mapped[str] = mapped_column(String(255))
    sender: Mapped[str] = mapped_column(String(255))
    message: Mapped[str] = mapped_column(Text)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
