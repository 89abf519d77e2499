"""initial campus portal schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:01:00
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


revision = '20261019_0001'
down_revision = None
branch_labels = None
depends_on = None


def _create_index_if_missing(inspector, name: str, table: str, columns: list[str], unique: bool = False) -> None:
    indexes = {idx['name'] for idx in inspector.get_indexes(table)}
    if name not in indexes:
        op.create_index(name, table, columns, unique=unique)


def upgrade() -> None:
    bind = op.get_bind()
    inspector = inspect(bind)
    tables = set(inspector.get_table_names())

    if 'users' not in tables:
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('password', sa.String(length=255), nullable=False),
            sa.Column('user_type', sa.String(length=20), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True),
        )
    if 'teacher_info' not in tables:
        op.create_table(
            'teacher_info',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('qualification', sa.String(length=255), nullable=True),
            sa.Column('class_handling', sa.Text(), nullable=True),
            sa.Column('achievements', sa.Text(), nullable=True),
            sa.Column('picture', sa.String(length=500), nullable=True),
            sa.UniqueConstraint('user_id', name='uq_teacher_info_user_id'),
        )
    if 'events' not in tables:
        op.create_table(
            'events',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('title', sa.String(length=255), nullable=False),
            sa.Column('date', sa.Date(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('registration_link', sa.String(length=500), nullable=True),
        )
    if 'teacher_connect_requests' not in tables:
        op.create_table(
            'teacher_connect_requests',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('student_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
            sa.Column('created_at', sa.DateTime(), nullable=True),
        )
    if 'books' not in tables:
        op.create_table(
            'books',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('title', sa.String(length=255), nullable=False),
            sa.Column('author', sa.String(length=255), nullable=False, server_default=''),
            sa.Column('available_copies', sa.Integer(), nullable=False, server_default='0'),
        )
    if 'book_logs' not in tables:
        op.create_table(
            'book_logs',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('book_id', sa.Integer(), sa.ForeignKey('books.id'), nullable=False),
            sa.Column('action', sa.String(length=20), nullable=False),
            sa.Column('user_email', sa.String(length=255), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True),
        )
    if 'association_members' not in tables:
        op.create_table(
            'association_members',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('position', sa.String(length=120), nullable=False, server_default=''),
            sa.Column('department', sa.String(length=120), nullable=False, server_default=''),
            sa.Column('email', sa.String(length=255), nullable=True),
            sa.Column('picture', sa.String(length=500), nullable=True),
        )
    if 'chat_messages' not in tables:
        op.create_table(
            'chat_messages',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('student_email', sa.String(length=255), nullable=False),
            sa.Column('teacher_email', sa.String(length=255), nullable=False),
            sa.Column('sender', sa.String(length=255), nullable=False),
            sa.Column('message', sa.Text(), nullable=False),
            sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        )

    inspector = inspect(bind)
    _create_index_if_missing(inspector, 'ix_users_email', 'users', ['email'], unique=True)
    _create_index_if_missing(inspector, 'ix_users_user_type', 'users', ['user_type'])
    _create_index_if_missing(inspector, 'ix_events_date', 'events', ['date'])
    _create_index_if_missing(
        inspector,
        'ix_teacher_connect_requests_teacher_status',
        'teacher_connect_requests',
        ['teacher_id', 'status'],
    )
    _create_index_if_missing(inspector, 'ix_book_logs_book_id', 'book_logs', ['book_id'])
    _create_index_if_missing(
        inspector,
        'ix_chat_messages_pair_timestamp',
        'chat_messages',
        ['student_email', 'teacher_email', 'timestamp'],
    )


def downgrade() -> None:
    bind = op.get_bind()
    tables = set(inspect(bind).get_table_names())
    for table in (
        'chat_messages',
        'association_members',
        'book_logs',
        'books',
        'teacher_connect_requests',
        'events',
        'teacher_info',
        'users',
    ):
        if table in tables:
            op.drop_table(table)
