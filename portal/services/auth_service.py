from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from portal.config import settings
from portal.core.errors import DomainError, ValidationError
from portal.models import User


logger = logging.getLogger(__name__)


class InvalidCredentialsError(DomainError):
    """Raised when no account matches the submitted email, password and type."""


def is_valid_domain(email: str, domain: str | None = None) -> bool:
    expected = domain or settings.institution_domain
    parts = (email or '').split('@')
    if len(parts) < 2:
        return False
    return parts[1] == expected


def _require_account_fields(email: str | None, password: str | None, user_type: str | None) -> None:
    if not email or not password or not user_type:
        raise ValidationError('Missing required fields')
    if not is_valid_domain(email):
        raise ValidationError('Invalid email domain')


def signup(db: Session, email: str | None, password: str | None, user_type: str | None) -> User:
    _require_account_fields(email, password, user_type)

    if db.query(User).filter(User.email == email).first():
        raise DomainError('User already exists')

    user = User(email=email, password=password, user_type=user_type)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info('auth_signup_success email=%s user_type=%s', email, user_type)
    return user


def login(db: Session, email: str | None, password: str | None, user_type: str | None) -> User:
    _require_account_fields(email, password, user_type)

    user = (
        db.query(User)
        .filter(
            User.email == email,
            User.password == password,
            User.user_type == user_type,
        )
        .first()
    )
    if not user:
        logger.info('auth_login_rejected email=%s user_type=%s', email, user_type)
        raise InvalidCredentialsError('Invalid credentials')
    logger.info('auth_login_success email=%s user_type=%s', email, user_type)
    return user
