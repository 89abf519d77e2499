from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from portal.core.errors import DomainError, NotFoundError, ValidationError
from portal.models import Book, BookAction, BookLog


logger = logging.getLogger(__name__)


def serialize_book(row: Book) -> dict:
    return {
        'id': row.id,
        'title': row.title,
        'author': row.author,
        'available_copies': row.available_copies,
    }


def list_books(db: Session) -> list[dict]:
    return [serialize_book(row) for row in db.query(Book).order_by(Book.title.asc(), Book.id.asc()).all()]


def _require_ledger_fields(book_id: int | None, user_email: str | None) -> None:
    if not book_id or not user_email:
        raise ValidationError('Missing book ID or user email')


def _available_copies(db: Session, book_id: int) -> int:
    row = db.query(Book.available_copies).filter(Book.id == book_id).first()
    if row is None:
        raise NotFoundError('Book not found')
    return int(row.available_copies or 0)


def _apply(db: Session, book_id: int, user_email: str, action: BookAction) -> None:
    delta = -1 if action == BookAction.REQUEST else 1
    db.query(Book).filter(Book.id == book_id).update(
        {Book.available_copies: Book.available_copies + delta},
        synchronize_session=False,
    )
    db.add(BookLog(book_id=book_id, action=action.value, user_email=user_email))
    db.commit()
    logger.info('library_%s book_id=%s user=%s', action.value, book_id, user_email)


def request_book(db: Session, book_id: int | None, user_email: str | None) -> None:
    # Check and decrement are separate statements; two concurrent requests for
    # the last copy can both pass the check.
    _require_ledger_fields(book_id, user_email)
    if _available_copies(db, book_id) <= 0:
        raise DomainError('Book not available')
    _apply(db, book_id, user_email, BookAction.REQUEST)


def return_book(db: Session, book_id: int | None, user_email: str | None) -> None:
    _require_ledger_fields(book_id, user_email)
    _available_copies(db, book_id)
    _apply(db, book_id, user_email, BookAction.RETURN)
