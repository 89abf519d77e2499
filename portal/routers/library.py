import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.errors import INTERNAL_ERROR_MESSAGE, NotFoundError, PortalError, error_response
from portal.db import get_db
from portal.route_logging import EndpointLabelRoute
from portal.schemas import BookActionPayload
from portal.services.library_service import list_books, request_book, return_book


router = APIRouter(tags=['Library'], route_class=EndpointLabelRoute)
logger = logging.getLogger(__name__)


@router.get('/books')
def get_books(db: Session = Depends(get_db)):
    try:
        return list_books(db)
    except SQLAlchemyError:
        logger.exception('books_fetch_failed')
        return error_response(500, INTERNAL_ERROR_MESSAGE)


@router.post('/request-book')
def post_request_book(payload: BookActionPayload, db: Session = Depends(get_db)):
    try:
        request_book(db, payload.book_id, payload.user_email)
    except NotFoundError as exc:
        return error_response(404, str(exc))
    except PortalError as exc:
        return error_response(400, str(exc))
    except SQLAlchemyError:
        db.rollback()
        logger.exception('book_request_failed book_id=%s', payload.book_id)
        return error_response(500, INTERNAL_ERROR_MESSAGE)
    return {'message': 'Book requested successfully'}


@router.post('/return-book')
def post_return_book(payload: BookActionPayload, db: Session = Depends(get_db)):
    try:
        return_book(db, payload.book_id, payload.user_email)
    except NotFoundError as exc:
        return error_response(404, str(exc))
    except PortalError as exc:
        return error_response(400, str(exc))
    except SQLAlchemyError:
        db.rollback()
        logger.exception('book_return_failed book_id=%s', payload.book_id)
        return error_response(500, INTERNAL_ERROR_MESSAGE)
    return {'message': 'Book returned successfully'}
