import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.errors import INTERNAL_ERROR_MESSAGE, ResourceNotConfiguredError, error_response
from portal.db import get_db
from portal.route_logging import EndpointLabelRoute
from portal.services.directory_service import list_association_members, list_events, list_teachers


router = APIRouter(tags=['Directory'], route_class=EndpointLabelRoute)
logger = logging.getLogger(__name__)


@router.get('/events')
def get_events(db: Session = Depends(get_db)):
    try:
        return list_events(db)
    except SQLAlchemyError:
        logger.exception('events_fetch_failed')
        return error_response(500, INTERNAL_ERROR_MESSAGE)


@router.get('/teachers')
def get_teachers(db: Session = Depends(get_db)):
    try:
        rows = list_teachers(db)
    except SQLAlchemyError:
        logger.exception('teachers_fetch_failed')
        return error_response(500, INTERNAL_ERROR_MESSAGE)
    logger.debug('teachers_fetched count=%s', len(rows))
    return rows


@router.get('/association-members')
def get_association_members(db: Session = Depends(get_db)):
    try:
        return list_association_members(db)
    except ResourceNotConfiguredError as exc:
        logger.warning('association_members_table_missing')
        return error_response(500, str(exc))
    except SQLAlchemyError:
        logger.exception('association_members_fetch_failed')
        return error_response(500, INTERNAL_ERROR_MESSAGE)
