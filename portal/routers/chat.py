import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.errors import INTERNAL_ERROR_MESSAGE, PortalError, error_response
from portal.db import get_db
from portal.route_logging import EndpointLabelRoute
from portal.services.chat_service import list_chat_messages


router = APIRouter(tags=['Chat'], route_class=EndpointLabelRoute)
logger = logging.getLogger(__name__)


@router.get('/chat-messages')
def get_chat_messages(
    student_email: str | None = Query(default=None, alias='studentEmail'),
    teacher_email: str | None = Query(default=None, alias='teacherEmail'),
    db: Session = Depends(get_db),
):
    try:
        return list_chat_messages(db, student_email, teacher_email)
    except PortalError as exc:
        return error_response(400, str(exc))
    except SQLAlchemyError:
        logger.exception('chat_messages_fetch_failed student=%s teacher=%s', student_email, teacher_email)
        return error_response(500, INTERNAL_ERROR_MESSAGE)
