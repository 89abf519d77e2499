import logging
from functools import partial

from anyio import from_thread
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.errors import INTERNAL_ERROR_MESSAGE, PortalError, error_response
from portal.db import get_db
from portal.realtime.context import RealtimeContext, get_realtime
from portal.route_logging import EndpointLabelRoute
from portal.schemas import AcceptConnectRequestPayload, ConnectRequestPayload
from portal.services.connect_request_service import accept_request, create_request, list_pending_for


router = APIRouter(tags=['Connect Requests'], route_class=EndpointLabelRoute)
logger = logging.getLogger(__name__)


@router.post('/teacher-connect-request')
def send_connect_request(payload: ConnectRequestPayload, db: Session = Depends(get_db)):
    try:
        create_request(db, payload.student_email, payload.teacher_id)
    except PortalError as exc:
        return error_response(400, str(exc))
    except SQLAlchemyError:
        db.rollback()
        logger.exception('connect_request_send_failed student=%s', payload.student_email)
        return error_response(500, INTERNAL_ERROR_MESSAGE)
    return {'message': 'Request sent'}


@router.get('/teacher-connect-requests')
def get_pending_connect_requests(
    teacher_email: str | None = Query(default=None, alias='teacherEmail'),
    db: Session = Depends(get_db),
):
    try:
        return list_pending_for(db, teacher_email)
    except PortalError as exc:
        return error_response(400, str(exc))
    except SQLAlchemyError:
        logger.exception('connect_request_list_failed teacher=%s', teacher_email)
        return error_response(500, INTERNAL_ERROR_MESSAGE)


@router.post('/accept-teacher-connect-request')
def accept_connect_request(
    payload: AcceptConnectRequestPayload,
    db: Session = Depends(get_db),
    realtime: RealtimeContext = Depends(get_realtime),
):
    try:
        pair = accept_request(db, payload.request_id)
    except PortalError as exc:
        return error_response(400, str(exc))
    except SQLAlchemyError:
        db.rollback()
        logger.exception('connect_request_accept_failed request_id=%s', payload.request_id)
        return error_response(500, INTERNAL_ERROR_MESSAGE)

    # Socket outboxes belong to the event loop; this handler runs in the threadpool.
    from_thread.run_sync(
        partial(
            realtime.relay.notify_connection_accepted,
            student_email=pair['student_email'],
            teacher_email=pair['teacher_email'],
        )
    )
    return {'message': 'Request accepted'}
