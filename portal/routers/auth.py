import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.errors import INTERNAL_ERROR_MESSAGE, PortalError, error_response
from portal.db import get_db
from portal.route_logging import EndpointLabelRoute
from portal.schemas import AccountPayload
from portal.services.auth_service import InvalidCredentialsError, login, signup


router = APIRouter(tags=['Auth'], route_class=EndpointLabelRoute)
logger = logging.getLogger(__name__)


@router.post('/signup')
def auth_signup(payload: AccountPayload, db: Session = Depends(get_db)):
    try:
        signup(db, payload.email, payload.password, payload.user_type)
    except PortalError as exc:
        return error_response(400, str(exc))
    except SQLAlchemyError:
        db.rollback()
        logger.exception('auth_signup_failed email=%s', payload.email)
        return error_response(500, INTERNAL_ERROR_MESSAGE)
    return {'message': 'Signup successful'}


@router.post('/login')
def auth_login(payload: AccountPayload, db: Session = Depends(get_db)):
    try:
        login(db, payload.email, payload.password, payload.user_type)
    except InvalidCredentialsError as exc:
        return error_response(401, str(exc))
    except PortalError as exc:
        return error_response(400, str(exc))
    except SQLAlchemyError:
        logger.exception('auth_login_failed email=%s', payload.email)
        return error_response(500, INTERNAL_ERROR_MESSAGE)
    return {'message': 'Login successful'}
