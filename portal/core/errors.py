"""Error taxonomy shared by the portal services.

Services raise these; routers decide the HTTP status per endpoint, because
the same condition (say, a missing row) is a 400 on one endpoint and a 404
on another.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class PortalError(ValueError):
    """Base class for expected, user-facing failures."""


class ValidationError(PortalError):
    """Required input missing or malformed."""


class DomainError(PortalError):
    """A business rule rejected the request."""


class NotFoundError(PortalError):
    """A referenced row does not exist."""


class ResourceNotConfiguredError(PortalError):
    """The backing table for a feature is absent from this deployment."""


INTERNAL_ERROR_MESSAGE = 'Internal server error'


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'error': message})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def invalid_payload_handler(request: Request, exc: RequestValidationError):
        logger.info('request_invalid path=%s errors=%s', request.url.path, exc.errors())
        return error_response(400, 'Invalid request payload')
