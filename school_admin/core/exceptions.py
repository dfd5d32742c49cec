from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class SchoolAdminError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(SchoolAdminError):
    status_code = 400
    default_message = 'Validation failed'

    def __init__(self, message: str | None = None, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class UnauthorizedError(SchoolAdminError):
    status_code = 401
    default_message = 'Unauthorized'


class ForbiddenError(SchoolAdminError):
    status_code = 403
    default_message = 'Forbidden'


class NotFoundError(SchoolAdminError):
    status_code = 404
    default_message = 'Not found'


class ConflictError(SchoolAdminError):
    status_code = 409
    default_message = 'Conflict'


def _field_name(loc: tuple) -> str:
    # ('body', 'classId') -> 'classId'; ('query', 'date') -> 'date'
    parts = [str(part) for part in loc if part not in ('body', 'query', 'path')]
    return '.'.join(parts)


async def _handle_domain_error(request: Request, exc: SchoolAdminError) -> JSONResponse:
    content = {'detail': exc.message}
    field = getattr(exc, 'field', None)
    if field:
        content['field'] = field
    return JSONResponse(status_code=exc.status_code, content=content)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{'field': _field_name(tuple(err.get('loc') or ())), 'message': err.get('msg', '')} for err in exc.errors()]
    return JSONResponse(status_code=400, content={'detail': 'Validation failed', 'errors': errors})


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error('unhandled_error path=%s method=%s error=%s', request.url.path, request.method, type(exc).__name__)
    return JSONResponse(status_code=500, content={'detail': 'Internal server error'})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SchoolAdminError, _handle_domain_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)
