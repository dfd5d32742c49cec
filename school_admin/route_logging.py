from __future__ import annotations

import logging

from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from starlette.requests import Request

from school_admin.core.exceptions import SchoolAdminError
from school_admin.request_context import current_endpoint, current_user_id, describe_request


logger = logging.getLogger('school_admin.request')

_EXPECTED_ERRORS = (SchoolAdminError, HTTPException, RequestValidationError)


class EndpointNameRoute(APIRoute):
    """Tags every request with its route template so db and error logs can name it."""

    def get_route_handler(self):
        original_handler = super().get_route_handler()

        async def custom_handler(request: Request):
            endpoint_token = current_endpoint.set(f'{request.method} {self.path}')
            user_token = current_user_id.set(None)
            try:
                return await original_handler(request)
            except _EXPECTED_ERRORS:
                raise
            except Exception:
                logger.exception('request_failed %s', describe_request())
                raise
            finally:
                current_user_id.reset(user_token)
                current_endpoint.reset(endpoint_token)

        return custom_handler
