from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, Request

from school_admin.core.exceptions import ForbiddenError, UnauthorizedError
from school_admin.core.security import decode_jwt
from school_admin.request_context import current_user_id


logger = logging.getLogger(__name__)


def _resolve_token(request: Request) -> str | None:
    authorization = request.headers.get('authorization', '')
    if authorization.lower().startswith('bearer '):
        return authorization[7:].strip() or None
    return None


async def require_auth_user(request: Request) -> dict:
    token = _resolve_token(request)
    if not token:
        raise UnauthorizedError('Access token required')
    claims = decode_jwt(token)
    if not claims:
        raise ForbiddenError('Invalid or expired token')
    try:
        user_id = int(claims.get('sub') or 0)
    except (TypeError, ValueError):
        user_id = 0
    role = str(claims.get('role') or '').strip().lower()
    if user_id <= 0 or not role:
        raise ForbiddenError('Invalid or expired token')

    user = {'user_id': user_id, 'role': role, 'email': str(claims.get('email') or '')}
    request.state.auth_user = user
    current_user_id.set(user_id)
    return user


def require_roles(*allowed_roles: str) -> Callable:
    normalized = {str(role).strip().lower() for role in allowed_roles}

    async def _check_role(user: dict = Depends(require_auth_user)) -> dict:
        if user['role'] not in normalized:
            logger.info('role_denied user_id=%s role=%s allowed=%s', user['user_id'], user['role'], sorted(normalized))
            raise ForbiddenError('Insufficient permissions')
        return user

    return _check_role
