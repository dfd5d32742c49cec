from __future__ import annotations

import base64
import hashlib
import hmac
import json
import secrets
from datetime import timedelta

from school_admin.config import settings
from school_admin.core.time_provider import TimeProvider, default_time_provider


PASSWORD_ITERATIONS = 120000


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    derived = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt.encode('utf-8'), PASSWORD_ITERATIONS)
    return f'pbkdf2_sha256${PASSWORD_ITERATIONS}${salt}${derived.hex()}'


def verify_password(password: str, password_hash: str) -> bool:
    try:
        algo, iter_raw, salt, digest_hex = (password_hash or '').split('$', 3)
        if algo != 'pbkdf2_sha256':
            return False
        iterations = int(iter_raw)
    except ValueError:
        return False
    derived = hashlib.pbkdf2_hmac('sha256', (password or '').encode('utf-8'), salt.encode('utf-8'), iterations).hex()
    return hmac.compare_digest(derived, digest_hex)


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode('ascii').rstrip('=')


def _b64url_decode(value: str) -> bytes:
    padding = '=' * (-len(value) % 4)
    return base64.urlsafe_b64decode((value + padding).encode('ascii'))


def _sign(signing_input: bytes) -> bytes:
    return hmac.new(settings.jwt_secret.encode('utf-8'), signing_input, hashlib.sha256).digest()


def encode_jwt(payload: dict) -> str:
    header = {'alg': 'HS256', 'typ': 'JWT'}
    header_part = _b64url_encode(json.dumps(header, separators=(',', ':')).encode('utf-8'))
    payload_part = _b64url_encode(json.dumps(payload, separators=(',', ':')).encode('utf-8'))
    signing_input = f'{header_part}.{payload_part}'.encode('ascii')
    return f'{header_part}.{payload_part}.{_b64url_encode(_sign(signing_input))}'


def decode_jwt(token: str, *, time_provider: TimeProvider = default_time_provider) -> dict | None:
    """Return the claims of a valid, unexpired token, or None."""
    try:
        header_part, payload_part, signature_part = token.split('.')
        signing_input = f'{header_part}.{payload_part}'.encode('ascii')
        provided_signature = _b64url_decode(signature_part)
    except (ValueError, UnicodeEncodeError):
        return None
    if not hmac.compare_digest(provided_signature, _sign(signing_input)):
        return None

    try:
        header = json.loads(_b64url_decode(header_part).decode('utf-8'))
        payload = json.loads(_b64url_decode(payload_part).decode('utf-8'))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(header, dict) or header.get('alg') != 'HS256':
        return None
    if not isinstance(payload, dict):
        return None

    expires_at = payload.get('exp')
    if not isinstance(expires_at, (int, float)) or expires_at <= time_provider.now().timestamp():
        return None
    return payload


def create_access_token(
    user_id: int,
    role: str,
    email: str,
    *,
    time_provider: TimeProvider = default_time_provider,
) -> str:
    now = time_provider.now()
    expires = now + timedelta(days=settings.token_expiry_days)
    return encode_jwt(
        {
            'sub': int(user_id),
            'role': role,
            'email': email,
            'iat': int(now.timestamp()),
            'exp': int(expires.timestamp()),
        }
    )
