from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from school_admin.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from school_admin.core.security import create_access_token, hash_password, verify_password
from school_admin.core.time_provider import TimeProvider, default_time_provider
from school_admin.models import User


logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid username or password'


def _mask_email(email: str) -> str:
    local, _, domain = (email or '').partition('@')
    if not domain:
        return '***'
    return f'{local[:1]}***@{domain}'


def ensure_identity_available(db: Session, *, username: str, email: str) -> None:
    if db.query(User.id).filter(User.email == email).first():
        raise ConflictError('Email already in use')
    if db.query(User.id).filter(User.username == username).first():
        raise ConflictError('Username already in use')


def build_user(
    *,
    username: str,
    password: str,
    role: str,
    name: str,
    email: str,
    contact: str | None = None,
    profile_picture: str | None = None,
    time_provider: TimeProvider = default_time_provider,
) -> User:
    return User(
        username=username,
        password_hash=hash_password(password),
        role=role,
        name=name,
        email=email,
        contact=contact,
        profile_picture=profile_picture,
        created_at=time_provider.naive_now(),
    )


def issue_token(user: User, *, time_provider: TimeProvider = default_time_provider) -> str:
    return create_access_token(user.id, user.role, user.email, time_provider=time_provider)


def register(
    db: Session,
    *,
    username: str,
    password: str,
    role: str,
    name: str,
    email: str,
    contact: str | None = None,
    profile_picture: str | None = None,
    time_provider: TimeProvider = default_time_provider,
) -> dict:
    email = str(email)
    ensure_identity_available(db, username=username, email=email)
    user = build_user(
        username=username,
        password=password,
        role=role,
        name=name,
        email=email,
        contact=contact,
        profile_picture=profile_picture,
        time_provider=time_provider,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same identity.
        db.rollback()
        raise ConflictError('Username or email already in use') from exc
    db.refresh(user)
    logger.info('auth_register user_id=%s role=%s email=%s', user.id, user.role, _mask_email(user.email))
    return {'token': issue_token(user, time_provider=time_provider), 'user': user}


def login(db: Session, username: str, password: str, *, time_provider: TimeProvider = default_time_provider) -> dict:
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.password_hash):
        logger.warning('auth_login_failed username=%s', username)
        raise UnauthorizedError(INVALID_CREDENTIALS)
    logger.info('auth_login_success user_id=%s role=%s', user.id, user.role)
    return {'token': issue_token(user, time_provider=time_provider), 'user': user}


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError('User not found')
    return user
