from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from school_admin.config import settings
from school_admin.models import Role, User
from school_admin.services.auth_service import build_user


logger = logging.getLogger(__name__)


def _seed_admin_if_configured(db: Session, *, username: str, password: str, email: str, name: str) -> dict:
    if not username or not password or not email:
        return {'seeded': False, 'reason': 'admin_credentials_not_configured'}

    if db.query(User.id).filter(User.role == Role.ADMIN.value).first():
        return {'seeded': False, 'reason': 'admin_exists'}
    if db.query(User.id).filter((User.username == username) | (User.email == email)).first():
        logger.warning('admin_seed_skipped identity_taken username=%s', username)
        return {'seeded': False, 'reason': 'identity_taken'}

    db.add(build_user(username=username, password=password, role=Role.ADMIN.value, name=name, email=email))
    db.commit()
    logger.warning('Bootstrap admin created - change its password after first login (username=%s)', username)
    return {'seeded': True, 'username': username}


def run_bootstrap(
    db: Session,
    *,
    admin_username: str | None = None,
    admin_password: str | None = None,
    admin_email: str | None = None,
) -> dict:
    """Seed the first admin account; explicit arguments win over BOOTSTRAP_ADMIN_* settings."""
    admin = _seed_admin_if_configured(
        db,
        username=(admin_username or settings.bootstrap_admin_username or '').strip(),
        password=admin_password or settings.bootstrap_admin_password or '',
        email=(admin_email or settings.bootstrap_admin_email or '').strip(),
        name=settings.bootstrap_admin_name or 'Administrator',
    )
    return {'ran': bool(admin.get('seeded')), 'admin': admin}
