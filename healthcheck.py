import argparse
import sys

import httpx
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import func, inspect, text

from school_admin.config import settings
from school_admin.db import SessionLocal, engine
from school_admin.models import Role, User


GREEN = '\033[32m'
RED = '\033[31m'
RESET = '\033[0m'

EXPECTED_TABLES = {
    'users',
    'classes',
    'sections',
    'students',
    'attendance_records',
    'assignments',
    'submissions',
    'fees',
    'teacher_profiles',
    'salary_payments',
    'timetable_entries',
}


def check_database():
    with engine.connect() as conn:
        conn.execute(text('SELECT 1'))
        if conn.dialect.name == 'sqlite':
            enabled = conn.execute(text('PRAGMA foreign_keys')).scalar()
            if not enabled:
                raise RuntimeError('SQLite foreign key enforcement is off')
    missing = EXPECTED_TABLES - set(inspect(engine).get_table_names())
    if missing:
        raise RuntimeError(f'Missing tables: {", ".join(sorted(missing))}')
    return f'dialect={engine.dialect.name} tables ok'


def check_migrations(config_path: str):
    heads = set(ScriptDirectory.from_config(Config(config_path)).get_heads())
    with engine.connect() as conn:
        current = MigrationContext.configure(conn).get_current_revision()
    if current is None:
        raise RuntimeError('Database is not stamped (run alembic upgrade head)')
    if current not in heads:
        raise RuntimeError(f'Database at {current}, repository heads are {sorted(heads)}')
    return f'revision={current}'


def check_signing_secret():
    if len(settings.jwt_secret) < 32:
        raise RuntimeError('JWT_SECRET should be at least 32 characters')
    return f'token lifetime={settings.token_expiry_days}d'


def check_admin_account():
    db = SessionLocal()
    try:
        admins = db.query(func.count(User.id)).filter(User.role == Role.ADMIN.value).scalar() or 0
    finally:
        db.close()
    if not admins:
        raise RuntimeError('No admin account (set BOOTSTRAP_ADMIN_* and run bootstrap.py)')
    return f'admins={admins}'


def check_api(base_url: str):
    url = f"{base_url.rstrip('/')}/health"
    res = httpx.get(url, timeout=8)
    res.raise_for_status()
    if res.json().get('status') != 'ok':
        raise RuntimeError(f'Unexpected payload from {url}: {res.text}')
    return url


def main():
    parser = argparse.ArgumentParser(description='Deployment readiness checks.')
    parser.add_argument('--alembic-config', default='alembic.ini')
    parser.add_argument('--base-url', default=settings.app_base_url)
    parser.add_argument('--skip-api', action='store_true', help='Do not probe the running server.')
    args = parser.parse_args()

    checks = [
        ('database', check_database),
        ('migrations', lambda: check_migrations(args.alembic_config)),
        ('signing secret', check_signing_secret),
        ('admin account', check_admin_account),
    ]
    if not args.skip_api:
        checks.append(('api', lambda: check_api(args.base_url)))

    failures = 0
    for name, fn in checks:
        try:
            detail = fn()
        except Exception as exc:
            failures += 1
            print(f'{RED}FAIL{RESET} {name}: {exc}')
        else:
            print(f'{GREEN}PASS{RESET} {name}: {detail}')
    sys.exit(1 if failures else 0)


if __name__ == '__main__':
    main()
