import argparse
import logging

from school_admin.db import Base, SessionLocal, engine
from school_admin.services.bootstrap_service import run_bootstrap


logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s %(message)s')
logger = logging.getLogger('bootstrap')


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Create tables and the first admin account.')
    parser.add_argument('--admin-username', default=None)
    parser.add_argument('--admin-password', default=None)
    parser.add_argument('--admin-email', default=None)
    parser.add_argument('--skip-create-all', action='store_true', help='Schema is managed by alembic upgrade head.')
    return parser.parse_args()


def main():
    args = parse_args()
    if not args.skip_create_all:
        Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        result = run_bootstrap(
            db,
            admin_username=args.admin_username,
            admin_password=args.admin_password,
            admin_email=args.admin_email,
        )
        if result.get('ran'):
            logger.info('bootstrap_executed result=%s', result)
        else:
            logger.info('bootstrap_skipped reason=%s', result['admin'].get('reason'))
    finally:
        db.close()


if __name__ == '__main__':
    main()
