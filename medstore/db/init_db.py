# medstore/db/init_db.py
from __future__ import annotations

import argparse
import logging

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from medstore.core.config import settings
from medstore.core.security import hash_password
from medstore.db.base import Base
from medstore.db.session import engine

# Import all models so metadata is complete
from medstore.models import User  # noqa: F401

logger = logging.getLogger(__name__)


def seed_admin(db: Session) -> bool:
    """
    Create the bootstrap admin from ADMIN_* settings; safe to run multiple times.
    Returns True when a user was inserted.
    """
    email = settings.ADMIN_EMAIL.strip().lower()
    if not settings.ADMIN_PASSWORD:
        raise ValueError("ADMIN_PASSWORD must be set to seed the admin user")

    if db.query(User).filter(User.email == email).first():
        logger.info("Admin %s already exists", email)
        return False

    db.add(
        User(
            name=settings.ADMIN_NAME,
            email=email,
            password_hash=hash_password(settings.ADMIN_PASSWORD),
            is_active=True,
            is_admin=True,
        )
    )
    return True


def run(fresh: bool = False, with_admin: bool = False) -> None:
    if fresh:
        logger.warning("Dropping ALL tables (dev only)")
        Base.metadata.drop_all(bind=engine)

    logger.info("Creating all missing tables")
    Base.metadata.create_all(bind=engine)
    logger.info("Tables: %s", sorted(inspect(engine).get_table_names()))

    if not with_admin:
        return

    try:
        with Session(engine) as db:
            if seed_admin(db):
                db.commit()
                logger.info("Admin user seeded")
    except SQLAlchemyError:
        logger.exception("Seeding admin failed")
        raise


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    parser = argparse.ArgumentParser(
        description="Initialize DB (create tables, optionally seed the admin user).")
    parser.add_argument(
        "--fresh",
        action="store_true",
        help="Drop & recreate all tables (DEV ONLY).",
    )
    parser.add_argument(
        "--seed-admin",
        action="store_true",
        help="Create the ADMIN_EMAIL user if missing.",
    )
    args = parser.parse_args()
    run(fresh=args.fresh, with_admin=args.seed_admin)
