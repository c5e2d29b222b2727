import argparse
import getpass
import logging

from matchfinder.core.config import get_settings
from matchfinder.core.database import Base, SessionLocal, engine
from matchfinder.core.logging import setup_logging
from matchfinder.core.security import hash_password
from matchfinder.models import competition, match, user  # noqa: F401
from matchfinder.models.user import ROLE_ADMIN
from matchfinder.repositories.user_repository import UserRepository

logger = logging.getLogger("init_db")


def init_db(reset: bool = False):
    if reset:
        # Drops ALL data
        logger.warning("Dropping existing tables...")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    logger.info("Tables ready (competitions, matches, users)")


def create_admin(username: str, password: str, email: str, country: str):
    db = SessionLocal()
    try:
        users = UserRepository(db)
        if users.get_by_username(username) is not None:
            logger.error(f"User '{username}' already exists")
            return
        users.create(username, hash_password(password), email, country, role=ROLE_ADMIN)
        logger.info(f"Admin user '{username}' created")
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the Match Finder tables")
    parser.add_argument("--reset", action="store_true", help="Drop every table first")
    parser.add_argument("--admin", metavar="USERNAME", help="Also create an admin user")
    parser.add_argument("--email", default="")
    parser.add_argument("--country", default="")
    args = parser.parse_args()

    setup_logging(get_settings())
    init_db(reset=args.reset)
    if args.admin:
        create_admin(args.admin, getpass.getpass("Admin password: "), args.email, args.country)
