"""Create a user from the command line.

    python -m campaign_manager.scripts.create_user <name> <email> <password> [role]
"""
import argparse
import logging
import sys

from campaign_manager.auth.auth_routes import register_user
from campaign_manager.core import errors
from campaign_manager.core.logging_config import configure_logging
from campaign_manager.core.settings import settings
from campaign_manager.database.db import Base, SessionLocal, engine
from campaign_manager.database.models import UserRole

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a campaign manager user")
    parser.add_argument("name")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("role", nargs="?", default=UserRole.USER.value, choices=[r.value for r in UserRole])
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings.log_level)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        user = register_user(db, args.name, args.email, args.password, args.role)
    except errors.ApiError as exc:
        logger.error(f"Could not create user: {exc.message}", extra={"details": exc.details})
        return 1
    finally:
        db.close()

    logger.info(f"User created successfully with ID: {user.id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
