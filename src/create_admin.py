"""Provision an administrator account.

Admins cannot be created over HTTP; registration always yields a regular user.
Run this tool against the configured database instead:

    python create_admin.py --username admin
    python create_admin.py --username alice --promote
"""

import argparse
import getpass
import logging
import sys
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from core.database import SessionLocal, init_db
from core.exceptions import CurrencyExchangeError
from core.logging_config import setup_logging
from schemas.user import Role, User
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


def provision_admin(
    db: Session,
    username: str,
    password: Optional[str],
    promote: bool = False,
) -> User:
    """Create an admin user, or promote an existing one.

    Args:
        db: Database session.
        username: Account to create or promote.
        password: New password. Required when creating; when promoting, the
            existing password is kept if None.
        promote: Allow an existing account to be promoted instead of failing.

    Returns:
        The admin User.

    Raises:
        ConflictError: If the user exists and promote is False.
        ValidationError: If username or password are invalid.
    """
    user_manager = UserManager(db)
    existing = user_manager.get_user_by_username(username.strip())
    if existing is not None and promote:
        if password:
            user_manager.set_password(existing.username, password)
        return user_manager.set_role(existing.username, Role.ADMIN)
    return user_manager.create_user(username, password, role=Role.ADMIN)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or promote an admin account.")
    parser.add_argument("--username", required=True, help="Admin username")
    parser.add_argument(
        "--password",
        help="Admin password (prompted for if omitted when creating a new account)",
    )
    parser.add_argument(
        "--promote",
        action="store_true",
        help="Promote the account to admin if it already exists",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging()
    init_db()

    password = args.password
    if password is None and not args.promote:
        password = getpass.getpass("Admin password: ")

    db = SessionLocal()
    try:
        user = provision_admin(db, args.username, password, promote=args.promote)
    except CurrencyExchangeError as e:
        logger.error("Could not provision admin: %s", e.message)
        return 1
    finally:
        db.close()

    print(f"Admin user ready: {user.username} (id={user.user_id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
