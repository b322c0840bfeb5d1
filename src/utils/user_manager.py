"""User management utilities.

This module provides user management functionality including user storage,
password hashing and credential checks.
"""

import logging
import uuid
from typing import Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import BCRYPT_ROUNDS, MIN_PASSWORD_LENGTH, MIN_USERNAME_LENGTH
from core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from models.user import UserModel
from schemas.user import Role, User
from utils.converters import model_to_user

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session, bcrypt_rounds: int = BCRYPT_ROUNDS):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
            bcrypt_rounds: Bcrypt cost factor used for new hashes.
        """
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        try:
            return bcrypt.checkpw(
                _password_bytes(plain_password), hashed_password.encode("utf-8")
            )
        except ValueError:
            # Malformed hash in storage
            logger.error("Stored password hash could not be parsed")
            return False

    @staticmethod
    def validate_registration(username: Optional[str], password: Optional[str]) -> tuple:
        """Normalize and validate registration input.

        Both fields are trimmed before their length is checked.

        Returns:
            The (username, password) pair after trimming.

        Raises:
            ValidationError: If a field is missing or too short.
        """
        username = (username or "").strip()
        password = (password or "").strip()
        if not username:
            raise ValidationError("Username is required")
        if not password:
            raise ValidationError("Password is required")
        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError(
                f"Username must be at least {MIN_USERNAME_LENGTH} characters long"
            )
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        return username, password

    def create_user(self, username: str, password: str, role: Role = Role.USER) -> User:
        """Create a new user.

        Args:
            username: Username for the new user.
            password: Plain text password.
            role: User role.

        Returns:
            Created User object.

        Raises:
            ValidationError: If username or password do not meet the requirements.
            ConflictError: If username already exists.
        """
        username, password = self.validate_registration(username, password)

        existing = self.db.query(UserModel).filter(UserModel.username == username).first()
        if existing:
            raise ConflictError("Username already exists")

        model = UserModel(
            user_id=uuid.uuid4().hex,
            username=username,
            password_hash=self.hash_password(password),
            role=Role(role).value,
        )

        # Two concurrent registrations can both pass the check above;
        # the unique index on username catches the loser
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Username already exists") from e

        logger.info("Created user: %s (role=%s)", username, model.role)
        return model_to_user(model)

    def register(self, username: Optional[str], password: Optional[str]) -> User:
        """Public self-registration. The role is always 'user'."""
        return self.create_user(username, password, role=Role.USER)

    def authenticate(self, username: Optional[str], password: Optional[str]) -> User:
        """Check a username/password pair.

        Args:
            username: Username as submitted.
            password: Plain text password as submitted.

        Returns:
            The matching User.

        Raises:
            ValidationError: If either field is empty.
            AuthenticationError: If the user does not exist or the password is
                wrong. The message does not say which.
        """
        username = (username or "").strip()
        password = (password or "").strip()
        if not username:
            raise ValidationError("Username is required")
        if not password:
            raise ValidationError("Password is required")

        model = self.db.query(UserModel).filter(UserModel.username == username).first()
        if model is None or not self.verify_password(password, model.password_hash):
            logger.warning("Failed login attempt for username=%s", username)
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)
        return model_to_user(model)

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by username.

        Args:
            username: Username to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.username == username).first()
        if model:
            return model_to_user(model)
        return None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by user ID.

        Args:
            user_id: User ID to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if model:
            return model_to_user(model)
        return None

    def _get_model(self, username: str) -> UserModel:
        model = self.db.query(UserModel).filter(UserModel.username == username).first()
        if model is None:
            raise NotFoundError(f"User '{username}' not found")
        return model

    def set_role(self, username: str, role: Role) -> User:
        """Change a user's role. Only reachable from the provisioning CLI."""
        model = self._get_model(username)
        model.role = Role(role).value
        self.db.commit()
        self.db.refresh(model)
        logger.info("Set role of %s to %s", username, model.role)
        return model_to_user(model)

    def set_password(self, username: str, password: str) -> User:
        """Replace a user's password; the hash is recomputed here and nowhere else."""
        _, password = self.validate_registration(username, password)
        model = self._get_model(username)
        model.password_hash = self.hash_password(password)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Password changed for user: %s", username)
        return model_to_user(model)
