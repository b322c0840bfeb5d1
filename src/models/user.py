"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from datetime import datetime

import pytz
from sqlalchemy import Column, DateTime, String

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(pytz.utc)


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    user_id = Column(String, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default="user")  # 'user' or 'admin'
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )
