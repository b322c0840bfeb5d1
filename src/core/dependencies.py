"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes.
Every manager is built per request around the request-scoped DB session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import currency_manager
from utils import user_manager


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_currency_manager(
    db: Session = Depends(get_db),
) -> currency_manager.CurrencyManager:
    """Get CurrencyManager instance with request-scoped DB session."""
    return currency_manager.CurrencyManager(db)


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
CurrencyManagerDep = Annotated[
    currency_manager.CurrencyManager, Depends(get_currency_manager)
]
