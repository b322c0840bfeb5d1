"""Conversions between SQLAlchemy models and pydantic schemas."""

from models.currency_pair import CurrencyPairModel
from models.user import UserModel
from schemas.currency import CurrencyPair
from schemas.user import Role, User


def model_to_user(model: UserModel) -> User:
    """Build a User schema from a row, leaving the password hash behind."""
    return User(
        user_id=model.user_id,
        username=model.username,
        role=Role(model.role),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def model_to_currency_pair(model: CurrencyPairModel) -> CurrencyPair:
    return CurrencyPair.model_validate(model)
