from .base import Base
from .currency_pair import CurrencyPairModel
from .user import UserModel

__all__ = ["Base", "CurrencyPairModel", "UserModel"]
