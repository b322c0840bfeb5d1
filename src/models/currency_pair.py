"""Currency pair database model."""

from datetime import datetime

import pytz
from sqlalchemy import Column, DateTime, Float, String, UniqueConstraint

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(pytz.utc)


class CurrencyPairModel(Base):
    """An ordered (base, target) exchange rate.

    (USD, EUR) and (EUR, USD) are separate rows with independent rates.
    """

    __tablename__ = "currency_pairs"
    __table_args__ = (
        UniqueConstraint(
            "base_currency",
            "target_currency",
            name="uq_currency_pairs_base_target",
        ),
    )

    id = Column(String, primary_key=True, index=True)
    base_currency = Column(String(3), nullable=False, index=True)
    target_currency = Column(String(3), nullable=False)
    rate = Column(Float, nullable=False)
    # Only moves when the rate itself changes
    last_updated = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )
