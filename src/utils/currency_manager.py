"""Currency pair management and conversion.

This module provides CRUD over stored exchange rates and the conversion
operation built on top of them.
"""

import logging
import math
import uuid
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, List, Optional, Tuple

import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import CURRENCY_CODE_LENGTH
from core.exceptions import ConflictError, NotFoundError, ValidationError
from models.currency_pair import CurrencyPairModel
from schemas.currency import ConversionResult, CurrencyPair
from utils.converters import model_to_currency_pair

logger = logging.getLogger(__name__)

PAIR_NOT_FOUND_MESSAGE = "Currency pair not found"
PAIR_EXISTS_MESSAGE = "Currency pair already exists"

_CENTS = Decimal("0.01")


def normalize_code(code: Optional[str], field_label: str) -> str:
    """Trim and uppercase a currency code, checking its length.

    Args:
        code: Raw code from the request.
        field_label: 'Source' or 'Target', used in error messages.

    Raises:
        ValidationError: If the code is missing or not exactly 3 characters.
    """
    if not isinstance(code, str) or not code.strip():
        raise ValidationError(f"{field_label} currency is required")
    normalized = code.strip().upper()
    if len(normalized) != CURRENCY_CODE_LENGTH:
        raise ValidationError(
            f"Currency code must be {CURRENCY_CODE_LENGTH} characters"
        )
    return normalized


def validate_positive_number(value: Any, message: str) -> float:
    """Return value as a float if it is a finite number greater than zero."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(message)
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(message)
    return float(value)


def convert_amount(amount: float, rate: float) -> float:
    """Multiply amount by rate and round half away from zero to 2 places.

    The product is computed on the decimal representations of both inputs so
    that e.g. 1.005 * 1 rounds to 1.01 rather than to binary-float 1.00.
    """
    amount_dec = Decimal(repr(float(amount)))
    rate_dec = Decimal(repr(float(rate)))
    with localcontext() as ctx:
        # quantize needs room for every integer digit of the product plus two decimals
        ctx.prec = max(28, amount_dec.adjusted() + rate_dec.adjusted() + 6)
        product = amount_dec * rate_dec
        return float(product.quantize(_CENTS, rounding=ROUND_HALF_UP))


class CurrencyManager:
    """Manages currency pairs using SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db

    def _find_pair(self, base: str, target: str) -> Optional[CurrencyPairModel]:
        return (
            self.db.query(CurrencyPairModel)
            .filter(
                CurrencyPairModel.base_currency == base,
                CurrencyPairModel.target_currency == target,
            )
            .first()
        )

    def _get_model(self, pair_id: str) -> CurrencyPairModel:
        model = (
            self.db.query(CurrencyPairModel)
            .filter(CurrencyPairModel.id == pair_id)
            .first()
        )
        if model is None:
            raise NotFoundError(PAIR_NOT_FOUND_MESSAGE)
        return model

    def _commit(self, model: CurrencyPairModel) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(PAIR_EXISTS_MESSAGE) from e
        self.db.refresh(model)

    def list_pairs(self) -> List[CurrencyPair]:
        """List every pair ordered by base currency (then target currency)."""
        models = (
            self.db.query(CurrencyPairModel)
            .order_by(
                CurrencyPairModel.base_currency.asc(),
                CurrencyPairModel.target_currency.asc(),
            )
            .all()
        )
        return [model_to_currency_pair(m) for m in models]

    def get_pair(self, pair_id: str) -> CurrencyPair:
        return model_to_currency_pair(self._get_model(pair_id))

    def create_pair(
        self,
        base_currency: Optional[str],
        target_currency: Optional[str],
        rate: Any,
    ) -> CurrencyPair:
        """Create a new ordered currency pair.

        Args:
            base_currency: Base code, any case, surrounding whitespace allowed.
            target_currency: Target code, same rules.
            rate: Positive exchange rate.

        Returns:
            The created CurrencyPair.

        Raises:
            ValidationError: If a code or the rate is invalid.
            ConflictError: If the ordered pair already exists.
        """
        base = normalize_code(base_currency, "Source")
        target = normalize_code(target_currency, "Target")
        if rate is None:
            raise ValidationError("Exchange rate is required")
        rate = validate_positive_number(rate, "Rate must be a positive number")

        if self._find_pair(base, target) is not None:
            raise ConflictError(PAIR_EXISTS_MESSAGE)

        now = datetime.now(pytz.utc)
        model = CurrencyPairModel(
            id=uuid.uuid4().hex,
            base_currency=base,
            target_currency=target,
            rate=rate,
            last_updated=now,
            created_at=now,
            updated_at=now,
        )
        self.db.add(model)
        self._commit(model)
        logger.info("Created currency pair %s/%s at %s", base, target, rate)
        return model_to_currency_pair(model)

    def update_pair(
        self,
        pair_id: str,
        base_currency: Optional[str] = None,
        target_currency: Optional[str] = None,
        rate: Any = None,
    ) -> CurrencyPair:
        """Apply a partial update to a pair.

        Falsy values (None, 0, "") mean "not provided" and leave the field
        unchanged. last_updated moves only when the rate value changes.

        Raises:
            NotFoundError: If pair_id does not exist.
            ValidationError: If a provided code or rate is invalid.
            ConflictError: If the new codes collide with another pair.
        """
        model = self._get_model(pair_id)

        base = normalize_code(base_currency, "Source") if base_currency else model.base_currency
        target = (
            normalize_code(target_currency, "Target") if target_currency else model.target_currency
        )
        new_rate = (
            validate_positive_number(rate, "Rate must be a positive number") if rate else None
        )

        if (base, target) != (model.base_currency, model.target_currency):
            clash = self._find_pair(base, target)
            if clash is not None and clash.id != model.id:
                raise ConflictError(PAIR_EXISTS_MESSAGE)
            model.base_currency = base
            model.target_currency = target
        if new_rate is not None and new_rate != model.rate:
            model.rate = new_rate
            model.last_updated = datetime.now(pytz.utc)

        self._commit(model)
        logger.info(
            "Updated currency pair %s: %s/%s at %s",
            pair_id,
            model.base_currency,
            model.target_currency,
            model.rate,
        )
        return model_to_currency_pair(model)

    def delete_pair(self, pair_id: str) -> None:
        """Delete a pair.

        Raises:
            NotFoundError: If pair_id does not exist.
        """
        model = self._get_model(pair_id)
        self.db.delete(model)
        self.db.commit()
        logger.info(
            "Deleted currency pair %s (%s/%s)",
            pair_id,
            model.base_currency,
            model.target_currency,
        )

    def lookup_rate(self, base_currency: str, target_currency: str) -> Tuple[str, str, float]:
        """Find the stored rate for an exact ordered pair.

        The reverse pair is never consulted and no cross rate is derived.

        Raises:
            ValidationError: If a code is invalid.
            NotFoundError: If the ordered pair is not stored.
        """
        base = normalize_code(base_currency, "Source")
        target = normalize_code(target_currency, "Target")
        model = self._find_pair(base, target)
        if model is None:
            raise NotFoundError(PAIR_NOT_FOUND_MESSAGE)
        return model.base_currency, model.target_currency, model.rate

    def convert(
        self,
        base_currency: Optional[str],
        target_currency: Optional[str],
        amount: Any,
    ) -> ConversionResult:
        """Convert amount from base_currency to target_currency.

        Returns:
            ConversionResult with the amount rounded to 2 places and the
            stored rate unrounded.

        Raises:
            ValidationError: If amount is not a positive finite number.
            NotFoundError: If the ordered pair is not stored.
        """
        amount = validate_positive_number(amount, "Please provide a valid amount")
        base, target, rate = self.lookup_rate(base_currency, target_currency)
        return ConversionResult(
            base_currency=base,
            target_currency=target,
            amount=amount,
            converted_amount=convert_amount(amount, rate),
            rate=rate,
        )
