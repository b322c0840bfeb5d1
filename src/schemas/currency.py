"""Currency pair schema definitions.

JSON field names are camelCase (``baseCurrency``, ``lastUpdated`` ...) to match
what the frontend expects; Python attributes stay snake_case.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CurrencyPair(CamelModel):
    """structure of a stored exchange rate"""

    id: str
    base_currency: str = Field(description="3-letter uppercase base currency code.")
    target_currency: str = Field(description="3-letter uppercase target currency code.")
    rate: float = Field(description="Units of target currency per unit of base currency.")
    last_updated: datetime = Field(description="When the rate was last changed.")
    created_at: datetime
    updated_at: datetime


RATE_ERROR_MESSAGE = "Rate must be a positive number"
AMOUNT_ERROR_MESSAGE = "Please provide a valid amount"


def _reject_bool(value: Any, message: str) -> Any:
    # Lax float parsing would turn JSON true/false into 1.0/0.0
    if isinstance(value, bool):
        raise PydanticCustomError("invalid_number", message)
    return value


class RateRequestModel(CamelModel):
    @field_validator("rate", mode="before", check_fields=False)
    @classmethod
    def rate_is_not_bool(cls, value: Any) -> Any:
        return _reject_bool(value, RATE_ERROR_MESSAGE)


class CreateCurrencyPairRequest(RateRequestModel):
    base_currency: Optional[str] = None
    target_currency: Optional[str] = None
    rate: Optional[float] = None


class UpdateCurrencyPairRequest(RateRequestModel):
    """Partial update. Falsy values (0, "", null) are treated as not provided."""

    base_currency: Optional[str] = None
    target_currency: Optional[str] = None
    rate: Optional[float] = None


class ConvertRequest(CamelModel):
    base_currency: Optional[str] = None
    target_currency: Optional[str] = None
    amount: Optional[float] = None

    @field_validator("amount", mode="before")
    @classmethod
    def amount_is_not_bool(cls, value: Any) -> Any:
        return _reject_bool(value, AMOUNT_ERROR_MESSAGE)


class ConversionResult(CamelModel):
    base_currency: str
    target_currency: str
    amount: float
    converted_amount: float = Field(description="amount * rate, rounded to 2 places.")
    rate: float = Field(description="The stored rate, unrounded.")


class CurrencyPairResponse(CamelModel):
    success: bool = True
    data: CurrencyPair


class CurrencyPairListResponse(CamelModel):
    success: bool = True
    data: List[CurrencyPair]


class ConversionResponse(CamelModel):
    success: bool = True
    data: ConversionResult


class MessageResponse(BaseModel):
    success: bool = True
    message: str
