"""Currency pair and conversion routes."""

from typing import Type

from fastapi import APIRouter, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from api.routes.auth import get_current_user, require_admin
from core.dependencies import CurrencyManagerDep
from core.exceptions import ValidationError
from schemas.currency import (
    ConversionResponse,
    ConvertRequest,
    CreateCurrencyPairRequest,
    CurrencyPairListResponse,
    CurrencyPairResponse,
    MessageResponse,
    UpdateCurrencyPairRequest,
)
from schemas.user import User

router = APIRouter(prefix="/api/currency", tags=["Currency"])

def admin_body(schema: Type[BaseModel]):
    """Build a dependency that reads the JSON body only once require_admin passed.

    Declaring the schema as a plain body parameter would make FastAPI decode and
    validate it before any dependency runs, so a non-admin sending a broken body
    would see 400 instead of 403.
    """

    async def parse_body(
        request: Request,
        admin: User = Depends(require_admin),
    ) -> BaseModel:
        try:
            payload = await request.json()
        except ValueError:
            raise ValidationError("Request body must be valid JSON")
        try:
            return schema.model_validate(payload)
        except PydanticValidationError as exc:
            raise RequestValidationError(exc.errors())

    return parse_body


@router.get("", response_model=CurrencyPairListResponse, summary="List currency pairs")
def list_currency_pairs(
    currency_manager: CurrencyManagerDep,
    current_user: User = Depends(get_current_user),
) -> CurrencyPairListResponse:
    return CurrencyPairListResponse(data=currency_manager.list_pairs())


@router.post(
    "/convert",
    response_model=ConversionResponse,
    summary="Convert an amount using a stored rate",
)
def convert_currency(
    req: ConvertRequest,
    currency_manager: CurrencyManagerDep,
    current_user: User = Depends(get_current_user),
) -> ConversionResponse:
    """Convert an amount from baseCurrency to targetCurrency.

    Only the exact ordered pair is used; the reverse pair is never inverted.

    Raises:
        ValidationError: If amount is missing, not positive or not finite.
        NotFoundError: If the ordered pair is not stored.
    """
    result = currency_manager.convert(req.base_currency, req.target_currency, req.amount)
    return ConversionResponse(data=result)


@router.post(
    "",
    response_model=CurrencyPairResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a currency pair (admin)",
)
def create_currency_pair(
    currency_manager: CurrencyManagerDep,
    req: CreateCurrencyPairRequest = Depends(admin_body(CreateCurrencyPairRequest)),
) -> CurrencyPairResponse:
    pair = currency_manager.create_pair(req.base_currency, req.target_currency, req.rate)
    return CurrencyPairResponse(data=pair)


@router.put(
    "/{pair_id}",
    response_model=CurrencyPairResponse,
    summary="Update a currency pair (admin)",
)
def update_currency_pair(
    pair_id: str,
    currency_manager: CurrencyManagerDep,
    req: UpdateCurrencyPairRequest = Depends(admin_body(UpdateCurrencyPairRequest)),
) -> CurrencyPairResponse:
    """Partially update a pair. Fields sent as 0, "" or null are left as they are."""
    pair = currency_manager.update_pair(
        pair_id,
        base_currency=req.base_currency,
        target_currency=req.target_currency,
        rate=req.rate,
    )
    return CurrencyPairResponse(data=pair)


@router.delete(
    "/{pair_id}",
    response_model=MessageResponse,
    summary="Delete a currency pair (admin)",
)
def delete_currency_pair(
    pair_id: str,
    currency_manager: CurrencyManagerDep,
    admin: User = Depends(require_admin),
) -> MessageResponse:
    currency_manager.delete_pair(pair_id)
    return MessageResponse(message="Currency pair removed")
