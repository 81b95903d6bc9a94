import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reefcultures.core.config import get_settings
from reefcultures.dependencies import get_db, get_label_service, get_quote_service, get_rate_service
from reefcultures.schemas.shipping import (
    LabelRequest,
    LabelResponse,
    QuoteRequest,
    QuoteResponse,
    RateLookupRequest,
    RateQuoteResult,
    SelectRateRequest,
    SelectRateResponse,
)
from reefcultures.services.shipping.label_service import LabelService
from reefcultures.services.shipping.packing import build_package
from reefcultures.services.shipping.quote_service import QuoteService
from reefcultures.services.shipping.rate_service import RateShoppingService, validate_address

logger = logging.getLogger(__name__)

# Storefront routes (no auth)
router = APIRouter(
    prefix="/shipping",
    tags=["shipping"],
    responses={404: {"description": "Not found"}},
)

# Operator routes, included with require_auth() in main
admin_router = APIRouter(
    prefix="/shipping",
    tags=["shipping-admin"],
)


@router.post("/quote", response_model=QuoteResponse)
async def create_quote(
    body: QuoteRequest,
    db: AsyncSession = Depends(get_db),
    rate_service: RateShoppingService = Depends(get_rate_service),
    quote_service: QuoteService = Depends(get_quote_service),
):
    """Quote fast shipping for a cart and store the quote for checkout."""
    origin = get_settings().origin_address()
    destination = validate_address(body.address)
    package = build_package(body.items)

    result = await rate_service.quote(origin, destination, package.dimensions())
    quote = await quote_service.create_quote(db, body.items, destination, result.rates)

    return QuoteResponse(
        quote_key=quote.quote_key,
        expires_at=quote.expires_at,
        rates=result.rates,
        capped_at=result.capped_at,
    )


@router.post("/quote/select", response_model=SelectRateResponse)
async def select_quote_rate(
    body: SelectRateRequest,
    db: AsyncSession = Depends(get_db),
    quote_service: QuoteService = Depends(get_quote_service),
):
    """Record which quoted rate the customer picked."""
    quote, rate = await quote_service.select_rate(db, body.quote_key, body.selected_rate_id)
    return SelectRateResponse(quote_key=quote.quote_key, expires_at=quote.expires_at, selected_rate=rate)


@admin_router.post("/rates", response_model=RateQuoteResult)
async def lookup_rates(
    body: RateLookupRequest,
    rate_service: RateShoppingService = Depends(get_rate_service),
):
    """Operator rate lookup for an arbitrary destination and package."""
    origin = get_settings().origin_address()
    rates = await rate_service.estimate(origin, body.to, body.pkg, all_services=body.all_services)
    return RateQuoteResult(rates=rates, capped_at=rate_service.cap)


@admin_router.post("/labels", response_model=LabelResponse)
async def purchase_label(
    body: LabelRequest,
    db: AsyncSession = Depends(get_db),
    label_service: LabelService = Depends(get_label_service),
):
    """Buy a label for a quoted rate."""
    return await label_service.purchase_label(db, body.rate_id.strip(), order_id=body.order_id)
