"""
Persistence of shipping quotes for later redemption at checkout.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reefcultures.core.exceptions import QuoteExpiredError, QuoteNotFoundError, RateNotInQuoteError
from reefcultures.models.shipping import ShippingQuote
from reefcultures.schemas.shipping import Address, CartItem, ShippingRate

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class QuoteService:
    """Stores quoted rates under a generated key with an expiry."""

    def __init__(self, ttl_minutes: int = 30):
        self.ttl = timedelta(minutes=ttl_minutes)

    async def create_quote(
        self,
        db: AsyncSession,
        items: List[CartItem],
        ship_to: Address,
        rates: List[ShippingRate],
        now: Optional[datetime] = None,
    ) -> ShippingQuote:
        now = now or datetime.now(timezone.utc)
        quote = ShippingQuote(
            quote_key=str(uuid.uuid4()),
            items=[item.model_dump() for item in items],
            ship_to=ship_to.model_dump(),
            rates=[rate.model_dump() for rate in rates],
            expires_at=now + self.ttl,
        )
        db.add(quote)
        await db.commit()
        logger.info(f"Stored shipping quote {quote.quote_key} with {len(rates)} rates")
        return quote

    async def get_active_quote(
        self,
        db: AsyncSession,
        quote_key: str,
        now: Optional[datetime] = None,
    ) -> ShippingQuote:
        """
        Raises:
            QuoteNotFoundError: If no quote has this key
            QuoteExpiredError: If the quote is past its expiry
        """
        result = await db.execute(select(ShippingQuote).where(ShippingQuote.quote_key == quote_key))
        quote = result.scalar_one_or_none()
        if quote is None:
            raise QuoteNotFoundError("Shipping quote not found")

        now = now or datetime.now(timezone.utc)
        if _as_utc(quote.expires_at) <= now:
            raise QuoteExpiredError("Shipping quote has expired. Please request new rates.")
        return quote

    async def select_rate(
        self,
        db: AsyncSession,
        quote_key: str,
        rate_id: str,
        now: Optional[datetime] = None,
    ) -> Tuple[ShippingQuote, ShippingRate]:
        """
        Record the customer's chosen rate on an active quote.

        Raises:
            RateNotInQuoteError: If rate_id was not one of the quoted rates
        """
        quote = await self.get_active_quote(db, quote_key, now=now)

        selected = next(
            (ShippingRate.model_validate(rate) for rate in quote.rates or [] if rate.get("rate_id") == rate_id),
            None,
        )
        if selected is None:
            raise RateNotInQuoteError("Selected rate is not part of this quote")

        quote.selected_rate_id = selected.rate_id
        await db.commit()
        logger.info(f"Quote {quote_key}: selected rate {selected.rate_id}")
        return quote, selected
