from functools import lru_cache
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reefcultures.core.config import get_settings
from reefcultures.database import async_session
from reefcultures.services.shipping.base import BaseCarrier
from reefcultures.services.shipping.carrier_directory import CarrierDirectory
from reefcultures.services.shipping.factory import get_carrier
from reefcultures.services.shipping.label_service import LabelService
from reefcultures.services.shipping.quote_service import QuoteService
from reefcultures.services.shipping.rate_service import RateShoppingService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()


def get_shipping_provider() -> BaseCarrier:
    return get_carrier("shipengine")


@lru_cache()
def _carrier_directory_for(api_key: str) -> CarrierDirectory:
    # One directory per API key, shared by every request in this process
    settings = get_settings()
    return CarrierDirectory(
        provider=get_carrier("shipengine"),
        override_ids=settings.carrier_id_override(),
        ttl_seconds=settings.CARRIER_CACHE_TTL_SECONDS,
    )


def get_carrier_directory() -> CarrierDirectory:
    return _carrier_directory_for(get_settings().shipengine_api_key())


def get_rate_service(
    provider: BaseCarrier = Depends(get_shipping_provider),
    carrier_directory: CarrierDirectory = Depends(get_carrier_directory),
) -> RateShoppingService:
    return RateShoppingService(
        provider=provider,
        carrier_directory=carrier_directory,
        cap=get_settings().RATE_RESULT_CAP,
    )


def get_quote_service() -> QuoteService:
    return QuoteService(ttl_minutes=get_settings().QUOTE_TTL_MINUTES)


def get_label_service(provider: BaseCarrier = Depends(get_shipping_provider)) -> LabelService:
    return LabelService(provider=provider)
