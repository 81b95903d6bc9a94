from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from reefcultures.core.exceptions import QuoteExpiredError, QuoteNotFoundError, RateNotInQuoteError
from reefcultures.models.shipping import ShippingQuote
from reefcultures.schemas.shipping import CartItem, ShippingRate
from reefcultures.services.shipping.quote_service import QuoteService

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def quote_service():
    return QuoteService(ttl_minutes=30)


@pytest.fixture
def rates():
    return [
        ShippingRate(rate_id="se-r2", carrier_name="UPS", service_code="ups_next_day_air_saver", amount_cents=4000),
        ShippingRate(rate_id="se-r3", carrier_name="USPS", service_code="usps_priority_mail", amount_cents=1200),
    ]


def stored_quote(rates, expires_at):
    return ShippingQuote(
        quote_key="quote-key-123",
        items=[{"sku": "PHYTO-16OZ", "qty": 1}],
        ship_to={"postal_code": "33602"},
        rates=[rate.model_dump() for rate in rates],
        expires_at=expires_at,
    )


def returning(session, quote):
    result = MagicMock()
    result.scalar_one_or_none.return_value = quote
    session.execute.return_value = result


@pytest.mark.asyncio
async def test_create_quote_persists_with_expiry(quote_service, mock_db_session, destination, rates):
    items = [CartItem(sku="PHYTO-16OZ", qty=2)]

    quote = await quote_service.create_quote(mock_db_session, items, destination, rates, now=NOW)

    mock_db_session.add.assert_called_once_with(quote)
    mock_db_session.commit.assert_awaited_once()
    assert len(quote.quote_key) == 36
    assert quote.expires_at == NOW + timedelta(minutes=30)
    assert quote.items[0]["sku"] == "PHYTO-16OZ"
    assert [r["rate_id"] for r in quote.rates] == ["se-r2", "se-r3"]
    assert quote.ship_to["postal_code"] == "33602"


@pytest.mark.asyncio
async def test_quote_keys_are_unique(quote_service, mock_db_session, destination, rates):
    items = [CartItem(sku="PHYTO-16OZ", qty=1)]
    first = await quote_service.create_quote(mock_db_session, items, destination, rates)
    second = await quote_service.create_quote(mock_db_session, items, destination, rates)
    assert first.quote_key != second.quote_key


@pytest.mark.asyncio
async def test_missing_quote_raises_not_found(quote_service, mock_db_session):
    returning(mock_db_session, None)
    with pytest.raises(QuoteNotFoundError):
        await quote_service.get_active_quote(mock_db_session, "quote-key-123", now=NOW)


@pytest.mark.asyncio
async def test_expired_quote_raises(quote_service, mock_db_session, rates):
    returning(mock_db_session, stored_quote(rates, NOW - timedelta(seconds=1)))
    with pytest.raises(QuoteExpiredError) as exc_info:
        await quote_service.get_active_quote(mock_db_session, "quote-key-123", now=NOW)
    assert exc_info.value.status_code == 410


@pytest.mark.asyncio
async def test_quote_expires_exactly_at_expiry(quote_service, mock_db_session, rates):
    returning(mock_db_session, stored_quote(rates, NOW))
    with pytest.raises(QuoteExpiredError):
        await quote_service.get_active_quote(mock_db_session, "quote-key-123", now=NOW)


@pytest.mark.asyncio
async def test_naive_expiry_is_treated_as_utc(quote_service, mock_db_session, rates):
    quote = stored_quote(rates, (NOW + timedelta(minutes=5)).replace(tzinfo=None))
    returning(mock_db_session, quote)
    assert await quote_service.get_active_quote(mock_db_session, "quote-key-123", now=NOW) is quote


@pytest.mark.asyncio
async def test_select_rate_records_choice(quote_service, mock_db_session, rates):
    quote = stored_quote(rates, NOW + timedelta(minutes=10))
    returning(mock_db_session, quote)

    result_quote, selected = await quote_service.select_rate(mock_db_session, "quote-key-123", "se-r3", now=NOW)

    assert result_quote is quote
    assert selected.rate_id == "se-r3"
    assert selected.amount_cents == 1200
    assert quote.selected_rate_id == "se-r3"
    mock_db_session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_select_unknown_rate_raises(quote_service, mock_db_session, rates):
    quote = stored_quote(rates, NOW + timedelta(minutes=10))
    returning(mock_db_session, quote)

    with pytest.raises(RateNotInQuoteError):
        await quote_service.select_rate(mock_db_session, "quote-key-123", "se-r9", now=NOW)

    assert quote.selected_rate_id is None
    mock_db_session.commit.assert_not_awaited()
