"""
Normalize raw provider rates into a short, ranked list.

Pipeline: map provider objects to ShippingRate (dropping unusable ones),
keep allowed services, keep the cheapest rate per (carrier, speed bucket),
order overnight -> 2day -> 3day then by price, and cap the list.
"""

import logging
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Tuple

from reefcultures.core.enums import SpeedBucket
from reefcultures.schemas.shipping import ShippingRate
from reefcultures.services.shipping.classification import is_allowed_service, speed_bucket

logger = logging.getLogger(__name__)

DEFAULT_RATE_CAP = 8


def to_cents(amount: Any) -> Optional[int]:
    """
    Convert a dollar amount to integer cents.

    Returns None for anything that is not a finite, non-negative number.
    """
    if amount is None or isinstance(amount, bool):
        return None
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite() or value < 0:
        return None
    try:
        return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return None


def _first(*values):
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _as_days(value: Any) -> Optional[int]:
    # Partial days round up; delivery_days is an upper bound
    if value is None or isinstance(value, bool):
        return None
    try:
        days = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(days) or days < 0:
        return None
    return math.ceil(days)


def rate_from_provider(raw: Dict[str, Any]) -> Optional[ShippingRate]:
    """Map one ShipEngine rate object to a ShippingRate, or None if it is unusable."""
    if not isinstance(raw, dict):
        return None

    shipping_amount = raw.get("shipping_amount") if isinstance(raw.get("shipping_amount"), dict) else {}

    rate_id = _first(raw.get("rate_id"), raw.get("id"))
    amount_cents = to_cents(_first(
        shipping_amount.get("amount"),
        shipping_amount.get("value"),
        raw.get("amount"),
        raw.get("rate"),
    ))
    if not rate_id or amount_cents is None:
        return None

    service_code = _first(raw.get("service_code")) or ""
    carrier_id = _first(raw.get("carrier_id"))
    estimated_delivery_date = _first(raw.get("estimated_delivery_date"))
    return ShippingRate(
        rate_id=str(rate_id),
        carrier_id=str(carrier_id) if carrier_id is not None else None,
        carrier_name=str(_first(raw.get("carrier_friendly_name"), raw.get("carrier")) or ""),
        service_type=str(_first(raw.get("service_type"), raw.get("service"), service_code) or ""),
        service_code=str(service_code),
        amount_cents=amount_cents,
        currency=str(_first(shipping_amount.get("currency"), raw.get("currency")) or "usd").lower(),
        delivery_days=_as_days(_first(raw.get("delivery_days"), raw.get("estimated_delivery_days"))),
        estimated_delivery_date=str(estimated_delivery_date) if estimated_delivery_date is not None else None,
    )


def map_provider_rates(raw_rates: Iterable[Dict[str, Any]]) -> List[ShippingRate]:
    """Map a raw provider list, dropping rates with no id or an invalid amount."""
    rates = []
    dropped = 0
    for raw in raw_rates:
        rate = rate_from_provider(raw)
        if rate is None:
            dropped += 1
            continue
        rates.append(rate)
    if dropped:
        logger.debug(f"Dropped {dropped} provider rates with no id or invalid amount")
    return rates


def dedupe_and_rank(rates: Iterable[ShippingRate], cap: int = DEFAULT_RATE_CAP) -> List[ShippingRate]:
    """
    Keep the cheapest rate per (carrier, speed bucket) and order the survivors.

    Collapses near-duplicates like "UPS 2nd Day Air" and "UPS 2nd Day Air A.M.".
    On equal price the rate seen first is kept, so output is deterministic.
    """
    best: Dict[Tuple[str, SpeedBucket], ShippingRate] = {}
    for rate in rates:
        key = (rate.carrier_name.lower(), speed_bucket(rate))
        existing = best.get(key)
        if existing is None or rate.amount_cents < existing.amount_cents:
            best[key] = rate

    ranked = sorted(
        best.items(),
        key=lambda item: (item[0][1].rank, item[1].amount_cents),
    )
    return [rate for _, rate in ranked][:cap]


def normalize_rates(
    raw_rates: Iterable[Dict[str, Any]],
    cap: int = DEFAULT_RATE_CAP,
    apply_allow_list: bool = True,
) -> List[ShippingRate]:
    """Run the full map -> allow-list -> dedupe/rank pipeline over raw provider rates."""
    rates = map_provider_rates(raw_rates)
    if apply_allow_list:
        rates = [rate for rate in rates if is_allowed_service(rate)]
    return dedupe_and_rank(rates, cap=cap)
