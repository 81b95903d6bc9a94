"""
Service allow-list and speed-bucket classification.

Live cultures cannot sit in transit, so only overnight, 2-day and 3-day
services are offered. Rules are plain lookup tables:

- ALLOWED_SERVICE_CODES: exact ShipEngine service codes that are always allowed.
- CARRIER_FAMILY_MARKERS: how free-text carrier/service strings map to a carrier
  family. Checked in order, so UPS wins when text mentions both.
- CARRIER_SERVICE_KEYWORDS: per family, keywords that make a service allowed
  when its code is not in the exact list.
- BUCKET_KEYWORDS: keywords that place a rate in a speed bucket when the
  provider gave no delivery_days.
"""

from typing import Dict, Optional, Tuple

from reefcultures.core.enums import CarrierFamily, SpeedBucket
from reefcultures.schemas.shipping import ShippingRate

ALLOWED_SERVICE_CODES = frozenset({
    # UPS
    "ups_next_day_air",
    "ups_next_day_air_saver",
    "ups_next_day_air_early_am",
    "ups_2nd_day_air",
    "ups_2nd_day_air_am",
    "ups_3_day_select",
    # USPS
    "usps_priority_mail_express",
    "usps_priority_mail_express_hfp",
    "usps_priority_mail",
})

# Order matters: the first family whose marker appears wins.
# A carrier name containing both "ups" and "usps" resolves to UPS.
CARRIER_FAMILY_MARKERS: Tuple[Tuple[CarrierFamily, str], ...] = (
    (CarrierFamily.UPS, "ups"),
    (CarrierFamily.USPS, "usps"),
)

CARRIER_SERVICE_KEYWORDS: Dict[CarrierFamily, Tuple[str, ...]] = {
    CarrierFamily.UPS: (
        "next day", "next-day", "overnight",
        "2nd day", "second day", "2 day",
        "3 day", "3-day",
    ),
    # Ground Advantage, Media Mail etc. never match
    CarrierFamily.USPS: (
        "priority mail express",
        "priority mail",
    ),
    CarrierFamily.OTHER: (),
}

BUCKET_KEYWORDS: Tuple[Tuple[SpeedBucket, Tuple[str, ...]], ...] = (
    (SpeedBucket.OVERNIGHT, ("next_day", "next day", "overnight")),
    (SpeedBucket.TWO_DAY, ("2nd", "2 day", "second day")),
)


def _clean(value: Optional[str]) -> str:
    return str(value or "").lower().strip()


def classify_carrier(text: str) -> CarrierFamily:
    """Map free text (carrier name, service type, service code) to a carrier family."""
    text = _clean(text)
    for family, marker in CARRIER_FAMILY_MARKERS:
        if marker in text:
            return family
    return CarrierFamily.OTHER


def is_allowed_service(rate: ShippingRate) -> bool:
    """True if the rate is one of the fast services offered to customers."""
    code = _clean(rate.service_code)
    if code and code in ALLOWED_SERVICE_CODES:
        return True

    text = f"{_clean(rate.carrier_name)} {_clean(rate.service_type)} {code}"
    family = classify_carrier(text)
    return any(keyword in text for keyword in CARRIER_SERVICE_KEYWORDS[family])


def speed_bucket(rate: ShippingRate) -> SpeedBucket:
    """
    Classify a rate by delivery speed.

    delivery_days is an inclusive upper bound: <= 1 is overnight, <= 2 is 2day,
    anything slower is 3day. Without delivery_days the service code and type
    are searched for keywords, defaulting to 3day.
    """
    if rate.delivery_days is not None:
        if rate.delivery_days <= 1:
            return SpeedBucket.OVERNIGHT
        if rate.delivery_days <= 2:
            return SpeedBucket.TWO_DAY
        return SpeedBucket.THREE_DAY

    text = f"{_clean(rate.service_code)} {_clean(rate.service_type)}"
    for bucket, keywords in BUCKET_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return bucket
    return SpeedBucket.THREE_DAY
