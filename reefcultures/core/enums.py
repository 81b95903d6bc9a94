"""
Shared enums and constants used across the application.
"""

from enum import Enum


class SpeedBucket(str, Enum):
    """Coarse delivery-time classification of a rate. Derived, never stored."""
    OVERNIGHT = "overnight"
    TWO_DAY = "2day"
    THREE_DAY = "3day"

    @property
    def rank(self) -> int:
        # overnight sorts first, 3day last
        return _BUCKET_RANK[self]


_BUCKET_RANK = {
    SpeedBucket.OVERNIGHT: 1,
    SpeedBucket.TWO_DAY: 2,
    SpeedBucket.THREE_DAY: 3,
}


class CarrierFamily(str, Enum):
    UPS = "ups"
    USPS = "usps"
    OTHER = "other"


class ShipmentStatus(str, Enum):
    LABEL_PURCHASED = "label_purchased"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    VOIDED = "voided"


class PackagePreset(str, Enum):
    """Box presets used when quoting, sized for insulation, cold pack and padding."""
    BOX_16OZ = "BOX_16OZ"
    BOX_32OZ = "BOX_32OZ"
    BOX_64OZ = "BOX_64OZ"
    BOX_1GAL = "BOX_1GAL"
