"""
Core module exports.
"""
from .enums import (
    SpeedBucket,
    CarrierFamily,
    ShipmentStatus,
    PackagePreset
)

from .exceptions import (
    ShippingError,
    InvalidAddress,
    InvalidPackage,
    ShippingConfigurationError,
    NoCarriersConfigured,
    RateProviderError,
    NoRatesAvailable,
    QuoteNotFoundError,
    QuoteExpiredError,
    RateNotInQuoteError
)
