"""
Schema exports for the application.
"""

# Base schemas
from .base import BaseSchema

# Shipping schemas
from .shipping import (
    Address,
    PackageDimensions,
    ShippingRate,
    RateQuoteResult,
    CartItem,
    PackedPackage,
    QuoteRequest,
    QuoteResponse,
    SelectRateRequest,
    SelectRateResponse,
    RateLookupRequest,
    LabelRequest,
    LabelResponse
)
