from typing import Optional


class ShippingError(Exception):
    """Base exception for all shipping errors. Carries a user-facing message and an HTTP status."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

class InvalidAddress(ShippingError):
    """Raised when an origin or destination address is missing required fields."""
    status_code = 400

class InvalidPackage(ShippingError):
    """Raised when package weight or dimensions are not positive finite numbers."""
    status_code = 400

class ShippingConfigurationError(ShippingError):
    """Raised when required shipping configuration (API key, origin address) is missing."""
    status_code = 500

class NoCarriersConfigured(ShippingConfigurationError):
    """Raised when no enabled carrier accounts can be resolved."""
    pass

class RateProviderError(ShippingError):
    """Raised when the carrier-rate provider returns a non-success response."""
    status_code = 502

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status

class NoRatesAvailable(ShippingError):
    """Raised when filtering leaves no fast services for the destination and package."""
    status_code = 400

class QuoteNotFoundError(ShippingError):
    """Raised when a quote key does not exist."""
    status_code = 404

class QuoteExpiredError(ShippingError):
    """Raised when a quote exists but is past its expiry."""
    status_code = 410

class RateNotInQuoteError(ShippingError):
    """Raised when a selected rate id is not one of the quoted rates."""
    status_code = 400
