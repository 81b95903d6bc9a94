"""
Carrier-rate provider factory to make provider selection easy
"""
from reefcultures.core.config import get_settings
from reefcultures.services.shipping.base import BaseCarrier
from reefcultures.services.shipping.carriers.shipengine import ShipEngineClient


def get_carrier(carrier_code: str = "shipengine") -> BaseCarrier:
    """
    Factory function to get the appropriate provider by code

    Args:
        carrier_code: The code of the provider to use

    Returns:
        An instance of the appropriate provider class

    Raises:
        ValueError: If the provider code is not supported
        ShippingConfigurationError: If the provider's API key is missing
    """
    carriers = {
        "shipengine": ShipEngineClient,
    }

    if carrier_code not in carriers:
        raise ValueError(f"Carrier '{carrier_code}' is not supported")

    settings = get_settings()
    return carriers[carrier_code](api_key=settings.shipengine_api_key())
