"""
Base Carrier Interface

This module defines the abstract base class that carrier-rate provider
implementations must implement.

Each provider implementation provides standard methods for:
- Listing the carrier accounts available for rate shopping
- Getting shipping rates for a shipment
- Estimating rates from postal codes only
- Purchasing labels for a chosen rate

ShipEngine is the only provider today. Keeping the interface lets the rate
service and the carrier directory be tested against a fake provider.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List


class BaseCarrier(ABC):
    """Base class for all carrier-rate providers"""

    carrier_name = "Generic Provider"
    carrier_code = "generic"

    @abstractmethod
    async def list_carriers(self) -> List[Dict[str, Any]]:
        """List carrier accounts connected to the provider

        Returns:
            Carrier account objects as returned by the provider
        """
        pass

    @abstractmethod
    async def get_rates(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Get shipping rates for a full shipment

        Args:
            payload: Rate request (carrier ids, ship from/to, packages)

        Returns:
            Raw rate objects
        """
        pass

    @abstractmethod
    async def estimate_rates(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Estimate rates from origin/destination postal data only

        Args:
            payload: Estimate request

        Returns:
            Raw rate objects
        """
        pass

    @abstractmethod
    async def create_label(self, rate_id: str) -> Dict[str, Any]:
        """Purchase a label for a previously quoted rate

        Args:
            rate_id: Provider rate identifier

        Returns:
            Label information (tracking number, download links, cost)
        """
        pass
