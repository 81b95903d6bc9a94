"""
Rate shopping: validate the shipment, ask ShipEngine for rates and reduce
them to the short list shown to customers.
"""

import logging
import math
import re
from typing import Any, Dict, List

from reefcultures.core.exceptions import InvalidAddress, InvalidPackage, NoRatesAvailable
from reefcultures.schemas.shipping import Address, PackageDimensions, RateQuoteResult, ShippingRate
from reefcultures.services.shipping.base import BaseCarrier
from reefcultures.services.shipping.carrier_directory import CarrierDirectory
from reefcultures.services.shipping.reducer import DEFAULT_RATE_CAP, normalize_rates

logger = logging.getLogger(__name__)

NO_FAST_SERVICES_MESSAGE = (
    "No fast UPS/USPS services (Overnight / 2-Day / 3-Day) were returned for this address."
)


def normalize_phone(value) -> str:
    """Last ten digits of a phone number; ShipEngine rejects blanks, so pad with zeros."""
    digits = re.sub(r"\D", "", value or "")
    if len(digits) >= 10:
        return digits[-10:]
    return "0000000000"


def validate_address(address: Address, role: str = "destination") -> Address:
    """
    Check required address fields and return a normalized copy.

    Raises:
        InvalidAddress: On a missing line 1, city, state or postal code,
            or a US state that is not a two-letter code
    """
    missing = [
        field for field in ("address_line1", "city_locality", "state_province", "postal_code")
        if not str(getattr(address, field) or "").strip()
    ]
    if missing:
        raise InvalidAddress(f"Missing or incomplete {role} address: {', '.join(missing)}")

    country = (address.country_code or "US").strip().upper()
    state = address.state_province.strip().upper()
    if country == "US" and not re.fullmatch(r"[A-Z]{2}", state):
        raise InvalidAddress("State must be a 2-letter code for US (example: MO).")

    return address.model_copy(update={
        "address_line1": address.address_line1.strip(),
        "city_locality": address.city_locality.strip(),
        "state_province": state,
        "postal_code": address.postal_code.strip(),
        "country_code": country,
        "phone": normalize_phone(address.phone),
    })


def validate_package(package: PackageDimensions) -> PackageDimensions:
    """
    Raises:
        InvalidPackage: If weight or any dimension is not a positive finite number
    """
    if not (math.isfinite(package.weight_oz) and package.weight_oz > 0):
        raise InvalidPackage("Invalid weight_oz")
    dims = (package.length_in, package.width_in, package.height_in)
    if not all(math.isfinite(value) and value > 0 for value in dims):
        raise InvalidPackage("Invalid package dimensions")
    return package


def _shipengine_address(address: Address) -> Dict[str, Any]:
    payload = {
        "name": address.name or "Customer",
        "phone": address.phone,
        "address_line1": address.address_line1,
        "city_locality": address.city_locality,
        "state_province": address.state_province,
        "postal_code": address.postal_code,
        "country_code": address.country_code,
    }
    if address.company_name:
        payload["company_name"] = address.company_name
    if address.address_line2:
        payload["address_line2"] = address.address_line2
    return payload


def build_rate_request(
    carrier_ids: List[str],
    origin: Address,
    destination: Address,
    package: PackageDimensions,
) -> Dict[str, Any]:
    """ShipEngine /rates payload for a single-package shipment."""
    return {
        "rate_options": {"carrier_ids": carrier_ids},
        "shipment": {
            "ship_from": _shipengine_address(origin),
            "ship_to": _shipengine_address(destination),
            "packages": [
                {
                    "weight": {"value": package.weight_oz, "unit": "ounce"},
                    "dimensions": {
                        "unit": "inch",
                        "length": package.length_in,
                        "width": package.width_in,
                        "height": package.height_in,
                    },
                }
            ],
        },
    }


def build_estimate_request(
    carrier_ids: List[str],
    origin: Address,
    destination: Address,
    package: PackageDimensions,
) -> Dict[str, Any]:
    """ShipEngine /rates/estimate payload (postal data only, no street lines)."""
    return {
        "carrier_ids": carrier_ids,
        "from_country_code": origin.country_code,
        "from_postal_code": origin.postal_code,
        "from_city_locality": origin.city_locality,
        "from_state_province": origin.state_province,
        "to_country_code": destination.country_code,
        "to_postal_code": destination.postal_code,
        "to_city_locality": destination.city_locality,
        "to_state_province": destination.state_province,
        "weight": {"value": package.weight_oz, "unit": "ounce"},
        "dimensions": {
            "unit": "inch",
            "length": package.length_in,
            "width": package.width_in,
            "height": package.height_in,
        },
    }


class RateShoppingService:
    """Quotes fast shipping options for a shipment through a carrier-rate provider."""

    def __init__(self, provider: BaseCarrier, carrier_directory: CarrierDirectory, cap: int = DEFAULT_RATE_CAP):
        self.provider = provider
        self.carrier_directory = carrier_directory
        self.cap = cap

    async def fetch_rates(
        self,
        origin: Address,
        destination: Address,
        package: PackageDimensions,
    ) -> List[Dict[str, Any]]:
        """
        Validate the shipment and issue a single rate-shopping request.

        Validation happens before any network call.

        Returns:
            Raw rate objects exactly as the provider returned them

        Raises:
            InvalidAddress, InvalidPackage: On bad input
            NoCarriersConfigured: If no carrier accounts are available
            RateProviderError: On a non-success provider response
        """
        origin = validate_address(origin, role="origin")
        destination = validate_address(destination, role="destination")
        package = validate_package(package)

        carrier_ids = await self.carrier_directory.get_carrier_ids()
        payload = build_rate_request(carrier_ids, origin, destination, package)
        raw_rates = await self.provider.get_rates(payload)
        logger.info(
            f"Fetched {len(raw_rates)} raw rates to {destination.postal_code} "
            f"from {len(carrier_ids)} carriers"
        )
        return raw_rates

    async def quote(
        self,
        origin: Address,
        destination: Address,
        package: PackageDimensions,
    ) -> RateQuoteResult:
        """
        Fetch, filter, dedupe and rank rates for a shipment.

        Raises:
            NoRatesAvailable: If no allowed service survives filtering
        """
        raw_rates = await self.fetch_rates(origin, destination, package)
        rates = normalize_rates(raw_rates, cap=self.cap)
        if not rates:
            logger.warning(f"No fast services for destination {destination.postal_code}")
            raise NoRatesAvailable(NO_FAST_SERVICES_MESSAGE)
        return RateQuoteResult(rates=rates, capped_at=self.cap)

    async def estimate(
        self,
        origin: Address,
        destination: Address,
        package: PackageDimensions,
        all_services: bool = False,
    ) -> List[ShippingRate]:
        """
        Operator rate lookup through the estimate endpoint.

        With all_services the allow-list is skipped so slow services can be
        compared too. An empty list is a valid answer here.
        """
        origin = validate_address(origin, role="origin")
        destination = validate_address(destination, role="destination")
        package = validate_package(package)

        carrier_ids = await self.carrier_directory.get_carrier_ids()
        payload = build_estimate_request(carrier_ids, origin, destination, package)
        raw_rates = await self.provider.estimate_rates(payload)
        return normalize_rates(raw_rates, cap=self.cap, apply_allow_list=not all_services)
