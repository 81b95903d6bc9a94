"""
Schemas for rate shopping, quotes and labels.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from reefcultures.schemas.base import BaseSchema


class Address(BaseSchema):
    """A ship-from or ship-to address in ShipEngine field naming."""
    name: Optional[str] = None
    company_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address_line1: str = ""
    address_line2: Optional[str] = None
    city_locality: str = ""
    state_province: str = ""
    postal_code: str = ""
    country_code: str = "US"

    @field_validator('address_line1', 'city_locality', 'state_province', 'postal_code', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        # Missing fields are reported by validate_address, not by pydantic
        return "" if v is None else v

    @field_validator('country_code', mode='before')
    @classmethod
    def default_country(cls, v):
        return v or "US"


class PackageDimensions(BaseSchema):
    """
    Package weight in ounces and dimensions in inches.

    Values are range-checked by validate_package so that a bad package
    surfaces as InvalidPackage rather than a schema error.
    """
    weight_oz: float
    length_in: float
    width_in: float
    height_in: float


class ShippingRate(BaseSchema):
    """A priced shipping offer. amount_cents is the monetary unit of truth."""
    rate_id: str
    carrier_id: Optional[str] = None
    carrier_name: str = ""
    service_type: str = ""
    service_code: str = ""
    amount_cents: int = Field(ge=0)
    currency: str = "usd"
    delivery_days: Optional[int] = None
    estimated_delivery_date: Optional[str] = None


class RateQuoteResult(BaseSchema):
    rates: List[ShippingRate]
    capped_at: int


class CartItem(BaseSchema):
    sku: str = Field(min_length=1)
    name: Optional[str] = None
    qty: int = Field(ge=1, le=20)
    unit_amount: Optional[int] = Field(default=None, ge=0)  # cents


class PackedPackage(BaseSchema):
    preset: str
    weight_oz: float
    length_in: float
    width_in: float
    height_in: float

    def dimensions(self) -> PackageDimensions:
        return PackageDimensions(
            weight_oz=self.weight_oz,
            length_in=self.length_in,
            width_in=self.width_in,
            height_in=self.height_in,
        )


# --- Request / response bodies ---

class QuoteRequest(BaseSchema):
    items: List[CartItem] = Field(min_length=1)
    address: Address


class QuoteResponse(BaseSchema):
    quote_key: str
    expires_at: datetime
    rates: List[ShippingRate]
    capped_at: int


class SelectRateRequest(BaseSchema):
    quote_key: str = Field(min_length=10)
    selected_rate_id: str = Field(min_length=3)


class SelectRateResponse(BaseSchema):
    quote_key: str
    expires_at: datetime
    selected_rate: ShippingRate


class RateLookupRequest(BaseSchema):
    to: Address
    pkg: PackageDimensions
    all_services: bool = False


class LabelRequest(BaseSchema):
    rate_id: str = Field(min_length=1)
    order_id: Optional[str] = None


class LabelResponse(BaseSchema):
    ok: bool = True
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None
    label_pdf: Optional[str] = None
    label_png: Optional[str] = None
    label_cost_cents: int = 0
    warning: Optional[str] = None
