"""
Shipping-related database models.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum, JSON, text

from reefcultures.database import Base
from reefcultures.core.enums import ShipmentStatus

UTC_NOW = text("timezone('utc', now())")


class ShippingQuote(Base):
    """
    A set of rates quoted to a customer, redeemable at checkout until it expires.
    """
    __tablename__ = "shipping_quotes"

    id = Column(Integer, primary_key=True, index=True)
    quote_key = Column(String, unique=True, index=True, nullable=False)

    items = Column(JSON, nullable=False)    # cart items as quoted
    ship_to = Column(JSON, nullable=False)  # normalized destination address
    rates = Column(JSON, nullable=False)    # ranked ShippingRate dicts

    selected_rate_id = Column(String, nullable=True)

    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=UTC_NOW, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=UTC_NOW,
        onupdate=UTC_NOW,
        nullable=False
    )

    def __repr__(self):
        return f"<ShippingQuote(quote_key='{self.quote_key}', expires_at='{self.expires_at}')>"


class Shipment(Base):
    """A purchased shipping label."""
    __tablename__ = "shipments"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String, nullable=True, index=True)
    rate_id = Column(String, nullable=False, index=True)

    status = Column(Enum(ShipmentStatus), default=ShipmentStatus.LABEL_PURCHASED, index=True)
    carrier = Column(String, index=True)   # ShipEngine carrier_id, e.g. "se-123456"
    service = Column(String)               # service_code, or service_type when absent
    tracking_number = Column(String, index=True)
    tracking_url = Column(String, nullable=True)
    label_cost_cents = Column(Integer, default=0, nullable=False)

    # Label download URLs are short-lived and are returned to the operator, not stored

    created_at = Column(DateTime(timezone=True), server_default=UTC_NOW, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=UTC_NOW,
        onupdate=UTC_NOW,
        nullable=False
    )

    def __repr__(self):
        return f"<Shipment(tracking_number='{self.tracking_number}', status='{self.status}')>"
