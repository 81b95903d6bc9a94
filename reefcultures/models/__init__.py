from .shipping import ShippingQuote, Shipment
