class MockData:
    """Mock ShipEngine payloads for testing"""
    @staticmethod
    def raw_rate(rate_id, carrier, service_code, amount, service_type=None, delivery_days=None, **extra):
        rate = {
            'rate_id': rate_id,
            'carrier_id': f"se-{carrier.lower()}",
            'carrier_friendly_name': carrier,
            'service_type': service_type if service_type is not None else service_code.replace('_', ' ').title(),
            'service_code': service_code,
            'shipping_amount': {'currency': 'usd', 'amount': amount},
            'delivery_days': delivery_days,
            'estimated_delivery_date': None,
        }
        rate.update(extra)
        return rate

    @staticmethod
    def get_mixed_rates():
        """UPS overnight pair, USPS priority and UPS ground, no delivery_days."""
        return [
            MockData.raw_rate('se-r1', 'UPS', 'ups_next_day_air', 45.00, service_type='UPS Next Day Air®'),
            MockData.raw_rate('se-r2', 'UPS', 'ups_next_day_air_saver', 40.00, service_type='UPS Next Day Air Saver®'),
            MockData.raw_rate('se-r3', 'USPS', 'usps_priority_mail', 12.00, service_type='USPS Priority Mail'),
            MockData.raw_rate('se-r4', 'UPS', 'ups_ground', 8.00, service_type='UPS® Ground'),
        ]

    @staticmethod
    def get_carriers():
        return [
            {'carrier_id': 'se-100', 'friendly_name': 'UPS', 'is_enabled': True},
            {'carrier_id': 'se-200', 'friendly_name': 'USPS'},
            {'carrier_id': 'se-300', 'friendly_name': 'FedEx', 'is_enabled': False},
            {'friendly_name': 'Broken'},
        ]
