import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from reefcultures.dependencies import get_db, get_label_service, get_quote_service, get_rate_service
from reefcultures.main import app
from reefcultures.models.shipping import ShippingQuote
from reefcultures.services.shipping.carrier_directory import CarrierDirectory
from reefcultures.services.shipping.label_service import LabelService
from reefcultures.services.shipping.quote_service import QuoteService
from reefcultures.services.shipping.rate_service import RateShoppingService
from tests.mocks import MockData
from tests.mocks.mock_provider import MockProvider

AUTH = ("admin", "test-password")

QUOTE_BODY = {
    "items": [{"sku": "PHYTO-16OZ", "name": "Phyto 16oz", "qty": 1}],
    "address": {
        "name": "Jane Reefer",
        "phone": "(555) 123-4567",
        "address_line1": "1 Ocean Ave",
        "city_locality": "Tampa",
        "state_province": "fl",
        "postal_code": "33602",
        "country_code": "US",
    },
}


# --- Test Client Setup ---

@pytest.fixture
def provider():
    return MockProvider(
        carriers=MockData.get_carriers(),
        rates=MockData.get_mixed_rates(),
        label={"tracking_number": "9400TEST", "label_download": {"pdf": "https://example.com/l.pdf"}},
    )


@pytest.fixture
def client(provider, mock_db_session):
    async def override_get_db():
        yield mock_db_session

    rate_service = RateShoppingService(provider=provider, carrier_directory=CarrierDirectory(provider=provider), cap=8)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_service] = lambda: rate_service
    app.dependency_overrides[get_quote_service] = lambda: QuoteService(ttl_minutes=30)
    app.dependency_overrides[get_label_service] = lambda: LabelService(provider=provider)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides = {}


"""
1. Storefront quote
"""

def test_quote_returns_ranked_rates_and_key(client, provider, mock_db_session):
    response = client.post("/shipping/quote", json=QUOTE_BODY)

    assert response.status_code == 200
    data = response.json()
    assert [r["rate_id"] for r in data["rates"]] == ["se-r2", "se-r3"]
    assert data["rates"][0]["amount_cents"] == 4000
    assert data["capped_at"] == 8
    assert data["quote_key"]
    mock_db_session.add.assert_called_once()

    payload = provider.calls[-1][1]
    assert payload["shipment"]["ship_from"]["postal_code"] == "63368"
    assert payload["shipment"]["ship_from"]["state_province"] == "MO"
    assert payload["shipment"]["packages"][0]["weight"] == {"value": 40, "unit": "ounce"}


def test_quote_missing_postal_code_is_400(client, provider):
    body = {**QUOTE_BODY, "address": {**QUOTE_BODY["address"], "postal_code": ""}}

    response = client.post("/shipping/quote", json=body)

    assert response.status_code == 400
    assert "postal_code" in response.json()["error"]
    assert provider.calls == []


def test_quote_without_fast_services_is_400(client, provider):
    provider.rates = [MockData.raw_rate("se-g", "UPS", "ups_ground", 8.00, service_type="UPS® Ground")]

    response = client.post("/shipping/quote", json=QUOTE_BODY)

    assert response.status_code == 400
    assert "No fast UPS/USPS services" in response.json()["error"]


def test_quote_provider_failure_is_502(client, provider, mock_db_session):
    app.dependency_overrides[get_rate_service] = lambda: RateShoppingService(
        provider=provider,
        carrier_directory=CarrierDirectory(provider=provider, override_ids=["se-100"]),
    )
    provider.should_fail = True

    response = client.post("/shipping/quote", json=QUOTE_BODY)

    assert response.status_code == 502
    assert "error" in response.json()
    mock_db_session.add.assert_not_called()


def test_quote_without_carriers_is_500(client, provider):
    provider.carriers = []

    response = client.post("/shipping/quote", json=QUOTE_BODY)

    assert response.status_code == 500
    assert "SHIPENGINE_CARRIER_IDS" in response.json()["error"]


def test_quote_rejects_empty_cart(client):
    response = client.post("/shipping/quote", json={**QUOTE_BODY, "items": []})
    assert response.status_code == 422


"""
2. Quote selection
"""

def test_select_unknown_quote_is_404(client, mock_db_session):
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    mock_db_session.execute.return_value = result

    response = client.post(
        "/shipping/quote/select",
        json={"quote_key": "0000-0000-0000", "selected_rate_id": "se-r2"},
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Shipping quote not found"}


def test_select_rate_on_active_quote(client, mock_db_session):
    quote = ShippingQuote(
        quote_key="1111-2222-3333",
        items=[],
        ship_to={},
        rates=[{"rate_id": "se-r3", "carrier_name": "USPS", "amount_cents": 1200}],
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=10),
    )
    result = MagicMock()
    result.scalar_one_or_none.return_value = quote
    mock_db_session.execute.return_value = result

    response = client.post(
        "/shipping/quote/select",
        json={"quote_key": "1111-2222-3333", "selected_rate_id": "se-r3"},
    )

    assert response.status_code == 200
    assert response.json()["selected_rate"]["amount_cents"] == 1200


"""
3. Operator routes
"""

def test_rate_lookup_requires_auth(client):
    response = client.post("/shipping/rates", json={"to": QUOTE_BODY["address"], "pkg": {
        "weight_oz": 40, "length_in": 10, "width_in": 8, "height_in": 6,
    }})
    assert response.status_code == 401


def test_rate_lookup_with_auth(client, provider):
    response = client.post("/shipping/rates", auth=AUTH, json={
        "to": QUOTE_BODY["address"],
        "pkg": {"weight_oz": 40, "length_in": 10, "width_in": 8, "height_in": 6},
        "all_services": True,
    })

    assert response.status_code == 200
    data = response.json()
    assert [r["rate_id"] for r in data["rates"]] == ["se-r2", "se-r4", "se-r3"]
    assert data["capped_at"] == 8
    assert provider.call_names()[-1] == "estimate_rates"


def test_rate_lookup_bad_package_is_400(client):
    response = client.post("/shipping/rates", auth=AUTH, json={
        "to": QUOTE_BODY["address"],
        "pkg": {"weight_oz": 0, "length_in": 10, "width_in": 8, "height_in": 6},
    })
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid weight_oz"}


def test_label_purchase(client, provider):
    response = client.post("/shipping/labels", auth=AUTH, json={"rate_id": " se-r2 ", "order_id": "order-1"})

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["tracking_number"] == "9400TEST"
    assert data["label_pdf"] == "https://example.com/l.pdf"
    assert provider.calls == [("create_label", "se-r2")]


def test_label_purchase_requires_auth(client, provider):
    response = client.post("/shipping/labels", auth=("admin", "wrong"), json={"rate_id": "se-r2"})
    assert response.status_code == 401
    assert provider.calls == []


"""
4. Health
"""

def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "ReefCultures Shipping"}
