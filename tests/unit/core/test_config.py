import pytest
from pydantic import ValidationError

from reefcultures.core.config import Settings, get_settings
from reefcultures.core.exceptions import ShippingConfigurationError


def test_settings_load_from_environment(settings):
    assert settings.ENVIRONMENT == "test"
    assert settings.SHIPENGINE_API_KEY == "TEST_shipengine_key"
    assert settings.RATE_RESULT_CAP == 8
    assert settings.CARRIER_CACHE_TTL_SECONDS == 900
    assert settings.QUOTE_TTL_MINUTES == 30


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


@pytest.mark.parametrize("raw,expected", [
    ("", []),
    ("se-1", ["se-1"]),
    (" se-1 , se-2,,", ["se-1", "se-2"]),
])
def test_carrier_id_override_parsing(raw, expected):
    assert Settings(SHIPENGINE_CARRIER_IDS=raw, SHIPENGINE_CARRIER_ID="").carrier_id_override() == expected


def test_singular_carrier_id_is_a_fallback():
    settings = Settings(SHIPENGINE_CARRIER_IDS="", SHIPENGINE_CARRIER_ID="se-9")
    assert settings.carrier_id_override() == ["se-9"]

    settings = Settings(SHIPENGINE_CARRIER_IDS="se-1,se-2", SHIPENGINE_CARRIER_ID="se-9")
    assert settings.carrier_id_override() == ["se-1", "se-2"]


def test_api_key_falls_back_to_shipstation_name():
    settings = Settings(SHIPENGINE_API_KEY="", SHIPSTATION_API_KEY="TEST_ss_key")
    assert settings.shipengine_api_key() == "TEST_ss_key"


def test_missing_api_key_raises():
    settings = Settings(SHIPENGINE_API_KEY="", SHIPSTATION_API_KEY="")
    with pytest.raises(ShippingConfigurationError):
        settings.shipengine_api_key()


def test_origin_address_from_environment(settings):
    origin = settings.origin_address()

    assert origin.address_line1 == "100 Main St"
    assert origin.city_locality == "O'Fallon"
    assert origin.state_province == "MO"
    assert origin.postal_code == "63368"
    assert origin.country_code == "US"
    assert origin.company_name == "ReefCultures"


def test_origin_address_accepts_alternate_names():
    settings = Settings(
        SHIP_FROM_ADDRESS1="",
        SHIP_FROM_STREET1="5 Reef Rd",
        SHIP_FROM_POSTAL_CODE="",
        SHIP_FROM_ZIP="63301",
    )
    origin = settings.origin_address()
    assert origin.address_line1 == "5 Reef Rd"
    assert origin.postal_code == "63301"


@pytest.mark.parametrize("field", ["SHIP_FROM_CITY", "SHIP_FROM_STATE"])
def test_incomplete_origin_raises(field):
    settings = Settings(**{field: ""})
    with pytest.raises(ShippingConfigurationError) as exc_info:
        settings.origin_address()
    assert "SHIP_FROM_" in str(exc_info.value)


@pytest.mark.parametrize("cap", [0, -3])
def test_rate_cap_must_be_positive(cap):
    with pytest.raises(ValidationError):
        Settings(RATE_RESULT_CAP=cap)


def test_rate_cap_can_be_lowered():
    assert Settings(RATE_RESULT_CAP=6).RATE_RESULT_CAP == 6
