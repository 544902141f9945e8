from hotelfleet.models import HotelSettings
from hotelfleet.service.access.settings import (
    get_grace_minutes, get_terms_text, get_terms_version, get_rental_duration_options,
    DEFAULT_TERMS_TEXT, DEFAULT_TERMS_VERSION, DEFAULT_RENTAL_DURATION_OPTIONS
)
from tests.util import HOTEL_ID, OTHER_HOTEL_ID


async def test_defaults(database):
    """Assert that a hotel without settings gets the defaults."""
    assert await get_grace_minutes(HOTEL_ID) == 0
    assert await get_terms_text(HOTEL_ID) == DEFAULT_TERMS_TEXT
    assert await get_terms_version(HOTEL_ID) == DEFAULT_TERMS_VERSION
    assert await get_rental_duration_options(HOTEL_ID) == DEFAULT_RENTAL_DURATION_OPTIONS


async def test_configured(database):
    """Assert that a hotel's own settings are used, and only for that hotel."""
    await HotelSettings.create(
        hotel_id=HOTEL_ID, grace_minutes=45, terms_text="Ride safe.", terms_version="3",
        rental_duration_options=[4, 8]
    )

    assert await get_grace_minutes(HOTEL_ID) == 45
    assert await get_terms_text(HOTEL_ID) == "Ride safe."
    assert await get_terms_version(HOTEL_ID) == "3"
    assert await get_rental_duration_options(HOTEL_ID) == [4, 8]
    assert await get_grace_minutes(OTHER_HOTEL_ID) == 0


async def test_blank_settings(database):
    """Assert that blank or unusable values fall back to the defaults."""
    await HotelSettings.create(
        hotel_id=HOTEL_ID, terms_text="  ", terms_version="", rental_duration_options=["a week"]
    )

    assert await get_terms_text(HOTEL_ID) == DEFAULT_TERMS_TEXT
    assert await get_terms_version(HOTEL_ID) == DEFAULT_TERMS_VERSION
    assert await get_rental_duration_options(HOTEL_ID) == DEFAULT_RENTAL_DURATION_OPTIONS
