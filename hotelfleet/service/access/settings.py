"""
Settings
--------

Read-only access to a hotel's rental settings. A hotel that has never
configured anything (or left a value blank) gets the defaults below.
"""
from typing import Optional, List

from hotelfleet.models import HotelSettings

DEFAULT_GRACE_MINUTES = 0
DEFAULT_TERMS_VERSION = "1.0"
DEFAULT_TERMS_TEXT = (
    "By signing below, I acknowledge that I have received the bicycle(s) listed above in good condition. "
    "I agree to return them by the specified due date and time. "
    "I accept responsibility for any damage to or loss of the bicycle(s) during the rental period. "
    "I understand that late returns may incur additional charges."
)
DEFAULT_RENTAL_DURATION_OPTIONS = [24, 48, 72]


async def get_settings(hotel_id: int) -> Optional[HotelSettings]:
    return await HotelSettings.filter(hotel_id=hotel_id).first()


async def get_grace_minutes(hotel_id: int) -> int:
    """Gets the minutes after the due time before a rental is overdue."""
    settings = await get_settings(hotel_id)
    if settings is None or settings.grace_minutes is None:
        return DEFAULT_GRACE_MINUTES
    return settings.grace_minutes


async def get_terms_text(hotel_id: int) -> str:
    settings = await get_settings(hotel_id)
    if settings is None or not (settings.terms_text or "").strip():
        return DEFAULT_TERMS_TEXT
    return settings.terms_text


async def get_terms_version(hotel_id: int) -> str:
    settings = await get_settings(hotel_id)
    if settings is None or not (settings.terms_version or "").strip():
        return DEFAULT_TERMS_VERSION
    return settings.terms_version


async def get_rental_duration_options(hotel_id: int) -> List[int]:
    """
    Gets the rental lengths (in hours) offered to guests.
    Falls back to the defaults when nothing usable is stored.
    """
    settings = await get_settings(hotel_id)
    options = settings.rental_duration_options if settings is not None else None

    if not isinstance(options, list) or not options:
        return list(DEFAULT_RENTAL_DURATION_OPTIONS)

    try:
        return [int(option) for option in options]
    except (TypeError, ValueError):
        return list(DEFAULT_RENTAL_DURATION_OPTIONS)
