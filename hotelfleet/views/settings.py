"""
Settings
-------------------------
"""
from hotelfleet.serializer import JSendSchema, JSendStatus
from hotelfleet.serializer.decorators import returns
from hotelfleet.serializer.models import SettingsSchema
from hotelfleet.service.access.settings import (
    get_grace_minutes, get_terms_version, get_terms_text, get_rental_duration_options
)
from hotelfleet.views.base import BaseView
from hotelfleet.views.decorators import with_hotel


class SettingsView(BaseView):
    """
    Gets the rental settings of the hotel, falling back to the defaults
    for anything the hotel hasn't configured.
    """
    url = "/settings"
    name = "settings"

    @with_hotel
    @returns(JSendSchema.of(settings=SettingsSchema()))
    async def get(self, hotel_id: int):
        return {
            "status": JSendStatus.SUCCESS,
            "data": {
                "settings": {
                    "grace_minutes": await get_grace_minutes(hotel_id),
                    "terms_version": await get_terms_version(hotel_id),
                    "terms_text": await get_terms_text(hotel_id),
                    "rental_duration_options": await get_rental_duration_options(hotel_id),
                }
            }
        }
