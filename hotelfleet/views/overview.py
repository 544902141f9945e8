"""
Overview
-------------------------

The dashboard for the front desk.
"""
from hotelfleet.serializer import JSendSchema, JSendStatus
from hotelfleet.serializer.decorators import returns
from hotelfleet.serializer.models import OverviewSchema
from hotelfleet.service.overview import get_overview
from hotelfleet.views.base import BaseView
from hotelfleet.views.decorators import with_hotel


class OverviewView(BaseView):
    """
    Gets how many bikes are in each state, along with the rentals still out.
    """
    url = "/overview"
    name = "overview"

    @with_hotel
    @returns(JSendSchema.of(overview=OverviewSchema()))
    async def get(self, hotel_id: int):
        """Overdue rentals come first, then the rest by when they are due."""
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"overview": await get_overview(hotel_id)}
        }
