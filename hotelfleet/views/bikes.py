"""
Bike Related Views
-------------------------

Handles listing bikes and taking them in and out of service.
"""
from aiohttp import web

from hotelfleet.models import Bike, BikeStatus
from hotelfleet.serializer import JSendStatus, JSendSchema, Many, fail
from hotelfleet.serializer.decorators import returns, expects
from hotelfleet.serializer.misc import OutOfOrderSchema
from hotelfleet.serializer.models import BikeSchema
from hotelfleet.service.access.bikes import get_bikes, get_bike_by_number, mark_out_of_order, mark_available
from hotelfleet.views.base import BaseView
from hotelfleet.views.decorators import match_getter, GetFrom, with_hotel


class BikesView(BaseView):
    """
    Gets the bikes of the hotel.
    """
    url = "/bikes"
    name = "bikes"

    @with_hotel
    @returns(JSendSchema.of(bikes=Many(BikeSchema())))
    async def get(self, hotel_id: int):
        """
        Lists the bikes, optionally filtered with ``?status=`` (available,
        rented, or out_of_order) and ``?q=`` (part of the bike number).
        """
        status = self.request.query.get("status")
        if status:
            try:
                status = BikeStatus(status.lower())
            except ValueError:
                choices = ", ".join(s.value for s in BikeStatus)
                response = fail(f"Unknown bike status {status}.", "BAD_REQUEST", errors=[f"Must be one of {choices}."])
                raise web.HTTPBadRequest(text=JSendSchema().dumps(response), content_type='application/json')
        else:
            status = None

        bikes = await get_bikes(hotel_id, status=status, search=self.request.query.get("q"))
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"bikes": [bike.serialize() for bike in bikes]}
        }


class BikeByNumberView(BaseView):
    """
    Gets a single bike by the number painted on it.
    """
    url = "/bikes/by-number/{number}"
    name = "bike_by_number"
    with_bike = match_getter(get_bike_by_number, 'bike', hotel_id=GetFrom.HOTEL, number=('number', str))

    @with_bike
    @returns(JSendSchema.of(bike=BikeSchema()))
    async def get(self, bike: Bike):
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"bike": bike.serialize()}
        }


class BikeOutOfOrderView(BaseView):
    """
    Takes a bike out of service.
    """
    url = "/bikes/{id:[0-9]+}/out-of-order"

    @with_hotel
    @expects(OutOfOrderSchema())
    @returns(JSendSchema.of(bike=BikeSchema()))
    async def patch(self, hotel_id: int):
        """
        Marks the bike as out of order with an optional note. This works even
        if the bike is out on a rental, in which case it stays out of order
        once it is returned.
        """
        bike = await mark_out_of_order(hotel_id, self.match_id(), self.request["data"]["note"])
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"bike": bike.serialize()}
        }


class BikeAvailableView(BaseView):
    """
    Puts a bike back into service.
    """
    url = "/bikes/{id:[0-9]+}/available"

    @with_hotel
    @returns(JSendSchema.of(bike=BikeSchema()))
    async def patch(self, hotel_id: int):
        """Marks the bike as available. Bikes that are out on a rental must be returned instead."""
        bike = await mark_available(hotel_id, self.match_id())
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"bike": bike.serialize()}
        }
