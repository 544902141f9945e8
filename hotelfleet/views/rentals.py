"""
Rental Related Views
---------------------------

Handles creating rentals, and everything that happens to the bikes on them
until they are all back (or lost).
"""
from http import HTTPStatus
from typing import Dict, Any

from aiohttp import web

from hotelfleet.models import Rental, RentalStatus
from hotelfleet.serializer import JSendSchema, JSendStatus
from hotelfleet.serializer.decorators import returns, expects
from hotelfleet.serializer.misc import CreateRentalSchema, MarkLostSchema, ReturnSelectedSchema, AddBikeSchema
from hotelfleet.serializer.models import RentalSchema, RentalOutcomeSchema
from hotelfleet.service.access.rentals import get_rental_detail, get_rental_signature
from hotelfleet.service.manager.rental_manager import RentalOutcome
from hotelfleet.views.base import BaseView
from hotelfleet.views.decorators import match_getter, GetFrom, Optional, with_hotel

ITEM_URL = "/rentals/{id:[0-9]+}/items/{item_id:[0-9]+}"


def serialize_outcome(outcome: RentalOutcome) -> Dict[str, Any]:
    return {
        "rental_id": outcome.rental.id,
        "rental_status": outcome.rental.status,
        "rental_closed": outcome.closed,
        "close_time": outcome.rental.close_time,
        "items": [item.serialize() for item in outcome.items],
    }


class RentalsView(BaseView):
    """
    Creates new rentals.
    """
    url = "/rentals"
    name = "rentals"

    @with_hotel
    @expects(CreateRentalSchema())
    @returns(JSendSchema.of(rental=RentalSchema()), return_code=HTTPStatus.CREATED)
    async def post(self, hotel_id: int):
        """
        Rents out one or more bikes to a guest. If any of the bikes can't be
        rented, nothing is, and every problem bike is listed in the response.
        """
        data = self.request["data"]
        rental = await self.rental_manager.create(
            hotel_id, data["bike_numbers"], data["room_number"], data["due_time"], data["signature"],
            bed_number=data["bed_number"], terms_version=data["terms_version"]
        )
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"rental": rental.serialize(self.request.app.router)}
        }


class RentalView(BaseView):
    """
    Gets a single rental.
    """
    url = "/rentals/{id:[0-9]+}"
    name = "rental"
    with_rental = match_getter(get_rental_detail, 'rental', Optional('status'), hotel_id=GetFrom.HOTEL, rental_id='id')

    @with_rental
    @returns(JSendSchema.of(rental=RentalSchema()))
    async def get(self, rental: Rental, status: RentalStatus):
        """Gets the rental with its bikes. The status is as of right now."""
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"rental": rental.serialize(self.request.app.router, status=status)}
        }


class RentalSignatureView(BaseView):
    """
    Gets the signature the guest signed the rental with.
    """
    url = "/rentals/{id:[0-9]+}/signature"
    name = "rental_signature"
    with_signature = match_getter(get_rental_signature, 'signature', hotel_id=GetFrom.HOTEL, rental_id='id')

    @with_signature
    async def get(self, signature: bytes):
        return web.Response(body=signature, content_type="image/png")


class RentalItemReturnView(BaseView):
    """
    Returns a single bike.
    """
    url = ITEM_URL + "/return"

    @with_hotel
    @returns(JSendSchema.of(result=RentalOutcomeSchema()))
    async def post(self, hotel_id: int):
        outcome = await self.rental_manager.return_item(
            hotel_id, self.match_id(), self.match_id("item_id")
        )
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"result": serialize_outcome(outcome)}
        }


class RentalItemUndoReturnView(BaseView):
    """
    Undoes the return of a bike, for when it was returned by mistake.
    """
    url = ITEM_URL + "/undo-return"

    @with_hotel
    @returns(JSendSchema.of(result=RentalOutcomeSchema()))
    async def post(self, hotel_id: int):
        outcome = await self.rental_manager.undo_return(
            hotel_id, self.match_id(), self.match_id("item_id")
        )
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"result": serialize_outcome(outcome)}
        }


class RentalItemLostView(BaseView):
    """
    Marks a bike as lost.
    """
    url = ITEM_URL + "/lost"

    @with_hotel
    @expects(MarkLostSchema(), required=False)
    @returns(JSendSchema.of(result=RentalOutcomeSchema()))
    async def post(self, hotel_id: int):
        """The bike is taken out of service, with a note pointing back to this rental."""
        outcome = await self.rental_manager.mark_lost(
            hotel_id, self.match_id(), self.match_id("item_id"),
            self.request["data"]["reason"]
        )
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"result": serialize_outcome(outcome)}
        }


class RentalReturnSelectedView(BaseView):
    """
    Returns several bikes at once.
    """
    url = "/rentals/{id:[0-9]+}/return-selected"

    @with_hotel
    @expects(ReturnSelectedSchema())
    @returns(JSendSchema.of(result=RentalOutcomeSchema()))
    async def post(self, hotel_id: int):
        """Items that are not currently rented are skipped."""
        outcome = await self.rental_manager.return_selected(
            hotel_id, self.match_id(), self.request["data"]["item_ids"]
        )
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"result": serialize_outcome(outcome)}
        }


class RentalReturnAllView(BaseView):
    """
    Returns every bike still out on a rental.
    """
    url = "/rentals/{id:[0-9]+}/return-all"

    @with_hotel
    @returns(JSendSchema.of(result=RentalOutcomeSchema()))
    async def post(self, hotel_id: int):
        outcome = await self.rental_manager.return_all(hotel_id, self.match_id())
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"result": serialize_outcome(outcome)}
        }


class RentalItemsView(BaseView):
    """
    Adds a bike to a rental that is still open.
    """
    url = "/rentals/{id:[0-9]+}/items"

    @with_hotel
    @expects(AddBikeSchema())
    @returns(JSendSchema.of(result=RentalOutcomeSchema()), return_code=HTTPStatus.CREATED)
    async def post(self, hotel_id: int):
        outcome = await self.rental_manager.add_bike(
            hotel_id, self.match_id(), self.request["data"]["bike_number"]
        )
        return {
            "status": JSendStatus.SUCCESS,
            "data": {"result": serialize_outcome(outcome)}
        }
