"""
Bikes
-----

The bike inventory for each hotel. Every function is scoped to a hotel id,
and a bike belonging to another hotel is treated exactly as if it did not
exist.
"""
from datetime import datetime
from typing import Optional, List, Dict

from hotelfleet import logger
from hotelfleet.models import Bike, BikeStatus
from hotelfleet.models.util import bike_number_key, utcnow
from hotelfleet.service.exceptions import NotFoundError, ConflictError


async def get_bikes(hotel_id: int, status: Optional[BikeStatus] = None, search: Optional[str] = None) -> List[Bike]:
    """
    Gets the bikes for a hotel.

    Bikes are ordered by number, numerically. Out of order bikes are instead
    listed oldest first (by the time they were taken out of service) so that
    the longest standing repairs come up first.

    :param status: Only include bikes with this status.
    :param search: Only include bikes whose number contains this (case insensitive).
    """
    query = Bike.filter(hotel_id=hotel_id)

    if status is not None:
        query = query.filter(status=status)
    if search:
        query = query.filter(number__icontains=search)

    bikes = await query

    if status is BikeStatus.OUT_OF_ORDER:
        def out_of_order_key(bike: Bike):
            since = bike.out_of_order_since
            return since is None, since or datetime.min, bike_number_key(bike.number)

        return sorted(bikes, key=out_of_order_key)

    return sorted(bikes, key=lambda bike: bike_number_key(bike.number))


async def get_bike(hotel_id: int, bike_id: int) -> Optional[Bike]:
    """Gets a bike by its id."""
    return await Bike.filter(id=bike_id, hotel_id=hotel_id).first()


async def get_bike_by_number(hotel_id: int, number: str) -> Optional[Bike]:
    """Gets a bike by its number."""
    return await Bike.filter(hotel_id=hotel_id, number=number).first()


async def find_bike_by_number(hotel_id: int, number: str) -> Bike:
    """
    Gets a bike by its number.

    :raises NotFoundError: If the hotel has no such bike.
    """
    bike = await get_bike_by_number(hotel_id, number)
    if bike is None:
        raise NotFoundError(f"Bike not found: {number}")
    return bike


async def _require_bike(hotel_id: int, bike_id: int) -> Bike:
    bike = await get_bike(hotel_id, bike_id)
    if bike is None:
        raise NotFoundError(f"Bike not found: {bike_id}")
    return bike


async def mark_out_of_order(hotel_id: int, bike_id: int, note: Optional[str]) -> Bike:
    """
    Takes a bike out of service, whatever its current state.

    A bike that is currently rented out stays on its rental. It will not
    become available when it is returned.

    :raises NotFoundError: If the hotel has no such bike.
    """
    bike = await _require_bike(hotel_id, bike_id)
    bike.status = BikeStatus.OUT_OF_ORDER
    bike.out_of_order_note = note
    bike.out_of_order_since = utcnow()
    await bike.save()

    logger.info("Bike %s of hotel %s marked out of order", bike.number, hotel_id)
    return bike


async def mark_available(hotel_id: int, bike_id: int) -> Bike:
    """
    Puts a bike back into service.

    :raises NotFoundError: If the hotel has no such bike.
    :raises ConflictError: If the bike is rented out, and must be returned first.
    """
    bike = await _require_bike(hotel_id, bike_id)

    if bike.status is BikeStatus.RENTED:
        raise ConflictError("Cannot mark bike as available: bike is currently rented")

    if bike.status is not BikeStatus.AVAILABLE:
        bike.status = BikeStatus.AVAILABLE
        bike.out_of_order_note = None
        bike.out_of_order_since = None
        await bike.save()
        logger.info("Bike %s of hotel %s is available again", bike.number, hotel_id)

    return bike


async def count_bikes_by_status(hotel_id: int) -> Dict[BikeStatus, int]:
    """Counts the hotel's bikes in each state."""
    return {
        status: await Bike.filter(hotel_id=hotel_id, status=status).count()
        for status in BikeStatus
    }
