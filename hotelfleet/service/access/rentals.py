"""
Rentals
-------

Read access to a hotel's rentals. Rentals are always returned with their
items (and the items' bikes) fetched, in the order they were added.
"""
from datetime import datetime
from typing import Optional, List, Tuple

from hotelfleet.models import Rental, RentalStatus
from hotelfleet.models.util import utcnow
from hotelfleet.service.access.settings import get_grace_minutes
from hotelfleet.service.access.signatures import get_signature


def _order_items(rental: Rental) -> Rental:
    rental.items.related_objects.sort(key=lambda item: item.id)
    return rental


async def get_rental(hotel_id: int, rental_id: int, *, for_update=False) -> Optional[Rental]:
    """
    Gets a single rental belonging to the hotel.

    :param for_update: Lock the rental row (use inside a transaction).
    """
    query = Rental.filter(id=rental_id, hotel_id=hotel_id)
    if for_update:
        query = query.select_for_update()

    rental = await query.first().prefetch_related("items__bike")
    return _order_items(rental) if rental is not None else None


async def get_open_rentals(hotel_id: int) -> List[Rental]:
    """Gets the rentals that still have bikes out, as far as the stored status knows."""
    rentals = await Rental.filter(
        hotel_id=hotel_id, status__in=(RentalStatus.ACTIVE, RentalStatus.OVERDUE)
    ).prefetch_related("items__bike")
    return [_order_items(rental) for rental in rentals]


async def get_rental_detail(hotel_id: int, rental_id: int, *,
                            now: datetime = None) -> Tuple[Optional[Rental], Optional[RentalStatus]]:
    """
    Gets a rental along with its status at this instant.

    The stored status is only refreshed when the rental changes, so a rental
    that has gone past its due time is still stored as active. The live status
    accounts for that.
    """
    rental = await get_rental(hotel_id, rental_id)
    if rental is None:
        return None, None

    grace_minutes = await get_grace_minutes(hotel_id)
    return rental, rental.live_status(grace_minutes, now or utcnow())


async def get_rental_signature(hotel_id: int, rental_id: int) -> Optional[bytes]:
    """Gets the PNG signature for a rental, if both exist."""
    rental = await Rental.filter(id=rental_id, hotel_id=hotel_id).first()
    if rental is None:
        return None

    signature = await get_signature(rental.signature_id, hotel_id)
    return signature.data if signature is not None else None
