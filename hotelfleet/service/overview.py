"""
Overview
--------

The dashboard for a hotel: how many bikes are in each state, and which
rentals still have bikes out, most urgent first.

Rental statuses here are worked out from the clock rather than read from the
database, since a rental only has its stored status refreshed when something
about it changes.
"""
from datetime import datetime
from typing import Dict, Any, List

from hotelfleet.models import BikeStatus, Rental, RentalStatus
from hotelfleet.models.util import utcnow
from hotelfleet.service.access.bikes import count_bikes_by_status
from hotelfleet.service.access.rentals import get_open_rentals
from hotelfleet.service.access.settings import get_grace_minutes


def summarize_rental(rental: Rental, status: RentalStatus) -> Dict[str, Any]:
    """Summarizes an open rental, including which bikes are still out."""
    rented_items = rental.rented_items
    return {
        "rental_id": rental.id,
        "room_number": rental.room_number,
        "bed_number": rental.bed_number,
        "due_time": rental.due_time,
        "status": status,
        "bikes_out": len(rented_items),
        "bikes_total": len(rental.items),
        "bike_numbers": [item.bike.number for item in rented_items],
    }


async def get_overview(hotel_id: int, *, now: datetime = None) -> Dict[str, Any]:
    """
    Gets the overview for a hotel.

    :param now: The instant to compute the rental statuses at. Defaults to now.
    """
    now = now or utcnow()
    grace_minutes = await get_grace_minutes(hotel_id)
    bike_counts = await count_bikes_by_status(hotel_id)

    summaries: List[Dict[str, Any]] = []
    for rental in await get_open_rentals(hotel_id):
        status = rental.live_status(grace_minutes, now)
        if status is RentalStatus.CLOSED:
            continue
        summaries.append(summarize_rental(rental, status))

    summaries.sort(key=lambda summary: (summary["status"] is not RentalStatus.OVERDUE, summary["due_time"]))

    return {
        "bikes_available": bike_counts[BikeStatus.AVAILABLE],
        "bikes_rented": bike_counts[BikeStatus.RENTED],
        "bikes_out_of_order": bike_counts[BikeStatus.OUT_OF_ORDER],
        "rentals_active": sum(1 for summary in summaries if summary["status"] is RentalStatus.ACTIVE),
        "rentals_overdue": sum(1 for summary in summaries if summary["status"] is RentalStatus.OVERDUE),
        "rentals": summaries,
    }
