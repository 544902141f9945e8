from datetime import timedelta

import pytest

from hotelfleet.models import RentalItem, RentalItemStatus, RentalStatus
from hotelfleet.models.util import bike_number_key, utcnow, as_utc

RENTED, RETURNED, LOST = RentalItemStatus.RENTED, RentalItemStatus.RETURNED, RentalItemStatus.LOST


@pytest.mark.parametrize(("items", "minutes_past_due", "grace", "expected"), [
    ([RENTED, RENTED], -10, 0, RentalStatus.ACTIVE),
    ([RENTED, RETURNED], 1, 0, RentalStatus.OVERDUE),
    ([RENTED], 1, 5, RentalStatus.ACTIVE),
    ([RENTED], 6, 5, RentalStatus.OVERDUE),
    ([RETURNED, LOST], 60, 0, RentalStatus.CLOSED),
    ([RETURNED], -60, 0, RentalStatus.CLOSED),
])
def test_rental_status(items, minutes_past_due, grace, expected):
    """Assert that a rental is only closed once nothing is out, and overdue after the grace period."""
    due = utcnow()
    now = due + timedelta(minutes=minutes_past_due)
    assert RentalStatus.get(items, due, grace, now) is expected


def test_bike_number_key():
    """Assert that bike numbers sort by their numeric part."""
    numbers = ["B10", "9", "B2", "spare", "B1", "10"]
    assert sorted(numbers, key=bike_number_key) == ["B1", "B2", "9", "10", "B10", "spare"]


def test_as_utc():
    now = utcnow()
    assert as_utc(now.replace(tzinfo=None)) == now


async def test_rented_bike_id_follows_status(database):
    """Assert that an item only claims its bike while it is rented."""
    item = RentalItem(bike_id=4, rental_id=1)
    item.set_status(RENTED)
    assert item.rented_bike_id == 4
    item.set_status(RETURNED)
    assert item.rented_bike_id is None
    item.set_status(LOST)
    assert item.rented_bike_id is None
