from datetime import timedelta

from hotelfleet.models import Rental, RentalStatus, HotelSettings
from hotelfleet.models.util import utcnow
from hotelfleet.service.access.bikes import mark_out_of_order
from hotelfleet.service.overview import get_overview
from tests.util import HOTEL_ID, OTHER_HOTEL_ID


async def test_overview_counts(random_bike_factory, random_rental_factory):
    """Assert that the bikes are counted by status."""
    bikes = [await random_bike_factory() for _ in range(4)]
    await random_rental_factory(bikes[:1])
    await mark_out_of_order(HOTEL_ID, bikes[1].id, None)
    await random_bike_factory(hotel_id=OTHER_HOTEL_ID)

    overview = await get_overview(HOTEL_ID)
    assert overview["bikes_available"] == 2
    assert overview["bikes_rented"] == 1
    assert overview["bikes_out_of_order"] == 1
    assert overview["rentals_active"] == 1
    assert overview["rentals_overdue"] == 0


async def test_overview_overdue_without_writes(random_rental):
    """Assert that a rental shows as overdue once it is past due, even though it is stored as active."""
    now = random_rental.due_time + timedelta(seconds=1)

    overview = await get_overview(HOTEL_ID, now=now)
    assert overview["rentals_overdue"] == 1
    assert overview["rentals"][0]["status"] is RentalStatus.OVERDUE
    assert (await Rental.get(id=random_rental.id)).status is RentalStatus.ACTIVE


async def test_overview_grace_period(random_rental):
    """Assert that the grace period delays a rental becoming overdue."""
    await HotelSettings.create(hotel_id=HOTEL_ID, grace_minutes=15)

    overview = await get_overview(HOTEL_ID, now=random_rental.due_time + timedelta(minutes=10))
    assert overview["rentals"][0]["status"] is RentalStatus.ACTIVE

    overview = await get_overview(HOTEL_ID, now=random_rental.due_time + timedelta(minutes=20))
    assert overview["rentals"][0]["status"] is RentalStatus.OVERDUE


async def test_overview_order(random_bike_factory, random_rental_factory):
    """Assert that overdue rentals come first, then the rest by due time."""
    now = utcnow()
    later = await random_rental_factory([await random_bike_factory()], due_time=now + timedelta(hours=48))
    soon = await random_rental_factory([await random_bike_factory()], due_time=now + timedelta(hours=24))
    overdue = await random_rental_factory([await random_bike_factory()], due_time=now + timedelta(hours=1))

    overview = await get_overview(HOTEL_ID, now=now + timedelta(hours=2))
    assert [rental["rental_id"] for rental in overview["rentals"]] == [overdue.id, soon.id, later.id]
    assert overview["rentals_overdue"] == 1
    assert overview["rentals_active"] == 2


async def test_overview_bikes_out(rental_manager, random_bike_factory, random_rental_factory):
    """Assert that each rental lists the bikes still out, and closed rentals are left off."""
    bikes = [await random_bike_factory(number) for number in ("B001", "B002", "B003")]
    rental = await random_rental_factory(bikes[:2])
    closed = await random_rental_factory(bikes[2:])
    await rental_manager.return_item(HOTEL_ID, rental.id, rental.items[0].id)
    await rental_manager.return_all(HOTEL_ID, closed.id)

    overview = await get_overview(HOTEL_ID)
    summary, = overview["rentals"]
    assert summary["rental_id"] == rental.id
    assert summary["bikes_out"] == 1
    assert summary["bikes_total"] == 2
    assert summary["bike_numbers"] == ["B002"]
    assert overview["bikes_available"] == 2
