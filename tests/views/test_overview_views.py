from aiohttp.test_utils import TestClient

from hotelfleet.models import HotelSettings, RentalStatus
from hotelfleet.serializer import JSendSchema
from hotelfleet.serializer.models import OverviewSchema, SettingsSchema
from tests.util import HOTEL_ID, OTHER_HOTEL_ID, bearer


class TestOverviewView:

    async def test_get_overview(self, client: TestClient, auth, random_rental, random_bike, random_bike_factory):
        await random_bike_factory()
        resp = await client.get('/api/v1/overview', headers=auth)
        data = JSendSchema.of(overview=OverviewSchema()).load(await resp.json())

        overview = data["data"]["overview"]
        assert overview["bikes_available"] == 1
        assert overview["bikes_rented"] == 1
        assert overview["rentals_active"] == 1
        assert overview["rentals"][0]["rental_id"] == random_rental.id
        assert overview["rentals"][0]["status"] == RentalStatus.ACTIVE
        assert overview["rentals"][0]["bike_numbers"] == [random_bike.number]

    async def test_get_other_hotel_overview(self, client: TestClient, random_rental):
        """Assert that a hotel doesn't see the rentals of another."""
        resp = await client.get('/api/v1/overview', headers=bearer(OTHER_HOTEL_ID))
        data = await resp.json()
        assert data["data"]["overview"]["rentals"] == []
        assert data["data"]["overview"]["bikes_rented"] == 0


class TestSettingsView:

    async def test_get_default_settings(self, client: TestClient, auth):
        resp = await client.get('/api/v1/settings', headers=auth)
        data = JSendSchema.of(settings=SettingsSchema()).load(await resp.json())
        assert data["data"]["settings"]["grace_minutes"] == 0
        assert data["data"]["settings"]["rental_duration_options"] == [24, 48, 72]

    async def test_get_settings(self, client: TestClient, auth):
        await HotelSettings.create(hotel_id=HOTEL_ID, grace_minutes=10, terms_version="2")
        resp = await client.get('/api/v1/settings', headers=auth)
        data = await resp.json()
        assert data["data"]["settings"]["grace_minutes"] == 10
        assert data["data"]["settings"]["terms_version"] == "2"
