import pytest
from marshmallow import ValidationError

from hotelfleet.models import Rental, RentalItemStatus, RentalStatus
from hotelfleet.serializer import JSendSchema
from hotelfleet.serializer.models import BikeSchema, RentalSchema, RentalOutcomeSchema, OverviewSchema
from hotelfleet.service.overview import get_overview
from tests.util import HOTEL_ID


class TestBikeSerializer:

    async def test_serialize(self, random_bike):
        data = BikeSchema().dump(random_bike.serialize())
        assert data["number"] == random_bike.number
        assert data["status"] == "available"
        assert data["out_of_order_since"] is None


class TestRentalSerializer:

    async def test_serialize(self, random_rental, random_bike):
        """Assert that a rental includes its items and their bikes."""
        data = RentalSchema().dump(random_rental.serialize())
        assert data["status"] == "active"
        assert data["items"][0]["bike_number"] == random_bike.number
        assert data["items"][0]["status"] == "rented"
        assert "signature_url" not in data

    async def test_serialize_status_override(self, random_rental):
        """Assert that the stored status can be replaced with the live one."""
        rental = await Rental.get(id=random_rental.id).prefetch_related("items__bike")
        data = RentalSchema().dump(rental.serialize(status="overdue"))
        assert data["status"] == "overdue"

    async def test_load_items(self, random_rental, random_bike):
        """Assert that the items of a dumped rental load back as a list."""
        schema = RentalSchema()
        data = schema.load(schema.dump(random_rental.serialize()))
        assert len(data["items"]) == 1
        assert data["items"][0]["bike_id"] == random_bike.id
        assert data["items"][0]["status"] is RentalItemStatus.RENTED

    async def test_load_outcome_items(self, random_rental):
        schema = RentalOutcomeSchema()
        data = schema.load(schema.dump({
            "rental_id": random_rental.id,
            "rental_status": random_rental.status,
            "rental_closed": False,
            "close_time": None,
            "items": [item.serialize() for item in random_rental.items],
        }))
        assert data["rental_status"] is RentalStatus.ACTIVE
        assert data["items"][0]["id"] == random_rental.items[0].id


class TestEnumField:

    def test_load_by_value(self):
        item = {"id": 1, "bike_id": 1, "status": "returned"}
        assert RentalSchema().load({
            "id": 1, "status": "closed", "start_time": "2026-01-01T10:00:00+00:00",
            "due_time": "2026-01-02T10:00:00+00:00", "room_number": "101", "items": [item],
        })["items"][0]["status"] is RentalItemStatus.RETURNED

    def test_load_by_name(self):
        """Assert that enum names are not accepted in place of their values."""
        with pytest.raises(ValidationError) as error:
            RentalSchema().load({
                "id": 1, "status": "CLOSED", "start_time": "2026-01-01T10:00:00+00:00",
                "due_time": "2026-01-02T10:00:00+00:00", "room_number": "101", "items": [],
            })
        assert "Must be one of" in error.value.messages["status"][0]


class TestOverviewSerializer:

    async def test_serialize(self, random_rental):
        data = JSendSchema.of(overview=OverviewSchema()).dump({
            "status": "success",
            "data": {"overview": await get_overview(HOTEL_ID)}
        })
        assert data["data"]["overview"]["bikes_rented"] == 1
        assert data["data"]["overview"]["rentals"][0]["rental_id"] == random_rental.id

    async def test_load_rentals(self, random_rental):
        """Assert that the open rentals of a dumped overview load back as a list."""
        schema = OverviewSchema()
        data = schema.load(schema.dump(await get_overview(HOTEL_ID)))
        assert data["rentals"][0]["rental_id"] == random_rental.id
        assert data["rentals"][0]["status"] is RentalStatus.ACTIVE
