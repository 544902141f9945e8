from datetime import timedelta
from itertools import count
from typing import List

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient
from faker import Faker
from tortoise import Tortoise

from hotelfleet.middleware import validate_token_middleware, service_error_middleware
from hotelfleet.models import Bike, Rental
from hotelfleet.models.util import utcnow
from hotelfleet.service.manager.rental_manager import RentalManager
from hotelfleet.service.verify_token import DummyVerifier
from hotelfleet.signals import register_signals
from hotelfleet.views import register_views
from tests.util import HOTEL_ID, SIGNATURE, bearer

fake = Faker()


@pytest.fixture
async def database():
    """A fresh in-memory database for each test."""
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={'models': ['hotelfleet.models']},
        use_tz=True,
        timezone="UTC",
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def rental_manager(database) -> RentalManager:
    return RentalManager()


@pytest.fixture
async def client(aiohttp_client, database, rental_manager) -> TestClient:
    app = web.Application(middlewares=[validate_token_middleware, service_error_middleware])

    app['rental_manager'] = rental_manager
    app['token_verifier'] = DummyVerifier()

    register_signals(app, init_database=False)  # we get the database from a fixture
    register_views(app, "/api/v1")

    return await aiohttp_client(app)


@pytest.fixture
def auth():
    """The headers for a request made by the default hotel."""
    return bearer()


@pytest.fixture
def random_bike_factory(database):
    bike_number = count(1)

    async def create_bike(number=None, hotel_id=HOTEL_ID, **kwargs) -> Bike:
        return await Bike.create(
            hotel_id=hotel_id,
            number=number if number is not None else str(next(bike_number)),
            type=fake.random_element(("city", "mountain", "tandem")),
            **kwargs
        )

    return create_bike


@pytest.fixture
def random_rental_factory(rental_manager):

    async def create_rental(bikes: List[Bike], due_time=None, hotel_id=HOTEL_ID) -> Rental:
        return await rental_manager.create(
            hotel_id, [bike.number for bike in bikes], fake.numerify("###"),
            due_time or utcnow() + timedelta(hours=24), SIGNATURE
        )

    return create_rental


@pytest.fixture
async def random_bike(random_bike_factory) -> Bike:
    """Creates a random bike in the database."""
    return await random_bike_factory()


@pytest.fixture
async def random_rental(random_rental_factory, random_bike) -> Rental:
    """Creates a random rental of a single bike in the database."""
    return await random_rental_factory([random_bike])
