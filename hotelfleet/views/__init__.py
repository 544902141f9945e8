"""
This package contains the server API for renting out
the bikes of a hotel and getting them back.

API Conventions
---------------

The API is ordered in terms of resources (bikes, rentals) and accepts and
returns JSON with snake_case key naming. Filtering is done with the query
string. Every request must carry a hotel token, and only ever sees the data
of that hotel.

API Expected Responses
----------------------

The server responds with JSend formatted JSON to all requests, apart from
the signature images. Failures raised by the service layer carry a ``code``
so that clients can tell them apart.
"""

import aiohttp_cors
from aiohttp.abc import Application

from hotelfleet import logger
from .bikes import BikesView, BikeByNumberView, BikeOutOfOrderView, BikeAvailableView
from .overview import OverviewView
from .rentals import (
    RentalsView, RentalView, RentalSignatureView, RentalItemReturnView, RentalItemUndoReturnView,
    RentalItemLostView, RentalReturnSelectedView, RentalReturnAllView, RentalItemsView
)
from .settings import SettingsView

views = [
    BikesView, BikeByNumberView, BikeOutOfOrderView, BikeAvailableView,
    RentalsView, RentalView, RentalSignatureView, RentalItemReturnView, RentalItemUndoReturnView,
    RentalItemLostView, RentalReturnSelectedView, RentalReturnAllView, RentalItemsView,
    OverviewView,
    SettingsView,
]


def register_views(app: Application, base: str):
    """
    Registers all the API views onto the given router at a specific root url.

    :param app: The app to register the views to.
    :param base: The base URL.
    """
    cors = aiohttp_cors.setup(app, defaults={
        "*": aiohttp_cors.ResourceOptions(
            allow_credentials=True,
            expose_headers="*",
            allow_headers="*",
            allow_methods="*",
        )
    })

    for view in views:
        logger.info("Registered %s at %s", view.__name__, base + view.url)
        view.register_route(app, base)
        view.enable_cors(cors)
