"""
The models package contains all the models used on the server.

.. autoclasstree:: hotelfleet.models
"""

from .bike import Bike, BikeStatus
from .rental import Rental, RentalItem, RentalStatus, RentalItemStatus
from .settings import HotelSettings
from .signature import Signature
