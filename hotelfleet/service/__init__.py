"""
.. autoclasstree:: hotelfleet.service

The service layer for the system. Acts as the internal API.
The REST API uses the service layer to implement its logic.

Every function here takes the hotel id it operates on explicitly. It is
resolved once per request from the caller's token, and never taken from
the request body.
"""

from .exceptions import (
    ServiceError, NotFoundError, ConflictError, BadInputError, BikeUnavailableError, UnavailableBike,
    UnavailableReason
)
from .manager.rental_manager import RentalManager, RentalOutcome
