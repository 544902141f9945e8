"""
Exceptions
----------

The errors the service layer raises. Each carries a machine readable
``code`` so the HTTP layer can report the kind of failure alongside the
human readable message.
"""
from enum import Enum
from typing import List, NamedTuple


class ServiceError(Exception):
    code = "ERROR"

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.code


class NotFoundError(ServiceError):
    """Raised when an entity does not exist, or belongs to another hotel."""
    code = "NOT_FOUND"


class ConflictError(ServiceError):
    """Raised when an operation is not compatible with the current state of an entity."""
    code = "CONFLICT"


class BadInputError(ServiceError):
    """Raised when the request data is malformed."""
    code = "BAD_REQUEST"


class UnavailableReason(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    ALREADY_RENTED = "ALREADY_RENTED"
    OUT_OF_ORDER = "OUT_OF_ORDER"


class UnavailableBike(NamedTuple):
    number: str
    reason: UnavailableReason


class BikeUnavailableError(ServiceError):
    """
    Raised when one or more of the requested bikes can't be rented.
    Lists every failing bike from the request, not just the first.
    """
    code = "BIKES_UNAVAILABLE"

    def __init__(self, unavailable_bikes: List[UnavailableBike], message="One or more bikes are unavailable"):
        super().__init__(message)
        self.unavailable_bikes = unavailable_bikes
