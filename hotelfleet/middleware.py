"""
Middleware
----------
"""
from http import HTTPStatus

from aiohttp import web
from aiohttp.abc import Request
from aiohttp.web_middlewares import middleware

from hotelfleet import logger
from hotelfleet.serializer import JSendSchema, fail
from hotelfleet.service.exceptions import (
    ServiceError, NotFoundError, ConflictError, BadInputError, BikeUnavailableError
)
from hotelfleet.service.verify_token import verify_token, TokenVerificationError

response_schema = JSendSchema()

ERROR_STATUSES = {
    NotFoundError: HTTPStatus.NOT_FOUND,
    ConflictError: HTTPStatus.CONFLICT,
    BikeUnavailableError: HTTPStatus.CONFLICT,
    BadInputError: HTTPStatus.BAD_REQUEST,
}


@middleware
async def validate_token_middleware(request: Request, handler):
    """
    Ensures that any Authorization header given to the application is valid,
    and stores the id of the hotel it belongs to on the request as "hotel_id".
    """

    if "Authorization" in request.headers:
        try:
            request["hotel_id"] = verify_token(request)
        except TokenVerificationError as error:
            response = fail("Supplied authorization token is invalid.", "UNAUTHORIZED", errors=error.args)
            return web.json_response(response_schema.dump(response), status=HTTPStatus.UNAUTHORIZED)

    return await handler(request)


@middleware
async def service_error_middleware(request: Request, handler):
    """
    Turns the errors raised by the service layer into JSend failures,
    with the error code and any details about what went wrong.
    """
    try:
        return await handler(request)
    except ServiceError as error:
        details = {}
        if isinstance(error, BikeUnavailableError):
            details["unavailable_bikes"] = [
                {"number": bike.number, "reason": bike.reason.value} for bike in error.unavailable_bikes
            ]

        logger.warning("%s %s failed: %s (%s)", request.method, request.rel_url, error.message, error.code)
        response = fail(error.message, error.code, **details)
        status = ERROR_STATUSES.get(type(error), HTTPStatus.BAD_REQUEST)
        return web.json_response(response_schema.dump(response), status=status)
