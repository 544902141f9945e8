"""
Decorators
-------------------------

Every route acts on behalf of one hotel. The hotel is whoever the bearer
token was issued to (see :func:`~hotelfleet.middleware.validate_token_middleware`),
so these decorators only ever take the hotel id from the request itself and
never from its body, query string, or url.
"""
from enum import Enum
from functools import wraps
from inspect import isawaitable
from typing import Union, Any, Dict, Tuple

from aiohttp import web
from aiohttp.web_request import Request
from aiohttp.web_urldispatcher import View

from hotelfleet.serializer import JSendSchema, fail

response_schema = JSendSchema()


class Optional:
    """Signify the injected value to be optional."""

    def __init__(self, value):
        self.value = value


class GetFrom(Enum):
    HOTEL = "hotel_id"


def current_hotel_id(request: Request) -> int:
    """
    Gets the id of the hotel making the request.

    :raises HTTPUnauthorized: If the request carries no valid token.
    """
    hotel_id = request.get("hotel_id")
    if hotel_id is None:
        response = fail("You must supply a valid hotel token.", "UNAUTHORIZED")
        raise web.HTTPUnauthorized(text=response_schema.dumps(response), content_type='application/json')
    return hotel_id


def flatten(error):
    errors = []
    for sub_error in error.args:
        if isinstance(sub_error, Exception):
            errors += flatten(sub_error)
        else:
            errors.append(sub_error)
    return errors


def resolve_match_map(request: Request, match_map) -> Dict[str, Any]:
    resolved_matches = {}
    errors = []

    for key, value in match_map.items():

        if isinstance(value, str):
            value = (value, int)

        if isinstance(value, tuple):
            param = request.match_info.get(value[0])
            try:
                resolved_matches[key] = value[1](param)
            except (ValueError, TypeError):
                errors.append(ValueError(
                    f'Could not convert url parameter "{param}" to expected type {value[1].__name__}.'))
        elif value == GetFrom.HOTEL:
            resolved_matches[key] = current_hotel_id(request)
        else:
            raise TypeError(f"match_getter incorrectly configured (doesn't support {type(value)})")

    if errors:
        raise ValueError(*errors)
    return resolved_matches


def with_hotel(original_function):
    """Passes the id of the requesting hotel into the route as ``hotel_id``."""

    @wraps(original_function)
    async def new_func(self: View, **kwargs):
        return await original_function(self, hotel_id=current_hotel_id(self.request), **kwargs)

    return new_func


def match_getter(getter_function, *injection_parameters: Union[str, Optional],
                 **match_map: Union[str, GetFrom, Tuple[str, type]]):
    """
    Automatically fetches and includes an item, or 404's if it doesn't exist.

    .. code-block:: python

        # example usage
        @match_getter(get_bike, 'bike', hotel_id=GetFrom.HOTEL, bike_id='id')
        async def get(self, bike: Bike)
            return web.json_response(data=bike.serialize())

    :param getter_function: The function to fetch the item from.
    :param injection_parameters: The name of the parameter to pass the object as.
    :param match_map: Associates a kwarg on the ``getter_function`` to a url variable, or the requesting hotel.
    :return: A decorator that wraps the response and passes in the object.
    """

    def attach_instance(original_function):

        @wraps(original_function)
        async def new_func(self: View, **kwargs):
            try:
                params = resolve_match_map(self.request, match_map)
            except (ValueError, TypeError) as error:
                response = fail("Errors with your request.", "BAD_REQUEST", errors=flatten(error))
                raise web.HTTPBadRequest(text=response_schema.dumps(response), content_type='application/json')
            item = getter_function(**params)
            if isawaitable(item):
                item = await item

            # if the getter function returns multiple items,
            # and there are multiple parameter names,
            # then set those keys in the decorated function
            if isinstance(item, tuple) and len(injection_parameters) == len(item):
                optional_injected_kwargs = dict(zip(injection_parameters, item))
            else:
                optional_injected_kwargs = {injection_parameters[0]: item}

            not_found = []
            injected_kwargs = {}
            for key, item in optional_injected_kwargs.items():
                if item is None and not isinstance(key, Optional):
                    not_found.append(key)
                elif isinstance(key, Optional):
                    injected_kwargs[key.value] = item
                else:
                    injected_kwargs[key] = item

            if not_found:
                params.pop("hotel_id", None)
                response = fail(
                    f'Could not find {", ".join(not_found)} with the given params.', "NOT_FOUND", params=params
                )
                raise web.HTTPNotFound(text=response_schema.dumps(response), content_type='application/json')

            return await original_function(self, **kwargs, **injected_kwargs)

        return new_func

    return attach_instance
