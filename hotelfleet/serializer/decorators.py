"""
Decorators
----------

This module defines the decorators that handle the JSON going in and out
of the routes, so the views only deal with plain dictionaries.

Request bodies are validated by :func:`expects` before the route runs, and
whatever the route returns is dumped through a schema by :func:`returns`.
Both answer with a JSend failure (carrying a ``code``) rather than raising
when something doesn't fit.

.. note:: Annotating a route with ``@expects(None)`` or ``@returns(None)``
    has no effect, but may make the route definitions easier to read.
"""

from functools import wraps
from http import HTTPStatus
from json import JSONDecodeError
from typing import Optional, Tuple, Union

from aiohttp import web
from aiohttp.web_urldispatcher import View
from marshmallow import Schema, ValidationError
from marshmallow_jsonschema import JSONSchema

from hotelfleet.serializer.jsend import JSendSchema, JSendStatus, fail

response_schema = JSendSchema()


def bad_request(message: str, **data) -> web.Response:
    return web.json_response(
        response_schema.dump(fail(message, "BAD_REQUEST", **data)),
        status=HTTPStatus.BAD_REQUEST
    )


def expects(schema: Optional[Schema], into="data", required=True):
    """
    A decorator that asserts that the JSON body of a request validates
    against the given :class:`~marshmallow.Schema`, storing the loaded data
    on the request under ``into``.

    .. code:: python

        @expects(AddBikeSchema())
        async def post(self):
            bike_number = self.request["data"]["bike_number"]

    Requests that are missing a body, aren't JSON, or don't validate get a
    400 along with the JSON schema they should have matched.

    :param schema: The schema to validate.
    :param into: The key to store the validated data in.
    :param required: When false, a request without a body is loaded as an empty object.
    """

    if schema is None:
        return lambda x: x

    if not isinstance(schema, Schema):
        raise TypeError(f"Expected a Schema, got {type(schema)}")

    json_schema = JSONSchema().dump(schema)["definitions"][type(schema).__name__]

    def decorator(original_function):

        @wraps(original_function)
        async def new_func(self: View, **kwargs):
            request = self.request

            if not required and not request.body_exists:
                request[into] = schema.load({})
                return await original_function(self, **kwargs)

            if not request.body_exists or not request.content_type == "application/json":
                return bad_request(
                    f"This route ({request.method}: {request.rel_url}) only accepts JSON.",
                    schema=json_schema
                )

            try:
                request[into] = schema.load(await request.json())
            except JSONDecodeError as err:
                return bad_request("Could not parse supplied JSON.", errors=err.args)
            except ValidationError as err:
                return bad_request(
                    "The request did not validate properly.",
                    errors=err.messages,
                    schema=json_schema
                )

            return await original_function(self, **kwargs)

        return new_func

    return decorator


def returns(
    schema: Optional[Schema] = None, return_code: HTTPStatus = HTTPStatus.OK,
    **named_schema: Union[Schema, Tuple[Schema, HTTPStatus]]
):
    """
    A decorator that dumps the dictionary returned from the route through
    the given :class:`~marshmallow.Schema` and responds with ``return_code``.

    .. code:: python

        @returns(JSendSchema.of(bike=BikeSchema()))
        async def get(self):
            return {
                "status": JSendStatus.SUCCESS,
                "data": {"bike": bike.serialize()}
            }

    A route that can answer in more than one shape passes them as named
    schemas (each optionally paired with its own return code) and returns a
    tuple of the name and the data.

    :param schema: The schema that the output data must conform to.
    :param return_code: The code to return.
    :param named_schema: Schema names, paired with their schema and return codes.
    """

    if schema is None and not named_schema:
        return lambda x: x

    named_schema[None] = (schema, return_code)

    def decorator(original_function):

        @wraps(original_function)
        async def new_func(self: View, **kwargs):

            if schema:
                schema_name, response_data = None, await original_function(self, **kwargs)
            else:
                schema_name, response_data = await original_function(self, **kwargs)

            try:
                matched_schema = named_schema[schema_name]
                if isinstance(matched_schema, tuple):
                    matched_schema, matched_return_code = matched_schema
                else:
                    matched_return_code = return_code
                return web.json_response(matched_schema.dump(response_data), status=matched_return_code)
            except (ValidationError, KeyError) as err:
                return web.json_response(response_schema.dump({
                    "status": JSendStatus.ERROR,
                    "data": err.messages if isinstance(err, ValidationError) else {"errors": err.args},
                    "message": "We tried to send you data back, but it came out wrong.",
                    "code": "SERIALIZATION_ERROR",
                }), status=HTTPStatus.INTERNAL_SERVER_ERROR)

        return new_func

    return decorator
