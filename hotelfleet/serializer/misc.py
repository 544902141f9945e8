"""
Request Serializers
-------------------

The schemas that incoming request bodies are validated against.
"""

from marshmallow import Schema
from marshmallow.fields import String, DateTime, List, Integer
from marshmallow.validate import Length


class CreateRentalSchema(Schema):
    bike_numbers = List(String(validate=Length(min=1)), required=True)
    room_number = String(required=True, validate=Length(min=1, max=50))
    bed_number = String(allow_none=True, validate=Length(max=50), load_default=None)
    due_time = DateTime(required=True)
    terms_version = String(validate=Length(max=50), load_default=None)
    signature = String(required=True)
    """The guest's signature, as a base64 PNG or a data url."""


class OutOfOrderSchema(Schema):
    note = String(allow_none=True, load_default=None)


class MarkLostSchema(Schema):
    reason = String(allow_none=True, load_default=None)


class ReturnSelectedSchema(Schema):
    item_ids = List(Integer(), required=True)


class AddBikeSchema(Schema):
    bike_number = String(required=True, validate=Length(min=1))
