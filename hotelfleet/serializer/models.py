"""
Model Serializers
-----------------

Defines serializers for the various models in the system.
"""

from marshmallow import Schema
from marshmallow.fields import Integer, Boolean, String, DateTime, List, Url

from hotelfleet.models import BikeStatus, RentalStatus, RentalItemStatus
from .fields import EnumField, Many


class BikeSchema(Schema):
    """The schema corresponding to the :class:`~hotelfleet.models.bike.Bike` model."""

    id = Integer(required=True)
    number = String(required=True)
    type = String(allow_none=True)
    status = EnumField(BikeStatus, required=True)
    out_of_order_note = String(allow_none=True)
    out_of_order_since = DateTime(allow_none=True)


class RentalItemSchema(Schema):
    id = Integer(required=True)
    bike_id = Integer(required=True)
    bike_number = String()
    bike_type = String(allow_none=True)
    status = EnumField(RentalItemStatus, required=True)
    returned_at = DateTime(allow_none=True)
    lost_reason = String(allow_none=True)


class RentalSchema(Schema):
    id = Integer(required=True)
    status = EnumField(RentalStatus, required=True)
    start_time = DateTime(required=True)
    due_time = DateTime(required=True)
    close_time = DateTime(allow_none=True)
    room_number = String(required=True)
    bed_number = String(allow_none=True)
    terms_version = String()
    signature_id = Integer(allow_none=True)
    signature_url = Url(relative=True)
    items = Many(RentalItemSchema())


class RentalOutcomeSchema(Schema):
    """The result of returning, losing, or adding bikes on a rental."""

    rental_id = Integer(required=True)
    rental_status = EnumField(RentalStatus, required=True)
    rental_closed = Boolean(required=True)
    close_time = DateTime(allow_none=True)
    items = Many(RentalItemSchema())


class RentalSummarySchema(Schema):
    rental_id = Integer(required=True)
    room_number = String(required=True)
    bed_number = String(allow_none=True)
    due_time = DateTime(required=True)
    status = EnumField(RentalStatus, required=True)
    bikes_out = Integer(required=True)
    bikes_total = Integer(required=True)
    bike_numbers = List(String())


class OverviewSchema(Schema):
    bikes_available = Integer(required=True)
    bikes_rented = Integer(required=True)
    bikes_out_of_order = Integer(required=True)
    rentals_active = Integer(required=True)
    rentals_overdue = Integer(required=True)
    rentals = Many(RentalSummarySchema())


class SettingsSchema(Schema):
    grace_minutes = Integer(required=True)
    terms_version = String(required=True)
    terms_text = String(required=True)
    rental_duration_options = List(Integer())
