"""
Hotel Settings
---------------------------

Per-hotel rental configuration. A hotel without a row here uses the defaults
in :mod:`hotelfleet.service.access.settings`.
"""

from tortoise import Model, fields


class HotelSettings(Model):
    id = fields.IntField(primary_key=True)
    hotel_id: int = fields.IntField(unique=True)
    grace_minutes: int = fields.IntField(default=0)
    """Minutes after the due time before a rental counts as overdue."""

    terms_text = fields.TextField(null=True)
    terms_version = fields.CharField(max_length=50, null=True)
    rental_duration_options = fields.JSONField(null=True)
    """The rental lengths (in hours) offered to guests, eg. [24, 48, 72]."""
