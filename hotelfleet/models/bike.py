"""
Bike
-------------------------

Represents a single bike in a hotel's fleet. A bike belongs to one hotel for
its lifetime and is identified to staff by its number, which is only unique
within that hotel.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from tortoise import Model, fields


class BikeStatus(str, Enum):
    """
    Represents the possible states of a bike.
    """

    AVAILABLE = "available"
    RENTED = "rented"
    OUT_OF_ORDER = "out_of_order"


class Bike(Model):
    id = fields.IntField(primary_key=True)
    hotel_id: int = fields.IntField()
    number: str = fields.CharField(max_length=50)
    type: Optional[str] = fields.CharField(max_length=50, null=True)
    status = fields.CharEnumField(BikeStatus, max_length=20, default=BikeStatus.AVAILABLE)
    out_of_order_note: Optional[str] = fields.TextField(null=True)
    out_of_order_since: Optional[datetime] = fields.DatetimeField(null=True)

    class Meta:
        unique_together = (("hotel_id", "number"),)
        indexes = (("hotel_id", "status"),)

    def serialize(self):
        return {
            "id": self.id,
            "number": self.number,
            "type": self.type,
            "status": self.status,
            "out_of_order_note": self.out_of_order_note,
            "out_of_order_since": self.out_of_order_since,
        }

    def __str__(self):
        return f"[{self.status.value}] {self.number}"
