"""
Rental
---------------------------

A rental is the contract for one guest stay. It owns an ordered list of
:class:`RentalItem`, one per bike handed out, each of which is tracked
separately as it comes back (or doesn't).

The status of a rental is stored, but it also depends on the clock, so
:meth:`RentalStatus.get` can derive it at any instant from the item states,
the due time and the hotel's grace period.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Optional, Dict, Any, List

from tortoise import Model, fields


class RentalStatus(str, Enum):
    ACTIVE = "active"
    OVERDUE = "overdue"
    CLOSED = "closed"

    @classmethod
    def get(cls, item_statuses: Iterable["RentalItemStatus"], due_time: datetime,
            grace_minutes: int, now: datetime) -> "RentalStatus":
        """
        Derives the status of a rental.

        A rental is closed once every item has been returned or lost.
        Otherwise it is overdue when the grace period after the due time has passed.
        """
        if all(status in RentalItemStatus.terminating_types() for status in item_statuses):
            return cls.CLOSED
        elif now > due_time + timedelta(minutes=grace_minutes):
            return cls.OVERDUE
        else:
            return cls.ACTIVE


class RentalItemStatus(str, Enum):
    RENTED = "rented"
    RETURNED = "returned"
    LOST = "lost"

    @staticmethod
    def terminating_types():
        """The item states that no longer count towards the rental."""
        return RentalItemStatus.RETURNED, RentalItemStatus.LOST


class Rental(Model):
    id = fields.IntField(primary_key=True)
    hotel_id: int = fields.IntField()
    status = fields.CharEnumField(RentalStatus, max_length=20, default=RentalStatus.ACTIVE)
    start_time: datetime = fields.DatetimeField()
    due_time: datetime = fields.DatetimeField()
    close_time: Optional[datetime] = fields.DatetimeField(null=True)
    room_number: str = fields.CharField(max_length=50)
    bed_number: Optional[str] = fields.CharField(max_length=50, null=True)
    terms_version: str = fields.CharField(max_length=50)
    signature = fields.ForeignKeyField("models.Signature", related_name="rentals", null=True)

    items: fields.ReverseRelation["RentalItem"]

    class Meta:
        indexes = (("hotel_id", "status"),)

    @property
    def rented_items(self) -> List["RentalItem"]:
        """The items (with prefetched bikes) that are still out."""
        return [item for item in self.items if item.status is RentalItemStatus.RENTED]

    def live_status(self, grace_minutes: int, now: datetime) -> RentalStatus:
        """The status of the rental at the given instant, ignoring the stored value."""
        return RentalStatus.get((item.status for item in self.items), self.due_time, grace_minutes, now)

    def serialize(self, router=None, *, status: RentalStatus = None) -> Dict[str, Any]:
        """
        Serializes the rental and its items.

        :param router: When given, links to the signature are included.
        :param status: Overrides the stored status (eg. with a live one).
        """
        data = {
            "id": self.id,
            "status": status if status is not None else self.status,
            "start_time": self.start_time,
            "due_time": self.due_time,
            "close_time": self.close_time,
            "room_number": self.room_number,
            "bed_number": self.bed_number,
            "terms_version": self.terms_version,
            "signature_id": self.signature_id,
            "items": [item.serialize() for item in self.items],
        }

        if router is not None and self.signature_id is not None:
            data["signature_url"] = router["rental_signature"].url_for(id=str(self.id)).path

        return data

    def __str__(self):
        return f"Rental #{self.id} (room {self.room_number}, {self.status.value})"


class RentalItem(Model):
    id = fields.IntField(primary_key=True)
    rental = fields.ForeignKeyField("models.Rental", related_name="items")
    bike = fields.ForeignKeyField("models.Bike", related_name="rental_items")
    status = fields.CharEnumField(RentalItemStatus, max_length=20, default=RentalItemStatus.RENTED)
    returned_at: Optional[datetime] = fields.DatetimeField(null=True)
    lost_reason: Optional[str] = fields.TextField(null=True)

    rented_bike_id: Optional[int] = fields.IntField(null=True, unique=True)
    """
    Mirrors ``bike_id`` while the item is rented and is null otherwise. The
    unique constraint on it means a bike can only ever be out on one item.
    """

    class Meta:
        ordering = ["id"]

    def set_status(self, status: RentalItemStatus):
        self.status = status
        self.rented_bike_id = self.bike_id if status is RentalItemStatus.RENTED else None

    def serialize(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "bike_id": self.bike_id,
            "status": self.status,
            "returned_at": self.returned_at,
            "lost_reason": self.lost_reason,
        }

        bike = self.bike
        if isinstance(bike, Model):
            data["bike_number"] = bike.number
            data["bike_type"] = bike.type

        return data
