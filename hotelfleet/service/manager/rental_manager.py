"""
Rental Manager
--------------

This module is what handles the lifecycle of every rental in the system.

Responsibilities
================

- creating a rental for one or more bikes
- returning bikes, one at a time or in batches
- marking bikes as lost
- undoing a return
- adding a bike to a rental that is still open
- keeping the stored rental status up to date

Every operation that changes anything runs in a single transaction. The
rows involved are read with ``SELECT ... FOR UPDATE`` before they are
checked, so two requests racing for the same bike cannot both rent it.
Should that ever slip through, the unique ``rented_bike_id`` column on
:class:`~hotelfleet.models.rental.RentalItem` rejects the second one.
"""

from collections import Counter
from datetime import datetime
from typing import Callable, Iterable, List, NamedTuple, Optional

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from hotelfleet import logger
from hotelfleet.models import Bike, BikeStatus, Rental, RentalItem, RentalItemStatus, RentalStatus
from hotelfleet.models.util import as_utc, utcnow
from hotelfleet.service.access.rentals import get_rental
from hotelfleet.service.access.settings import get_grace_minutes, get_terms_version
from hotelfleet.service.access.signatures import store_signature
from hotelfleet.service.exceptions import (
    BadInputError, BikeUnavailableError, ConflictError, NotFoundError, UnavailableBike, UnavailableReason
)


class RentalOutcome(NamedTuple):
    """The result of an operation on the items of a rental."""

    rental: Rental
    items: List[RentalItem]
    """The items that were changed."""

    closed: bool
    """Whether the operation closed the rental."""


class RentalManager:
    """
    Handles the lifecycle of the rentals in the system.

    :param clock: Gives the current time. Defaults to the system clock.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clock = clock

    async def create(
        self, hotel_id: int, bike_numbers: List[str], room_number: str, due_time: datetime, signature: str, *,
        bed_number: Optional[str] = None, terms_version: Optional[str] = None
    ) -> Rental:
        """
        Creates a new rental for the given bikes.

        Either every bike is rented and the rental created, or nothing changes.

        :param signature: The guest's signature as base64 PNG (optionally a data url).
        :param terms_version: The version of the terms the guest accepted. Defaults to the hotel's current version.
        :raises BadInputError: If there are no bikes, duplicate bikes, the due time has passed, or the signature is bad.
        :raises BikeUnavailableError: If any of the bikes can't be rented, listing all of them.
        """
        now = self._clock()

        if not bike_numbers:
            raise BadInputError("At least one bike is required")

        due_time = as_utc(due_time)
        if due_time <= now:
            raise BadInputError("Return date/time must be in the future")

        duplicates = [number for number, count in Counter(bike_numbers).items() if count > 1]
        if duplicates:
            raise BadInputError(f"Duplicate bike number: {duplicates[0]}")

        if terms_version is None:
            terms_version = await get_terms_version(hotel_id)

        async with in_transaction():
            bikes = await self._reserve_bikes(hotel_id, bike_numbers)
            stored_signature = await store_signature(hotel_id, signature)

            rental = await Rental.create(
                hotel_id=hotel_id,
                status=RentalStatus.ACTIVE,
                start_time=now,
                due_time=due_time,
                room_number=room_number,
                bed_number=bed_number,
                terms_version=terms_version,
                signature=stored_signature,
            )

            for bike in bikes:
                await self._rent_bike(rental, bike)

        logger.info("Created rental #%s for hotel %s with bikes %s", rental.id, hotel_id, ", ".join(bike_numbers))
        return await get_rental(hotel_id, rental.id)

    async def return_item(self, hotel_id: int, rental_id: int, item_id: int) -> RentalOutcome:
        """
        Returns a single bike.

        :raises NotFoundError: If the rental or item doesn't exist.
        :raises ConflictError: If the item is not currently rented.
        """
        now = self._clock()

        async with in_transaction():
            rental = await self._get_rental(hotel_id, rental_id)
            item = self._get_item(rental, item_id)

            if item.status is not RentalItemStatus.RENTED:
                raise ConflictError("Item is not currently rented")

            await self._lock_bikes([item])
            await self._return_item(item, now)
            closed = await self.recalculate_status(rental, now)

        logger.info("Returned bike %s from rental #%s", item.bike.number, rental.id)
        return RentalOutcome(rental, [item], closed)

    async def return_selected(self, hotel_id: int, rental_id: int, item_ids: Iterable[int]) -> RentalOutcome:
        """
        Returns the given items. Items that are not currently rented are skipped.

        :raises NotFoundError: If the rental doesn't exist.
        """
        selected = set(item_ids)
        return await self._return_many(hotel_id, rental_id, lambda item: item.id in selected)

    async def return_all(self, hotel_id: int, rental_id: int) -> RentalOutcome:
        """
        Returns every bike still out on a rental.

        :raises NotFoundError: If the rental doesn't exist.
        """
        return await self._return_many(hotel_id, rental_id, lambda item: True)

    async def mark_lost(self, hotel_id: int, rental_id: int, item_id: int, reason: Optional[str] = None) -> RentalOutcome:
        """
        Marks a rented bike as lost, taking the bike out of service.

        :raises NotFoundError: If the rental or item doesn't exist.
        :raises ConflictError: If the item is not currently rented.
        """
        now = self._clock()

        async with in_transaction():
            rental = await self._get_rental(hotel_id, rental_id)
            item = self._get_item(rental, item_id)

            if item.status is not RentalItemStatus.RENTED:
                raise ConflictError("Item is not currently rented")

            await self._lock_bikes([item])
            item.set_status(RentalItemStatus.LOST)
            item.lost_reason = reason
            await item.save(update_fields=["status", "lost_reason", "rented_bike_id"])

            bike = item.bike
            bike.status = BikeStatus.OUT_OF_ORDER
            bike.out_of_order_note = f"Marked lost from rental #{rental.id}"
            if reason is not None:
                bike.out_of_order_note += f": {reason}"
            bike.out_of_order_since = now
            await bike.save(update_fields=["status", "out_of_order_note", "out_of_order_since"])

            closed = await self.recalculate_status(rental, now)

        logger.info("Bike %s marked lost from rental #%s", item.bike.number, rental.id)
        return RentalOutcome(rental, [item], closed)

    async def undo_return(self, hotel_id: int, rental_id: int, item_id: int) -> RentalOutcome:
        """
        Puts a returned bike back on the rental, reopening the rental if it was closed.

        A bike that was taken out of service in the meantime stays out of service.

        :raises NotFoundError: If the rental or item doesn't exist.
        :raises ConflictError: If the item wasn't returned, or the bike has since gone out on another rental.
        """
        async with in_transaction():
            rental = await self._get_rental(hotel_id, rental_id)
            item = self._get_item(rental, item_id)

            if item.status is not RentalItemStatus.RETURNED:
                raise ConflictError("Item is not in RETURNED status")

            await self._lock_bikes([item])
            bike = item.bike

            if bike.status is BikeStatus.RENTED:
                raise ConflictError(f"Bike {bike.number} is already out on another rental")

            item.set_status(RentalItemStatus.RENTED)
            item.returned_at = None
            try:
                await item.save(update_fields=["status", "returned_at", "rented_bike_id"])
            except IntegrityError as error:
                raise ConflictError(f"Bike {bike.number} is already out on another rental") from error

            if bike.status is BikeStatus.AVAILABLE:
                bike.status = BikeStatus.RENTED
                await bike.save(update_fields=["status"])

            if rental.status is RentalStatus.CLOSED:
                rental.status = RentalStatus.ACTIVE
                rental.close_time = None
                await rental.save(update_fields=["status", "close_time"])

        logger.info("Undid return of bike %s on rental #%s", bike.number, rental.id)
        return RentalOutcome(rental, [item], False)

    async def add_bike(self, hotel_id: int, rental_id: int, bike_number: str) -> RentalOutcome:
        """
        Adds another bike to an open rental.

        :raises NotFoundError: If the rental doesn't exist.
        :raises ConflictError: If the rental is closed.
        :raises BadInputError: If the bike is already part of the rental.
        :raises BikeUnavailableError: If the bike can't be rented.
        """
        async with in_transaction():
            rental = await self._get_rental(hotel_id, rental_id)

            if rental.status is RentalStatus.CLOSED:
                raise ConflictError("Cannot add bikes to a closed rental")

            if any(item.bike.number == bike_number for item in rental.items):
                raise BadInputError(f"Bike {bike_number} is already in this rental")

            bike, = await self._reserve_bikes(hotel_id, [bike_number])
            item = await self._rent_bike(rental, bike)
            rental.items.related_objects.append(item)

        logger.info("Added bike %s to rental #%s", bike_number, rental.id)
        return RentalOutcome(rental, [item], False)

    async def recalculate_status(self, rental: Rental, now: Optional[datetime] = None) -> bool:
        """
        Brings the stored status of a rental up to date with its items and the clock.

        The close time is only set when the rental becomes closed, so this is safe to run repeatedly.

        :returns: Whether the rental was closed by this call.
        """
        now = now or self._clock()
        grace_minutes = await get_grace_minutes(rental.hotel_id)
        status = rental.live_status(grace_minutes, now)

        closed = status is RentalStatus.CLOSED and rental.status is not RentalStatus.CLOSED
        if closed:
            rental.close_time = now

        if closed or rental.status is not status:
            rental.status = status
            await rental.save(update_fields=["status", "close_time"])

        return closed

    async def _return_many(self, hotel_id: int, rental_id: int, predicate: Callable[[RentalItem], bool]):
        now = self._clock()

        async with in_transaction():
            rental = await self._get_rental(hotel_id, rental_id)
            items = [item for item in rental.rented_items if predicate(item)]

            await self._lock_bikes(items)
            for item in items:
                await self._return_item(item, now)

            closed = await self.recalculate_status(rental, now)

        logger.info("Returned %s bike(s) from rental #%s", len(items), rental.id)
        return RentalOutcome(rental, items, closed)

    @staticmethod
    async def _get_rental(hotel_id: int, rental_id: int) -> Rental:
        rental = await get_rental(hotel_id, rental_id, for_update=True)
        if rental is None:
            raise NotFoundError(f"Rental not found: {rental_id}")
        return rental

    @staticmethod
    def _get_item(rental: Rental, item_id: int) -> RentalItem:
        for item in rental.items:
            if item.id == item_id:
                return item
        raise NotFoundError(f"Rental item not found: {item_id}")

    @staticmethod
    async def _lock_bikes(items: List[RentalItem]):
        """Re-reads the bikes of the given items, locking their rows."""
        if not items:
            return

        bikes = {bike.id: bike for bike in await Bike.filter(id__in=[item.bike_id for item in items]).select_for_update()}
        for item in items:
            item.bike = bikes[item.bike_id]

    @staticmethod
    async def _reserve_bikes(hotel_id: int, bike_numbers: List[str]) -> List[Bike]:
        """
        Locks and checks the requested bikes.

        :raises BikeUnavailableError: Listing every bike that is missing, rented, or out of order.
        """
        found = {
            bike.number: bike for bike in
            await Bike.filter(hotel_id=hotel_id, number__in=bike_numbers).select_for_update()
        }

        unavailable = []
        for number in bike_numbers:
            bike = found.get(number)
            if bike is None:
                unavailable.append(UnavailableBike(number, UnavailableReason.NOT_FOUND))
            elif bike.status is BikeStatus.RENTED:
                unavailable.append(UnavailableBike(number, UnavailableReason.ALREADY_RENTED))
            elif bike.status is BikeStatus.OUT_OF_ORDER:
                unavailable.append(UnavailableBike(number, UnavailableReason.OUT_OF_ORDER))

        if unavailable:
            raise BikeUnavailableError(unavailable)

        return [found[number] for number in bike_numbers]

    @staticmethod
    async def _rent_bike(rental: Rental, bike: Bike) -> RentalItem:
        try:
            item = await RentalItem.create(
                rental=rental, bike=bike, status=RentalItemStatus.RENTED, rented_bike_id=bike.id
            )
        except IntegrityError as error:
            raise BikeUnavailableError([UnavailableBike(bike.number, UnavailableReason.ALREADY_RENTED)]) from error

        bike.status = BikeStatus.RENTED
        await bike.save(update_fields=["status"])
        return item

    @staticmethod
    async def _return_item(item: RentalItem, now: datetime):
        item.set_status(RentalItemStatus.RETURNED)
        item.returned_at = now
        await item.save(update_fields=["status", "returned_at", "rented_bike_id"])

        # a bike taken out of service while rented stays out of service
        if item.bike.status is BikeStatus.RENTED:
            item.bike.status = BikeStatus.AVAILABLE
            await item.bike.save(update_fields=["status"])
