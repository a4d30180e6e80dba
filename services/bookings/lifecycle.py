"""
Creation, approval/rejection and retrieval of single bookings.

Every operation is a read -> validate -> write -> re-read sequence
against the stores; validation failures abort before any write. The
writes of one operation are committed together through the unit of work
and rolled back together if any of them fails.

Decisions are written with a conditional update (``WHERE status =
'WAITING'``), so of two concurrent ``update_booking`` calls only one can
win and the other gets :class:`~common.errors.Conflict`.

``create`` has no such guard: availability is read, then the booking is
written, so two concurrent requests for the same available item can both
end up ``WAITING``, and the owner can approve both because decisions do
not consult the availability flag. Callers that need a single
reservation per item must serialize ``create`` per item themselves.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

from common.audit import audit_transition
from common.errors import (
    AlreadyDecided,
    Conflict,
    Forbidden,
    InvalidRange,
    NotFound,
    SelfBookingNotAllowed,
)
from common.models import Booking, BookingStatus, Clock, Item, utcnow
from common.schemas import BookingCreate, BookingRead

from .availability import AvailabilityGuard
from .stores import BookingStore, ItemStore, UnitOfWork, UserStore

logger = logging.getLogger(__name__)


class BookingLifecycleManager:
    def __init__(
        self,
        bookings: BookingStore,
        items: ItemStore,
        users: UserStore,
        uow: UnitOfWork,
        guard: AvailabilityGuard | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.bookings = bookings
        self.items = items
        self.users = users
        self.uow = uow
        self.guard = guard or AvailabilityGuard(items)
        self.clock = clock

    def create(self, booker_id: int, request: BookingCreate) -> BookingRead:
        """Open a ``WAITING`` booking of ``request.item_id`` for ``booker_id``."""
        self._validate_range(request.start, request.end)
        logger.debug("Booking range %s - %s accepted", request.start, request.end)

        if self.users.find_by_id(booker_id) is None:
            raise NotFound(f"User {booker_id} not found", details={"user_id": booker_id})
        item = self._get_item(request.item_id)

        if item.owner_id == booker_id:
            raise SelfBookingNotAllowed(
                f"User {booker_id} cannot book their own item {item.id}",
                details={"user_id": booker_id, "item_id": item.id},
            )
        self.guard.ensure_available(item.id)

        with self._transaction():
            booking = self.bookings.save(
                Booking(
                    start=request.start,
                    end=request.end,
                    status=BookingStatus.WAITING,
                    item_id=item.id,
                    booker_id=booker_id,
                )
            )
        audit_transition("created", booking.id, booker_id, item=item.id)
        return BookingRead.from_booking(booking)

    def update_booking(self, owner_id: int, booking_id: int, approve: bool) -> BookingRead:
        """Approve or reject a ``WAITING`` booking on behalf of the item owner."""
        booking = self._get_booking(booking_id)
        if booking.status != BookingStatus.WAITING:
            raise AlreadyDecided(
                f"Booking {booking_id} is already {booking.status.value}",
                details={"booking_id": booking_id, "status": booking.status.value},
            )

        item = self._get_item(booking.item_id)
        if item.owner_id != owner_id:
            raise Forbidden(
                f"User {owner_id} does not own item {item.id}",
                details={"user_id": owner_id, "item_id": item.id},
            )
        logger.debug("Booking %s passed decision checks", booking_id)

        new_status = BookingStatus.APPROVED if approve else BookingStatus.REJECTED
        with self._transaction():
            if not self.bookings.update_status_if(booking_id, BookingStatus.WAITING, new_status):
                raise Conflict(details={"booking_id": booking_id})
            if approve:
                self.guard.set_available(item.id, False)

        audit_transition(new_status.value.lower(), booking_id, owner_id, item=item.id)
        return BookingRead.from_booking(self._get_booking(booking_id))

    def get_booking(self, user_id: int, booking_id: int) -> BookingRead:
        booking = self._get_booking(booking_id)
        item = self._get_item(booking.item_id)
        if user_id not in (booking.booker_id, item.owner_id):
            raise Forbidden(
                f"User {user_id} cannot view booking {booking_id}",
                details={"user_id": user_id, "booking_id": booking_id},
            )
        return BookingRead.from_booking(booking)

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            yield
            self.uow.commit()
        except Exception:
            self.uow.rollback()
            raise

    def _validate_range(self, start: datetime, end: datetime) -> None:
        if start >= end:
            raise InvalidRange("Start must be before end", details={"start": str(start), "end": str(end)})
        now = self.clock()
        if start < now or end < now:
            raise InvalidRange("Booking cannot start or end in the past", details={"now": str(now)})

    def _get_booking(self, booking_id: int) -> Booking:
        booking = self.bookings.find_by_id(booking_id)
        if booking is None:
            raise NotFound(f"Booking {booking_id} not found", details={"booking_id": booking_id})
        return booking

    def _get_item(self, item_id: int) -> Item:
        item = self.items.find_by_id(item_id)
        if item is None:
            raise NotFound(f"Item {item_id} not found", details={"item_id": item_id})
        return item
