"""Last/next approved booking of an item, as shown on its detail view."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from common.errors import NotFound
from common.models import Booking, BookingStatus, Clock, utcnow
from common.schemas import ItemBookingRead, ItemBookings
from services.bookings.stores import BookingStore, ItemStore

logger = logging.getLogger(__name__)


def next_booking(bookings: Sequence[Booking], now: datetime) -> Optional[Booking]:
    """Approved booking still running or upcoming, earliest ``end`` first."""
    upcoming = [b for b in bookings if b.status == BookingStatus.APPROVED and b.end > now]
    return min(upcoming, key=lambda b: b.end, default=None)


def last_booking(bookings: Sequence[Booking], now: datetime) -> Optional[Booking]:
    """Approved booking already finished, latest ``start`` first."""
    finished = [b for b in bookings if b.status == BookingStatus.APPROVED and b.end < now]
    return max(finished, key=lambda b: b.start, default=None)


def _short(booking: Optional[Booking]) -> Optional[ItemBookingRead]:
    if booking is None:
        return None
    return ItemBookingRead(id=booking.id, booker_id=booking.booker_id)


class ItemBookingProjector:
    def __init__(
        self,
        bookings: BookingStore,
        items: ItemStore,
        clock: Clock = utcnow,
    ) -> None:
        self.bookings = bookings
        self.items = items
        self.clock = clock

    def project(self, bookings: Sequence[Booking], viewer_id: int) -> ItemBookings:
        """
        Derive ``(last_booking, next_booking)`` from every booking of one item.

        - A lone booking is only ever considered as the next booking,
          whoever is looking.
        - With several bookings, a viewer who has booked the item sees
          neither; anyone else sees both.
        """
        now = self.clock()
        if len(bookings) == 1:
            return ItemBookings(next_booking=_short(next_booking(bookings, now)))
        if any(booking.booker_id == viewer_id for booking in bookings):
            logger.debug("Viewer %s is a booker; last/next bookings hidden", viewer_id)
            return ItemBookings()
        return ItemBookings(
            last_booking=_short(last_booking(bookings, now)),
            next_booking=_short(next_booking(bookings, now)),
        )

    def project_item(self, item_id: int, viewer_id: int) -> ItemBookings:
        if self.items.find_by_id(item_id) is None:
            raise NotFound(f"Item {item_id} not found", details={"item_id": item_id})
        return self.project(self.bookings.find_by_item_id(item_id), viewer_id)
