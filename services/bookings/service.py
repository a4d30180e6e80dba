"""Caller-facing entry point wiring the booking engine to a database session."""
from __future__ import annotations

from typing import List

from sqlalchemy.orm import Session

from common.models import Clock, utcnow
from common.schemas import BookingCreate, BookingRead, ItemBookings
from services.items.projector import ItemBookingProjector

from .availability import AvailabilityGuard
from .classifier import BookingState, TemporalQueryClassifier
from .lifecycle import BookingLifecycleManager
from .stores import SqlBookingStore, SqlItemStore, SqlUserStore


class BookingService:
    """
    The operations a transport layer calls, keyed by the caller's id.

    Holds no state of its own beyond the collaborators; build one per
    session with :func:`build_booking_service`.
    """

    def __init__(
        self,
        lifecycle: BookingLifecycleManager,
        classifier: TemporalQueryClassifier,
        projector: ItemBookingProjector,
    ) -> None:
        self.lifecycle = lifecycle
        self.classifier = classifier
        self.projector = projector

    def create(self, user_id: int, booking_in: BookingCreate) -> BookingRead:
        return self.lifecycle.create(user_id, booking_in)

    def update(self, user_id: int, booking_id: int, approved: bool) -> BookingRead:
        return self.lifecycle.update_booking(user_id, booking_id, approved)

    def get(self, user_id: int, booking_id: int) -> BookingRead:
        return self.lifecycle.get_booking(user_id, booking_id)

    def list_bookings(
        self,
        user_id: int,
        state: "str | BookingState" = BookingState.ALL,
        offset: int = 0,
        limit: int | None = None,
        as_owner: bool = False,
    ) -> List[BookingRead]:
        if as_owner:
            return self.classifier.list_for_owner(user_id, state, offset, limit)
        return self.classifier.list_for_booker(user_id, state, offset, limit)

    def item_bookings(self, user_id: int, item_id: int) -> ItemBookings:
        return self.projector.project_item(item_id, user_id)


def build_booking_service(db: Session, clock: Clock = utcnow) -> BookingService:
    bookings = SqlBookingStore(db)
    items = SqlItemStore(db)
    users = SqlUserStore(db)
    guard = AvailabilityGuard(items)
    return BookingService(
        lifecycle=BookingLifecycleManager(bookings, items, users, db, guard=guard, clock=clock),
        classifier=TemporalQueryClassifier(bookings, items, users, clock=clock),
        projector=ItemBookingProjector(bookings, items, clock=clock),
    )
