"""
Store contracts the booking engine depends on, plus SQLAlchemy adapters.

The engine never caches records between calls: every read goes through
one of these stores. Writes are flushed into the session transaction and
never committed here; the caller commits once per operation.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from sqlalchemy.orm import Query, Session

from common.models import Booking, BookingStatus, Item, User


class UnitOfWork(Protocol):
    def commit(self) -> None: ...

    def rollback(self) -> None: ...


class UserStore(Protocol):
    def find_by_id(self, user_id: int) -> Optional[User]: ...


class ItemStore(Protocol):
    def find_by_id(self, item_id: int) -> Optional[Item]: ...

    def is_available(self, item_id: int) -> bool: ...

    def set_available(self, item_id: int, available: bool) -> None: ...

    def find_by_owner(self, owner_id: int) -> List[Item]: ...


class BookingStore(Protocol):
    def save(self, booking: Booking) -> Booking: ...

    def find_by_id(self, booking_id: int) -> Optional[Booking]: ...

    def update_status(self, booking_id: int, status: BookingStatus) -> None: ...

    def update_status_if(
        self, booking_id: int, expected: BookingStatus, status: BookingStatus
    ) -> bool: ...

    def find_by_item_id(self, item_id: int) -> List[Booking]: ...

    def find_by_booker(self, booker_id: int, page: int, size: int) -> List[Booking]: ...

    def find_by_booker_and_status(
        self, booker_id: int, status: BookingStatus, page: int, size: int
    ) -> List[Booking]: ...

    def find_current_by_booker(self, booker_id: int, now: datetime, page: int, size: int) -> List[Booking]: ...

    def find_past_by_booker(self, booker_id: int, now: datetime, page: int, size: int) -> List[Booking]: ...

    def find_future_by_booker(self, booker_id: int, now: datetime, page: int, size: int) -> List[Booking]: ...

    def find_by_owner(self, owner_id: int, page: int, size: int) -> List[Booking]: ...

    def find_by_owner_and_status(
        self, owner_id: int, status: BookingStatus, page: int, size: int
    ) -> List[Booking]: ...

    def find_current_by_owner(self, owner_id: int, now: datetime, page: int, size: int) -> List[Booking]: ...

    def find_past_by_owner(self, owner_id: int, now: datetime, page: int, size: int) -> List[Booking]: ...

    def find_future_by_owner(self, owner_id: int, now: datetime, page: int, size: int) -> List[Booking]: ...


class SqlUserStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)


class SqlItemStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_id(self, item_id: int) -> Optional[Item]:
        return self.db.get(Item, item_id, populate_existing=True)

    def is_available(self, item_id: int) -> bool:
        available = self.db.query(Item.available).filter(Item.id == item_id).scalar()
        return bool(available)

    def set_available(self, item_id: int, available: bool) -> None:
        self.db.query(Item).filter(Item.id == item_id).update(
            {Item.available: available}, synchronize_session=False
        )

    def find_by_owner(self, owner_id: int) -> List[Item]:
        return self.db.query(Item).filter(Item.owner_id == owner_id).order_by(Item.id).all()


class SqlBookingStore:
    """Booking persistence; every listing is ordered by ``start`` descending."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def save(self, booking: Booking) -> Booking:
        self.db.add(booking)
        self.db.flush()
        return booking

    def find_by_id(self, booking_id: int) -> Optional[Booking]:
        return self.db.get(Booking, booking_id, populate_existing=True)

    def update_status(self, booking_id: int, status: BookingStatus) -> None:
        self.db.query(Booking).filter(Booking.id == booking_id).update(
            {Booking.status: status}, synchronize_session=False
        )

    def update_status_if(self, booking_id: int, expected: BookingStatus, status: BookingStatus) -> bool:
        """Write ``status`` only while the row still holds ``expected``."""
        matched = (
            self.db.query(Booking)
            .filter(Booking.id == booking_id, Booking.status == expected)
            .update({Booking.status: status}, synchronize_session=False)
        )
        return matched == 1

    def find_by_item_id(self, item_id: int) -> List[Booking]:
        return self.db.query(Booking).filter(Booking.item_id == item_id).order_by(Booking.id).all()

    def _booker_query(self, booker_id: int) -> Query:
        return self.db.query(Booking).filter(Booking.booker_id == booker_id)

    def _owner_query(self, owner_id: int) -> Query:
        return self.db.query(Booking).join(Booking.item).filter(Item.owner_id == owner_id)

    @staticmethod
    def _page(query: Query, page: int, size: int) -> List[Booking]:
        return query.order_by(Booking.start.desc()).offset(page * size).limit(size).all()

    def find_by_booker(self, booker_id: int, page: int, size: int) -> List[Booking]:
        return self._page(self._booker_query(booker_id), page, size)

    def find_by_booker_and_status(
        self, booker_id: int, status: BookingStatus, page: int, size: int
    ) -> List[Booking]:
        return self._page(self._booker_query(booker_id).filter(Booking.status == status), page, size)

    def find_current_by_booker(self, booker_id: int, now: datetime, page: int, size: int) -> List[Booking]:
        query = self._booker_query(booker_id).filter(Booking.start <= now, Booking.end >= now)
        return self._page(query, page, size)

    def find_past_by_booker(self, booker_id: int, now: datetime, page: int, size: int) -> List[Booking]:
        return self._page(self._booker_query(booker_id).filter(Booking.end < now), page, size)

    def find_future_by_booker(self, booker_id: int, now: datetime, page: int, size: int) -> List[Booking]:
        return self._page(self._booker_query(booker_id).filter(Booking.start > now), page, size)

    def find_by_owner(self, owner_id: int, page: int, size: int) -> List[Booking]:
        return self._page(self._owner_query(owner_id), page, size)

    def find_by_owner_and_status(
        self, owner_id: int, status: BookingStatus, page: int, size: int
    ) -> List[Booking]:
        return self._page(self._owner_query(owner_id).filter(Booking.status == status), page, size)

    def find_current_by_owner(self, owner_id: int, now: datetime, page: int, size: int) -> List[Booking]:
        query = self._owner_query(owner_id).filter(Booking.start <= now, Booking.end >= now)
        return self._page(query, page, size)

    def find_past_by_owner(self, owner_id: int, now: datetime, page: int, size: int) -> List[Booking]:
        return self._page(self._owner_query(owner_id).filter(Booking.end < now), page, size)

    def find_future_by_owner(self, owner_id: int, now: datetime, page: int, size: int) -> List[Booking]:
        return self._page(self._owner_query(owner_id).filter(Booking.start > now), page, size)
