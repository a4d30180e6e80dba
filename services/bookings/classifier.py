"""Booking listings filtered by temporal state, for bookers and owners."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, List

from common.config import get_settings
from common.errors import InvalidRange, NotFound, UnknownState
from common.models import Booking, BookingStatus, Clock, utcnow
from common.schemas import BookingRead

from .stores import BookingStore, ItemStore, UserStore

logger = logging.getLogger(__name__)

Lookup = Callable[[int, int, int], List[Booking]]


class BookingState(str, Enum):
    ALL = "ALL"
    CURRENT = "CURRENT"
    PAST = "PAST"
    FUTURE = "FUTURE"
    WAITING = "WAITING"
    REJECTED = "REJECTED"

    @classmethod
    def parse(cls, token: "str | BookingState") -> "BookingState":
        if isinstance(token, cls):
            return token
        try:
            return cls(token)
        except ValueError as exc:
            raise UnknownState(str(token)) from exc


def page_from_offset(offset: int, limit: int) -> int:
    """
    Translate an ``offset, limit`` pair into a page index.

    Positive offsets become ``offset // limit``; zero passes through.
    Offsets that are not a multiple of ``limit`` round down to the page
    containing them rather than starting mid-page.
    """
    if limit <= 0:
        raise InvalidRange("Page size must be positive", details={"limit": limit})
    if offset < 0:
        raise InvalidRange("Offset must not be negative", details={"offset": offset})
    return offset // limit if offset > 0 else offset


class TemporalQueryClassifier:
    """
    Maps a ``BookingState`` to the store lookup for the caller's role.

    Each role has one table with an entry per state, so adding a state
    without a lookup fails at construction time instead of at query time.
    """

    def __init__(
        self,
        bookings: BookingStore,
        items: ItemStore,
        users: UserStore,
        clock: Clock = utcnow,
    ) -> None:
        self.bookings = bookings
        self.items = items
        self.users = users
        self.clock = clock
        self._booker_lookups = self._checked(
            {
                BookingState.ALL: bookings.find_by_booker,
                BookingState.CURRENT: self._at_now(bookings.find_current_by_booker),
                BookingState.PAST: self._at_now(bookings.find_past_by_booker),
                BookingState.FUTURE: self._at_now(bookings.find_future_by_booker),
                BookingState.WAITING: self._with_status(bookings.find_by_booker_and_status, BookingStatus.WAITING),
                BookingState.REJECTED: self._with_status(bookings.find_by_booker_and_status, BookingStatus.REJECTED),
            }
        )
        self._owner_lookups = self._checked(
            {
                BookingState.ALL: bookings.find_by_owner,
                BookingState.CURRENT: self._at_now(bookings.find_current_by_owner),
                BookingState.PAST: self._at_now(bookings.find_past_by_owner),
                BookingState.FUTURE: self._at_now(bookings.find_future_by_owner),
                BookingState.WAITING: self._with_status(bookings.find_by_owner_and_status, BookingStatus.WAITING),
                BookingState.REJECTED: self._with_status(bookings.find_by_owner_and_status, BookingStatus.REJECTED),
            }
        )

    @staticmethod
    def _checked(table: Dict[BookingState, Lookup]) -> Dict[BookingState, Lookup]:
        missing = set(BookingState) - set(table)
        if missing:
            raise ValueError(f"No lookup for states: {sorted(state.value for state in missing)}")
        return table

    def _at_now(self, lookup: Callable[..., List[Booking]]) -> Lookup:
        def run(subject_id: int, page: int, size: int) -> List[Booking]:
            return lookup(subject_id, self.clock(), page, size)

        return run

    @staticmethod
    def _with_status(lookup: Callable[..., List[Booking]], status: BookingStatus) -> Lookup:
        def run(subject_id: int, page: int, size: int) -> List[Booking]:
            return lookup(subject_id, status, page, size)

        return run

    def list_for_booker(
        self,
        booker_id: int,
        state: "str | BookingState" = BookingState.ALL,
        offset: int = 0,
        limit: int | None = None,
    ) -> List[BookingRead]:
        """Bookings made by ``booker_id`` in ``state``, newest start first."""
        category = BookingState.parse(state)
        page, size = self._paging(offset, limit)
        if self.users.find_by_id(booker_id) is None:
            raise NotFound(f"User {booker_id} not found", details={"user_id": booker_id})
        result = self._booker_lookups[category](booker_id, page, size)
        logger.debug("Booker %s: %d %s bookings on page %d", booker_id, len(result), category.value, page)
        return [BookingRead.from_booking(booking) for booking in result]

    def list_for_owner(
        self,
        owner_id: int,
        state: "str | BookingState" = BookingState.ALL,
        offset: int = 0,
        limit: int | None = None,
    ) -> List[BookingRead]:
        """Bookings of every item owned by ``owner_id`` in ``state``, newest start first."""
        category = BookingState.parse(state)
        page, size = self._paging(offset, limit)
        if not self.items.find_by_owner(owner_id):
            raise NotFound(f"User {owner_id} owns no items", details={"user_id": owner_id})
        result = self._owner_lookups[category](owner_id, page, size)
        logger.debug("Owner %s: %d %s bookings on page %d", owner_id, len(result), category.value, page)
        return [BookingRead.from_booking(booking) for booking in result]

    @staticmethod
    def _paging(offset: int, limit: int | None) -> tuple[int, int]:
        settings = get_settings()
        size = settings.default_page_size if limit is None else limit
        if size > settings.max_page_size:
            raise InvalidRange(
                f"Limit must not exceed {settings.max_page_size}",
                details={"limit": size, "max_page_size": settings.max_page_size},
            )
        return page_from_offset(offset, size), size
