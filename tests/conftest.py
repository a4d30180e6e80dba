import os
from datetime import datetime
from typing import Callable, Generator

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("AUDIT_LOG_ENABLED", "false")

from common.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from common.database import Base, SessionLocal, engine  # noqa: E402
from common.models import Booking, BookingStatus, Item, User  # noqa: E402
from services.bookings.service import BookingService, build_booking_service  # noqa: E402

NOW = datetime(2026, 3, 15, 12, 0, 0)


@pytest.fixture(autouse=True, scope="function")
def _create_test_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def clock(now) -> Callable[[], datetime]:
    return lambda: now


@pytest.fixture()
def service(db_session, clock) -> BookingService:
    return build_booking_service(db_session, clock=clock)


@pytest.fixture()
def owner(db_session) -> User:
    user = User(name="Owner", email="owner@example.com")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def booker(db_session) -> User:
    user = User(name="Booker", email="booker@example.com")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def stranger(db_session) -> User:
    user = User(name="Stranger", email="stranger@example.com")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def item(db_session, owner) -> Item:
    drill = Item(name="Drill", description="Cordless drill", available=True, owner_id=owner.id)
    db_session.add(drill)
    db_session.commit()
    return drill


@pytest.fixture()
def make_booking(db_session) -> Callable[..., Booking]:
    """Insert a booking directly, bypassing the creation rules."""

    def factory(
        item: Item,
        booker: User,
        start: datetime,
        end: datetime,
        status: BookingStatus = BookingStatus.WAITING,
    ) -> Booking:
        booking = Booking(item_id=item.id, booker_id=booker.id, start=start, end=end, status=status)
        db_session.add(booking)
        db_session.commit()
        return booking

    return factory
