"""Unit tests for schema validation."""
from datetime import datetime
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from common.models import BookingStatus
from common.schemas import BookingCreate, BookingRead, ItemBookings


class TestBookingCreate:
    """Test the booking request schema."""

    def test_booking_create_valid(self):
        """Test valid booking request."""
        booking = BookingCreate(item_id=1, start=datetime(2030, 1, 1, 10), end=datetime(2030, 1, 1, 12))

        assert booking.item_id == 1
        assert booking.end > booking.start

    def test_booking_create_parses_iso_strings(self):
        """Test ISO 8601 timestamps are accepted."""
        booking = BookingCreate(item_id=3, start="2030-01-01T10:00:00", end="2030-01-02T10:00:00")

        assert booking.start == datetime(2030, 1, 1, 10)

    def test_booking_create_converts_offsets_to_naive_utc(self):
        """Test zoned timestamps are stored as naive UTC."""
        booking = BookingCreate(item_id=3, start="2030-01-01T12:00:00+02:00", end="2030-01-02T10:00:00Z")

        assert booking.start == datetime(2030, 1, 1, 10)
        assert booking.end == datetime(2030, 1, 2, 10)
        assert booking.start.tzinfo is None
        assert booking.end.tzinfo is None

    def test_booking_create_requires_item(self):
        """Test that item_id is mandatory."""
        with pytest.raises(ValidationError):
            BookingCreate(start=datetime(2030, 1, 1), end=datetime(2030, 1, 2))

    def test_booking_create_rejects_non_positive_item(self):
        """Test that item ids must be positive."""
        with pytest.raises(ValidationError):
            BookingCreate(item_id=0, start=datetime(2030, 1, 1), end=datetime(2030, 1, 2))

    def test_booking_create_leaves_range_rule_to_engine(self):
        """Test equal start and end pass schema validation."""
        moment = datetime(2030, 1, 1)
        booking = BookingCreate(item_id=1, start=moment, end=moment)

        assert booking.start == booking.end


class TestBookingRead:
    """Test the booking projection."""

    def test_from_attributes(self):
        """Test projection built from an ORM-like object."""
        source = SimpleNamespace(
            id=7,
            start=datetime(2030, 1, 1),
            end=datetime(2030, 1, 2),
            status=BookingStatus.WAITING,
            item=SimpleNamespace(id=3, name="Tent", available=True),
            booker=SimpleNamespace(id=5, name="Ann"),
        )

        read = BookingRead.model_validate(source)

        assert read.id == 7
        assert read.item.name == "Tent"
        assert read.booker.id == 5
        assert read.model_dump()["booker"] == {"id": 5}

    def test_status_must_be_known(self):
        """Test that unknown statuses are rejected."""
        with pytest.raises(ValidationError):
            BookingRead(
                id=1,
                start=datetime(2030, 1, 1),
                end=datetime(2030, 1, 2),
                status="CANCELLED",
                item={"id": 1, "name": "Tent"},
                booker={"id": 2},
            )


class TestItemBookings:
    """Test the item detail projection schema."""

    def test_item_bookings_default_empty(self):
        view = ItemBookings()

        assert view.last_booking is None
        assert view.next_booking is None
