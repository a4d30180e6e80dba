"""Pydantic schemas exchanged with the booking engine's callers."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .models import Booking, BookingStatus, to_naive_utc


class BookingCreate(BaseModel):
    item_id: int = Field(..., gt=0)
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _as_naive_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class ItemShort(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class BookerShort(BaseModel):
    id: int

    model_config = {"from_attributes": True}


class BookingRead(BaseModel):
    id: int
    start: datetime
    end: datetime
    status: BookingStatus
    item: ItemShort
    booker: BookerShort

    model_config = {"from_attributes": True}

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingRead":
        return cls.model_validate(booking)


class ItemBookingRead(BaseModel):
    id: int
    booker_id: int

    model_config = {"from_attributes": True}


class ItemBookings(BaseModel):
    """Last and next approved bookings shown on an item's detail view."""

    last_booking: Optional[ItemBookingRead] = None
    next_booking: Optional[ItemBookingRead] = None
