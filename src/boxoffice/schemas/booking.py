"""Pydantic schemas for booking data."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingDraft(BaseModel):
    """
    Handoff record from seat selection to payment.

    Movie and theater fields are for display only and are not re-validated.
    """

    showtime_id: str
    show_date_time: datetime
    movie_id: str
    movie_title: str
    movie_poster_url: str | None = None
    theater_id: str
    theater_name: str
    theater_location: str | None = None
    screen: str | None = None
    seats: list[str]  # labels, e.g. ["A1", "A2"]
    seat_ids: list[str] = Field(default_factory=list)
    total_amount: float = Field(ge=0)


class BookingCostBreakdown(BaseModel):
    base_amount: float
    convenience_fee: int
    gst: int
    total: float


class ContactDetails(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str = Field(pattern=r"^\d{10}$")


class BookingRequest(_CamelModel):
    """Body of POST /bookings."""

    movie_id: str
    theater_id: str
    showtime_id: str
    showtime: datetime
    seats: list[str]
    total_amount: float
    customer_name: str
    customer_email: str
    customer_phone: str


class Booking(_CamelModel):
    """Booking as returned by the backend."""

    id: str
    user_id: str | None = None
    movie_id: str | None = None
    movie_title: str | None = None
    movie_poster_url: str | None = None
    theater_id: str | None = None
    theater_name: str | None = None
    theater_location: str | None = None
    showtime_id: str | None = None
    showtime: datetime | None = None
    screen: str | None = None
    ticket_price: float | None = None
    seats: list[str] = Field(default_factory=list)
    total_amount: float = 0
    booking_date: datetime | None = None
    status: Literal["PENDING", "CONFIRMED", "CANCELLED"] = "PENDING"
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    payment_id: str | None = None
    qr_code: str | None = None
    ticket_number: str | None = None
    refund_amount: float | None = None
    refund_date: datetime | None = None
    cancellation_reason: str | None = None


class BookingConfirmation(BaseModel):
    booking_id: str
    ticket_number: str | None = None
    qr_code: str | None = None
    seats: list[str]
    total_amount: float
    movie_title: str
    movie_poster_url: str | None = None
    theater_name: str
    theater_location: str | None = None
    screen: str | None = None
    showtime: datetime
