"""Pydantic schemas for backend payloads and booking handoff records."""

from boxoffice.schemas.booking import (
    Booking,
    BookingConfirmation,
    BookingCostBreakdown,
    BookingDraft,
    BookingRequest,
    ContactDetails,
)
from boxoffice.schemas.seat import (
    Seat,
    SeatAvailability,
    SeatHold,
    SeatLayout,
    SeatState,
    SeatType,
    SeatView,
)
from boxoffice.schemas.showtime import ShowtimeResponse, ShowtimeSummary

__all__ = [
    "Booking",
    "BookingConfirmation",
    "BookingCostBreakdown",
    "BookingDraft",
    "BookingRequest",
    "ContactDetails",
    "Seat",
    "SeatAvailability",
    "SeatHold",
    "SeatLayout",
    "SeatState",
    "SeatType",
    "SeatView",
    "ShowtimeResponse",
    "ShowtimeSummary",
]
