"""Booking draft handoff, pricing and the payment step."""

from boxoffice.booking.checkout import Checkout, build_confirmation
from boxoffice.booking.context import BookingSession
from boxoffice.booking.draft_store import BookingDraftStore
from boxoffice.booking.pricing import calculate_cost_breakdown

__all__ = [
    "BookingDraftStore",
    "BookingSession",
    "Checkout",
    "build_confirmation",
    "calculate_cost_breakdown",
]
