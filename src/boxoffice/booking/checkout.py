"""Payment step: turns the booking draft into a confirmed booking."""

import logging

from boxoffice.booking.context import BookingSession
from boxoffice.booking.pricing import calculate_cost_breakdown
from boxoffice.exceptions import NoBookingDraftError
from boxoffice.schemas.booking import (
    Booking,
    BookingConfirmation,
    BookingCostBreakdown,
    BookingDraft,
    BookingRequest,
    ContactDetails,
)
from boxoffice.services.booking_client import BookingClient

logger = logging.getLogger(__name__)


class Checkout:
    """
    Consumes the draft left by seat selection.

    Seat availability is not re-checked here; the backend does that when the
    booking is submitted and may reject it. A rejected submission leaves the
    draft in place so the user can retry.
    """

    def __init__(self, booking_session: BookingSession, booking_client: BookingClient) -> None:
        self.booking_session = booking_session
        self.booking_client = booking_client

    @property
    def draft(self) -> BookingDraft:
        draft = self.booking_session.drafts.get_current_booking()
        if draft is None:
            raise NoBookingDraftError()
        return draft

    def begin(self) -> BookingCostBreakdown:
        """Price the draft for display on the payment page."""
        return calculate_cost_breakdown(self.draft.total_amount)

    async def submit(self, contact: ContactDetails) -> BookingConfirmation:
        """
        Submit the booking for the current draft.

        Raises:
            NoBookingDraftError: if there is no draft (e.g. already consumed)
            BoxOfficeError: if the backend rejects the booking
        """
        draft = self.draft
        breakdown = calculate_cost_breakdown(draft.total_amount)
        request = BookingRequest(
            movie_id=draft.movie_id,
            theater_id=draft.theater_id,
            showtime_id=draft.showtime_id,
            showtime=draft.show_date_time,
            seats=list(draft.seats),
            total_amount=breakdown.total,
            customer_name=contact.name,
            customer_email=contact.email,
            customer_phone=contact.phone,
        )

        booking = await self.booking_client.create_booking(request)

        confirmation = build_confirmation(booking, draft, breakdown.total)
        drafts = self.booking_session.drafts
        drafts.set_last_confirmed_booking(confirmation)
        drafts.take_current_booking()
        logger.info(f"Booking {booking.id} confirmed for seats {confirmation.seats}")
        return confirmation


def build_confirmation(booking: Booking, draft: BookingDraft, total_amount: float) -> BookingConfirmation:
    """Combine the backend's booking with the draft's display fields."""
    return BookingConfirmation(
        booking_id=booking.id,
        ticket_number=booking.ticket_number,
        qr_code=booking.qr_code,
        seats=booking.seats or list(draft.seats),
        total_amount=total_amount,
        movie_title=draft.movie_title,
        movie_poster_url=draft.movie_poster_url,
        theater_name=draft.theater_name,
        theater_location=draft.theater_location,
        screen=draft.screen,
        showtime=draft.show_date_time,
    )
