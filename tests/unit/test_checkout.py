"""Tests for the payment step and the booking client."""

import json
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from boxoffice.booking.checkout import Checkout, build_confirmation
from boxoffice.booking.context import BookingSession
from boxoffice.exceptions import MalformedResponseError, NoBookingDraftError, SeatConflictError
from boxoffice.schemas.booking import Booking, BookingDraft, BookingRequest, ContactDetails
from boxoffice.services.booking_client import BookingClient

CONTACT = ContactDetails(name="Asha Rao", email="asha@example.com", phone="9876543210")


def make_draft(total: float = 300.0) -> BookingDraft:
    return BookingDraft(
        showtime_id="S1",
        show_date_time=datetime(2026, 3, 14, 20, 0),
        movie_id="m-1",
        movie_title="Arrival",
        theater_id="t-1",
        theater_name="Orion Multiplex",
        theater_location="MG Road",
        screen="Screen 2",
        seats=["A1", "A2"],
        seat_ids=["S1-A1", "S1-A2"],
        total_amount=total,
    )


def make_booking_client(booking: Booking | None = None, error: Exception | None = None) -> MagicMock:
    client = MagicMock()
    client.create_booking = AsyncMock(
        return_value=booking or Booking(id="bk-1", seats=["A1", "A2"], status="CONFIRMED", ticket_number="TKT-1"),
        side_effect=error,
    )
    return client


@pytest.fixture
def booking_session() -> BookingSession:
    session = BookingSession.new()
    session.drafts.set_current_booking(make_draft())
    return session


class TestCheckout:
    def test_begin_prices_draft(self, booking_session: BookingSession) -> None:
        breakdown = Checkout(booking_session, make_booking_client()).begin()
        assert breakdown.base_amount == 300
        assert breakdown.convenience_fee == 15
        assert breakdown.gst == 57
        assert breakdown.total == 372

    def test_missing_draft_raises(self) -> None:
        checkout = Checkout(BookingSession.new(), make_booking_client())
        with pytest.raises(NoBookingDraftError):
            checkout.begin()

    async def test_submit_sends_grand_total_and_contact(self, booking_session: BookingSession) -> None:
        client = make_booking_client()

        await Checkout(booking_session, client).submit(CONTACT)

        request: BookingRequest = client.create_booking.await_args.args[0]
        assert request.showtime_id == "S1"
        assert request.seats == ["A1", "A2"]
        assert request.total_amount == 372
        assert request.customer_email == "asha@example.com"

    async def test_submit_success_consumes_draft(self, booking_session: BookingSession) -> None:
        confirmation = await Checkout(booking_session, make_booking_client()).submit(CONTACT)

        assert confirmation.booking_id == "bk-1"
        assert confirmation.ticket_number == "TKT-1"
        assert confirmation.total_amount == 372
        assert booking_session.drafts.get_current_booking() is None
        assert booking_session.drafts.get_last_confirmed_booking() == confirmation

    async def test_submit_takes_draft_once(self, booking_session: BookingSession) -> None:
        drafts = booking_session.drafts
        take = MagicMock(wraps=drafts.take_current_booking)
        drafts.take_current_booking = take

        await Checkout(booking_session, make_booking_client()).submit(CONTACT)

        take.assert_called_once_with()
        assert drafts.get_current_booking() is None

    async def test_rejected_booking_keeps_draft(self, booking_session: BookingSession) -> None:
        client = make_booking_client(error=SeatConflictError("Seat A2 is no longer available"))

        with pytest.raises(SeatConflictError):
            await Checkout(booking_session, client).submit(CONTACT)

        assert booking_session.drafts.get_current_booking() is not None
        assert booking_session.drafts.get_last_confirmed_booking() is None

    async def test_second_submit_without_draft_raises(self, booking_session: BookingSession) -> None:
        checkout = Checkout(booking_session, make_booking_client())
        await checkout.submit(CONTACT)
        with pytest.raises(NoBookingDraftError):
            await checkout.submit(CONTACT)


class TestBuildConfirmation:
    def test_backend_seats_win(self) -> None:
        booking = Booking(id="bk-2", seats=["A2"])
        confirmation = build_confirmation(booking, make_draft(), 186)
        assert confirmation.seats == ["A2"]
        assert confirmation.movie_title == "Arrival"
        assert confirmation.screen == "Screen 2"

    def test_falls_back_to_draft_seats(self) -> None:
        confirmation = build_confirmation(Booking(id="bk-3"), make_draft(), 372)
        assert confirmation.seats == ["A1", "A2"]


class TestContactDetails:
    @pytest.mark.parametrize("phone", ["12345", "98765432100", "98765abcde"])
    def test_phone_must_be_ten_digits(self, phone: str) -> None:
        with pytest.raises(ValueError):
            ContactDetails(name="Asha", email="asha@example.com", phone=phone)

    def test_email_is_checked(self) -> None:
        with pytest.raises(ValueError):
            ContactDetails(name="Asha", email="not-an-email", phone="9876543210")


# ---------------------------------------------------------------------------
# BookingClient
# ---------------------------------------------------------------------------


def booking_transport(requests: list[httpx.Request], response: httpx.Response) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return response

    return httpx.MockTransport(handler)


class TestBookingClient:
    async def test_create_booking_posts_camel_case_body(self) -> None:
        requests: list[httpx.Request] = []
        transport = booking_transport(
            requests, httpx.Response(201, json={"id": "bk-9", "status": "CONFIRMED", "seats": ["A1"]})
        )
        client = BookingClient(base_url="http://backend.test/api", transport=transport)
        request = BookingRequest(
            movie_id="m-1",
            theater_id="t-1",
            showtime_id="S1",
            showtime=datetime(2026, 3, 14, 20, 0),
            seats=["A1"],
            total_amount=186,
            customer_name="Asha Rao",
            customer_email="asha@example.com",
            customer_phone="9876543210",
        )

        booking = await client.create_booking(request)

        assert booking.id == "bk-9"
        assert booking.status == "CONFIRMED"
        body = json.loads(requests[0].content)
        assert body["showtimeId"] == "S1"
        assert body["totalAmount"] == 186
        assert body["customerPhone"] == "9876543210"
        assert body["showtime"] == "2026-03-14T20:00:00"

    async def test_conflict_is_seat_conflict(self) -> None:
        requests: list[httpx.Request] = []
        transport = booking_transport(requests, httpx.Response(409, json={"message": "Seat A1 is no longer available"}))
        client = BookingClient(base_url="http://backend.test/api", transport=transport)
        with pytest.raises(SeatConflictError):
            await client.cancel_booking("bk-1", "plans changed")

    async def test_user_bookings_must_be_a_list(self) -> None:
        requests: list[httpx.Request] = []
        transport = booking_transport(requests, httpx.Response(200, json={"id": "bk-1"}))
        client = BookingClient(base_url="http://backend.test/api", transport=transport)
        with pytest.raises(MalformedResponseError):
            await client.get_user_bookings()
        assert requests[0].url.path == "/api/bookings/my-bookings"

    async def test_cancel_sends_reason(self) -> None:
        requests: list[httpx.Request] = []
        transport = booking_transport(requests, httpx.Response(200, json={"id": "bk-1", "status": "CANCELLED"}))
        client = BookingClient(base_url="http://backend.test/api", transport=transport)

        booking = await client.cancel_booking("bk-1", "plans changed")

        assert booking.status == "CANCELLED"
        assert requests[0].url.path == "/api/bookings/bk-1/cancel"
        assert json.loads(requests[0].content) == {"reason": "plans changed"}

    async def test_get_booking_parses_response(self) -> None:
        requests: list[httpx.Request] = []
        payload = {
            "id": "bk-7",
            "status": "CONFIRMED",
            "seats": ["C1", "C2"],
            "ticketNumber": "TKT-7",
            "showtime": "2026-03-14T20:00:00",
            "totalAmount": 496,
        }
        transport = booking_transport(requests, httpx.Response(200, json=payload))
        client = BookingClient(base_url="http://backend.test/api", transport=transport)

        booking = await client.get_booking("bk-7")

        assert requests[0].method == "GET"
        assert requests[0].url.path == "/api/bookings/bk-7"
        assert booking.status == "CONFIRMED"
        assert booking.seats == ["C1", "C2"]
        assert booking.ticket_number == "TKT-7"
        assert booking.showtime == datetime(2026, 3, 14, 20, 0)
        assert booking.total_amount == 496

    async def test_get_booking_rejects_malformed_payload(self) -> None:
        transport = booking_transport([], httpx.Response(200, json={"status": "CONFIRMED"}))
        client = BookingClient(base_url="http://backend.test/api", transport=transport)
        with pytest.raises(MalformedResponseError):
            await client.get_booking("bk-7")
