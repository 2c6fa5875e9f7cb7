"""Booking endpoints of the booking backend."""

import logging
from typing import Any

from pydantic import ValidationError

from boxoffice.exceptions import MalformedResponseError
from boxoffice.schemas.booking import Booking, BookingRequest
from boxoffice.services.api_client import BackendClient

logger = logging.getLogger(__name__)


class BookingClient(BackendClient):
    """Client for the /bookings resource."""

    async def create_booking(self, request: BookingRequest) -> Booking:
        """
        Submit a booking.

        The backend re-checks seat availability and may reject the booking
        with SeatConflictError (or a generic BoxOfficeError) if a seat was lost.
        """
        body = request.model_dump(mode="json", by_alias=True)
        data = await self._request(
            "POST", "/bookings", json=body, showtime_id=request.showtime_id
        )
        booking = _parse_booking(data)
        logger.info(f"Created booking {booking.id} for showtime {request.showtime_id}")
        return booking

    async def get_booking(self, booking_id: str) -> Booking:
        data = await self._request("GET", f"/bookings/{booking_id}")
        return _parse_booking(data)

    async def get_user_bookings(self) -> list[Booking]:
        data = await self._request("GET", "/bookings/my-bookings")
        if not isinstance(data, list):
            raise MalformedResponseError("Expected a list of bookings")
        return [_parse_booking(item) for item in data]

    async def cancel_booking(self, booking_id: str, reason: str | None = None) -> Booking:
        body = {"reason": reason} if reason else {}
        data = await self._request("POST", f"/bookings/{booking_id}/cancel", json=body)
        return _parse_booking(data)


def _parse_booking(data: Any) -> Booking:
    try:
        return Booking.model_validate(data)
    except ValidationError as e:
        logger.error(f"Malformed booking payload: {e}")
        raise MalformedResponseError("Malformed booking data") from e
