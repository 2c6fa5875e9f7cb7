"""Seat endpoints of the booking backend: fetch, bootstrap, hold and release."""

import logging
from typing import Any

from pydantic import ValidationError

from boxoffice.exceptions import BoxOfficeError, SeatDataError
from boxoffice.schemas.seat import Seat, SeatAvailability, SeatLayout
from boxoffice.services.api_client import BackendClient

logger = logging.getLogger(__name__)


class SeatClient(BackendClient):
    """Client for the /seats resource."""

    async def fetch_seats(self, showtime_id: str) -> list[Seat]:
        """
        Fetch the full seat-state list for a showtime.

        Args:
            showtime_id: Showtime identifier

        Returns:
            Seats as reported by the backend (may be empty before bootstrap)

        Raises:
            BackendUnavailableError: on transport errors (callers that poll should swallow it)
            ShowtimeNotFoundError: if the showtime does not exist
            SeatDataError: if the payload is not a list of seats
        """
        data = await self._request(
            "GET", f"/seats/showtime/{showtime_id}", showtime_id=showtime_id
        )
        return parse_seats(data, showtime_id)

    async def initialize_seats(self, showtime_id: str) -> None:
        """Ask the backend to create the seat grid for a showtime that has none."""
        logger.info(f"Initializing seats for showtime {showtime_id}")
        await self._request(
            "POST", f"/seats/showtime/{showtime_id}/initialize", json={}, showtime_id=showtime_id
        )

    async def get_seat_layout(self, showtime_id: str) -> SeatLayout:
        """
        Load the seat layout, bootstrapping the seat list if it is empty.

        Returns:
            SeatLayout for the showtime
        """
        seats = await self.fetch_seats(showtime_id)
        if not seats:
            await self.initialize_seats(showtime_id)
            seats = await self.fetch_seats(showtime_id)
        return SeatLayout(showtime_id=showtime_id, seats=seats)

    async def get_availability(self, showtime_id: str) -> list[SeatAvailability]:
        seats = await self.fetch_seats(showtime_id)
        return [SeatAvailability.from_seat(seat) for seat in seats]

    async def hold_seats(self, showtime_id: str, seat_ids: list[str], session_id: str) -> bool:
        """
        Place or extend a hold on seats for a session.

        Args:
            showtime_id: Showtime identifier
            seat_ids: Seats to hold
            session_id: Session the hold is attributed to

        Returns:
            True if the backend accepted the hold, False otherwise
        """
        payload = {"showtimeId": showtime_id, "seatIds": list(seat_ids), "sessionId": session_id}
        try:
            await self._request("POST", "/seats/hold", json=payload)
        except BoxOfficeError as e:
            logger.warning(f"Hold failed for seats {seat_ids} on {showtime_id}: {e}")
            return False
        return True

    async def extend_hold(self, showtime_id: str, seat_ids: list[str], session_id: str) -> bool:
        """Refresh the hold expiry; the backend treats this as a new hold."""
        return await self.hold_seats(showtime_id, seat_ids, session_id)

    async def release_seats(self, showtime_id: str, seat_ids: list[str]) -> bool:
        """
        Drop the hold on seats. The backend enforces ownership.

        Returns:
            True if the backend accepted the release, False otherwise
        """
        payload = {"showtimeId": showtime_id, "seatIds": list(seat_ids)}
        try:
            await self._request("POST", "/seats/release", json=payload)
        except BoxOfficeError as e:
            logger.warning(f"Release failed for seats {seat_ids} on {showtime_id}: {e}")
            return False
        return True


def parse_seats(data: Any, showtime_id: str) -> list[Seat]:
    """
    Validate a seat-list payload.

    Raises:
        SeatDataError: if the payload is not a list of well-formed seats
    """
    if data is None:
        return []
    if not isinstance(data, list):
        raise SeatDataError(f"Expected a seat list for showtime {showtime_id}, got {type(data).__name__}")
    try:
        return [Seat.model_validate(item) for item in data]
    except ValidationError as e:
        logger.error(f"Malformed seat data for showtime {showtime_id}: {e}")
        raise SeatDataError(f"Malformed seat data for showtime {showtime_id}") from e
