"""Showtime search and lookups used to reach a showtime and fill a booking draft."""

import datetime
import logging
from typing import Any

from pydantic import ValidationError

from boxoffice.exceptions import MalformedResponseError
from boxoffice.schemas.showtime import ShowtimeResponse, ShowtimeSummary
from boxoffice.services.api_client import BackendClient

logger = logging.getLogger(__name__)


class ShowtimeClient(BackendClient):
    """Client for the /showtimes resource."""

    async def list_showtimes(
        self,
        movie_id: str | None = None,
        theater_id: str | None = None,
        date: datetime.date | None = None,
    ) -> list[ShowtimeResponse]:
        """
        Search showtimes. Filters that are None are not sent.

        Args:
            movie_id: Only showtimes of this movie
            theater_id: Only showtimes at this theater
            date: Only showtimes on this day

        Returns:
            Matching showtimes, in backend order
        """
        params: dict[str, Any] = {}
        if movie_id:
            params["movieId"] = movie_id
        if theater_id:
            params["theaterId"] = theater_id
        if date is not None:
            params["date"] = date.isoformat()
        data = await self._request("GET", "/showtimes", params=params or None)
        return _parse_showtimes(data)

    async def get_showtimes_by_movie(
        self, movie_id: str, date: datetime.date | None = None
    ) -> list[ShowtimeResponse]:
        params = {"date": date.isoformat()} if date is not None else None
        data = await self._request("GET", f"/showtimes/movie/{movie_id}", params=params)
        return _parse_showtimes(data)

    async def get_showtime(self, showtime_id: str) -> ShowtimeSummary:
        """
        Fetch a showtime with its movie and theater summary.

        Raises:
            ShowtimeNotFoundError: if the showtime does not exist
            MalformedResponseError: if the payload cannot be parsed
        """
        data = await self._request("GET", f"/showtimes/{showtime_id}", showtime_id=showtime_id)
        try:
            showtime = ShowtimeResponse.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed showtime payload for {showtime_id}: {e}")
            raise MalformedResponseError(f"Malformed showtime data for {showtime_id}") from e
        return ShowtimeSummary.from_response(showtime)


def _parse_showtimes(data: Any) -> list[ShowtimeResponse]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise MalformedResponseError("Expected a list of showtimes")
    try:
        return [ShowtimeResponse.model_validate(item) for item in data]
    except ValidationError as e:
        logger.error(f"Malformed showtime list payload: {e}")
        raise MalformedResponseError("Malformed showtime data") from e
