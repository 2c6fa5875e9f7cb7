"""Shared HTTP plumbing for the booking backend REST clients."""

import logging
from typing import Any

import httpx

from boxoffice.config import settings
from boxoffice.exceptions import (
    BackendUnavailableError,
    BoxOfficeError,
    SeatConflictError,
    ShowtimeNotFoundError,
)

logger = logging.getLogger(__name__)


class BackendClient:
    """
    Base class for clients of the booking backend.

    A fresh ``httpx.AsyncClient`` is opened for every call. Errors are
    translated into the ``boxoffice.exceptions`` taxonomy so callers never
    have to know about httpx.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. "https://tickets.example.com/api" (uses settings if not provided)
            token: Bearer token attached to every request (uses settings if not provided)
            timeout: Request timeout in seconds (uses settings if not provided)
            transport: Optional httpx transport, used by tests to mount an in-process app
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token if token is not None else settings.api_token
        self.timeout = timeout if timeout is not None else settings.api_timeout
        self.transport = transport

    def _client_kwargs(self) -> dict[str, Any]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        kwargs: dict[str, Any] = {
            "base_url": self.base_url,
            "timeout": httpx.Timeout(self.timeout),
            "headers": headers,
        }
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return kwargs

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        showtime_id: str | None = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body (or None when empty).

        Args:
            method: HTTP method
            path: Path relative to the API root
            json: Optional JSON body
            params: Optional query parameters
            showtime_id: Showtime the call concerns; a 404 becomes ShowtimeNotFoundError

        Raises:
            BackendUnavailableError: transport failure, timeout or 5xx
            SeatConflictError: 409 from the backend
            ShowtimeNotFoundError: 404 for a showtime-scoped call
            BoxOfficeError: any other 4xx
        """
        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                response = await client.request(method, path, json=json, params=params)
                response.raise_for_status()

        except httpx.HTTPStatusError as e:
            raise self._translate_status_error(e.response, method, path, showtime_id) from e

        except httpx.TimeoutException as e:
            logger.error(f"Backend timeout: {method} {path}")
            raise BackendUnavailableError(f"Timed out calling {method} {path}") from e

        except httpx.HTTPError as e:
            logger.error(f"Backend request failed: {method} {path}: {e}")
            raise BackendUnavailableError(f"{method} {path} failed: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            # Some endpoints answer with a plain-text confirmation
            return response.text

    def _translate_status_error(
        self,
        response: httpx.Response,
        method: str,
        path: str,
        showtime_id: str | None,
    ) -> BoxOfficeError:
        status = response.status_code
        message = _error_message(response) or f"{method} {path} returned HTTP {status}"

        if status >= 500:
            logger.error(f"Backend error {status} for {method} {path}: {message}")
            return BackendUnavailableError(message, status)

        logger.warning(f"Backend rejected {method} {path} with {status}: {message}")
        if status == 409:
            return SeatConflictError(message)
        if showtime_id is not None and (
            status == 404 or (status == 400 and "showtime not found" in message.lower())
        ):
            return ShowtimeNotFoundError(showtime_id)
        return BoxOfficeError(message, status)


def _error_message(response: httpx.Response) -> str | None:
    """Extract the backend's {"message": ...} error text, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        return str(message) if message else None
    return None
