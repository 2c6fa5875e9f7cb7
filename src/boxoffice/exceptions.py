"""Exceptions raised by the booking client."""


class BoxOfficeError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class BackendUnavailableError(BoxOfficeError):
    """Transport failure, timeout or 5xx from the booking backend."""


class SeatConflictError(BoxOfficeError):
    """The backend refused a hold or booking because a seat is taken."""

    def __init__(self, message: str):
        super().__init__(message, 409)


class ShowtimeNotFoundError(BoxOfficeError):
    def __init__(self, showtime_id: str):
        self.showtime_id = showtime_id
        super().__init__(f"Showtime not found: {showtime_id}", 404)


class MalformedResponseError(BoxOfficeError):
    """A backend payload could not be parsed."""


class SeatDataError(MalformedResponseError):
    """Seat payload from the backend could not be parsed."""


class NoBookingDraftError(BoxOfficeError):
    def __init__(self, message: str = "No booking in progress"):
        super().__init__(message)


class EmptySelectionError(BoxOfficeError):
    def __init__(self, message: str = "Please select at least one seat to continue."):
        super().__init__(message)
