"""In-memory handoff slots between seat selection, payment and confirmation."""

import logging

from boxoffice.schemas.booking import BookingConfirmation, BookingDraft

logger = logging.getLogger(__name__)


class BookingDraftStore:
    """
    Single-slot, last-write-wins storage for the booking in progress.

    Nothing here is persisted or shared between sessions. The draft is
    consumed once by the payment step; the last confirmation is kept for the
    success screen.
    """

    def __init__(self) -> None:
        self._draft: BookingDraft | None = None
        self._confirmation: BookingConfirmation | None = None

    def set_current_booking(self, draft: BookingDraft) -> None:
        if self._draft is not None:
            logger.debug(f"Replacing booking draft for showtime {self._draft.showtime_id}")
        self._draft = draft

    def get_current_booking(self) -> BookingDraft | None:
        return self._draft

    def clear_current_booking(self) -> None:
        self._draft = None

    def take_current_booking(self) -> BookingDraft | None:
        """Return the draft and empty the slot."""
        draft, self._draft = self._draft, None
        return draft

    def set_last_confirmed_booking(self, confirmation: BookingConfirmation) -> None:
        self._confirmation = confirmation

    def get_last_confirmed_booking(self) -> BookingConfirmation | None:
        return self._confirmation

    def clear_last_confirmed_booking(self) -> None:
        self._confirmation = None
