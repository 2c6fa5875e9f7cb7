"""Explicit per-tab booking context threaded through seat selection and payment."""

from dataclasses import dataclass, field

from boxoffice.booking.draft_store import BookingDraftStore
from boxoffice.selection.session import SeatHoldSessionManager, generate_session_id


@dataclass
class BookingSession:
    """
    Everything one tab's booking attempt shares between steps.

    Hosts create one per tab and pass it to the seat-selection screen and
    the checkout step instead of reaching for module-level state.
    """

    session_id: str
    drafts: BookingDraftStore = field(default_factory=BookingDraftStore)

    @classmethod
    def new(cls) -> "BookingSession":
        return cls(session_id=generate_session_id())

    @classmethod
    def for_tab(cls, manager: SeatHoldSessionManager) -> "BookingSession":
        """Reuse the session id kept in the manager's tab storage, creating it if absent."""
        return cls(session_id=manager.ensure_session_id())
