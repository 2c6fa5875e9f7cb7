"""Tests for the booking draft store and booking session context."""

from datetime import datetime

from boxoffice.booking.context import BookingSession
from boxoffice.booking.draft_store import BookingDraftStore
from boxoffice.schemas.booking import BookingConfirmation, BookingDraft
from boxoffice.selection.session import MemorySessionStorage, SeatHoldSessionManager


def make_draft(seats: list[str] | None = None, total: float = 300.0) -> BookingDraft:
    return BookingDraft(
        showtime_id="S1",
        show_date_time=datetime(2026, 3, 14, 20, 0),
        movie_id="m-1",
        movie_title="Arrival",
        theater_id="t-1",
        theater_name="Orion Multiplex",
        seats=seats or ["A1", "A2"],
        total_amount=total,
    )


class TestBookingDraftStore:
    def test_empty_by_default(self) -> None:
        store = BookingDraftStore()
        assert store.get_current_booking() is None
        assert store.get_last_confirmed_booking() is None

    def test_set_then_get(self) -> None:
        store = BookingDraftStore()
        draft = make_draft()
        store.set_current_booking(draft)
        assert store.get_current_booking() == draft

    def test_last_write_wins(self) -> None:
        store = BookingDraftStore()
        store.set_current_booking(make_draft(["A1"]))
        store.set_current_booking(make_draft(["B4"]))
        assert store.get_current_booking().seats == ["B4"]

    def test_clear(self) -> None:
        store = BookingDraftStore()
        store.set_current_booking(make_draft())
        store.clear_current_booking()
        assert store.get_current_booking() is None

    def test_take_consumes_once(self) -> None:
        store = BookingDraftStore()
        draft = make_draft()
        store.set_current_booking(draft)
        assert store.take_current_booking() == draft
        assert store.take_current_booking() is None

    def test_last_confirmed_booking_slot(self) -> None:
        store = BookingDraftStore()
        confirmation = BookingConfirmation(
            booking_id="bk-1",
            seats=["A1"],
            total_amount=186,
            movie_title="Arrival",
            theater_name="Orion Multiplex",
            showtime=datetime(2026, 3, 14, 20, 0),
        )
        store.set_last_confirmed_booking(confirmation)
        assert store.get_last_confirmed_booking() == confirmation
        store.clear_last_confirmed_booking()
        assert store.get_last_confirmed_booking() is None

    def test_stores_are_independent(self) -> None:
        first, second = BookingDraftStore(), BookingDraftStore()
        first.set_current_booking(make_draft())
        assert second.get_current_booking() is None


class TestBookingSession:
    def test_new_sessions_get_distinct_ids(self) -> None:
        assert BookingSession.new().session_id != BookingSession.new().session_id

    def test_for_tab_reuses_stored_session_id(self) -> None:
        storage = MemorySessionStorage()
        manager = SeatHoldSessionManager(seat_client=None, storage=storage, storage_key="k")  # type: ignore[arg-type]
        first = BookingSession.for_tab(manager)
        second = BookingSession.for_tab(manager)
        assert first.session_id == second.session_id == storage.get_item("k")

    def test_each_session_has_its_own_draft_store(self) -> None:
        first, second = BookingSession.new(), BookingSession.new()
        first.drafts.set_current_booking(make_draft())
        assert second.drafts.get_current_booking() is None
