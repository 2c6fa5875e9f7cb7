"""Reconciles the local seat selection with server-reported hold ownership."""

import logging
import time
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from boxoffice.config import settings
from boxoffice.schemas.seat import Seat, SeatHold, SeatLayout, SeatState, SeatView
from boxoffice.selection.countdown import Clock, HoldCountdownTimer
from boxoffice.selection.notices import NoticeKind, NoticeSink, log_notice, make_notice
from boxoffice.selection.session import SeatHoldSessionManager
from boxoffice.utils.seats import seat_sort_key

logger = logging.getLogger(__name__)

SelectionListener = Callable[[list[str]], None]


class ToggleResult(str, Enum):
    SELECTED = "selected"
    DESELECTED = "deselected"
    IN_FLIGHT = "in_flight"
    REJECTED_BOOKED = "rejected_booked"
    REJECTED_HELD = "rejected_held"
    REJECTED_UNKNOWN = "rejected_unknown"
    REJECTED_LIMIT = "rejected_limit"
    FAILED = "failed"
    CLOSED = "closed"


class SeatSelectionReconciler:
    """
    Single source of truth for which seats are selectable, selected or blocked.

    Local intent (the Selected-Seats Set) changes only after the backend
    accepts a hold or release. Every poll snapshot is merged in and any
    selected seat that is no longer held by the local session is dropped
    with a ``SEAT_DROPPED`` notice. Removal is idempotent, so the countdown
    expiry path and a poll-driven drop converge on the same state.
    """

    def __init__(
        self,
        showtime_id: str,
        session: SeatHoldSessionManager,
        notify: NoticeSink | None = None,
        max_seats: int | None = None,
        clock: Clock | None = None,
        hold_duration_seconds: int | None = None,
        monotonic: Callable[[], float] = time.monotonic,
        on_selection_change: SelectionListener | None = None,
    ) -> None:
        self.showtime_id = showtime_id
        self.session = session
        self.session_id = session.ensure_session_id()
        self.notify = notify or log_notice
        self.max_seats = max_seats if max_seats is not None else settings.max_selected_seats
        self.monotonic = monotonic
        self.on_selection_change = on_selection_change
        self.countdown = HoldCountdownTimer(
            on_expired=self.expire_hold,
            clock=clock,
            hold_duration_seconds=hold_duration_seconds,
        )

        self._seats: dict[str, Seat] = {}
        # Insertion-ordered set of selected seat ids
        self._selected: dict[str, None] = {}
        self._in_flight: set[str] = set()
        self._pending_holds: set[str] = set()
        # Monotonic time each selected seat's hold was confirmed
        self._held_since: dict[str, float] = {}
        self._closed = False

    # ------------------------------------------------------------------
    # Snapshot handling
    # ------------------------------------------------------------------

    def load(self, seats: list[Seat], requested_at: float | None = None) -> list[str]:
        """
        Merge a fetched snapshot (identity by seat id) and reconcile.

        Args:
            seats: Seats reported by the backend
            requested_at: Monotonic time the fetch was issued, if known

        Returns:
            Ids of selected seats dropped by reconciliation
        """
        if self._closed:
            return []
        for seat in seats:
            if self._predates_local_hold(seat, requested_at):
                continue
            self._seats[seat.id] = seat
        return self.reconcile(requested_at)

    def reconcile(self, requested_at: float | None = None) -> list[str]:
        """Drop selected seats that the latest snapshot no longer attributes to this session."""
        dropped = []
        for seat_id in list(self._selected):
            if seat_id in self._in_flight:
                continue
            seat = self._seats.get(seat_id)
            if seat is not None and seat.is_held_by(self.session_id):
                continue
            if seat is not None and self._predates_local_hold(seat, requested_at):
                continue
            dropped.append(seat_id)

        for seat_id in dropped:
            self._remove(seat_id)
            logger.info(f"Seat {seat_id} dropped from selection: no longer held by this session")
            self.notify(make_notice(NoticeKind.SEAT_DROPPED, seat_id=seat_id))

        if dropped:
            if not self._selected:
                self.countdown.stop()
            self._selection_changed()
        return dropped

    def _predates_local_hold(self, seat: Seat, requested_at: float | None) -> bool:
        # A snapshot requested before our hold landed may still show the seat
        # as free; it must not undo the hold. A foreign owner always wins.
        if requested_at is None or seat.is_held or seat.is_booked:
            return False
        held_since = self._held_since.get(seat.id)
        return held_since is not None and held_since > requested_at

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    async def toggle(self, seat_id: str) -> ToggleResult:
        """
        Select or deselect a seat.

        Blocked seats are rejected without any network call. Repeated toggles
        on a seat whose hold/release is still outstanding are ignored.
        """
        if self._closed:
            return ToggleResult.CLOSED
        if seat_id in self._in_flight:
            logger.debug(f"Ignoring toggle on seat {seat_id}: request in flight")
            return ToggleResult.IN_FLIGHT

        seat = self._seats.get(seat_id)
        if seat is None:
            self.notify(make_notice(NoticeKind.SEAT_UNAVAILABLE, seat_id=seat_id))
            return ToggleResult.REJECTED_UNKNOWN
        if not seat.is_selectable_by(self.session_id):
            if seat.is_booked:
                self.notify(make_notice(NoticeKind.SEAT_BOOKED, seat_id=seat_id))
                return ToggleResult.REJECTED_BOOKED
            self.notify(make_notice(NoticeKind.SEAT_HELD_BY_OTHER, seat_id=seat_id))
            return ToggleResult.REJECTED_HELD

        if seat_id in self._selected:
            return await self._deselect(seat_id)

        if len(self._selected) + len(self._pending_holds) >= self.max_seats:
            self.notify(
                make_notice(NoticeKind.MAX_SEATS_REACHED, seat_id=seat_id, max_seats=self.max_seats)
            )
            return ToggleResult.REJECTED_LIMIT
        return await self._select(seat_id)

    async def _select(self, seat_id: str) -> ToggleResult:
        self._in_flight.add(seat_id)
        self._pending_holds.add(seat_id)
        try:
            ok = await self.session.hold(self.showtime_id, [seat_id], self.session_id)
        finally:
            self._in_flight.discard(seat_id)
            self._pending_holds.discard(seat_id)

        if self._closed:
            if ok:
                # Torn down while the hold was in flight: give the seat back
                await self.session.release(self.showtime_id, [seat_id])
            return ToggleResult.CLOSED

        if not ok:
            self.notify(make_notice(NoticeKind.HOLD_FAILED, seat_id=seat_id))
            return ToggleResult.FAILED

        self._selected[seat_id] = None
        self._held_since[seat_id] = self.monotonic()
        expiry = self.countdown.start_fresh()
        self._mirror(seat_id, held=True, expiry=expiry)
        logger.info(f"Seat {seat_id} held for session {self.session_id}")
        self._selection_changed()
        return ToggleResult.SELECTED

    async def _deselect(self, seat_id: str) -> ToggleResult:
        self._in_flight.add(seat_id)
        try:
            ok = await self.session.release(self.showtime_id, [seat_id])
        finally:
            self._in_flight.discard(seat_id)

        if not ok:
            # Local state stays as is; the next poll is authoritative
            self.notify(make_notice(NoticeKind.RELEASE_FAILED, seat_id=seat_id))
            return ToggleResult.FAILED

        self._mirror(seat_id, held=False)
        self.discard(seat_id)
        return ToggleResult.DESELECTED

    def discard(self, seat_id: str) -> bool:
        """
        Remove a seat id from the selection without any network call.

        Returns:
            True if the seat was selected; removing an absent id is a no-op
        """
        if seat_id not in self._selected:
            return False
        self._remove(seat_id)
        if not self._selected:
            self.countdown.stop()
        self._selection_changed()
        return True

    async def extend_hold(self) -> bool:
        """
        Re-hold the selected seats and restart the countdown from a fresh expiry.

        Seats with a toggle in flight are left out, and toggles on the seats
        being extended are ignored until the call returns. A seat that leaves
        the selection while the call is out (expiry, a poll drop, close) may
        have been re-held by it, so it is released again.
        """
        seat_ids = [seat_id for seat_id in self._selected if seat_id not in self._in_flight]
        if not seat_ids or self._closed:
            return False

        self._in_flight.update(seat_ids)
        try:
            ok = await self.session.extend(self.showtime_id, seat_ids, self.session_id)
        finally:
            self._in_flight.difference_update(seat_ids)

        if not ok:
            if not self._closed:
                self.notify(make_notice(NoticeKind.EXTEND_FAILED))
            return False

        dropped = [seat_id for seat_id in seat_ids if seat_id not in self._selected]
        if dropped:
            logger.info(f"Releasing seats {dropped} re-held by an extend that raced their removal")
            await self.session.release(self.showtime_id, dropped)

        kept = [seat_id for seat_id in seat_ids if seat_id in self._selected]
        if not kept:
            return False
        if self._closed:
            return True
        expiry = self.countdown.start_fresh()
        now = self.monotonic()
        for seat_id in kept:
            self._held_since[seat_id] = now
            self._mirror(seat_id, held=True, expiry=expiry)
        return True

    async def expire_hold(self) -> None:
        """Countdown reached zero: release everything and tell the user."""
        if not self._selected:
            return
        self.notify(make_notice(NoticeKind.HOLD_EXPIRED))
        await self.release_all()

    async def release_all(self) -> bool:
        """
        Best-effort release of every selected seat.

        The selection is cleared before the call so concurrent expiry and
        reconciliation paths see an empty set.

        Returns:
            True if nothing was selected or the backend accepted the release
        """
        seat_ids = list(self._selected)
        for seat_id in seat_ids:
            self._remove(seat_id)
        self.countdown.stop()
        if not seat_ids:
            return True

        self._selection_changed()
        ok = await self.session.release(self.showtime_id, seat_ids)
        if ok:
            for seat_id in seat_ids:
                self._mirror(seat_id, held=False)
        else:
            logger.warning(f"Bulk release of {seat_ids} failed; holds will lapse on the server")
        return ok

    def close(self) -> None:
        """
        Ignore every later callback; the owning screen is gone.

        The selection is kept so the owner can still call ``release_all()``.
        """
        self._closed = True
        self.countdown.stop()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def selected_ids(self) -> list[str]:
        return list(self._selected)

    @property
    def selected_seats(self) -> list[Seat]:
        seats = [self._seats[seat_id] for seat_id in self._selected if seat_id in self._seats]
        return sorted(seats, key=lambda seat: seat_sort_key(seat.row, seat.number))

    @property
    def selected_labels(self) -> list[str]:
        return [seat.label for seat in self.selected_seats]

    @property
    def total_amount(self) -> float:
        return sum(seat.price for seat in self.selected_seats)

    @property
    def remaining_seconds(self) -> int:
        return self.countdown.remaining_seconds

    @property
    def current_hold(self) -> SeatHold | None:
        if not self._selected or self.countdown.expiry is None:
            return None
        return SeatHold(
            seat_ids=self.selected_ids,
            expiry=self.countdown.expiry,
            session_id=self.session_id,
        )

    @property
    def layout(self) -> SeatLayout:
        return SeatLayout(showtime_id=self.showtime_id, seats=list(self._seats.values()))

    def is_selected(self, seat_id: str) -> bool:
        return seat_id in self._selected

    def is_in_flight(self, seat_id: str) -> bool:
        return seat_id in self._in_flight

    def get_seat(self, seat_id: str) -> Seat | None:
        return self._seats.get(seat_id)

    def find_seat(self, row: str, number: int) -> Seat | None:
        for seat in self._seats.values():
            if seat.row == row and seat.number == number:
                return seat
        return None

    def seat_state(self, seat: Seat) -> SeatState:
        if seat.is_booked:
            return SeatState.BOOKED
        if seat.id in self._selected:
            return SeatState.SELECTED
        if seat.is_held and not seat.is_held_by(self.session_id):
            return SeatState.HELD
        return SeatState.AVAILABLE

    def seat_views(self) -> list[SeatView]:
        views = [SeatView(seat=seat, state=self.seat_state(seat)) for seat in self._seats.values()]
        return sorted(views, key=lambda view: view.sort_key)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _remove(self, seat_id: str) -> None:
        self._selected.pop(seat_id, None)
        self._held_since.pop(seat_id, None)

    def _mirror(self, seat_id: str, held: bool, expiry: datetime | None = None) -> None:
        seat = self._seats.get(seat_id)
        if seat is None:
            return
        self._seats[seat_id] = seat.model_copy(
            update={
                "is_held": held,
                "hold_owner_session_id": self.session_id if held else None,
                "hold_expiry": expiry if held else None,
            }
        )

    def _selection_changed(self) -> None:
        if self.on_selection_change is not None:
            self.on_selection_change(self.selected_ids)
