"""Seat-selection screen for one showtime: wires poller, reconciler and countdown."""

import logging
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.schedulers.base import BaseScheduler

from boxoffice.config import settings
from boxoffice.exceptions import BoxOfficeError, EmptySelectionError
from boxoffice.schemas.booking import BookingDraft
from boxoffice.schemas.seat import SeatLayout, SeatView
from boxoffice.schemas.showtime import ShowtimeSummary
from boxoffice.selection.countdown import Clock
from boxoffice.selection.notices import NoticeKind, NoticeSink, log_notice, make_notice
from boxoffice.selection.poller import SeatAvailabilityPoller
from boxoffice.selection.reconciler import SeatSelectionReconciler, SelectionListener, ToggleResult
from boxoffice.selection.session import MemorySessionStorage, SeatHoldSessionManager
from boxoffice.services.seat_client import SeatClient
from boxoffice.utils.seats import format_countdown, parse_seat_label

if TYPE_CHECKING:
    from boxoffice.booking.context import BookingSession

logger = logging.getLogger(__name__)


class SeatSelectionScreen:
    """
    Owns the seat-selection state for a single showtime.

    The host calls ``open()`` when the screen is shown and ``close()`` when the
    user navigates away. In between it reads ``seat_views()``,
    ``remaining_seconds`` and the selection properties, forwards clicks to
    ``toggle()`` and finally calls ``proceed()`` to hand a BookingDraft to
    the payment step.
    """

    def __init__(
        self,
        showtime_id: str,
        booking_session: "BookingSession",
        seat_client: SeatClient | None = None,
        session_manager: SeatHoldSessionManager | None = None,
        scheduler: BaseScheduler | None = None,
        notify: NoticeSink | None = None,
        clock: Clock | None = None,
        max_seats: int | None = None,
        poll_interval_seconds: int | None = None,
        hold_duration_seconds: int | None = None,
        on_selection_change: SelectionListener | None = None,
    ) -> None:
        if not showtime_id:
            raise ValueError("showtime_id is required")

        self.showtime_id = showtime_id
        self.booking_session = booking_session
        self.seat_client = seat_client or SeatClient()
        self.session_manager = session_manager or _manager_for(self.seat_client, booking_session)
        if self.session_manager.ensure_session_id() != booking_session.session_id:
            raise ValueError("session_manager and booking_session disagree on the session id")

        self.notify = notify or log_notice
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler or AsyncIOScheduler()

        self.reconciler = SeatSelectionReconciler(
            showtime_id,
            self.session_manager,
            notify=self.notify,
            max_seats=max_seats,
            clock=clock,
            hold_duration_seconds=hold_duration_seconds,
            on_selection_change=on_selection_change,
        )
        self.poller = SeatAvailabilityPoller(
            showtime_id,
            self.seat_client,
            on_snapshot=self.reconciler.load,
            interval_seconds=poll_interval_seconds,
        )
        self.is_open = False

    @property
    def countdown_job_id(self) -> str:
        return f"hold-countdown:{self.showtime_id}"

    async def open(self) -> SeatLayout:
        """
        Load the seat layout and start polling.

        Raises:
            ShowtimeNotFoundError, SeatDataError: fatal, the host should navigate away
            BoxOfficeError: the layout could not be loaded
        """
        try:
            layout = await self.seat_client.get_seat_layout(self.showtime_id)
        except BoxOfficeError:
            self.notify(make_notice(NoticeKind.LAYOUT_FAILED))
            raise

        self.reconciler.load(layout.seats)
        logger.info(
            f"Opened seat selection for showtime {self.showtime_id}: "
            f"{layout.total_seats} seats, {layout.available_seats} available"
        )

        self.reconciler.countdown.attach(self.scheduler, self.countdown_job_id)
        self.poller.start(self.scheduler)
        if self._owns_scheduler and not self.scheduler.running:
            self.scheduler.start()
        self.is_open = True
        return layout

    async def close(self, release: bool = True) -> None:
        """
        Tear down: stop every job and, by default, give held seats back.

        Safe to call more than once.
        """
        if not self.is_open:
            return
        self.is_open = False
        self.poller.stop()
        self.reconciler.countdown.detach()
        # A hold landing during the release must already see the reconciler closed
        self.reconciler.close()
        if release:
            await self.reconciler.release_all()
        if self._owns_scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info(f"Closed seat selection for showtime {self.showtime_id}")

    async def __aenter__(self) -> "SeatSelectionScreen":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def toggle(self, seat_id: str) -> ToggleResult:
        return await self.reconciler.toggle(seat_id)

    async def toggle_label(self, label: str) -> ToggleResult:
        """Toggle a seat by its display label, e.g. "C7"."""
        row, number = parse_seat_label(label)
        seat = self.reconciler.find_seat(row, number)
        if seat is None:
            self.notify(make_notice(NoticeKind.SEAT_UNAVAILABLE, seat_id=label))
            return ToggleResult.REJECTED_UNKNOWN
        return await self.reconciler.toggle(seat.id)

    async def extend_hold(self) -> bool:
        return await self.reconciler.extend_hold()

    async def refresh(self) -> bool:
        """Poll immediately instead of waiting for the next tick."""
        return await self.poller.poll_once()

    def seat_views(self) -> list[SeatView]:
        return self.reconciler.seat_views()

    @property
    def layout(self) -> SeatLayout:
        return self.reconciler.layout

    @property
    def selected_ids(self) -> list[str]:
        return self.reconciler.selected_ids

    @property
    def selected_labels(self) -> list[str]:
        return self.reconciler.selected_labels

    @property
    def total_amount(self) -> float:
        return self.reconciler.total_amount

    @property
    def remaining_seconds(self) -> int:
        return self.reconciler.remaining_seconds

    @property
    def remaining_display(self) -> str | None:
        """m:ss while a hold is running, None otherwise."""
        if not self.reconciler.countdown.is_active:
            return None
        return format_countdown(self.remaining_seconds)

    def proceed(self, showtime: ShowtimeSummary) -> BookingDraft:
        """
        Build the booking draft from the current selection and store it.

        The selection and its hold stay in place; the payment step consumes
        the draft from the booking session.

        Raises:
            EmptySelectionError: if no seat is selected
        """
        if not self.reconciler.selected_ids:
            raise EmptySelectionError()
        if showtime.id != self.showtime_id:
            raise ValueError(f"Showtime {showtime.id} does not match screen {self.showtime_id}")

        draft = BookingDraft(
            showtime_id=self.showtime_id,
            show_date_time=showtime.show_date_time,
            movie_id=showtime.movie_id,
            movie_title=showtime.movie_title or "Movie",
            movie_poster_url=showtime.movie_poster_url,
            theater_id=showtime.theater_id,
            theater_name=showtime.theater_name,
            theater_location=showtime.theater_location,
            screen=showtime.screen,
            seats=self.reconciler.selected_labels,
            seat_ids=[seat.id for seat in self.reconciler.selected_seats],
            total_amount=self.reconciler.total_amount,
        )
        self.booking_session.drafts.set_current_booking(draft)
        logger.info(
            f"Booking draft for showtime {self.showtime_id}: "
            f"{', '.join(draft.seats)} totalling {draft.total_amount}"
        )
        return draft


def _manager_for(seat_client: SeatClient, booking_session: "BookingSession") -> SeatHoldSessionManager:
    storage = MemorySessionStorage()
    storage.set_item(settings.session_storage_key, booking_session.session_id)
    return SeatHoldSessionManager(seat_client, storage, settings.session_storage_key)
