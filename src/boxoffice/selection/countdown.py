"""Local countdown for the seat hold owned by this session."""

import logging
import math
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

from boxoffice.config import settings
from boxoffice.utils.seats import format_countdown

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
ExpiryHandler = Callable[[], Awaitable[None]]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HoldCountdownTimer:
    """
    Counts down to the local estimate of the hold expiry.

    The backend owns the real expiry; this is an optimistic estimate that
    the next poll corrects. When the countdown reaches zero the timer stops
    itself and awaits ``on_expired`` exactly once.

    The timer ticks through an APScheduler interval job while a countdown is
    active and removes the job when it stops, so no timer outlives the hold.
    """

    def __init__(
        self,
        on_expired: ExpiryHandler,
        clock: Clock | None = None,
        hold_duration_seconds: int | None = None,
        tick_seconds: int | None = None,
    ) -> None:
        self.on_expired = on_expired
        self.clock = clock or utcnow
        self.hold_duration = timedelta(
            seconds=hold_duration_seconds
            if hold_duration_seconds is not None
            else settings.hold_duration_seconds
        )
        self.tick_seconds = tick_seconds if tick_seconds is not None else settings.countdown_tick_seconds
        self._expiry: datetime | None = None
        self._scheduler: BaseScheduler | None = None
        self._job_id: str | None = None

    @property
    def expiry(self) -> datetime | None:
        return self._expiry

    @property
    def is_active(self) -> bool:
        return self._expiry is not None

    @property
    def remaining_seconds(self) -> int:
        if self._expiry is None:
            return 0
        return max(0, math.floor((self._expiry - self.clock()).total_seconds()))

    def format_remaining(self) -> str:
        return format_countdown(self.remaining_seconds)

    def attach(self, scheduler: BaseScheduler, job_id: str) -> None:
        """Tick on ``scheduler`` from now on; schedules immediately if a countdown is running."""
        self._scheduler = scheduler
        self._job_id = job_id
        if self.is_active:
            self._schedule()

    def detach(self) -> None:
        self._unschedule()
        self._scheduler = None
        self._job_id = None

    def start(self, expiry: datetime) -> None:
        """Start counting down to ``expiry``, replacing any running countdown."""
        self._expiry = expiry
        logger.debug(f"Hold countdown started, {self.remaining_seconds}s remaining")
        self._schedule()

    def start_fresh(self) -> datetime:
        """Start a countdown for a full hold duration from now."""
        expiry = self.clock() + self.hold_duration
        self.start(expiry)
        return expiry

    def stop(self) -> None:
        if self._expiry is not None:
            logger.debug("Hold countdown stopped")
        self._expiry = None
        self._unschedule()

    async def tick(self) -> int:
        """
        Recompute the remaining seconds and fire the expiry handler at zero.

        Returns:
            Remaining whole seconds (0 when expired or inactive)
        """
        if self._expiry is None:
            return 0
        remaining = self.remaining_seconds
        if remaining <= 0:
            logger.info("Seat hold countdown elapsed")
            # Stop before awaiting so a concurrent tick cannot fire twice
            self.stop()
            await self.on_expired()
        return remaining

    def _schedule(self) -> None:
        if self._scheduler is None or self._job_id is None:
            return
        self._scheduler.add_job(
            self.tick,
            trigger="interval",
            seconds=self.tick_seconds,
            id=self._job_id,
            name="Seat hold countdown",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

    def _unschedule(self) -> None:
        if self._scheduler is None or self._job_id is None:
            return
        try:
            self._scheduler.remove_job(self._job_id)
        except JobLookupError:
            pass
