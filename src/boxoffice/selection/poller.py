"""Fixed-interval polling of seat state for one showtime."""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

from boxoffice.config import settings
from boxoffice.exceptions import BoxOfficeError
from boxoffice.schemas.seat import Seat
from boxoffice.services.seat_client import SeatClient

logger = logging.getLogger(__name__)

# Receives the fetched seats and the monotonic time the fetch was issued
SnapshotHandler = Callable[[list[Seat], float], object]


class SeatAvailabilityPoller:
    """
    Keeps the local seat mirror fresh by polling the backend.

    Server state always wins: each successful fetch is handed to
    ``on_snapshot``. Failed fetches are logged and swallowed so the next tick
    retries with a fixed interval. A tick that fires while the previous fetch
    is still in flight is skipped, and responses that land after ``stop()``
    are discarded.
    """

    def __init__(
        self,
        showtime_id: str,
        seat_client: SeatClient,
        on_snapshot: SnapshotHandler,
        interval_seconds: int | None = None,
    ) -> None:
        self.showtime_id = showtime_id
        self.seat_client = seat_client
        self.on_snapshot = on_snapshot
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None else settings.poll_interval_seconds
        )
        self.last_success_at: datetime | None = None
        self.consecutive_failures = 0
        self._scheduler: BaseScheduler | None = None
        self._in_flight = False
        self._stopped = False

    @property
    def job_id(self) -> str:
        return f"seat-poll:{self.showtime_id}"

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and not self._stopped

    def start(self, scheduler: BaseScheduler) -> None:
        self._stopped = False
        self._scheduler = scheduler
        scheduler.add_job(
            self.poll_once,
            trigger="interval",
            seconds=self.interval_seconds,
            id=self.job_id,
            name=f"Seat availability poll for showtime {self.showtime_id}",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info(
            f"Polling seats for showtime {self.showtime_id} every {self.interval_seconds}s"
        )

    def stop(self) -> None:
        self._stopped = True
        if self._scheduler is None:
            return
        try:
            self._scheduler.remove_job(self.job_id)
        except JobLookupError:
            pass
        self._scheduler = None
        logger.info(f"Stopped polling seats for showtime {self.showtime_id}")

    async def poll_once(self) -> bool:
        """
        Fetch seat state once and hand it to the snapshot handler.

        Returns:
            True if a snapshot was delivered
        """
        if self._in_flight:
            logger.debug(f"Skipping seat poll for {self.showtime_id}: previous poll in flight")
            return False

        self._in_flight = True
        requested_at = time.monotonic()
        try:
            seats = await self.seat_client.fetch_seats(self.showtime_id)
        except BoxOfficeError as e:
            self.consecutive_failures += 1
            logger.warning(
                f"Seat poll failed for showtime {self.showtime_id} "
                f"({self.consecutive_failures} in a row): {e}"
            )
            return False
        finally:
            self._in_flight = False

        if self._stopped:
            logger.debug(f"Discarding seat poll for {self.showtime_id}: poller stopped")
            return False

        self.consecutive_failures = 0
        if not seats:
            logger.debug(f"Seat poll for {self.showtime_id} returned no seats, keeping local state")
            return False

        self.last_success_at = datetime.now(timezone.utc)
        self.on_snapshot(seats, requested_at)
        return True
