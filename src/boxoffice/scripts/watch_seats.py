"""Watch the seat grid of a showtime, optionally holding seats while watching."""

import argparse
import asyncio
import logging
import sys

from boxoffice.booking.context import BookingSession
from boxoffice.config import settings
from boxoffice.exceptions import BoxOfficeError
from boxoffice.schemas.seat import SeatState, SeatView
from boxoffice.selection.notices import Notice
from boxoffice.selection.screen import SeatSelectionScreen
from boxoffice.selection.session import SeatHoldSessionManager
from boxoffice.services.seat_client import SeatClient

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)

STATE_SYMBOLS = {
    SeatState.AVAILABLE: ".",
    SeatState.SELECTED: "*",
    SeatState.HELD: "h",
    SeatState.BOOKED: "x",
}


def render_grid(views: list[SeatView]) -> str:
    """Render seat views as one line per row, e.g. "A  . . * x"."""
    rows: dict[str, list[str]] = {}
    for view in views:
        rows.setdefault(view.seat.row, []).append(STATE_SYMBOLS[view.state])
    return "\n".join(f"{row:<3}{' '.join(symbols)}" for row, symbols in rows.items())


def print_notice(notice: Notice) -> None:
    suffix = f" [{notice.seat_id}]" if notice.seat_id else ""
    print(f"! {notice.message}{suffix}")


async def watch(showtime_id: str, labels: list[str], duration: int, interval: int) -> bool:
    """Open the screen, select seats, print the grid until ``duration`` elapses."""
    seat_client = SeatClient()
    manager = SeatHoldSessionManager(seat_client)
    booking_session = BookingSession.for_tab(manager)
    screen = SeatSelectionScreen(
        showtime_id,
        booking_session,
        seat_client=seat_client,
        session_manager=manager,
        notify=print_notice,
        poll_interval_seconds=interval,
    )

    try:
        layout = await screen.open()
    except BoxOfficeError as e:
        print(f"Cannot open showtime {showtime_id}: {e.message}")
        return False

    print(f"Showtime {showtime_id}: {layout.total_seats} seats, {layout.available_seats} available")
    print(f"Session {booking_session.session_id}\n")

    try:
        for label in labels:
            try:
                result = await screen.toggle_label(label)
            except ValueError as e:
                print(f"{label}: {e}")
                continue
            print(f"{label}: {result.value}")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + duration
        while loop.time() < deadline:
            print(render_grid(screen.seat_views()))
            if screen.selected_labels:
                print(
                    f"\nSelected {', '.join(screen.selected_labels)}  "
                    f"total {screen.total_amount:.0f}  hold {screen.remaining_display}"
                )
            print()
            await asyncio.sleep(interval)
    finally:
        logger.info(f"Releasing {len(screen.selected_ids)} held seat(s) and closing")
        await screen.close()
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Watch seat availability for a showtime.")
    parser.add_argument("showtime_id", help="Showtime identifier")
    parser.add_argument(
        "--select",
        nargs="*",
        default=[],
        metavar="LABEL",
        help="Seat labels to hold while watching, e.g. A1 A2",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=60,
        metavar="SECONDS",
        help="How long to watch before releasing and exiting (default: 60)",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=settings.poll_interval_seconds,
        metavar="SECONDS",
        help=f"Poll interval (default: {settings.poll_interval_seconds})",
    )
    args = parser.parse_args()

    ok = asyncio.run(watch(args.showtime_id, args.select, args.duration, args.interval))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
