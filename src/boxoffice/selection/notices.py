"""User-facing notices raised by the seat-selection flow."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

logger = logging.getLogger(__name__)


class NoticeKind(str, Enum):
    SEAT_BOOKED = "seat_booked"
    SEAT_HELD_BY_OTHER = "seat_held_by_other"
    SEAT_UNAVAILABLE = "seat_unavailable"
    SEAT_DROPPED = "seat_dropped"
    MAX_SEATS_REACHED = "max_seats_reached"
    HOLD_FAILED = "hold_failed"
    RELEASE_FAILED = "release_failed"
    HOLD_EXPIRED = "hold_expired"
    EXTEND_FAILED = "extend_failed"
    LAYOUT_FAILED = "layout_failed"


class NoticeLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    kind: NoticeKind
    message: str
    level: NoticeLevel = NoticeLevel.WARNING
    seat_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


NoticeSink = Callable[[Notice], None]


MESSAGES: dict[NoticeKind, tuple[NoticeLevel, str]] = {
    NoticeKind.SEAT_BOOKED: (NoticeLevel.WARNING, "This seat is already booked."),
    NoticeKind.SEAT_HELD_BY_OTHER: (NoticeLevel.WARNING, "Seat is temporarily held by another user."),
    NoticeKind.SEAT_UNAVAILABLE: (NoticeLevel.WARNING, "Seat no longer available."),
    NoticeKind.SEAT_DROPPED: (NoticeLevel.WARNING, "Seat no longer available."),
    NoticeKind.MAX_SEATS_REACHED: (NoticeLevel.WARNING, "You can select up to {max_seats} seats."),
    NoticeKind.HOLD_FAILED: (NoticeLevel.ERROR, "Unable to select seat. Please try again."),
    NoticeKind.RELEASE_FAILED: (NoticeLevel.ERROR, "Unable to release seat. Please try again."),
    NoticeKind.HOLD_EXPIRED: (NoticeLevel.WARNING, "Seat hold expired, please reselect."),
    NoticeKind.EXTEND_FAILED: (NoticeLevel.ERROR, "Unable to extend hold. Try again shortly."),
    NoticeKind.LAYOUT_FAILED: (NoticeLevel.ERROR, "Failed to load seats. Please refresh."),
}


def make_notice(kind: NoticeKind, seat_id: str | None = None, **fmt: object) -> Notice:
    """Build a notice with the standard message for its kind."""
    level, template = MESSAGES[kind]
    return Notice(kind=kind, message=template.format(**fmt), level=level, seat_id=seat_id)


def log_notice(notice: Notice) -> None:
    """Default sink: write the notice to the log."""
    log_level = {
        NoticeLevel.INFO: logging.INFO,
        NoticeLevel.WARNING: logging.WARNING,
        NoticeLevel.ERROR: logging.ERROR,
    }[notice.level]
    suffix = f" (seat {notice.seat_id})" if notice.seat_id else ""
    logger.log(log_level, f"{notice.message}{suffix}")


class NoticeLog:
    """Sink that keeps every notice, for hosts that render a notice list."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def __call__(self, notice: Notice) -> None:
        self.notices.append(notice)

    def kinds(self) -> list[NoticeKind]:
        return [notice.kind for notice in self.notices]

    def of_kind(self, kind: NoticeKind) -> list[Notice]:
        return [notice for notice in self.notices if notice.kind == kind]

    def clear(self) -> None:
        self.notices.clear()
