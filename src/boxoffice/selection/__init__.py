"""Client-side seat hold and seat selection reconciliation."""

from boxoffice.selection.countdown import HoldCountdownTimer
from boxoffice.selection.notices import Notice, NoticeKind, NoticeLevel, NoticeLog
from boxoffice.selection.poller import SeatAvailabilityPoller
from boxoffice.selection.reconciler import SeatSelectionReconciler, ToggleResult
from boxoffice.selection.screen import SeatSelectionScreen
from boxoffice.selection.session import (
    MemorySessionStorage,
    SeatHoldSessionManager,
    SessionStorage,
)

__all__ = [
    "HoldCountdownTimer",
    "MemorySessionStorage",
    "Notice",
    "NoticeKind",
    "NoticeLevel",
    "NoticeLog",
    "SeatAvailabilityPoller",
    "SeatHoldSessionManager",
    "SeatSelectionReconciler",
    "SeatSelectionScreen",
    "SessionStorage",
    "ToggleResult",
]
