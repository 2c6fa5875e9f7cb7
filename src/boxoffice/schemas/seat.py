"""Pydantic schemas for seat data."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from boxoffice.utils.seats import seat_label, seat_sort_key


class SeatType(str, Enum):
    REGULAR = "REGULAR"
    PREMIUM = "PREMIUM"
    VIP = "VIP"


class SeatState(str, Enum):
    """Interactive state of a seat as seen by the local session."""

    AVAILABLE = "available"
    SELECTED = "selected"
    HELD = "held"  # held by another session
    BOOKED = "booked"


class Seat(BaseModel):
    """One physical seat for one showtime, as reported by the backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    row: str
    number: int
    price: float = Field(ge=0)
    type: SeatType = SeatType.REGULAR
    is_booked: bool = False
    is_held: bool = False
    hold_owner_session_id: str | None = Field(default=None, alias="sessionId")
    hold_expiry: datetime | None = None

    @field_validator("is_booked", "is_held", mode="before")
    @classmethod
    def _null_flag_is_false(cls, value: object) -> object:
        # The backend serialises unset Boolean columns as null
        return False if value is None else value

    @property
    def label(self) -> str:
        return seat_label(self.row, self.number)

    def is_held_by(self, session_id: str) -> bool:
        return self.is_held and self.hold_owner_session_id == session_id

    def is_selectable_by(self, session_id: str) -> bool:
        """Booked seats and seats held by another session are not interactive."""
        if self.is_booked:
            return False
        return not self.is_held or self.is_held_by(session_id)


class SeatAvailability(BaseModel):
    """Availability projection of a seat, used by polling hosts."""

    seat_id: str
    is_available: bool
    is_booked: bool
    is_held: bool
    held_by_session: str | None = None
    hold_expiry: datetime | None = None

    @classmethod
    def from_seat(cls, seat: Seat) -> "SeatAvailability":
        return cls(
            seat_id=seat.id,
            is_available=not seat.is_booked and not seat.is_held,
            is_booked=seat.is_booked,
            is_held=seat.is_held,
            held_by_session=seat.hold_owner_session_id,
            hold_expiry=seat.hold_expiry,
        )


class SeatLayout(BaseModel):
    """Seat grid for a showtime."""

    showtime_id: str
    seats: list[Seat] = Field(default_factory=list)

    @property
    def rows(self) -> list[str]:
        return sorted({seat.row for seat in self.seats})

    @property
    def seats_per_row(self) -> int:
        return max((seat.number for seat in self.seats), default=0)

    @property
    def total_seats(self) -> int:
        return len(self.seats)

    @property
    def available_seats(self) -> int:
        return sum(1 for seat in self.seats if not seat.is_booked and not seat.is_held)

    def seats_in_row(self, row: str) -> list[Seat]:
        return sorted(
            (seat for seat in self.seats if seat.row == row),
            key=lambda seat: seat.number,
        )


class SeatHold(BaseModel):
    """Client-side view of the hold owned by the local session."""

    seat_ids: list[str]
    expiry: datetime
    session_id: str


@dataclass(frozen=True)
class SeatView:
    """A seat annotated with its interactive state for rendering."""

    seat: Seat
    state: SeatState

    @property
    def label(self) -> str:
        return self.seat.label

    @property
    def sort_key(self) -> tuple[str, int]:
        return seat_sort_key(self.seat.row, self.seat.number)
