"""Tests for seat schemas and seat formatting helpers."""

import pytest
from pydantic import ValidationError

from boxoffice.schemas.seat import Seat, SeatAvailability, SeatLayout, SeatType
from boxoffice.utils.seats import format_countdown, parse_seat_label, seat_label, sort_seat_labels
from factories import LOCAL_SESSION, OTHER_SESSION, make_seat

WIRE_SEAT = {
    "id": "9f1c",
    "row": "C",
    "number": 7,
    "isBooked": False,
    "isHeld": True,
    "price": 200.0,
    "type": "PREMIUM",
    "holdExpiry": "2026-03-14T18:40:00",
    "sessionId": "session_abc",
}


# ---------------------------------------------------------------------------
# Seat
# ---------------------------------------------------------------------------


class TestSeat:
    def test_parses_wire_format(self) -> None:
        seat = Seat.model_validate(WIRE_SEAT)
        assert seat.id == "9f1c"
        assert seat.type is SeatType.PREMIUM
        assert seat.is_held is True
        assert seat.hold_owner_session_id == "session_abc"
        assert seat.hold_expiry is not None
        assert seat.label == "C7"

    def test_null_flags_are_false(self) -> None:
        seat = Seat.model_validate({**WIRE_SEAT, "isBooked": None, "isHeld": None, "sessionId": None})
        assert seat.is_booked is False
        assert seat.is_held is False

    def test_negative_price_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Seat.model_validate({**WIRE_SEAT, "price": -5})

    def test_missing_row_rejected(self) -> None:
        data = dict(WIRE_SEAT)
        del data["row"]
        with pytest.raises(ValidationError):
            Seat.model_validate(data)

    def test_dumps_back_to_wire_names(self) -> None:
        data = Seat.model_validate(WIRE_SEAT).model_dump(by_alias=True)
        assert data["sessionId"] == "session_abc"
        assert data["isHeld"] is True

    def test_free_seat_is_selectable(self) -> None:
        assert make_seat("A1").is_selectable_by(LOCAL_SESSION)

    def test_own_hold_is_selectable(self) -> None:
        seat = make_seat("A1", held_by=LOCAL_SESSION)
        assert seat.is_held_by(LOCAL_SESSION)
        assert seat.is_selectable_by(LOCAL_SESSION)

    def test_foreign_hold_is_not_selectable(self) -> None:
        seat = make_seat("A1", held_by=OTHER_SESSION)
        assert not seat.is_held_by(LOCAL_SESSION)
        assert not seat.is_selectable_by(LOCAL_SESSION)

    def test_booked_seat_is_never_selectable(self) -> None:
        seat = make_seat("A1", is_booked=True, held_by=LOCAL_SESSION)
        assert not seat.is_selectable_by(LOCAL_SESSION)


# ---------------------------------------------------------------------------
# SeatLayout / SeatAvailability
# ---------------------------------------------------------------------------


class TestSeatLayout:
    def test_derived_counts(self) -> None:
        layout = SeatLayout(
            showtime_id="S1",
            seats=[
                make_seat("B2"),
                make_seat("A1"),
                make_seat("A3", is_booked=True),
                make_seat("A2", held_by=OTHER_SESSION),
            ],
        )
        assert layout.rows == ["A", "B"]
        assert layout.seats_per_row == 3
        assert layout.total_seats == 4
        assert layout.available_seats == 2

    def test_seats_in_row_ordered_by_number(self) -> None:
        layout = SeatLayout(showtime_id="S1", seats=[make_seat("A10"), make_seat("A2"), make_seat("B1")])
        assert [seat.label for seat in layout.seats_in_row("A")] == ["A2", "A10"]

    def test_empty_layout(self) -> None:
        layout = SeatLayout(showtime_id="S1")
        assert layout.rows == []
        assert layout.seats_per_row == 0
        assert layout.available_seats == 0

    def test_availability_projection(self) -> None:
        availability = SeatAvailability.from_seat(make_seat("A2", held_by=OTHER_SESSION))
        assert availability.seat_id == "A2"
        assert availability.is_available is False
        assert availability.held_by_session == OTHER_SESSION


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


class TestSeatLabels:
    def test_seat_label(self) -> None:
        assert seat_label("H", 12) == "H12"

    @pytest.mark.parametrize(
        ("label", "expected"),
        [("A7", ("A", 7)), ("c12", ("C", 12)), ("B-3", ("B", 3)), (" D 4 ", ("D", 4))],
    )
    def test_parse_seat_label(self, label: str, expected: tuple[str, int]) -> None:
        assert parse_seat_label(label) == expected

    @pytest.mark.parametrize("label", ["", "7A", "A", "12"])
    def test_parse_rejects_garbage(self, label: str) -> None:
        with pytest.raises(ValueError):
            parse_seat_label(label)

    def test_sort_is_numeric_within_row(self) -> None:
        assert sort_seat_labels(["B2", "A10", "A2"]) == ["A2", "A10", "B2"]


class TestFormatCountdown:
    def test_full_hold(self) -> None:
        assert format_countdown(600) == "10:00"

    def test_pads_seconds(self) -> None:
        assert format_countdown(65) == "1:05"

    def test_never_negative(self) -> None:
        assert format_countdown(-3) == "0:00"
