"""Seat label and countdown formatting helpers."""

import re

_LABEL_RE = re.compile(r"^\s*([A-Za-z]+)\s*-?\s*(\d+)\s*$")


def seat_label(row: str, number: int) -> str:
    """
    Build the display label for a seat.

    Examples:
        >>> seat_label("A", 7)
        'A7'
    """
    return f"{row}{number}"


def seat_sort_key(row: str, number: int) -> tuple[str, int]:
    """Order seats by row label, then by position within the row."""
    return (row, number)


def parse_seat_label(label: str) -> tuple[str, int]:
    """
    Split a seat label into row and number.

    Accepts "A7", "a7" and "A-7". Row letters are upper-cased.

    Raises:
        ValueError: if the label is not a row followed by a number
    """
    match = _LABEL_RE.match(label)
    if not match:
        raise ValueError(f"Invalid seat label: {label!r}")
    return match.group(1).upper(), int(match.group(2))


def sort_seat_labels(labels: list[str]) -> list[str]:
    """Sort labels like "B2", "A10", "A2" into seat order (A2, A10, B2)."""
    return sorted(labels, key=lambda label: seat_sort_key(*parse_seat_label(label)))


def format_countdown(seconds: int) -> str:
    """Format remaining hold seconds as m:ss."""
    seconds = max(0, seconds)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"
