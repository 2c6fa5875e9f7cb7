"""Shared test fixtures."""

import httpx
import pytest

from boxoffice.services.booking_client import BookingClient
from boxoffice.services.seat_client import SeatClient
from boxoffice.services.showtime_client import ShowtimeClient
from factories import FakeClock
from fake_backend import FakeBackend, create_app

BASE_URL = "http://backend.test/api"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> FakeBackend:
    """Fake booking backend with one showtime whose seats are not yet initialized."""
    fake = FakeBackend()
    fake.add_showtime("S1")
    return fake


@pytest.fixture
def transport(backend: FakeBackend) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=create_app(backend))


@pytest.fixture
def seat_client(transport: httpx.ASGITransport) -> SeatClient:
    return SeatClient(base_url=BASE_URL, token="", transport=transport)


@pytest.fixture
def showtime_client(transport: httpx.ASGITransport) -> ShowtimeClient:
    return ShowtimeClient(base_url=BASE_URL, token="", transport=transport)


@pytest.fixture
def booking_client(transport: httpx.ASGITransport) -> BookingClient:
    return BookingClient(base_url=BASE_URL, token="", transport=transport)
