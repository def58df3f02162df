import json
import httpx
import pytest
from fakeredis import aioredis

from booking_flow.clients.backend import BackendClient, create_http_client
from booking_flow.core.config import Settings
from booking_flow.crud.booked_seats import CRUDBookedSeats
from booking_flow.crud.booking_session import CRUDBookingSession
from booking_flow.services.booking_flow import BookingFlowController
from booking_flow.services.checkout import CheckoutAssembler

BACKEND_URL = "http://backend.test/api"


class FakeBackend:
    """Programmable stand-in for the booking REST backend, served through httpx.MockTransport."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def reply(self, method: str, path: str, data=None, status: int = 200, success: bool = True, error: str = None):
        self.routes[(method, "/api" + path)] = (status, {"success": success, "data": data, "error": error})

    def reply_raw(self, method: str, path: str, status: int, content: bytes):
        self.routes[(method, "/api" + path)] = (status, content)

    def go_down(self, method: str, path: str):
        self.routes[(method, "/api" + path)] = httpx.ConnectError

    def calls_to(self, method: str, path: str):
        return [request for request in self.calls if request.method == method and request.url.path == "/api" + path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        outcome = self.routes.get((request.method, request.url.path))
        if outcome is None:
            return httpx.Response(404, json={"success": False, "error": f"no route {request.url.path}"})
        if outcome is httpx.ConnectError:
            raise httpx.ConnectError("backend down", request=request)
        status, body = outcome
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)


@pytest.fixture
def test_settings():
    return Settings(
        BACKEND_API_URL=BACKEND_URL,
        DEFAULT_SEAT_PRICE=200.0,
        DEFAULT_SEAT_ROWS=5,
        DEFAULT_SEATS_PER_ROW=30,
        OFFLINE_DEMO_MODE=False,
    )


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
async def http_client(test_settings, fake_backend):
    client = create_http_client(test_settings, transport=httpx.MockTransport(fake_backend.handler))
    yield client
    await client.aclose()


@pytest.fixture
def backend(http_client):
    return BackendClient(http_client, token="test-token")


@pytest.fixture
async def redis_client():
    redis = aioredis.FakeRedis(decode_responses=True)
    yield redis
    await redis.flushall()
    await redis.aclose()


@pytest.fixture
def booked_seats():
    return CRUDBookedSeats(ttl_seconds=600)


@pytest.fixture
def flow(test_settings, booked_seats):
    return BookingFlowController(
        test_settings,
        CRUDBookingSession(ttl_seconds=900),
        booked_seats,
        CheckoutAssembler(booked_seats),
    )


@pytest.fixture
def showtime_data():
    return {
        "showtime_id": 7,
        "movie_id": 1,
        "movie_title": "Dune: Part Two",
        "theater_id": 3,
        "theater_name": "Hall 3",
        "cinema_id": 1,
        "cinema_name": "Central World",
        "show_date": "2025-11-17T00:00:00Z",
        "show_time": "0000-01-01T10:30:00Z",
        "end_time": "13:15:00",
        "price": 200,
        "available_seats": 5,
        "is_active": True,
    }


@pytest.fixture
def seats_data():
    """Two rows of three seats, A2 already booked."""
    seats = []
    for row_index, row in enumerate(["A", "B"]):
        for number in range(1, 4):
            seat_id = row_index * 3 + number
            seats.append({
                "seat_id": seat_id,
                "seat_row": row,
                "seat_number": number,
                "seat_type": "vip" if row == "B" else "standard",
                "status": "booked" if seat_id == 2 else "available",
                "is_active": True,
            })
    return seats


@pytest.fixture
def seeded_backend(fake_backend, showtime_data, seats_data):
    fake_backend.reply("GET", "/showtimes/7/seats", {"showtime": showtime_data, "seats": seats_data})
    fake_backend.reply("GET", "/showtimes/7", showtime_data)
    fake_backend.reply("POST", "/bookings", {"booking_id": 55, "booking_code": "BK55", "total_amount": 400}, status=201)
    fake_backend.reply("PUT", "/bookings/55/confirm-payment", {"booking_id": 55, "payment_status": "paid", "booking_status": "confirmed"})
    fake_backend.reply("GET", "/auth/profile", {"user_id": 9, "first_name": "Somchai", "last_name": "Jaidee", "role": "customer"})
    return fake_backend
