import logging
from typing import Any, Optional, Type, TypeVar

import httpx
from fastapi import Request
from pydantic import TypeAdapter, ValidationError

from booking_flow.core.config import Settings
from booking_flow.core.exceptions import BackendResponseError, BackendUnavailableError
from booking_flow.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserProfile
from booking_flow.schemas.booking import Booking, BookingCreated, ConfirmPaymentRequest, CreateBookingRequest, PaymentConfirmed
from booking_flow.schemas.cinema import Cinema, Theater
from booking_flow.schemas.envelope import Envelope
from booking_flow.schemas.movie import Movie
from booking_flow.schemas.seat import ShowtimeSeatLayout
from booking_flow.schemas.showtime import Showtime

logger = logging.getLogger(__name__)

M = TypeVar("M")


def create_http_client(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.BACKEND_API_URL,
        timeout=settings.BACKEND_TIMEOUT_SECONDS,
        transport=transport,
    )


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class BackendClient:
    """
    Typed client for the movie booking REST backend.

    Every response is an envelope ``{success, data, error}``; a call only
    succeeds when the transport status is 2xx *and* ``success`` is true.
    """

    def __init__(self, http: httpx.AsyncClient, token: Optional[str] = None):
        self.http = http
        self.token = token

    def with_token(self, token: Optional[str]) -> "BackendClient":
        return BackendClient(self.http, token=token)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = await self.http.request(method, path, headers=headers, **kwargs)
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} unreachable: {e}")
            raise BackendUnavailableError(f"{method} {path} failed: {e}") from e

        try:
            envelope = Envelope[Any].model_validate(response.json())
        except (ValueError, ValidationError):
            raise BackendResponseError(
                f"{method} {path} returned a malformed response (status {response.status_code})",
                backend_status=response.status_code)

        if response.is_error or not envelope.success:
            message = envelope.error or envelope.message or f"{method} {path} failed with status {response.status_code}"
            raise BackendResponseError(message, backend_status=response.status_code)
        return envelope.data

    def _parse(self, schema: Type[M], data: Any) -> M:
        try:
            return TypeAdapter(schema).validate_python(data)
        except ValidationError as e:
            raise BackendResponseError(f"Unexpected backend payload: {e.error_count()} invalid field(s)") from e

    # Catalog

    async def list_movies(self) -> list[Movie]:
        return self._parse(list[Movie], await self._request("GET", "/movies") or [])

    async def get_movie(self, movie_id: int) -> Movie:
        return self._parse(Movie, await self._request("GET", f"/movies/{movie_id}"))

    async def list_cinemas(self, is_active: Optional[bool] = None) -> list[Cinema]:
        params = {"is_active": str(is_active).lower()} if is_active is not None else None
        return self._parse(list[Cinema], await self._request("GET", "/cinemas", params=params) or [])

    async def list_theaters(self) -> list[Theater]:
        return self._parse(list[Theater], await self._request("GET", "/theaters") or [])

    async def list_showtimes(self, is_active: Optional[bool] = None) -> list[Showtime]:
        params = {"is_active": str(is_active).lower()} if is_active is not None else None
        return self._parse(list[Showtime], await self._request("GET", "/showtimes", params=params) or [])

    async def get_showtime(self, showtime_id: int) -> Showtime:
        return self._parse(Showtime, await self._request("GET", f"/showtimes/{showtime_id}"))

    async def get_showtime_seats(self, showtime_id: int) -> ShowtimeSeatLayout:
        return self._parse(ShowtimeSeatLayout, await self._request("GET", f"/showtimes/{showtime_id}/seats"))

    # Bookings

    async def create_booking(self, showtime_id: int, seat_ids: list[int]) -> BookingCreated:
        payload = CreateBookingRequest(showtime_id=showtime_id, seat_ids=seat_ids)
        return self._parse(BookingCreated, await self._request("POST", "/bookings", json=payload.model_dump()))

    async def confirm_payment(self, booking_id: int, payment_method: Optional[str] = None) -> PaymentConfirmed:
        data = await self._request(
            "PUT", f"/bookings/{booking_id}/confirm-payment",
            json=ConfirmPaymentRequest(payment_method=payment_method).model_dump())
        return self._parse(PaymentConfirmed, data or {"booking_id": booking_id})

    async def my_bookings(self) -> list[Booking]:
        return self._parse(list[Booking], await self._request("GET", "/bookings/my-bookings") or [])

    async def get_booking(self, booking_id: int) -> Booking:
        return self._parse(Booking, await self._request("GET", f"/bookings/{booking_id}"))

    async def cancel_booking(self, booking_id: int):
        return await self._request("DELETE", f"/bookings/{booking_id}")

    # Auth

    async def login(self, data: LoginRequest) -> AuthResponse:
        return self._parse(AuthResponse, await self._request("POST", "/auth/login", json=data.model_dump()))

    async def register(self, data: RegisterRequest) -> AuthResponse:
        return self._parse(AuthResponse, await self._request("POST", "/auth/register", json=data.model_dump()))

    async def get_profile(self) -> UserProfile:
        return self._parse(UserProfile, await self._request("GET", "/auth/profile"))


async def get_backend(request: Request) -> BackendClient:
    """
    FastAPI dependency: a backend client on the shared connection pool,
    carrying the caller's bearer token if one was sent.
    """
    token = bearer_token(request.headers.get("Authorization"))
    return BackendClient(request.app.state.http_client, token=token)
