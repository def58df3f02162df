from enum import Enum
from typing import Optional
from pydantic import BaseModel, computed_field

from booking_flow.schemas.seat import Seat, SeatRowView
from booking_flow.schemas.showtime import Showtime


class SessionState(str, Enum):
    BROWSING = "BROWSING"
    SEAT_SELECTING = "SEAT_SELECTING"
    CONFIRMING = "CONFIRMING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class BookingDraft(BaseModel):
    showtime_id: int
    seat_ids: list[int]
    unit_price: float

    @computed_field
    @property
    def total_price(self) -> float:
        return len(self.seat_ids) * self.unit_price


class CheckoutSummary(BaseModel):
    """What the confirmation screen shows and forwards to payment."""
    draft: BookingDraft
    seat_labels: list[str]
    movie_title: Optional[str] = None
    cinema_name: Optional[str] = None
    theater_name: Optional[str] = None
    show_date: Optional[str] = None
    show_time: Optional[str] = None


class CheckoutResult(BaseModel):
    booking_id: Optional[int] = None
    booking_code: Optional[str] = None
    showtime_id: int
    seat_ids: list[int]
    total_price: float
    # False only for the opt-in offline demo fallback
    confirmed: bool = True


class BookingSession(BaseModel):
    session_id: str
    state: SessionState = SessionState.BROWSING
    showtime: Showtime
    seats: list[Seat] = []
    booked_seat_ids: list[int] = []
    selected_seat_ids: list[int] = []
    synthesized_layout: bool = False
    pending_booking_id: Optional[int] = None
    pending_booking_code: Optional[str] = None
    result: Optional[CheckoutResult] = None
    last_error: Optional[str] = None


class BookingSessionView(BaseModel):
    """A booking session as the seat picker renders it."""
    session_id: str
    state: SessionState
    showtime: Showtime
    rows: list[SeatRowView]
    selected_seat_ids: list[int]
    selected_labels: list[str]
    total_price: float
    synthesized_layout: bool = False
    result: Optional[CheckoutResult] = None
    last_error: Optional[str] = None
