from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict

from booking_flow.schemas.showtime import Showtime


class SeatType(str, Enum):
    STANDARD = "standard"
    VIP = "vip"


class SeatStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    RESERVED = "reserved"


class Seat(BaseModel):
    model_config = ConfigDict(extra="ignore")

    seat_id: int
    seat_row: str
    seat_number: int
    seat_type: SeatType = SeatType.STANDARD
    status: SeatStatus = SeatStatus.AVAILABLE
    is_active: bool = True
    booking_id: Optional[int] = None
    reserved_until: Optional[datetime] = None

    @property
    def label(self) -> str:
        return f"{self.seat_row}{self.seat_number}"

    @property
    def is_unavailable(self) -> bool:
        return self.status != SeatStatus.AVAILABLE or not self.is_active


class ShowtimeSeatLayout(BaseModel):
    """Payload of ``GET /showtimes/{id}/seats``."""
    model_config = ConfigDict(extra="ignore")

    showtime: Optional[Showtime] = None
    seats: list[Seat] = []


class SeatView(BaseModel):
    seat_id: int
    label: str
    seat_type: SeatType
    disabled: bool
    selected: bool


class SeatRowView(BaseModel):
    row: str
    seats: list[SeatView]
