from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class CreateBookingRequest(BaseModel):
    showtime_id: int
    seat_ids: list[int] = Field(min_length=1)


class ConfirmPaymentRequest(BaseModel):
    payment_method: Optional[str] = None  # credit_card, promptpay, cash


class BookingCreated(BaseModel):
    model_config = ConfigDict(extra="ignore")

    booking_id: int
    booking_code: Optional[str] = None
    total_amount: Optional[float] = None


class PaymentConfirmed(BaseModel):
    model_config = ConfigDict(extra="ignore")

    booking_id: int
    payment_status: str = "paid"
    booking_status: str = "confirmed"


class BookingSeatInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    seat_id: int
    seat_row: Optional[str] = None
    seat_number: Optional[int] = None
    price: Optional[float] = None


class Booking(BaseModel):
    model_config = ConfigDict(extra="ignore")

    booking_id: int
    booking_code: Optional[str] = None
    showtime_id: Optional[int] = None
    movie_title: Optional[str] = None
    cinema_name: Optional[str] = None
    theater_name: Optional[str] = None
    show_date: Optional[str] = None
    show_time: Optional[str] = None
    total_amount: Optional[float] = None
    booking_status: Optional[str] = None
    payment_status: Optional[str] = None
    booking_date: Optional[datetime] = None
    seats: list[BookingSeatInfo] = []
