from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from redis.asyncio import Redis

from booking_flow.clients.backend import BackendClient, get_backend
from booking_flow.core.auth import require_user
from booking_flow.redis import get_redis
from booking_flow.schemas.auth import UserProfile
from booking_flow.schemas.booking import ConfirmPaymentRequest
from booking_flow.schemas.envelope import Envelope
from booking_flow.schemas.session import BookingSessionView, CheckoutResult, CheckoutSummary
from booking_flow.services.booking_flow import BookingFlowController, get_booking_flow

router = APIRouter(
    prefix="/booking-sessions"
)


class StartSessionPayload(BaseModel):
    showtime_id: int


@router.post("", response_model=Envelope[BookingSessionView], status_code=201)
async def start_session(
        data: StartSessionPayload,
        backend: BackendClient = Depends(get_backend),
        redis: Redis = Depends(get_redis),
        flow: BookingFlowController = Depends(get_booking_flow)):
    session = await flow.start(backend, redis, data.showtime_id)
    return Envelope(success=True, data=await flow.view(redis, session))


@router.get("/{session_id}", response_model=Envelope[BookingSessionView])
async def get_session(
        session_id: str,
        redis: Redis = Depends(get_redis),
        flow: BookingFlowController = Depends(get_booking_flow)):
    session = await flow.get(redis, session_id)
    return Envelope(success=True, data=await flow.view(redis, session))


@router.post("/{session_id}/seats/{seat_id}/toggle", response_model=Envelope[BookingSessionView])
async def toggle_seat(
        session_id: str,
        seat_id: int,
        redis: Redis = Depends(get_redis),
        flow: BookingFlowController = Depends(get_booking_flow)):
    session = await flow.toggle(redis, session_id, seat_id)
    return Envelope(success=True, data=await flow.view(redis, session))


@router.post("/{session_id}/confirm", response_model=Envelope[CheckoutSummary])
async def confirm_seats(
        session_id: str,
        redis: Redis = Depends(get_redis),
        flow: BookingFlowController = Depends(get_booking_flow)):
    return Envelope(success=True, data=await flow.confirm(redis, session_id))


@router.post("/{session_id}/back", response_model=Envelope[BookingSessionView])
async def back_to_seats(
        session_id: str,
        redis: Redis = Depends(get_redis),
        flow: BookingFlowController = Depends(get_booking_flow)):
    session = await flow.back_to_seats(redis, session_id)
    return Envelope(success=True, data=await flow.view(redis, session))


@router.post("/{session_id}/submit", response_model=Envelope[CheckoutResult])
async def submit_booking(
        session_id: str,
        data: Optional[ConfirmPaymentRequest] = None,
        user: UserProfile = Depends(require_user),
        backend: BackendClient = Depends(get_backend),
        redis: Redis = Depends(get_redis),
        flow: BookingFlowController = Depends(get_booking_flow)):
    payment_method = data.payment_method if data else None
    result = await flow.submit(backend, redis, session_id, payment_method)
    return Envelope(success=True, data=result, message="Booking confirmed")


@router.delete("/{session_id}", response_model=Envelope[None])
async def discard_session(
        session_id: str,
        redis: Redis = Depends(get_redis),
        flow: BookingFlowController = Depends(get_booking_flow)):
    await flow.discard(redis, session_id)
    return Envelope(success=True, message="Booking session discarded")
