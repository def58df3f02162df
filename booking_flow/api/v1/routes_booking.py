import logging
from fastapi import APIRouter, Depends
from redis.asyncio import Redis

from booking_flow.clients.backend import BackendClient, get_backend
from booking_flow.core.auth import require_user
from booking_flow.crud.booked_seats import crud_booked_seats
from booking_flow.redis import get_redis
from booking_flow.schemas.auth import UserProfile
from booking_flow.schemas.booking import Booking
from booking_flow.schemas.envelope import Envelope

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bookings"
)


@router.get("/my-bookings", response_model=Envelope[list[Booking]])
async def my_bookings(
        user: UserProfile = Depends(require_user),
        backend: BackendClient = Depends(get_backend)):
    return Envelope(success=True, data=await backend.my_bookings())


@router.get("/{booking_id}", response_model=Envelope[Booking])
async def get_booking(
        booking_id: int,
        user: UserProfile = Depends(require_user),
        backend: BackendClient = Depends(get_backend)):
    return Envelope(success=True, data=await backend.get_booking(booking_id))


@router.delete("/{booking_id}", response_model=Envelope[None])
async def cancel_booking(
        booking_id: int,
        user: UserProfile = Depends(require_user),
        backend: BackendClient = Depends(get_backend),
        redis: Redis = Depends(get_redis)):
    booking = await backend.get_booking(booking_id)
    await backend.cancel_booking(booking_id)
    if booking.showtime_id is not None:
        # the seats are free again, drop the local view of them
        await crud_booked_seats.invalidate(redis, booking.showtime_id)
    logger.info(f"Booking {booking_id} cancelled by user {user.user_id}")
    return Envelope(success=True, message="Booking cancelled")
