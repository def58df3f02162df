from typing import Optional
from uuid import uuid4
from redis.asyncio import Redis

from booking_flow.core.config import settings
from booking_flow.core.exceptions import BookingSessionNotFoundError
from booking_flow.schemas.session import BookingSession
from booking_flow.schemas.showtime import Showtime


class CRUDBookingSession:
    def __init__(self, ttl_seconds: int = 900):
        self.ttl_seconds = ttl_seconds

    def key(self, session_id: str) -> str:
        return f"booking_session:{session_id}"

    async def create(self, redis: Redis, showtime: Showtime) -> BookingSession:
        session = BookingSession(session_id=uuid4().hex, showtime=showtime)
        await self.save(redis, session)
        return session

    async def find(self, redis: Redis, session_id: str) -> Optional[BookingSession]:
        cached = await redis.get(self.key(session_id))
        if cached is None:
            return None
        return BookingSession.model_validate_json(cached)

    async def get(self, redis: Redis, session_id: str) -> BookingSession:
        session = await self.find(redis, session_id)
        if session is None:
            raise BookingSessionNotFoundError(session_id)
        return session

    async def save(self, redis: Redis, session: BookingSession):
        await redis.set(self.key(session.session_id), session.model_dump_json(), ex=self.ttl_seconds)

    async def delete(self, redis: Redis, session_id: str):
        await redis.delete(self.key(session_id))


crud_booking_session = CRUDBookingSession(ttl_seconds=settings.BOOKING_SESSION_TTL_SECONDS)
