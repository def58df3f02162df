from typing import Iterable, Set
from redis.asyncio import Redis

from booking_flow.core.config import settings


class CRUDBookedSeats:
    """
    Seat ids known to be unavailable per showtime, on top of what the backend
    reports. Entries expire so a stale local view never outlives the hold.
    """

    def __init__(self, ttl_seconds: int = 600):
        self.ttl_seconds = ttl_seconds

    def key(self, showtime_id: int) -> str:
        return f"booked_seats:showtime:{showtime_id}"

    async def get(self, redis: Redis, showtime_id: int) -> Set[int]:
        members = await redis.smembers(self.key(showtime_id))
        return {int(member) for member in members}

    async def add(self, redis: Redis, showtime_id: int, seat_ids: Iterable[int]):
        seat_ids = [int(seat_id) for seat_id in seat_ids]
        if not seat_ids:
            return
        key = self.key(showtime_id)
        pipe = redis.pipeline()
        pipe.sadd(key, *seat_ids)
        # every write pushes the expiry out again
        pipe.expire(key, self.ttl_seconds)
        await pipe.execute()

    async def invalidate(self, redis: Redis, showtime_id: int):
        await redis.delete(self.key(showtime_id))


crud_booked_seats = CRUDBookedSeats(ttl_seconds=settings.BOOKED_SEATS_TTL_SECONDS)
