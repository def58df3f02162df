import logging
from typing import Optional
from redis.asyncio import Redis

from booking_flow.clients.backend import BackendClient
from booking_flow.core.config import settings
from booking_flow.core.exceptions import (
    BackendResponseError,
    BackendUnavailableError,
    EmptySelectionError,
    PaymentConfirmationError,
)
from booking_flow.crud.booked_seats import CRUDBookedSeats, crud_booked_seats
from booking_flow.schemas.booking import BookingCreated
from booking_flow.schemas.session import BookingDraft, CheckoutResult

logger = logging.getLogger(__name__)


def calculate_total(seat_count: int, unit_price: float) -> float:
    return seat_count * unit_price


class CheckoutAssembler:
    def __init__(self, booked_seats: CRUDBookedSeats, offline_demo_mode: bool = False):
        self.booked_seats = booked_seats
        self.offline_demo_mode = offline_demo_mode

    # .1 reject an empty draft before touching the network.
    # .2 create the booking, unless a previous attempt already did.
    # .3 confirm payment. fail closed unless offline demo mode is on and the backend was unreachable.
    # .4 record the seats in the booked seats cache.

    async def submit(
            self,
            backend: BackendClient,
            redis: Redis,
            draft: BookingDraft,
            payment_method: Optional[str] = None,
            booking: Optional[BookingCreated] = None) -> CheckoutResult:
        if not draft.seat_ids:
            raise EmptySelectionError()

        if booking is None:
            try:
                booking = await backend.create_booking(draft.showtime_id, draft.seat_ids)
            except (BackendUnavailableError, BackendResponseError) as e:
                logger.error(f"Failed to create booking for showtime {draft.showtime_id}: {e}", exc_info=True)
                raise
            logger.info(f"Booking {booking.booking_id} created for showtime {draft.showtime_id}, seats {draft.seat_ids}")

        confirmed = True
        try:
            await backend.confirm_payment(booking.booking_id, payment_method)
        except BackendUnavailableError as e:
            if not self.offline_demo_mode:
                logger.error(f"Failed to confirm payment for booking {booking.booking_id}: {e}", exc_info=True)
                raise PaymentConfirmationError(booking.booking_id, e.message, booking.booking_code) from e
            logger.warning(f"Offline demo mode: booking {booking.booking_id} recorded locally without payment confirmation")
            confirmed = False
        except BackendResponseError as e:
            logger.error(f"Payment rejected for booking {booking.booking_id}: {e}", exc_info=True)
            raise PaymentConfirmationError(booking.booking_id, e.message, booking.booking_code) from e

        await self.booked_seats.add(redis, draft.showtime_id, draft.seat_ids)
        return CheckoutResult(
            booking_id=booking.booking_id,
            booking_code=booking.booking_code,
            showtime_id=draft.showtime_id,
            seat_ids=draft.seat_ids,
            total_price=calculate_total(len(draft.seat_ids), draft.unit_price),
            confirmed=confirmed,
        )


checkout_assembler = CheckoutAssembler(crud_booked_seats, offline_demo_mode=settings.OFFLINE_DEMO_MODE)
