import logging
from typing import Optional, Tuple
from redis.asyncio import Redis

from booking_flow.clients.backend import BackendClient
from booking_flow.core.config import Settings, settings
from booking_flow.core.exceptions import (
    BackendResponseError,
    BackendUnavailableError,
    BookingFlowError,
    InvalidTransitionError,
    PaymentConfirmationError,
    SeatUnavailableError,
)
from booking_flow.crud.booked_seats import CRUDBookedSeats, crud_booked_seats
from booking_flow.crud.booking_session import CRUDBookingSession, crud_booking_session
from booking_flow.schemas.booking import BookingCreated
from booking_flow.schemas.seat import Seat
from booking_flow.schemas.session import (
    BookingDraft,
    BookingSession,
    BookingSessionView,
    CheckoutResult,
    CheckoutSummary,
    SessionState,
)
from booking_flow.schemas.showtime import Showtime
from booking_flow.services.checkout import CheckoutAssembler, calculate_total, checkout_assembler
from booking_flow.services.seat_selection import SeatSelection, build_default_grid

logger = logging.getLogger(__name__)

PLACEHOLDER_MOVIE_TITLE = "Unknown Movie"
PLACEHOLDER_CINEMA_NAME = "Unknown Cinema"

# action -> states it is allowed from
TRANSITIONS = {
    "start": {SessionState.BROWSING},
    "toggle": {SessionState.SEAT_SELECTING},
    "confirm": {SessionState.SEAT_SELECTING},
    "back_to_seats": {SessionState.CONFIRMING, SessionState.FAILED},
    "submit": {SessionState.CONFIRMING, SessionState.FAILED},
}


def check_transition(session: BookingSession, action: str):
    if session.state not in TRANSITIONS[action]:
        raise InvalidTransitionError(session.state.value, action)


class BookingFlowController:
    """
    Drives one booking session from showtime choice to a paid booking:
    BROWSING -> SEAT_SELECTING -> CONFIRMING -> SUCCESS | FAILED.
    FAILED can be resubmitted or sent back to seat selection; SUCCESS is terminal.
    """

    def __init__(
            self,
            config: Settings,
            sessions: CRUDBookingSession,
            booked_seats: CRUDBookedSeats,
            checkout: CheckoutAssembler):
        self.config = config
        self.sessions = sessions
        self.booked_seats = booked_seats
        self.checkout = checkout

    def placeholder_showtime(self, showtime_id: int) -> Showtime:
        return Showtime(
            showtime_id=showtime_id,
            movie_title=PLACEHOLDER_MOVIE_TITLE,
            cinema_name=PLACEHOLDER_CINEMA_NAME,
            price=self.config.DEFAULT_SEAT_PRICE,
        )

    async def load_showtime(self, backend: BackendClient, showtime_id: int) -> Tuple[Showtime, list[Seat], bool]:
        """
        Seat layout and metadata for a showtime, degrading instead of failing:
        seat endpoint, then showtime endpoint, then placeholder metadata, and a
        synthesized grid when no seats are known.
        """
        showtime: Optional[Showtime] = None
        seats: list[Seat] = []
        try:
            layout = await backend.get_showtime_seats(showtime_id)
            showtime, seats = layout.showtime, layout.seats
        except (BackendUnavailableError, BackendResponseError) as e:
            logger.warning(f"Seat layout for showtime {showtime_id} unavailable, degrading: {e}")

        if showtime is None:
            try:
                showtime = await backend.get_showtime(showtime_id)
            except (BackendUnavailableError, BackendResponseError) as e:
                logger.warning(f"Showtime {showtime_id} metadata unavailable, using placeholder: {e}")
                showtime = self.placeholder_showtime(showtime_id)

        updates = {"showtime_id": showtime_id}
        if showtime.price is None:
            updates["price"] = self.config.DEFAULT_SEAT_PRICE
        showtime = showtime.model_copy(update=updates)

        synthesized = not seats
        if synthesized:
            seats = build_default_grid(self.config.DEFAULT_SEAT_ROWS, self.config.DEFAULT_SEATS_PER_ROW)
        return showtime, seats, synthesized

    async def selection_for(self, redis: Redis, session: BookingSession) -> SeatSelection:
        selection = SeatSelection(
            session.showtime.showtime_id,
            session.seats,
            booked_seat_ids=session.booked_seat_ids,
            selected=session.selected_seat_ids,
        )
        # other sessions may have booked seats since this one started
        selection.merge_booked(await self.booked_seats.get(redis, session.showtime.showtime_id))
        return selection

    def store_selection(self, session: BookingSession, selection: SeatSelection):
        session.booked_seat_ids = sorted(selection.booked)
        session.selected_seat_ids = selection.selected

    def summary(self, session: BookingSession, selection: SeatSelection, draft: BookingDraft) -> CheckoutSummary:
        showtime = session.showtime
        return CheckoutSummary(
            draft=draft,
            seat_labels=selection.labels(),
            movie_title=showtime.movie_title,
            cinema_name=showtime.cinema_name,
            theater_name=showtime.theater_name,
            show_date=showtime.show_date,
            show_time=showtime.show_time,
        )

    async def start(self, backend: BackendClient, redis: Redis, showtime_id: int) -> BookingSession:
        showtime, seats, synthesized = await self.load_showtime(backend, showtime_id)
        session = await self.sessions.create(redis, showtime)
        check_transition(session, "start")
        session.seats = seats
        session.synthesized_layout = synthesized
        self.store_selection(session, await self.selection_for(redis, session))
        session.state = SessionState.SEAT_SELECTING
        await self.sessions.save(redis, session)
        logger.info(f"Booking session {session.session_id} started for showtime {showtime_id}")
        return session

    async def get(self, redis: Redis, session_id: str) -> BookingSession:
        return await self.sessions.get(redis, session_id)

    async def view(self, redis: Redis, session: BookingSession) -> BookingSessionView:
        selection = await self.selection_for(redis, session)
        return BookingSessionView(
            session_id=session.session_id,
            state=session.state,
            showtime=session.showtime,
            rows=selection.layout(),
            selected_seat_ids=selection.selected,
            selected_labels=selection.labels(),
            total_price=calculate_total(len(selection.selected), session.showtime.price),
            synthesized_layout=session.synthesized_layout,
            result=session.result,
            last_error=session.last_error,
        )

    async def toggle(self, redis: Redis, session_id: str, seat_id: int) -> BookingSession:
        session = await self.sessions.get(redis, session_id)
        check_transition(session, "toggle")
        selection = await self.selection_for(redis, session)
        selection.toggle(seat_id)
        self.store_selection(session, selection)
        await self.sessions.save(redis, session)
        return session

    async def confirm(self, redis: Redis, session_id: str) -> CheckoutSummary:
        session = await self.sessions.get(redis, session_id)
        check_transition(session, "confirm")
        selection = await self.selection_for(redis, session)
        try:
            draft = selection.confirm(session.showtime.price)
        except SeatUnavailableError:
            # taken seats are already out of the selection, keep the rest
            self.store_selection(session, selection)
            await self.sessions.save(redis, session)
            raise
        self.store_selection(session, selection)
        session.state = SessionState.CONFIRMING
        await self.sessions.save(redis, session)
        return self.summary(session, selection, draft)

    async def back_to_seats(self, redis: Redis, session_id: str) -> BookingSession:
        session = await self.sessions.get(redis, session_id)
        check_transition(session, "back_to_seats")
        if session.pending_booking_id is not None:
            # the unpaid booking is left for the backend to expire
            logger.info(f"Abandoning unpaid booking {session.pending_booking_id} of session {session_id}")
            session.pending_booking_id = None
            session.pending_booking_code = None
        session.state = SessionState.SEAT_SELECTING
        session.last_error = None
        await self.sessions.save(redis, session)
        return session

    async def submit(
            self,
            backend: BackendClient,
            redis: Redis,
            session_id: str,
            payment_method: Optional[str] = None) -> CheckoutResult:
        session = await self.sessions.get(redis, session_id)
        check_transition(session, "submit")
        draft = BookingDraft(
            showtime_id=session.showtime.showtime_id,
            seat_ids=session.selected_seat_ids,
            unit_price=session.showtime.price,
        )
        pending = None
        if session.pending_booking_id is not None:
            pending = BookingCreated(booking_id=session.pending_booking_id, booking_code=session.pending_booking_code)

        try:
            result = await self.checkout.submit(backend, redis, draft, payment_method, booking=pending)
        except PaymentConfirmationError as e:
            session.pending_booking_id = e.booking_id
            session.pending_booking_code = e.booking_code
            await self.fail(redis, session, e)
            raise
        except BookingFlowError as e:
            await self.fail(redis, session, e)
            raise

        selection = await self.selection_for(redis, session)
        selection.merge_booked(result.seat_ids)
        selection.clear()
        self.store_selection(session, selection)
        session.state = SessionState.SUCCESS
        session.result = result
        session.pending_booking_id = None
        session.pending_booking_code = None
        session.last_error = None
        await self.sessions.save(redis, session)
        logger.info(f"Booking session {session_id} completed with booking {result.booking_id}")
        return result

    async def fail(self, redis: Redis, session: BookingSession, error: BookingFlowError):
        session.state = SessionState.FAILED
        session.last_error = error.message
        await self.sessions.save(redis, session)

    async def discard(self, redis: Redis, session_id: str):
        await self.sessions.delete(redis, session_id)


booking_flow_controller = BookingFlowController(settings, crud_booking_session, crud_booked_seats, checkout_assembler)


def get_booking_flow() -> BookingFlowController:
    return booking_flow_controller
