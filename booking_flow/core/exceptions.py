from typing import List, Optional


class BookingFlowError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class BackendUnavailableError(BookingFlowError):
    """The backend could not be reached at all (connection, DNS, timeout)."""

    def __init__(self, message: str = "Booking backend is unavailable"):
        super().__init__(message, status_code=503)


class BackendResponseError(BookingFlowError):
    """The backend answered, but with a non-2xx status or ``success: false``."""

    def __init__(self, message: str, backend_status: Optional[int] = None):
        self.backend_status = backend_status
        # pass through client errors (401, 404, ...), collapse the rest to a gateway error
        if backend_status is not None and 400 <= backend_status < 500:
            status_code = backend_status
        else:
            status_code = 502
        super().__init__(message, status_code=status_code)


class EmptySelectionError(BookingFlowError):
    def __init__(self):
        super().__init__("At least one seat must be selected", status_code=400)


class SeatUnavailableError(BookingFlowError):
    def __init__(self, seat_ids: List[int]):
        self.seat_ids = seat_ids
        super().__init__(f"Seats no longer available: {seat_ids}", status_code=409)


class SeatNotFoundError(BookingFlowError):
    def __init__(self, seat_id: int):
        super().__init__(f"Seat {seat_id} is not part of this showtime", status_code=404)


class BookingSessionNotFoundError(BookingFlowError):
    def __init__(self, session_id: str):
        super().__init__(f"Booking session {session_id} not found or expired", status_code=404)


class InvalidTransitionError(BookingFlowError):
    def __init__(self, current: str, action: str):
        super().__init__(f"Cannot {action} while booking session is {current}", status_code=409)


class PaymentConfirmationError(BookingFlowError):
    def __init__(self, booking_id: int, reason: str, booking_code: Optional[str] = None):
        self.booking_id = booking_id
        self.booking_code = booking_code
        super().__init__(f"Booking {booking_id} was created but payment was not confirmed: {reason}", status_code=502)


class NotAuthenticatedError(BookingFlowError):
    def __init__(self):
        super().__init__("Authentication required", status_code=401)
