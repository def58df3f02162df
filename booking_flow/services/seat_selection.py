import string
from collections import defaultdict
from typing import Dict, Iterable, List, Set

from booking_flow.core.exceptions import EmptySelectionError, SeatNotFoundError, SeatUnavailableError
from booking_flow.schemas.seat import Seat, SeatRowView, SeatView
from booking_flow.schemas.session import BookingDraft


def build_default_grid(rows: int = 5, seats_per_row: int = 30) -> List[Seat]:
    """
    Placeholder layout for when the backend has no seats for a showtime:
    rows A, B, C... with seat ids numbered row by row from 1.
    """
    if not 0 < rows <= len(string.ascii_uppercase):
        raise ValueError(f"rows must be between 1 and {len(string.ascii_uppercase)}")
    if seats_per_row <= 0:
        raise ValueError("seats_per_row must be positive")
    return [
        Seat(seat_id=row_index * seats_per_row + number, seat_row=row_label, seat_number=number)
        for row_index, row_label in enumerate(string.ascii_uppercase[:rows])
        for number in range(1, seats_per_row + 1)
    ]


class SeatSelection:
    """
    Toggle state for one booking session.

    ``booked`` is the union of seats the backend reports as booked, reserved
    or inactive and the ids passed in from the booked seats cache. A booked
    seat can never enter the selection; a selected seat that turns out to be
    booked is dropped from the selection and remembered in ``taken`` so the
    next confirm can report it.
    """

    def __init__(self, showtime_id: int, seats: Iterable[Seat], booked_seat_ids: Iterable[int] = (), selected: Iterable[int] = ()):
        self.showtime_id = showtime_id
        self.seats = list(seats)
        self._seats_by_id: Dict[int, Seat] = {seat.seat_id: seat for seat in self.seats}
        self.booked: Set[int] = {seat.seat_id for seat in self.seats if seat.is_unavailable}
        # dict keeps insertion order, i.e. click order
        self._selected: Dict[int, None] = dict.fromkeys(selected)
        self.taken: List[int] = []
        self.merge_booked(booked_seat_ids)

    @property
    def selected(self) -> List[int]:
        return list(self._selected)

    def is_booked(self, seat_id: int) -> bool:
        return seat_id in self.booked

    def merge_booked(self, seat_ids: Iterable[int]) -> List[int]:
        """Add seats booked elsewhere. Returns the selected seats this released."""
        self.booked.update(seat_ids)
        released = [seat_id for seat_id in self._selected if seat_id in self.booked]
        for seat_id in released:
            del self._selected[seat_id]
        self.taken.extend(released)
        return released

    def toggle(self, seat_id: int) -> bool:
        """Flip a seat in or out of the selection. Returns False for booked seats."""
        if seat_id not in self._seats_by_id:
            raise SeatNotFoundError(seat_id)
        if self.is_booked(seat_id):
            return False
        if seat_id in self._selected:
            del self._selected[seat_id]
        else:
            self._selected[seat_id] = None
        return True

    def clear(self):
        self._selected.clear()

    def labels(self) -> List[str]:
        return [self._seats_by_id[seat_id].label for seat_id in self._selected]

    def confirm(self, unit_price: float) -> BookingDraft:
        if self.taken:
            raise SeatUnavailableError(self.taken)
        if not self._selected:
            raise EmptySelectionError()
        return BookingDraft(showtime_id=self.showtime_id, seat_ids=self.selected, unit_price=unit_price)

    def layout(self) -> List[SeatRowView]:
        rows: Dict[str, List[SeatView]] = defaultdict(list)
        for seat in self.seats:
            rows[seat.seat_row].append(SeatView(
                seat_id=seat.seat_id,
                label=seat.label,
                seat_type=seat.seat_type,
                disabled=self.is_booked(seat.seat_id),
                selected=seat.seat_id in self._selected,
            ))
        return [SeatRowView(row=row, seats=seats) for row, seats in rows.items()]
