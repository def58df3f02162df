import pytest

from booking_flow.core.exceptions import EmptySelectionError, SeatNotFoundError, SeatUnavailableError
from booking_flow.schemas.seat import Seat, SeatStatus
from booking_flow.services.checkout import calculate_total
from booking_flow.services.seat_selection import SeatSelection, build_default_grid


@pytest.fixture
def grid():
    return build_default_grid(rows=5, seats_per_row=30)


def test_default_grid_numbers_seats_row_by_row(grid):
    by_id = {seat.seat_id: seat.label for seat in grid}

    assert len(grid) == 150
    assert by_id[1] == "A1"
    assert by_id[30] == "A30"
    assert by_id[31] == "B1"
    assert by_id[150] == "E30"


def test_default_grid_rejects_bad_dimensions():
    with pytest.raises(ValueError):
        build_default_grid(rows=0)
    with pytest.raises(ValueError):
        build_default_grid(rows=27)
    with pytest.raises(ValueError):
        build_default_grid(seats_per_row=0)


def test_booked_seats_render_disabled_and_free_seats_toggle(grid):
    selection = SeatSelection(7, grid, booked_seat_ids=[1, 2])

    first_row = {view.label: view for view in selection.layout()[0].seats}
    assert first_row["A1"].disabled and first_row["A2"].disabled
    assert not first_row["A3"].disabled

    assert selection.toggle(3) is True
    assert selection.selected == [3]


def test_toggling_twice_restores_the_selection(grid):
    selection = SeatSelection(7, grid, selected=[5])

    selection.toggle(9)
    selection.toggle(9)

    assert selection.selected == [5]


def test_toggling_a_booked_seat_changes_nothing(grid):
    selection = SeatSelection(7, grid, booked_seat_ids=[1], selected=[4])

    assert selection.toggle(1) is False
    assert selection.selected == [4]


def test_backend_status_feeds_the_booked_union():
    seats = [
        Seat(seat_id=1, seat_row="A", seat_number=1, status=SeatStatus.BOOKED),
        Seat(seat_id=2, seat_row="A", seat_number=2, status=SeatStatus.RESERVED),
        Seat(seat_id=3, seat_row="A", seat_number=3, is_active=False),
        Seat(seat_id=4, seat_row="A", seat_number=4),
    ]

    selection = SeatSelection(7, seats, booked_seat_ids=[4])

    assert selection.booked == {1, 2, 3, 4}


def test_selection_keeps_click_order(grid):
    selection = SeatSelection(7, grid)

    for seat_id in (33, 1, 12):
        selection.toggle(seat_id)

    assert selection.selected == [33, 1, 12]
    assert selection.labels() == ["B3", "A1", "A12"]


def test_unknown_seat_is_rejected(grid):
    selection = SeatSelection(7, grid)

    with pytest.raises(SeatNotFoundError):
        selection.toggle(999)


def test_confirm_requires_a_seat(grid):
    with pytest.raises(EmptySelectionError):
        SeatSelection(7, grid).confirm(200)


def test_confirm_builds_a_priced_draft(grid):
    selection = SeatSelection(7, grid)
    for seat_id in (1, 2, 3):
        selection.toggle(seat_id)

    draft = selection.confirm(200)

    assert draft.showtime_id == 7
    assert draft.seat_ids == [1, 2, 3]
    assert draft.total_price == 600
    assert draft.total_price == calculate_total(len(selection.selected), 200)


def test_confirm_rejects_seats_booked_since_they_were_picked(grid):
    selection = SeatSelection(7, grid)
    selection.toggle(1)
    selection.toggle(3)

    released = selection.merge_booked([3])

    assert released == [3]
    assert selection.selected == [1]
    first_row = {view.label: view for view in selection.layout()[0].seats}
    assert first_row["A3"].disabled and not first_row["A3"].selected
    with pytest.raises(SeatUnavailableError) as exc:
        selection.confirm(200)
    assert exc.value.seat_ids == [3]


def test_selection_restored_with_a_booked_seat_drops_it(grid):
    selection = SeatSelection(7, grid, booked_seat_ids=[2], selected=[1, 2])

    assert selection.selected == [1]
    assert selection.taken == [2]


def test_clear_empties_the_selection(grid):
    selection = SeatSelection(7, grid, selected=[1, 2])

    selection.clear()

    assert selection.selected == []
