from typing import Any, Dict, Iterable, List

from booking_flow.schemas.showtime import MovieShowtimes, Showtime

UNKNOWN_MOVIE_TITLE = "Unknown"


def group_by_cinema_and_date(showtimes: Iterable[Showtime]) -> Dict[Any, Dict[Any, List[Showtime]]]:
    """
    cinema_id -> show_date -> showtimes, in input order within each bucket.

    No filtering: a showtime missing its cinema or date is grouped under
    ``None``. Callers that only want active showtimes filter first.
    """
    grouped: Dict[Any, Dict[Any, List[Showtime]]] = {}
    for showtime in showtimes:
        by_date = grouped.setdefault(showtime.cinema_id, {})
        by_date.setdefault(showtime.show_date, []).append(showtime)
    return grouped


def group_by_movie(showtimes: Iterable[Showtime]) -> Dict[Any, MovieShowtimes]:
    """movie_id -> title and showtimes. The first title seen for a movie wins."""
    grouped: Dict[Any, MovieShowtimes] = {}
    for showtime in showtimes:
        group = grouped.get(showtime.movie_id)
        if group is None:
            group = MovieShowtimes(movie_id=showtime.movie_id, title=showtime.movie_title or UNKNOWN_MOVIE_TITLE)
            grouped[showtime.movie_id] = group
        group.showtimes.append(showtime)
    return grouped


def sorted_dates(showtimes_by_date: Dict[Any, List[Showtime]]) -> List[str]:
    return sorted(date for date in showtimes_by_date if date is not None)
