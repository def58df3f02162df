import logging
from typing import Iterable, List
from pydantic import BaseModel

from booking_flow.clients.backend import BackendClient
from booking_flow.core.exceptions import BackendResponseError, BackendUnavailableError
from booking_flow.schemas.cinema import Cinema
from booking_flow.schemas.movie import Movie
from booking_flow.schemas.showtime import MovieShowtimes, Showtime
from booking_flow.services.showtime_grouper import group_by_cinema_and_date, group_by_movie, sorted_dates

logger = logging.getLogger(__name__)


class CinemaShowtimes(BaseModel):
    cinema: Cinema
    dates: List[str]
    showtimes_by_date: dict[str, List[Showtime]]


class MovieFirstView(BaseModel):
    movie_id: int
    movie_title: str
    cinemas: List[CinemaShowtimes]


class CinemaFirstView(BaseModel):
    cinema_id: int
    movies: List[MovieShowtimes]


def active_only(showtimes: Iterable[Showtime]) -> List[Showtime]:
    # a missing flag counts as active
    return [showtime for showtime in showtimes if showtime.is_active is not False]


async def movie_first_view(backend: BackendClient, movie_id: int) -> MovieFirstView:
    """Cinemas showing a movie, each with its showtimes grouped by date."""
    cinemas = await backend.list_cinemas(is_active=True)
    showtimes = await backend.list_showtimes(is_active=True)
    try:
        movie_title = (await backend.get_movie(movie_id)).title
    except (BackendUnavailableError, BackendResponseError) as e:
        logger.warning(f"Movie {movie_id} lookup failed: {e}")
        movie_title = f"ID {movie_id} (Not Found)"

    matching = [
        showtime for showtime in active_only(showtimes)
        if showtime.movie_id == movie_id and showtime.show_date is not None
    ]
    grouped = group_by_cinema_and_date(matching)
    return MovieFirstView(
        movie_id=movie_id,
        movie_title=movie_title,
        cinemas=[
            CinemaShowtimes(
                cinema=cinema,
                dates=sorted_dates(grouped[cinema.cinema_id]),
                showtimes_by_date=grouped[cinema.cinema_id],
            )
            for cinema in cinemas if cinema.cinema_id in grouped
        ],
    )


async def cinema_first_view(backend: BackendClient, cinema_id: int) -> CinemaFirstView:
    showtimes = await backend.list_showtimes(is_active=True)
    in_cinema = [showtime for showtime in active_only(showtimes) if showtime.cinema_id == cinema_id]
    return CinemaFirstView(cinema_id=cinema_id, movies=list(group_by_movie(in_cinema).values()))


def has_genre(movie: Movie, genre: str) -> bool:
    return any(candidate.lower() == genre.lower() for candidate in movie.genres or [])


async def movies_by_genre(backend: BackendClient, genre: str) -> List[Movie]:
    return [movie for movie in await backend.list_movies() if has_genre(movie, genre)]
