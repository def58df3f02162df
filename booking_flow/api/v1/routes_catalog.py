from typing import Optional
from fastapi import APIRouter, Depends

from booking_flow.clients.backend import BackendClient, get_backend
from booking_flow.schemas.cinema import Cinema, Theater
from booking_flow.schemas.envelope import Envelope
from booking_flow.schemas.movie import Movie
from booking_flow.schemas.showtime import Showtime
from booking_flow.services.catalog import (
    CinemaFirstView,
    MovieFirstView,
    cinema_first_view,
    movie_first_view,
    movies_by_genre,
)

router = APIRouter()


@router.get("/movies", response_model=Envelope[list[Movie]])
async def list_movies(genre: Optional[str] = None, backend: BackendClient = Depends(get_backend)):
    if genre:
        return Envelope(success=True, data=await movies_by_genre(backend, genre))
    return Envelope(success=True, data=await backend.list_movies())


@router.get("/movies/{movie_id}", response_model=Envelope[Movie])
async def get_movie(movie_id: int, backend: BackendClient = Depends(get_backend)):
    return Envelope(success=True, data=await backend.get_movie(movie_id))


@router.get("/movies/{movie_id}/showtimes", response_model=Envelope[MovieFirstView])
async def get_movie_showtimes(movie_id: int, backend: BackendClient = Depends(get_backend)):
    """Movie-first booking: cinemas showing the movie, showtimes grouped by date."""
    return Envelope(success=True, data=await movie_first_view(backend, movie_id))


@router.get("/cinemas", response_model=Envelope[list[Cinema]])
async def list_cinemas(is_active: Optional[bool] = None, backend: BackendClient = Depends(get_backend)):
    return Envelope(success=True, data=await backend.list_cinemas(is_active=is_active))


@router.get("/cinemas/{cinema_id}/movies", response_model=Envelope[CinemaFirstView])
async def get_cinema_movies(cinema_id: int, backend: BackendClient = Depends(get_backend)):
    """Cinema-first booking: movies with active showtimes in the cinema."""
    return Envelope(success=True, data=await cinema_first_view(backend, cinema_id))


@router.get("/theaters", response_model=Envelope[list[Theater]])
async def list_theaters(backend: BackendClient = Depends(get_backend)):
    return Envelope(success=True, data=await backend.list_theaters())


@router.get("/showtimes", response_model=Envelope[list[Showtime]])
async def list_showtimes(is_active: Optional[bool] = None, backend: BackendClient = Depends(get_backend)):
    return Envelope(success=True, data=await backend.list_showtimes(is_active=is_active))


@router.get("/showtimes/{showtime_id}", response_model=Envelope[Showtime])
async def get_showtime(showtime_id: int, backend: BackendClient = Depends(get_backend)):
    return Envelope(success=True, data=await backend.get_showtime(showtime_id))
