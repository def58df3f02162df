from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, field_validator


def normalize_date(value: Any) -> Optional[str]:
    """Reduce ``2025-11-17T00:00:00Z`` and ``2025-11-17`` alike to ``2025-11-17``."""
    if value is None:
        return None
    return str(value).split("T")[0]


def normalize_time(value: Any) -> Optional[str]:
    """Reduce ``0000-01-01T10:30:00Z``, ``10:30:00`` and ``10:30`` alike to ``10:30``."""
    if value is None:
        return None
    value = str(value)
    if "T" in value:
        value = value.split("T")[1]
    return value[:5]


class Showtime(BaseModel):
    """A scheduled screening. Every reference is optional: the grouper keys on
    whatever the backend sent, including ``None``."""
    model_config = ConfigDict(extra="ignore")

    showtime_id: Optional[int] = None
    movie_id: Optional[int] = None
    movie_title: Optional[str] = None
    cinema_id: Optional[int] = None
    cinema_name: Optional[str] = None
    theater_id: Optional[int] = None
    theater_name: Optional[str] = None
    show_date: Optional[str] = None
    show_time: Optional[str] = None
    end_time: Optional[str] = None
    price: Optional[float] = None
    available_seats: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("show_date", mode="before")
    @classmethod
    def _date(cls, value):
        return normalize_date(value)

    @field_validator("show_time", "end_time", mode="before")
    @classmethod
    def _time(cls, value):
        return normalize_time(value)


class MovieShowtimes(BaseModel):
    movie_id: Optional[int] = None
    title: str
    showtimes: list[Showtime] = []
