from typing import Optional
from pydantic import BaseModel, ConfigDict


class Movie(BaseModel):
    model_config = ConfigDict(extra="ignore")

    movie_id: int
    title: str
    description: Optional[str] = None
    duration: Optional[int] = None  # minutes
    language: Optional[str] = None
    subtitle: Optional[str] = None
    genres: Optional[list[str]] = None
    poster_url: Optional[str] = None
    release_date: Optional[str] = None
    is_active: bool = True
