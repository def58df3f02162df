from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Movie Booking Flow"
    PROJECT_VERSION: str = "0.1.0"
    PROJECT_DESCRIPTION: str = "Booking flow API: browse showtimes, pick seats and check out"
    ENV: str = Field(default="development", description="Environment of the application like development, production, etc.")
    API_V1_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = Field(default="INFO", description="Root log level")
    BACKEND_API_URL: str = Field(default="http://localhost:8081/api", description="Base URL of the movie booking REST backend")
    BACKEND_TIMEOUT_SECONDS: float = Field(default=10.0, description="Transport timeout for backend calls")
    REDIS_URL: str = Field(default="redis://localhost:6379", description="Redis URL")
    BOOKED_SEATS_TTL_SECONDS: int = Field(default=600, description="Expiry of a booked seats cache entry")
    BOOKING_SESSION_TTL_SECONDS: int = Field(default=900, description="Expiry of an idle booking session")
    DEFAULT_SEAT_PRICE: float = Field(default=200.0, description="Unit price used when showtime metadata is unavailable")
    DEFAULT_SEAT_ROWS: int = Field(default=5, description="Rows of the synthesized seat grid")
    DEFAULT_SEATS_PER_ROW: int = Field(default=30, description="Seats per row of the synthesized seat grid")
    OFFLINE_DEMO_MODE: bool = Field(default=False, description="Treat an unreachable payment confirmation as a local success")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()


@lru_cache
def get_settings() -> Settings:
    return settings
