from typing import Optional
from pydantic import BaseModel, ConfigDict


class Cinema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cinema_id: int
    cinema_name: str
    address: Optional[str] = None
    city: Optional[str] = None
    is_active: bool = True


class Theater(BaseModel):
    model_config = ConfigDict(extra="ignore")

    theater_id: int
    cinema_id: int
    theater_name: str
    total_seats: Optional[int] = None
    theater_type: Optional[str] = None
    is_active: bool = True
