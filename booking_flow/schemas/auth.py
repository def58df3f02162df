from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    phone: str = Field(min_length=10, max_length=10)
    password: str


class RegisterRequest(BaseModel):
    first_name: str
    last_name: str
    phone: str = Field(min_length=10, max_length=10)
    password: str = Field(min_length=6)


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: int
    first_name: str
    last_name: str
    phone: Optional[str] = None
    role: str = "customer"


class AuthResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user: UserProfile
    token: str
