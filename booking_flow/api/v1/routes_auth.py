from fastapi import APIRouter, Depends

from booking_flow.clients.backend import BackendClient, get_backend
from booking_flow.core.auth import require_user
from booking_flow.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserProfile
from booking_flow.schemas.envelope import Envelope

router = APIRouter(
    prefix="/auth"
)


@router.post("/login", response_model=Envelope[AuthResponse])
async def login(data: LoginRequest, backend: BackendClient = Depends(get_backend)):
    return Envelope(success=True, data=await backend.login(data), message="Login successful")


@router.post("/register", response_model=Envelope[AuthResponse], status_code=201)
async def register(data: RegisterRequest, backend: BackendClient = Depends(get_backend)):
    return Envelope(success=True, data=await backend.register(data), message="Registration successful")


@router.get("/profile", response_model=Envelope[UserProfile])
async def profile(user: UserProfile = Depends(require_user)):
    return Envelope(success=True, data=user)
