from fastapi import APIRouter, Depends

from booking_flow.core.config import Settings, get_settings
from booking_flow.schemas.envelope import Envelope

router = APIRouter()


@router.get("/health", summary="Basic health check endpoint", response_model=Envelope[dict])
async def health_check(config: Settings = Depends(get_settings)):
    return Envelope(success=True, data={"status": "ok", "env": config.ENV, "version": config.PROJECT_VERSION})
