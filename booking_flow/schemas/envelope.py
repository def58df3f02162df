from typing import Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Wrapper used by every backend response and by this API's own responses."""
    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None


def failed(error: str) -> dict:
    return {"success": False, "error": error}
