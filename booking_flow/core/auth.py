import logging
from typing import Optional
from fastapi import Depends

from booking_flow.clients.backend import BackendClient, get_backend
from booking_flow.core.exceptions import BackendResponseError, BackendUnavailableError, NotAuthenticatedError
from booking_flow.schemas.auth import UserProfile

logger = logging.getLogger(__name__)


class AuthContext:
    """
    The caller's identity for one request. ``load`` validates the bearer token
    against the backend profile endpoint; a token that fails validation is
    dropped rather than trusted.
    """

    def __init__(self, backend: BackendClient, token: Optional[str] = None):
        self.backend = backend.with_token(token)
        self.token = token
        self.user: Optional[UserProfile] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    async def load(self) -> Optional[UserProfile]:
        if not self.token:
            self.user = None
            return None
        try:
            self.user = await self.backend.get_profile()
        except (BackendUnavailableError, BackendResponseError) as e:
            logger.info(f"Discarding bearer token that failed profile validation: {e}")
            self.logout()
        return self.user

    def logout(self):
        self.token = None
        self.user = None

    def require_user(self) -> UserProfile:
        if self.user is None:
            raise NotAuthenticatedError()
        return self.user


async def get_auth_context(backend: BackendClient = Depends(get_backend)) -> AuthContext:
    context = AuthContext(backend, backend.token)
    await context.load()
    return context


async def require_user(auth: AuthContext = Depends(get_auth_context)) -> UserProfile:
    return auth.require_user()
