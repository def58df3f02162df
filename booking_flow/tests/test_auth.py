import pytest

from booking_flow.clients.backend import BackendClient, bearer_token
from booking_flow.core.auth import AuthContext
from booking_flow.core.exceptions import NotAuthenticatedError


def test_bearer_token_parsing():
    assert bearer_token("Bearer abc") == "abc"
    assert bearer_token("bearer  abc ") == "abc"
    assert bearer_token("Basic abc") is None
    assert bearer_token("Bearer ") is None
    assert bearer_token(None) is None


@pytest.mark.asyncio
async def test_valid_token_loads_the_user(http_client, seeded_backend):
    auth = AuthContext(BackendClient(http_client), "good-token")

    user = await auth.load()

    assert auth.is_authenticated
    assert user.user_id == 9
    assert auth.require_user() is user
    request = seeded_backend.calls_to("GET", "/auth/profile")[0]
    assert request.headers["Authorization"] == "Bearer good-token"


@pytest.mark.asyncio
async def test_rejected_token_is_discarded(http_client, fake_backend):
    fake_backend.reply("GET", "/auth/profile", None, status=401, success=False, error="invalid token")
    auth = AuthContext(BackendClient(http_client), "stale-token")

    assert await auth.load() is None
    assert auth.token is None
    with pytest.raises(NotAuthenticatedError):
        auth.require_user()


@pytest.mark.asyncio
async def test_no_token_skips_the_backend(http_client, fake_backend):
    auth = AuthContext(BackendClient(http_client))

    assert await auth.load() is None
    assert fake_backend.calls == []


@pytest.mark.asyncio
async def test_logout_clears_identity(http_client, seeded_backend):
    auth = AuthContext(BackendClient(http_client), "good-token")
    await auth.load()

    auth.logout()

    assert not auth.is_authenticated
    assert auth.token is None
