"""API test fixtures — FastAPI test client and signed session cookies.

Invariants:
    - Every test starts with an empty profile store
    - login() signs a real session token with the app's own settings, so the
      request context resolves it exactly as in production

Design Decisions:
    - httpx AsyncClient over ASGITransport: exercises the real dependency and
      error-handler wiring without a server
"""

import pytest
from httpx import ASGITransport, AsyncClient

from chopshop.api.routes import profiles as profiles_module
from chopshop.config import get_settings
from chopshop.core.capabilities import Principal
from chopshop.infrastructure.session_token import SessionTokenCodec
from chopshop.main import app
from chopshop.schemas.profile import Address, AuditStamp, Profile


@pytest.fixture
async def client():
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def login(client):
    """Install a session cookie for the given principal; returns the XSRF token."""
    settings = get_settings()
    codec = SessionTokenCodec.from_settings(settings)

    def _login(username: str | None = None, user_id: int = 0, rights: list[str] | None = None) -> str:
        principal = None
        if username is not None:
            principal = Principal(username=username, user_id=user_id, rights=rights or [])
        claims = codec.new_claims(principal)
        client.cookies.set(settings.token_cookie_name, codec.issue(claims))
        return claims["jti"]

    return _login


@pytest.fixture(autouse=True)
def profile_store():
    profiles_module._profiles.clear()
    yield profiles_module._profiles
    profiles_module._profiles.clear()


@pytest.fixture
def seed_profile(profile_store):
    profile = Profile(
        audit=AuditStamp(created_by="system"),
        id=1,
        display_name="Ada",
        email="ada@example.com",
        roles=["member"],
        address=Address(street="Main St", city="London", country_code="GB", verified=True),
    )
    profile_store[1] = profile
    return profile
