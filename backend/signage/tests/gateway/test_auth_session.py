import uuid
from datetime import datetime, timezone

import httpx
import pytest

from signage.gateway.client import GatewayError
from signage.gateway.session import AuthSession
from signage.tests.utils.gateway import FakeBackend, make_gateway

USER_ID = str(uuid.uuid4())
NOW = datetime.now(timezone.utc).isoformat()
ME = {
    "user": {
        "id": USER_ID,
        "email": "ops@example.com",
        "is_active": True,
        "is_superuser": False,
        "username": "ops",
        "full_name": None,
        "created_at": NOW,
    },
    "profile": {"id": USER_ID, "username": "ops", "full_name": None, "avatar_url": None, "created_at": NOW},
}


@pytest.fixture
def backend():
    backend = FakeBackend()
    backend.on("POST", "/auth/login", {"access_token": "jwt-token", "token_type": "bearer"})
    backend.on("GET", "/auth/me", ME)
    return backend


class TestAuthSession:
    async def test_sign_in_loads_user_and_profile(self, backend):
        gateway = make_gateway(backend)
        session = AuthSession(gateway)

        await session.sign_in("ops@example.com", "password123")

        assert session.token == "jwt-token"
        assert session.is_authenticated
        assert session.user.email == "ops@example.com"
        assert session.profile.username == "ops"
        assert backend.sent("GET", "/auth/me")[0].headers["Authorization"] == "Bearer jwt-token"
        await gateway.aclose()

    async def test_sign_in_rejected(self, backend):
        backend.on("POST", "/auth/login", httpx.Response(401, json={"detail": "Incorrect email or password"}))
        gateway = make_gateway(backend)
        session = AuthSession(gateway)

        with pytest.raises(GatewayError):
            await session.sign_in("ops@example.com", "wrong")

        assert not session.is_authenticated
        assert session.token is None
        await gateway.aclose()

    async def test_sign_out_clears_everything(self, backend):
        gateway = make_gateway(backend)
        session = AuthSession(gateway)
        await session.sign_in("ops@example.com", "password123")

        await session.sign_out()

        assert session.user is None
        assert session.profile is None
        assert session.token is None
        await gateway.aclose()

    async def test_load_user_failure_leaves_session_signed_out(self, backend):
        backend.on("GET", "/auth/me", httpx.Response(401, json={"detail": "Could not validate credentials"}))
        gateway = make_gateway(backend, token="expired")
        session = AuthSession(gateway)

        await session.load_user()

        assert session.user is None
        assert session.loading is False
        await gateway.aclose()

    async def test_load_user_without_token(self, backend):
        gateway = make_gateway(backend)
        session = AuthSession(gateway)

        await session.load_user()

        assert backend.requests == []
        await gateway.aclose()

    async def test_sign_up(self, backend):
        backend.on("POST", "/auth/signup", ME["user"])
        gateway = make_gateway(backend)

        user = await AuthSession(gateway).sign_up("ops@example.com", "password123", "ops")

        assert user.username == "ops"
        assert backend.json_sent("POST", "/auth/signup") == [
            {"email": "ops@example.com", "password": "password123", "username": "ops"}
        ]
        await gateway.aclose()
