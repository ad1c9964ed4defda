"""Test fixtures: an isolated store file and app per test.

Learn: Every test gets its own tmp_path, so each one starts from an
empty db.json and nothing leaks between tests. bcrypt runs with the
minimum work factor to keep the suite fast.

httpx's ASGITransport does not run the app lifespan, so the app
fixture loads the store itself, the same way lifespan does at startup.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from usergate.auth.jwt import TokenManager
from usergate.config import Settings
from usergate.db.store import UserStore
from usergate.main import create_app

TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef"


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        jwt_secret=TEST_SECRET,
        store_path=str(tmp_path / "db.json"),
        bcrypt_rounds=4,
    )


@pytest.fixture()
def tokens(settings):
    return TokenManager(settings)


@pytest_asyncio.fixture()
async def store(settings):
    user_store = UserStore(settings.store_path)
    await user_store.load()
    return user_store


@pytest_asyncio.fixture()
async def app(settings):
    application = create_app(settings)
    await application.state.store.load()
    return application


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def make_user(client):
    """Register + log in a user over HTTP.

    Returns a dict with the user's fields, its id, token and ready-made
    Authorization headers.
    """

    async def _make(
        account: str | None = None,
        password: str = "password_123",
        name: str = "Test User",
        mail: str | None = None,
        head: str | None = None,
    ) -> dict:
        account = account or f"user-{uuid.uuid4().hex[:8]}"
        mail = mail or f"{account}@example.com"
        r = await client.post(
            "/api/users",
            json={
                "account": account,
                "password": password,
                "name": name,
                "mail": mail,
                "head": head,
            },
        )
        assert r.status_code == 201, r.text
        user_id = r.json()["id"]

        r = await client.post(
            "/api/users/login",
            json={"account": account, "password": password},
        )
        assert r.status_code == 200, r.text
        token = r.json()["token"]

        return {
            "id": user_id,
            "account": account,
            "password": password,
            "name": name,
            "mail": mail,
            "head": head,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make
