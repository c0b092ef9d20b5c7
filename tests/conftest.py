import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Test settings; must be set before anonbox.core.config is imported
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGODB_DB_NAME", "anonbox_test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-min-32-characters-long")
os.environ["SMTP_HOST"] = ""


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[None, None]:
    """Fresh in-memory MongoDB bound to Beanie for one test."""
    from mongomock_motor import AsyncMongoMockClient

    from anonbox.db.init import init_db, reset_db
    reset_db()
    await init_db(client=AsyncMongoMockClient())
    yield
    reset_db()


@pytest_asyncio.fixture
async def client(db) -> AsyncGenerator[AsyncClient, None]:
    from anonbox.main import app
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def make_user(db):
    """Factory: insert a user directly, skipping sign-up."""
    from anonbox.core.security import hash_password
    from anonbox.models.user import User

    async def _make(
        username: str = "alice",
        email: str | None = None,
        password: str = "secret1",
        is_verified: bool = True,
        **fields,
    ) -> User:
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            password_hash=hash_password(password),
            is_verified=is_verified,
            **fields,
        )
        await user.insert()
        return user

    return _make


@pytest.fixture
def login(client: AsyncClient):
    """Attach a valid session cookie for user to the test client."""
    from anonbox.core.security import create_session_cookie
    from anonbox.deps import SESSION_COOKIE_NAME

    def _login(user) -> None:
        client.cookies.set(
            SESSION_COOKIE_NAME,
            create_session_cookie({"user_id": str(user.id), "username": user.username}),
        )

    return _login
