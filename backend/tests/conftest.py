"""
Shared fixtures for the test suite.

Every test gets its own SQLite database file under ``tmp_path`` and an
application built from explicit settings, so no state leaks between tests.
"""

from collections.abc import AsyncIterator, Callable, Iterator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

import taskboard.models  # noqa: F401  (registers tables on the metadata)
from taskboard.core.config import Settings
from taskboard.core.security import TokenSigner
from taskboard.db.base import Base
from taskboard.db.session import create_engine, create_session_factory
from taskboard.main import create_app

TEST_SECRET = "test-secret"
DEFAULT_PASSWORD = "password123"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'taskboard.db'}",
        secret_key=TEST_SECRET,
    )


@pytest.fixture
def signer(settings: Settings) -> TokenSigner:
    return TokenSigner(settings.secret_key, max_age=settings.access_token_max_age)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """TestClient that runs the application lifespan (table creation, engine disposal)."""
    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture
async def session(settings: Settings) -> AsyncIterator[AsyncSession]:
    engine = create_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = create_session_factory(engine)
    async with factory() as db:
        yield db
    await engine.dispose()


@pytest.fixture
def register(client: TestClient) -> Callable[..., dict]:
    def _register(email: str, name: str = "Test User", password: str = DEFAULT_PASSWORD, role: str = "user") -> dict:
        resp = client.post(
            "/auth/register",
            json={"email": email, "name": name, "password": password, "role": role},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _register


@pytest.fixture
def auth_headers(client: TestClient) -> Callable[..., dict[str, str]]:
    def _login(email: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
        resp = client.post("/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _login
