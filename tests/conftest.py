"""
Shared pytest fixtures.
Each test gets a fresh in-memory SQLite database; the generative backend is
always a fake, never OpenAI.
"""
import os

# Must be set before skillvision reads its settings
os.environ["TEST_MODE"] = "false"
os.environ["OPENAI_API_KEY"] = ""
os.environ["JWT_SECRET"] = ""
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SUBMIT_RATE_LIMIT"] = "1000/minute"
os.environ["LOG_TO_FILE"] = "false"

import pytest
import httpx
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine, AsyncSession
from sqlalchemy.pool import StaticPool

from factories import FakeGenerativeClient

from skillvision import models  # noqa: F401  registers tables
from skillvision.database import Base, get_db
from skillvision.main import app
from skillvision.services.generative_client import get_generative_client


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_generator():
    return FakeGenerativeClient()


@pytest.fixture
async def client(session_factory, fake_generator):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generative_client] = lambda: fake_generator

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def user_headers():
    return {"X-User-ID": "user_sara"}
