"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from salestrainer.api.deps import get_generative_client
from salestrainer.core.config import Settings
from salestrainer.core.db import Base, get_db
from salestrainer.main import create_app

# Import all models
from salestrainer.models.message import Message  # noqa: F401
from salestrainer.models.setting import AppSetting  # noqa: F401
from salestrainer.models.training_session import TrainingSession  # noqa: F401
from tests.factories import FakeGenerativeClient

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """In-memory SQLite engine with the schema created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine):
    """Create fresh DB session for each test."""
    async_session_maker = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing every file location at a temporary directory."""
    data_dir = tmp_path / "data"
    return Settings(
        openai_api_key="test-key",
        data_dir=data_dir,
        audio_dir=data_dir / "audio",
        static_dir=tmp_path / "public",
        environment="test",
    )


@pytest.fixture
def fake_llm() -> FakeGenerativeClient:
    return FakeGenerativeClient()


@pytest_asyncio.fixture
async def client(db_session, settings, fake_llm):
    """Create async test client with overridden DB and generative dependencies."""
    app = create_app(settings)

    async def override_get_db():
        yield db_session

    def override_get_generative_client():
        return fake_llm

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generative_client] = override_get_generative_client

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        ac.fake_llm = fake_llm
        ac.db_session = db_session
        ac.app_state = app.state
        yield ac


@pytest_asyncio.fixture
async def unconfigured_client(db_session, settings):
    """Client whose settings carry no OPENAI_API_KEY (generative dependency not overridden)."""
    app = create_app(
        Settings(
            openai_api_key=None,
            data_dir=settings.data_dir,
            audio_dir=settings.audio_dir,
            static_dir=settings.static_dir,
        )
    )

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        ac.db_session = db_session
        yield ac
