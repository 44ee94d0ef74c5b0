"""
Word Count Tracker - Test Configuration and Fixtures
"""
import os
from dataclasses import dataclass
from datetime import date
from typing import AsyncGenerator

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set testing environment before the app reads its settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["INITIAL_MANAGER_PASSWORD"] = ""

from app.core.config import get_settings  # noqa: E402
from app.core.security import create_session_token  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import ROLE_MANAGER, ROLE_MEMBER  # noqa: E402
from app.schemas.forms import ProjectForm  # noqa: E402
from app.services.projects import create_project  # noqa: E402
from app.services.users import create_user  # noqa: E402

fake = Faker()

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "correct-horse-battery"


@dataclass
class Account:
    """Plain copy of a created user, safe to use after the session rolls back."""

    id: int
    username: str
    password: str
    role: str


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database and session for each test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Test client sharing the test session through a get_db override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: AsyncSession):
    async def _make(role: str = ROLE_MEMBER, password: str = TEST_PASSWORD) -> Account:
        username = fake.unique.user_name()
        user = await create_user(
            db_session,
            username=username,
            password=password,
            role=role,
            email=fake.email(),
            first_name=fake.first_name(),
            last_name=fake.last_name(),
        )
        await db_session.commit()
        return Account(id=user.id, username=username, password=password, role=role)

    return _make


@pytest.fixture
async def member(make_user) -> Account:
    return await make_user()


@pytest.fixture
async def other_member(make_user) -> Account:
    return await make_user()


@pytest.fixture
async def manager(make_user) -> Account:
    return await make_user(role=ROLE_MANAGER)


@pytest.fixture
def login(client: AsyncClient):
    """Attach a valid session cookie for the given account to the client"""
    def _login(account: Account) -> None:
        client.cookies.set(get_settings().session_cookie_name, create_session_token(account.id))

    return _login


@pytest.fixture
def make_project(db_session: AsyncSession):
    async def _make(owner: Account, **overrides) -> int:
        data = {
            "title": fake.sentence(nb_words=3).rstrip("."),
            "genre": "Fantasy",
            "target_words": 10000,
            "daily_goal": 500,
            "start_date": date(2025, 1, 1),
        }
        data.update(overrides)
        project = await create_project(db_session, owner.id, ProjectForm(**data))
        await db_session.commit()
        return project.id

    return _make
