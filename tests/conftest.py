"""
Whitespace - Test Configuration and Fixtures
"""
import os
import json
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set testing environment
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///:memory:'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['GEMINI_API_KEY'] = ''

from app.main import app
from app.database import Base, enable_sqlite_foreign_keys, get_db
from app.ai.provider import BaseProvider, get_ai_provider
from app.models.user import User
from app.core.security import create_access_token

TEST_DATABASE_URL = 'sqlite+aiosqlite:///:memory:'


class FakeProvider(BaseProvider):
    """Canned AI provider; answers with whatever was queued for a prompt keyword"""

    def __init__(self):
        self.prompts = []
        self.responses = {}
        self.fail_with = None

    @property
    def name(self) -> str:
        return 'fake'

    def set_response(self, keyword: str, payload):
        self.responses[keyword] = payload if isinstance(payload, str) else json.dumps(payload)

    async def generate(self, prompt: str, model: str | None = None) -> dict:
        self.prompts.append(prompt)
        if self.fail_with:
            return {'text': None, 'provider': self.name, 'model': 'fake', 'status': 'failed', 'error': self.fail_with}
        for keyword, text in self.responses.items():
            if keyword.lower() in prompt.lower():
                return {'text': text, 'provider': self.name, 'model': 'fake', 'status': 'success', 'error': None}
        return {'text': None, 'provider': self.name, 'model': 'fake', 'status': 'failed', 'error': 'No canned response'}


@pytest.fixture(scope='function')
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope='function')
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def second_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Another request's session on the same database"""
    session_factory = async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
async def client(db_session: AsyncSession, fake_provider: FakeProvider) -> AsyncGenerator[AsyncClient, None]:
    """Test client with database and AI provider overrides"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_provider] = lambda: fake_provider

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_user(db: AsyncSession, name: str, pin: str, is_admin: bool = False, email: str | None = None) -> User:
    user = User(name=name, email=email, pin=pin, pin_first_two=pin[:2], is_admin=is_admin)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
def user_factory(db_session: AsyncSession):
    async def factory(name: str, pin: str, is_admin: bool = False, email: str | None = None) -> User:
        return await make_user(db_session, name, pin, is_admin=is_admin, email=email)
    return factory


def headers_for(user: User) -> dict:
    token = create_access_token({'sub': str(user.id)})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await make_user(db_session, 'Admin', '9999', is_admin=True, email='admin@example.com')


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await make_user(db_session, 'Bob', '1234', email='bob@example.com')


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await make_user(db_session, 'alice', '5678')


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return headers_for(admin_user)


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    return headers_for(test_user)


@pytest.fixture
def other_headers(other_user: User) -> dict:
    return headers_for(other_user)
