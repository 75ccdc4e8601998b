"""
Shared fixtures: an app per test with its own in-memory database and secret.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from config.settings import Settings
from database.models import User
from database.session import init_models
from main import create_app

TEST_SECRET = "test-secret-not-for-production-0123456789"


def make_settings(**overrides) -> Settings:
    values = {
        "jwt_secret": TEST_SECRET,
        "database_url": "sqlite+aiosqlite:///:memory:",
        "bcrypt_rounds": 4,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    await init_models(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def count_users(app) -> int:
    async with app.state.session_factory() as session:
        result = await session.execute(select(func.count()).select_from(User))
        return result.scalar_one()
