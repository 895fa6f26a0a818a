"""Common test fixtures for the notes API and editor."""
from typing import Dict

import httpx
import pytest

from notekeeper.config.database import Database
from notekeeper.main import create_app
from notekeeper.utils.security import create_access_token

OWNER = "user_owner"
OTHER = "user_other"


@pytest.fixture(params=["asyncio"])
def anyio_backend(request):
    """Restrict anyio tests to asyncio only (trio is not installed)."""
    return request.param


@pytest.fixture
async def database(tmp_path):
    """A migrated SQLite database in a temp directory."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def app(database):
    # ASGITransport does not run the lifespan; the database fixture creates the tables
    return create_app(database)


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


def auth_headers(user_id: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def owner_headers():
    return auth_headers(OWNER)


@pytest.fixture
def other_headers():
    return auth_headers(OTHER)
