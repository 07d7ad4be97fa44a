"""
Pytest fixtures for BoardShelf tests.

Each test gets its own in-memory SQLite database. Service tests talk to it
through `data` (one session); API tests go through `client`. A single test
should use one or the other: both share the one underlying SQLite connection.
"""
import httpx
import pytest

from boardshelf.config import Settings
from boardshelf.database import create_tables
from boardshelf.main import create_app
from boardshelf.models.game import Game
from boardshelf.services.data_access import DataAccess
from boardshelf.services.resolver import EntityResolver
from boardshelf.services.wishlist import WishlistManager


@pytest.fixture
def settings():
    """In-memory database, no startup retries"""
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        DB_MAX_RETRIES=1,
        DB_RETRY_BACKOFF=0,
        DB_QUERY_TIMEOUT=5,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
async def app(settings):
    app = create_app(settings)
    await create_tables(app.state.monitor.engine)
    yield app
    await app.state.monitor.engine.dispose()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(app):
    async with app.state.session_factory() as session:
        yield session


@pytest.fixture
def data(db_session, settings):
    return DataAccess(db_session, timeout=settings.DB_QUERY_TIMEOUT)


@pytest.fixture
def wishlist_manager(data):
    return WishlistManager(data)


@pytest.fixture
def resolver(data):
    return EntityResolver(data)


@pytest.fixture
def make_game(db_session):
    """Insert a game directly and return it"""

    async def _make_game(title="Catan", is_owned=False, **fields):
        game = Game(title=title, is_owned=is_owned, **fields)
        db_session.add(game)
        await db_session.commit()
        return game

    return _make_game


@pytest.fixture
def create_game(client):
    """Create a game through the API and return its JSON"""

    async def _create_game(**body):
        body.setdefault("title", "Catan")
        response = await client.post("/api/games", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _create_game
