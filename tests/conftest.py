"""
Test infrastructure for the Blog API.

Strategy
--------
- SQLite in-memory via aiosqlite; StaticPool makes every session share
  the one connection an in-memory database lives on.
- The app's get_db dependency is overridden so every request uses the
  test session factory.
- Tables are created before each test and dropped after it.
- Redis is disabled by setting cache._redis = None; the CacheManager
  treats that as a permanent miss, so list reads always hit the database.
- Users for blog tests are inserted directly and given tokens signed with
  the application's secret, which keeps bcrypt out of most tests.  The
  login endpoint has its own tests.
"""
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.database import Base, commit, get_db
from app.main import app
from app.cache import cache
from app.middleware import install_query_counter
from app.models import User
from app.security import hash_password

from helpers import TEST_PASSWORD, bearer, make_token

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)

TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


# ---------------------------------------------------------------------------
# Dependency override
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await commit(session)
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    cache._redis = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def make_user():
    """
    Factory inserting a user and returning ``(user, auth_headers)``.

    The password of every user created this way is ``TEST_PASSWORD``.
    """

    async def _make(username: str = "testuser", name: str | None = "Test User"):
        async with async_session_test() as session:
            user = User(username=username, name=name, password_hash=TEST_PASSWORD_HASH)
            session.add(user)
            await session.commit()
        return user, bearer(make_token(user.id, user.username))

    return _make


@pytest_asyncio.fixture
async def owner(make_user):
    return await make_user("owner")


@pytest_asyncio.fixture
async def intruder(make_user):
    return await make_user("intruder")


@pytest_asyncio.fixture
async def initial_blogs(async_client: AsyncClient, owner) -> list[dict]:
    """Two blogs owned by ``owner``, created through the API."""
    _, headers = owner
    created = []
    for blog in (
        {"title": "React patterns", "author": "Michael Chan", "url": "https://reactpatterns.com/", "likes": 7},
        {"title": "Go To Statement Considered Harmful", "author": "Edsger W. Dijkstra",
         "url": "http://www.u.arizona.edu/~rubinson/copyright_violations/Go_To_Considered_Harmful.html", "likes": 5},
    ):
        resp = await async_client.post("/api/blogs", json=blog, headers=headers)
        assert resp.status_code == 201
        created.append(resp.json())
    return created

