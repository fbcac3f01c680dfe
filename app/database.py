from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from app.cache import cache
from app.config import settings
from app.middleware import install_query_counter

BLOGS_CHANGED = "blogs_changed"

# Module-level engine variable allows tests to override with a test engine.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

# Register the per-request SQL query counter on the production engine.
install_query_counter(engine)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def init_models() -> None:
    """Create any missing tables.  Existing tables are left untouched."""
    # Models must be imported so their tables are registered on Base.metadata.
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def mark_blogs_changed(session: AsyncSession) -> None:
    """Ask for the cached blog list to be dropped once *session* commits."""
    session.info[BLOGS_CHANGED] = True


async def commit(session: AsyncSession) -> None:
    """
    Commit *session*, then drop the cached blog list if blogs changed.

    The list must be dropped after the commit: a list read that runs
    between the write and the commit still sees the old rows and may have
    cached them.
    """
    await session.commit()
    if session.info.pop(BLOGS_CHANGED, False):
        await cache.invalidate_blogs()


async def get_db():
    """
    Yield one session per request.

    Everything a handler writes commits together when the handler
    returns, or rolls back together when it raises.
    """
    async with async_session() as session:
        try:
            yield session
            await commit(session)
        except Exception:
            await session.rollback()
            raise
