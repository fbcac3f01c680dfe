"""
User service: registration and lookups for the User aggregate.

A user's blogs are never written from here.  ``User.blogs`` is derived
from ``blogs.user_id``, so listing it only needs a ``selectinload``.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError
from app.models import User
from app.schemas import UserCreate
from app.security import hash_password

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _user_to_dict(user: User, with_blogs: bool = True) -> dict:
    """Serialise a User.  The password hash is never included."""
    data = {
        "id": user.id,
        "username": user.username,
        "name": user.name,
        "blogs": [],
    }
    if with_blogs:
        data["blogs"] = [
            {
                "id": b.id,
                "title": b.title,
                "author": b.author,
                "url": b.url,
                "likes": b.likes,
            }
            for b in user.blogs
        ]
    return data


# ---------------------------------------------------------------------------
# Store access
# ---------------------------------------------------------------------------

async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_users(db: AsyncSession) -> list[dict]:
    """Return all users in registration order, each with its blogs."""
    q = (
        select(User)
        .options(selectinload(User.blogs))
        .order_by(User.id)
        # Users already in the session must get their blogs refreshed too.
        .execution_options(populate_existing=True)
    )
    result = await db.execute(q)
    return [_user_to_dict(u) for u in result.scalars().all()]


async def create_user(db: AsyncSession, data: UserCreate) -> dict:
    """
    Register a new user with a bcrypt-hashed password.

    Username uniqueness is checked up front and enforced again by the
    unique constraint, which catches concurrent registrations.
    """
    if await get_user_by_username(db, data.username) is not None:
        raise ConflictError("username must be unique")

    user = User(
        username=data.username,
        name=data.name,
        password_hash=hash_password(data.password),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        raise ConflictError("username must be unique")

    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return _user_to_dict(user, with_blogs=False)
