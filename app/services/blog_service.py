"""
Blog service: the List / Create / Update / Delete lifecycle.

Design notes
------------
- Mutations that need an identity receive already-verified
  ``TokenClaims``; the user row is re-loaded so a token for a removed
  user is rejected.
- Ownership is enforced by ``app.permissions.ensure_owner`` on delete and
  on editorial updates (title, url, author).  ``likes`` may be changed
  by anyone.
- A user's blog list is derived from ``Blog.user_id``, so creating a blog
  is a single insert inside the request transaction; there is no second
  write that could leave the two sides inconsistent.
- Updates are merged onto the stored record and the result is
  re-validated against ``BlogBase`` before anything is written.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency.
- The list view is cached in Redis.  Every write drops it right away and
  again after the request transaction commits (``mark_blogs_changed``),
  so a list read racing the commit cannot leave stale rows cached.
"""
import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.cache import BLOG_LIST_KEY, cache
from app.config import settings
from app.database import mark_blogs_changed
from app.errors import AuthenticationError, NotFoundError, ValidationError
from app.models import Blog, User
from app.permissions import ensure_owner
from app.schemas import EDITORIAL_FIELDS, BlogBase, BlogCreate, BlogUpdate, TokenClaims
from app.services.user_service import get_user_by_id

logger = logging.getLogger(__name__)

BLOG_NOT_FOUND = "there is no blog for the given id"


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _blog_to_dict(blog: Blog) -> dict:
    return {
        "id": blog.id,
        "title": blog.title,
        "author": blog.author,
        "url": blog.url,
        "likes": blog.likes,
        "user_id": blog.user_id,
    }


def _blog_with_owner_to_dict(blog: Blog) -> dict:
    """List view: the blog plus its owner reduced to the id alone."""
    data = _blog_to_dict(blog)
    data["user"] = {"id": blog.owner.id}
    return data


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

async def _get_identity_user(db: AsyncSession, claims: TokenClaims) -> User:
    user = await get_user_by_id(db, claims.id)
    if user is None:
        logger.warning("Verified token references missing user id=%s", claims.id)
        raise AuthenticationError()
    return user


async def _get_blog_or_404(db: AsyncSession, blog_id: int) -> Blog:
    result = await db.execute(select(Blog).where(Blog.id == blog_id))
    blog = result.scalar_one_or_none()
    if blog is None:
        raise NotFoundError(BLOG_NOT_FOUND)
    return blog


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def list_blogs(db: AsyncSession) -> list[dict]:
    """Return every blog, oldest first, each with its owner projection."""
    cached = await cache.get(BLOG_LIST_KEY)
    if cached is not None:
        return cached

    q = (
        select(Blog)
        .options(joinedload(Blog.owner))
        .order_by(Blog.id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(q)
    blogs = [_blog_with_owner_to_dict(b) for b in result.unique().scalars().all()]

    await cache.set(BLOG_LIST_KEY, blogs, ttl=settings.CACHE_TTL_LIST)
    return blogs


async def create_blog(db: AsyncSession, claims: TokenClaims, data: BlogCreate) -> dict:
    """Create a blog owned by the user identified by *claims*."""
    user = await _get_identity_user(db, claims)

    blog = Blog(
        title=data.title,
        url=data.url,
        author=data.author,
        likes=data.likes,
        user_id=user.id,
    )
    db.add(blog)
    await db.flush()

    await cache.invalidate_blogs()
    mark_blogs_changed(db)
    logger.info("User %s created blog %s", user.id, blog.id)
    return _blog_to_dict(blog)


async def update_blog(
    db: AsyncSession,
    blog_id: int,
    data: BlogUpdate,
    claims: TokenClaims | None = None,
) -> dict:
    """
    Merge the fields set in *data* onto the blog and return the result.

    Raises ``NotFoundError`` for an unknown id, ``AuthenticationError`` /
    ``AuthorizationError`` when editorial fields are changed without the
    owner's credential, and ``ValidationError`` when the merged record is
    invalid.
    """
    blog = await _get_blog_or_404(db, blog_id)

    changes = data.model_dump(exclude_unset=True)
    if EDITORIAL_FIELDS & changes.keys():
        if claims is None:
            raise AuthenticationError()
        ensure_owner(claims, blog)

    merged = {field: getattr(blog, field) for field in BlogBase.model_fields}
    merged.update(changes)
    try:
        validated = BlogBase.model_validate(merged)
    except PydanticValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise ValidationError(f"invalid value for {fields}")

    for field in changes:
        setattr(blog, field, getattr(validated, field))

    await db.flush()
    await cache.invalidate_blogs()
    mark_blogs_changed(db)
    return _blog_to_dict(blog)


async def delete_blog(db: AsyncSession, claims: TokenClaims, blog_id: int) -> None:
    """Delete the blog; only its owner may do so."""
    user = await _get_identity_user(db, claims)
    blog = await _get_blog_or_404(db, blog_id)
    ensure_owner(claims, blog)

    await db.delete(blog)
    await db.flush()
    await cache.invalidate_blogs()
    mark_blogs_changed(db)
    logger.info("User %s deleted blog %s", user.id, blog_id)
