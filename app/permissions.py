"""
Ownership guard for blog mutations.

A blog may be modified or deleted only by the user whose id is stored on
it.  The check compares the verified token identity against
``Blog.user_id``; it rejects when they differ and allows when they match.
"""
from app.errors import AuthorizationError
from app.models import Blog
from app.schemas import TokenClaims


def is_owner(claims: TokenClaims, blog: Blog) -> bool:
    return claims.id == blog.user_id


def ensure_owner(claims: TokenClaims, blog: Blog) -> None:
    """Raise ``AuthorizationError`` unless *claims* identify the blog's owner."""
    if not is_owner(claims, blog):
        raise AuthorizationError()
