"""
Login service: exchanges a username/password pair for a signed token.

bcrypt runs whether or not the username exists (against ``DUMMY_HASH``
for unknown users) and both failure cases raise the same error.
"""
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.errors import AuthenticationError
from app.schemas import LoginRequest, TokenResponse
from app.security import DUMMY_HASH, create_access_token, verify_password
from app.services.user_service import get_user_by_username

INVALID_LOGIN = "invalid username or password"


async def login(db: AsyncSession, data: LoginRequest, settings: Settings) -> TokenResponse:
    user = await get_user_by_username(db, data.username)
    password_ok = verify_password(data.password, user.password_hash if user else DUMMY_HASH)
    if user is None or not password_ok:
        raise AuthenticationError(INVALID_LOGIN)

    token = create_access_token(
        user.id,
        user.username,
        settings.SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return TokenResponse(token=token, username=user.username, name=user.name)
