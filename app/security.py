"""
Credential handling: bearer-token verification, token issuance and
password hashing.

JWT: python-jose, HS256 by default.  The signing secret is never read
from module state here; ``TokenVerifier`` receives it at construction
time (``app/main.py`` builds one from ``Settings`` at startup) and the
issuance helper takes it as an argument.

Passwords: bcrypt directly.  ``DUMMY_HASH`` lets the login path run a
full bcrypt check even for unknown usernames so response time does not
reveal which usernames exist.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import bcrypt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from app.errors import AuthenticationError
from app.schemas import TokenClaims

# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False


DUMMY_HASH: str = hash_password("blog-api-timing-dummy")


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


def create_access_token(
    user_id: int,
    username: str,
    secret: str,
    algorithm: str = "HS256",
    expires_delta: timedelta = timedelta(hours=1),
) -> str:
    """Sign a token whose ``id`` claim identifies *user_id*."""
    payload = {
        "sub": username,
        "id": user_id,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


class TokenVerifier:
    """
    Verifies bearer tokens against a shared secret.

    ``verify`` is pure: no I/O, no store lookups.  Every failure (empty
    token, bad structure, bad signature, expiry, missing ``id`` claim)
    raises the same ``AuthenticationError`` so clients cannot tell the
    causes apart.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        if not secret:
            raise ValueError("token verification secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm

    def verify(self, token: str | None) -> TokenClaims:
        if not token:
            raise AuthenticationError()
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError:
            raise AuthenticationError()
        try:
            return TokenClaims(id=payload.get("id"), username=payload.get("sub"))
        except PydanticValidationError:
            raise AuthenticationError()


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

# auto_error=False: a missing header must produce our generic 401 rather
# than Starlette's 403.
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.token_verifier


def get_optional_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> TokenClaims | None:
    """Claims for the request, or None when no bearer credential was sent.

    A credential that *is* sent but fails verification still raises.
    """
    if credentials is None:
        return None
    return verifier.verify(credentials.credentials)


def get_current_claims(
    claims: TokenClaims | None = Depends(get_optional_claims),
) -> TokenClaims:
    """Require a verified bearer credential."""
    if claims is None:
        raise AuthenticationError()
    return claims
