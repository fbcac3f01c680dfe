"""Request helpers shared by the endpoint tests."""
from datetime import timedelta

from httpx import AsyncClient

from app.config import settings
from app.security import create_access_token

EXPIRED = {"expires_delta": timedelta(seconds=-10)}
TEST_PASSWORD = "averysecurepassword1!"


def make_token(user_id: int, username: str = "someone", **kwargs) -> str:
    """Sign a token with the application's own secret."""
    return create_access_token(
        user_id, username, settings.SECRET_KEY, settings.JWT_ALGORITHM, **kwargs
    )


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def list_blogs(client: AsyncClient) -> list[dict]:
    resp = await client.get("/api/blogs")
    assert resp.status_code == 200
    return resp.json()
