from fastapi import Request

from app.config import Settings


def get_settings(request: Request) -> Settings:
    """
    The ``Settings`` instance the application was built with.

    Stored on ``app.state`` at startup so tests and alternative
    deployments can swap it without touching module globals.
    """
    return request.app.state.settings
