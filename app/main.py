import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.cache import cache
from app.database import init_models
from app.errors import register_exception_handlers
from app.middleware import TimingMiddleware
from app.routers import blogs, login, metrics, users
from app.config import settings
from app.security import TokenVerifier

VERSION = "1.0.0"

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.CREATE_SCHEMA_ON_STARTUP:
        await init_models()
    await cache.connect(settings.REDIS_URL)
    logger.info("Blog API started (env=%s)", settings.APP_ENV)
    yield
    # Shutdown
    await cache.disconnect()

app = FastAPI(
    title="Blog API",
    description="Multi-user blog publishing backend with token-verified ownership",
    version=VERSION,
    lifespan=lifespan,
)

# Token verification receives its secret once, here at startup.
app.state.settings = settings
app.state.token_verifier = TokenVerifier(settings.SECRET_KEY, settings.JWT_ALGORITHM)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers
app.include_router(blogs.router)
app.include_router(users.router)
app.include_router(login.router)
app.include_router(metrics.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}
