from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.models import Blog, User
from app.schemas import MetricsResponse
from app.cache import cache

router = APIRouter(prefix="/api/metrics", tags=["metrics"])

@router.get("", response_model=MetricsResponse)
async def get_metrics(db: AsyncSession = Depends(get_db)):

    total_blogs = (await db.execute(select(func.count()).select_from(Blog))).scalar_one()

    total_users = (await db.execute(select(func.count()).select_from(User))).scalar_one()

    total_likes = (await db.execute(select(func.coalesce(func.sum(Blog.likes), 0)))).scalar_one()

    avg_likes = total_likes / total_blogs if total_blogs > 0 else 0

    return MetricsResponse(
        total_blogs=total_blogs,
        total_users=total_users,
        total_likes=total_likes,
        avg_likes_per_blog=round(avg_likes, 2),
        cache_info=cache.stats,
    )
