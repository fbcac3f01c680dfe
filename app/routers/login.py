from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import Settings
from app.database import get_db
from app.dependencies import get_settings
from app.schemas import LoginRequest, TokenResponse
from app.services import login_service

router = APIRouter(prefix="/api/login", tags=["login"])

@router.post("", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await login_service.login(db, data, settings)
