from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.schemas import BlogCreate, BlogResponse, BlogUpdate, BlogWithOwner, TokenClaims
from app.security import get_current_claims, get_optional_claims
from app.services import blog_service

router = APIRouter(prefix="/api/blogs", tags=["blogs"])

@router.get("", response_model=list[BlogWithOwner])
async def list_blogs(db: AsyncSession = Depends(get_db)):
    return await blog_service.list_blogs(db)

@router.post("", status_code=201, response_model=BlogResponse)
async def create_blog(
    data: BlogCreate,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    return await blog_service.create_blog(db, claims, data)

@router.put("/{blog_id}", response_model=BlogResponse)
async def update_blog(
    blog_id: int,
    data: BlogUpdate | None = None,
    claims: TokenClaims | None = Depends(get_optional_claims),
    db: AsyncSession = Depends(get_db),
):
    return await blog_service.update_blog(db, blog_id, data or BlogUpdate(), claims)

@router.delete("/{blog_id}", status_code=204, response_class=Response)
async def delete_blog(
    blog_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    await blog_service.delete_blog(db, claims, blog_id)
