# app/api/v1/endpoints/blog.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from core.constants import ADMIN_ONLY, STAFF_ROLES
from core.database import get_db
from core.permissions import require_roles
from models.blog import BlogStatus
from models.user import User
from schemas.blog import BlogCreate, BlogUpdate, BlogStatusUpdate, BlogRead
from services.blog_service import BlogService

router = APIRouter()


# ---------- public ----------

@router.get("/published", response_model=List[BlogRead])
async def list_published_blogs(
        limit: int = Query(0, ge=0, le=100),
        db: AsyncSession = Depends(get_db)
):
    service = BlogService(db)
    return await service.list_blogs(BlogStatus.PUBLISHED, limit)


@router.get("/public/{blog_id}", response_model=BlogRead)
async def get_published_blog(
        blog_id: UUID,
        db: AsyncSession = Depends(get_db)
):
    service = BlogService(db)
    return await service.get_published_blog(str(blog_id))


# ---------- content management ----------

@router.post("", response_model=BlogRead, status_code=status.HTTP_201_CREATED)
async def create_blog(
        blog_data: BlogCreate,
        current_user: User = Depends(require_roles(*STAFF_ROLES)),
        db: AsyncSession = Depends(get_db)
):
    """Create a draft (admin / volunteer)"""
    service = BlogService(db)
    return await service.create_blog(blog_data, current_user)


@router.get("", response_model=List[BlogRead])
async def list_blogs(
        status_filter: Optional[BlogStatus] = Query(None, alias="status"),
        current_user: User = Depends(require_roles(*STAFF_ROLES)),
        db: AsyncSession = Depends(get_db)
):
    service = BlogService(db)
    return await service.list_blogs(status_filter)


@router.get("/{blog_id}", response_model=BlogRead)
async def get_blog(
        blog_id: UUID,
        current_user: User = Depends(require_roles(*STAFF_ROLES)),
        db: AsyncSession = Depends(get_db)
):
    service = BlogService(db)
    return await service.get_blog(str(blog_id))


@router.patch("/{blog_id}", response_model=BlogRead)
async def update_blog(
        blog_id: UUID,
        update_data: BlogUpdate,
        current_user: User = Depends(require_roles(*STAFF_ROLES)),
        db: AsyncSession = Depends(get_db)
):
    service = BlogService(db)
    return await service.update_blog(str(blog_id), update_data)


@router.patch("/{blog_id}/status", response_model=BlogRead)
async def update_blog_status(
        blog_id: UUID,
        status_data: BlogStatusUpdate,
        current_user: User = Depends(require_roles(*ADMIN_ONLY)),
        db: AsyncSession = Depends(get_db)
):
    """Publish or unpublish (admin only)"""
    service = BlogService(db)
    return await service.update_blog_status(str(blog_id), status_data.status, current_user)


@router.delete("/{blog_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_blog(
        blog_id: UUID,
        current_user: User = Depends(require_roles(*ADMIN_ONLY)),
        db: AsyncSession = Depends(get_db)
):
    service = BlogService(db)
    await service.delete_blog(str(blog_id), current_user)
